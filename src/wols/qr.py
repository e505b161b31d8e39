"""QR code generation for specimen labels.

This module only decides what goes into the symbol: the full canonical JSON
("embedded") or the compact URL ("compact"). Symbol construction and
rendering are delegated to the qrcode package (Pillow for PNG output).
"""

from __future__ import annotations

import asyncio
import base64
import io
import logging
from typing import Literal

import qrcode
from pydantic import BaseModel, Field
from qrcode.constants import ERROR_CORRECT_H, ERROR_CORRECT_L, ERROR_CORRECT_M, ERROR_CORRECT_Q
from qrcode.exceptions import DataOverflowError
from qrcode.image.pil import PilImage
from qrcode.image.svg import SvgPathImage

from wols.compact_url import to_compact_url
from wols.errors import WolsError, WolsErrorCode
from wols.models import Specimen
from wols.serializer import serialize_specimen

logger = logging.getLogger(__name__)

QRFormat = Literal["embedded", "compact"]

ERROR_CORRECTION_LEVELS: dict[str, int] = {
    "L": ERROR_CORRECT_L,  # ~7% recovery
    "M": ERROR_CORRECT_M,  # ~15%
    "Q": ERROR_CORRECT_Q,  # ~25%
    "H": ERROR_CORRECT_H,  # ~30%
}


class QRCodeOptions(BaseModel):
    """Rendering options passed through to the QR encoder.

    dark colours the modules and light the background, in PNG and SVG output
    alike.

    Examples
    --------
    >>> QRCodeOptions().error_correction
    'M'
    >>> QRCodeOptions(format="compact", size=150).size
    150
    """

    size: int = Field(300, gt=0, description="Target image width in pixels")
    error_correction: Literal["L", "M", "Q", "H"] = Field("M", description="Error correction level")
    format: QRFormat = Field("embedded", description="Payload: full JSON or compact URL")
    margin: int = Field(1, ge=0, description="Quiet zone width in modules")
    dark: str = Field("#000000", description="Module color")
    light: str = Field("#ffffff", description="Background color")


def generate_qr_content(specimen: Specimen, fmt: QRFormat = "embedded") -> str:
    """Payload to encode for a specimen.

    Args:
        specimen: Specimen to encode
        fmt: "embedded" for canonical JSON, "compact" for the compact URL

    Returns:
        String to place in the QR symbol
    """
    if fmt == "compact":
        return to_compact_url(specimen)
    return serialize_specimen(specimen)


def _make(specimen: Specimen, options: QRCodeOptions) -> qrcode.QRCode:
    """Build a fitted QR symbol sized to roughly options.size pixels."""
    content = generate_qr_content(specimen, options.format)
    qr = qrcode.QRCode(
        error_correction=ERROR_CORRECTION_LEVELS[options.error_correction],
        border=options.margin,
    )
    qr.add_data(content)
    try:
        qr.make(fit=True)
    except DataOverflowError as e:
        reason = str(e) or f"{len(content)} characters do not fit in a QR symbol"
        raise WolsError(
            WolsErrorCode.SIZE_EXCEEDED,
            f"Failed to generate QR code: {reason}",
            {"originalError": reason, "contentLength": len(content)},
        ) from e

    width = qr.modules_count + 2 * options.margin
    qr.box_size = max(1, options.size // width)
    logger.debug(f"QR version {qr.version}, {width} modules, box size {qr.box_size}")
    return qr


def _render_png(specimen: Specimen, options: QRCodeOptions) -> bytes:
    qr = _make(specimen, options)
    image = qr.make_image(image_factory=PilImage, fill_color=options.dark, back_color=options.light)
    buffer = io.BytesIO()
    image.save(buffer)
    return buffer.getvalue()


def _render_svg(specimen: Specimen, options: QRCodeOptions) -> str:
    qr = _make(specimen, options)

    class LabelSvgImage(SvgPathImage):
        QR_PATH_STYLE = {**SvgPathImage.QR_PATH_STYLE, "fill": options.dark}
        background = options.light

    image = qr.make_image(image_factory=LabelSvgImage)
    return image.to_string(encoding="unicode")


async def to_qr_code(specimen: Specimen, options: QRCodeOptions | None = None) -> bytes:
    """Render a specimen label as PNG bytes.

    Raises:
        WolsError: WOLS_SIZE_EXCEEDED if the payload does not fit in a QR symbol
    """
    return await asyncio.to_thread(_render_png, specimen, options or QRCodeOptions())


async def to_qr_code_data_url(specimen: Specimen, options: QRCodeOptions | None = None) -> str:
    """Render a specimen label as a PNG data URL."""
    png = await to_qr_code(specimen, options)
    return "data:image/png;base64," + base64.b64encode(png).decode("ascii")


async def to_qr_code_svg(specimen: Specimen, options: QRCodeOptions | None = None) -> str:
    """Render a specimen label as an SVG document string."""
    return await asyncio.to_thread(_render_svg, specimen, options or QRCodeOptions())
