#!/usr/bin/env python3
"""Create a WOLS specimen label.

Builds a specimen from command-line options and prints its canonical JSON
and compact URL. Optionally renders a QR code and writes an encrypted
envelope.

Usage:
    wols-label --type LC --species "Pleurotus ostreatus"
    wols-label -t SPAWN -s "Hericium erinaceus" --strain "Lion's Mane" --qr label.png
    wols-label -t CULTURE -s "Ganoderma lucidum" --encrypt envelope.json
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
from pathlib import Path

import click
from dotenv import load_dotenv

from wols.compact_url import to_compact_url
from wols.crypto import encrypt_specimen
from wols.errors import WolsError
from wols.models import GROWTH_STAGES, Specimen
from wols.qr import QRCodeOptions, to_qr_code, to_qr_code_svg
from wols.specimen import create_specimen, serialize_specimen
from wols.timestamps import get_current_iso8601

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
logger = logging.getLogger(__name__)

load_dotenv()


def _write_qr(specimen: Specimen, path: Path, options: QRCodeOptions) -> None:
    if path.suffix.lower() == ".svg":
        path.write_text(asyncio.run(to_qr_code_svg(specimen, options)), encoding="utf-8")
    else:
        path.write_bytes(asyncio.run(to_qr_code(specimen, options)))
    logger.info(f"Wrote QR code to {path}")


def _write_envelope(specimen: Specimen, path: Path, key: str, fields: tuple[str, ...]) -> None:
    envelope = asyncio.run(encrypt_specimen(specimen, key, fields=fields or None))
    data = envelope if isinstance(envelope, dict) else envelope.to_dict()
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
    logger.info(f"Wrote encrypted specimen to {path}")


@click.command()
@click.option("--type", "-t", "specimen_type", required=True, help="Specimen type or alias (e.g., CULTURE, LC)")
@click.option("--species", "-s", required=True, help="Scientific name")
@click.option("--strain", default=None, help="Strain name")
@click.option("--generation", default=None, help="Strain generation (P, F1, F2, ...)")
@click.option(
    "--stage",
    type=click.Choice(GROWTH_STAGES, case_sensitive=False),
    default=None,
    help="Growth stage",
)
@click.option("--batch", "-b", default=None, help="Batch identifier")
@click.option("--organization", default=None, help="Organization identifier")
@click.option("--creator", default=None, help="Creator identifier")
@click.option("--no-timestamp", is_flag=True, help="Do not stamp the current time as 'created'")
@click.option(
    "--qr",
    "qr_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write a QR code (.png or .svg)",
)
@click.option(
    "--qr-format",
    type=click.Choice(["embedded", "compact"]),
    default="compact",
    show_default=True,
    help="QR payload: full JSON or compact URL",
)
@click.option("--qr-size", type=int, default=300, show_default=True, help="QR image width in pixels")
@click.option(
    "--encrypt",
    "encrypt_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write an encrypted envelope (JSON)",
)
@click.option(
    "--key",
    default=None,
    help="Encryption password (default: $WOLS_ENCRYPTION_KEY)",
)
@click.option("--field", "fields", multiple=True, help="Encrypt only this field (repeatable)")
@click.option(
    "--debug",
    is_flag=True,
    help="Enable debug logging",
)
def main(
    specimen_type: str,
    species: str,
    strain: str | None,
    generation: str | None,
    stage: str | None,
    batch: str | None,
    organization: str | None,
    creator: str | None,
    no_timestamp: bool,
    qr_path: Path | None,
    qr_format: str,
    qr_size: int,
    encrypt_path: Path | None,
    key: str | None,
    fields: tuple[str, ...],
    debug: bool,
) -> None:
    """Create a specimen and print its JSON and compact URL."""
    if debug:
        logging.getLogger().setLevel(logging.DEBUG)

    key = key or os.environ.get("WOLS_ENCRYPTION_KEY")
    if generation is not None and strain is None:
        raise click.UsageError("--generation requires --strain")
    if encrypt_path is not None and not key:
        raise click.UsageError("--encrypt requires --key or WOLS_ENCRYPTION_KEY")

    strain_value = {"name": strain, "generation": generation} if strain is not None else None

    try:
        specimen = create_specimen(
            specimen_type,
            species,
            strain=strain_value,
            stage=stage.upper() if stage else None,
            created=None if no_timestamp else get_current_iso8601(),
            batch=batch,
            organization=organization,
            creator=creator,
        )
    except WolsError as e:
        raise click.BadParameter(e.message, param_hint="--type") from e

    click.echo(serialize_specimen(specimen))
    click.echo(to_compact_url(specimen))

    try:
        if qr_path is not None:
            _write_qr(specimen, qr_path, QRCodeOptions(format=qr_format, size=qr_size))
        if encrypt_path is not None and key:
            _write_envelope(specimen, encrypt_path, key, fields)
    except WolsError as e:
        raise click.ClickException(f"{e.code.value}: {e.message}") from e


if __name__ == "__main__":
    main()
