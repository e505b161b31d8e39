"""Key derivation and envelope model for specimen encryption.

Passwords are stretched with PBKDF2-HMAC-SHA256 using a fixed, version-tagged
salt. Raw 32-byte keys are used as-is. Key derivation is CPU-bound and runs
in a worker thread so it does not block the event loop.
"""

from __future__ import annotations

import asyncio
import base64
import logging
from collections.abc import Mapping
from typing import Any, Literal, Union

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC
from pydantic import BaseModel, Field

from wols.errors import WolsEncryptionError, WolsErrorCode

logger = logging.getLogger(__name__)

PBKDF2_SALT = b"@wemush/wols/crypto/v1"
DEFAULT_PBKDF2_ITERATIONS = 100_000
MIN_PBKDF2_ITERATIONS = 10_000
CRYPTO_VERSION = "v1"
ALGORITHM = "AES-256-GCM"
IV_LENGTH = 12  # bytes; GCM standard nonce size
KEY_LENGTH = 32  # bytes; AES-256

# Password string, or an already-derived 32-byte key
EncryptionKey = Union[str, bytes]


class EncryptedSpecimen(BaseModel):
    """Self-describing encryption envelope.

    Examples
    --------
    >>> envelope = EncryptedSpecimen(payload="abc", iv="def", iterations=100000)
    >>> envelope.to_dict()["cryptoVersion"]
    'v1'
    """

    encrypted: Literal[True] = Field(True, description="Discriminator for encrypted values")
    payload: str = Field(..., min_length=1, description="Base64url ciphertext including GCM tag")
    iv: str = Field(..., min_length=1, description="Base64url 12-byte nonce")
    algorithm: Literal["AES-256-GCM"] = Field(ALGORITHM, description="Cipher used")
    crypto_version: str | None = Field(CRYPTO_VERSION, alias="cryptoVersion", description="Envelope format version")
    iterations: int | None = Field(None, description="PBKDF2 iterations used for password keys")

    model_config = {"populate_by_name": True}

    def to_dict(self) -> dict[str, Any]:
        """Wire representation (camelCase keys, absent values omitted)."""
        return self.model_dump(by_alias=True, exclude_none=True)


def b64url_encode(data: bytes) -> str:
    """Base64url without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def b64url_decode(text: str) -> bytes:
    """Decode base64url, tolerating missing padding.

    Raises:
        ValueError: If text is not valid base64url
    """
    padded = text + "=" * (-len(text) % 4)
    return base64.urlsafe_b64decode(padded.encode("ascii"))


def validate_iterations(iterations: int | None) -> int:
    """Apply the default and enforce the minimum iteration count.

    Raises:
        WolsEncryptionError: If iterations is not an int or is below the minimum
    """
    count = DEFAULT_PBKDF2_ITERATIONS if iterations is None else iterations
    if not isinstance(count, int) or isinstance(count, bool):
        raise WolsEncryptionError(
            WolsErrorCode.INVALID_KEY,
            f"PBKDF2 iterations must be an integer, got {type(count).__name__}",
        )
    if count < MIN_PBKDF2_ITERATIONS:
        raise WolsEncryptionError(
            WolsErrorCode.INVALID_KEY,
            f"PBKDF2 iterations must be at least {MIN_PBKDF2_ITERATIONS}, got {count}",
        )
    return count


def _derive(password: str, iterations: int) -> bytes:
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=KEY_LENGTH,
        salt=PBKDF2_SALT,
        iterations=iterations,
    )
    return kdf.derive(password.encode("utf-8"))


async def derive_key(password: str, iterations: int | None = None) -> bytes:
    """Stretch a password into a 32-byte AES key.

    Args:
        password: Password string
        iterations: PBKDF2 iteration count (default 100,000; minimum 10,000)

    Returns:
        Raw key bytes, usable wherever an EncryptionKey is accepted

    Raises:
        WolsEncryptionError: If iterations is invalid
    """
    count = validate_iterations(iterations)
    return await asyncio.to_thread(_derive, password, count)


async def resolve_key(key: EncryptionKey, iterations: int | None = None) -> bytes:
    """Turn a password or raw key into AES key bytes.

    The iteration count only applies to passwords; raw keys are used as-is.

    Raises:
        WolsEncryptionError: If the key is empty, of the wrong size or type
    """
    if isinstance(key, str):
        if not key:
            raise WolsEncryptionError(WolsErrorCode.INVALID_KEY, "Encryption password must not be empty")
        return await derive_key(key, iterations)
    if isinstance(key, (bytes, bytearray)):
        if len(key) != KEY_LENGTH:
            raise WolsEncryptionError(
                WolsErrorCode.INVALID_KEY,
                f"Raw key must be {KEY_LENGTH} bytes, got {len(key)}",
            )
        return bytes(key)
    raise WolsEncryptionError(
        WolsErrorCode.INVALID_KEY,
        f"Key must be a password string or {KEY_LENGTH} raw bytes, got {type(key).__name__}",
    )


def is_encrypted(value: object) -> bool:
    """Return True for an envelope: a mapping (or model) whose "encrypted" is True."""
    if isinstance(value, EncryptedSpecimen):
        return True
    return isinstance(value, Mapping) and value.get("encrypted") is True
