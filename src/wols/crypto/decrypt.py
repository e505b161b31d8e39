"""Specimen decryption.

All cryptographic failures (wrong key, tampered ciphertext, malformed
base64, bad envelope metadata) collapse into one WOLS_DECRYPTION_ERROR with
the same message, so callers cannot tell which check failed. The GCM
authentication tag is the only integrity check.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from pydantic import ValidationError

from wols.crypto.keys import (
    EncryptedSpecimen,
    EncryptionKey,
    b64url_decode,
    is_encrypted,
    resolve_key,
)
from wols.errors import WolsEncryptionError, WolsErrorCode
from wols.models import Specimen
from wols.parser import parse_specimen
from wols.result import ParseFailure, ParseResult
from wols.serializer import decode_json

logger = logging.getLogger(__name__)

DECRYPTION_FAILED = "Decryption failed"

# Errors that mean "could not decrypt"; anything else is a bug and propagates
_DECRYPT_ERRORS = (InvalidTag, ValueError, ValidationError, WolsEncryptionError)


def _missing_parts(envelope: Mapping[str, Any]) -> WolsEncryptionError | None:
    if not envelope.get("payload"):
        return WolsEncryptionError(WolsErrorCode.DECRYPTION_ERROR, "Missing encrypted payload", {"path": ["payload"]})
    if not envelope.get("iv"):
        return WolsEncryptionError(
            WolsErrorCode.DECRYPTION_ERROR,
            "Missing initialization vector (IV)",
            {"path": ["iv"]},
        )
    return None


async def _open(envelope: Mapping[str, Any], key: EncryptionKey) -> str:
    model = EncryptedSpecimen.model_validate(envelope)
    aes_key = await resolve_key(key, model.iterations)
    nonce = b64url_decode(model.iv)
    ciphertext = b64url_decode(model.payload)
    return AESGCM(aes_key).decrypt(nonce, ciphertext, None).decode("utf-8")


def _as_mapping(envelope: EncryptedSpecimen | Mapping[str, Any]) -> Mapping[str, Any]:
    if isinstance(envelope, EncryptedSpecimen):
        return envelope.to_dict()
    return envelope


async def decrypt_specimen(
    envelope: EncryptedSpecimen | Mapping[str, Any],
    key: EncryptionKey,
) -> ParseResult[Specimen]:
    """Decrypt a whole-record envelope back into a Specimen.

    The envelope's own iteration count is used when stretching a password.
    The decrypted JSON goes through parse_specimen(), so a payload that
    decrypts but does not validate is reported as a parse failure.

    Args:
        envelope: EncryptedSpecimen or its wire dict
        key: Password string or 32 raw key bytes

    Returns:
        ParseSuccess with the Specimen, or ParseFailure
    """
    if not isinstance(envelope, (EncryptedSpecimen, Mapping)):
        return ParseFailure(
            WolsEncryptionError(WolsErrorCode.DECRYPTION_ERROR, "Encrypted specimen must be an object")
        )

    data = _as_mapping(envelope)
    missing = _missing_parts(data)
    if missing is not None:
        return ParseFailure(missing)

    try:
        plaintext = await _open(data, key)
    except _DECRYPT_ERRORS:
        logger.warning(DECRYPTION_FAILED)
        return ParseFailure(WolsEncryptionError(WolsErrorCode.DECRYPTION_ERROR, DECRYPTION_FAILED))

    return parse_specimen(plaintext)


async def decrypt_fields(data: Mapping[str, Any], key: EncryptionKey) -> ParseResult[Specimen]:
    """Reverse partial encryption.

    Every top-level value that is an envelope is decrypted and decoded back
    to its JSON value; the reassembled record is then parsed.

    Args:
        data: Hybrid mapping produced by encrypt_specimen(..., fields=[...])
        key: Password string or 32 raw key bytes

    Returns:
        ParseSuccess with the Specimen, or ParseFailure
    """
    restored: dict[str, Any] = {}
    for name, value in data.items():
        if not is_encrypted(value):
            restored[name] = value
            continue

        missing = _missing_parts(value)
        if missing is not None:
            return ParseFailure(missing)
        try:
            restored[name] = decode_json(await _open(value, key))
        except _DECRYPT_ERRORS:
            logger.warning(f"{DECRYPTION_FAILED} for field {name!r}")
            return ParseFailure(WolsEncryptionError(WolsErrorCode.DECRYPTION_ERROR, DECRYPTION_FAILED))

    return parse_specimen(json.dumps(restored, ensure_ascii=False))
