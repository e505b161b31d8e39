"""Specimen encryption.

Whole-record mode encrypts the canonical serialization and returns an
EncryptedSpecimen envelope. Partial mode encrypts only the named top-level
fields, each with its own nonce, and returns a hybrid mapping in which those
fields are replaced by envelope dicts. The hybrid is neither a valid Specimen
nor a valid envelope; callers must remember which mode they used.
"""

from __future__ import annotations

import json
import logging
import secrets
from collections.abc import Iterable, Mapping
from typing import Any

from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from wols.crypto.keys import (
    IV_LENGTH,
    EncryptedSpecimen,
    EncryptionKey,
    b64url_encode,
    resolve_key,
    validate_iterations,
)
from wols.models import Specimen
from wols.serializer import serialize_specimen, specimen_to_dict

logger = logging.getLogger(__name__)


def _seal(key: bytes, plaintext: str, iterations: int) -> EncryptedSpecimen:
    nonce = secrets.token_bytes(IV_LENGTH)
    ciphertext = AESGCM(key).encrypt(nonce, plaintext.encode("utf-8"), None)
    return EncryptedSpecimen(
        payload=b64url_encode(ciphertext),
        iv=b64url_encode(nonce),
        iterations=iterations,
    )


async def encrypt_specimen(
    specimen: Specimen | Mapping[str, Any],
    key: EncryptionKey,
    *,
    fields: Iterable[str] | None = None,
    iterations: int | None = None,
) -> EncryptedSpecimen | dict[str, Any]:
    """Encrypt a specimen with AES-256-GCM.

    Args:
        specimen: Specimen (or wire-shaped mapping) to encrypt
        key: Password string (stretched with PBKDF2) or 32 raw key bytes
        fields: Top-level wire field names to encrypt individually; when
            omitted or empty the whole record is encrypted
        iterations: PBKDF2 iteration count, recorded in every envelope

    Returns:
        EncryptedSpecimen for whole-record mode, or a hybrid wire dict for
        partial mode

    Raises:
        WolsEncryptionError: If the key or iteration count is invalid
    """
    count = validate_iterations(iterations)
    aes_key = await resolve_key(key, count)

    field_list = list(fields or ())
    if not field_list:
        return _seal(aes_key, serialize_specimen(specimen), count)

    result = specimen_to_dict(specimen)
    for name in field_list:
        if name not in result:
            logger.debug(f"Field {name!r} not present, nothing to encrypt")
            continue
        plaintext = json.dumps(result[name], ensure_ascii=False, separators=(",", ":"))
        result[name] = _seal(aes_key, plaintext, count).to_dict()
    return result
