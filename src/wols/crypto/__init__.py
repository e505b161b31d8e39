"""AES-256-GCM encryption for specimens.

Main entry points:
    - encrypt_specimen(): Encrypt a whole record, or selected fields
    - decrypt_specimen(): Decrypt a whole-record envelope
    - decrypt_fields(): Reverse partial (field-level) encryption
    - is_encrypted(): Detect envelopes

All entry points are coroutines because password stretching is deliberately
slow and runs off the event loop.

Example:
    import asyncio
    from wols.crypto import decrypt_specimen, encrypt_specimen

    envelope = asyncio.run(encrypt_specimen(specimen, "correct horse"))
    result = asyncio.run(decrypt_specimen(envelope, "correct horse"))
"""

from wols.crypto.decrypt import decrypt_fields, decrypt_specimen
from wols.crypto.encrypt import encrypt_specimen
from wols.crypto.keys import (
    ALGORITHM,
    CRYPTO_VERSION,
    DEFAULT_PBKDF2_ITERATIONS,
    MIN_PBKDF2_ITERATIONS,
    EncryptedSpecimen,
    EncryptionKey,
    derive_key,
    is_encrypted,
)

__all__ = [
    "ALGORITHM",
    "CRYPTO_VERSION",
    "DEFAULT_PBKDF2_ITERATIONS",
    "MIN_PBKDF2_ITERATIONS",
    "EncryptedSpecimen",
    "EncryptionKey",
    "decrypt_fields",
    "decrypt_specimen",
    "derive_key",
    "encrypt_specimen",
    "is_encrypted",
]
