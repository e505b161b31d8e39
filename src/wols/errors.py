"""Error types for WOLS operations.

Validation never raises; it returns issues (see wols.validation). The
exceptions here classify operational failures: parsing, compact URLs,
encryption and migration. Each carries a stable machine-readable code.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class WolsErrorCode(str, Enum):
    """Machine-readable error codes."""

    PARSE_ERROR = "WOLS_PARSE_ERROR"
    INVALID_JSON = "WOLS_INVALID_JSON"
    INVALID_FORMAT = "WOLS_INVALID_FORMAT"
    INVALID_CONTEXT = "WOLS_INVALID_CONTEXT"
    INVALID_TYPE = "WOLS_INVALID_TYPE"
    INVALID_ID_FORMAT = "WOLS_INVALID_ID_FORMAT"
    INVALID_VERSION = "WOLS_INVALID_VERSION"
    INVALID_SPECIMEN_TYPE = "WOLS_INVALID_SPECIMEN_TYPE"
    REQUIRED_FIELD = "WOLS_REQUIRED_FIELD"
    INVALID_DATE_FORMAT = "WOLS_INVALID_DATE_FORMAT"
    INVALID_GENERATION = "WOLS_INVALID_GENERATION"
    INVALID_URL = "WOLS_INVALID_URL"
    ENCRYPTION_ERROR = "WOLS_ENCRYPTION_ERROR"
    DECRYPTION_ERROR = "WOLS_DECRYPTION_ERROR"
    INVALID_KEY = "WOLS_INVALID_KEY"
    SIZE_EXCEEDED = "WOLS_SIZE_EXCEEDED"
    MIGRATION_ERROR = "WOLS_MIGRATION_ERROR"
    UNKNOWN_ERROR = "WOLS_UNKNOWN_ERROR"


def is_error_code(value: str) -> bool:
    """Return True if value is one of the WolsErrorCode values (e.g. "WOLS_INVALID_URL")."""
    return value in WolsErrorCode._value2member_map_


class WolsError(Exception):
    """Base class for WOLS operational errors.

    Attributes:
        code: Machine-readable error code
        message: Human-readable description
        details: Optional structured context (path, received type, ...)
    """

    def __init__(
        self,
        code: WolsErrorCode,
        message: str,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        """Serializable representation for logs and API responses."""
        data: dict[str, Any] = {
            "name": type(self).__name__,
            "code": self.code.value,
            "message": self.message,
        }
        if self.details:
            data["details"] = self.details
        return data

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code.name}, message={self.message!r})"


class WolsParseError(WolsError):
    """Failure to decode or accept a specimen document."""

    def __init__(
        self,
        code: WolsErrorCode,
        message: str,
        details: dict[str, Any] | None = None,
        position: int | None = None,
    ):
        super().__init__(code, message, details)
        self.position = position  # Character offset reported by the JSON decoder


class WolsValidationError(WolsError):
    """Composite failure bundling several validation errors."""

    def __init__(self, message: str, errors: list[Any]):
        super().__init__(WolsErrorCode.INVALID_FORMAT, message, {"errors": [str(e) for e in errors]})
        self.errors = errors


class WolsEncryptionError(WolsError):
    """Failure during key derivation, encryption or decryption."""


class WolsMigrationError(WolsError):
    """Failure to migrate a specimen to the current version."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(WolsErrorCode.MIGRATION_ERROR, message, details)
