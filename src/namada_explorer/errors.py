"""
Error taxonomy and structured error responses for the explorer API.

- Exception classes raised at the store, oracle and input boundaries
- Error code definitions and their HTTP status mapping
- Error body serialization
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Error codes carried in API error bodies."""

    # Validation
    INVALID_PARAMETER = "INVALID_PARAMETER"
    INVALID_HASH = "INVALID_HASH"

    # Service
    DATABASE_ERROR = "DATABASE_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    INTERNAL_ERROR = "INTERNAL_ERROR"


ERROR_STATUS_MAP: dict[ErrorCode, int] = {
    ErrorCode.INVALID_PARAMETER: 400,
    ErrorCode.INVALID_HASH: 400,
    ErrorCode.DATABASE_ERROR: 500,
    ErrorCode.INTERNAL_ERROR: 500,
    ErrorCode.SERVICE_UNAVAILABLE: 503,
}


class ExplorerError(Exception):
    """Base class for every error the explorer raises on purpose."""

    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, *, code: ErrorCode | None = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    @property
    def status_code(self) -> int:
        return ERROR_STATUS_MAP.get(self.code, 500)


class ClientInputError(ExplorerError):
    """Malformed identifier or query parameter, rejected before any I/O."""

    code = ErrorCode.INVALID_PARAMETER


class StoreError(ExplorerError):
    """Connection or query failure against the block store."""

    code = ErrorCode.DATABASE_ERROR


class OracleError(ExplorerError):
    """The node could not answer an epoch query."""

    code = ErrorCode.SERVICE_UNAVAILABLE


class DecodeError(ExplorerError):
    """A transaction payload could not be decoded.

    Raised by the decoder and recovered inside the classifier; it never
    reaches an API caller.
    """

    code = ErrorCode.INTERNAL_ERROR


@dataclass
class APIError:
    """
    Structured API error response.

    Format:
    {
        "error": {
            "code": "ERROR_CODE",
            "message": "Human readable message",
            "details": {...}  // Optional additional context
        }
    }
    """

    code: ErrorCode | str
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to API response format."""
        error_body: dict[str, Any] = {
            "code": self.code.value if isinstance(self.code, ErrorCode) else self.code,
            "message": self.message,
        }

        if self.details:
            error_body["details"] = self.details

        return {"error": error_body}

    @property
    def http_status(self) -> int:
        if isinstance(self.code, ErrorCode):
            return ERROR_STATUS_MAP.get(self.code, 500)
        return 500

    @classmethod
    def from_exception(cls, exc: ExplorerError) -> "APIError":
        return cls(code=exc.code, message=exc.message)
