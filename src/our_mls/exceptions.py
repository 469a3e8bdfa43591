"""Exception hierarchy for the MLS key-management core."""

from __future__ import annotations

from typing import Any


class MLSException(Exception):
    """Base exception for all MLS core errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class CodecError(MLSException):
    """Wire-format error."""

    pass


class DecodingError(CodecError):
    """Input is truncated, inconsistent or semantically rejected."""

    pass


class EncodingError(CodecError):
    """A value does not fit the length prefix of its wire field."""

    pass
