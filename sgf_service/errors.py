"""
SGF Service Error Hierarchy

Unified exception hierarchy for the ingestion, validation and diagram
resolution pipeline. Every failure the service reports belongs to exactly one
``ErrorKind``; handlers convert exceptions into the ``{"type", "message",
"details"}`` envelope at the operation boundary.

Usage:
    from sgf_service.errors import ParsingError, SgfServiceError

    try:
        tree = parse_sgf(text)
    except SgfServiceError as e:
        logger.warning(f"Rejected SGF: {e.message} ({e.kind.value})")
"""

from enum import Enum
from typing import Any

__all__ = [
    "ConfigurationError",
    "ErrorKind",
    "FileTooLargeError",
    "InvalidFormatError",
    "InvalidParametersError",
    "ParsingError",
    "SgfServiceError",
    "UnexpectedError",
    "UnsupportedGameError",
]


class ErrorKind(str, Enum):
    """Caller-facing error taxonomy."""
    INVALID_FORMAT = "INVALID_FORMAT"
    INVALID_PARAMETERS = "INVALID_PARAMETERS"
    PARSING_ERROR = "PARSING_ERROR"
    UNSUPPORTED_GAME = "UNSUPPORTED_GAME"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    UNEXPECTED_ERROR = "UNEXPECTED_ERROR"


class SgfServiceError(Exception):
    """Base exception for all SGF service errors.

    Attributes:
        kind: Error kind reported to callers
        message: Human-readable error description
        details: Machine-readable context (field, bound, offset, ...)
    """
    kind: ErrorKind = ErrorKind.UNEXPECTED_ERROR

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            ctx = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"[{self.kind.value}] {self.message} ({ctx})"
        return f"[{self.kind.value}] {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to the error envelope body used by the operations."""
        body: dict[str, Any] = {
            "type": self.kind.value,
            "message": self.message,
        }
        if self.details:
            body["details"] = self.details
        return body


# =============================================================================
# Input Errors
# =============================================================================


class InvalidFormatError(SgfServiceError):
    """Raw text failed the structural pre-check.

    Raised by the text validator when the content is not shaped like an
    SGF collection (missing outer parentheses, no property at all).
    """
    kind: ErrorKind = ErrorKind.INVALID_FORMAT


class FileTooLargeError(SgfServiceError):
    """SGF content exceeds the configured byte ceiling."""
    kind: ErrorKind = ErrorKind.FILE_TOO_LARGE

    def __init__(
        self,
        message: str,
        size: int | None = None,
        limit: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details=details)
        if size is not None:
            self.details["size"] = size
        if limit is not None:
            self.details["limit"] = limit


class InvalidParametersError(SgfServiceError):
    """Argument, selector or board size violation.

    Attributes:
        field: Name of the offending argument, when there is one
        rule: Short identifier of the violated rule
    """
    kind: ErrorKind = ErrorKind.INVALID_PARAMETERS

    def __init__(
        self,
        message: str,
        field: str | None = None,
        rule: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details=details)
        self.field = field
        self.rule = rule
        if field:
            self.details["field"] = field
        if rule:
            self.details["rule"] = rule


# =============================================================================
# Parsing Errors
# =============================================================================


class ParsingError(SgfServiceError):
    """Structurally accepted text that the tree parser could not read.

    Attributes:
        offset: Character offset in the input where parsing stopped
    """
    kind: ErrorKind = ErrorKind.PARSING_ERROR

    def __init__(
        self,
        message: str,
        offset: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details=details)
        self.offset = offset
        if offset is not None:
            self.details["offset"] = offset


class UnsupportedGameError(SgfServiceError):
    """Game type (GM) is present and is not Go."""
    kind: ErrorKind = ErrorKind.UNSUPPORTED_GAME

    def __init__(
        self,
        message: str,
        game_type: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details=details)
        if game_type is not None:
            self.details["gameType"] = game_type


# =============================================================================
# Service Errors
# =============================================================================


class UnexpectedError(SgfServiceError):
    """Wraps an internal failure that has no dedicated kind."""
    kind: ErrorKind = ErrorKind.UNEXPECTED_ERROR


class ConfigurationError(SgfServiceError):
    """Invalid service configuration (environment or YAML file)."""
    kind: ErrorKind = ErrorKind.UNEXPECTED_ERROR
