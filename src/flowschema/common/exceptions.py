"""Custom exceptions for flowschema.

Provides a hierarchy of exceptions with machine-readable error codes
and structured details, so collectors can log or count failures by kind.
"""

from typing import Any


class FlowSchemaError(Exception):
    """Base exception for all flowschema errors."""

    error_code: str = "INTERNAL_ERROR"
    message: str = "An internal error occurred"

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        """Initialize exception with optional details.

        Args:
            message: Human-readable error message.
            details: Additional error details for debugging.
            cause: Original exception that caused this error.
        """
        self.message = message or self.message
        self.details = details or {}
        self.cause = cause
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for structured logging."""
        result = {
            "error": self.error_code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


# Decode errors: fatal for the structure being read
class DecodeError(FlowSchemaError):
    """Packet could not be decoded."""

    error_code = "DECODE_ERROR"
    message = "Packet could not be decoded"


class NotEnoughDataError(DecodeError):
    """A read needed more bytes than the input holds."""

    error_code = "NOT_ENOUGH_DATA"
    message = "Not enough data"

    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Not enough data: expected {expected} bytes, got {actual}",
            details={"expected": expected, "actual": actual},
        )


class InvalidVersionError(DecodeError):
    """Packet header carries an unsupported export version."""

    error_code = "INVALID_VERSION"
    message = "Invalid export version"

    def __init__(self, expected: list[int], actual: int) -> None:
        self.expected = list(expected)
        self.actual = actual
        super().__init__(
            f"Invalid version {actual} (expected one of {self.expected})",
            details={"expected": self.expected, "actual": actual},
        )


class InvalidTemplateError(DecodeError):
    """Template or options template body is malformed."""

    error_code = "INVALID_TEMPLATE"
    message = "Invalid template definition"

    def __init__(self, template_id: int | None, reason: str) -> None:
        self.template_id = template_id
        self.reason = reason
        super().__init__(
            f"Invalid template {template_id}: {reason}",
            details={"template_id": template_id, "reason": reason},
        )


# Recoverable: reported per flow set
class UnknownTemplateError(FlowSchemaError):
    """Data flow set references a template that has not been received."""

    error_code = "UNKNOWN_TEMPLATE"
    message = "Unknown template"

    def __init__(self, source_id: int, template_id: int) -> None:
        self.source_id = source_id
        self.template_id = template_id
        super().__init__(
            f"No template {template_id} for source {source_id}",
            details={"source_id": source_id, "template_id": template_id},
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UnknownTemplateError):
            return NotImplemented
        return (self.source_id, self.template_id) == (other.source_id, other.template_id)

    def __hash__(self) -> int:
        return hash((self.source_id, self.template_id))
