"""Error Hierarchy — typed exceptions for the conditions that escape the core.

Invariants:
    - Field validation failures are NEVER raised by core: they travel as ValidationResult;
      the shell converts a failed write into RecordValidationError (422)
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - to_response() produces the API envelope {success: False, error, code}
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy rooted at PortfolioError: one FastAPI handler catches all
    - ErrorContext as dataclass: observability data without coupling to logging
"""

from dataclasses import dataclass, field
from enum import Enum
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    UNSUPPORTED = "unsupported"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Context attached to an error for logs and responses."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    record_kind: str | None = None
    record_id: str | None = None


class PortfolioError(Exception):
    """Base exception for all record-core errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to the uniform API envelope (single-message shape)."""
        return {
            "success": False,
            "error": self.message,
            "code": self.code,
            "category": self.category.value,
            "severity": self.severity.value,
            "timestamp": self.context.timestamp.isoformat(),
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class RecordNotFoundError(PortfolioError):
    """Requested record does not exist in the catalog."""
    def __init__(self, record_kind: str, record_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.record_kind = record_kind
        ctx.record_id = record_id
        super().__init__(
            f"{record_kind} '{record_id}' not found",
            "NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )


class UnsupportedFormatError(PortfolioError):
    """Export requested in a format the exporter does not know."""
    def __init__(self, fmt: str, context: ErrorContext | None = None):
        super().__init__(
            f"Unsupported export format: {fmt}",
            "UNSUPPORTED_FORMAT", ErrorCategory.UNSUPPORTED,
            ErrorSeverity.ERROR, context, 400,
        )
        self.format = fmt


class InvalidQueryError(PortfolioError):
    """Query parameters cannot be turned into a filter or sort request."""
    def __init__(self, message: str, parameter: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_QUERY", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.parameter = parameter


class RecordValidationError(PortfolioError):
    """A write was rejected by the validator. Raised by the shell, never by core.

    Carries the itemized issues so the API can render errors[] instead of one message.
    """
    def __init__(self, record_kind: str, errors: list[dict], context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.record_kind = record_kind
        super().__init__(
            f"{record_kind} failed validation",
            "VALIDATION_FAILED", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, ctx, 422,
        )
        self.errors = errors

    def to_response(self) -> dict:
        response = super().to_response()
        response["errors"] = self.errors
        return response
