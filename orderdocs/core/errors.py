"""Error Hierarchy — typed, categorized exceptions for all orderdocs failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - retryable=True means the whole request may be replayed from scratch
    - to_response() produces the REST envelope; to_dict() the compact form embedded in results
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with OrderDocsError base: FastAPI global handler catches all (ADR: uniform error shape)
    - Validation and allocation errors travel inside result objects instead of propagating
      past the identifier/path layer, so callers can tell "configure a path" from "retry"
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
    CONFIGURATION = "configuration"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    FILESYSTEM = "filesystem"
    CONFLICT = "conflict"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    tenant_id: int | None = None
    identifier: str | None = None
    path: str | None = None
    attempts: int | None = None


class OrderDocsError(Exception):
    """Base exception for all orderdocs errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
        retryable: bool = False,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status
        self.retryable = retryable

    def to_dict(self) -> dict:
        """Compact form embedded in structured results."""
        return {
            "code": self.code,
            "message": self.message,
            "category": self.category.value,
            "retryable": self.retryable,
        }

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                **self.to_dict(),
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "tenant_id": self.context.tenant_id,
                    "identifier": self.context.identifier,
                    "attempts": self.context.attempts,
                },
            }
        }


# ─── User-correctable errors (400-level) ───────────────────────

class PathValidationError(OrderDocsError):
    """Candidate storage path failed validation."""
    def __init__(
        self, message: str, reason: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "PATH_VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.reason = reason


class ResourceNotFoundError(OrderDocsError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


# ─── Store errors ───────────────────────────────────────────────

class UniqueViolationError(OrderDocsError):
    """Insert collided with an existing row (concurrent duplicate create)."""
    def __init__(self, table: str, context: ErrorContext | None = None):
        super().__init__(
            f"Duplicate row in {table}",
            "UNIQUE_VIOLATION", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409, retryable=True,
        )
        self.table = table


class CounterConflictError(OrderDocsError):
    """Conditional counter update lost to a racing writer."""
    def __init__(self, scope_key: str, year: int, context: ErrorContext | None = None):
        super().__init__(
            f"Counter {scope_key}/{year} was advanced concurrently",
            "COUNTER_CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.INFO, context, 409, retryable=True,
        )
        self.scope_key = scope_key
        self.year = year


class DatabaseError(OrderDocsError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


# ─── Allocation / filesystem errors ─────────────────────────────

class AllocationExhaustedError(OrderDocsError):
    """No unique sequence/identifier within the retry budget. Safe to retry the request."""
    def __init__(self, message: str, attempts: int, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.attempts = attempts
        super().__init__(
            message, "ALLOCATION_EXHAUSTED", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, ctx, 503, retryable=True,
        )


class ConfigurationError(OrderDocsError):
    """No usable artifact base path."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONFIGURATION_ERROR", ErrorCategory.CONFIGURATION,
            ErrorSeverity.CRITICAL, context, 500,
        )


class DirectoryCreationError(OrderDocsError):
    """The OS refused to create a folder. Not retried further."""
    def __init__(self, message: str, path: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.path = path
        super().__init__(
            message, "DIRECTORY_CREATION_FAILED", ErrorCategory.FILESYSTEM,
            ErrorSeverity.ERROR, ctx, 500,
        )
        self.path = path


class ArtifactWriteError(OrderDocsError):
    """Artifact bytes could not be persisted. Generated content stays valid."""
    def __init__(self, message: str, path: str | None, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.path = path
        super().__init__(
            message, "ARTIFACT_WRITE_FAILED", ErrorCategory.FILESYSTEM,
            ErrorSeverity.WARNING, ctx, 500,
        )
        self.path = path
