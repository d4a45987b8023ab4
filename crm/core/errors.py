"""Error Hierarchy: typed, categorized exceptions for all CRM failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Business-rule refusals (confirmed email) are NOT exceptions; they are returned as strings
    - Everything raised here aborts the enclosing transaction

Design Decisions:
    - Single hierarchy with CrmError base: callers can catch one type at the edge
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and caller handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    user_id: int | None = None
    operation: str | None = None
    debug_info: dict[str, Any] | None = None


class CrmError(Exception):
    """Base exception for all CRM errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()

    def to_dict(self) -> dict:
        """Flatten into a log/alert payload."""
        return {
            "code": self.code,
            "message": self.message,
            "category": self.category.value,
            "severity": self.severity.value,
            "timestamp": self.context.timestamp.isoformat(),
            "context": {
                "user_id": self.context.user_id,
                "operation": self.context.operation,
                "debug_info": self.context.debug_info,
            },
        }


# ─── Domain Errors ──────────────────────────────────────────────

class PreconditionError(CrmError):
    """A caller broke a documented precondition (programmer error)."""
    def __init__(
        self,
        message: str = "Precondition failed",
        code: str = "PRECONDITION_FAILED",
        category: ErrorCategory = ErrorCategory.INTERNAL,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, category, ErrorSeverity.CRITICAL, context,
        )


class EmployeeCountError(PreconditionError):
    """Company employee counter would become negative."""
    def __init__(
        self, domain_name: str, current: int, delta: int | None = None,
        context: ErrorContext | None = None,
    ):
        message = (
            f"Company '{domain_name}' cannot have {current} employees"
            if delta is None
            else f"Company '{domain_name}' cannot change employee count "
            f"by {delta} from {current}"
        )
        super().__init__(
            message,
            "NEGATIVE_EMPLOYEE_COUNT", ErrorCategory.BUSINESS_RULE, context,
        )
        self.domain_name = domain_name
        self.current = current
        self.delta = delta


class MalformedEmailError(CrmError):
    """Email address has no '@' separator."""
    def __init__(self, email: str, context: ErrorContext | None = None):
        super().__init__(
            f"Malformed email address: '{email}'",
            "MALFORMED_EMAIL", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context,
        )
        self.email = email


class ResourceNotFoundError(CrmError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


# ─── Infrastructure Errors ──────────────────────────────────────

class DatabaseError(CrmError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context,
        )
        self.operation = operation


class TransactionStateError(CrmError):
    """Transaction handle used after commit, rollback, or a failed commit."""
    def __init__(self, status: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Cannot {operation}: transaction is {status}",
            "TRANSACTION_STATE", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, context,
        )
        self.status = status
        self.operation = operation


def require(condition: bool, message: str = "Precondition failed") -> None:
    """Raise PreconditionError unless condition holds."""
    if not condition:
        raise PreconditionError(message)
