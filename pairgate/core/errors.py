"""Error Hierarchy — typed, categorized errors for the coordination engine.

Invariants:
    - Every error has a code (ErrorCode), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors are recoverable; EngineNotReadyError (startup wiring) is the only critical one
    - The engine never raises "not found": missing viewers, actions and drafts read as
      neutral state; only the HTTP routes turn a missing draft into DraftNotFoundError
    - to_response() produces the REST envelope
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with PairGateError base: FastAPI global handler catches all
    - ErrorCode enumerates the whole taxonomy, including codes that are only logged
      (INVALID_TOKEN, ACTION_EXPIRED, UNRESOLVED_LOCATION) and never raised
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
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
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    INTERNAL = "internal"
    UNAVAILABLE = "unavailable"


class ErrorCode(str, Enum):
    CAP_REACHED = "CAP_REACHED"
    INVALID_TOKEN = "INVALID_TOKEN"
    ACTION_EXPIRED = "ACTION_EXPIRED"
    UNRESOLVED_LOCATION = "UNRESOLVED_LOCATION"
    DRAFT_NOT_FOUND = "DRAFT_NOT_FOUND"
    ENGINE_NOT_READY = "ENGINE_NOT_READY"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    viewer_id: str | None = None
    candidate_id: str | None = None
    user_message: str | None = None
    debug_info: dict[str, Any] | None = None


class PairGateError(Exception):
    """Base exception for all PairGate errors."""

    def __init__(
        self,
        message: str,
        code: ErrorCode,
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

    @property
    def recoverable(self) -> bool:
        return self.severity in (ErrorSeverity.INFO, ErrorSeverity.WARNING)

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code.value,
                "message": self.context.user_message or self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "recoverable": self.recoverable,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "viewer_id": self.context.viewer_id,
                    "candidate_id": self.context.candidate_id,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class CapReachedError(PairGateError):
    """Interest ledger is full. Retract an interest to make room."""
    def __init__(self, limit: int, context: ErrorContext | None = None):
        super().__init__(
            f"Interest limit reached ({limit}/{limit}). Retract one to express another.",
            ErrorCode.CAP_REACHED, ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.WARNING, context, 409,
        )
        self.limit = limit


class DraftNotFoundError(PairGateError):
    """No pending draft to ratify for this lounge or place."""
    def __init__(self, target_id: str, context: ErrorContext | None = None):
        super().__init__(
            f"No pending draft for '{target_id}'",
            ErrorCode.DRAFT_NOT_FOUND, ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, context, 404,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class EngineNotReadyError(PairGateError):
    """Coordination engine was not initialized at startup."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Coordination engine not initialized",
            ErrorCode.ENGINE_NOT_READY, ErrorCategory.UNAVAILABLE,
            ErrorSeverity.CRITICAL, context, 503,
        )
