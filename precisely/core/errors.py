"""Error Hierarchy — typed, categorized exceptions for all document service failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Client errors (400/404) are terminal and never retried by the service
    - to_response() produces the REST envelope {"error": "<message>"}
    - Invariant violations never expose internal detail; the message is generic

Design Decisions:
    - Single hierarchy with PreciselyError base: FastAPI global handler catches all
    - ErrorContext as dataclass: observability data stays out of the response body
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
    CONFLICT = "conflict"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    TIMEOUT = "timeout"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Context for error observability and debugging (logged, never returned)."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    document_id: int | None = None
    operation: str | None = None
    debug_info: dict[str, Any] | None = None


class PreciselyError(Exception):
    """Base exception for all document service errors."""

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
        """Convert to the REST error envelope."""
        return {"error": self.message}

    def log_extra(self) -> dict:
        """Fields surfaced by the JSON log formatter."""
        return {
            "error_code": self.code,
            "document_id": self.context.document_id,
            "operation": self.context.operation,
        }


# ─── Client Errors (400-level) ──────────────────────────────────

class ClientInputError(PreciselyError):
    """Request rejected before reaching the store."""
    def __init__(
        self, message: str, code: str = "CLIENT_INPUT_ERROR",
        category: ErrorCategory = ErrorCategory.VALIDATION,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, category, ErrorSeverity.WARNING, context, 400,
        )


class BadIdError(ClientInputError):
    """Path identifier is not an integer."""
    def __init__(self, raw_id: str, context: ErrorContext | None = None):
        super().__init__(
            f"requested id '{raw_id}' is not a number", "BAD_ID",
            context=context,
        )
        self.raw_id = raw_id


class MalformedBodyError(ClientInputError):
    """Request body is not a JSON object of the document shape."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "illegal structure of json object", "MALFORMED_BODY",
            context=context,
        )


class IncompleteDocumentError(ClientInputError):
    """Create request lacks one of the mandatory fields."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "not a valid document for creation; every field except id is needed.",
            "INCOMPLETE_DOCUMENT", context=context,
        )


class EmptyPatchError(ClientInputError):
    """Patch request carries no field besides id."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "not a valid document for update; at least one field except id is needed.",
            "EMPTY_PATCH", context=context,
        )


class IdConflictError(ClientInputError):
    """Body id disagrees with path id."""
    def __init__(
        self, path_id: int, body_id: int, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"id in request ({path_id}) does not correspond to "
            f"id in json object ({body_id})",
            "ID_CONFLICT", ErrorCategory.CONFLICT, context,
        )
        self.path_id = path_id
        self.body_id = body_id


class DocumentNotFoundError(PreciselyError):
    """No stored document has the requested id."""
    def __init__(self, document_id: int, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.document_id = document_id
        super().__init__(
            f"could not find document with id {document_id}",
            "DOCUMENT_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, ctx, 404,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class BackendUnavailableError(PreciselyError):
    """Store call failed: connectivity, timeout, query or decode error."""
    def __init__(
        self, reason: str, operation: str,
        category: ErrorCategory = ErrorCategory.DATABASE,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.operation = operation
        ctx.debug_info = {"reason": reason}
        super().__init__(
            "external database does not respond properly",
            "BACKEND_UNAVAILABLE", category,
            ErrorSeverity.CRITICAL, ctx, 502,
        )
        self.reason = reason
        self.operation = operation


class DuplicateIdError(BackendUnavailableError):
    """Insert rejected because the id is already taken."""
    def __init__(self, document_id: int, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.document_id = document_id
        super().__init__(
            f"id {document_id} already exists", "insert",
            ErrorCategory.CONFLICT, ctx,
        )
        self.document_id = document_id


class InvariantViolationError(PreciselyError):
    """Server-side contract broken: a bug, not a client or store problem."""
    def __init__(self, reason: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.debug_info = {"reason": reason}
        super().__init__(
            "unexpected server state", "INVARIANT_VIOLATION",
            ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL, ctx, 500,
        )
        self.reason = reason
