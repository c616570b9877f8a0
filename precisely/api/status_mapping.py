"""Status Mapping — turns a DocumentStatus into the matching HTTP error.

Invariants:
    - Switch-complete over DocumentStatus: OK returns, every other member raises
    - NOT_FOUND without a requested id is an invariant violation (create never misses)
"""

from precisely.core.domain_types import DocumentStatus
from precisely.core.errors import (
    BackendUnavailableError, DocumentNotFoundError, ErrorContext,
    InvariantViolationError,
)


def raise_for_status(
    status: DocumentStatus, document_id: int | None, operation: str,
) -> None:
    """Return on OK; raise the PreciselyError for any other status."""
    context = ErrorContext(document_id=document_id, operation=operation)
    match status:
        case DocumentStatus.OK:
            return
        case DocumentStatus.NOT_FOUND if document_id is not None:
            raise DocumentNotFoundError(document_id, context)
        case DocumentStatus.COULD_NOT_PROCEED:
            raise BackendUnavailableError("store reported failure", operation, context=context)
        case _:
            raise InvariantViolationError(
                f"{operation} ended with status {status.value}", context,
            )
