"""Document Validation — gates malformed or incomplete requests before they reach the store.

Invariants:
    - parse_identifier accepts only an optional sign followed by ASCII digits,
      within the signed 64-bit range
    - Create requires every field except id; patch requires at least one
    - A body id on patch must equal the path id; absent body ids are filled in
    - Pure functions: no IO, no async, no DB

Design Decisions:
    - Predicates return bool, reconcile/parse raise ClientInputError subclasses:
      routes turn predicate failures into the matching error themselves
"""

import re

from precisely.core.domain_types import DocumentId
from precisely.core.errors import BadIdError, IdConflictError
from precisely.schemas.document import Document

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")
_MIN_ID = -(2 ** 63)
_MAX_ID = 2 ** 63 - 1


def parse_identifier(raw: str) -> DocumentId:
    """Parse a path-supplied id. Raises BadIdError naming the raw value."""
    if not _INTEGER_PATTERN.fullmatch(raw):
        raise BadIdError(raw)
    value = int(raw)
    if not _MIN_ID <= value <= _MAX_ID:
        raise BadIdError(raw)
    return DocumentId(value)


def is_complete_document(document: Document) -> bool:
    """True iff title, content.header, content.data and signee are all set."""
    if document.content is None:
        return False
    return (
        document.title is not None
        and document.content.header is not None
        and document.content.data is not None
        and document.signee is not None
    )


def is_valid_patch_document(document: Document) -> bool:
    """True iff at least one field other than id is set."""
    has_content = document.content is not None and (
        document.content.header is not None or document.content.data is not None
    )
    return has_content or document.title is not None or document.signee is not None


def reconcile_id(path_id: DocumentId, patch: Document) -> Document:
    """Return the patch carrying path_id. Raises IdConflictError on mismatch."""
    if patch.id is None:
        return patch.model_copy(update={"id": path_id})
    if patch.id != path_id:
        raise IdConflictError(path_id, patch.id)
    return patch
