"""Document Schemas — Pydantic models for the document JSON codec at the API boundary.

Invariants:
    - Every field is optional at the type level; completeness is checked in core/
    - Unset fields stay None on input and are omitted on output (exclude_none)
    - Strings must be JSON strings and ids JSON integers, no lax coercion

Design Decisions:
    - One model for create, patch and response: the three share the same shape,
      only the completeness rules differ
    - StrictStr/StrictInt over model-wide strict mode: nested objects still
      validate from plain dicts
"""

from pydantic import BaseModel, StrictInt, StrictStr


class DocumentContent(BaseModel):
    """Nested body of a document. Header and data are independently optional."""
    header: StrictStr | None = None
    data: StrictStr | None = None


class Document(BaseModel):
    """Single domain entity: id, title, content{header, data}, signee."""
    id: StrictInt | None = None
    title: StrictStr | None = None
    content: DocumentContent | None = None
    signee: StrictStr | None = None


class ErrorResponse(BaseModel):
    """Error envelope returned for every non-2xx response."""
    error: str
