"""Document Routes — HTTP surface of the document collection.

Invariants:
    - Path ids are parsed by parse_identifier (400 on anything non-integer)
    - Malformed JSON never reaches a handler (RequestValidationError -> 400)
    - PATCH checks id agreement before patch validity: a mismatched id is
      always reported as a conflict
    - Every DocumentStatus goes through raise_for_status: exactly one response

Design Decisions:
    - Path parameter typed as str so the id error names the raw value
    - response_model_exclude_none: unset document fields are omitted
"""

import logging

from fastapi import APIRouter, Depends, Response, status

from precisely.api.dependencies import get_document_access
from precisely.api.status_mapping import raise_for_status
from precisely.core.errors import EmptyPatchError, IncompleteDocumentError
from precisely.core.validate_document import (
    is_complete_document, is_valid_patch_document, parse_identifier,
    reconcile_id,
)
from precisely.schemas.document import Document, ErrorResponse
from precisely.services.document_access import DocumentAccess

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/documents", tags=["documents"],
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
)


@router.get(
    "/{document_id}", response_model=Document,
    response_model_exclude_none=True,
)
async def get_document(
    document_id: str,
    access: DocumentAccess = Depends(get_document_access),
):
    """Read a single document by id."""
    doc_id = parse_identifier(document_id)
    outcome = await access.get(doc_id)
    raise_for_status(outcome.status, doc_id, "get")
    return outcome.value


@router.get(
    "", response_model=list[Document],
    response_model_exclude_none=True,
)
async def list_documents(
    access: DocumentAccess = Depends(get_document_access),
):
    """Read all documents, ascending by id."""
    outcome = await access.list_all()
    raise_for_status(outcome.status, None, "list")
    return outcome.value


@router.post(
    "", response_model=Document,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_document(
    body: Document,
    access: DocumentAccess = Depends(get_document_access),
):
    """Create a document; every field except id is required, id is server-assigned."""
    if not is_complete_document(body):
        raise IncompleteDocumentError()
    outcome = await access.create(body)
    raise_for_status(outcome.status, None, "create")
    return outcome.value


@router.patch(
    "/{document_id}", response_model=Document,
    response_model_exclude_none=True,
)
async def update_document(
    document_id: str,
    body: Document,
    access: DocumentAccess = Depends(get_document_access),
):
    """Merge the provided fields onto a stored document."""
    doc_id = parse_identifier(document_id)
    patch = reconcile_id(doc_id, body)
    if not is_valid_patch_document(patch):
        raise EmptyPatchError()
    outcome = await access.update(patch)
    raise_for_status(outcome.status, doc_id, "update")
    return outcome.value


@router.delete(
    "/{document_id}", status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def delete_document(
    document_id: str,
    access: DocumentAccess = Depends(get_document_access),
):
    """Remove a document permanently."""
    doc_id = parse_identifier(document_id)
    result = await access.delete(doc_id)
    raise_for_status(result, doc_id, "delete")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
