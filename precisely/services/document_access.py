"""Document Access — CRUD intents against the store, normalized to DocumentStatus outcomes.

Invariants:
    - Every public operation returns exactly one DocumentStatus (wrapped in Outcome
      where a value comes back); store exceptions never escape
    - Every store call is bounded by operation_timeout; expiry -> COULD_NOT_PROCEED
    - next_id = max(id) + 1, or 0 on an empty collection
    - create overwrites any client id and returns the re-fetched record
    - update writes only the sparse field-set of the patch; zero matched -> NOT_FOUND
    - A re-fetch miss right after a mutation is IMPLEMENTATION_ERROR, not NOT_FOUND

Design Decisions:
    - next_id is read-then-increment; the primary key rejects a duplicate and
      create re-reads the maximum up to id_retries times before giving up
    - Outcome values over exceptions at this boundary: routes switch on status
"""

import asyncio
import logging
from typing import Awaitable, TypeVar

from pydantic import ValidationError

from precisely.core.domain_types import DocumentId, DocumentStatus, Outcome
from precisely.core.errors import (
    BackendUnavailableError, DuplicateIdError, ErrorCategory,
)
from precisely.core.sparse_fields import to_sparse_field_set
from precisely.infrastructure.document_store import (
    ASCENDING, DESCENDING, DocumentStore,
)
from precisely.models.document import DocumentRecord
from precisely.schemas.document import Document

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _decode(record: DocumentRecord) -> Document:
    return Document.model_validate(record.to_document_dict())


class DocumentAccess:
    """Document Access Layer bound to one store handle."""

    def __init__(
        self,
        store: DocumentStore,
        operation_timeout: float = 10.0,
        id_retries: int = 3,
    ):
        self._store = store
        self._timeout = operation_timeout
        self._id_retries = id_retries

    async def get(self, document_id: DocumentId) -> Outcome[Document]:
        """Look up one document by id."""
        try:
            record = await self._bounded(
                "find_one", self._store.find_one({"id": document_id}),
            )
        except BackendUnavailableError as e:
            return self._could_not_proceed(e, document_id)
        if record is None:
            return Outcome.fail(DocumentStatus.NOT_FOUND)
        try:
            return Outcome.ok(_decode(record))
        except ValidationError as e:
            logger.error(
                f"Stored document {document_id} failed to decode: {e}",
                extra={"document_id": document_id, "operation": "decode"},
            )
            return Outcome.fail(DocumentStatus.COULD_NOT_PROCEED)

    async def list_all(self) -> Outcome[list[Document]]:
        """All documents, ascending by id."""
        try:
            records = await self._bounded(
                "find", self._store.find(sort=[("id", ASCENDING)]),
            )
        except BackendUnavailableError as e:
            return self._could_not_proceed(e)
        try:
            return Outcome.ok([_decode(r) for r in records])
        except ValidationError as e:
            logger.error(
                f"Stored documents failed to decode: {e}",
                extra={"operation": "decode"},
            )
            return Outcome.fail(DocumentStatus.COULD_NOT_PROCEED)

    async def next_id(self) -> DocumentId:
        """Highest stored id + 1, or 0 for an empty collection.

        Raises BackendUnavailableError when the store cannot answer.
        """
        record = await self._bounded(
            "find_max_id", self._store.find_one(sort=[("id", DESCENDING)]),
        )
        if record is None:
            return DocumentId(0)
        return DocumentId(record.id + 1)

    async def create(self, document: Document) -> Outcome[Document]:
        """Insert `document` under a fresh id and return what the store now holds."""
        for attempt in range(self._id_retries + 1):
            try:
                new_id = await self.next_id()
            except BackendUnavailableError as e:
                return self._could_not_proceed(e)

            fields = to_sparse_field_set(
                document.model_copy(update={"id": new_id}),
            )
            try:
                await self._bounded("insert", self._store.insert_one(fields))
            except DuplicateIdError:
                logger.warning(
                    f"Id {new_id} taken by a concurrent create "
                    f"(attempt {attempt + 1})",
                    extra={"document_id": new_id, "operation": "insert"},
                )
                continue
            except BackendUnavailableError as e:
                return self._could_not_proceed(e, new_id)

            logger.info(
                f"Created document {new_id}",
                extra={"document_id": new_id, "operation": "insert"},
            )
            return await self._internal_get(new_id)

        logger.error(
            f"Gave up allocating an id after {self._id_retries + 1} attempts",
            extra={"operation": "insert"},
        )
        return Outcome.fail(DocumentStatus.COULD_NOT_PROCEED)

    async def update(self, patch: Document) -> Outcome[Document]:
        """Merge the set fields of `patch` onto the stored document with patch.id."""
        if patch.id is None:
            logger.error(
                "update called without an id", extra={"operation": "update"},
            )
            return Outcome.fail(DocumentStatus.IMPLEMENTATION_ERROR)
        document_id = DocumentId(patch.id)

        fields = to_sparse_field_set(patch, exclude=frozenset({"id"}))
        if not fields:
            return await self.get(document_id)

        try:
            matched = await self._bounded(
                "update", self._store.update_one({"id": document_id}, fields),
            )
        except ValueError as e:
            logger.error(
                f"Patch for {document_id} has no column mapping: {e}",
                extra={"document_id": document_id, "operation": "update"},
            )
            return Outcome.fail(DocumentStatus.IMPLEMENTATION_ERROR)
        except BackendUnavailableError as e:
            return self._could_not_proceed(e, document_id)

        if matched == 0:
            return Outcome.fail(DocumentStatus.NOT_FOUND)

        logger.info(
            f"Updated document {document_id}: {sorted(fields)}",
            extra={"document_id": document_id, "operation": "update"},
        )
        return await self._internal_get(document_id)

    async def delete(self, document_id: DocumentId) -> DocumentStatus:
        """Remove the document with `document_id`."""
        try:
            deleted = await self._bounded(
                "delete", self._store.delete_one({"id": document_id}),
            )
        except BackendUnavailableError as e:
            return self._could_not_proceed(e, document_id).status

        if deleted == 0:
            return DocumentStatus.NOT_FOUND

        logger.info(
            f"Deleted document {document_id}",
            extra={"document_id": document_id, "operation": "delete"},
        )
        return DocumentStatus.OK

    async def _internal_get(self, document_id: DocumentId) -> Outcome[Document]:
        """get() for an id that must exist; a miss is a server-side bug."""
        outcome = await self.get(document_id)
        match outcome.status:
            case DocumentStatus.OK | DocumentStatus.COULD_NOT_PROCEED:
                return outcome
            case _:
                logger.error(
                    f"Document {document_id} missing right after mutation "
                    f"(status={outcome.status.value})",
                    extra={"document_id": document_id, "status": outcome.status.value},
                )
                return Outcome.fail(DocumentStatus.IMPLEMENTATION_ERROR)

    async def _bounded(self, operation: str, call: Awaitable[T]) -> T:
        """Await a store call within the operation timeout."""
        try:
            return await asyncio.wait_for(call, timeout=self._timeout)
        except asyncio.TimeoutError:
            raise BackendUnavailableError(
                f"no answer within {self._timeout}s", operation,
                ErrorCategory.TIMEOUT,
            )

    def _could_not_proceed(
        self, error: BackendUnavailableError, document_id: int | None = None,
    ) -> Outcome:
        logger.error(
            f"Store {error.operation} failed: {error.reason}",
            extra={
                "document_id": document_id,
                "operation": error.operation,
                "error_code": error.code,
            },
        )
        return Outcome.fail(DocumentStatus.COULD_NOT_PROCEED)
