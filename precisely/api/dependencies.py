"""Route dependencies — builds the Document Access Layer for one request."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from precisely.config import Settings, get_settings
from precisely.infrastructure.database import get_db
from precisely.infrastructure.document_store import DocumentStore
from precisely.services.document_access import DocumentAccess


def get_document_access(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> DocumentAccess:
    return DocumentAccess(
        DocumentStore(db),
        operation_timeout=settings.store_operation_timeout_seconds,
        id_retries=settings.create_id_retries,
    )
