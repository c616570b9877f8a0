"""Service test fixtures — async DB, store, access layer and FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use the test DB session
    - db_manager patched so the readiness probe sees the test engine

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for store semantics
    - seed_documents inserts records straight through the ORM, bypassing the
      access layer under test
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from precisely.db.base import Base
from precisely.infrastructure.database import get_db, DatabaseSessionManager
from precisely.infrastructure.document_store import DocumentStore
from precisely.models.document import DocumentRecord
from precisely.services.document_access import DocumentAccess
import precisely.infrastructure.database as db_module
from precisely.main import app


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def store(test_db):
    return DocumentStore(test_db)


@pytest.fixture
def access(store):
    return DocumentAccess(store, operation_timeout=5.0, id_retries=3)


@pytest.fixture
async def seed_documents(test_db):
    """Insert records directly; returns a callable taking column-value dicts."""

    async def _seed(*records: dict) -> None:
        for fields in records:
            test_db.add(DocumentRecord(**fields))
        await test_db.commit()

    return _seed


@pytest.fixture
def full_record():
    """Factory: column values of a complete document."""

    def _record(document_id: int, **overrides) -> dict:
        record = {
            "id": document_id,
            "title": f"Title {document_id}",
            "content_header": f"Header {document_id}",
            "content_data": f"Data {document_id}",
            "signee": f"Signee {document_id}",
        }
        record.update(overrides)
        return record

    return _record


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    fake_manager.connect_timeout = 5.0
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager
