"""Document Routes tests — HTTP status and body for every endpoint outcome.

Tests cover:
    - GET/POST/PATCH/DELETE happy paths and JSON shapes (unset fields omitted)
    - 400 for bad ids, malformed JSON, incomplete documents, empty patches, id conflicts
    - 404 for unknown ids, including a repeated delete
    - 502/500 translation of COULD_NOT_PROCEED / IMPLEMENTATION_ERROR
    - 500 with the generic message for unhandled exceptions (no detail leaks)
    - Every error body is exactly {"error": message}
"""

import pytest
from httpx import ASGITransport, AsyncClient

from precisely.api.dependencies import get_document_access
from precisely.core.domain_types import DocumentStatus, Outcome
from precisely.main import app

FULL_BODY = {
    "title": "Contract",
    "content": {"header": "Parties", "data": "A and B"},
    "signee": "Alice",
}


async def _create(client, body=None) -> dict:
    res = await client.post("/documents", json=body or FULL_BODY)
    assert res.status_code == 201
    return res.json()


# ─── GET ─────────────────────────────────────────────────────────

async def test_get_document(client):
    created = await _create(client)
    res = await client.get(f"/documents/{created['id']}")
    assert res.status_code == 200
    assert res.json() == {"id": 0, **FULL_BODY}


async def test_get_non_numeric_id(client):
    res = await client.get("/documents/abc")
    assert res.status_code == 400
    assert res.json() == {"error": "requested id 'abc' is not a number"}


async def test_get_unknown_id(client):
    res = await client.get("/documents/7")
    assert res.status_code == 404
    assert res.json() == {"error": "could not find document with id 7"}


async def test_get_omits_unset_fields(client, seed_documents):
    await seed_documents({"id": 3, "title": "only title"})
    res = await client.get("/documents/3")
    assert res.json() == {"id": 3, "title": "only title"}


async def test_list_documents_ascending(client, seed_documents, full_record):
    await seed_documents(full_record(2), full_record(0), full_record(1))
    res = await client.get("/documents")
    assert res.status_code == 200
    assert [d["id"] for d in res.json()] == [0, 1, 2]


async def test_list_empty_collection(client):
    res = await client.get("/documents")
    assert res.status_code == 200
    assert res.json() == []


async def test_responses_are_indented(client):
    created = await _create(client)
    res = await client.get(f"/documents/{created['id']}")
    assert res.text.startswith('{\n  "id": 0')


# ─── POST ────────────────────────────────────────────────────────

async def test_create_assigns_sequential_ids(client):
    assert (await _create(client))["id"] == 0
    assert (await _create(client))["id"] == 1


async def test_create_ignores_client_id(client, seed_documents, full_record):
    await seed_documents(full_record(4))
    created = await _create(client, {**FULL_BODY, "id": 100})
    assert created["id"] == 5


async def test_create_incomplete_document(client):
    res = await client.post("/documents", json={"title": "t"})
    assert res.status_code == 400
    assert res.json() == {
        "error": "not a valid document for creation; every field except id is needed.",
    }


async def test_create_partial_content(client):
    body = {**FULL_BODY, "content": {"header": "h"}}
    res = await client.post("/documents", json=body)
    assert res.status_code == 400


@pytest.mark.parametrize("payload", [
    "{not json",
    "[]",
    '"a string"',
    '{"title": 5, "signee": "s", "content": {"header": "h", "data": "d"}}',
    '{"title": "t", "signee": "s", "content": "flat"}',
    '{"id": "3", "title": "t"}',
])
async def test_create_malformed_json(client, payload):
    res = await client.post(
        "/documents", content=payload,
        headers={"Content-Type": "application/json"},
    )
    assert res.status_code == 400
    assert res.json() == {"error": "illegal structure of json object"}


async def test_create_without_body(client):
    res = await client.post("/documents")
    assert res.status_code == 400
    assert res.json() == {"error": "illegal structure of json object"}


# ─── PATCH ───────────────────────────────────────────────────────

async def test_patch_merges_nested_field(client, seed_documents):
    await seed_documents({
        "id": 1, "title": "A", "content_header": "H",
        "content_data": "D", "signee": "S",
    })
    res = await client.patch(
        "/documents/1", json={"id": 1, "content": {"header": "H2"}},
    )
    assert res.status_code == 200
    assert res.json() == {
        "id": 1, "title": "A",
        "content": {"header": "H2", "data": "D"},
        "signee": "S",
    }


async def test_patch_without_body_id(client):
    created = await _create(client)
    res = await client.patch(f"/documents/{created['id']}", json={"signee": "Bob"})
    assert res.status_code == 200
    assert res.json()["signee"] == "Bob"
    assert res.json()["title"] == "Contract"


async def test_patch_null_fields_do_not_clear(client):
    created = await _create(client)
    res = await client.patch(
        f"/documents/{created['id']}",
        json={"title": None, "signee": "Bob", "content": None},
    )
    assert res.status_code == 200
    assert res.json() == {**FULL_BODY, "id": 0, "signee": "Bob"}


async def test_patch_id_conflict(client):
    res = await client.patch("/documents/3", json={"id": 5, "title": "t"})
    assert res.status_code == 400
    assert res.json() == {
        "error": "id in request (3) does not correspond to id in json object (5)",
    }


async def test_patch_id_conflict_wins_over_empty_patch(client):
    res = await client.patch("/documents/3", json={"id": 5})
    assert res.status_code == 400
    assert "does not correspond" in res.json()["error"]


@pytest.mark.parametrize("body", [{}, {"id": 1}, {"content": {}}])
async def test_patch_empty(client, body):
    res = await client.patch("/documents/1", json=body)
    assert res.status_code == 400
    assert res.json() == {
        "error": "not a valid document for update; at least one field except id is needed.",
    }


async def test_patch_unknown_id(client):
    res = await client.patch("/documents/9", json={"title": "t"})
    assert res.status_code == 404
    assert res.json() == {"error": "could not find document with id 9"}


async def test_patch_non_numeric_id(client):
    res = await client.patch("/documents/x1", json={"title": "t"})
    assert res.status_code == 400
    assert res.json() == {"error": "requested id 'x1' is not a number"}


async def test_patch_malformed_json(client):
    res = await client.patch(
        "/documents/1", content="{",
        headers={"Content-Type": "application/json"},
    )
    assert res.status_code == 400
    assert res.json() == {"error": "illegal structure of json object"}


# ─── DELETE ──────────────────────────────────────────────────────

async def test_delete_then_delete_again(client):
    created = await _create(client)
    first = await client.delete(f"/documents/{created['id']}")
    assert first.status_code == 204
    assert first.content == b""
    second = await client.delete(f"/documents/{created['id']}")
    assert second.status_code == 404
    assert (await client.get(f"/documents/{created['id']}")).status_code == 404


async def test_delete_non_numeric_id(client):
    res = await client.delete("/documents/1.5")
    assert res.status_code == 400


# ─── Status translation ──────────────────────────────────────────

class _StatusAccess:
    """Access double answering every call with one status."""

    def __init__(self, status: DocumentStatus):
        self.status = status

    async def get(self, document_id):
        return Outcome.fail(self.status)

    async def list_all(self):
        return Outcome.fail(self.status)

    async def create(self, document):
        return Outcome.fail(self.status)

    async def update(self, patch):
        return Outcome.fail(self.status)

    async def delete(self, document_id):
        return self.status


REQUESTS = [
    ("get", "/documents/1", None),
    ("get", "/documents", None),
    ("post", "/documents", FULL_BODY),
    ("patch", "/documents/1", {"title": "t"}),
    ("delete", "/documents/1", None),
]


@pytest.mark.parametrize("method, url, body", REQUESTS)
async def test_could_not_proceed_is_502(client, method, url, body):
    app.dependency_overrides[get_document_access] = (
        lambda: _StatusAccess(DocumentStatus.COULD_NOT_PROCEED)
    )
    kwargs = {"json": body} if body is not None else {}
    res = await client.request(method.upper(), url, **kwargs)
    assert res.status_code == 502
    assert res.json() == {"error": "external database does not respond properly"}


@pytest.mark.parametrize("method, url, body", REQUESTS)
async def test_implementation_error_is_500(client, method, url, body):
    app.dependency_overrides[get_document_access] = (
        lambda: _StatusAccess(DocumentStatus.IMPLEMENTATION_ERROR)
    )
    kwargs = {"json": body} if body is not None else {}
    res = await client.request(method.upper(), url, **kwargs)
    assert res.status_code == 500
    assert res.json() == {"error": "unexpected server state"}


@pytest.mark.parametrize("method, url, body", [
    ("get", "/documents", None),
    ("post", "/documents", FULL_BODY),
])
async def test_not_found_without_id_is_500(client, method, url, body):
    app.dependency_overrides[get_document_access] = (
        lambda: _StatusAccess(DocumentStatus.NOT_FOUND)
    )
    kwargs = {"json": body} if body is not None else {}
    res = await client.request(method.upper(), url, **kwargs)
    assert res.status_code == 500


class _ExplodingAccess:
    """Access double raising an unexpected exception on every call."""

    async def get(self, document_id):
        raise RuntimeError("secret connection string")

    async def list_all(self):
        raise RuntimeError("secret connection string")


@pytest.mark.parametrize("url", ["/documents/1", "/documents"])
async def test_unhandled_exception_is_generic_500(url):
    app.dependency_overrides[get_document_access] = lambda: _ExplodingAccess()
    try:
        async with AsyncClient(
            transport=ASGITransport(app=app, raise_app_exceptions=False),
            base_url="http://test",
        ) as c:
            res = await c.get(url)
    finally:
        app.dependency_overrides.clear()
    assert res.status_code == 500
    assert res.json() == {"error": "unexpected server state"}
    assert "secret" not in res.text
