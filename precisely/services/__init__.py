"""Services Layer — the Document Access Layer between routes and the store.

Invariants:
    - CRUD operations return DocumentStatus outcomes; they never raise to routes
"""
