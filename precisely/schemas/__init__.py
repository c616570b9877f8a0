"""Pydantic Schemas — the document JSON codec at the API boundary.

Invariants:
    - Schemas validate at system boundary (request bodies, responses)
    - Separate from models/: schemas are API contracts, models are persistence
"""
