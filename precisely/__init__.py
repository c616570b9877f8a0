"""precisely — CRUD HTTP service over a single document collection.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
