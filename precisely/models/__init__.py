"""ORM Models — SQLAlchemy declarative models for stored entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - DocumentRecord is the only table: one flat record per document

Design Decisions:
    - Imported here so Base.metadata knows every table before create_all runs
"""

from precisely.models.document import DocumentRecord  # noqa: F401
