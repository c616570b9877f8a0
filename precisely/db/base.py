"""SQLAlchemy Declarative Base — shared base class for the document record model.

Invariants:
    - DocumentRecord inherits from Base
    - Base.metadata is what create_tables_on_startup materializes

Design Decisions:
    - Separate file for Base: models and the session manager both import it
      without a cycle
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all precisely ORM models."""
    pass
