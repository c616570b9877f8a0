"""Document ORM — flat record backing the single document collection.

Invariants:
    - id is a server-assigned BigInteger primary key (never autoincremented by the DB)
    - Nested content is stored flat: content.header -> content_header,
      content.data -> content_data
    - FIELD_COLUMNS is the single source of truth for dotted path -> column

Design Decisions:
    - Primary key doubles as the uniqueness constraint for id sequencing
    - All payload columns nullable: the record mirrors the optional-field document
"""

from sqlalchemy import BigInteger, Text
from sqlalchemy.orm import Mapped, mapped_column

from precisely.db.base import Base


class DocumentRecord(Base):
    """One stored document."""
    __tablename__ = "precisely_documents"

    id: Mapped[int] = mapped_column(
        BigInteger, primary_key=True, autoincrement=False,
    )
    title: Mapped[str | None] = mapped_column(Text, nullable=True)
    content_header: Mapped[str | None] = mapped_column(Text, nullable=True)
    content_data: Mapped[str | None] = mapped_column(Text, nullable=True)
    signee: Mapped[str | None] = mapped_column(Text, nullable=True)

    def to_document_dict(self) -> dict:
        """Nested document shape, unset fields omitted."""
        document: dict = {"id": self.id}
        if self.title is not None:
            document["title"] = self.title
        content = {
            key: val for key, val in (
                ("header", self.content_header), ("data", self.content_data),
            ) if val is not None
        }
        if content:
            document["content"] = content
        if self.signee is not None:
            document["signee"] = self.signee
        return document


FIELD_COLUMNS = {
    "id": DocumentRecord.id,
    "title": DocumentRecord.title,
    "content.header": DocumentRecord.content_header,
    "content.data": DocumentRecord.content_data,
    "signee": DocumentRecord.signee,
}
