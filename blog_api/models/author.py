"""
Blog API — Author SQLAlchemy Model
===================================

What:  ORM model representing the `authors` table.
Who:   Used by AuthorService for CRUD and by PostService to resolve post authors.

Table Design Rationale:
    - UUID primary key: non-sequential, generated in Python so it works on
      both PostgreSQL and the SQLite test database
    - user_name: unique index; the service checks before writing, the index
      catches the race between two concurrent checks
    - No posts relationship: deleting an author removes its posts with a
      bulk DELETE in AuthorService, not through ORM cascades
"""

import uuid

from sqlalchemy import String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from blog_api.database import Base


class Author(Base):
    """A post author, addressed publicly by `userName`."""

    __tablename__ = "authors"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    first_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Given name, first half of the display name",
    )

    last_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Family name, second half of the display name",
    )

    user_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        unique=True,
        index=True,
        comment="Public handle; unique across all authors",
    )

    @property
    def full_name(self) -> str:
        """Display name used wherever an author is shown: "<first> <last>"."""
        return f"{self.first_name} {self.last_name}"

    def __repr__(self) -> str:
        return f"<Author(id={self.id}, user_name='{self.user_name}')>"
