"""
Blog API — Post and Comment SQLAlchemy Models
==============================================

What:  ORM models for the `posts` and `comments` tables.
Who:   Used by PostService (CRUD) and AuthorService (cascade delete).

Relationship Design:
    Post ──many-to-one──▶ Author   (reference by id, never embedded)
    Post ◀──one-to-many── Comment  (owned; deleted with the post)

    Post.author is loaded with a JOIN on every SELECT of Post (lazy="joined").
    A post is never serialized without its author's display name, and async
    sessions cannot lazy-load on attribute access, so eager loading is the
    only safe default here.

    Post.comments uses selectin loading: one extra IN query per batch of
    posts, which keeps the joined author load free of row duplication.
"""

import uuid
from datetime import datetime, timezone
from typing import List

from sqlalchemy import ForeignKey, Index, Integer, String, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.types import TIMESTAMP

from blog_api.database import Base
from blog_api.models.author import Author


class Post(Base):
    """
    A blog post written by one Author.

    Lifecycle:
        1. Created by POST /blog-posts once the author id resolves
        2. Title/content updated by PUT /blog-posts/{id}
        3. Deleted by DELETE /blog-posts/{id}, or in bulk when its author is deleted
    """

    __tablename__ = "posts"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)

    content: Mapped[str] = mapped_column(Text, nullable=False)

    author_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("authors.id"),
        nullable=False,
        index=True,
        comment="Author reference; checked to exist when the post is created",
    )

    # Only used to give GET /blog-posts a stable order
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    author: Mapped[Author] = relationship(lazy="joined", innerjoin=True)

    comments: Mapped[List["Comment"]] = relationship(
        back_populates="post",
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by="Comment.position",
    )

    __table_args__ = (
        Index("idx_posts_created_at", "created_at"),
    )

    @property
    def author_name(self) -> str:
        """The resolved author's display name."""
        return self.author.full_name

    def __repr__(self) -> str:
        return f"<Post(id={self.id}, title='{self.title}')>"


class Comment(Base):
    """A comment on a post; `position` keeps the sequence order."""

    __tablename__ = "comments"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    post_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    position: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default=text("0"),
    )

    content: Mapped[str] = mapped_column(Text, nullable=False)

    post: Mapped[Post] = relationship(back_populates="comments")

    def __repr__(self) -> str:
        return f"<Comment(id={self.id}, post_id={self.post_id})>"
