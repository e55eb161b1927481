"""
Blog API — Post Schemas
========================

What:  Request and response contracts for the /blog-posts endpoints.

Serialization rule:
    A post always leaves the API with `author` flattened to the author's
    display name ("<firstName> <lastName>"), computed from the loaded Author
    row at read time. The raw author id is never exposed.
"""

import uuid
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from blog_api.models.post import Comment, Post


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class PostCreate(BaseModel):
    """Body of POST /blog-posts (presence already checked by require_fields)."""
    title: str = Field(min_length=1, max_length=255)
    content: str = Field(min_length=1)
    author_id: str = Field(description="Id of an existing author")


class PostUpdate(BaseModel):
    """
    Body of PUT /blog-posts/{id}.

    Only title and content are updatable; any other keys are ignored.
    """
    id: str
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    content: Optional[str] = Field(default=None, min_length=1)

    @field_validator("title", "content")
    @classmethod
    def reject_null(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("must not be null")
        return v


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class CommentResponse(BaseModel):
    content: str

    @classmethod
    def from_model(cls, comment: Comment) -> "CommentResponse":
        return cls(content=comment.content)


class PostResponse(BaseModel):
    """
    What:  Public representation of a post.
    Who:   Returned by GET /blog-posts (as list items), GET and PUT /blog-posts/{id}.
    """
    id: uuid.UUID = Field(description="Unique post identifier (UUID)")
    title: str
    content: str
    author: str = Field(description="Author display name, e.g. 'Ada Lovelace'")

    @classmethod
    def from_model(cls, post: Post) -> "PostResponse":
        return cls(
            id=post.id,
            title=post.title,
            content=post.content,
            author=post.author_name,
        )


class PostCreatedResponse(PostResponse):
    """
    What:  Response of POST /blog-posts (201).
    Why:   Creation also echoes the comment sequence (empty for a new post).
    """
    comments: List[CommentResponse] = Field(default_factory=list)

    @classmethod
    def from_model(cls, post: Post) -> "PostCreatedResponse":
        return cls(
            id=post.id,
            title=post.title,
            content=post.content,
            author=post.author_name,
            comments=[CommentResponse.from_model(c) for c in post.comments],
        )


class PostListResponse(BaseModel):
    """Wrapper for GET /blog-posts: `{"posts": [...]}`."""
    posts: List[PostResponse]
