"""
Blog API — Post Service
========================

What:  Business logic for the /blog-posts endpoints.
Who:   Called by the post route handlers.

Orchestration Flow (POST /blog-posts):
    ┌──────────┐    ┌──────────────┐    ┌────────────────┐    ┌───────────┐
    │ Required │───▶│   Schema     │───▶│ Resolve author │───▶│  Insert   │
    │  fields  │    │  validation  │    │   (400 if not) │    │   post    │
    └──────────┘    └──────────────┘    └────────────────┘    └───────────┘

Every Post query loads the author in the same SELECT (Post.author is
lazy="joined"), so serialization can always compute the display name.
"""

import logging
from typing import Any, Dict

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from blog_api.exceptions import DatabaseError, InvalidReferenceError, NotFoundError
from blog_api.models.author import Author
from blog_api.models.post import Post
from blog_api.schemas.post import (
    PostCreate,
    PostCreatedResponse,
    PostListResponse,
    PostResponse,
    PostUpdate,
)
from blog_api.validation import (
    parse_record_id,
    require_fields,
    require_matching_id,
    validate_payload,
)

logger = logging.getLogger(__name__)

INVALID_AUTHOR_ID = "Invalid author_id"


class PostService:
    """
    Business logic layer for post operations.

    Error Handling Strategy:
        Store failures are wrapped in DatabaseError (500, details logged only).
        The one exception is the author lookup during creation: a failed
        lookup means the reference could not be resolved, which is reported
        as InvalidReferenceError (400).
    """

    REQUIRED_FIELDS = ("title", "content", "author_id")

    async def list_posts(self, db: AsyncSession) -> PostListResponse:
        """Every post, oldest first, each with its author's display name."""
        try:
            result = await db.execute(select(Post).order_by(Post.created_at))
            posts = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing posts: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve posts. Please try again.",
                context={"error_type": type(e).__name__},
            )

        return PostListResponse(posts=[PostResponse.from_model(post) for post in posts])

    async def get_post(self, db: AsyncSession, post_id: str) -> PostResponse:
        """
        Retrieve a single post by id.

        Raises:
            NotFoundError: Malformed id, or no post with this id (→ 404)
            DatabaseError: Query execution failed (→ 500)
        """
        post = await self._get_post_or_404(db, post_id)
        return PostResponse.from_model(post)

    async def create_post(self, db: AsyncSession, payload: Dict[str, Any]) -> PostCreatedResponse:
        """
        Create a post for an existing author.

        Workflow Steps:
            1. Check title, content and author_id are present (first missing → 400)
            2. Validate types; title and content must be non-empty
            3. Resolve author_id; unknown, malformed or failed lookup → 400
            4. Insert the post with an empty comment list

        Raises:
            ValidationError: Missing or malformed field
            InvalidReferenceError: author_id does not resolve to an author
            DatabaseError: Insert failed
        """
        require_fields(payload, self.REQUIRED_FIELDS)
        data = validate_payload(PostCreate, payload)

        author_id = parse_record_id(data.author_id)
        if author_id is None:
            raise InvalidReferenceError(message=INVALID_AUTHOR_ID, field="author_id")

        try:
            result = await db.execute(select(Author).where(Author.id == author_id))
            author = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Author lookup failed for %s: %s", author_id, str(e))
            raise InvalidReferenceError(message=INVALID_AUTHOR_ID, field="author_id")

        if author is None:
            logger.warning("Post rejected: author %s does not exist", author_id)
            raise InvalidReferenceError(message=INVALID_AUTHOR_ID, field="author_id")

        try:
            post = Post(
                title=data.title,
                content=data.content,
                author=author,
                comments=[],
            )
            db.add(post)
            await db.flush()
            await db.commit()
        except SQLAlchemyError as e:
            logger.error("Database error creating post: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the post. Please try again.",
                context={"author_id": str(author_id)},
            )

        logger.info("Post created: %s by author %s", post.id, author.id)
        return PostCreatedResponse.from_model(post)

    async def update_post(
        self,
        db: AsyncSession,
        post_id: str,
        payload: Dict[str, Any],
    ) -> PostResponse:
        """
        Apply a partial title/content update and return the post in its new state.

        Raises:
            ValidationError: Path/body id mismatch or malformed field
            NotFoundError: No post with this id
            DatabaseError: Store failure
        """
        require_matching_id(post_id, payload.get("id"))
        data = validate_payload(PostUpdate, payload)
        changes = data.model_dump(exclude_unset=True, exclude={"id"})

        post = await self._get_post_or_404(db, post_id)

        try:
            for field, value in changes.items():
                setattr(post, field, value)
            await db.commit()
        except SQLAlchemyError as e:
            logger.error("Database error updating post %s: %s", post_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not update the post. Please try again.",
                context={"post_id": post_id},
            )

        logger.info("Post %s updated: %s", post_id, sorted(changes))
        return PostResponse.from_model(post)

    async def delete_post(self, db: AsyncSession, post_id: str) -> None:
        """
        Delete a post and its comments. Deleting an unknown id is a no-op.

        Raises:
            DatabaseError: Store failure
        """
        record_id = parse_record_id(post_id)
        if record_id is None:
            logger.info("Delete of malformed post id %r ignored", post_id)
            return

        try:
            result = await db.execute(select(Post).where(Post.id == record_id))
            post = result.scalar_one_or_none()
            if post is None:
                logger.info("Delete of unknown post %s ignored", post_id)
                return
            await db.delete(post)
            await db.commit()
        except SQLAlchemyError as e:
            logger.error("Database error deleting post %s: %s", post_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not delete the post. Please try again.",
                context={"post_id": post_id},
            )

        logger.info("Post %s deleted", post_id)

    async def _get_post_or_404(self, db: AsyncSession, post_id: str) -> Post:
        record_id = parse_record_id(post_id)
        if record_id is None:
            raise NotFoundError(resource="post", resource_id=post_id)

        try:
            result = await db.execute(select(Post).where(Post.id == record_id))
            post = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching post %s: %s", post_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the post. Please try again.",
                context={"post_id": post_id},
            )

        if post is None:
            raise NotFoundError(resource="post", resource_id=post_id)
        return post


# ── Singleton Instance ────────────────────────────────────────────────────
post_service = PostService()
