"""
Blog API — Author Service
==========================

What:  Business logic for the /authors endpoints.
Who:   Called by the author route handlers.

Uniqueness of userName:
    Checked with a SELECT before every insert and every rename. Two requests
    racing through that check can both pass; the unique index on
    authors.user_name then rejects the second write, and the resulting
    IntegrityError is reported as the same ConflictError.

Cascade delete:
    Deleting an author deletes the comments of its posts, its posts, then
    the author, in one transaction committed before the response is sent.
    If any statement or the COMMIT fails, the transaction rolls back (see
    get_db_session) and nothing is removed.
"""

import logging
import uuid
from typing import Any, Dict, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from blog_api.exceptions import ConflictError, DatabaseError, NotFoundError
from blog_api.models.author import Author
from blog_api.models.post import Comment, Post
from blog_api.schemas.author import AuthorCreate, AuthorResponse, AuthorUpdate
from blog_api.validation import (
    parse_record_id,
    require_fields,
    require_matching_id,
    validate_payload,
)

logger = logging.getLogger(__name__)

USER_NAME_TAKEN = "User name already taken"


class AuthorService:
    """Business logic layer for author operations."""

    REQUIRED_FIELDS = ("firstName", "lastName", "userName")

    async def create_author(self, db: AsyncSession, payload: Dict[str, Any]) -> AuthorResponse:
        """
        Create an author after checking required fields and user name uniqueness.

        Raises:
            ValidationError: A required field is missing or malformed
            ConflictError: Another author already has this userName
            DatabaseError: Store failure
        """
        require_fields(payload, self.REQUIRED_FIELDS)
        data = validate_payload(AuthorCreate, payload)

        try:
            if await self._user_name_taken(db, data.user_name):
                raise ConflictError(message=USER_NAME_TAKEN, field="userName")

            author = Author(
                first_name=data.first_name,
                last_name=data.last_name,
                user_name=data.user_name,
            )
            db.add(author)
            await db.flush()
            await db.commit()
        except ConflictError:
            logger.warning("User name already taken: %s", data.user_name)
            raise
        except IntegrityError:
            logger.warning("User name taken concurrently: %s", data.user_name)
            raise ConflictError(message=USER_NAME_TAKEN, field="userName")
        except SQLAlchemyError as e:
            logger.error("Database error creating author: %s", str(e), exc_info=True)
            raise DatabaseError(context={"error_type": type(e).__name__})

        logger.info("Author created: %s (%s)", author.id, author.user_name)
        return AuthorResponse.from_model(author)

    async def update_author(
        self,
        db: AsyncSession,
        author_id: str,
        payload: Dict[str, Any],
    ) -> AuthorResponse:
        """
        Apply a partial update and return the author as it is after the update.

        Only firstName, lastName and userName are updatable. A new userName
        is checked against every other author; keeping your own is allowed.

        Raises:
            ValidationError: Path/body id mismatch or malformed field
            NotFoundError: No author with this id
            ConflictError: The new userName belongs to another author
            DatabaseError: Store failure
        """
        require_matching_id(author_id, payload.get("id"))
        data = validate_payload(AuthorUpdate, payload)
        changes = data.model_dump(exclude_unset=True, exclude={"id"})

        record_id = parse_record_id(author_id)
        if record_id is None:
            raise NotFoundError(resource="author", resource_id=author_id)

        try:
            result = await db.execute(select(Author).where(Author.id == record_id))
            author = result.scalar_one_or_none()
            if author is None:
                raise NotFoundError(resource="author", resource_id=author_id)

            new_user_name = changes.get("user_name")
            if new_user_name is not None and await self._user_name_taken(
                db, new_user_name, exclude_id=author.id
            ):
                raise ConflictError(message=USER_NAME_TAKEN, field="userName")

            for field, value in changes.items():
                setattr(author, field, value)
            await db.commit()
        except (NotFoundError, ConflictError):
            raise
        except IntegrityError:
            logger.warning("User name taken concurrently: %s", changes.get("user_name"))
            raise ConflictError(message=USER_NAME_TAKEN, field="userName")
        except SQLAlchemyError as e:
            logger.error("Database error updating author %s: %s", author_id, str(e), exc_info=True)
            raise DatabaseError(context={"author_id": author_id})

        logger.info("Author %s updated: %s", author_id, sorted(changes))
        return AuthorResponse.from_model(author)

    async def delete_author(self, db: AsyncSession, author_id: str) -> None:
        """
        Delete an author together with every post that references it.

        Deleting an unknown id is not an error: there is nothing left to remove.

        Raises:
            DatabaseError: A deletion or the commit failed (the transaction rolls back)
        """
        record_id = parse_record_id(author_id)
        if record_id is None:
            logger.info("Delete of malformed author id %r ignored", author_id)
            return

        post_ids = select(Post.id).where(Post.author_id == record_id)
        try:
            await db.execute(
                delete(Comment)
                .where(Comment.post_id.in_(post_ids))
                .execution_options(synchronize_session=False)
            )
            posts_result = await db.execute(
                delete(Post)
                .where(Post.author_id == record_id)
                .execution_options(synchronize_session=False)
            )
            await db.execute(
                delete(Author)
                .where(Author.id == record_id)
                .execution_options(synchronize_session=False)
            )
            await db.commit()
        except SQLAlchemyError as e:
            logger.error("Database error deleting author %s: %s", author_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not delete the author. Nothing was removed.",
                context={"author_id": author_id},
            )

        logger.info("Author %s deleted with %s post(s)", author_id, posts_result.rowcount)

    async def _user_name_taken(
        self,
        db: AsyncSession,
        user_name: str,
        exclude_id: Optional[uuid.UUID] = None,
    ) -> bool:
        query = select(Author.id).where(Author.user_name == user_name)
        if exclude_id is not None:
            query = query.where(Author.id != exclude_id)
        result = await db.execute(query)
        return result.scalar_one_or_none() is not None


# ── Singleton Instance ────────────────────────────────────────────────────
author_service = AuthorService()
