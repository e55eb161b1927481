"""
Blog API — Post Service Unit Tests
===================================

What:  Tests for PostService (list, get, create, update, delete).
How:   Uses the mock DB session with transient ORM objects as query results.

What we test:
    ✅ Posts serialize with the author's display name
    ✅ Missing/malformed ids give NotFoundError instead of a crash
    ✅ Create rejects missing fields and unresolvable authors before inserting
    ✅ Update applies title/content only and returns the new state
"""

import uuid
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import SQLAlchemyError

from blog_api.exceptions import (
    DatabaseError,
    InvalidReferenceError,
    NotFoundError,
    ValidationError,
)
from blog_api.services.post_service import PostService


class TestPostServiceRead:

    def setup_method(self):
        self.service = PostService()

    @pytest.mark.asyncio
    async def test_list_posts(self, mock_db_session, result_of, make_author, make_post):
        grace = make_author("Grace", "Hopper", "grace")
        posts = [make_post("First", "one"), make_post("Second", "two", author=grace)]
        mock_db_session.execute.return_value = result_of(posts)

        result = await self.service.list_posts(mock_db_session)

        assert [p.title for p in result.posts] == ["First", "Second"]
        assert [p.author for p in result.posts] == ["Ada Lovelace", "Grace Hopper"]

    @pytest.mark.asyncio
    async def test_list_posts_empty(self, mock_db_session, result_of):
        mock_db_session.execute.return_value = result_of([])

        result = await self.service.list_posts(mock_db_session)

        assert result.posts == []

    @pytest.mark.asyncio
    async def test_list_posts_store_failure(self, mock_db_session):
        mock_db_session.execute = AsyncMock(side_effect=SQLAlchemyError("boom"))

        with pytest.raises(DatabaseError):
            await self.service.list_posts(mock_db_session)

    @pytest.mark.asyncio
    async def test_get_post_found(self, mock_db_session, result_of, make_post):
        post = make_post("Notes", "On the Analytical Engine")
        mock_db_session.execute.return_value = result_of(post)

        result = await self.service.get_post(mock_db_session, str(post.id))

        assert result.id == post.id
        assert result.author == "Ada Lovelace"
        assert "comments" not in result.model_dump()

    @pytest.mark.asyncio
    async def test_get_post_not_found(self, mock_db_session, result_of):
        mock_db_session.execute.return_value = result_of(None)

        with pytest.raises(NotFoundError):
            await self.service.get_post(mock_db_session, str(uuid.uuid4()))

    @pytest.mark.asyncio
    async def test_get_post_malformed_id(self, mock_db_session):
        with pytest.raises(NotFoundError):
            await self.service.get_post(mock_db_session, "12345")
        mock_db_session.execute.assert_not_awaited()


class TestPostServiceCreate:

    def setup_method(self):
        self.service = PostService()

    @pytest.mark.asyncio
    async def test_create_post_success(self, assign_id_on_flush, result_of, make_author):
        db = assign_id_on_flush
        author = make_author()
        db.execute.return_value = result_of(author)

        result = await self.service.create_post(
            db, {"title": "T", "content": "C", "author_id": str(author.id)}
        )

        assert result.title == "T"
        assert result.content == "C"
        assert result.author == "Ada Lovelace"
        assert result.comments == []
        assert result.id is not None
        db.add.assert_called_once()
        db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("missing", ["title", "content", "author_id"])
    async def test_missing_field(self, mock_db_session, missing):
        payload = {"title": "T", "content": "C", "author_id": str(uuid.uuid4())}
        del payload[missing]

        with pytest.raises(ValidationError, match=f"Missing {missing} in request body"):
            await self.service.create_post(mock_db_session, payload)

        mock_db_session.execute.assert_not_awaited()
        mock_db_session.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_empty_content_rejected(self, mock_db_session):
        with pytest.raises(ValidationError):
            await self.service.create_post(
                mock_db_session, {"title": "T", "content": "", "author_id": str(uuid.uuid4())}
            )
        mock_db_session.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_author(self, mock_db_session, result_of):
        mock_db_session.execute.return_value = result_of(None)

        with pytest.raises(InvalidReferenceError, match="Invalid author_id"):
            await self.service.create_post(
                mock_db_session, {"title": "T", "content": "C", "author_id": str(uuid.uuid4())}
            )

        mock_db_session.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_malformed_author_id(self, mock_db_session):
        with pytest.raises(InvalidReferenceError, match="Invalid author_id"):
            await self.service.create_post(
                mock_db_session, {"title": "T", "content": "C", "author_id": "ada"}
            )
        mock_db_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_author_lookup_error_is_invalid_reference(self, mock_db_session):
        mock_db_session.execute = AsyncMock(side_effect=SQLAlchemyError("timeout"))

        with pytest.raises(InvalidReferenceError):
            await self.service.create_post(
                mock_db_session, {"title": "T", "content": "C", "author_id": str(uuid.uuid4())}
            )

    @pytest.mark.asyncio
    async def test_insert_failure_is_database_error(self, mock_db_session, result_of, make_author):
        author = make_author()
        mock_db_session.execute.return_value = result_of(author)
        mock_db_session.flush = AsyncMock(side_effect=SQLAlchemyError("disk full"))

        with pytest.raises(DatabaseError):
            await self.service.create_post(
                mock_db_session, {"title": "T", "content": "C", "author_id": str(author.id)}
            )


class TestPostServiceUpdateDelete:

    def setup_method(self):
        self.service = PostService()

    @pytest.mark.asyncio
    async def test_update_id_mismatch(self, mock_db_session):
        with pytest.raises(ValidationError, match="must match"):
            await self.service.update_post(
                mock_db_session, str(uuid.uuid4()), {"id": str(uuid.uuid4()), "title": "New"}
            )
        mock_db_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_returns_new_state(self, mock_db_session, result_of, make_post):
        post = make_post("Old", "Body")
        post_id = str(post.id)
        mock_db_session.execute.return_value = result_of(post)

        result = await self.service.update_post(
            mock_db_session, post_id, {"id": post_id, "title": "New", "author_id": "ignored"}
        )

        assert result.title == "New"
        assert result.content == "Body"
        assert result.author == "Ada Lovelace"
        mock_db_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_update_not_found(self, mock_db_session, result_of):
        post_id = str(uuid.uuid4())
        mock_db_session.execute.return_value = result_of(None)

        with pytest.raises(NotFoundError):
            await self.service.update_post(mock_db_session, post_id, {"id": post_id, "title": "X"})

    @pytest.mark.asyncio
    async def test_delete_post(self, mock_db_session, result_of, make_post):
        post = make_post()
        mock_db_session.execute.return_value = result_of(post)

        await self.service.delete_post(mock_db_session, str(post.id))

        mock_db_session.delete.assert_awaited_once_with(post)
        mock_db_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_delete_unknown_post_is_noop(self, mock_db_session, result_of):
        mock_db_session.execute.return_value = result_of(None)

        await self.service.delete_post(mock_db_session, str(uuid.uuid4()))

        mock_db_session.delete.assert_not_awaited()
