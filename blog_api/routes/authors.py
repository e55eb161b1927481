"""
Blog API — Author Route Handlers
=================================

What:  Handles POST /authors and PUT/DELETE /authors/{author_id}.

DELETE cascades: every post written by the author is removed in the same
transaction as the author itself.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from blog_api.database import get_db_session
from blog_api.schemas.author import AuthorResponse
from blog_api.schemas.common import ErrorResponse
from blog_api.services.author_service import author_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/authors", tags=["Authors"])


@router.post(
    "",
    status_code=201,
    response_model=AuthorResponse,
    responses={
        400: {"description": "Missing field or user name already taken", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Create an author",
)
async def create_author(
    payload: Dict[str, Any] = Body(default={}),
    db: AsyncSession = Depends(get_db_session),
) -> AuthorResponse:
    return await author_service.create_author(db, payload)


@router.put(
    "/{author_id}",
    response_model=AuthorResponse,
    responses={
        400: {"description": "Id mismatch or user name already taken", "model": ErrorResponse},
        404: {"description": "Author not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Update an author",
)
async def update_author(
    author_id: str,
    payload: Dict[str, Any] = Body(default={}),
    db: AsyncSession = Depends(get_db_session),
) -> AuthorResponse:
    return await author_service.update_author(db, author_id, payload)


@router.delete(
    "/{author_id}",
    status_code=204,
    response_class=Response,
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="Delete an author and all of their posts",
)
async def delete_author(author_id: str, db: AsyncSession = Depends(get_db_session)) -> Response:
    await author_service.delete_author(db, author_id)
    return Response(status_code=204)
