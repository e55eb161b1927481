"""
Blog API — Blog Post Route Handlers
====================================

What:  Handles /blog-posts (list, create) and /blog-posts/{post_id} (get, update, delete).
How:   Bodies arrive as raw JSON objects so that a missing field produces
       "Missing <field> in request body" from the validation layer rather
       than FastAPI's generic 422.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from blog_api.database import get_db_session
from blog_api.schemas.common import ErrorResponse
from blog_api.schemas.post import PostCreatedResponse, PostListResponse, PostResponse
from blog_api.services.post_service import post_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/blog-posts", tags=["Blog Posts"])


@router.get(
    "",
    response_model=PostListResponse,
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List all blog posts",
)
async def list_posts(db: AsyncSession = Depends(get_db_session)) -> PostListResponse:
    return await post_service.list_posts(db)


@router.get(
    "/{post_id}",
    response_model=PostResponse,
    responses={
        404: {"description": "Post not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Get a single blog post by ID",
)
async def get_post(post_id: str, db: AsyncSession = Depends(get_db_session)) -> PostResponse:
    return await post_service.get_post(db, post_id)


@router.post(
    "",
    status_code=201,
    response_model=PostCreatedResponse,
    responses={
        400: {"description": "Missing field or invalid author_id", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Create a blog post",
    description="Requires title, content and the author_id of an existing author.",
)
async def create_post(
    payload: Dict[str, Any] = Body(default={}),
    db: AsyncSession = Depends(get_db_session),
) -> PostCreatedResponse:
    return await post_service.create_post(db, payload)


@router.put(
    "/{post_id}",
    response_model=PostResponse,
    responses={
        400: {"description": "Path and body id mismatch", "model": ErrorResponse},
        404: {"description": "Post not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Update a blog post's title and/or content",
)
async def update_post(
    post_id: str,
    payload: Dict[str, Any] = Body(default={}),
    db: AsyncSession = Depends(get_db_session),
) -> PostResponse:
    return await post_service.update_post(db, post_id, payload)


@router.delete(
    "/{post_id}",
    status_code=204,
    response_class=Response,
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="Delete a blog post",
)
async def delete_post(post_id: str, db: AsyncSession = Depends(get_db_session)) -> Response:
    await post_service.delete_post(db, post_id)
    return Response(status_code=204)
