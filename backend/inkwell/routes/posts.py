"""
Inkwell Backend: Post Route Handlers
=====================================

What:  The /posts HTTP surface.
How:   Handlers are thin: pull the claim and session from dependencies,
       call PostService, return its result. Status codes for failures come
       from the global exception handlers in main.py.

Route Inventory:
    POST   /posts/create     private  create a post
    GET    /posts/all        public   list posts, newest first
    GET    /posts/{id}       public   fetch one post
    PUT    /posts/{id}       private  edit (author only)
    DELETE /posts/{id}       private  delete (author only)
    PUT    /posts/like/{id}  private  like/unlike toggle

Ordering note: /posts/all is registered before /posts/{post_id} so that
"all" is never treated as an id.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter

from inkwell.dependencies import CurrentClaim, DbSession
from inkwell.schemas.common import ErrorResponse
from inkwell.schemas.post import MessageResponse, PostCreate, PostResponse, PostUpdate
from inkwell.services.post_service import post_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/posts", tags=["Posts"])

_UNAUTHENTICATED = {401: {"description": "Missing/invalid token or not the author", "model": ErrorResponse}}
_NOT_FOUND = {404: {"description": "Post not found", "model": ErrorResponse}}
_SERVER_ERROR = {500: {"description": "Server error", "model": ErrorResponse}}


@router.post(
    "/create",
    response_model=PostResponse,
    responses={**_UNAUTHENTICATED, **_SERVER_ERROR},
    summary="Create a new post",
)
async def create_post(payload: PostCreate, claim: CurrentClaim, db: DbSession) -> PostResponse:
    return await post_service.create_post(db=db, claim=claim, payload=payload)


@router.get(
    "/all",
    response_model=List[PostResponse],
    responses={**_SERVER_ERROR},
    summary="List all posts, newest first",
)
async def list_posts(db: DbSession) -> List[PostResponse]:
    return await post_service.list_posts(db=db)


@router.put(
    "/like/{post_id}",
    response_model=List[str],
    responses={**_UNAUTHENTICATED, **_NOT_FOUND, **_SERVER_ERROR},
    summary="Like or unlike a post",
    description=(
        "Toggles the caller's like: a second identical call undoes the first. "
        "Returns the resulting list of liker ids, newest first."
    ),
)
async def toggle_like(post_id: str, claim: CurrentClaim, db: DbSession) -> List[str]:
    return await post_service.toggle_like(db=db, claim=claim, raw_id=post_id)


@router.get(
    "/{post_id}",
    response_model=PostResponse,
    responses={**_NOT_FOUND, **_SERVER_ERROR},
    summary="Get a post by ID",
)
async def get_post(post_id: str, db: DbSession) -> PostResponse:
    """
    Args:
        post_id: Taken as a plain string, not a UUID path parameter, so that
                 a malformed id produces 404 instead of FastAPI's 422.
    """
    return await post_service.get_post(db=db, raw_id=post_id)


@router.put(
    "/{post_id}",
    response_model=PostResponse,
    responses={**_UNAUTHENTICATED, **_NOT_FOUND, **_SERVER_ERROR},
    summary="Update a post (author only)",
)
async def update_post(
    post_id: str,
    claim: CurrentClaim,
    db: DbSession,
    payload: Optional[PostUpdate] = None,
) -> PostResponse:
    return await post_service.update_post(db=db, claim=claim, raw_id=post_id, payload=payload)


@router.delete(
    "/{post_id}",
    response_model=MessageResponse,
    responses={**_UNAUTHENTICATED, **_NOT_FOUND, **_SERVER_ERROR},
    summary="Delete a post (author only)",
)
async def delete_post(post_id: str, claim: CurrentClaim, db: DbSession) -> MessageResponse:
    return await post_service.delete_post(db=db, claim=claim, raw_id=post_id)
