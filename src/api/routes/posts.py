"""Post and reply routes.

Reads are open to any logged-in identity. Edits and deletes are allowed to
the author and to admins; anyone else gets 403, a missing record 404.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from api.routes.auth import get_current_identity
from core.dependencies import ForumServiceDep
from core.exceptions import (
    ContentValidationError,
    ForumError,
    ParentNotFoundError,
    PermissionDeniedError,
    PostNotFoundError,
    ReplyNotFoundError,
    StoreUnavailableError,
)
from schemas.content import ContentRequest, Post, PostThread, Reply
from schemas.user import Identity

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Posts"])


def _to_http(exc: ForumError) -> HTTPException:
    if isinstance(exc, (PostNotFoundError, ReplyNotFoundError, ParentNotFoundError)):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, PermissionDeniedError):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc))
    if isinstance(exc, ContentValidationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    if isinstance(exc, StoreUnavailableError):
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Content store unavailable.",
        )
    logger.error("Unhandled forum error: %s", exc)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.get("/posts", response_model=List[Post], summary="List posts")
def list_posts(
    forum: ForumServiceDep,
    identity: Identity = Depends(get_current_identity),
) -> List[Post]:
    return forum.list_posts()


@router.post("/posts", response_model=Post, status_code=status.HTTP_201_CREATED, summary="Create a post")
def create_post(
    req: ContentRequest,
    forum: ForumServiceDep,
    identity: Identity = Depends(get_current_identity),
) -> Post:
    try:
        return forum.create_post(identity, req.content)
    except ForumError as exc:
        raise _to_http(exc)


@router.get("/posts/{post_id}", response_model=PostThread, summary="Read a post and its replies")
def get_post(
    post_id: int,
    forum: ForumServiceDep,
    identity: Identity = Depends(get_current_identity),
) -> PostThread:
    try:
        return forum.get_thread(post_id)
    except ForumError as exc:
        raise _to_http(exc)


@router.patch("/posts/{post_id}", response_model=Post, summary="Edit a post")
def edit_post(
    post_id: int,
    req: ContentRequest,
    forum: ForumServiceDep,
    identity: Identity = Depends(get_current_identity),
) -> Post:
    try:
        return forum.edit_post(identity, post_id, req.content)
    except ForumError as exc:
        raise _to_http(exc)


@router.delete("/posts/{post_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a post")
def delete_post(
    post_id: int,
    forum: ForumServiceDep,
    identity: Identity = Depends(get_current_identity),
) -> None:
    """Delete a post; its replies are deleted with it."""
    try:
        forum.delete_post(identity, post_id)
    except ForumError as exc:
        raise _to_http(exc)


@router.get("/posts/{post_id}/replies", response_model=List[Reply], summary="List replies of a post")
def list_replies(
    post_id: int,
    forum: ForumServiceDep,
    identity: Identity = Depends(get_current_identity),
) -> List[Reply]:
    try:
        return forum.list_replies(post_id)
    except ForumError as exc:
        raise _to_http(exc)


@router.post(
    "/posts/{post_id}/replies",
    response_model=Reply,
    status_code=status.HTTP_201_CREATED,
    summary="Reply to a post",
)
def create_reply(
    post_id: int,
    req: ContentRequest,
    forum: ForumServiceDep,
    identity: Identity = Depends(get_current_identity),
) -> Reply:
    try:
        return forum.create_reply(identity, post_id, req.content)
    except ForumError as exc:
        raise _to_http(exc)


@router.patch("/replies/{reply_id}", response_model=Reply, summary="Edit a reply")
def edit_reply(
    reply_id: int,
    req: ContentRequest,
    forum: ForumServiceDep,
    identity: Identity = Depends(get_current_identity),
) -> Reply:
    try:
        return forum.edit_reply(identity, reply_id, req.content)
    except ForumError as exc:
        raise _to_http(exc)


@router.delete("/replies/{reply_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a reply")
def delete_reply(
    reply_id: int,
    forum: ForumServiceDep,
    identity: Identity = Depends(get_current_identity),
) -> None:
    try:
        forum.delete_reply(identity, reply_id)
    except ForumError as exc:
        raise _to_http(exc)
