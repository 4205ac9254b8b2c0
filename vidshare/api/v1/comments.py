"""Comment API routes."""

import uuid

from fastapi import APIRouter, Depends, status

from vidshare.dependencies import get_current_user, get_optional_user, get_repository
from vidshare.models.user import User
from vidshare.repositories.sql_repository import SqlRepository
from vidshare.schemas.comment import CommentCreate, CommentListResponse, CommentResponse
from vidshare.schemas.common import MessageResponse
from vidshare.services.comment_service import CommentService

router = APIRouter(tags=["comments"])


@router.get("/videos/{video_id}/comments", response_model=CommentListResponse)
async def list_comments(
    video_id: uuid.UUID,
    user: User | None = Depends(get_optional_user),
    repo: SqlRepository = Depends(get_repository),
):
    comments = await CommentService(repo).list_comments(user.id if user else None, video_id)
    return CommentListResponse(
        items=[CommentResponse.model_validate(c) for c in comments],
        total=len(comments),
    )


@router.post(
    "/videos/{video_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_comment(
    video_id: uuid.UUID,
    payload: CommentCreate,
    user: User = Depends(get_current_user),
    repo: SqlRepository = Depends(get_repository),
):
    return await CommentService(repo).add_comment(user.id, video_id, payload.text)


@router.delete("/comments/{comment_id}", response_model=MessageResponse)
async def delete_comment(
    comment_id: uuid.UUID,
    user: User = Depends(get_current_user),
    repo: SqlRepository = Depends(get_repository),
):
    await CommentService(repo).delete_comment(user.id, comment_id)
    return MessageResponse(message="Comment deleted")
