"""Like/dislike API routes."""

import uuid

from fastapi import APIRouter, Depends

from vidshare.dependencies import get_current_user, get_optional_user, get_repository
from vidshare.models.user import User
from vidshare.repositories.sql_repository import SqlRepository
from vidshare.schemas.like import LikeRequest, LikeResponse
from vidshare.services.like_service import LikeService

router = APIRouter(prefix="/videos", tags=["likes"])


@router.put("/{video_id}/like", response_model=LikeResponse)
async def toggle_like(
    video_id: uuid.UUID,
    payload: LikeRequest,
    user: User = Depends(get_current_user),
    repo: SqlRepository = Depends(get_repository),
):
    service = LikeService(repo)
    await service.toggle_like(user.id, video_id, payload.disposition)
    return await service.get_summary(user.id, video_id)


@router.get("/{video_id}/likes", response_model=LikeResponse)
async def get_likes(
    video_id: uuid.UUID,
    user: User | None = Depends(get_optional_user),
    repo: SqlRepository = Depends(get_repository),
):
    return await LikeService(repo).get_summary(user.id if user else None, video_id)
