"""Video API routes — upload, list, get, update, stream, delete."""

import uuid

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Request, UploadFile, status
from fastapi.responses import FileResponse

from vidshare.dependencies import get_current_user, get_optional_user, get_video_service
from vidshare.models.user import User
from vidshare.models.video import Video
from vidshare.schemas.common import MessageResponse
from vidshare.schemas.video import VideoListResponse, VideoResponse, VideoUpdate
from vidshare.services.video_service import VideoService

router = APIRouter(prefix="/videos", tags=["videos"])

MEDIA_TYPES = {"mp4": "video/mp4", "mov": "video/quicktime"}


def _to_response(request: Request, video: Video) -> VideoResponse:
    # Files are only reachable through the stream route, which applies the
    # same privacy check as the metadata.
    response = VideoResponse.model_validate(video)
    response.url = str(request.app.url_path_for("stream_video", video_id=str(video.id)))
    return response


@router.post("", response_model=VideoResponse, status_code=status.HTTP_201_CREATED)
async def upload_video(
    request: Request,
    title: str = Form(""),
    description: str = Form(""),
    credits: str = Form(""),
    is_public: bool = Form(True),
    file: UploadFile | None = File(None),
    user: User = Depends(get_current_user),
    service: VideoService = Depends(get_video_service),
):
    data = await file.read() if file else b""
    video_id = await service.upload_video(
        user_id=user.id,
        title=title,
        description=description,
        credits=credits,
        is_public=is_public,
        filename=file.filename if file else None,
        data=data,
    )
    return _to_response(request, await service.get_video(user.id, video_id))


@router.get("", response_model=VideoListResponse)
async def list_videos(
    request: Request,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    owner_id: uuid.UUID | None = None,
    user: User | None = Depends(get_optional_user),
    service: VideoService = Depends(get_video_service),
):
    videos, total = await service.list_videos(user.id if user else None, owner_id, page, page_size)
    return VideoListResponse(
        items=[_to_response(request, v) for v in videos],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/{video_id}", response_model=VideoResponse)
async def get_video(
    request: Request,
    video_id: uuid.UUID,
    user: User | None = Depends(get_optional_user),
    service: VideoService = Depends(get_video_service),
):
    video = await service.get_video(user.id if user else None, video_id)
    return _to_response(request, video)


@router.patch("/{video_id}", response_model=VideoResponse)
async def update_video(
    request: Request,
    video_id: uuid.UUID,
    payload: VideoUpdate,
    user: User = Depends(get_current_user),
    service: VideoService = Depends(get_video_service),
):
    video = await service.update_video(user.id, video_id, **payload.model_dump(exclude_unset=True))
    return _to_response(request, video)


@router.get("/{video_id}/stream")
async def stream_video(
    video_id: uuid.UUID,
    user: User | None = Depends(get_optional_user),
    service: VideoService = Depends(get_video_service),
):
    path = await service.get_file_path(user.id if user else None, video_id)
    if not path:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Video file not found")
    media_type = MEDIA_TYPES.get(path.suffix.lstrip(".").lower(), "application/octet-stream")
    return FileResponse(path, media_type=media_type)


@router.delete("/{video_id}", response_model=MessageResponse)
async def delete_video(
    video_id: uuid.UUID,
    user: User = Depends(get_current_user),
    service: VideoService = Depends(get_video_service),
):
    await service.delete_video(user.id, video_id)
    return MessageResponse(message="Video deleted")
