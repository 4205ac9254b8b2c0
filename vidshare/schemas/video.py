"""Video request/response schemas."""

import uuid
from datetime import datetime

from pydantic import BaseModel


class VideoResponse(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    title: str
    description: str
    credits: str
    is_public: bool
    file_size: int
    published_at: datetime
    url: str | None = None

    model_config = {"from_attributes": True}


class VideoUpdate(BaseModel):
    title: str | None = None
    description: str | None = None
    credits: str | None = None
    is_public: bool | None = None


class VideoListResponse(BaseModel):
    items: list[VideoResponse]
    total: int
    page: int
    page_size: int
