"""Comment request/response schemas."""

import uuid
from datetime import datetime

from pydantic import BaseModel


class CommentCreate(BaseModel):
    text: str = ""


class CommentResponse(BaseModel):
    id: uuid.UUID
    video_id: uuid.UUID
    user_id: uuid.UUID
    text: str
    created_at: datetime

    model_config = {"from_attributes": True}


class CommentListResponse(BaseModel):
    items: list[CommentResponse]
    total: int
