"""Like request/response schemas."""

from pydantic import BaseModel

from vidshare.models.like import LikeDisposition


class LikeRequest(BaseModel):
    disposition: LikeDisposition


class LikeResponse(BaseModel):
    disposition: LikeDisposition | None = None
    likes: int
    dislikes: int

    model_config = {"from_attributes": True}
