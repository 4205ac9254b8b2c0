"""Like/dislike toggling."""

import logging
import uuid
from dataclasses import dataclass

from vidshare.domain.ports import PersistencePort
from vidshare.models.like import LikeDisposition

logger = logging.getLogger(__name__)


@dataclass
class LikeSummary:
    disposition: LikeDisposition | None
    likes: int
    dislikes: int


class LikeService:
    def __init__(self, repo: PersistencePort):
        self.repo = repo

    async def toggle_like(
        self,
        user_id: uuid.UUID,
        video_id: uuid.UUID,
        disposition: LikeDisposition,
    ) -> LikeDisposition | None:
        """
        none     + like -> liked      none     + dislike -> disliked
        liked    + like -> none       liked    + dislike -> disliked
        disliked + like -> liked      disliked + dislike -> none
        """
        await self.repo.get_video(video_id, user_id)
        state = await self.repo.toggle_like(user_id, video_id, LikeDisposition(disposition))
        logger.debug("User %s %s video %s -> %s", user_id, disposition, video_id, state)
        return state

    async def get_summary(self, viewer_id: uuid.UUID | None, video_id: uuid.UUID) -> LikeSummary:
        await self.repo.get_video(video_id, viewer_id)
        likes, dislikes = await self.repo.count_likes(video_id)
        disposition = await self.repo.get_like(viewer_id, video_id) if viewer_id else None
        return LikeSummary(disposition=disposition, likes=likes, dislikes=dislikes)
