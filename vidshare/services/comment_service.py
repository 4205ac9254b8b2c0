"""Comment service — add, list and delete comments on visible videos."""

import logging
import uuid

from vidshare.domain.errors import ForbiddenError
from vidshare.domain.ports import PersistencePort
from vidshare.domain.validators import validate_comment
from vidshare.models.comment import Comment

logger = logging.getLogger(__name__)


class CommentService:
    def __init__(self, repo: PersistencePort):
        self.repo = repo

    async def add_comment(self, user_id: uuid.UUID, video_id: uuid.UUID, text: str) -> Comment:
        text = validate_comment(text)
        # Raises NotFoundError for private videos the user does not own.
        video = await self.repo.get_video(video_id, user_id)
        return await self.repo.add_comment(video.id, user_id, text)

    async def list_comments(self, viewer_id: uuid.UUID | None, video_id: uuid.UUID) -> list[Comment]:
        video = await self.repo.get_video(video_id, viewer_id)
        return await self.repo.list_comments(video.id)

    async def delete_comment(self, user_id: uuid.UUID, comment_id: uuid.UUID) -> None:
        comment = await self.repo.lock_comment(comment_id)
        if comment.user_id != user_id:
            logger.warning("User %s tried to delete comment %s", user_id, comment_id)
            raise ForbiddenError("Only the author can delete this comment")
        await self.repo.delete_comment(comment)
