"""Video service — the upload pipeline plus reads, updates and deletion."""

import logging
import uuid
from pathlib import Path

from vidshare.config import settings
from vidshare.domain.errors import ForbiddenError, UnauthorizedUploadError
from vidshare.domain.identity import new_identifier, storage_filename
from vidshare.domain.ports import PersistencePort, StoragePort
from vidshare.domain.validators import validate_video_title, validate_video_upload
from vidshare.models.video import Video

logger = logging.getLogger(__name__)


class VideoService:
    def __init__(
        self,
        repo: PersistencePort,
        storage: StoragePort,
        *,
        max_upload_bytes: int | None = None,
        allowed_extensions: list[str] | None = None,
    ):
        self.repo = repo
        self.storage = storage
        self.max_upload_bytes = max_upload_bytes or settings.max_upload_bytes
        self.allowed_extensions = allowed_extensions or settings.ALLOWED_VIDEO_EXTENSIONS

    async def upload_video(
        self,
        user_id: uuid.UUID | None,
        title: str,
        description: str,
        credits: str,
        is_public: bool,
        filename: str | None,
        data: bytes,
    ) -> uuid.UUID:
        """
        validate -> stage -> promote -> persist.

        A failure before the last step leaves no video row behind. A failure
        after staging may leave a file without a row, which the cleanup
        worker removes later.
        """
        upload = validate_video_upload(
            title,
            filename,
            len(data),
            allowed_extensions=self.allowed_extensions,
            max_size_bytes=self.max_upload_bytes,
        )

        uploader = await self.repo.get_user(user_id) if user_id else None
        if uploader is None or not uploader.is_active:
            raise UnauthorizedUploadError()

        video_id = new_identifier()
        name = storage_filename(video_id, upload.extension)
        durable_ref = self.storage.durable_ref(name)

        staged_path = await self.storage.stage_locally(data, name)
        logger.info("Staged upload %s (%d bytes) for user %s", name, upload.size, user_id)

        await self.storage.promote_to_durable(staged_path, durable_ref)
        logger.info("Promoted %s to %s", name, durable_ref)

        await self.repo.add_video(
            video_id=video_id,
            user_id=uploader.id,
            title=upload.title,
            description=description or "",
            credits=credits or "",
            is_public=is_public,
            storage_path=durable_ref,
            file_size=upload.size,
        )
        logger.info("Saved video %s for user %s", video_id, user_id)
        return video_id

    async def get_video(self, viewer_id: uuid.UUID | None, video_id: uuid.UUID) -> Video:
        return await self.repo.get_video(video_id, viewer_id)

    async def list_videos(
        self,
        viewer_id: uuid.UUID | None,
        owner_id: uuid.UUID | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[Video], int]:
        return await self.repo.list_videos(viewer_id, owner_id, page, page_size)

    async def update_video(self, user_id: uuid.UUID, video_id: uuid.UUID, **changes) -> Video:
        """Change title/description/credits/privacy. Refreshes the publish date."""
        video = await self.repo.lock_video(video_id, user_id)
        self._require_owner(video, user_id, "update")

        changes = {k: v for k, v in changes.items() if v is not None}
        if "title" in changes:
            changes["title"] = validate_video_title(changes["title"])
        return await self.repo.update_video(video, **changes)

    async def delete_video(self, user_id: uuid.UUID, video_id: uuid.UUID) -> None:
        video = await self.repo.lock_video(video_id, user_id)
        self._require_owner(video, user_id, "delete")
        await self.repo.delete_video(video)
        logger.info("Deleted video %s", video_id)

    async def get_file_path(self, viewer_id: uuid.UUID | None, video_id: uuid.UUID) -> Path | None:
        video = await self.get_video(viewer_id, video_id)
        try:
            return await self.storage.retrieve(video.storage_path)
        except FileNotFoundError:
            logger.warning("Video %s has no file at %s", video_id, video.storage_path)
            return None

    @staticmethod
    def _require_owner(video: Video, user_id: uuid.UUID, action: str) -> None:
        if video.user_id != user_id:
            logger.warning("User %s tried to %s video %s", user_id, action, video.id)
            raise ForbiddenError(f"Only the owner can {action} this video")
