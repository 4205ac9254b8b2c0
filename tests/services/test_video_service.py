"""
Upload pipeline, privacy masking, updates and deletion.
"""

import uuid
from pathlib import Path

import pytest
from sqlalchemy import func, select

from vidshare.domain.errors import (
    FileTooLargeError,
    ForbiddenError,
    MissingFieldError,
    NotFoundError,
    StoragePromotionError,
    StorageWriteError,
    TitleTooLongError,
    UnauthorizedUploadError,
    UnsupportedFileTypeError,
)
from vidshare.models import Video

# Same values as the conftest fixtures.
MAX_UPLOAD_BYTES = 1024
VIDEO_BYTES = b"\x00\x00\x00\x18ftypmp42" + b"\x00" * 100


async def video_count(session) -> int:
    return (await session.execute(select(func.count()).select_from(Video))).scalar()


class TestUploadVideo:
    async def test_upload_persists_metadata_and_file(self, video_service, storage, user, upload):
        video_id = await upload(user, is_public=False)

        video = await video_service.get_video(user.id, video_id)
        assert isinstance(video_id, uuid.UUID)
        assert video.id == video_id
        assert video.user_id == user.id
        assert video.title == "My first video"
        assert video.description == "A description"
        assert video.credits == "Me"
        assert video.is_public is False
        assert video.storage_path == f"videos/{video_id}.mp4"
        assert video.file_size == len(VIDEO_BYTES)
        assert video.published_at is not None
        assert (await storage.retrieve(video.storage_path)).read_bytes() == VIDEO_BYTES
        assert storage.calls == [("stage", f"{video_id}.mp4"), ("promote", f"videos/{video_id}.mp4")]
        assert list(storage.staging.iterdir()) == []

    async def test_extension_is_lowercased_in_filename(self, video_service, user, upload):
        video_id = await upload(user, filename="Holiday.MOV")

        video = await video_service.get_video(user.id, video_id)
        assert video.storage_path.endswith(f"{video_id}.mov")

    @pytest.mark.parametrize(
        "kwargs,error",
        [
            ({"filename": "clip.avi"}, UnsupportedFileTypeError),
            ({"filename": "clip"}, UnsupportedFileTypeError),
            ({"data": b"x" * (MAX_UPLOAD_BYTES + 1)}, FileTooLargeError),
            ({"data": b""}, MissingFieldError),
            ({"title": ""}, MissingFieldError),
            ({"title": "t" * 101}, TitleTooLongError),
        ],
    )
    async def test_invalid_upload_never_touches_storage(self, session, storage, user, upload, kwargs, error):
        with pytest.raises(error):
            await upload(user, **kwargs)

        assert storage.calls == []
        assert await video_count(session) == 0

    async def test_unknown_uploader_is_rejected_before_storage(self, video_service, storage, session):
        with pytest.raises(UnauthorizedUploadError):
            await video_service.upload_video(uuid.uuid4(), "Title", "", "", True, "clip.mp4", VIDEO_BYTES)

        with pytest.raises(UnauthorizedUploadError):
            await video_service.upload_video(None, "Title", "", "", True, "clip.mp4", VIDEO_BYTES)

        assert storage.calls == []
        assert await video_count(session) == 0

    async def test_stage_failure_writes_no_metadata(self, session, storage, user, upload):
        storage.fail_stage = True

        with pytest.raises(StorageWriteError):
            await upload(user)

        assert [call[0] for call in storage.calls] == ["stage"]
        assert await video_count(session) == 0

    async def test_promote_failure_writes_no_metadata(self, session, storage, user, upload):
        storage.fail_promote = True

        with pytest.raises(StoragePromotionError):
            await upload(user)

        assert await video_count(session) == 0
        # The staged file stays behind for the cleanup worker.
        assert len(list(storage.staging.iterdir())) == 1
        assert storage.list_durable_refs() == []


class TestVideoVisibility:
    async def test_private_video_hidden_from_others(self, video_service, user, other_user, upload):
        video_id = await upload(user, is_public=False)

        with pytest.raises(NotFoundError):
            await video_service.get_video(other_user.id, video_id)
        with pytest.raises(NotFoundError):
            await video_service.get_video(None, video_id)
        assert (await video_service.get_video(user.id, video_id)).id == video_id

    async def test_public_video_visible_to_everyone(self, video_service, user, other_user, upload):
        video_id = await upload(user, is_public=True)

        assert (await video_service.get_video(other_user.id, video_id)).id == video_id
        assert (await video_service.get_video(None, video_id)).id == video_id

    async def test_missing_video(self, video_service, user):
        with pytest.raises(NotFoundError):
            await video_service.get_video(user.id, uuid.uuid4())

    async def test_list_shows_public_and_own(self, video_service, user, other_user, upload):
        public_id = await upload(user, title="public", is_public=True)
        private_id = await upload(user, title="private", is_public=False)

        others_view, others_total = await video_service.list_videos(other_user.id)
        owner_view, owner_total = await video_service.list_videos(user.id)

        assert [v.id for v in others_view] == [public_id]
        assert others_total == 1
        assert {v.id for v in owner_view} == {public_id, private_id}
        assert owner_total == 2

    async def test_list_by_owner_with_pagination(self, video_service, user, other_user, upload):
        for i in range(3):
            await upload(user, title=f"video {i}")
        await upload(other_user, title="someone else")

        page, total = await video_service.list_videos(None, owner_id=user.id, page=1, page_size=2)

        assert total == 3
        assert len(page) == 2
        assert all(v.user_id == user.id for v in page)

    async def test_file_path_respects_privacy(self, video_service, user, other_user, upload):
        video_id = await upload(user, is_public=False)

        path = await video_service.get_file_path(user.id, video_id)
        assert isinstance(path, Path)
        assert path.read_bytes() == VIDEO_BYTES
        with pytest.raises(NotFoundError):
            await video_service.get_file_path(other_user.id, video_id)


class TestUpdateVideo:
    async def test_update_refreshes_publish_date(self, video_service, user, upload):
        video_id = await upload(user)
        original = (await video_service.get_video(user.id, video_id)).published_at.replace(tzinfo=None)

        updated = await video_service.update_video(user.id, video_id, title="  New title ", is_public=False)

        assert updated.title == "New title"
        assert updated.is_public is False
        assert updated.published_at.replace(tzinfo=None) > original

    async def test_none_values_are_ignored(self, video_service, user, upload):
        video_id = await upload(user)

        updated = await video_service.update_video(user.id, video_id, title=None, credits="Crew")

        assert updated.title == "My first video"
        assert updated.credits == "Crew"

    async def test_invalid_title(self, video_service, user, upload):
        video_id = await upload(user)

        with pytest.raises(MissingFieldError):
            await video_service.update_video(user.id, video_id, title="   ")

    async def test_non_owner_is_forbidden(self, video_service, user, other_user, upload):
        video_id = await upload(user, is_public=True)

        with pytest.raises(ForbiddenError):
            await video_service.update_video(other_user.id, video_id, title="Hijacked")

    async def test_non_owner_of_private_video_gets_not_found(self, video_service, user, other_user, upload):
        video_id = await upload(user, is_public=False)

        with pytest.raises(NotFoundError):
            await video_service.update_video(other_user.id, video_id, title="Hijacked")


class TestDeleteVideo:
    async def test_non_owner_is_forbidden(self, video_service, user, other_user, upload):
        video_id = await upload(user)

        with pytest.raises(ForbiddenError):
            await video_service.delete_video(other_user.id, video_id)

        assert (await video_service.get_video(user.id, video_id)).id == video_id

    async def test_owner_delete_cascades(
        self, video_service, comment_service, like_service, repo, user, other_user, upload
    ):
        video_id = await upload(user)
        await comment_service.add_comment(other_user.id, video_id, "First!")
        await comment_service.add_comment(user.id, video_id, "Thanks")
        await like_service.toggle_like(other_user.id, video_id, "like")

        await video_service.delete_video(user.id, video_id)

        with pytest.raises(NotFoundError):
            await video_service.get_video(user.id, video_id)
        with pytest.raises(NotFoundError):
            await comment_service.list_comments(user.id, video_id)
        assert await repo.list_comments(video_id) == []
        assert await repo.count_likes(video_id) == (0, 0)
        assert await repo.get_like(other_user.id, video_id) is None

    async def test_delete_missing_video(self, video_service, user):
        with pytest.raises(NotFoundError):
            await video_service.delete_video(user.id, uuid.uuid4())
