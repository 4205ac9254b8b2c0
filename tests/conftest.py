"""
Shared fixtures: a throwaway SQLite database, local storage under tmp_path,
services wired to both, and two registered users.
"""

import os
import tempfile

# Settings are read at import time; keep hashing cheap and storage out of the repo.
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-with-enough-length-for-hs256"
os.environ["STORAGE_LOCAL_PATH"] = tempfile.mkdtemp(prefix="vidshare-test-")

import pytest  # noqa: E402

from vidshare.db.session import Database  # noqa: E402
from vidshare.domain.errors import StoragePromotionError, StorageWriteError  # noqa: E402
from vidshare.repositories.sql_repository import SqlRepository  # noqa: E402
from vidshare.services.auth_service import AuthService  # noqa: E402
from vidshare.services.comment_service import CommentService  # noqa: E402
from vidshare.services.like_service import LikeService  # noqa: E402
from vidshare.services.video_service import VideoService  # noqa: E402
from vidshare.storage.local import LocalStorage  # noqa: E402

MAX_UPLOAD_BYTES = 1024
VIDEO_BYTES = b"\x00\x00\x00\x18ftypmp42" + b"\x00" * 100


class RecordingStorage(LocalStorage):
    """LocalStorage that records calls and can be told to fail."""

    def __init__(self, base, fail_stage=False, fail_promote=False):
        super().__init__(base)
        self.fail_stage = fail_stage
        self.fail_promote = fail_promote
        self.calls: list[tuple[str, str]] = []

    async def stage_locally(self, data, target_name):
        self.calls.append(("stage", target_name))
        if self.fail_stage:
            raise StorageWriteError()
        return await super().stage_locally(data, target_name)

    async def promote_to_durable(self, staged_path, durable_ref):
        self.calls.append(("promote", durable_ref))
        if self.fail_promote:
            raise StoragePromotionError()
        return await super().promote_to_durable(staged_path, durable_ref)


# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest.fixture
async def database(tmp_path):
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture
async def session(database):
    async with database.session_factory() as session:
        yield session


@pytest.fixture
def repo(session):
    return SqlRepository(session)


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def storage(tmp_path):
    return RecordingStorage(tmp_path / "storage")


@pytest.fixture
def auth_service(repo):
    return AuthService(repo)


@pytest.fixture
def video_service(repo, storage):
    return VideoService(
        repo,
        storage,
        max_upload_bytes=MAX_UPLOAD_BYTES,
        allowed_extensions=["mp4", "mov"],
    )


@pytest.fixture
def comment_service(repo):
    return CommentService(repo)


@pytest.fixture
def like_service(repo):
    return LikeService(repo)


# =============================================================================
# DATA FIXTURES
# =============================================================================


@pytest.fixture
async def user(auth_service, repo):
    await auth_service.register_user("John", "Doe", "johndoe123", "StrongPass123", "john.doe@example.com")
    return await repo.get_user_by_username("johndoe123")


@pytest.fixture
async def other_user(auth_service, repo):
    await auth_service.register_user("Jane", "Roe", "janeroe99", "OtherPass123", "jane@example.com")
    return await repo.get_user_by_username("janeroe99")


@pytest.fixture
def upload(video_service):
    """
    Upload helper.

    Usage:
        video_id = await upload(user, is_public=False)
    """

    async def _upload(owner, title="My first video", is_public=True, filename="clip.mp4", data=VIDEO_BYTES):
        return await video_service.upload_video(
            user_id=owner.id,
            title=title,
            description="A description",
            credits="Me",
            is_public=is_public,
            filename=filename,
            data=data,
        )

    return _upload
