"""
Ports — the narrow interfaces the use cases call through.

Services depend on these abstract classes only; concrete backends live in
``vidshare.storage`` and ``vidshare.repositories`` and are picked at
construction time.
"""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from vidshare.models import Comment, LikeDisposition, User, Video


class StoragePort(ABC):
    """Two-step file storage: stage a file, then promote it to durable storage."""

    @abstractmethod
    def durable_ref(self, filename: str) -> str:
        """The durable reference a file named ``filename`` will be promoted to."""

    @abstractmethod
    async def stage_locally(self, data: bytes, target_name: str) -> str:
        """
        Write ``data`` into the staging area as ``target_name``.

        Returns the staged path. Never overwrites an existing file.

        Raises:
            StorageWriteError: on any I/O failure or name collision
        """

    @abstractmethod
    async def promote_to_durable(self, staged_path: str, durable_ref: str) -> bool:
        """
        Move a staged file to durable storage under ``durable_ref``.

        Idempotent: promoting an already-promoted ref returns True.

        Raises:
            StoragePromotionError: if the file cannot be promoted
        """

    @abstractmethod
    async def retrieve(self, durable_ref: str) -> Path:
        """Local path for a durable ref. Raises FileNotFoundError if absent."""

    @abstractmethod
    async def delete(self, durable_ref: str) -> None:
        """Remove a durable file; missing files are ignored."""

    @abstractmethod
    def list_durable_refs(self) -> list[str]:
        """Every ref currently held in durable storage."""

    @abstractmethod
    def purge_staged(self, max_age_seconds: float) -> int:
        """Delete staged files older than ``max_age_seconds``. Returns the count."""


class PersistencePort(ABC):
    """
    Durable entity storage for users, videos, comments and likes.

    Implementations must translate backend errors into the
    ``vidshare.domain.errors`` taxonomy and uphold the consistency rules:
    private videos are invisible to non-owners, like rows are unique per
    (user, video) and toggled in place, updates refresh ``published_at``.
    """

    # ── Users ────────────────────────────────────────────

    @abstractmethod
    async def add_user(
        self,
        first_name: str,
        last_name: str,
        username: str,
        email: str,
        password_hash: str,
    ) -> User:
        """Raises DuplicateUsernameError / DuplicateEmailError."""

    @abstractmethod
    async def get_user(self, user_id: uuid.UUID) -> User | None: ...

    @abstractmethod
    async def get_user_by_username(self, username: str) -> User | None: ...

    @abstractmethod
    async def delete_user(self, user_id: uuid.UUID) -> list[str]:
        """Delete a user and everything they own. Returns orphaned storage refs."""

    # ── Videos ───────────────────────────────────────────

    @abstractmethod
    async def add_video(
        self,
        video_id: uuid.UUID,
        user_id: uuid.UUID,
        title: str,
        description: str,
        credits: str,
        is_public: bool,
        storage_path: str,
        file_size: int,
    ) -> Video:
        """Raises UnauthorizedUploadError if ``user_id`` is not a persisted user."""

    @abstractmethod
    async def get_video(self, video_id: uuid.UUID, viewer_id: uuid.UUID | None) -> Video:
        """Raises NotFoundError if missing, or private and ``viewer_id`` is not the owner."""

    @abstractmethod
    async def lock_video(self, video_id: uuid.UUID, viewer_id: uuid.UUID | None) -> Video:
        """Like ``get_video`` but holds a row lock until the transaction ends."""

    @abstractmethod
    async def list_videos(
        self,
        viewer_id: uuid.UUID | None,
        owner_id: uuid.UUID | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[Video], int]:
        """Public videos plus the viewer's own, newest first."""

    @abstractmethod
    async def update_video(self, video: Video, **fields) -> Video:
        """Apply field changes and stamp ``published_at`` with the current time."""

    @abstractmethod
    async def delete_video(self, video: Video) -> None:
        """Delete a video with its comments and likes in the current transaction."""

    @abstractmethod
    async def all_storage_paths(self) -> set[str]: ...

    # ── Comments ─────────────────────────────────────────

    @abstractmethod
    async def add_comment(self, video_id: uuid.UUID, user_id: uuid.UUID, text: str) -> Comment: ...

    @abstractmethod
    async def lock_comment(self, comment_id: uuid.UUID) -> Comment:
        """Raises NotFoundError if missing."""

    @abstractmethod
    async def list_comments(self, video_id: uuid.UUID) -> list[Comment]: ...

    @abstractmethod
    async def delete_comment(self, comment: Comment) -> None: ...

    # ── Likes ────────────────────────────────────────────

    @abstractmethod
    async def toggle_like(
        self,
        user_id: uuid.UUID,
        video_id: uuid.UUID,
        disposition: LikeDisposition,
    ) -> LikeDisposition | None:
        """Apply the invert/flip transition atomically; return the resulting state."""

    @abstractmethod
    async def get_like(self, user_id: uuid.UUID, video_id: uuid.UUID) -> LikeDisposition | None: ...

    @abstractmethod
    async def count_likes(self, video_id: uuid.UUID) -> tuple[int, int]:
        """(likes, dislikes) for a video."""
