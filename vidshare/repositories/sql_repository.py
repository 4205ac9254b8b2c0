"""SQLAlchemy implementation of the persistence port."""

import functools
import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import case, delete, func, insert, literal, null, or_, select, update
from sqlalchemy import exc as sa_exc
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.domain.errors import (
    DuplicateEmailError,
    DuplicateUsernameError,
    NotFoundError,
    PersistenceError,
    PoolExhaustedError,
    UnauthorizedUploadError,
)
from vidshare.domain.ports import PersistencePort
from vidshare.models import Comment, Like, LikeDisposition, User, Video

logger = logging.getLogger(__name__)

VIDEO_NOT_FOUND = "Video not found"
USER_NOT_FOUND = "User not found"
COMMENT_NOT_FOUND = "Comment not found"
UPDATABLE_VIDEO_FIELDS = {"title", "description", "credits", "is_public"}


def _translate_errors(fn):
    """
    Keep SQLAlchemy and driver exceptions inside the repository.

    Pool timeouts become PoolExhaustedError, constraint violations not handled
    by the method itself become NotFoundError (a referenced row vanished under
    a concurrent delete) and any other database failure PersistenceError.
    """

    @functools.wraps(fn)
    async def wrapper(*args, **kwargs):
        try:
            return await fn(*args, **kwargs)
        except sa_exc.TimeoutError as e:
            logger.error("Connection pool exhausted in %s", fn.__name__)
            raise PoolExhaustedError() from e
        except sa_exc.IntegrityError as e:
            logger.warning("Unhandled constraint violation in %s: %s", fn.__name__, e.orig)
            raise NotFoundError("Referenced record no longer exists") from e
        except sa_exc.DBAPIError as e:
            logger.error("Database error in %s: %s", fn.__name__, e.orig)
            raise PersistenceError() from e

    return wrapper


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SqlRepository(PersistencePort):
    def __init__(self, db: AsyncSession):
        self.db = db

    # ── Users ────────────────────────────────────────────

    @_translate_errors
    async def add_user(
        self,
        first_name: str,
        last_name: str,
        username: str,
        email: str,
        password_hash: str,
    ) -> User:
        result = await self.db.execute(
            select(User.username).where(or_(User.username == username, User.email == email))
        )
        taken = list(result.scalars())
        if username in taken:
            raise DuplicateUsernameError()
        if taken:
            raise DuplicateEmailError()

        user = User(
            first_name=first_name,
            last_name=last_name,
            username=username,
            email=email,
            password_hash=password_hash,
        )
        try:
            async with self.db.begin_nested():
                self.db.add(user)
        except sa_exc.IntegrityError as e:
            # Lost a race with a concurrent registration.
            if "username" in str(e.orig).lower():
                raise DuplicateUsernameError() from e
            raise DuplicateEmailError() from e
        return user

    @_translate_errors
    async def get_user(self, user_id: uuid.UUID) -> User | None:
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    @_translate_errors
    async def get_user_by_username(self, username: str) -> User | None:
        result = await self.db.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    @_translate_errors
    async def delete_user(self, user_id: uuid.UUID) -> list[str]:
        user = (
            await self.db.execute(select(User).where(User.id == user_id).with_for_update())
        ).scalar_one_or_none()
        if user is None:
            raise NotFoundError(USER_NOT_FOUND)

        owned = select(Video.id).where(Video.user_id == user_id)
        refs = list(
            (await self.db.execute(select(Video.storage_path).where(Video.user_id == user_id))).scalars()
        )
        for statement in (
            delete(Like).where(or_(Like.user_id == user_id, Like.video_id.in_(owned))),
            delete(Comment).where(or_(Comment.user_id == user_id, Comment.video_id.in_(owned))),
            delete(Video).where(Video.user_id == user_id),
            delete(User).where(User.id == user_id),
        ):
            await self.db.execute(statement.execution_options(synchronize_session=False))
        return refs

    # ── Videos ───────────────────────────────────────────

    @_translate_errors
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
        video = Video(
            id=video_id,
            user_id=user_id,
            title=title,
            description=description,
            credits=credits,
            is_public=is_public,
            storage_path=storage_path,
            file_size=file_size,
            published_at=_utcnow(),
        )
        try:
            async with self.db.begin_nested():
                self.db.add(video)
        except sa_exc.IntegrityError as e:
            raise UnauthorizedUploadError() from e
        return video

    def _visible_video(self, video_id: uuid.UUID, viewer_id: uuid.UUID | None):
        query = select(Video).where(Video.id == video_id)
        if viewer_id is None:
            return query.where(Video.is_public.is_(True))
        return query.where(or_(Video.is_public.is_(True), Video.user_id == viewer_id))

    @_translate_errors
    async def get_video(self, video_id: uuid.UUID, viewer_id: uuid.UUID | None) -> Video:
        result = await self.db.execute(self._visible_video(video_id, viewer_id))
        video = result.scalar_one_or_none()
        if video is None:
            raise NotFoundError(VIDEO_NOT_FOUND)
        return video

    @_translate_errors
    async def lock_video(self, video_id: uuid.UUID, viewer_id: uuid.UUID | None) -> Video:
        result = await self.db.execute(
            self._visible_video(video_id, viewer_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        video = result.scalar_one_or_none()
        if video is None:
            raise NotFoundError(VIDEO_NOT_FOUND)
        return video

    @_translate_errors
    async def list_videos(
        self,
        viewer_id: uuid.UUID | None,
        owner_id: uuid.UUID | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[Video], int]:
        visible = Video.is_public.is_(True)
        if viewer_id is not None:
            visible = or_(visible, Video.user_id == viewer_id)
        conditions = [visible]
        if owner_id is not None:
            conditions.append(Video.user_id == owner_id)

        query = (
            select(Video)
            .where(*conditions)
            .order_by(Video.published_at.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        count_query = select(func.count()).select_from(Video).where(*conditions)

        result = await self.db.execute(query)
        videos = list(result.scalars().all())

        count_result = await self.db.execute(count_query)
        total = count_result.scalar() or 0

        return videos, total

    @_translate_errors
    async def update_video(self, video: Video, **fields) -> Video:
        unknown = set(fields) - UPDATABLE_VIDEO_FIELDS
        if unknown:
            raise ValueError(f"Cannot update video fields: {', '.join(sorted(unknown))}")
        for name, value in fields.items():
            setattr(video, name, value)
        video.published_at = _utcnow()
        await self.db.flush()
        return video

    @_translate_errors
    async def delete_video(self, video: Video) -> None:
        await self.db.execute(delete(Like).where(Like.video_id == video.id))
        await self.db.execute(delete(Comment).where(Comment.video_id == video.id))
        await self.db.execute(delete(Video).where(Video.id == video.id))

    @_translate_errors
    async def all_storage_paths(self) -> set[str]:
        result = await self.db.execute(select(Video.storage_path))
        return set(result.scalars())

    # ── Comments ─────────────────────────────────────────

    @_translate_errors
    async def add_comment(self, video_id: uuid.UUID, user_id: uuid.UUID, text: str) -> Comment:
        comment = Comment(video_id=video_id, user_id=user_id, text=text)
        try:
            async with self.db.begin_nested():
                self.db.add(comment)
        except sa_exc.IntegrityError as e:
            # The video or the author was deleted after the visibility check.
            raise await self._missing_reference(user_id) from e
        return comment

    @_translate_errors
    async def lock_comment(self, comment_id: uuid.UUID) -> Comment:
        result = await self.db.execute(
            select(Comment).where(Comment.id == comment_id).with_for_update()
        )
        comment = result.scalar_one_or_none()
        if comment is None:
            raise NotFoundError(COMMENT_NOT_FOUND)
        return comment

    @_translate_errors
    async def list_comments(self, video_id: uuid.UUID) -> list[Comment]:
        result = await self.db.execute(
            select(Comment).where(Comment.video_id == video_id).order_by(Comment.created_at.asc())
        )
        return list(result.scalars().all())

    @_translate_errors
    async def delete_comment(self, comment: Comment) -> None:
        await self.db.execute(delete(Comment).where(Comment.id == comment.id))

    # ── Likes ────────────────────────────────────────────

    async def _apply_toggle(
        self, user_id: uuid.UUID, video_id: uuid.UUID, disposition: LikeDisposition
    ) -> bool:
        # Same disposition -> NULL, anything else -> the new disposition.
        result = await self.db.execute(
            update(Like)
            .where(Like.user_id == user_id, Like.video_id == video_id)
            .values(
                disposition=case(
                    (Like.disposition == disposition.value, null()),
                    else_=literal(disposition.value),
                ),
                updated_at=_utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    @_translate_errors
    async def toggle_like(
        self,
        user_id: uuid.UUID,
        video_id: uuid.UUID,
        disposition: LikeDisposition,
    ) -> LikeDisposition | None:
        if not await self._apply_toggle(user_id, video_id, disposition):
            try:
                async with self.db.begin_nested():
                    await self.db.execute(
                        insert(Like).values(
                            user_id=user_id,
                            video_id=video_id,
                            disposition=disposition.value,
                            updated_at=_utcnow(),
                        )
                    )
            except sa_exc.IntegrityError:
                # A concurrent request created the row first; toggle it instead.
                if not await self._apply_toggle(user_id, video_id, disposition):
                    raise await self._missing_reference(user_id)
        return await self.get_like(user_id, video_id)

    @_translate_errors
    async def get_like(self, user_id: uuid.UUID, video_id: uuid.UUID) -> LikeDisposition | None:
        result = await self.db.execute(
            select(Like.disposition).where(Like.user_id == user_id, Like.video_id == video_id)
        )
        value = result.scalar_one_or_none()
        return LikeDisposition(value) if value else None

    @_translate_errors
    async def count_likes(self, video_id: uuid.UUID) -> tuple[int, int]:
        result = await self.db.execute(
            select(Like.disposition, func.count())
            .where(Like.video_id == video_id, Like.disposition.is_not(None))
            .group_by(Like.disposition)
        )
        counts = {row[0]: row[1] for row in result}
        return counts.get(LikeDisposition.LIKE.value, 0), counts.get(LikeDisposition.DISLIKE.value, 0)
