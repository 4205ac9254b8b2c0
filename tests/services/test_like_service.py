"""Like toggling: invert on repeat, flip in place, one row per (user, video)."""

import uuid

import pytest
from sqlalchemy import func, select

from vidshare.domain.errors import NotFoundError
from vidshare.models import Like, LikeDisposition

LIKE = LikeDisposition.LIKE
DISLIKE = LikeDisposition.DISLIKE


async def like_rows(session, user_id, video_id) -> int:
    result = await session.execute(
        select(func.count()).select_from(Like).where(Like.user_id == user_id, Like.video_id == video_id)
    )
    return result.scalar()


class TestToggleLike:
    @pytest.mark.parametrize(
        "sequence,expected",
        [
            ([LIKE], LIKE),
            ([DISLIKE], DISLIKE),
            ([LIKE, LIKE], None),
            ([LIKE, DISLIKE], DISLIKE),
            ([DISLIKE, DISLIKE], None),
            ([DISLIKE, LIKE], LIKE),
            ([LIKE, LIKE, LIKE], LIKE),
            ([LIKE, LIKE, DISLIKE], DISLIKE),
        ],
    )
    async def test_state_machine(self, like_service, repo, user, upload, sequence, expected):
        video_id = await upload(user)

        state = None
        for disposition in sequence:
            state = await like_service.toggle_like(user.id, video_id, disposition)

        assert state == expected
        assert await repo.get_like(user.id, video_id) == expected

    async def test_accepts_plain_strings(self, like_service, user, upload):
        video_id = await upload(user)

        assert await like_service.toggle_like(user.id, video_id, "dislike") == DISLIKE

    async def test_row_is_updated_in_place(self, like_service, session, user, upload):
        video_id = await upload(user)

        await like_service.toggle_like(user.id, video_id, LIKE)
        await like_service.toggle_like(user.id, video_id, DISLIKE)
        assert await like_rows(session, user.id, video_id) == 1

        # Repeating neutralises the row rather than deleting it.
        await like_service.toggle_like(user.id, video_id, DISLIKE)
        assert await like_rows(session, user.id, video_id) == 1

    async def test_users_do_not_affect_each_other(self, like_service, repo, user, other_user, upload):
        video_id = await upload(user)

        await like_service.toggle_like(user.id, video_id, LIKE)
        await like_service.toggle_like(other_user.id, video_id, DISLIKE)
        await like_service.toggle_like(user.id, video_id, LIKE)

        assert await repo.get_like(user.id, video_id) is None
        assert await repo.get_like(other_user.id, video_id) == DISLIKE

    async def test_private_video_is_not_found_for_others(self, like_service, user, other_user, upload):
        video_id = await upload(user, is_public=False)

        with pytest.raises(NotFoundError):
            await like_service.toggle_like(other_user.id, video_id, LIKE)

    async def test_missing_video(self, like_service, user):
        with pytest.raises(NotFoundError):
            await like_service.toggle_like(user.id, uuid.uuid4(), LIKE)


class TestLikeSummary:
    async def test_counts_and_viewer_disposition(self, like_service, auth_service, repo, user, other_user, upload):
        await auth_service.register_user("Third", "User", "thirduser", "ThirdPass123", "third@example.com")
        third = await repo.get_user_by_username("thirduser")
        video_id = await upload(user)

        await like_service.toggle_like(user.id, video_id, LIKE)
        await like_service.toggle_like(other_user.id, video_id, LIKE)
        await like_service.toggle_like(third.id, video_id, DISLIKE)
        await like_service.toggle_like(third.id, video_id, DISLIKE)

        summary = await like_service.get_summary(other_user.id, video_id)
        assert (summary.likes, summary.dislikes) == (2, 0)
        assert summary.disposition == LIKE

        third_view = await like_service.get_summary(third.id, video_id)
        assert third_view.disposition is None

        anonymous = await like_service.get_summary(None, video_id)
        assert anonymous.disposition is None
        assert anonymous.likes == 2
