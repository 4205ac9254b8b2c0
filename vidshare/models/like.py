"""Like ORM model — one row per (user, video), toggled in place."""

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vidshare.db.base import Base


class LikeDisposition(str, enum.Enum):
    LIKE = "like"
    DISLIKE = "dislike"


class Like(Base):
    __tablename__ = "likes"

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    video_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("videos.id", ondelete="CASCADE"), primary_key=True, index=True
    )
    # NULL is the neutral state left behind by repeating a disposition.
    disposition: Mapped[str | None] = mapped_column(String(7), nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    video = relationship("Video", back_populates="likes", lazy="raise")

    __table_args__ = (
        CheckConstraint(
            "disposition IS NULL OR disposition IN ('like', 'dislike')",
            name="ck_likes_disposition",
        ),
    )
