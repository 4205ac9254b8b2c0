"""Video ORM model."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vidshare.db.base import Base


class Video(Base):
    __tablename__ = "videos"

    # Generated by the upload use case; the storage filename is derived from it.
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    credits: Mapped[str] = mapped_column(Text, nullable=False, default="")
    is_public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
    storage_path: Mapped[str] = mapped_column(String(512), unique=True, nullable=False)
    file_size: Mapped[int] = mapped_column(Integer, default=0)
    published_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), index=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    user = relationship("User", back_populates="videos", lazy="raise")
    comments = relationship("Comment", back_populates="video", cascade="all, delete-orphan", passive_deletes=True, lazy="raise")
    likes = relationship("Like", back_populates="video", cascade="all, delete-orphan", passive_deletes=True, lazy="raise")
