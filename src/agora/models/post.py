# src/agora/models/post.py
"""SQLAlchemy model for posts (thread bodies and replies)."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from agora.db.session import Base
from agora.db.time import utcnow


class Post(Base):
    """A reply within a thread.

    The earliest root post of a thread is the thread body. Posts are only ever
    soft-deleted so that replies keep a valid ancestor chain.
    """

    __tablename__ = "forum_post"
    __table_args__ = (
        Index("ix_forum_post_thread_created_at", "thread_id", "created_at"),
        Index("ix_forum_post_parent_post_id", "parent_post_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    thread_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("forum_thread.id"),
        nullable=False,
    )
    author_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("forum_user.id"),
        nullable=False,
    )
    body: Mapped[str] = mapped_column(Text, nullable=False)

    # Parent chain for nested replies; must point into the same thread.
    parent_post_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("forum_post.id"),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    is_deleted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    deleted_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
