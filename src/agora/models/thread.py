# src/agora/models/thread.py
"""SQLAlchemy model for discussion threads."""

from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from agora.db.session import Base
from agora.db.time import utcnow


class ThreadStatus(str, enum.Enum):
    """Thread lifecycle: OPEN <-> LOCKED, either -> ARCHIVED (terminal)."""

    OPEN = "OPEN"
    LOCKED = "LOCKED"
    ARCHIVED = "ARCHIVED"


class Thread(Base):
    """Top-level discussion topic within a board.

    ``is_pinned``, ``is_locked`` and ``status`` are set by moderation and are
    read-only inputs here.
    """

    __tablename__ = "forum_thread"
    __table_args__ = (
        Index("ix_forum_thread_status_created_at", "status", "created_at"),
        Index("ix_forum_thread_board_id", "board_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    board_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("forum_board.id"),
        nullable=False,
    )
    author_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("forum_user.id"),
        nullable=False,
    )
    title: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    # Bumped by every new reply.
    last_post_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    is_pinned: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_locked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    status: Mapped[ThreadStatus] = mapped_column(
        Enum(ThreadStatus, native_enum=False, length=16),
        nullable=False,
        default=ThreadStatus.OPEN,
    )

    @property
    def accepts_replies(self) -> bool:
        """Return True when neither the lock flag nor the status forbid replies."""
        return not self.is_locked and self.status == ThreadStatus.OPEN
