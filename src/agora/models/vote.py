# src/agora/models/vote.py
"""Models capturing voting interactions on threads and posts."""

import enum

from sqlalchemy import (
    CheckConstraint,
    Enum,
    ForeignKey,
    Index,
    Integer,
    SmallInteger,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from agora.db.session import Base


class TargetType(str, enum.Enum):
    """Kinds of content a vote can point at."""

    THREAD = "THREAD"
    POST = "POST"


class Vote(Base):
    """Per-user vote on a thread or post.

    Absence of a row means "no vote"; a value of 0 is never stored.
    """

    __tablename__ = "forum_vote"
    __table_args__ = (
        # One vote per user and target; this is the write concurrency boundary.
        UniqueConstraint("user_id", "target_type", "target_id", name="uq_forum_vote_user_target"),
        CheckConstraint("value IN (1, -1)", name="ck_forum_vote_value"),
        Index("ix_forum_vote_target", "target_type", "target_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("forum_user.id"),
        nullable=False,
    )
    target_type: Mapped[TargetType] = mapped_column(
        Enum(TargetType, native_enum=False, length=16),
        nullable=False,
    )
    # Thread or post id depending on target_type, so no foreign key.
    target_id: Mapped[int] = mapped_column(Integer, nullable=False)

    # 1 = upvote, -1 = downvote.
    value: Mapped[int] = mapped_column(SmallInteger, nullable=False)
