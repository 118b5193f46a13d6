# src/agora/models/board.py
"""SQLAlchemy model for discussion boards."""
from sqlalchemy import Boolean, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from agora.db.session import Base


class Board(Base):
    """Board metadata used for grouping threads."""

    __tablename__ = "forum_board"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # URL handle, e.g. "fretes".
    slug: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Inactive boards keep their threads readable but accept no new ones.
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
