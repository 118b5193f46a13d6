# src/agora/models/user.py
"""SQLAlchemy model for forum identities."""

from __future__ import annotations

from sqlalchemy import Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from agora.db.session import Base


class User(Base):
    """Forum identity keyed by the platform's user id (the JWT subject).

    Rows are provisioned by the surrounding platform; the forum only reads them.
    """

    __tablename__ = "forum_user"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    display_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
