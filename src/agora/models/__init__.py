# src/agora/models/__init__.py
"""SQLAlchemy models for the Agora discussion service."""

from .board import Board
from .post import Post
from .thread import Thread, ThreadStatus
from .user import User
from .vote import TargetType, Vote

__all__ = [
    "Board",
    "Post",
    "Thread", "ThreadStatus",
    "User",
    "TargetType", "Vote",
]
