# src/agora/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .common import PageMeta
from .post import CommentNodeResponse, PostResponse, ReplyCreate, ReplyResponse
from .thread import ThreadCreate, ThreadListResponse, ThreadResponse
from .vote import MyVoteResponse, VoteCreate, VoteResponse

__all__ = [
    "PageMeta",
    "CommentNodeResponse", "PostResponse", "ReplyCreate", "ReplyResponse",
    "ThreadCreate", "ThreadListResponse", "ThreadResponse",
    "MyVoteResponse", "VoteCreate", "VoteResponse",
]
