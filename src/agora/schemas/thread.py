# src/agora/schemas/thread.py
"""Thread-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from agora.models import ThreadStatus
from agora.schemas.common import PageMeta


class ThreadCreate(BaseModel):
    """Schema for creating a new thread with its body."""

    board: str = Field(..., min_length=1, description="Board slug or id")
    title: str = Field(..., min_length=1, max_length=500)
    body: str = Field(..., min_length=1, description="Thread body text")


class ThreadResponse(BaseModel):
    """Schema for thread information returned by the API."""

    id: int
    board_id: int
    author_id: str
    title: str
    created_at: datetime
    last_post_at: datetime
    is_pinned: bool
    is_locked: bool
    status: ThreadStatus
    score: int = 0
    comment_count: int = 0

    model_config = ConfigDict(from_attributes=True)


class ThreadListResponse(PageMeta):
    """A page of threads."""

    items: list[ThreadResponse]
