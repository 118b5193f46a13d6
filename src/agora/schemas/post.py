# src/agora/schemas/post.py
"""Post and comment-tree Pydantic schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

REMOVED_BODY = "[removed]"


class ReplyCreate(BaseModel):
    """Schema for replying to a thread."""

    body: str = Field(..., description="Reply text")
    parent_post_id: int | None = Field(None, description="Replied-to post, omitted for top-level replies")


class PostResponse(BaseModel):
    """Schema for post information returned by the API."""

    id: int
    thread_id: int
    author_id: str
    body: str
    parent_post_id: int | None
    created_at: datetime
    is_deleted: bool
    deleted_reason: str | None = None

    model_config = ConfigDict(from_attributes=True)


class ReplyResponse(BaseModel):
    """A stored reply with its depth and the content filter verdict."""

    post: PostResponse
    depth: int
    flagged: bool = False
    flag_reasons: list[str] = Field(default_factory=list)


class CommentNodeResponse(BaseModel):
    """One node of a comment tree."""

    post: PostResponse
    score: int
    depth: int
    children: list[CommentNodeResponse] = Field(default_factory=list)
