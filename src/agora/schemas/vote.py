# src/agora/schemas/vote.py
"""Vote-related Pydantic schemas."""

from typing import Literal

from pydantic import BaseModel, Field

from agora.models import TargetType


class VoteCreate(BaseModel):
    """Schema for casting a vote."""

    target_type: TargetType = Field(TargetType.POST, description="THREAD or POST")
    target_id: int = Field(..., ge=1)
    value: Literal[-1, 1] = Field(..., description="1 for upvote, -1 for downvote")


class VoteResponse(BaseModel):
    """Outcome of a cast."""

    action: Literal["voted", "changed", "removed"]
    previous_value: int
    value: int
    score: int


class MyVoteResponse(BaseModel):
    """The caller's current vote on a target."""

    value: Literal[-1, 0, 1]
