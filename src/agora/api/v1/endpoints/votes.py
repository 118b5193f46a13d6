# src/agora/api/v1/endpoints/votes.py
"""Vote-related endpoints for the Agora API."""

from fastapi import APIRouter, status

from agora.models import TargetType
from agora.schemas.vote import MyVoteResponse, VoteCreate, VoteResponse
from agora.services.votes import cast_vote, get_user_vote

from ..dependencies import CurrentUserDep, SessionDep

router = APIRouter(prefix="/votes", tags=["votes"])


@router.post("/", response_model=VoteResponse, status_code=status.HTTP_200_OK)
async def create_vote(
    vote_data: VoteCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> VoteResponse:
    """Cast, flip or withdraw a vote on a thread or post.

    Voting the same direction twice removes the vote; voting the other
    direction flips it.
    """
    result = cast_vote(
        db,
        user_id=current_user.id,
        target_type=vote_data.target_type,
        target_id=vote_data.target_id,
        value=vote_data.value,
    )
    return VoteResponse(
        action=result.action.value,
        previous_value=result.previous_value,
        value=result.value,
        score=result.score,
    )


@router.get("/{target_type}/{target_id}/my-vote", response_model=MyVoteResponse)
async def get_my_vote(
    target_type: TargetType,
    target_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> MyVoteResponse:
    """Get current user's vote on a specific thread or post."""
    return MyVoteResponse(value=get_user_vote(db, current_user.id, target_type, target_id))
