"""Vote ledger: one vote per (user, target) with toggle semantics.

Casting a vote is modelled as a three-state machine (none / up / down):

    NONE --(+1)--> UP      voted
    NONE --(-1)--> DOWN    voted
    UP   --(+1)--> NONE    removed
    DOWN --(-1)--> NONE    removed
    UP   --(-1)--> DOWN    changed
    DOWN --(+1)--> UP      changed

:func:`transition` is the pure part; :func:`cast_vote` applies its outcome to
the single ledger row of the (user, target) pair.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from agora.core.errors import NotFound, StoreUnavailable, TargetDeleted, ValidationError
from agora.models import Post, TargetType, Thread, ThreadStatus, Vote
from agora.services.scores import score_of

logger = logging.getLogger(__name__)


class VoteState(enum.IntEnum):
    """Stored polarity of a user's vote on one target."""

    DOWN = -1
    NONE = 0
    UP = 1


class VoteAction(str, enum.Enum):
    """Outcome reported back to the caller."""

    VOTED = "voted"
    CHANGED = "changed"
    REMOVED = "removed"


@dataclass(frozen=True)
class VoteResult:
    """Result of a cast, including the fresh score of the target."""

    action: VoteAction
    previous_value: int
    value: int
    score: int


def transition(current: VoteState, value: int) -> tuple[VoteState, VoteAction]:
    """Return the next ledger state and the reported action for a cast.

    Args:
        current: State currently stored for the (user, target) pair
        value: Requested vote, +1 or -1

    Returns:
        Tuple of the new state and the action taken.

    Raises:
        ValidationError: If ``value`` is not +1 or -1.
    """
    if value not in (VoteState.UP, VoteState.DOWN):
        raise ValidationError("Vote value must be 1 or -1")

    requested = VoteState(value)
    if current is VoteState.NONE:
        return requested, VoteAction.VOTED
    if current is requested:
        return VoteState.NONE, VoteAction.REMOVED
    return requested, VoteAction.CHANGED


def _ensure_votable(db: Session, target_type: TargetType, target_id: int) -> None:
    if target_type is TargetType.THREAD:
        thread = db.get(Thread, target_id)
        if thread is None or thread.status == ThreadStatus.ARCHIVED:
            raise NotFound("Thread not found")
        return

    post = db.get(Post, target_id)
    if post is None:
        raise NotFound("Post not found")
    thread = db.get(Thread, post.thread_id)
    if thread is None or thread.status == ThreadStatus.ARCHIVED:
        raise NotFound("Post not found")
    if post.is_deleted:
        raise TargetDeleted("Cannot vote on removed content")


def _find_vote(db: Session, user_id: str, target_type: TargetType, target_id: int) -> Vote | None:
    return db.execute(
        select(Vote).where(
            Vote.user_id == user_id,
            Vote.target_type == target_type,
            Vote.target_id == target_id,
        )
    ).scalar_one_or_none()


def _apply_cast(
    db: Session,
    *,
    user_id: str,
    target_type: TargetType,
    target_id: int,
    value: int,
) -> tuple[VoteState, VoteState, VoteAction]:
    existing = _find_vote(db, user_id, target_type, target_id)
    current = VoteState(existing.value) if existing is not None else VoteState.NONE
    new_state, action = transition(current, value)

    if action is VoteAction.VOTED:
        db.add(
            Vote(
                user_id=user_id,
                target_type=target_type,
                target_id=target_id,
                value=int(new_state),
            )
        )
    elif action is VoteAction.REMOVED:
        db.delete(existing)
    else:
        existing.value = int(new_state)

    db.commit()
    return current, new_state, action


def cast_vote(
    db: Session,
    *,
    user_id: str,
    target_type: TargetType,
    target_id: int,
    value: int,
) -> VoteResult:
    """Cast, flip or withdraw a user's vote on a thread or post.

    Args:
        db: Database session
        user_id: Authenticated voter
        target_type: THREAD or POST
        target_id: Identifier of the target
        value: +1 or -1

    Returns:
        VoteResult with the action taken and the target's fresh score

    Raises:
        ValidationError: If value is not +1 or -1
        NotFound: If the target does not exist or its thread is archived
        TargetDeleted: If the target post was removed
        StoreUnavailable: If the database cannot be reached or the vote keeps conflicting
    """
    # Reject malformed input before touching the store.
    transition(VoteState.NONE, value)

    try:
        _ensure_votable(db, target_type, target_id)
        try:
            previous, new_state, action = _apply_cast(
                db,
                user_id=user_id,
                target_type=target_type,
                target_id=target_id,
                value=value,
            )
        except IntegrityError:
            # A concurrent request inserted the row first; replay against it.
            db.rollback()
            logger.warning(
                "Concurrent vote by %s on %s %s, re-applying against stored row",
                user_id,
                target_type.value,
                target_id,
            )
            try:
                previous, new_state, action = _apply_cast(
                    db,
                    user_id=user_id,
                    target_type=target_type,
                    target_id=target_id,
                    value=value,
                )
            except IntegrityError as exc:
                db.rollback()
                logger.error(
                    "Vote by %s on %s %s still conflicting after replay",
                    user_id,
                    target_type.value,
                    target_id,
                    exc_info=True,
                )
                raise StoreUnavailable("Vote could not be recorded, try again") from exc
        score = score_of(db, target_type, target_id)
    except OperationalError as exc:
        db.rollback()
        logger.error("Vote write failed for %s %s", target_type.value, target_id, exc_info=True)
        raise StoreUnavailable("Vote could not be recorded") from exc

    logger.info(
        "Vote %s by %s on %s %s (%d -> %d)",
        action.value,
        user_id,
        target_type.value,
        target_id,
        int(previous),
        int(new_state),
    )
    return VoteResult(
        action=action,
        previous_value=int(previous),
        value=int(new_state),
        score=score,
    )


def get_user_vote(db: Session, user_id: str, target_type: TargetType, target_id: int) -> int:
    """Return the user's current vote on a target, 0 when there is none."""
    vote = _find_vote(db, user_id, target_type, target_id)
    return vote.value if vote is not None else 0
