"""Read-time score aggregation over the vote ledger.

No counter is denormalized onto threads or posts: a score is always the sum
of the ledger rows at call time.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable

from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from agora.core.errors import StoreUnavailable
from agora.models import TargetType, Vote

logger = logging.getLogger(__name__)


def scores_for(db: Session, target_type: TargetType, target_ids: Iterable[int]) -> dict[int, int]:
    """Return net scores for a batch of targets in a single query.

    Args:
        db: Database session
        target_type: Kind of target being scored
        target_ids: Identifiers to score

    Returns:
        Mapping of target id to score. Targets without votes are absent and
        must be read as ``0``.

    Raises:
        StoreUnavailable: If the database cannot be reached.
    """
    ids = set(target_ids)
    if not ids:
        return {}

    stmt = (
        select(Vote.target_id, func.sum(Vote.value))
        .where(Vote.target_type == target_type, Vote.target_id.in_(ids))
        .group_by(Vote.target_id)
    )
    try:
        rows = db.execute(stmt).all()
    except OperationalError as exc:
        logger.error("Score aggregation failed for %d %s targets", len(ids), target_type.value, exc_info=True)
        raise StoreUnavailable("Could not aggregate scores") from exc

    return {int(target_id): int(total) for target_id, total in rows if total}


def score_of(db: Session, target_type: TargetType, target_id: int) -> int:
    """Return the net score of a single target."""
    return scores_for(db, target_type, [target_id]).get(target_id, 0)
