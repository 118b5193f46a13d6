"""Ranking engine for thread listings.

Orders a candidate set of threads by one of three modes. Pinned threads always
come first; inside each group the mode's key decides, highest first. Sorting is
stable and uses no secondary key, so ties keep the order the candidates were
supplied in.
"""
from __future__ import annotations

import enum
import logging
import math
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta

from agora.core.errors import ValidationError
from agora.core.settings import settings
from agora.db.time import as_utc, utcnow

logger = logging.getLogger(__name__)


class SortMode(str, enum.Enum):
    """Thread listing orders."""

    HOT = "hot"
    NEW = "new"
    TOP = "top"


class TopPeriod(str, enum.Enum):
    """Look-back windows for the ``top`` order."""

    DAY = "24h"
    WEEK = "7d"
    MONTH = "30d"
    ALL = "all"

    @property
    def span(self) -> timedelta | None:
        return _PERIOD_SPANS[self]


_PERIOD_SPANS: dict[TopPeriod, timedelta | None] = {
    TopPeriod.DAY: timedelta(hours=24),
    TopPeriod.WEEK: timedelta(days=7),
    TopPeriod.MONTH: timedelta(days=30),
    TopPeriod.ALL: None,
}


def parse_sort(raw: str | SortMode | None) -> SortMode:
    """Parse a sort mode, defaulting to ``hot``."""
    if raw is None:
        return SortMode.HOT
    try:
        return SortMode(raw)
    except ValueError as exc:
        raise ValidationError(f"Unknown sort mode: {raw}") from exc


def parse_period(raw: str | TopPeriod | None) -> TopPeriod | None:
    """Parse an optional ``top`` period."""
    if raw is None or raw == "":
        return None
    try:
        return TopPeriod(raw)
    except ValueError as exc:
        raise ValidationError(f"Unknown period: {raw}") from exc


@dataclass(frozen=True)
class RankCandidate:
    """Minimal view of a thread needed to rank it."""

    id: int
    score: int
    created_at: datetime
    is_pinned: bool = False


def hot_score(score: int, created_at: datetime, decay_seconds: float | None = None) -> float:
    """Return the time-decayed hot value of a thread.

    ``sign(score) * log10(max(|score|, 1)) + epoch_seconds(created_at) / decay``

    The score term grows logarithmically; the recency term is linear, so every
    ``decay`` seconds of age is worth one order of magnitude of score.
    """
    decay = decay_seconds if decay_seconds is not None else settings.hot_decay_seconds
    order = math.log10(max(abs(score), 1))
    sign = 1 if score > 0 else -1 if score < 0 else 0
    return sign * order + as_utc(created_at).timestamp() / decay


def _sort_key(mode: SortMode) -> Callable[[RankCandidate], float]:
    if mode is SortMode.NEW:
        return lambda c: as_utc(c.created_at).timestamp()
    if mode is SortMode.TOP:
        return lambda c: float(c.score)
    decay = settings.hot_decay_seconds
    return lambda c: hot_score(c.score, c.created_at, decay)


def within_period(
    candidates: Iterable[RankCandidate],
    period: TopPeriod | None,
    now: datetime | None = None,
) -> list[RankCandidate]:
    """Drop candidates created before ``now - period``."""
    items = list(candidates)
    span = period.span if period is not None else None
    if span is None:
        return items
    cutoff = as_utc(now or utcnow()) - span
    return [c for c in items if as_utc(c.created_at) >= cutoff]


def rank(
    candidates: Iterable[RankCandidate],
    mode: SortMode,
    period: TopPeriod | None = None,
    now: datetime | None = None,
) -> list[RankCandidate]:
    """Return candidates in display order for ``mode``.

    Args:
        candidates: Threads to order, in fetch order
        mode: hot, new or top
        period: Look-back window, honoured only for ``top``
        now: Reference time for the period cutoff

    Returns:
        Pinned candidates followed by unpinned ones, each group ordered by the
        mode's key descending.
    """
    items = list(candidates)
    if mode is SortMode.TOP:
        items = within_period(items, period, now)

    key = _sort_key(mode)
    pinned = sorted((c for c in items if c.is_pinned), key=key, reverse=True)
    unpinned = sorted((c for c in items if not c.is_pinned), key=key, reverse=True)
    logger.debug(
        "Ranked %d candidates by %s (%d pinned)",
        len(items),
        mode.value,
        len(pinned),
    )
    return pinned + unpinned
