# mypy: ignore-errors
# tests/services/test_ranking.py
"""Tests for the hot/new/top ranking engine."""

import math
import random
from datetime import UTC, datetime, timedelta

import pytest

from agora.core.errors import ValidationError
from agora.services.ranking import (
    RankCandidate,
    SortMode,
    TopPeriod,
    hot_score,
    parse_period,
    parse_sort,
    rank,
)

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=UTC)


def _candidate(id_, score=0, hours_ago=0.0, pinned=False):
    return RankCandidate(
        id=id_,
        score=score,
        created_at=NOW - timedelta(hours=hours_ago),
        is_pinned=pinned,
    )


def test_hot_prefers_recent_thread_over_older_higher_score() -> None:
    """Score 10 a day ago loses to score 2 an hour ago."""
    older = _candidate(1, score=10, hours_ago=24)
    recent = _candidate(2, score=2, hours_ago=1)

    hot_older = hot_score(older.score, older.created_at)
    hot_recent = hot_score(recent.score, recent.created_at)
    assert hot_older == pytest.approx(1 + older.created_at.timestamp() / 45000)
    assert hot_recent == pytest.approx(math.log10(2) + recent.created_at.timestamp() / 45000)

    ranked = rank([older, recent], SortMode.HOT)
    assert [c.id for c in ranked] == [2, 1]


def test_hot_large_score_gap_beats_recency() -> None:
    """Three orders of magnitude outweigh a day of age."""
    popular = _candidate(1, score=5000, hours_ago=24)
    fresh = _candidate(2, score=1, hours_ago=0)
    assert [c.id for c in rank([fresh, popular], SortMode.HOT)] == [1, 2]


def test_hot_sign_keeps_downvoted_below_neutral() -> None:
    """Same age: negative score ranks under zero score."""
    neutral = _candidate(1, score=0)
    disliked = _candidate(2, score=-10)
    assert hot_score(-10, NOW) < hot_score(0, NOW) < hot_score(10, NOW)
    assert [c.id for c in rank([disliked, neutral], SortMode.HOT)] == [1, 2]


def test_new_orders_by_creation_desc() -> None:
    items = [_candidate(1, hours_ago=5), _candidate(2, hours_ago=1), _candidate(3, hours_ago=3)]
    assert [c.id for c in rank(items, SortMode.NEW)] == [2, 3, 1]


def test_top_orders_by_score_and_applies_period() -> None:
    items = [
        _candidate(1, score=50, hours_ago=24 * 10),
        _candidate(2, score=5, hours_ago=2),
        _candidate(3, score=9, hours_ago=30),
    ]
    assert [c.id for c in rank(items, SortMode.TOP)] == [1, 3, 2]
    assert [c.id for c in rank(items, SortMode.TOP, TopPeriod.WEEK, now=NOW)] == [3, 2]
    assert [c.id for c in rank(items, SortMode.TOP, TopPeriod.DAY, now=NOW)] == [2]
    assert [c.id for c in rank(items, SortMode.TOP, TopPeriod.ALL, now=NOW)] == [1, 3, 2]


def test_period_ignored_outside_top() -> None:
    items = [_candidate(1, hours_ago=24 * 40), _candidate(2, hours_ago=1)]
    assert [c.id for c in rank(items, SortMode.NEW, TopPeriod.DAY, now=NOW)] == [2, 1]


@pytest.mark.parametrize("mode", list(SortMode))
def test_pinned_always_first(mode) -> None:
    """Every pinned candidate precedes every unpinned one, in every mode."""
    rng = random.Random(7)
    items = [
        _candidate(
            i,
            score=rng.randint(-50, 500),
            hours_ago=rng.uniform(0, 24 * 20),
            pinned=rng.random() < 0.3,
        )
        for i in range(60)
    ]
    ranked = rank(items, mode)
    flags = [c.is_pinned for c in ranked]
    first_unpinned = flags.index(False)
    assert all(flags[:first_unpinned])
    assert not any(flags[first_unpinned:])
    assert len(ranked) == len(items)


def test_pinned_group_uses_mode_order() -> None:
    items = [_candidate(1, score=1, pinned=True), _candidate(2, score=9, pinned=True), _candidate(3, score=100)]
    assert [c.id for c in rank(items, SortMode.TOP)] == [2, 1, 3]


def test_ties_keep_input_order() -> None:
    """Equal keys are resolved by the order candidates were supplied in."""
    items = [_candidate(i, score=3, hours_ago=1) for i in (5, 2, 9, 1)]
    assert [c.id for c in rank(items, SortMode.TOP)] == [5, 2, 9, 1]
    assert [c.id for c in rank(items, SortMode.HOT)] == [5, 2, 9, 1]
    assert [c.id for c in rank(items, SortMode.NEW)] == [5, 2, 9, 1]


def test_parse_sort_and_period() -> None:
    assert parse_sort(None) is SortMode.HOT
    assert parse_sort("top") is SortMode.TOP
    assert parse_period(None) is None
    assert parse_period("7d") is TopPeriod.WEEK
    with pytest.raises(ValidationError):
        parse_sort("controversial")
    with pytest.raises(ValidationError):
        parse_period("1y")
