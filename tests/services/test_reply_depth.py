# mypy: ignore-errors
# tests/services/test_reply_depth.py
"""Tests for the ancestor-walk depth validator."""

import pytest

from agora.core.errors import DepthLimitExceeded
from agora.services.reply_depth import (
    MISSING,
    db_parent_lookup,
    parent_depth,
    validate_reply_depth,
)


def _chain_lookup(parents):
    def lookup(post_id):
        if post_id not in parents:
            return MISSING
        return parents[post_id]

    return lookup


# A -> B -> C -> D -> E -> F -> G, G at depth 6.
CHAIN = {"A": None, "B": "A", "C": "B", "D": "C", "E": "D", "F": "E", "G": "F"}


def test_top_level_reply_is_depth_zero() -> None:
    assert validate_reply_depth(None, _chain_lookup({})) == 0


def test_reply_to_depth_six_is_rejected() -> None:
    with pytest.raises(DepthLimitExceeded):
        validate_reply_depth("G", _chain_lookup(CHAIN), max_depth=6)


def test_reply_to_depth_five_is_allowed() -> None:
    assert validate_reply_depth("F", _chain_lookup(CHAIN), max_depth=6) == 6
    assert validate_reply_depth("A", _chain_lookup(CHAIN), max_depth=6) == 1


def test_walk_stops_at_cap() -> None:
    """The walk never performs more than ``max_depth`` parent lookups."""
    calls = []
    long_chain = {i: i - 1 for i in range(1, 50)}
    long_chain[0] = None

    def lookup(post_id):
        calls.append(post_id)
        return long_chain[post_id]

    assert parent_depth(49, lookup, max_depth=6) == 6
    assert len(calls) == 6


def test_missing_ancestor_terminates_chain() -> None:
    """A gap in the chain accepts the shallower depth actually reachable."""
    broken = dict(CHAIN)
    del broken["C"]
    assert parent_depth("G", _chain_lookup(broken), max_depth=6) == 4
    assert validate_reply_depth("G", _chain_lookup(broken), max_depth=6) == 5


def test_lookup_error_is_treated_as_missing() -> None:
    def lookup(post_id):
        raise LookupError(post_id)

    assert validate_reply_depth("X", lookup) == 1


def test_db_lookup_chain(db_session, thread, body_post, make_post) -> None:
    """The A..G chain built in the store: replying to G is refused."""
    chain = [body_post]
    for _ in range(6):
        chain.append(make_post(thread, chain[-1]))

    lookup = db_parent_lookup(db_session, thread.id)
    assert validate_reply_depth(chain[5].id, lookup) == 6
    with pytest.raises(DepthLimitExceeded):
        validate_reply_depth(chain[6].id, lookup)


def test_db_lookup_ignores_other_threads(db_session, make_thread, make_post) -> None:
    first = make_thread("first")
    second = make_thread("second")
    foreign = make_post(second)

    lookup = db_parent_lookup(db_session, first.id, lock=True)
    assert lookup(foreign.id) is MISSING
    assert lookup(987654) is MISSING
