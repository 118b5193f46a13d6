"""Reply depth validation by walking a post's ancestor chain.

The walk is a pure function over a parent lookup so it can run both as a
cheap pre-check and authoritatively inside the transaction that inserts the
reply.
"""
from __future__ import annotations

import logging
from collections.abc import Callable

from sqlalchemy.orm import Session

from agora.core.errors import DepthLimitExceeded
from agora.core.settings import settings
from agora.repositories.post_repo import PostRepository

logger = logging.getLogger(__name__)


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"


# Returned by a parent lookup when the post itself cannot be found.
MISSING = _Missing()

ParentLookup = Callable[[int], "int | None | _Missing"]


def parent_depth(
    parent_post_id: int,
    lookup_parent: ParentLookup,
    max_depth: int | None = None,
) -> int:
    """Return the depth of ``parent_post_id`` by counting hops to its root.

    Counting stops at a post without a parent, after ``max_depth`` hops, or at
    an ancestor that cannot be found; a broken chain yields the shallower
    depth that is actually reachable.
    """
    cap = max_depth if max_depth is not None else settings.max_reply_depth
    hops = 0
    current = parent_post_id
    while hops < cap:
        try:
            parent = lookup_parent(current)
        except LookupError:
            parent = MISSING
        if parent is None or parent is MISSING:
            break
        hops += 1
        current = parent  # type: ignore[assignment]
    return hops


def validate_reply_depth(
    parent_post_id: int | None,
    lookup_parent: ParentLookup,
    max_depth: int | None = None,
) -> int:
    """Return the depth a new reply would get, or raise when it is too deep.

    Top-level replies (no parent) are depth 0 and always valid.

    Raises:
        DepthLimitExceeded: If the parent already sits at ``max_depth``.
    """
    if parent_post_id is None:
        return 0

    cap = max_depth if max_depth is not None else settings.max_reply_depth
    depth = parent_depth(parent_post_id, lookup_parent, cap)
    if depth >= cap:
        logger.warning("Rejected reply to post %s: depth limit %d reached", parent_post_id, cap)
        raise DepthLimitExceeded(f"Replies cannot be nested more than {cap} levels deep")
    return depth + 1


def db_parent_lookup(db: Session, thread_id: int, *, lock: bool = False) -> ParentLookup:
    """Build a parent lookup over the store, scoped to one thread.

    Posts outside the thread count as missing. With ``lock`` each visited row
    is read ``FOR UPDATE`` so the chain cannot change before commit.
    """
    repo = PostRepository(db)

    def lookup(post_id: int) -> int | None | _Missing:
        post = repo.get_for_update(post_id) if lock else repo.get_by_id(post_id)
        if post is None or post.thread_id != thread_id:
            return MISSING
        return post.parent_post_id

    return lookup
