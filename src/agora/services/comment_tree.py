"""Build nested comment trees from a thread's flat, parent-linked posts.

Trees are rebuilt on every read and never persisted.
"""
from __future__ import annotations

import enum
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from sqlalchemy.orm import Session

from agora.core.errors import ValidationError
from agora.core.settings import settings
from agora.db.time import as_utc
from agora.models import Post, TargetType
from agora.repositories.post_repo import PostRepository, find_thread_body
from agora.repositories.thread_repo import ThreadRepository
from agora.services.scores import scores_for

logger = logging.getLogger(__name__)


class CommentSort(str, enum.Enum):
    """Orders applied to every sibling list of a comment tree."""

    BEST = "best"
    NEW = "new"
    OLD = "old"


def parse_comment_sort(raw: str | CommentSort | None) -> CommentSort:
    """Parse a comment sort, defaulting to ``best``."""
    if raw is None:
        return CommentSort.BEST
    try:
        return CommentSort(raw)
    except ValueError as exc:
        raise ValidationError(f"Unknown comment sort: {raw}") from exc


@dataclass
class CommentNode:
    """A post placed in the tree with its score and nesting depth."""

    post: Post
    score: int = 0
    depth: int = 0
    children: list[CommentNode] = field(default_factory=list)


def _sort_siblings(nodes: list[CommentNode], sort: CommentSort) -> None:
    # Input is already created_at ascending, so "old" needs no reordering.
    if sort is CommentSort.BEST:
        nodes.sort(key=lambda n: n.score, reverse=True)
    elif sort is CommentSort.NEW:
        nodes.sort(key=lambda n: as_utc(n.post.created_at), reverse=True)


def sort_forest(roots: list[CommentNode], sort: CommentSort) -> None:
    """Sort the root list and every children list below it, in place."""
    _sort_siblings(roots, sort)
    stack = list(roots)
    while stack:
        node = stack.pop()
        if node.children:
            _sort_siblings(node.children, sort)
            stack.extend(node.children)


def build_comment_tree(
    posts: Sequence[Post],
    scores: Mapping[int, int],
    sort: CommentSort = CommentSort.BEST,
    max_depth: int | None = None,
) -> list[CommentNode]:
    """Turn a flat post list into an ordered forest.

    Args:
        posts: Posts of one thread, ``created_at`` ascending
        scores: Post id to score; missing ids score 0
        sort: Order applied at every level
        max_depth: Depth cap, defaults to the configured reply depth

    Returns:
        Root nodes. Posts without a parent, or whose parent is not in
        ``posts``, are roots.
    """
    cap = max_depth if max_depth is not None else settings.max_reply_depth
    nodes = {post.id: CommentNode(post=post, score=scores.get(post.id, 0)) for post in posts}

    roots: list[CommentNode] = []
    for post in posts:
        node = nodes[post.id]
        parent = nodes.get(post.parent_post_id) if post.parent_post_id is not None else None
        if parent is None or parent is node:
            roots.append(node)
            continue
        node.depth = min(parent.depth + 1, cap)
        parent.children.append(node)

    sort_forest(roots, sort)
    return roots


def walk(roots: Sequence[CommentNode]) -> list[CommentNode]:
    """Return every node in display (pre-)order."""
    ordered: list[CommentNode] = []
    stack = list(reversed(roots))
    while stack:
        node = stack.pop()
        ordered.append(node)
        stack.extend(reversed(node.children))
    return ordered


def drop_thread_body(
    roots: list[CommentNode],
    body_post_id: int,
    sort: CommentSort,
) -> list[CommentNode]:
    """Remove the thread body root, lifting any direct replies to it into the root list."""
    body = next((root for root in roots if root.post.id == body_post_id), None)
    if body is None:
        return roots
    remaining = [root for root in roots if root is not body]
    if body.children:
        remaining.extend(body.children)
        # Lifted replies were sorted among themselves; merge them with the other roots.
        if sort is CommentSort.OLD:
            remaining.sort(key=lambda n: as_utc(n.post.created_at))
        else:
            _sort_siblings(remaining, sort)
    return remaining


def list_comments(
    db: Session,
    thread_id: int,
    sort: CommentSort = CommentSort.BEST,
    *,
    include_body: bool = False,
) -> list[CommentNode]:
    """Return the comment forest of a thread.

    Args:
        db: Database session
        thread_id: Thread to read
        sort: Comment order applied at every depth
        include_body: Keep the thread body (the earliest root) in the output

    Returns:
        Ordered root nodes.

    Raises:
        NotFound: If the thread does not exist or is archived
    """
    ThreadRepository(db).get_visible_or_404(thread_id)
    posts = PostRepository(db).list_for_thread(thread_id)
    scores = scores_for(db, TargetType.POST, (post.id for post in posts))

    roots = build_comment_tree(posts, scores, sort)
    if not include_body:
        body_post = find_thread_body(posts)
        if body_post is not None:
            roots = drop_thread_body(roots, body_post.id, sort)

    logger.debug("Built comment tree for thread %s: %d posts, %d roots", thread_id, len(posts), len(roots))
    return roots
