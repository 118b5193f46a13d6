"""Data access helpers for working with posts."""
from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import func, select
from sqlalchemy.orm import Session, aliased

from agora.db.time import as_utc, utcnow
from agora.models.post import Post

__all__ = ["PostRepository", "find_thread_body"]


def find_thread_body(posts: Sequence[Post]) -> Post | None:
    """Return the thread body: the earliest post without a parent."""
    roots = [post for post in posts if post.parent_post_id is None]
    if not roots:
        return None
    return min(roots, key=lambda post: (as_utc(post.created_at), post.id))


class PostRepository:
    """Thin wrapper around database access for post entities."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def get_by_id(self, post_id: int) -> Post | None:
        """Return a post by identifier, including soft-deleted ones."""
        return self.session.get(Post, post_id)

    def get_for_update(self, post_id: int) -> Post | None:
        """Return a post and lock its row where the dialect supports it."""
        result = self.session.execute(
            select(Post).where(Post.id == post_id).with_for_update()
        )
        return result.scalars().first()

    def list_for_thread(self, thread_id: int) -> list[Post]:
        """Return every post of a thread, oldest first."""
        result = self.session.execute(
            select(Post)
            .where(Post.thread_id == thread_id)
            .order_by(Post.created_at.asc(), Post.id.asc())
        )
        return list(result.scalars())

    def comment_counts(self, thread_ids: list[int]) -> dict[int, int]:
        """Return visible reply counts per thread, excluding the thread body."""
        if not thread_ids:
            return {}
        body = aliased(Post)
        # Same rule as find_thread_body: earliest parentless post of the thread.
        body_id = (
            select(body.id)
            .where(body.thread_id == Post.thread_id, body.parent_post_id.is_(None))
            .order_by(body.created_at.asc(), body.id.asc())
            .limit(1)
            .correlate(Post)
            .scalar_subquery()
        )
        result = self.session.execute(
            select(Post.thread_id, func.count(Post.id))
            .where(
                Post.thread_id.in_(thread_ids),
                Post.is_deleted.is_(False),
                Post.id != func.coalesce(body_id, -1),
            )
            .group_by(Post.thread_id)
        )
        return {thread_id: count for thread_id, count in result.all()}

    def create(
        self,
        *,
        thread_id: int,
        author_id: str,
        body: str,
        parent_post_id: int | None = None,
    ) -> Post:
        """Insert a new post and return the flushed ORM instance.

        Args:
            thread_id: Thread the post belongs to.
            author_id: Authenticated author.
            body: Validated body text.
            parent_post_id: Replied-to post in the same thread, if any.
        """
        post = Post(
            thread_id=thread_id,
            author_id=author_id,
            body=body,
            parent_post_id=parent_post_id,
            created_at=utcnow(),
        )
        self.session.add(post)
        self.session.flush()
        return post
