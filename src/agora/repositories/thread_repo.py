"""Data access helpers for boards and threads."""
from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

from agora.core.errors import NotFound
from agora.models import Board, Thread, ThreadStatus

__all__ = ["ThreadFilter", "ThreadRepository"]


class ThreadFilter:
    """Filters shared by every thread listing query."""

    def __init__(self, board_id: int | None = None, search: str | None = None) -> None:
        self.board_id = board_id
        self.search = search.strip() if search else None

    def apply(self, stmt: Select) -> Select:
        """Restrict a thread select to visible threads matching the filters."""
        stmt = stmt.where(Thread.status != ThreadStatus.ARCHIVED)
        if self.board_id is not None:
            stmt = stmt.where(Thread.board_id == self.board_id)
        if self.search:
            stmt = stmt.where(func.lower(Thread.title).contains(self.search.lower(), autoescape=True))
        return stmt


class ThreadRepository:
    """Thin wrapper around database access for threads and boards."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def get_visible(self, thread_id: int) -> Thread | None:
        """Return a thread unless it is missing or archived."""
        thread = self.session.get(Thread, thread_id)
        if thread is None or thread.status == ThreadStatus.ARCHIVED:
            return None
        return thread

    def get_visible_or_404(self, thread_id: int) -> Thread:
        """Return a visible thread or raise NotFound."""
        thread = self.get_visible(thread_id)
        if thread is None:
            raise NotFound("Thread not found")
        return thread

    def get_board(self, ref: str | int) -> Board | None:
        """Resolve a board by numeric id or slug."""
        if isinstance(ref, int) or (isinstance(ref, str) and ref.isdigit()):
            board = self.session.get(Board, int(ref))
            if board is not None:
                return board
        return self.session.execute(
            select(Board).where(Board.slug == str(ref))
        ).scalars().first()

    def count(self, filters: ThreadFilter) -> int:
        """Return how many visible threads match the filters."""
        stmt = filters.apply(select(func.count(Thread.id)))
        return int(self.session.execute(stmt).scalar_one())

    def page_newest(self, filters: ThreadFilter, *, offset: int, limit: int) -> Sequence[Thread]:
        """Return one page ordered pinned first, then newest first."""
        stmt = (
            filters.apply(select(Thread))
            .order_by(Thread.is_pinned.desc(), Thread.created_at.desc())
            .offset(offset)
            .limit(limit)
        )
        return list(self.session.execute(stmt).scalars())

    def recent_window(self, filters: ThreadFilter, *, limit: int) -> Sequence[Thread]:
        """Return the ``limit`` most recently created threads, newest first.

        Pinning is ignored here; it is applied when the window is ranked.
        """
        stmt = (
            filters.apply(select(Thread))
            .order_by(Thread.created_at.desc())
            .limit(limit)
        )
        return list(self.session.execute(stmt).scalars())
