"""Thread listings: bounded fetch, in-memory ranking, pagination.

``hot`` and ``top`` order by a score that only exists at read time, so the
store cannot sort by it. Those modes fetch a bounded window of the most
recently created threads, score and rank the window in memory, then slice the
requested page out of it. A thread older than the window never appears in
those listings, however high its score; that is the price of the bound.

``new`` is a plain store-side ordering and paginates in the database.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from agora.core.errors import NotFound, StoreUnavailable, ValidationError
from agora.core.settings import settings
from agora.db.time import utcnow
from agora.models import TargetType, Thread
from agora.repositories.post_repo import PostRepository
from agora.repositories.thread_repo import ThreadFilter, ThreadRepository
from agora.services.ranking import RankCandidate, SortMode, TopPeriod, parse_period, parse_sort, rank
from agora.services.scores import score_of, scores_for

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ThreadQuery:
    """Parameters of a thread listing request."""

    sort: SortMode = SortMode.HOT
    period: TopPeriod | None = None
    board: str | int | None = None
    search: str | None = None
    page: int = 1
    page_size: int = 20

    @classmethod
    def parse(
        cls,
        *,
        sort: str | None = None,
        period: str | None = None,
        board: str | int | None = None,
        search: str | None = None,
        page: int = 1,
        page_size: int | None = None,
    ) -> ThreadQuery:
        """Validate raw request values into a query.

        Raises:
            ValidationError: For unknown sort/period values or out-of-range paging.
        """
        size = page_size if page_size is not None else settings.default_page_size
        if page < 1:
            raise ValidationError("page must be >= 1")
        if not 1 <= size <= settings.max_page_size:
            raise ValidationError(f"page_size must be between 1 and {settings.max_page_size}")
        return cls(
            sort=parse_sort(sort),
            period=parse_period(period),
            board=board or None,
            search=search or None,
            page=page,
            page_size=size,
        )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


@dataclass(frozen=True)
class ThreadListing:
    """A thread as shown in a listing."""

    thread: Thread
    score: int
    comment_count: int


@dataclass(frozen=True)
class ThreadPage:
    """One page of a listing and the number of listable threads."""

    items: list[ThreadListing]
    total: int


def _resolve_filters(repo: ThreadRepository, query: ThreadQuery) -> ThreadFilter:
    board_id: int | None = None
    if query.board is not None:
        board = repo.get_board(query.board)
        if board is None:
            raise NotFound("Board not found")
        board_id = board.id
    return ThreadFilter(board_id=board_id, search=query.search)


def _listings(db: Session, threads: Sequence[Thread], scores: dict[int, int]) -> list[ThreadListing]:
    counts = PostRepository(db).comment_counts([t.id for t in threads])
    return [
        ThreadListing(
            thread=t,
            score=scores.get(t.id, 0),
            comment_count=counts.get(t.id, 0),
        )
        for t in threads
    ]


def _list_new(db: Session, repo: ThreadRepository, filters: ThreadFilter, query: ThreadQuery) -> ThreadPage:
    total = repo.count(filters)
    threads = repo.page_newest(filters, offset=query.offset, limit=query.page_size)
    scores = scores_for(db, TargetType.THREAD, (t.id for t in threads))
    return ThreadPage(items=_listings(db, threads, scores), total=total)


def _list_ranked(db: Session, repo: ThreadRepository, filters: ThreadFilter, query: ThreadQuery) -> ThreadPage:
    window = settings.candidate_window(query.page_size)
    threads = repo.recent_window(filters, limit=window)
    scores = scores_for(db, TargetType.THREAD, (t.id for t in threads))

    by_id = {t.id: t for t in threads}
    candidates = [
        RankCandidate(
            id=t.id,
            score=scores.get(t.id, 0),
            created_at=t.created_at,
            is_pinned=t.is_pinned,
        )
        for t in threads
    ]
    ranked = rank(candidates, query.sort, query.period, now=utcnow())
    page = ranked[query.offset:query.offset + query.page_size]
    logger.debug(
        "Ranked window of %d/%d threads by %s, page %d holds %d",
        len(ranked),
        window,
        query.sort.value,
        query.page,
        len(page),
    )
    return ThreadPage(
        items=_listings(db, [by_id[c.id] for c in page], scores),
        total=len(ranked),
    )


def list_threads(db: Session, query: ThreadQuery) -> ThreadPage:
    """Return one page of threads for a listing request.

    Args:
        db: Database session
        query: Validated listing parameters

    Returns:
        ThreadPage with the page items and the total number of listable threads

    Raises:
        NotFound: If the board filter names an unknown board
        StoreUnavailable: If the database cannot be reached
    """
    repo = ThreadRepository(db)
    try:
        filters = _resolve_filters(repo, query)
        if query.sort is SortMode.NEW:
            return _list_new(db, repo, filters, query)
        return _list_ranked(db, repo, filters, query)
    except OperationalError as exc:
        logger.error("Thread listing failed", exc_info=True)
        raise StoreUnavailable("Threads could not be listed") from exc


def get_thread(db: Session, thread_id: int) -> ThreadListing:
    """Return a single visible thread with its score and comment count.

    Raises:
        NotFound: If the thread is missing or archived
    """
    thread = ThreadRepository(db).get_visible_or_404(thread_id)
    counts = PostRepository(db).comment_counts([thread.id])
    return ThreadListing(
        thread=thread,
        score=score_of(db, TargetType.THREAD, thread.id),
        comment_count=counts.get(thread.id, 0),
    )
