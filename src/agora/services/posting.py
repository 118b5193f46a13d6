"""Write paths for threads and replies."""
from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from agora.core.errors import NotFound, StoreUnavailable, TargetDeleted, ThreadLocked, ValidationError
from agora.core.settings import settings
from agora.db.time import utcnow
from agora.models import Post, Thread, ThreadStatus
from agora.repositories.post_repo import PostRepository
from agora.repositories.thread_repo import ThreadRepository
from agora.services.content_filter import ContentFilter, FilterVerdict, get_content_filter
from agora.services.reply_depth import db_parent_lookup, validate_reply_depth

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReplyResult:
    """Inserted reply plus the information surfaced to the author."""

    post: Post
    depth: int
    verdict: FilterVerdict


def _clean_text(value: str, *, field_name: str, max_length: int) -> str:
    text = (value or "").strip()
    if not text:
        raise ValidationError(f"{field_name} must not be empty")
    if len(text) > max_length:
        raise ValidationError(f"{field_name} must be at most {max_length} characters")
    return text


def reply(
    db: Session,
    *,
    user_id: str,
    thread_id: int,
    body: str,
    parent_post_id: int | None = None,
    content_filter: ContentFilter | None = None,
) -> ReplyResult:
    """Insert a reply into a thread.

    The parent chain is read with row locks and the depth check runs in the
    same transaction as the insert, so the check and the write commit together.

    Args:
        db: Database session
        user_id: Authenticated author
        thread_id: Thread being replied to
        body: Reply text
        parent_post_id: Replied-to post, or None for a top-level reply
        content_filter: Collaborator reviewing the body; informational only

    Returns:
        ReplyResult with the stored post, its depth and the filter verdict

    Raises:
        ValidationError: If the body is empty or too long
        NotFound: If the thread or the parent post is missing
        ThreadLocked: If the thread does not accept replies
        TargetDeleted: If the parent post was removed
        DepthLimitExceeded: If the reply would nest too deep
        StoreUnavailable: If the database cannot be reached
    """
    text = _clean_text(body, field_name="Body", max_length=settings.max_body_length)
    reviewer = content_filter or get_content_filter()

    try:
        thread = ThreadRepository(db).get_visible_or_404(thread_id)
        if not thread.accepts_replies:
            logger.warning("Rejected reply to locked thread %s", thread_id)
            raise ThreadLocked("Thread is locked")

        posts = PostRepository(db)
        if parent_post_id is not None:
            parent = posts.get_for_update(parent_post_id)
            if parent is None or parent.thread_id != thread.id:
                raise NotFound("Parent post not found")
            if parent.is_deleted:
                raise TargetDeleted("Cannot reply to removed content")

        depth = validate_reply_depth(
            parent_post_id,
            db_parent_lookup(db, thread.id, lock=True),
        )
        post = posts.create(
            thread_id=thread.id,
            author_id=user_id,
            body=text,
            parent_post_id=parent_post_id,
        )
        thread.last_post_at = post.created_at
        db.commit()
    except OperationalError as exc:
        db.rollback()
        logger.error("Reply insert failed for thread %s", thread_id, exc_info=True)
        raise StoreUnavailable("Reply could not be stored") from exc

    verdict = reviewer.review(text)
    if verdict.flagged:
        logger.info("Reply %s flagged by content filter: %s", post.id, ", ".join(verdict.reasons))
    logger.info("Reply %s inserted in thread %s at depth %d", post.id, thread_id, depth)
    return ReplyResult(post=post, depth=depth, verdict=verdict)


def create_thread(
    db: Session,
    *,
    user_id: str,
    board: str | int,
    title: str,
    body: str,
) -> Thread:
    """Create a thread together with its body post.

    Raises:
        NotFound: If the board does not exist or is inactive
        ValidationError: If the title or body is empty or too long
        StoreUnavailable: If the database cannot be reached
    """
    clean_title = _clean_text(title, field_name="Title", max_length=settings.max_title_length)
    clean_body = _clean_text(body, field_name="Body", max_length=settings.max_body_length)

    try:
        target_board = ThreadRepository(db).get_board(board)
        if target_board is None or not target_board.is_active:
            raise NotFound("Board not found")

        now = utcnow()
        thread = Thread(
            board_id=target_board.id,
            author_id=user_id,
            title=clean_title,
            created_at=now,
            last_post_at=now,
            is_pinned=False,
            is_locked=False,
            status=ThreadStatus.OPEN,
        )
        db.add(thread)
        db.flush()
        PostRepository(db).create(thread_id=thread.id, author_id=user_id, body=clean_body)
        db.commit()
    except OperationalError as exc:
        db.rollback()
        logger.error("Thread creation failed on board %s", board, exc_info=True)
        raise StoreUnavailable("Thread could not be stored") from exc

    logger.info("Thread %s created on board %s by %s", thread.id, target_board.slug, user_id)
    return thread
