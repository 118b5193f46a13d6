# mypy: ignore-errors
# tests/services/test_posting.py
"""Tests for the reply and thread write paths."""

from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from agora.core.errors import (
    DepthLimitExceeded,
    NotFound,
    TargetDeleted,
    ThreadLocked,
    ValidationError,
)
from agora.db.time import as_utc
from agora.models import Post, Thread, ThreadStatus
from agora.services.content_filter import FilterVerdict, PassthroughFilter
from agora.services.posting import create_thread, reply


def test_reply_inserts_and_bumps_last_post_at(db_session, test_user, make_thread) -> None:
    thread = make_thread("Frete", age=timedelta(hours=5))
    before = as_utc(thread.last_post_at)

    result = reply(db_session, user_id=test_user.id, thread_id=thread.id, body="  Tenho interesse  ")

    assert result.post.body == "Tenho interesse"
    assert result.post.parent_post_id is None
    assert result.depth == 0
    assert result.verdict == FilterVerdict()
    db_session.refresh(thread)
    assert as_utc(thread.last_post_at) > before


def test_nested_reply_reports_depth(db_session, test_user, thread, make_post) -> None:
    parent = make_post(thread)
    child = make_post(thread, parent)
    result = reply(db_session, user_id=test_user.id, thread_id=thread.id, body="deeper", parent_post_id=child.id)
    assert result.depth == 2


def test_reply_chain_stops_at_depth_limit(db_session, test_user, thread, body_post) -> None:
    parent_id = body_post.id
    for expected_depth in range(1, 7):
        result = reply(db_session, user_id=test_user.id, thread_id=thread.id, body="x", parent_post_id=parent_id)
        assert result.depth == expected_depth
        parent_id = result.post.id

    with pytest.raises(DepthLimitExceeded):
        reply(db_session, user_id=test_user.id, thread_id=thread.id, body="too deep", parent_post_id=parent_id)
    assert db_session.query(Post).filter(Post.thread_id == thread.id).count() == 7


@pytest.mark.parametrize(
    "flags",
    [{"is_locked": True}, {"status": ThreadStatus.LOCKED}],
)
def test_locked_thread_rejects_replies(db_session, test_user, make_thread, flags) -> None:
    locked = make_thread("Trancado", **flags)
    with pytest.raises(ThreadLocked):
        reply(db_session, user_id=test_user.id, thread_id=locked.id, body="hello")


def test_archived_or_missing_thread(db_session, test_user, make_thread) -> None:
    archived = make_thread("Arquivado", status=ThreadStatus.ARCHIVED)
    with pytest.raises(NotFound):
        reply(db_session, user_id=test_user.id, thread_id=archived.id, body="hello")
    with pytest.raises(NotFound):
        reply(db_session, user_id=test_user.id, thread_id=4242, body="hello")


def test_parent_must_exist_in_same_thread(db_session, test_user, thread, make_thread, make_post) -> None:
    elsewhere = make_post(make_thread("other"))
    with pytest.raises(NotFound):
        reply(db_session, user_id=test_user.id, thread_id=thread.id, body="x", parent_post_id=elsewhere.id)
    with pytest.raises(NotFound):
        reply(db_session, user_id=test_user.id, thread_id=thread.id, body="x", parent_post_id=9999)


def test_deleted_parent_rejected(db_session, test_user, thread, make_post) -> None:
    removed = make_post(thread, is_deleted=True)
    with pytest.raises(TargetDeleted):
        reply(db_session, user_id=test_user.id, thread_id=thread.id, body="x", parent_post_id=removed.id)


@pytest.mark.parametrize("body", ["", "   ", "x" * 10_001])
def test_body_validation(db_session, test_user, thread, body) -> None:
    with pytest.raises(ValidationError):
        reply(db_session, user_id=test_user.id, thread_id=thread.id, body=body)


def test_content_filter_verdict_is_informational(db_session, test_user, thread) -> None:
    flagger = MagicMock()
    flagger.review.return_value = FilterVerdict(flagged=True, reasons=("phone number",))

    result = reply(
        db_session,
        user_id=test_user.id,
        thread_id=thread.id,
        body="Liga 11 99999-0000",
        content_filter=flagger,
    )

    assert result.post.id is not None
    assert result.verdict.flagged is True
    assert result.verdict.reasons == ("phone number",)
    flagger.review.assert_called_once_with("Liga 11 99999-0000")


def test_passthrough_filter_never_flags() -> None:
    assert PassthroughFilter().review("anything").flagged is False


def test_create_thread_with_body(db_session, test_user, board) -> None:
    thread = create_thread(db_session, user_id=test_user.id, board="fretes", title=" Frete ", body="Detalhes")

    stored = db_session.get(Thread, thread.id)
    assert stored.title == "Frete"
    assert stored.status == ThreadStatus.OPEN
    posts = db_session.query(Post).filter(Post.thread_id == thread.id).all()
    assert [(p.body, p.parent_post_id) for p in posts] == [("Detalhes", None)]


def test_create_thread_validation(db_session, test_user, board) -> None:
    with pytest.raises(NotFound):
        create_thread(db_session, user_id=test_user.id, board="unknown", title="t", body="b")
    with pytest.raises(ValidationError):
        create_thread(db_session, user_id=test_user.id, board=board.slug, title="", body="b")
    with pytest.raises(ValidationError):
        create_thread(db_session, user_id=test_user.id, board=board.slug, title="t" * 201, body="b")

    board.is_active = False
    db_session.commit()
    with pytest.raises(NotFound):
        create_thread(db_session, user_id=test_user.id, board=board.slug, title="t", body="b")
