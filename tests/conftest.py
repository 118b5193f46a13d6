# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from datetime import datetime, timedelta
from itertools import count

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from agora.core.security import create_access_token
from agora.db.session import Base
from agora.db.session import get_db as app_get_session
from agora.db.time import utcnow
from agora.main import app as fastapi_app
from agora.models import Board, Post, TargetType, Thread, ThreadStatus, User, Vote

TEST_DB_URL = "sqlite://"

_USER_COUNTER = count(1)


@pytest.fixture()
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., User]:
    """Return a factory persisting forum users."""

    def _make_user(display_name: str | None = None) -> User:
        user = User(id=f"user-{next(_USER_COUNTER)}", display_name=display_name, is_active=True)
        db_session.add(user)
        db_session.commit()
        return user

    return _make_user


@pytest.fixture()
def test_user(make_user: Callable[..., User]) -> User:
    """Create and return the primary test user."""
    return make_user("Test User")


@pytest.fixture()
def other_user(make_user: Callable[..., User]) -> User:
    """Create and return a second test user."""
    return make_user("Other User")


@pytest.fixture()
def auth_token(test_user: User) -> dict[str, str]:
    """Return authorization headers for the primary test user."""
    return {"Authorization": f"Bearer {create_access_token(test_user.id)}"}


@pytest.fixture()
def other_auth_token(other_user: User) -> dict[str, str]:
    """Return authorization headers for the secondary test user."""
    return {"Authorization": f"Bearer {create_access_token(other_user.id)}"}


@pytest.fixture()
def board(db_session: Session) -> Board:
    """Create the default test board."""
    board = Board(slug="fretes", name="Fretes", description="Freight talk", is_active=True)
    db_session.add(board)
    db_session.commit()
    return board


@pytest.fixture()
def make_thread(db_session: Session, board: Board, test_user: User) -> Callable[..., Thread]:
    """Return a factory creating a thread together with its body post."""

    def _make_thread(
        title: str = "Thread",
        *,
        age: timedelta = timedelta(0),
        created_at: datetime | None = None,
        is_pinned: bool = False,
        is_locked: bool = False,
        status: ThreadStatus = ThreadStatus.OPEN,
        target_board: Board | None = None,
    ) -> Thread:
        created = created_at or (utcnow() - age)
        thread = Thread(
            board_id=(target_board or board).id,
            author_id=test_user.id,
            title=title,
            created_at=created,
            last_post_at=created,
            is_pinned=is_pinned,
            is_locked=is_locked,
            status=status,
        )
        db_session.add(thread)
        db_session.flush()
        db_session.add(
            Post(
                thread_id=thread.id,
                author_id=test_user.id,
                body=f"{title} body",
                created_at=created,
            )
        )
        db_session.commit()
        return thread

    return _make_thread


@pytest.fixture()
def thread(make_thread: Callable[..., Thread]) -> Thread:
    """Create a default open thread."""
    return make_thread("Vendo carreta")


@pytest.fixture()
def make_post(db_session: Session, test_user: User) -> Callable[..., Post]:
    """Return a factory persisting posts with controllable timestamps."""
    step = count(1)

    def _make_post(
        thread: Thread,
        parent: Post | None = None,
        *,
        body: str = "reply",
        created_at: datetime | None = None,
        is_deleted: bool = False,
    ) -> Post:
        post = Post(
            thread_id=thread.id,
            author_id=test_user.id,
            body=body,
            parent_post_id=parent.id if parent is not None else None,
            created_at=created_at or (utcnow() + timedelta(seconds=next(step))),
            is_deleted=is_deleted,
            deleted_reason="Removed by moderator" if is_deleted else None,
        )
        db_session.add(post)
        db_session.commit()
        return post

    return _make_post


@pytest.fixture()
def body_post(db_session: Session, thread: Thread) -> Post:
    """Return the body post of the default thread."""
    return (
        db_session.query(Post)
        .filter(Post.thread_id == thread.id)
        .order_by(Post.id.asc())
        .first()
    )


@pytest.fixture()
def add_votes(db_session: Session, make_user: Callable[..., User]) -> Callable[..., None]:
    """Return a helper writing one ledger row per value, each from a fresh user."""

    def _add_votes(target_type: TargetType, target_id: int, values: list[int]) -> None:
        for value in values:
            voter = make_user()
            db_session.add(
                Vote(user_id=voter.id, target_type=target_type, target_id=target_id, value=value)
            )
        db_session.commit()

    return _add_votes
