"""Typed errors raised by the discussion core.

Services raise these and never swallow them. The API layer renders them
through a single exception handler registered in :mod:`agora.main`.
"""

from __future__ import annotations


class ForumError(Exception):
    """Base class for every business and infrastructure error of the core."""

    code: str = "forum_error"
    status_code: int = 400
    retryable: bool = False

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message()
        super().__init__(self.message)

    @classmethod
    def default_message(cls) -> str:
        return cls.code.replace("_", " ").capitalize()


class AuthRequired(ForumError):
    """The operation needs an authenticated user."""

    code = "auth_required"
    status_code = 401


class NotFound(ForumError):
    """Target, thread, board or post is missing."""

    code = "not_found"
    status_code = 404


class TargetDeleted(ForumError):
    """Vote or reply attempted on soft-deleted content."""

    code = "target_deleted"
    status_code = 409


class ThreadLocked(ForumError):
    """Thread does not accept new replies."""

    code = "thread_locked"
    status_code = 409


class DepthLimitExceeded(ForumError):
    """Reply would nest deeper than the configured maximum depth."""

    code = "depth_limit_exceeded"
    status_code = 409


class ValidationError(ForumError):
    """Malformed input such as an unknown sort mode or an empty body."""

    code = "validation_error"
    status_code = 422


class StoreUnavailable(ForumError):
    """Transient failure talking to the database. Safe to retry."""

    code = "store_unavailable"
    status_code = 503
    retryable = True


__all__ = [
    "AuthRequired",
    "DepthLimitExceeded",
    "ForumError",
    "NotFound",
    "StoreUnavailable",
    "TargetDeleted",
    "ThreadLocked",
    "ValidationError",
]
