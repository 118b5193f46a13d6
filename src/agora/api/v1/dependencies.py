"""Shared API dependencies for authentication and common functionality."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from agora.core.errors import AuthRequired
from agora.core.security import decode_subject
from agora.db.session import get_db
from agora.models import User
from agora.services.content_filter import ContentFilter, get_content_filter

# HTTP Bearer scheme for JWT authentication; missing headers are reported as AuthRequired below.
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    db: SessionDep,
) -> User:
    """Get the current authenticated user from JWT token.

    Args:
        credentials: HTTP Bearer token credentials
        db: Database session

    Returns:
        User object for the authenticated user

    Raises:
        AuthRequired: If the token is missing or invalid, or the user is unknown
    """
    if credentials is None:
        raise AuthRequired("Not authenticated")

    subject = decode_subject(credentials.credentials)
    if subject is None:
        raise AuthRequired("Could not validate credentials")

    user = db.get(User, subject)
    if user is None or not user.is_active:
        raise AuthRequired("User not found")
    return user


def get_content_filter_dep() -> ContentFilter:
    """Return the shared content filter."""
    return get_content_filter()


# Type alias for current user dependency
CurrentUserDep = Annotated[User, Depends(get_current_user)]
ContentFilterDep = Annotated[ContentFilter, Depends(get_content_filter_dep)]
