# src/agora/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .threads import router as threads_router
from .votes import router as votes_router

__all__ = [
    "threads_router",
    "votes_router",
]
