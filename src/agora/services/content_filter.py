"""Content filter collaborator consulted when replies are posted.

The verdict is informational: it is returned to the caller for display and
never changes whether a reply is accepted.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol


@dataclass(frozen=True)
class FilterVerdict:
    """Outcome of reviewing a body of text."""

    flagged: bool = False
    reasons: tuple[str, ...] = field(default_factory=tuple)


class ContentFilter(Protocol):
    """Anything that can review a reply body."""

    def review(self, body: str) -> FilterVerdict:
        """Return a verdict for ``body``."""
        ...


class PassthroughFilter:
    """Default filter that never flags anything."""

    def review(self, body: str) -> FilterVerdict:
        return FilterVerdict()


_content_filter: ContentFilter = PassthroughFilter()


def get_content_filter() -> ContentFilter:
    """Return the shared content filter instance."""
    return _content_filter
