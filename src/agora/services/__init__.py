# src/agora/services/__init__.py
"""Business logic services for the Agora discussion core."""

from .comment_tree import CommentSort, build_comment_tree, list_comments
from .posting import create_thread, reply
from .ranking import SortMode, TopPeriod, rank
from .reply_depth import validate_reply_depth
from .thread_query import ThreadQuery, get_thread, list_threads
from .votes import cast_vote, get_user_vote

__all__ = [
    "CommentSort",
    "SortMode",
    "ThreadQuery",
    "TopPeriod",
    "build_comment_tree",
    "cast_vote",
    "create_thread",
    "get_thread",
    "get_user_vote",
    "list_comments",
    "list_threads",
    "rank",
    "reply",
    "validate_reply_depth",
]
