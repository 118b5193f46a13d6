# src/agora/api/v1/endpoints/threads.py
"""Thread, comment and reply endpoints for the Agora API."""

from fastapi import APIRouter, Query, status

from agora.models import Post
from agora.schemas.post import (
    REMOVED_BODY,
    CommentNodeResponse,
    PostResponse,
    ReplyCreate,
    ReplyResponse,
)
from agora.schemas.thread import ThreadCreate, ThreadListResponse, ThreadResponse
from agora.services.comment_tree import CommentNode, list_comments, parse_comment_sort
from agora.services.posting import create_thread, reply
from agora.services.thread_query import ThreadListing, ThreadQuery, get_thread, list_threads

from ..dependencies import ContentFilterDep, CurrentUserDep, SessionDep

router = APIRouter(prefix="/threads", tags=["threads"])


def _to_thread_response(listing: ThreadListing) -> ThreadResponse:
    response = ThreadResponse.model_validate(listing.thread)
    return response.model_copy(
        update={"score": listing.score, "comment_count": listing.comment_count}
    )


def _to_post_response(post: Post) -> PostResponse:
    response = PostResponse.model_validate(post)
    if post.is_deleted:
        # Removed posts stay in the tree so their replies keep a parent.
        response = response.model_copy(update={"body": REMOVED_BODY})
    return response


def _to_comment_response(node: CommentNode) -> CommentNodeResponse:
    return CommentNodeResponse(
        post=_to_post_response(node.post),
        score=node.score,
        depth=node.depth,
        children=[_to_comment_response(child) for child in node.children],
    )


@router.get("/", response_model=ThreadListResponse)
async def list_thread_page(
    db: SessionDep,
    sort: str = Query("hot", description="hot, new or top"),
    period: str | None = Query(None, description="Window for top: 24h, 7d, 30d or all"),
    board: str | None = Query(None, description="Board slug or id"),
    search: str | None = Query(None, max_length=200, description="Case-insensitive title search"),
    page: int = Query(1, description="1-based page number"),
    page_size: int | None = Query(None, description="Threads per page"),
) -> ThreadListResponse:
    """List threads ordered by hot, new or top.

    ``hot`` and ``top`` rank a bounded window of the most recent threads;
    ``new`` paginates directly in the database.

    Raises:
        ValidationError: Unknown sort/period or out-of-range paging
        NotFound: Unknown board
    """
    query = ThreadQuery.parse(
        sort=sort,
        period=period,
        board=board,
        search=search,
        page=page,
        page_size=page_size,
    )
    result = list_threads(db, query)
    return ThreadListResponse(
        items=[_to_thread_response(item) for item in result.items],
        total=result.total,
        page=query.page,
        page_size=query.page_size,
    )


@router.post("/", response_model=ThreadResponse, status_code=status.HTTP_201_CREATED)
async def create_new_thread(
    thread_data: ThreadCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> ThreadResponse:
    """Create a thread and its body post on a board."""
    thread = create_thread(
        db,
        user_id=current_user.id,
        board=thread_data.board,
        title=thread_data.title,
        body=thread_data.body,
    )
    return _to_thread_response(get_thread(db, thread.id))


@router.get("/{thread_id}", response_model=ThreadResponse)
async def get_thread_detail(thread_id: int, db: SessionDep) -> ThreadResponse:
    """Get a specific thread with its score."""
    return _to_thread_response(get_thread(db, thread_id))


@router.get("/{thread_id}/comments", response_model=list[CommentNodeResponse])
async def get_thread_comments(
    thread_id: int,
    db: SessionDep,
    sort: str = Query("best", description="best, new or old"),
    include_body: bool = Query(False, description="Keep the thread body as the first root"),
) -> list[CommentNodeResponse]:
    """Return the thread's comments as a nested, sorted forest."""
    roots = list_comments(db, thread_id, parse_comment_sort(sort), include_body=include_body)
    return [_to_comment_response(root) for root in roots]


@router.post(
    "/{thread_id}/replies",
    response_model=ReplyResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_reply(
    thread_id: int,
    reply_data: ReplyCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
    content_filter: ContentFilterDep,
) -> ReplyResponse:
    """Reply to a thread or to a post within it.

    Raises:
        ThreadLocked: Thread does not accept replies
        DepthLimitExceeded: Parent is already at the maximum depth
        TargetDeleted: Parent post was removed
        NotFound: Thread or parent post missing
    """
    result = reply(
        db,
        user_id=current_user.id,
        thread_id=thread_id,
        body=reply_data.body,
        parent_post_id=reply_data.parent_post_id,
        content_filter=content_filter,
    )
    return ReplyResponse(
        post=_to_post_response(result.post),
        depth=result.depth,
        flagged=result.verdict.flagged,
        flag_reasons=list(result.verdict.reasons),
    )
