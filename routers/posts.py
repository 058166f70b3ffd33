from typing import List
from fastapi import APIRouter, Response, status
import logging

from prometheus_client import Counter

from models import ErrorResponse, PostCreate, PostPublic, PostStats, PostUpdate
from dependencies import CurrentUserDep, GuardDep, SessionDep, to_post_public
from core.errors import NotFound
from services.aggregation import summarize
from services.repository import PostRepository

router = APIRouter()
logger = logging.getLogger(__name__)

posts_created_total = Counter(
    "posts_created_total",
    "Total number of posts created through the API"
)

MUTATION_ERRORS = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
}


@router.get("", response_model=List[PostPublic])
async def get_posts(session: SessionDep) -> List[PostPublic]:
    """List every post with its owner"""
    posts = PostRepository(session).find_all()
    return [to_post_public(post) for post in posts]


@router.get(
    "/stats",
    response_model=PostStats,
    response_model_exclude_none=True,
)
async def get_post_stats(session: SessionDep) -> PostStats:
    """Aggregate statistics over all stored posts"""
    return summarize(PostRepository(session).find_all())


@router.post(
    "",
    response_model=PostPublic,
    status_code=status.HTTP_201_CREATED,
    responses=MUTATION_ERRORS,
)
async def create_post(
    post: PostCreate,
    guard: GuardDep,
    current_user: CurrentUserDep,
) -> PostPublic:
    """Create a new post owned by the caller"""
    post_db = guard.authorize_create(current_user, post)
    posts_created_total.inc()
    return to_post_public(post_db)


@router.get("/{post_id}", response_model=PostPublic)
async def get_post(post_id: str, session: SessionDep) -> PostPublic:
    """Get a specific post by ID"""
    post = PostRepository(session).find_by_id(post_id)
    if not post:
        raise NotFound("post not found")
    return to_post_public(post)


@router.put("/{post_id}", response_model=PostPublic, responses=MUTATION_ERRORS)
async def update_post(
    post_id: str,
    post: PostUpdate,
    guard: GuardDep,
    current_user: CurrentUserDep,
) -> PostPublic:
    """Update title, author, url or likes of a post owned by the caller"""
    changes = post.model_dump(exclude_unset=True)
    post_db = guard.authorize_update(current_user, post_id, changes)
    return to_post_public(post_db)


@router.delete(
    "/{post_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=MUTATION_ERRORS,
)
async def delete_post(
    post_id: str,
    guard: GuardDep,
    current_user: CurrentUserDep,
) -> Response:
    """Delete a post owned by the caller"""
    guard.authorize_delete(current_user, post_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
