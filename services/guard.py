import logging

from sqlmodel import Session

from auth.tokens import TokenService
from core.errors import MalformedIdentifier, NotFound, Unauthorized
from models import Post, PostCreate, User
from services.repository import PostRepository, UserRepository

logger = logging.getLogger(__name__)


class OwnershipGuard:
    """Resolves the caller behind a bearer token and gates post mutations.

    Each mutation either applies completely or is rejected: the post write and
    the owner's post list update are committed in the same transaction.
    """

    def __init__(self, session: Session, tokens: TokenService):
        self.session = session
        self.tokens = tokens
        self.users = UserRepository(session)
        self.posts = PostRepository(session)

    def authenticate(self, raw_token: str | None) -> User:
        if not raw_token:
            raise Unauthorized()

        subject_id = self.tokens.verify(raw_token)
        try:
            user = self.users.find_by_id(subject_id)
        except MalformedIdentifier:
            logger.warning("Token subject is not a valid user id")
            raise Unauthorized()
        if user is None:
            logger.warning(f"Token subject {subject_id} no longer exists")
            raise Unauthorized()
        return user

    def authorize_create(self, user: User | None, draft: PostCreate) -> Post:
        if user is None:
            raise Unauthorized()

        post = self.posts.build(draft, owner=user)
        try:
            self.posts.insert(post, commit=False)
            user.posts.append(post)
            self.users.save(user, commit=False)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        self.session.refresh(post)
        logger.info(f"User {user.username} created post {post.id}")
        return post

    def _owned_post(self, user: User | None, post_id: str) -> Post:
        if user is None:
            raise Unauthorized()
        post = self.posts.find_by_id(post_id)
        if post is None:
            raise NotFound("post not found")
        if post.user_id != user.id:
            logger.warning(f"User {user.username} is not the owner of post {post.id}")
            raise Unauthorized()
        return post

    def authorize_update(self, user: User | None, post_id: str, changes: dict) -> Post:
        post = self._owned_post(user, post_id)
        return self.posts.update_by_id(post.id, changes)

    def authorize_delete(self, user: User | None, post_id: str) -> None:
        post = self._owned_post(user, post_id)
        try:
            user.posts.remove(post)
            self.users.save(user, commit=False)
            self.posts.delete_by_id(post.id, commit=False)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        logger.info(f"User {user.username} deleted post {post_id}")
