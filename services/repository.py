import logging
import re
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from auth.security import get_password_hash
from core.config import get_settings
from core.errors import MalformedIdentifier, ValidationError
from models import Post, PostCreate, User, UserCreate

settings = get_settings()
logger = logging.getLogger(__name__)

ID_PATTERN = re.compile(r"^[0-9a-f]{32}$")

POST_REQUIRED_FIELDS = ("title", "author", "url")
POST_UPDATABLE_FIELDS = ("title", "author", "url", "likes")

# likes is stored in a signed 64-bit INTEGER column
LIKES_MIN = -(2 ** 63)
LIKES_MAX = 2 ** 63 - 1


def ensure_valid_id(value: Any) -> str:
    """Reject identifiers that can't have been assigned by the store"""
    if not isinstance(value, str) or not ID_PATTERN.match(value):
        raise MalformedIdentifier()
    return value


def normalize_username(username: str | None) -> str:
    return (username or "").strip()


def _require_text(data: dict, field: str) -> str:
    value = data.get(field)
    if value is None or not str(value).strip():
        raise ValidationError(f"{field} is required")
    return value


def _check_likes(value: Any) -> int:
    # bool is an int subclass but never a like count
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError("likes must be an integer")
    if not LIKES_MIN <= value <= LIKES_MAX:
        raise ValidationError(f"likes must be between {LIKES_MIN} and {LIKES_MAX}")
    return value


class PostRepository:
    def __init__(self, session: Session):
        self.session = session

    def find_all(self) -> list[Post]:
        statement = select(Post).options(selectinload(Post.user))
        return list(self.session.exec(statement).all())

    def find_by_id(self, post_id: str) -> Post | None:
        return self.session.get(Post, ensure_valid_id(post_id))

    def build(self, draft: PostCreate, owner: User) -> Post:
        data = draft.model_dump()
        if data.get("likes") is None:
            data["likes"] = 0
        return Post(**data, user_id=owner.id)

    def insert(self, post: Post, commit: bool = True) -> Post:
        data = post.model_dump()
        for field in POST_REQUIRED_FIELDS:
            _require_text(data, field)
        _check_likes(post.likes)
        self.session.add(post)
        if commit:
            self.session.commit()
            self.session.refresh(post)
        else:
            self.session.flush()
        return post

    def validate_changes(self, fields: dict) -> dict:
        changes = {}
        for field, value in fields.items():
            if field not in POST_UPDATABLE_FIELDS:
                continue
            if field == "likes":
                if value is None:
                    raise ValidationError("likes must be an integer")
                changes[field] = _check_likes(value)
            else:
                changes[field] = _require_text(fields, field)
        return changes

    def update_by_id(self, post_id: str, fields: dict, commit: bool = True) -> Post | None:
        """Apply field changes; returns None when no post has this id"""
        changes = self.validate_changes(fields)
        post = self.find_by_id(post_id)
        if post is None:
            return None
        post.sqlmodel_update(changes)
        self.session.add(post)
        if commit:
            self.session.commit()
            self.session.refresh(post)
        return post

    def delete_by_id(self, post_id: str, commit: bool = True) -> None:
        post = self.find_by_id(post_id)
        if post is not None:
            self.session.delete(post)
        if commit:
            self.session.commit()


class UserRepository:
    def __init__(self, session: Session):
        self.session = session

    def find_all(self) -> list[User]:
        statement = select(User).options(selectinload(User.posts))
        return list(self.session.exec(statement).all())

    def find_by_id(self, user_id: str) -> User | None:
        return self.session.get(User, ensure_valid_id(user_id))

    def find_by_username(self, username: str) -> User | None:
        username = normalize_username(username)
        return self.session.exec(select(User).where(User.username == username)).first()

    def register(self, draft: UserCreate) -> User:
        """Validate a registration and store the user with a hashed password"""
        username = normalize_username(draft.username)
        password = draft.password or ""

        if not username:
            raise ValidationError("username is required")
        if len(username) < settings.USERNAME_MIN_LENGTH:
            raise ValidationError(
                f"username is shorter than the minimum allowed length ({settings.USERNAME_MIN_LENGTH})"
            )
        if not password:
            raise ValidationError("password is required")
        if len(password) < settings.PASSWORD_MIN_LENGTH:
            raise ValidationError(
                f"password is shorter than the minimum allowed length ({settings.PASSWORD_MIN_LENGTH})"
            )
        if len(password.encode("utf-8")) > settings.PASSWORD_MAX_BYTES:
            raise ValidationError(
                f"password is longer than the maximum allowed length ({settings.PASSWORD_MAX_BYTES} bytes)"
            )
        if self.find_by_username(username):
            raise ValidationError("username must be unique")

        user = User(
            username=username,
            name=draft.name,
            password_hash=get_password_hash(password),
        )
        self.session.add(user)
        try:
            self.session.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration of the same username
            self.session.rollback()
            raise ValidationError("username must be unique")
        self.session.refresh(user)
        logger.info(f"Registered user {user.username}")
        return user

    def save(self, user: User, commit: bool = True) -> User:
        self.session.add(user)
        if commit:
            self.session.commit()
            self.session.refresh(user)
        return user
