from .user import User, UserCreate, UserPublic, UserRef
from .post import Post, PostCreate, PostUpdate, PostPublic, PostRef
from .auth import LoginRequest, Token
from .stats import FavoritePost, AuthorPostCount, AuthorLikes, PostStats
from .response import ErrorResponse, HealthResponse

UserPublic.model_rebuild(_types_namespace={"PostRef": PostRef})

__all__ = [
    "User", "UserCreate", "UserPublic", "UserRef",
    "Post", "PostCreate", "PostUpdate", "PostPublic", "PostRef",
    "LoginRequest", "Token",
    "FavoritePost", "AuthorPostCount", "AuthorLikes", "PostStats",
    "ErrorResponse", "HealthResponse",
]
