from datetime import timedelta
from functools import lru_cache
from typing import Annotated
from uuid import uuid4
import logging
from time import time

from fastapi import Depends, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel import Session, create_engine

from auth.tokens import TokenService
from core.config import get_settings
from core.errors import BloglistError
from models import Post, PostPublic, PostRef, User, UserPublic, UserRef
from services.guard import OwnershipGuard

settings = get_settings()
logger = logging.getLogger(__name__)

connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(settings.DATABASE_URL, echo=settings.DB_ECHO, connect_args=connect_args)

# Database dependency
def get_session():
    with Session(engine) as session:
        yield session

SessionDep = Annotated[Session, Depends(get_session)]

# Authentication dependencies
bearer_scheme = HTTPBearer(auto_error=False)

@lru_cache()
def get_token_service() -> TokenService:
    return TokenService(
        secret_key=settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
        expires_delta=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )

TokenServiceDep = Annotated[TokenService, Depends(get_token_service)]

def get_token(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> str | None:
    """Token from an `Authorization: Bearer <token>` header, None otherwise"""
    if credentials is None:
        return None
    return credentials.credentials

def get_guard(session: SessionDep, tokens: TokenServiceDep) -> OwnershipGuard:
    return OwnershipGuard(session, tokens)

GuardDep = Annotated[OwnershipGuard, Depends(get_guard)]

async def get_current_user(
    guard: GuardDep,
    token: Annotated[str | None, Depends(get_token)],
) -> User:
    return guard.authenticate(token)

CurrentUserDep = Annotated[User, Depends(get_current_user)]

# Middleware
async def log_requests(request: Request, call_next):
    start_time = time()
    response = await call_next(request)
    process_time = time() - start_time

    logger.info(
        f"Path: {request.url.path} | "
        f"Method: {request.method} | "
        f"Status: {response.status_code} | "
        f"Process Time: {process_time:.2f}s"
    )
    return response

# Error handlers
def setup_error_handlers(app):
    @app.exception_handler(BloglistError)
    async def bloglist_exception_handler(request: Request, exc: BloglistError):
        logger.info(
            f"{request.method} {request.url.path} rejected with "
            f"{exc.status_code}: {exc.message}"
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.message},
        )

    @app.exception_handler(status.HTTP_404_NOT_FOUND)
    async def unknown_endpoint_handler(request: Request, exc: Exception):
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": "unknown endpoint"},
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        messages = []
        for error in exc.errors():
            location = ".".join(str(part) for part in error["loc"] if part != "body")
            messages.append(f"{location}: {error['msg']}" if location else error["msg"])
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": "; ".join(messages)},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        error_id = str(uuid4())
        logger.error(
            f"Unhandled error {error_id}: {str(exc)}",
            exc_info=True,
            extra={
                "path": request.url.path,
                "method": request.method,
                "error_id": error_id,
            },
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "An unexpected error occurred", "error_id": error_id},
        )


def to_post_public(post: Post) -> PostPublic:
    """Public shape of a post, with the owner reduced to {id, username, name}"""
    return PostPublic(
        id=post.id,
        title=post.title,
        author=post.author,
        url=post.url,
        likes=post.likes,
        user=UserRef.model_validate(post.user),
    )


def to_user_public(user: User) -> UserPublic:
    """Public shape of a user; the password hash never leaves the server"""
    return UserPublic(
        id=user.id,
        username=user.username,
        name=user.name,
        posts=[PostRef.model_validate(post) for post in user.posts],
    )
