from fastapi import APIRouter
import logging

from models import LoginRequest, Token
from dependencies import SessionDep, TokenServiceDep
from auth.security import verify_password
from core.errors import InvalidCredentials
from services.repository import UserRepository

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("", response_model=Token)
async def login(
    credentials: LoginRequest,
    session: SessionDep,
    tokens: TokenServiceDep,
) -> Token:
    """Login endpoint to obtain a bearer token"""
    user = UserRepository(session).find_by_username(credentials.username)
    if not user or not verify_password(credentials.password, user.password_hash):
        logger.info(f"Failed login attempt for {credentials.username}")
        raise InvalidCredentials()

    token = tokens.issue(user.id, username=user.username)
    return Token(token=token, username=user.username, name=user.name)
