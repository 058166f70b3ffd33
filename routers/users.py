from typing import List
from fastapi import APIRouter, status
import logging

from models import UserCreate, UserPublic
from dependencies import SessionDep, to_user_public
from core.errors import NotFound
from services.repository import UserRepository

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("", response_model=UserPublic, status_code=status.HTTP_201_CREATED)
async def create_user(user: UserCreate, session: SessionDep) -> UserPublic:
    """Create a new user account"""
    user_db = UserRepository(session).register(user)
    return to_user_public(user_db)


@router.get("", response_model=List[UserPublic])
async def get_users(session: SessionDep) -> List[UserPublic]:
    """List every user with the posts they own"""
    return [to_user_public(user) for user in UserRepository(session).find_all()]


@router.get("/{user_id}", response_model=UserPublic)
async def get_user_by_id(user_id: str, session: SessionDep) -> UserPublic:
    """Get public profile information for any user by ID"""
    user = UserRepository(session).find_by_id(user_id)
    if not user:
        raise NotFound("user not found")
    return to_user_public(user)
