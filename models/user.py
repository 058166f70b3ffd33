from uuid import uuid4
from typing import TYPE_CHECKING

from sqlmodel import Field, SQLModel, Relationship

if TYPE_CHECKING:
    from .post import Post, PostRef


def new_id() -> str:
    return uuid4().hex


class UserBase(SQLModel):
    username: str = Field(index=True, unique=True)
    name: str | None = Field(default=None)


class User(UserBase, table=True):
    id: str = Field(default_factory=new_id, primary_key=True)
    password_hash: str

    posts: list["Post"] = Relationship(back_populates="user")


class UserRef(SQLModel):
    """Minimal owner projection embedded in post responses"""
    id: str
    username: str
    name: str | None = None


class UserPublic(UserBase):
    id: str
    posts: list["PostRef"] = []


class UserCreate(SQLModel):
    username: str | None = None
    name: str | None = None
    password: str | None = None
