from typing import TYPE_CHECKING

from sqlmodel import Field, SQLModel, Relationship

from .user import UserRef, new_id

if TYPE_CHECKING:
    from .user import User


class PostBase(SQLModel):
    title: str
    author: str
    url: str
    likes: int = Field(default=0)


class Post(PostBase, table=True):
    id: str = Field(default_factory=new_id, primary_key=True)
    user_id: str = Field(foreign_key="user.id", index=True)

    user: "User" = Relationship(back_populates="posts")


class PostRef(PostBase):
    """Post projection embedded in user responses"""
    id: str


class PostPublic(PostBase):
    id: str
    user: UserRef


# Required fields are checked by the repository so that every write path
# reports missing values the same way.
class PostCreate(SQLModel):
    title: str | None = None
    author: str | None = None
    url: str | None = None
    likes: int | None = None


class PostUpdate(SQLModel):
    title: str | None = None
    author: str | None = None
    url: str | None = None
    likes: int | None = None
