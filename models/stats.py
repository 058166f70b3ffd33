from pydantic import BaseModel


class EmptyAwareModel(BaseModel):
    """Statistic whose fields are all unset when computed over no posts"""

    @property
    def is_empty(self) -> bool:
        return all(value is None for value in self.__dict__.values())


class FavoritePost(EmptyAwareModel):
    title: str | None = None
    author: str | None = None
    likes: int | None = None


class AuthorPostCount(EmptyAwareModel):
    author: str | None = None
    count: int | None = None


class AuthorLikes(EmptyAwareModel):
    author: str | None = None
    likes: int | None = None


class PostStats(BaseModel):
    total_likes: int
    favorite_post: FavoritePost
    most_prolific_author: AuthorPostCount
    most_liked_author: AuthorLikes
