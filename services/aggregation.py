"""Summary statistics over a sequence of posts.

The functions are pure: they read ``title``, ``author`` and ``likes`` from
each post, never mutate the input and, given the same ordering, always return
the same result. Ties go to whatever appears first in the input. Over an
empty sequence every statistic comes back with all fields unset (``is_empty``
is true and it serializes to ``{}``) instead of raising.
"""
from typing import Iterable, Protocol

from models.stats import AuthorLikes, AuthorPostCount, FavoritePost, PostStats


class PostLike(Protocol):
    title: str
    author: str
    likes: int


def total_likes(posts: Iterable[PostLike]) -> int:
    return sum(post.likes for post in posts)


def favorite_post(posts: Iterable[PostLike]) -> FavoritePost:
    favorite = None
    for post in posts:
        if favorite is None or post.likes > favorite.likes:
            favorite = post
    if favorite is None:
        return FavoritePost()
    return FavoritePost(title=favorite.title, author=favorite.author, likes=favorite.likes)


def most_prolific_author(posts: Iterable[PostLike]) -> AuthorPostCount:
    # dicts keep insertion order, i.e. first-appearance order of authors
    counts: dict[str, int] = {}
    for post in posts:
        counts[post.author] = counts.get(post.author, 0) + 1

    best = AuthorPostCount()
    for author, count in counts.items():
        if best.count is None or count > best.count:
            best = AuthorPostCount(author=author, count=count)
    return best


def most_liked_author(posts: Iterable[PostLike]) -> AuthorLikes:
    likes_by_author: dict[str, int] = {}
    for post in posts:
        likes_by_author[post.author] = likes_by_author.get(post.author, 0) + post.likes

    best = AuthorLikes()
    for author, likes in likes_by_author.items():
        if best.likes is None or likes > best.likes:
            best = AuthorLikes(author=author, likes=likes)
    return best


def summarize(posts: Iterable[PostLike]) -> PostStats:
    posts = list(posts)
    return PostStats(
        total_likes=total_likes(posts),
        favorite_post=favorite_post(posts),
        most_prolific_author=most_prolific_author(posts),
        most_liked_author=most_liked_author(posts),
    )
