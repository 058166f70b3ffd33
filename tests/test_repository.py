import pytest

from core.errors import MalformedIdentifier, ValidationError
from models import Post, PostCreate, User, UserCreate
from services.repository import PostRepository, UserRepository, ensure_valid_id
from auth.security import verify_password

MISSING_ID = "0" * 32


@pytest.mark.parametrize("value", ["1234", "xyz", "0" * 31, "G" * 32, 1234, None])
def test_malformed_ids_are_rejected(value):
    with pytest.raises(MalformedIdentifier):
        ensure_valid_id(value)

def test_find_by_id_rejects_malformed_id(db_session):
    with pytest.raises(MalformedIdentifier):
        PostRepository(db_session).find_by_id("1234")

def test_find_all_returns_posts_with_owner(db_session, initial_posts, user):
    posts = PostRepository(db_session).find_all()
    assert len(posts) == len(initial_posts)
    assert all(post.user.username == user.username for post in posts)

def test_find_by_id_of_missing_post_is_none(db_session):
    assert PostRepository(db_session).find_by_id(MISSING_ID) is None

def test_build_defaults_likes_to_zero(db_session, user):
    repository = PostRepository(db_session)
    post = repository.build(PostCreate(title="t", author="a", url="u"), owner=user)
    repository.insert(post)
    assert post.id is not None
    assert post.likes == 0

@pytest.mark.parametrize("missing", ["title", "author", "url"])
def test_insert_requires_fields(db_session, user, missing):
    data = {"title": "t", "author": "a", "url": "u", "likes": 1}
    data[missing] = "   "
    with pytest.raises(ValidationError, match=f"{missing} is required"):
        PostRepository(db_session).insert(Post(**data, user_id=user.id))

def test_update_by_id_changes_fields(db_session, initial_posts):
    repository = PostRepository(db_session)
    updated = repository.update_by_id(initial_posts[0].id, {"likes": 100, "title": "New"})
    assert updated.likes == 100
    assert updated.title == "New"
    assert updated.author == "Michael Chan"

def test_update_by_id_of_missing_post_is_none(db_session):
    assert PostRepository(db_session).update_by_id(MISSING_ID, {"likes": 1}) is None

def test_update_rejects_null_likes(db_session, initial_posts):
    with pytest.raises(ValidationError):
        PostRepository(db_session).update_by_id(initial_posts[0].id, {"likes": None})
    db_session.refresh(initial_posts[0])
    assert initial_posts[0].likes == 7

def test_update_ignores_owner_field(db_session, initial_posts, user):
    repository = PostRepository(db_session)
    updated = repository.update_by_id(initial_posts[0].id, {"user_id": MISSING_ID, "likes": 1})
    assert updated.user_id == user.id

def test_delete_by_id_is_idempotent(db_session, initial_posts):
    repository = PostRepository(db_session)
    post_id = initial_posts[0].id
    repository.delete_by_id(post_id)
    repository.delete_by_id(post_id)
    repository.delete_by_id(MISSING_ID)
    assert len(repository.find_all()) == len(initial_posts) - 1


def test_register_hashes_password(db_session):
    user = UserRepository(db_session).register(
        UserCreate(username="mluukkai", name="Matti Luukkainen", password="salainen")
    )
    assert user.password_hash != "salainen"
    assert verify_password("salainen", user.password_hash)

def test_register_rejects_short_username(db_session):
    with pytest.raises(ValidationError, match=r"minimum allowed length \(3\)"):
        UserRepository(db_session).register(UserCreate(username="ro", password="sekret"))

def test_register_rejects_short_password(db_session):
    with pytest.raises(ValidationError, match="password"):
        UserRepository(db_session).register(UserCreate(username="root", password="pw"))

def test_register_requires_password(db_session):
    with pytest.raises(ValidationError, match="password is required"):
        UserRepository(db_session).register(UserCreate(username="root"))

def test_register_rejects_duplicate_username(db_session, user):
    with pytest.raises(ValidationError, match="unique"):
        UserRepository(db_session).register(UserCreate(username=user.username, password="another"))

def test_find_by_username(db_session, user):
    repository = UserRepository(db_session)
    assert repository.find_by_username("root").id == user.id
    assert repository.find_by_username("nobody") is None

def test_register_losing_a_race_for_the_username(db_session, monkeypatch):
    repository = UserRepository(db_session)
    # Another registration commits "root" after our uniqueness lookup ran
    db_session.add(User(username="root", password_hash="x"))
    db_session.commit()
    monkeypatch.setattr(repository, "find_by_username", lambda username: None)

    with pytest.raises(ValidationError, match="unique"):
        repository.register(UserCreate(username="root", password="sekret"))

    assert len(UserRepository(db_session).find_all()) == 1

def test_register_rejects_password_over_72_bytes(db_session):
    with pytest.raises(ValidationError, match="maximum allowed length"):
        UserRepository(db_session).register(UserCreate(username="root", password="ä" * 37))

def test_insert_rejects_likes_outside_integer_column(db_session, user):
    post = Post(title="t", author="a", url="u", likes=10 ** 20, user_id=user.id)
    with pytest.raises(ValidationError, match="likes must be between"):
        PostRepository(db_session).insert(post)
