import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-with-at-least-32-bytes-of-entropy")
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel, create_engine
from sqlalchemy.pool import StaticPool

from main import app
from dependencies import get_session, get_token_service
from models import Post, UserCreate
from services.repository import UserRepository

INITIAL_POSTS = [
    {"title": "React patterns", "author": "Michael Chan", "url": "https://reactpatterns.com/", "likes": 7},
    {"title": "Go To Statement Considered Harmful", "author": "Edsger W. Dijkstra",
     "url": "http://www.u.arizona.edu/~rubinson/copyright_violations/Go_To_Considered_Harmful.html", "likes": 5},
    {"title": "Canonical string reduction", "author": "Edsger W. Dijkstra",
     "url": "http://www.cs.utexas.edu/~EWD/transcriptions/EWD08xx/EWD808.html", "likes": 12},
    {"title": "First class tests", "author": "Robert C. Martin",
     "url": "http://blog.cleancoder.com/uncle-bob/2017/05/05/TestDefinitions.htmll", "likes": 10},
    {"title": "TDD harms architecture", "author": "Robert C. Martin",
     "url": "http://blog.cleancoder.com/uncle-bob/2017/03/03/TDD-Harms-Architecture.html", "likes": 0},
    {"title": "Type wars", "author": "Robert C. Martin",
     "url": "http://blog.cleancoder.com/uncle-bob/2016/05/01/TypeWars.html", "likes": 2},
]

@pytest.fixture
def test_db_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)

@pytest.fixture
def db_session(test_db_engine):
    with Session(test_db_engine) as session:
        yield session

@pytest.fixture
def client(db_session):
    app.dependency_overrides[get_session] = lambda: db_session
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()

@pytest.fixture
def token_service():
    return get_token_service()

@pytest.fixture
def create_user(db_session):
    def _create_user(username="root", password="sekret", name="Superuser"):
        return UserRepository(db_session).register(
            UserCreate(username=username, password=password, name=name)
        )
    return _create_user

@pytest.fixture
def user(create_user):
    return create_user()

@pytest.fixture
def auth_header_for(token_service):
    def _auth_header_for(user):
        return {"Authorization": f"Bearer {token_service.issue(user.id, username=user.username)}"}
    return _auth_header_for

@pytest.fixture
def auth_header(user, auth_header_for):
    return auth_header_for(user)

@pytest.fixture
def initial_posts(db_session, user):
    posts = [Post(**data, user_id=user.id) for data in INITIAL_POSTS]
    db_session.add_all(posts)
    db_session.commit()
    for post in posts:
        db_session.refresh(post)
    return posts
