"""
Pytest configuration and fixtures.

Every test gets a fresh SQLite file database. The FastAPI app is wired to it
through a ``get_session`` override, and seeding helpers insert the users and
videos that the upload and account services would normally own.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("RATE_LIMIT_ENABLED", "0")

from datetime import datetime  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlmodel import SQLModel, Session, create_engine  # noqa: E402

from vidgraph.auth.utils import create_access_token  # noqa: E402
from vidgraph.core.store import EntityStore  # noqa: E402
from vidgraph.db.models import Comment, User, Video  # noqa: E402
from vidgraph.db.session import get_session  # noqa: E402
from vidgraph.main import app  # noqa: E402


@pytest.fixture
def engine(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'vidgraph.db'}",
        connect_args={"check_same_thread": False},
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def store(session):
    return EntityStore(session)


@pytest.fixture
def client(engine):
    def _get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _get_session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(session):
    """Factory inserting a user. Usage: make_user("alice")."""
    def _make_user(username: str, full_name: str = "", avatar_url: str | None = None) -> User:
        user = User(
            username=username,
            email=f"{username}@example.com",
            full_name=full_name or username.title(),
            avatar_url=avatar_url,
        )
        session.add(user)
        session.commit()
        session.refresh(user)
        return user
    return _make_user


@pytest.fixture
def make_video(session):
    """Factory inserting a video owned by ``owner``."""
    def _make_video(owner: User, title: str = "Clip", views: int = 0, is_published: bool = True) -> Video:
        video = Video(
            owner_id=owner.id,
            title=title,
            description=f"{title} description",
            video_file_url=f"https://cdn.example.com/{title}.mp4",
            thumbnail_url=f"https://cdn.example.com/{title}.jpg",
            duration=120.0,
            views=views,
            is_published=is_published,
        )
        session.add(video)
        session.commit()
        session.refresh(video)
        return video
    return _make_video


@pytest.fixture
def make_comment(session):
    """Factory inserting a comment with an explicit timestamp."""
    def _make_comment(video: Video, owner: User, content: str, created_at: datetime) -> Comment:
        comment = Comment(
            video_id=video.id,
            owner_id=owner.id,
            content=content,
            created_at=created_at,
            updated_at=created_at,
        )
        session.add(comment)
        session.commit()
        session.refresh(comment)
        return comment
    return _make_comment


@pytest.fixture
def auth_headers():
    """Bearer headers for a user, as the identity provider would issue them."""
    def _auth_headers(user: User) -> dict:
        token = create_access_token({"sub": user.id})
        return {"Authorization": f"Bearer {token}"}
    return _auth_headers
