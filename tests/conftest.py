"""
Pytest configuration and fixtures for testing.
"""
import io
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Sequence

import pytest
from fastapi.testclient import TestClient
from PIL import Image
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from blog_api.core.config import Settings
from blog_api.db.init_db import init_db
from blog_api.integrations.s3 import DummyObjectStore
from blog_api.main import create_app
from blog_api.modules.posts.models import Post
from blog_api.modules.posts.repository import PostCriteria, PostStore

PUBLIC_URL = "http://localhost:9000"
BUCKET = "blog"


def image_url(name: str = "cover.jpg") -> str:
    return f"{PUBLIC_URL}/{BUCKET}/uploads/{name}"


def make_image(width: int = 10, height: int = 10, fmt: str = "PNG") -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (width, height), color=(200, 30, 30)).save(buf, format=fmt)
    return buf.getvalue()


def make_post(**overrides) -> Post:
    """Build a Post ready to be stored; timestamps are filled in like the database would."""
    now = datetime.now(timezone.utc)
    values = dict(
        id=uuid.uuid4(),
        title="A post",
        subtitle=None,
        description="Short description",
        image=image_url(),
        date=now,
        author="alice",
        content=None,
        created_at=now,
        updated_at=now,
    )
    values.update(overrides)
    return Post(**values)


class InMemoryPostStore(PostStore):
    """
    PostStore double used to exercise the query engine without PostgreSQL.
    Search mirrors plainto_tsquery: every word of the query must occur in
    title, subtitle or description.
    """

    def __init__(self, posts: Sequence[Post] = ()):
        self.posts: dict[uuid.UUID, Post] = {p.id: p for p in posts}
        self.last_criteria: Optional[PostCriteria] = None

    @staticmethod
    def _matches(post: Post, search: str) -> bool:
        surface = " ".join([post.title, post.subtitle or "", post.description]).lower()
        words = set(surface.split())
        return all(term in words for term in search.lower().split())

    def create(self, post: Post) -> Post:
        now = datetime.now(timezone.utc)
        post.created_at = post.created_at or now
        post.updated_at = post.updated_at or now
        self.posts[post.id] = post
        return post

    def get_by_id(self, post_id: uuid.UUID) -> Optional[Post]:
        return self.posts.get(post_id)

    def find_all(self, criteria: PostCriteria) -> tuple[Sequence[Post], int]:
        self.last_criteria = criteria
        rows = list(self.posts.values())
        if criteria.search:
            rows = [p for p in rows if self._matches(p, criteria.search)]
        if criteria.author:
            rows = [p for p in rows if p.author == criteria.author]

        rows.sort(
            key=lambda p: (getattr(p, criteria.sort_column), str(p.id)),
            reverse=criteria.descending,
        )
        return rows[criteria.offset:criteria.offset + criteria.limit], len(rows)

    def update(self, post_id: uuid.UUID, changes: dict[str, Any]) -> Optional[Post]:
        post = self.posts.get(post_id)
        if post is None:
            return None
        for key, value in changes.items():
            setattr(post, key, value)
        post.updated_at = datetime.now(timezone.utc)
        return post

    def delete(self, post_id: uuid.UUID) -> bool:
        return self.posts.pop(post_id, None) is not None

    def exists(self, post_id: uuid.UUID) -> bool:
        return post_id in self.posts


@pytest.fixture
def settings(tmp_path):
    return Settings(
        DATABASE_URL="sqlite://",
        USE_DUMMY_S3=True,
        S3_STORAGE_PATH=str(tmp_path / "s3"),
        MINIO_BUCKET=BUCKET,
        MINIO_PUBLIC_URL=PUBLIC_URL,
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def engine():
    """In-memory SQLite shared by every session of a test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def object_store(settings):
    store = DummyObjectStore(settings.S3_STORAGE_PATH, settings.MINIO_BUCKET)
    store.ensure_bucket()
    return store


@pytest.fixture
def client(settings, engine, object_store):
    """FastAPI test client with SQLite and a local object store."""
    app = create_app(settings, engine=engine, object_store=object_store)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def post_factory():
    return make_post


@pytest.fixture
def memory_store():
    return InMemoryPostStore()


@pytest.fixture
def stored_post(client):
    """A post created through the API."""
    response = client.post(
        "/api/v1/posts",
        json={
            "title": "Hello world",
            "subtitle": "First steps",
            "description": "An introduction",
            "image": image_url(),
            "author": "alice",
            "content": {"blocks": [{"type": "paragraph", "data": {"text": "hi"}}], "version": "2.28"},
        },
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.fixture
def dated_post(post_factory):
    """Post whose date and timestamps lie `days` in the past."""

    def _dated(days: int, **overrides):
        stamp = datetime.now(timezone.utc) - timedelta(days=days)
        return post_factory(date=stamp, created_at=stamp, updated_at=stamp, **overrides)

    return _dated


@pytest.fixture
def png():
    return make_image


@pytest.fixture
def trusted_image_url():
    return image_url
