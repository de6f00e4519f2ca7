import os

# Point the app's own engine at a throwaway database before anything imports it
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from blog_api import models  # noqa: F401
from blog_api.database import Base, get_db
from blog_api.schemas import (
    CreateCategoryInput,
    CreateCommentInput,
    CreatePostInput,
    CreateTagInput,
    CreateUserInput,
)
from blog_api.services import categories, comments, posts, tags, users


@pytest.fixture
def engine():
    """In-memory SQLite shared by every session in one test"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    """API client whose requests use the test database"""
    from blog_api.main import app

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# --- Factories ---

@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def factory(**overrides):
        counter["n"] += 1
        n = counter["n"]
        data = {
            "email": f"user{n}@example.com",
            "username": f"user{n}",
            "full_name": f"User {n}",
            "password": "password123",
        }
        data.update(overrides)
        return users.create_user(db, CreateUserInput(**data))

    return factory


@pytest.fixture
def make_category(db):
    counter = {"n": 0}

    def factory(**overrides):
        counter["n"] += 1
        n = counter["n"]
        data = {"name": f"Category {n}", "slug": f"category-{n}", "color": "#112233"}
        data.update(overrides)
        return categories.create_category(db, CreateCategoryInput(**data))

    return factory


@pytest.fixture
def author(make_user):
    return make_user()


@pytest.fixture
def make_post(db, author):
    counter = {"n": 0}

    def factory(**overrides):
        counter["n"] += 1
        n = counter["n"]
        data = {
            "title": f"Post {n}",
            "slug": f"post-{n}",
            "content": f"Content of post {n}",
            "author_id": author.id,
        }
        data.update(overrides)
        return posts.create_post(db, CreatePostInput(**data))

    return factory


@pytest.fixture
def make_tag(db):
    counter = {"n": 0}

    def factory(**overrides):
        counter["n"] += 1
        n = counter["n"]
        data = {"name": f"tag{n}", "slug": f"tag-{n}"}
        data.update(overrides)
        return tags.create_tag(db, CreateTagInput(**data))

    return factory


@pytest.fixture
def make_comment(db):
    def factory(post_id, parent_id=None, **overrides):
        data = {
            "content": "A comment",
            "author_name": "Reader",
            "author_email": "reader@example.com",
            "post_id": post_id,
            "parent_id": parent_id,
        }
        data.update(overrides)
        return comments.create_comment(db, CreateCommentInput(**data))

    return factory
