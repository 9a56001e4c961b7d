# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Generator, Iterator
from itertools import count

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from campus_forum.core.security import create_access_token
from campus_forum.db.session import Base
from campus_forum.db.session import get_db as app_get_session
from campus_forum.main import app as fastapi_app
from campus_forum.models import Category, Comment, Post, ReviewStatus, User, UserRole
from campus_forum.services.visibility import ViewerContext

TEST_DB_URL = "sqlite://"

_USER_COUNTER = count(1)


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    # Services commit their own transactions, so tests run against the real
    # tables and every row is removed afterwards.
    SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


def make_user(
    db_session: Session,
    username: str | None = None,
    *,
    role: UserRole = UserRole.USER,
    is_active: bool = True,
    review_status: ReviewStatus = ReviewStatus.APPROVED,
) -> User:
    """Persist and return an account."""
    username = username or f"user{next(_USER_COUNTER)}"
    user = User(
        username=username,
        email=f"{username}@campus.test",
        role=role.value,
        is_active=is_active,
        review_status=review_status.value,
    )
    db_session.add(user)
    db_session.commit()
    return user


def make_category(db_session: Session, name: str, *, is_anonymous: bool = False) -> Category:
    category = Category(name=name, is_anonymous=is_anonymous)
    db_session.add(category)
    db_session.commit()
    return category


def make_post(db_session: Session, author: User, category: Category, title: str = "Hello") -> Post:
    """Persist a post and keep the category count consistent with it."""
    post = Post(author_id=author.id, category_id=category.id, title=title, content="Body text")
    db_session.add(post)
    category.post_count += 1
    db_session.commit()
    return post


def make_comment(
    db_session: Session,
    author: User,
    post: Post,
    parent: Comment | None = None,
    content: str = "A comment",
) -> Comment:
    """Persist a comment and keep the post and parent counts consistent with it."""
    comment = Comment(
        post_id=post.id,
        author_id=author.id,
        parent_id=parent.id if parent is not None else None,
        content=content,
    )
    db_session.add(comment)
    post.comment_count += 1
    if parent is not None:
        parent.reply_count += 1
    db_session.commit()
    return comment


def auth_headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


def viewer_of(user: User) -> ViewerContext:
    return ViewerContext.for_user(user)


@pytest.fixture()
def test_user(db_session: Session) -> User:
    """The primary regular account."""
    return make_user(db_session, "alice")


@pytest.fixture()
def other_user(db_session: Session) -> User:
    """A second regular account."""
    return make_user(db_session, "bob")


@pytest.fixture()
def admin_user(db_session: Session) -> User:
    return make_user(db_session, "admin", role=UserRole.ADMIN)


@pytest.fixture()
def second_admin(db_session: Session) -> User:
    return make_user(db_session, "admin2", role=UserRole.ADMIN)


@pytest.fixture()
def super_admin(db_session: Session) -> User:
    return make_user(db_session, "root", role=UserRole.SUPER_ADMIN)


@pytest.fixture()
def category(db_session: Session) -> Category:
    return make_category(db_session, "General")


@pytest.fixture()
def anonymous_category(db_session: Session) -> Category:
    return make_category(db_session, "Confessions", is_anonymous=True)


@pytest.fixture()
def test_post(db_session: Session, test_user: User, category: Category) -> Post:
    return make_post(db_session, test_user, category)


@pytest.fixture()
def anonymous_post(db_session: Session, test_user: User, anonymous_category: Category) -> Post:
    return make_post(db_session, test_user, anonymous_category, title="Secret")


@pytest.fixture()
def test_comment(db_session: Session, other_user: User, test_post: Post) -> Comment:
    return make_comment(db_session, other_user, test_post)


@pytest.fixture()
def auth_token(test_user: User) -> dict[str, str]:
    """Authorization headers for the primary test user."""
    return auth_headers(test_user)


@pytest.fixture()
def other_auth_token(other_user: User) -> dict[str, str]:
    """Authorization headers for the secondary test user."""
    return auth_headers(other_user)


@pytest.fixture()
def admin_token(admin_user: User) -> dict[str, str]:
    return auth_headers(admin_user)


@pytest.fixture()
def super_admin_token(super_admin: User) -> dict[str, str]:
    return auth_headers(super_admin)
