"""
Shared fixtures: an in-memory SQLite database per test and a TestClient
whose get_db dependency is bound to it.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, enable_sqlite_pragmas, get_db
from app.main import app
from app.models.user import User
from app.services.catalog import create_assessment


@pytest.fixture
def engine():
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    enable_sqlite_pragmas(test_engine)
    Base.metadata.create_all(test_engine)
    yield test_engine
    Base.metadata.drop_all(test_engine)
    test_engine.dispose()


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


def make_user(db, name, role="Student"):
    user = User(name=name, role=role)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def headers_for(user):
    return {"X-User-Id": user.id, "X-User-Role": user.role}


@pytest.fixture
def student(db):
    return make_user(db, "Sam Student")


@pytest.fixture
def other_student(db):
    return make_user(db, "Olive Other")


@pytest.fixture
def instructor(db):
    return make_user(db, "Ada Instructor", role="Instructor")


@pytest.fixture
def algebra(db):
    """'Algebra Basics': three questions, each with exactly one correct option."""
    return create_assessment(db, "c1a5e0d4-7e61-4c55-a2f5-0a9b8d6c3e03", "Algebra Basics", [
        {"question_text": "x + 3 = 5", "options": [
            {"text": "1", "is_correct": False},
            {"text": "2", "is_correct": True},
        ]},
        {"question_text": "3 * (2 + 4)", "options": [
            {"text": "18", "is_correct": True},
            {"text": "10", "is_correct": False},
        ]},
        {"question_text": "2x + 3x", "options": [
            {"text": "6x", "is_correct": False},
            {"text": "5x", "is_correct": True},
        ]},
    ])


def correct_option(question):
    return next(o for o in question.options if o.is_correct)


def wrong_option(question):
    return next(o for o in question.options if not o.is_correct)
