"""Shared fixtures for crud unit tests"""

import pytest
from sqlalchemy import create_engine
from sqlmodel import SQLModel, Session

from blockpress.core.utils.hashing import sha256
from blockpress.crud.models import Article


@pytest.fixture(name="engine")
def engine_fixture():
    """In-memory SQLite engine with all tables created."""
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False})
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    """Fresh session per test; changes are not committed."""
    with Session(engine) as s:
        yield s


@pytest.fixture(name="record")
def record_fixture():
    """Upsert payload for a small published article."""
    content = "<h2>Set</h2><p>The model box.</p>"
    return {
        "slug": "ground-plans",
        "title": "Ground Plans",
        "category": "Design",
        "content": content,
        "hash": sha256(content),
        "path": "articles/ground-plans.html",
        "published": True,
    }


@pytest.fixture(name="article")
def article_fixture(session, record):
    """The record persisted directly as an Article."""
    a = Article(**record)
    session.add(a)
    session.flush()
    return a
