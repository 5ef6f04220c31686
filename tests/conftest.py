import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["EMBEDDING_DIM"] = "3"
os.environ["EMBEDDING_PROVIDER"] = "sentence-transformers"
os.environ["EMBEDDING_MODEL"] = "all-MiniLM-L6-v2"
os.environ["EMBEDDING_ANSWER_THRESHOLD"] = "3"
os.environ["EMBEDDING_REFRESH_POLICY"] = "every_answer"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import Base, get_db, get_session_factory
from app.core.exceptions import EmbeddingUnavailable
from app.models.journey_db.journey_crud import append_answer
from app.models.match_db.vector_store import VectorStore
from app.models.user_db.user_db import User
from app.services.embedding_client import get_embedding_client
from main import app


class FakeEmbeddingClient:
    """Returns queued vectors, or a fixed one, and records every text it saw."""

    def __init__(self, vector=None, fail=False):
        self.vector = vector or [0.1, 0.2, 0.3]
        self.fail = fail
        self.texts = []

    def embed(self, text):
        self.texts.append(text)
        if self.fail:
            raise EmbeddingUnavailable("embedding service down")
        return list(self.vector)


@pytest.fixture
def engine():
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
def embedding_client():
    return FakeEmbeddingClient()


@pytest.fixture
def client(session_factory, embedding_client):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_embedding_client] = lambda: embedding_client
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make_user(display_name=None, active=True, verified=True, looking_for="someone kind"):
        counter["n"] += 1
        user = User(
            email=f"user{counter['n']}@example.com",
            display_name=display_name or f"User {counter['n']}",
            looking_for_text=looking_for,
            is_active=active,
            is_email_verified=verified,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def add_answers(db):
    def _add_answers(user, count, start=1):
        for i in range(start, start + count):
            append_answer(db, user.id, f"q{i}", f"Question {i}?", f"Answer {i}")

    return _add_answers


@pytest.fixture
def store(db):
    return VectorStore(db, dimension=3)
