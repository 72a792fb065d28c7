import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient

import study_partner.main as m
from study_partner import models, repo
from study_partner.auth.deps import get_current_user
from study_partner.deps import get_completion_client
from study_partner.services import rate_limit


class StubCompletionClient:
    """Deterministic stand-in for the completion provider."""

    def __init__(self, response: str | None = None, error: Exception | None = None):
        self.response = response
        self.error = error
        self.prompts: list[str] = []

    def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def db_sessionmaker(monkeypatch):
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    models.Base.metadata.create_all(engine)
    factory = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    monkeypatch.setattr(repo, "SessionLocal", factory)
    yield factory
    engine.dispose()


@pytest.fixture
def run_sql(db_sessionmaker):
    def _run(sql: str, params: dict | None = None):
        with db_sessionmaker() as db:
            result = db.execute(text(sql), params or {})
            rows = [dict(r) for r in result.mappings().all()] if result.returns_rows else []
            db.commit()
        return rows

    return _run


@pytest.fixture
def make_profile(db_sessionmaker):
    def _make(user_id: str, name: str, age: int = 16, grade: str = "Grade 10", subjects: str = "Math, Physics", bio: str = ""):
        repo.upsert_profile(
            user_id=user_id,
            name=name,
            age=age,
            grade=grade,
            favorite_subjects=subjects,
            bio=bio,
        )
        return repo.get_profile(user_id)

    return _make


@pytest.fixture
def completion():
    return StubCompletionClient(response='{"matches": []}')


@pytest.fixture
def active_user():
    return {"id": "user-1", "email": "user1@example.com", "name": "User One"}


@pytest.fixture
def client(monkeypatch, db_sessionmaker, completion, active_user):
    monkeypatch.setattr(m, "wait_for_db", lambda *args, **kwargs: None)
    monkeypatch.setattr(m, "run_migrations", lambda *args, **kwargs: None)
    monkeypatch.setattr(rate_limit, "limiter", rate_limit.InMemoryRateLimiter())

    m.app.dependency_overrides[get_current_user] = lambda: dict(active_user)
    m.app.dependency_overrides[get_completion_client] = lambda: completion
    yield TestClient(m.app)
    m.app.dependency_overrides = {}


@pytest.fixture
def stub_completion():
    return StubCompletionClient
