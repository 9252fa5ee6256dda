"""
Pytest configuration and fixtures.

Provides shared fixtures for testing.
"""

import pytest
from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient

from mentee_api.core import settings
from mentee_api.core.security import create_access_token
from mentee_api.main import app, get_store
from mentee_api.models import Identity, Question, QuestionType, SubjectId
from mentee_api.repositories import (
    AdminRepository,
    InMemoryDocumentStore,
    QuestionRepository,
    SubmissionRepository,
    UserRepository,
)


@pytest.fixture
def store() -> InMemoryDocumentStore:
    """Fresh document store per test"""
    return InMemoryDocumentStore()


@pytest.fixture
def admin() -> Identity:
    return Identity(uid="admin-1", email="ada@example.com", name="Ada Admin")


@pytest.fixture
def mentee() -> Identity:
    return Identity(uid="mentee-1", email="max@example.com", name="Max Mentee")


@pytest.fixture
def question_repository(store) -> QuestionRepository:
    return QuestionRepository(store)


@pytest.fixture
def submission_repository(store) -> SubmissionRepository:
    return SubmissionRepository(store)


@pytest.fixture
def admin_repository(store) -> AdminRepository:
    return AdminRepository(store)


@pytest.fixture
def user_repository(store) -> UserRepository:
    return UserRepository(store)


@pytest.fixture
async def seeded_admin(admin_repository, admin) -> Identity:
    """Admin identity registered in the admins collection"""
    await admin_repository.add(admin.uid, admin.email, admin.name)
    return admin


@pytest.fixture
def now() -> datetime:
    """Fixed reference time for deadline arithmetic"""
    return datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_question(now):
    """Factory for questions with sensible defaults"""
    def _make_question(
        question_type: QuestionType,
        content: dict,
        subject_id: SubjectId = SubjectId.MATHS,
        deadline: datetime | None = None,
        **fields
    ) -> Question:
        return Question(
            subject_id=subject_id,
            type=question_type,
            content=content,
            deadline=deadline or now + timedelta(days=7),
            created_by="admin-1",
            **fields
        )

    return _make_question


@pytest.fixture
def integer_question(make_question) -> Question:
    return make_question(QuestionType.INTEGER, {
        "questionText": "What is 10 squared?",
        "correctAnswer": 100,
        "tolerance": 0,
        "explanation": "10 * 10 = 100",
    })


@pytest.fixture
def string_question(make_question) -> Question:
    return make_question(QuestionType.STRING, {
        "questionText": "Capital of France?",
        "correctAnswer": "Paris",
        "caseSensitive": False,
        "acceptableAnswers": [],
        "explanation": "Paris is the capital of France.",
    })


# API fixtures

@pytest.fixture
def client(store, admin, monkeypatch) -> TestClient:
    """FastAPI test client backed by the per-test store, admin seeded at startup"""
    monkeypatch.setattr(settings, "ADMIN_UIDS", [admin.uid])
    app.dependency_overrides[get_store] = lambda: store

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers(admin) -> dict:
    return {"Authorization": f"Bearer {create_access_token(admin)}"}


@pytest.fixture
def mentee_headers(mentee) -> dict:
    return {"Authorization": f"Bearer {create_access_token(mentee)}"}
