"""
Tests for QuestionService.

Unit tests for catalogue business logic and admin checks.
"""

import pytest
from datetime import datetime, timezone

from mentee_api.core.errors import AuthorizationError, QuestionNotFoundError, ValidationError
from mentee_api.models import QuestionType, SubjectId
from mentee_api.services import QuestionService


DEADLINE = datetime(2025, 3, 4, 12, 0, tzinfo=timezone.utc)

STRING_CONTENT = {
    "questionText": "Capital of France?",
    "correctAnswer": "Paris",
    "explanation": "Paris is the capital of France.",
}


@pytest.fixture
def service(question_repository, admin_repository) -> QuestionService:
    return QuestionService(question_repository, admin_repository)


async def create(service, identity, **overrides):
    fields = {
        "subject_id": SubjectId.MATHS,
        "question_type": QuestionType.STRING,
        "content": STRING_CONTENT,
        "deadline": DEADLINE,
    }
    fields.update(overrides)
    return await service.create_question(identity, **fields)


@pytest.mark.asyncio
async def test_create_question(service, seeded_admin):
    """Test that an admin can create a question"""
    question = await create(service, seeded_admin, order=2)

    assert question.id is not None
    assert question.created_by == seeded_admin.uid
    assert question.is_active is True
    assert question.order == 2

    stored = await service.get_question(question.id)
    assert stored.content == STRING_CONTENT
    assert stored.deadline == DEADLINE


@pytest.mark.asyncio
async def test_create_requires_admin(service, mentee):
    """Test that mentees cannot create questions"""
    with pytest.raises(AuthorizationError):
        await create(service, mentee)


@pytest.mark.asyncio
async def test_create_rejects_ungradeable_maths_content(service, seeded_admin):
    """Test that maths content is checked against its type on write"""
    with pytest.raises(ValidationError) as exc_info:
        await create(
            service,
            seeded_admin,
            question_type=QuestionType.INTEGER,
            content={"questionText": "?", "correctAnswer": 1, "tolerance": -1},
        )

    assert exc_info.value.status_code == 422
    assert exc_info.value.details["field"] == "content.tolerance"


@pytest.mark.asyncio
async def test_create_accepts_free_form_coding_content(service, seeded_admin):
    """Test that non-maths content is stored as authored"""
    question = await create(
        service,
        seeded_admin,
        subject_id=SubjectId.ICP,
        question_type=QuestionType.CODING,
        content={"title": "FizzBuzz", "testCases": []},
    )

    assert question.type is QuestionType.CODING


@pytest.mark.asyncio
async def test_list_questions_filters(service, seeded_admin):
    """Test subject and active filters"""
    maths = await create(service, seeded_admin)
    await create(
        service,
        seeded_admin,
        subject_id=SubjectId.WEBDEV,
        question_type=QuestionType.WEBDEV_DEBUG,
        content={},
    )
    await service.delete_question(seeded_admin, maths.id)

    assert len(await service.list_questions()) == 2
    assert [q.subject_id for q in await service.list_questions(SubjectId.WEBDEV)] == [SubjectId.WEBDEV]
    inactive = await service.list_questions(is_active=False)
    assert [q.id for q in inactive] == [maths.id]


@pytest.mark.asyncio
async def test_update_question(service, seeded_admin):
    """Test that only the given fields change"""
    question = await create(service, seeded_admin)

    updated = await service.update_question(seeded_admin, question.id, {"order": 5})

    assert updated.order == 5
    assert updated.content == STRING_CONTENT
    assert updated.created_at == question.created_at
    assert updated.updated_at >= question.updated_at


@pytest.mark.asyncio
async def test_update_checks_content_against_type(service, seeded_admin):
    """Test that changing the type revalidates the stored content"""
    question = await create(service, seeded_admin)

    with pytest.raises(ValidationError):
        await service.update_question(
            seeded_admin, question.id, {"type": QuestionType.MULTIPLE}
        )


@pytest.mark.asyncio
async def test_update_missing_question(service, seeded_admin):
    with pytest.raises(QuestionNotFoundError):
        await service.update_question(seeded_admin, "nonexistent", {"order": 1})


@pytest.mark.asyncio
async def test_soft_delete_keeps_document(service, seeded_admin):
    """Test that delete only deactivates"""
    question = await create(service, seeded_admin)

    deleted = await service.delete_question(seeded_admin, question.id)

    assert deleted.is_active is False
    assert (await service.get_question(question.id)).is_active is False


@pytest.mark.asyncio
async def test_hard_delete_removes_document(service, seeded_admin):
    """Test permanent deletion"""
    question = await create(service, seeded_admin)

    await service.hard_delete_question(seeded_admin, question.id)

    with pytest.raises(QuestionNotFoundError):
        await service.get_question(question.id)
    with pytest.raises(QuestionNotFoundError):
        await service.hard_delete_question(seeded_admin, question.id)


@pytest.mark.asyncio
async def test_delete_requires_admin(service, seeded_admin, mentee):
    question = await create(service, seeded_admin)

    with pytest.raises(AuthorizationError):
        await service.delete_question(mentee, question.id)
    with pytest.raises(AuthorizationError):
        await service.hard_delete_question(mentee, question.id)
