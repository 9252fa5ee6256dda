"""
Tests for DashboardService and AnalyticsService.
"""

import pytest
from datetime import timedelta

from mentee_api.core.errors import AuthorizationError, UserNotFoundError
from mentee_api.models import QuestionStatus, QuestionType, SubjectId, UserRole
from mentee_api.services import AnalyticsService, DashboardService, GradingService


STRING = {"correctAnswer": "yes"}


@pytest.fixture
def dashboard(question_repository, submission_repository) -> DashboardService:
    return DashboardService(question_repository, submission_repository)


@pytest.fixture
def grading(question_repository, submission_repository) -> GradingService:
    return GradingService(question_repository, submission_repository)


@pytest.fixture
def analytics(
    question_repository, submission_repository, user_repository, admin_repository
) -> AnalyticsService:
    return AnalyticsService(
        question_repository, submission_repository, user_repository, admin_repository
    )


@pytest.fixture
async def catalogue(question_repository, make_question, now) -> dict:
    """Three maths questions (one overdue), one coding question, one inactive"""
    specs = {
        "done": dict(deadline=now + timedelta(days=1), order=1),
        "soon": dict(deadline=now + timedelta(days=2), order=2),
        "late": dict(deadline=now - timedelta(days=1), order=3),
        "inactive": dict(deadline=now + timedelta(days=1), is_active=False),
    }
    ids = {}
    for name, fields in specs.items():
        question = await question_repository.create(
            make_question(QuestionType.STRING, STRING, **fields)
        )
        ids[name] = question.id

    coding = await question_repository.create(make_question(
        QuestionType.CODING, {}, subject_id=SubjectId.ICP, deadline=now + timedelta(days=5)
    ))
    ids["coding"] = coding.id
    return ids


@pytest.mark.asyncio
async def test_dashboard_counts(dashboard, grading, mentee, catalogue, now):
    """Test per-subject counts for a mentee with one completed question"""
    await grading.submit_answer(mentee, catalogue["done"], "no")
    await grading.submit_answer(mentee, catalogue["done"], "yes")
    await grading.submit_answer(mentee, catalogue["soon"], "no")

    stats = await dashboard.get_stats(mentee, now=now)
    by_subject = {s.subject_id: s for s in stats.subjects}

    maths = by_subject[SubjectId.MATHS]
    assert maths.total_count == 3
    assert maths.completed_count == 1
    assert maths.pending_count == 2
    assert maths.overdue_count == 1
    assert maths.nearest_deadline == now + timedelta(days=2)

    icp = by_subject[SubjectId.ICP]
    assert icp.total_count == 1
    assert icp.completed_count == 0
    assert icp.nearest_deadline == now + timedelta(days=5)

    assert by_subject[SubjectId.WEBDEV].total_count == 0
    assert stats.total_questions == 4
    assert stats.total_completed == 1
    assert stats.overall_progress == 25.0


@pytest.mark.asyncio
async def test_dashboard_empty(dashboard, mentee, now):
    stats = await dashboard.get_stats(mentee, now=now)

    assert stats.total_questions == 0
    assert stats.overall_progress == 0.0
    assert len(stats.subjects) == len(SubjectId)


@pytest.mark.asyncio
async def test_subject_questions_status(dashboard, grading, mentee, catalogue, now):
    """Test per-question status, attempts and ordering"""
    await grading.submit_answer(mentee, catalogue["done"], "no")
    await grading.submit_answer(mentee, catalogue["done"], "YES")

    items = await dashboard.list_subject_questions(mentee, SubjectId.MATHS, now=now)

    assert [item.question.id for item in items] == [
        catalogue["done"], catalogue["soon"], catalogue["late"]
    ]
    assert [item.status for item in items] == [
        QuestionStatus.COMPLETED, QuestionStatus.PENDING, QuestionStatus.OVERDUE
    ]
    assert [item.attempts for item in items] == [2, 0, 0]


@pytest.mark.asyncio
async def test_subject_questions_filter(dashboard, mentee, catalogue, now):
    items = await dashboard.list_subject_questions(
        mentee, SubjectId.MATHS, status=QuestionStatus.OVERDUE, now=now
    )

    assert [item.question.id for item in items] == [catalogue["late"]]


@pytest.mark.asyncio
async def test_analytics_overview(
    analytics, grading, user_repository, seeded_admin, mentee, catalogue
):
    """Test portal-wide totals and user ranking"""
    await user_repository.upsert_login(mentee, UserRole.MENTEE)
    await user_repository.upsert_login(seeded_admin, UserRole.ADMIN)

    await grading.submit_answer(mentee, catalogue["done"], "yes")
    await grading.submit_answer(mentee, catalogue["soon"], "yes")
    await grading.submit_answer(mentee, catalogue["late"], "no")
    await grading.submit_answer(seeded_admin, catalogue["done"], "yes")

    overview = await analytics.overview(seeded_admin)

    assert overview.total_users == 2
    assert overview.total_submissions == 4
    assert overview.passed_submissions == 3
    assert overview.failed_submissions == 1
    assert overview.subject_stats["maths"].total == 4
    assert overview.subject_stats["maths"].failed == 1
    assert overview.subject_stats["icp"].total == 0

    top = overview.user_progress[0]
    assert top.user_id == mentee.uid
    assert top.user_name == mentee.name
    assert top.completed == 2
    assert top.total == 5
    assert len(overview.recent_submissions) == 4


@pytest.mark.asyncio
async def test_analytics_top_limit(analytics, user_repository, seeded_admin, mentee):
    await user_repository.upsert_login(mentee, UserRole.MENTEE)
    await user_repository.upsert_login(seeded_admin, UserRole.ADMIN)

    overview = await analytics.overview(seeded_admin, top=1)

    assert overview.total_users == 2
    assert len(overview.user_progress) == 1


@pytest.mark.asyncio
async def test_analytics_requires_admin(analytics, mentee):
    with pytest.raises(AuthorizationError):
        await analytics.overview(mentee)


@pytest.mark.asyncio
async def test_analytics_recent_submissions(analytics, grading, seeded_admin, mentee, catalogue):
    """Test that the overview keeps only the newest ten submissions"""
    for _ in range(12):
        await grading.submit_answer(mentee, catalogue["soon"], "no")

    overview = await analytics.overview(seeded_admin)

    assert overview.total_submissions == 12
    assert [s.attempt_number for s in overview.recent_submissions] == list(range(12, 2, -1))


@pytest.mark.asyncio
async def test_mentee_detail(analytics, grading, user_repository, seeded_admin, mentee, catalogue):
    """Test per-question attempts, latest submission and the summary counts"""
    await user_repository.upsert_login(mentee, UserRole.MENTEE)
    await grading.submit_answer(mentee, catalogue["done"], "no")
    await grading.submit_answer(mentee, catalogue["done"], "yes")
    await grading.submit_answer(mentee, catalogue["soon"], "no")
    await grading.submit_answer(seeded_admin, catalogue["soon"], "yes")

    detail = await analytics.mentee_detail(seeded_admin, mentee.uid)

    assert detail.profile.uid == mentee.uid
    assert detail.total_questions == 5
    assert detail.completed_questions == 1
    assert detail.total_submissions == 3
    assert detail.passed_submissions == 1
    assert detail.failed_submissions == 2
    assert detail.average_attempts == 2.0

    assert detail.subject_progress["maths"].completed == 1
    assert detail.subject_progress["maths"].total == 4
    assert detail.subject_progress["icp"].total == 1
    assert detail.subject_progress["webdev"].total == 0

    rows = {row.question.id: row for row in detail.questions}
    assert rows[catalogue["done"]].total_attempts == 2
    assert rows[catalogue["done"]].passed is True
    assert rows[catalogue["done"]].latest_submission.attempt_number == 2
    assert rows[catalogue["soon"]].total_attempts == 1
    assert rows[catalogue["soon"]].passed is False
    assert rows[catalogue["late"]].latest_submission is None


@pytest.mark.asyncio
async def test_mentee_detail_question_order(analytics, user_repository, seeded_admin, mentee, catalogue):
    await user_repository.upsert_login(mentee, UserRole.MENTEE)

    detail = await analytics.mentee_detail(seeded_admin, mentee.uid)

    orders = [row.question.order for row in detail.questions]
    assert orders == sorted(orders)
    assert [row.question.id for row in detail.questions][-3:] == [
        catalogue["done"], catalogue["soon"], catalogue["late"]
    ]
    assert detail.average_attempts == 0.0


@pytest.mark.asyncio
async def test_mentee_detail_unknown_user(analytics, seeded_admin):
    with pytest.raises(UserNotFoundError):
        await analytics.mentee_detail(seeded_admin, "nobody")


@pytest.mark.asyncio
async def test_mentee_detail_requires_admin(analytics, user_repository, mentee):
    await user_repository.upsert_login(mentee, UserRole.MENTEE)

    with pytest.raises(AuthorizationError):
        await analytics.mentee_detail(mentee, mentee.uid)
