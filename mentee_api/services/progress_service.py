"""
Progress services: the mentee dashboard and the admin analytics views.

Both are read-only aggregations over questions and submissions. A question
counts as completed for a user once any of their attempts passed.
"""

from collections import defaultdict
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Set

from ..models.domain import (
    AnalyticsOverview,
    DashboardStats,
    Identity,
    MenteeDetail,
    QuestionAnalytics,
    Question,
    QuestionProgress,
    QuestionStatus,
    SubjectId,
    SubjectProgress,
    SubjectStats,
    Submission,
    SubmissionCounts,
    UserProgress,
    utcnow,
)
from ..repositories import (
    AdminRepository,
    QuestionRepository,
    SubmissionRepository,
    UserRepository,
)
from ..core.errors import AuthorizationError, UserNotFoundError
from ..core.logging import get_logger

logger = get_logger(__name__)

RECENT_SUBMISSIONS = 10


def passed_question_ids(submissions: Iterable[Submission]) -> Set[str]:
    return {s.question_id for s in submissions if s.is_passed}


def question_status(question: Question, completed: Set[str], now: datetime) -> QuestionStatus:
    if question.id in completed:
        return QuestionStatus.COMPLETED
    if question.deadline < now:
        return QuestionStatus.OVERDUE
    return QuestionStatus.PENDING


class DashboardService:
    """Per-user progress over the active catalogue"""

    def __init__(self, questions: QuestionRepository, submissions: SubmissionRepository):
        self.questions = questions
        self.submissions = submissions

    async def get_stats(self, identity: Identity, now: Optional[datetime] = None) -> DashboardStats:
        """
        Progress of the caller in every subject.

        ``pending_count`` counts every uncompleted question; ``overdue_count``
        is the part of those whose deadline has passed. ``nearest_deadline``
        is the earliest upcoming deadline among uncompleted questions.
        """
        now = now or utcnow()
        active = await self.questions.list(is_active=True)
        completed = passed_question_ids(await self.submissions.list_for_user(identity.uid))

        subjects = []
        for subject in SubjectId:
            subject_questions = [q for q in active if q.subject_id == subject]
            done = [q for q in subject_questions if q.id in completed]
            open_questions = [q for q in subject_questions if q.id not in completed]
            upcoming = sorted(q.deadline for q in open_questions if q.deadline > now)

            subjects.append(SubjectStats(
                subject_id=subject,
                total_count=len(subject_questions),
                completed_count=len(done),
                pending_count=len(open_questions),
                overdue_count=sum(1 for q in open_questions if q.deadline < now),
                nearest_deadline=upcoming[0] if upcoming else None,
            ))

        total = sum(s.total_count for s in subjects)
        total_completed = sum(s.completed_count for s in subjects)

        logger.debug(
            "Dashboard computed",
            extra_data={"user_id": identity.uid, "total": total, "completed": total_completed}
        )

        return DashboardStats(
            subjects=subjects,
            total_completed=total_completed,
            total_questions=total,
            overall_progress=(total_completed / total * 100) if total else 0.0,
        )

    async def list_subject_questions(
        self,
        identity: Identity,
        subject_id: SubjectId,
        status: Optional[QuestionStatus] = None,
        now: Optional[datetime] = None
    ) -> List[QuestionProgress]:
        """Active questions of a subject with the caller's status on each"""
        now = now or utcnow()
        questions = await self.questions.list(subject_id=subject_id, is_active=True)
        submissions = await self.submissions.list_for_user(identity.uid, subject_id=subject_id)
        completed = passed_question_ids(submissions)

        attempts: Dict[str, int] = defaultdict(int)
        for submission in submissions:
            attempts[submission.question_id] += 1

        items = [
            QuestionProgress(
                question=q,
                status=question_status(q, completed, now),
                attempts=attempts[q.id],
            )
            for q in sorted(questions, key=lambda q: (q.order, q.deadline))
        ]
        if status is not None:
            items = [item for item in items if item.status == status]

        return items


class AnalyticsService:
    """Portal-wide statistics for admins"""

    def __init__(
        self,
        questions: QuestionRepository,
        submissions: SubmissionRepository,
        users: UserRepository,
        admins: AdminRepository
    ):
        self.questions = questions
        self.submissions = submissions
        self.users = users
        self.admins = admins

    async def overview(self, identity: Identity, top: int = 10) -> AnalyticsOverview:
        """
        Submission totals, per-subject counts and the users with the most
        completed questions, plus the newest submissions.

        Raises:
            AuthorizationError: If the caller is not an admin
        """
        await self._require_admin(identity)

        submissions = await self.submissions.list_all()
        users = await self.users.list()
        total_questions = len(await self.questions.list())

        subject_stats = {}
        for subject in SubjectId:
            in_subject = [s for s in submissions if s.subject_id == subject]
            passed = sum(1 for s in in_subject if s.is_passed)
            subject_stats[subject.value] = SubmissionCounts(
                total=len(in_subject),
                passed=passed,
                failed=len(in_subject) - passed,
            )

        completed_by_user: Dict[str, Set[str]] = defaultdict(set)
        for s in submissions:
            if s.is_passed:
                completed_by_user[s.user_id].add(s.question_id)

        progress = sorted(
            (
                UserProgress(
                    user_id=u.uid,
                    user_name=u.name,
                    completed=len(completed_by_user[u.uid]),
                    total=total_questions,
                )
                for u in users
            ),
            key=lambda p: p.completed,
            reverse=True,
        )

        passed_total = sum(1 for s in submissions if s.is_passed)

        logger.info(
            "Analytics computed",
            extra_data={"users": len(users), "submissions": len(submissions)}
        )

        return AnalyticsOverview(
            total_users=len(users),
            total_submissions=len(submissions),
            passed_submissions=passed_total,
            failed_submissions=len(submissions) - passed_total,
            subject_stats=subject_stats,
            user_progress=progress[:top],
            recent_submissions=submissions[:RECENT_SUBMISSIONS],
        )

    async def mentee_detail(self, identity: Identity, user_id: str) -> MenteeDetail:
        """
        Per-question record of one user over the whole catalogue.

        Inactive questions are included so past work stays visible. Questions
        come in ``order``; ``latest_submission`` is the newest attempt.

        Raises:
            AuthorizationError: If the caller is not an admin
            UserNotFoundError: If ``user_id`` has no profile
        """
        await self._require_admin(identity)

        profile = await self.users.get(user_id)
        if profile is None:
            raise UserNotFoundError(user_id)

        questions = await self.questions.list()
        submissions = await self.submissions.list_for_user(user_id)

        by_question: Dict[str, List[Submission]] = defaultdict(list)
        for submission in submissions:
            by_question[submission.question_id].append(submission)

        rows = [
            QuestionAnalytics(
                question=q,
                total_attempts=len(by_question[q.id]),
                passed=any(s.is_passed for s in by_question[q.id]),
                latest_submission=by_question[q.id][0] if by_question[q.id] else None,
            )
            for q in sorted(questions, key=lambda q: q.order)
        ]
        completed = [row for row in rows if row.passed]
        passed_total = sum(1 for s in submissions if s.is_passed)

        subject_progress = {
            subject.value: SubjectProgress(
                completed=sum(1 for row in completed if row.question.subject_id == subject),
                total=sum(1 for q in questions if q.subject_id == subject),
            )
            for subject in SubjectId
        }

        logger.info(
            "Mentee analytics computed",
            extra_data={"user_id": user_id, "submissions": len(submissions)}
        )

        return MenteeDetail(
            profile=profile,
            total_questions=len(questions),
            completed_questions=len(completed),
            total_submissions=len(submissions),
            passed_submissions=passed_total,
            failed_submissions=len(submissions) - passed_total,
            average_attempts=(
                sum(row.total_attempts for row in completed) / len(completed)
                if completed else 0.0
            ),
            subject_progress=subject_progress,
            questions=rows,
        )

    async def _require_admin(self, identity: Identity) -> None:
        if not await self.admins.is_admin(identity.uid):
            raise AuthorizationError()
