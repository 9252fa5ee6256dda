"""
Domain models for the mentee portal.

These are the core business entities with validation and behavior.
Documents are stored and returned with camelCase keys (``subjectId``,
``isActive``, ``attemptNumber``); Python code uses the snake_case names.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from enum import Enum

from quizcheck.answer import MATHS_TYPES


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SubjectId(str, Enum):
    """Subjects offered on the portal"""
    ICP = "icp"
    MATHS = "maths"
    WEBDEV = "webdev"


class QuestionType(str, Enum):
    """Question types; only the maths types are graded by the API"""
    CODING = "coding"
    MCQ = "mcq"
    MULTIPLE = "multiple"
    INTEGER = "integer"
    STRING = "string"
    WEBDEV_DEBUG = "webdev-debug"

    @property
    def is_gradeable(self) -> bool:
        return self.value in MATHS_TYPES


class UserRole(str, Enum):
    MENTEE = "mentee"
    ADMIN = "admin"


class QuestionStatus(str, Enum):
    """Progress of one user on one question"""
    COMPLETED = "completed"
    PENDING = "pending"
    OVERDUE = "overdue"


class DocumentModel(BaseModel):
    """Base for models stored as camelCase documents"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_document(self) -> Dict[str, Any]:
        """JSON-ready document with camelCase keys"""
        return self.model_dump(mode="json", by_alias=True)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class Identity(BaseModel):
    """Authenticated caller, as asserted by the identity provider"""
    uid: str
    email: str = ""
    name: str = ""


class UserProfile(DocumentModel):
    """User record kept for analytics"""
    uid: str
    email: str = ""
    name: str = ""
    role: UserRole = UserRole.MENTEE
    created_at: datetime = Field(default_factory=utcnow)
    last_login_at: datetime = Field(default_factory=utcnow)


class Admin(DocumentModel):
    """Entry in the admins collection"""
    uid: str
    email: str = ""
    name: str = ""
    added_at: datetime = Field(default_factory=utcnow)
    added_by: Optional[str] = None


class Question(DocumentModel):
    """
    A question in the catalogue.

    ``content`` is kept as the raw authored document; maths content is
    resolved to its typed variant with ``quizcheck.answer.parse_content``
    when an answer is graded.
    """
    id: Optional[str] = None
    subject_id: SubjectId
    type: QuestionType
    content: Dict[str, Any]
    deadline: datetime
    created_by: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    is_active: bool = True
    order: int = 0

    @field_validator("deadline", "created_at", "updated_at")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        """Treat naive timestamps as UTC"""
        return _as_utc(v)


class Submission(DocumentModel):
    """One recorded attempt at a question"""
    id: Optional[str] = None
    question_id: str
    user_id: str
    subject_id: SubjectId
    type: QuestionType
    submitted_answer: Any = None
    result: Dict[str, Any] = Field(default_factory=dict)
    submitted_at: datetime = Field(default_factory=utcnow)
    is_passed: bool
    attempt_number: int = Field(..., ge=1)
    time_spent: int = Field(default=0, ge=0)

    @field_validator("submitted_at")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        return _as_utc(v)


class SubjectStats(DocumentModel):
    """Per-subject progress of one user"""
    subject_id: SubjectId
    total_count: int = 0
    completed_count: int = 0
    pending_count: int = 0
    overdue_count: int = 0
    nearest_deadline: Optional[datetime] = None


class DashboardStats(DocumentModel):
    """Progress of one user across all subjects"""
    subjects: List[SubjectStats]
    total_completed: int = 0
    total_questions: int = 0
    overall_progress: float = Field(default=0.0, ge=0.0, le=100.0)


class QuestionProgress(DocumentModel):
    """A question together with the caller's status on it"""
    question: Question
    status: QuestionStatus
    attempts: int = 0


class SubmissionCounts(DocumentModel):
    total: int = 0
    passed: int = 0
    failed: int = 0


class UserProgress(DocumentModel):
    user_id: str
    user_name: str = ""
    completed: int = 0
    total: int = 0


class AnalyticsOverview(DocumentModel):
    """Portal-wide activity summary for admins"""
    total_users: int = 0
    total_submissions: int = 0
    passed_submissions: int = 0
    failed_submissions: int = 0
    subject_stats: Dict[str, SubmissionCounts] = Field(default_factory=dict)
    user_progress: List[UserProgress] = Field(default_factory=list)
    recent_submissions: List[Submission] = Field(default_factory=list)


class QuestionAnalytics(DocumentModel):
    """One user's record on one question"""
    question: Question
    total_attempts: int = 0
    passed: bool = False
    latest_submission: Optional[Submission] = None


class SubjectProgress(DocumentModel):
    completed: int = 0
    total: int = 0


class MenteeDetail(DocumentModel):
    """
    Drill-down on one user for admins.

    ``average_attempts`` averages over completed questions only.
    """
    profile: UserProfile
    total_questions: int = 0
    completed_questions: int = 0
    total_submissions: int = 0
    passed_submissions: int = 0
    failed_submissions: int = 0
    average_attempts: float = 0.0
    subject_progress: Dict[str, SubjectProgress] = Field(default_factory=dict)
    questions: List[QuestionAnalytics] = Field(default_factory=list)
