"""Domain models package"""

from .domain import (
    SubjectId,
    QuestionType,
    QuestionStatus,
    UserRole,
    Identity,
    UserProfile,
    Admin,
    Question,
    Submission,
    SubjectStats,
    DashboardStats,
    QuestionProgress,
    SubmissionCounts,
    UserProgress,
    AnalyticsOverview,
    QuestionAnalytics,
    SubjectProgress,
    MenteeDetail,
)

__all__ = [
    "SubjectId",
    "QuestionType",
    "QuestionStatus",
    "UserRole",
    "Identity",
    "UserProfile",
    "Admin",
    "Question",
    "Submission",
    "SubjectStats",
    "DashboardStats",
    "QuestionProgress",
    "SubmissionCounts",
    "UserProgress",
    "AnalyticsOverview",
    "QuestionAnalytics",
    "SubjectProgress",
    "MenteeDetail",
]
