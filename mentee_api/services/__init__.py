"""Services package"""

from .question_service import QuestionService
from .grading_service import GradingService, GradeOutcome, coerce_answer
from .progress_service import DashboardService, AnalyticsService

__all__ = [
    "QuestionService",
    "GradingService",
    "GradeOutcome",
    "coerce_answer",
    "DashboardService",
    "AnalyticsService",
]
