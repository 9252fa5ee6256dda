"""
Grading service for answer evaluation.

Handles answer submission: resolves the question's content to its typed
variant, runs the matching validator, and records the attempt.
"""

from dataclasses import dataclass
from typing import Any, List, Optional

from pydantic import ValidationError as ContentValidationError

from quizcheck.answer import ValidationResult, parse_content, validate_answer

from ..models.domain import Identity, Question, QuestionType, Submission
from ..repositories import QuestionRepository, SubmissionRepository
from ..core.errors import GradingError, SubmissionRejectedError, ValidationError
from ..core.logging import get_context_logger


@dataclass(frozen=True)
class GradeOutcome:
    """Validation result plus the attempt it was recorded as, if any"""
    result: ValidationResult
    submission: Optional[Submission] = None


class GradingService:
    """
    Service for answer grading operations.

    Missing or malformed input is answered with a prompt and not recorded;
    only graded answers count as attempts.
    """

    def __init__(
        self,
        questions: QuestionRepository,
        submissions: SubmissionRepository
    ):
        self.questions = questions
        self.submissions = submissions

    async def submit_answer(
        self,
        identity: Identity,
        question_id: str,
        answer: Any,
        time_spent: int = 0
    ) -> GradeOutcome:
        """
        Grade a user's answer to a question.

        Args:
            identity: Authenticated user
            question_id: Question identifier
            answer: Option index (mcq), list of indices (multiple) or text
                (integer, string)
            time_spent: Seconds the user spent on the question

        Returns:
            GradeOutcome with the validation result and the stored attempt

        Raises:
            QuestionNotFoundError: If question doesn't exist
            SubmissionRejectedError: If the question is inactive or not gradeable
            ValidationError: If the answer has the wrong shape for the type
            GradingError: If the stored content is corrupt
        """
        log = get_context_logger(__name__, user_id=identity.uid, question_id=question_id)
        question = await self.questions.get(question_id)

        if not question.is_active:
            raise SubmissionRejectedError(question_id, "question is not active")
        if not question.type.is_gradeable:
            raise SubmissionRejectedError(
                question_id, f"'{question.type.value}' questions are not graded here"
            )

        try:
            content = parse_content(question.type.value, question.content)
        except ContentValidationError as e:
            log.error("Stored question content is invalid", extra_data={"error": str(e)})
            raise GradingError(question_id, "stored content is invalid") from e

        result = validate_answer(content, coerce_answer(question.type, answer))

        if result.error_flag:
            log.info("Answer not graded", extra_data={"explanation": result.explanation})
            return GradeOutcome(result=result)

        submission = await self._record(question, identity, result, time_spent)

        log.info(
            "Answer graded",
            extra_data={
                "is_correct": result.is_correct,
                "attempt_number": submission.attempt_number
            }
        )

        return GradeOutcome(result=result, submission=submission)

    async def history(self, identity: Identity, question_id: str) -> List[Submission]:
        """The caller's attempts at a question, most recent first"""
        await self.questions.get(question_id)
        return await self.submissions.list_for_user(identity.uid, question_id=question_id)

    async def _record(
        self,
        question: Question,
        identity: Identity,
        result: ValidationResult,
        time_spent: int
    ) -> Submission:
        previous = await self.submissions.count_attempts(identity.uid, question.id)

        submission = Submission(
            question_id=question.id,
            user_id=identity.uid,
            subject_id=question.subject_id,
            type=question.type,
            submitted_answer=result.user_answer,
            result=result.to_dict(),
            is_passed=result.is_correct,
            attempt_number=previous + 1,
            time_spent=time_spent,
        )
        return await self.submissions.add(submission)


def coerce_answer(question_type: QuestionType, answer: Any) -> Any:
    """
    Bring a JSON answer into the shape the validator expects.

    Numbers typed into integer/string questions may arrive as JSON numbers;
    they are validated as their text.

    Raises:
        ValidationError: If the answer cannot have the expected shape
    """
    if question_type is QuestionType.MCQ:
        if answer is None or (isinstance(answer, int) and not isinstance(answer, bool)):
            return answer
        raise ValidationError("Answer must be an option index", field="answer")

    if question_type is QuestionType.MULTIPLE:
        if answer is None:
            return []
        if isinstance(answer, list) and all(
            isinstance(item, int) and not isinstance(item, bool) for item in answer
        ):
            return answer
        raise ValidationError("Answer must be a list of option indices", field="answer")

    if answer is None:
        return ""
    if isinstance(answer, (str, int, float)) and not isinstance(answer, bool):
        return str(answer)
    raise ValidationError("Answer must be text", field="answer")
