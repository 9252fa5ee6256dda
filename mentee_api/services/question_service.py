"""
Question service for business logic.

Catalogue operations: anyone signed in may read, only admins may write.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as ContentValidationError

from quizcheck.answer import parse_content

from ..models.domain import Identity, Question, QuestionType, SubjectId
from ..repositories import AdminRepository, QuestionRepository
from ..core.errors import AuthorizationError, ValidationError
from ..core.logging import get_logger

logger = get_logger(__name__)


class QuestionService:
    """
    Service for question operations.

    Coordinates the question and admin repositories.
    """

    def __init__(self, questions: QuestionRepository, admins: AdminRepository):
        self.questions = questions
        self.admins = admins

    async def get_question(self, question_id: str) -> Question:
        return await self.questions.get(question_id)

    async def list_questions(
        self,
        subject_id: Optional[SubjectId] = None,
        is_active: Optional[bool] = None
    ) -> List[Question]:
        """List questions, newest first"""
        questions = await self.questions.list(subject_id, is_active)

        logger.info(
            "Questions listed",
            extra_data={
                "subject_id": subject_id,
                "is_active": is_active,
                "count": len(questions)
            }
        )

        return questions

    async def create_question(
        self,
        identity: Identity,
        subject_id: SubjectId,
        question_type: QuestionType,
        content: Dict[str, Any],
        deadline: datetime,
        is_active: bool = True,
        order: int = 0
    ) -> Question:
        """
        Create a question.

        Raises:
            AuthorizationError: If the caller is not an admin
            ValidationError: If maths content does not fit its type
        """
        await self._require_admin(identity)
        self._check_content(question_type, content)

        question = Question(
            subject_id=subject_id,
            type=question_type,
            content=content,
            deadline=deadline,
            created_by=identity.uid,
            is_active=is_active,
            order=order,
        )
        return await self.questions.create(question)

    async def update_question(
        self,
        identity: Identity,
        question_id: str,
        changes: Dict[str, Any]
    ) -> Question:
        """
        Update only the given fields of a question.

        Raises:
            AuthorizationError: If the caller is not an admin
            QuestionNotFoundError: If the question does not exist
            ValidationError: If the resulting maths content does not fit its type
        """
        await self._require_admin(identity)
        current = await self.questions.get(question_id)

        if "type" in changes or "content" in changes:
            self._check_content(
                QuestionType(changes.get("type", current.type)),
                changes.get("content", current.content),
            )

        return await self.questions.update(question_id, changes)

    async def delete_question(self, identity: Identity, question_id: str) -> Question:
        """Deactivate a question, keeping its submissions meaningful"""
        await self._require_admin(identity)
        return await self.questions.soft_delete(question_id)

    async def hard_delete_question(self, identity: Identity, question_id: str) -> None:
        """Permanently delete a question"""
        await self._require_admin(identity)
        await self.questions.hard_delete(question_id)

    async def _require_admin(self, identity: Identity) -> None:
        if not await self.admins.is_admin(identity.uid):
            logger.warning(
                "Admin access denied",
                extra_data={"uid": identity.uid}
            )
            raise AuthorizationError()

    @staticmethod
    def _check_content(question_type: QuestionType, content: Dict[str, Any]) -> None:
        """Reject maths content that could not be graded later"""
        if not question_type.is_gradeable:
            return

        try:
            parse_content(question_type.value, content)
        except ContentValidationError as e:
            first = e.errors()[0]
            # union errors are located under the variant tag
            loc = first["loc"]
            if loc and loc[0] == question_type.value:
                loc = loc[1:]
            field = ".".join(str(part) for part in loc)
            raise ValidationError(
                f"Invalid {question_type.value} content: {first['msg']}",
                field=f"content.{field}",
            ) from e
