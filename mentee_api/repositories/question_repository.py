"""
Question repository for data access.

Implements the Repository pattern over the ``questions`` collection.
"""

from typing import Any, Dict, List, Optional

from ..models.domain import Question, SubjectId, utcnow
from ..core.errors import QuestionNotFoundError
from ..core.logging import get_logger
from .document_store import DocumentStore

logger = get_logger(__name__)


class QuestionRepository:
    """
    Question storage.

    Deleting a question normally only deactivates it, so that submission
    history and analytics keep pointing at a real document.
    """

    COLLECTION = "questions"

    def __init__(self, store: DocumentStore):
        self.store = store

    async def get(self, question_id: str) -> Question:
        """
        Get a question by ID.

        Raises:
            QuestionNotFoundError: If no such question exists
        """
        doc = await self.store.get(self.COLLECTION, question_id)
        if doc is None:
            logger.warning(
                "Question not found",
                extra_data={"question_id": question_id}
            )
            raise QuestionNotFoundError(question_id)

        return Question.model_validate(doc)

    async def create(self, question: Question) -> Question:
        """Store a new question and return it with its id"""
        doc = question.to_document()
        doc.pop("id", None)
        question_id = await self.store.add(self.COLLECTION, doc)

        logger.info(
            "Question created",
            extra_data={"question_id": question_id, "type": question.type.value}
        )

        return question.model_copy(update={"id": question_id})

    async def update(self, question_id: str, changes: Dict[str, Any]) -> Question:
        """
        Apply field changes (snake_case names) and bump ``updated_at``.

        Raises:
            QuestionNotFoundError: If no such question exists
        """
        current = await self.get(question_id)
        merged = Question.model_validate({
            **current.model_dump(),
            **changes,
            "updated_at": utcnow(),
        })
        await self.store.set(self.COLLECTION, question_id, merged.to_document())

        logger.info(
            "Question updated",
            extra_data={"question_id": question_id, "fields": sorted(changes)}
        )

        return merged

    async def soft_delete(self, question_id: str) -> Question:
        """Deactivate a question"""
        return await self.update(question_id, {"is_active": False})

    async def hard_delete(self, question_id: str) -> None:
        """
        Permanently remove a question.

        Raises:
            QuestionNotFoundError: If no such question exists
        """
        if not await self.store.delete(self.COLLECTION, question_id):
            raise QuestionNotFoundError(question_id)

        logger.info(
            "Question permanently deleted",
            extra_data={"question_id": question_id}
        )

    async def list(
        self,
        subject_id: Optional[SubjectId] = None,
        is_active: Optional[bool] = None
    ) -> List[Question]:
        """List questions, newest first"""
        filters: Dict[str, Any] = {}
        if subject_id is not None:
            filters["subjectId"] = SubjectId(subject_id).value
        if is_active is not None:
            filters["isActive"] = is_active

        docs = await self.store.query(self.COLLECTION, **filters)
        questions = [Question.model_validate(doc) for doc in docs]
        questions.sort(key=lambda q: q.created_at, reverse=True)

        return questions
