"""
Submission repository for data access.

Submissions are append-only: one document per graded attempt, keyed by
user, question and attempt number.
"""

from typing import Any, Dict, List, Optional

from ..models.domain import Submission, SubjectId
from ..core.logging import get_logger
from .document_store import DocumentStore

logger = get_logger(__name__)


class SubmissionRepository:
    """Submission storage"""

    COLLECTION = "submissions"

    def __init__(self, store: DocumentStore):
        self.store = store

    async def add(self, submission: Submission) -> Submission:
        """Store an attempt and return it with its id"""
        doc = submission.to_document()
        doc.pop("id", None)
        submission_id = await self.store.add(self.COLLECTION, doc)

        logger.debug(
            "Submission stored",
            extra_data={
                "submission_id": submission_id,
                "question_id": submission.question_id,
                "attempt_number": submission.attempt_number,
            }
        )

        return submission.model_copy(update={"id": submission_id})

    async def list_for_user(
        self,
        user_id: str,
        question_id: Optional[str] = None,
        subject_id: Optional[SubjectId] = None
    ) -> List[Submission]:
        """A user's attempts, most recent first"""
        filters: Dict[str, Any] = {"userId": user_id}
        if question_id is not None:
            filters["questionId"] = question_id
        if subject_id is not None:
            filters["subjectId"] = SubjectId(subject_id).value

        docs = await self.store.query(self.COLLECTION, **filters)
        return self._newest_first(docs)

    async def list_all(self) -> List[Submission]:
        docs = await self.store.query(self.COLLECTION)
        return self._newest_first(docs)

    async def count_attempts(self, user_id: str, question_id: str) -> int:
        """Number of recorded attempts of a user at a question"""
        docs = await self.store.query(
            self.COLLECTION, userId=user_id, questionId=question_id
        )
        return len(docs)

    @staticmethod
    def _newest_first(docs: List[Dict[str, Any]]) -> List[Submission]:
        submissions = [Submission.model_validate(doc) for doc in docs]
        submissions.sort(key=lambda s: (s.submitted_at, s.attempt_number), reverse=True)
        return submissions
