"""Repositories package"""

from .document_store import (
    DocumentStore,
    InMemoryDocumentStore,
    JsonFileDocumentStore,
    get_document_store,
)
from .question_repository import QuestionRepository
from .submission_repository import SubmissionRepository
from .user_repository import AdminRepository, UserRepository

__all__ = [
    "DocumentStore",
    "InMemoryDocumentStore",
    "JsonFileDocumentStore",
    "get_document_store",
    "QuestionRepository",
    "SubmissionRepository",
    "AdminRepository",
    "UserRepository",
]
