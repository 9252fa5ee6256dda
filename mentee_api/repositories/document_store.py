"""
Document store client.

Models the hosted document database the portal runs on: named collections
of JSON documents addressed by id, with equality queries. Repositories
receive a store instance explicitly; nothing below reaches for a global
database handle.
"""

from abc import ABC, abstractmethod
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, List, Optional
from uuid import uuid4
import json

from ..core.config import settings
from ..core.logging import get_logger

logger = get_logger(__name__)

Document = Dict[str, Any]


class DocumentStore(ABC):
    """Abstract interface for the document store"""

    @abstractmethod
    async def get(self, collection: str, doc_id: str) -> Optional[Document]:
        """Get a document by id, or None"""
        pass

    @abstractmethod
    async def add(self, collection: str, data: Document) -> str:
        """Insert a document under a generated id and return the id"""
        pass

    @abstractmethod
    async def set(self, collection: str, doc_id: str, data: Document) -> None:
        """Create or replace a document"""
        pass

    @abstractmethod
    async def update(self, collection: str, doc_id: str, changes: Document) -> Document:
        """
        Merge top-level fields into an existing document.

        Raises:
            KeyError: If the document does not exist
        """
        pass

    @abstractmethod
    async def delete(self, collection: str, doc_id: str) -> bool:
        """Delete a document; returns whether it existed"""
        pass

    @abstractmethod
    async def query(self, collection: str, **equals: Any) -> List[Document]:
        """Documents whose fields equal all given values"""
        pass


class InMemoryDocumentStore(DocumentStore):
    """
    Process-local document store.

    Documents are deep-copied on the way in and out so callers never share
    mutable state with the store.
    """

    def __init__(self):
        self._collections: Dict[str, Dict[str, Document]] = {}

    def _collection(self, name: str) -> Dict[str, Document]:
        return self._collections.setdefault(name, {})

    async def get(self, collection: str, doc_id: str) -> Optional[Document]:
        doc = self._collection(collection).get(doc_id)
        return deepcopy(doc) if doc is not None else None

    async def add(self, collection: str, data: Document) -> str:
        doc_id = uuid4().hex
        await self.set(collection, doc_id, data)
        return doc_id

    async def set(self, collection: str, doc_id: str, data: Document) -> None:
        self._collection(collection)[doc_id] = {**deepcopy(data), "id": doc_id}
        self._persist(collection)

    async def update(self, collection: str, doc_id: str, changes: Document) -> Document:
        docs = self._collection(collection)
        if doc_id not in docs:
            raise KeyError(f"{collection}/{doc_id}")
        docs[doc_id].update(deepcopy(changes))
        docs[doc_id]["id"] = doc_id
        self._persist(collection)
        return deepcopy(docs[doc_id])

    async def delete(self, collection: str, doc_id: str) -> bool:
        existed = self._collection(collection).pop(doc_id, None) is not None
        if existed:
            self._persist(collection)
        return existed

    async def query(self, collection: str, **equals: Any) -> List[Document]:
        return [
            deepcopy(doc)
            for doc in self._collection(collection).values()
            if all(doc.get(field) == value for field, value in equals.items())
        ]

    def _persist(self, collection: str) -> None:
        """Hook for durable subclasses"""


class JsonFileDocumentStore(InMemoryDocumentStore):
    """
    File-backed document store.

    Keeps one ``<collection>.json`` file per collection under ``data_dir``,
    loaded on first access and rewritten after every change.
    """

    def __init__(self, data_dir: Optional[Path] = None):
        super().__init__()
        self.data_dir = data_dir or Path(settings.DATA_DIR)
        self.data_dir.mkdir(exist_ok=True, parents=True)

        logger.info(
            "Initialized JsonFileDocumentStore",
            extra_data={"data_dir": str(self.data_dir)}
        )

    def _path(self, collection: str) -> Path:
        return self.data_dir / f"{collection}.json"

    def _collection(self, name: str) -> Dict[str, Document]:
        if name not in self._collections:
            self._collections[name] = self._load(name)
        return self._collections[name]

    def _load(self, collection: str) -> Dict[str, Document]:
        path = self._path(collection)
        if not path.exists():
            return {}

        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)

        logger.debug(
            "Collection loaded",
            extra_data={"collection": collection, "count": len(data)}
        )
        return data

    def _persist(self, collection: str) -> None:
        path = self._path(collection)
        tmp_path = path.with_suffix(".json.tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(self._collections.get(collection, {}), f, indent=2)
        tmp_path.replace(path)


# Singleton instance
_document_store: Optional[DocumentStore] = None


def get_document_store() -> DocumentStore:
    """Get the configured document store (singleton)"""
    global _document_store

    if _document_store is None:
        if settings.STORAGE_BACKEND == "json":
            _document_store = JsonFileDocumentStore()
        else:
            _document_store = InMemoryDocumentStore()

    return _document_store
