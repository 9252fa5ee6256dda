"""
User and admin repositories.

Users are recorded on login so admins can see per-user progress; the
``admins`` collection decides who may manage questions.
"""

from typing import List, Optional

from ..models.domain import Admin, Identity, UserProfile, UserRole, utcnow
from ..core.logging import get_logger
from .document_store import DocumentStore

logger = get_logger(__name__)


class AdminRepository:
    """Admin membership, keyed by uid"""

    COLLECTION = "admins"

    def __init__(self, store: DocumentStore):
        self.store = store

    async def is_admin(self, uid: str) -> bool:
        return await self.store.get(self.COLLECTION, uid) is not None

    async def add(
        self,
        uid: str,
        email: str = "",
        name: str = "",
        added_by: Optional[str] = None
    ) -> Admin:
        admin = Admin(uid=uid, email=email, name=name, added_by=added_by)
        await self.store.set(self.COLLECTION, uid, admin.to_document())

        logger.info(
            "Admin added",
            extra_data={"uid": uid, "added_by": added_by}
        )

        return admin


class UserRepository:
    """User profiles, keyed by uid"""

    COLLECTION = "users"

    def __init__(self, store: DocumentStore):
        self.store = store

    async def get(self, uid: str) -> Optional[UserProfile]:
        doc = await self.store.get(self.COLLECTION, uid)
        return UserProfile.model_validate(doc) if doc is not None else None

    async def upsert_login(self, identity: Identity, role: UserRole) -> UserProfile:
        """Create the profile on first login, refresh it afterwards"""
        now = utcnow()
        existing = await self.get(identity.uid)

        profile = UserProfile(
            uid=identity.uid,
            email=identity.email or (existing.email if existing else ""),
            name=identity.name or (existing.name if existing else ""),
            role=role,
            created_at=existing.created_at if existing else now,
            last_login_at=now,
        )
        await self.store.set(self.COLLECTION, identity.uid, profile.to_document())

        return profile

    async def list(self) -> List[UserProfile]:
        docs = await self.store.query(self.COLLECTION)
        return [UserProfile.model_validate(doc) for doc in docs]
