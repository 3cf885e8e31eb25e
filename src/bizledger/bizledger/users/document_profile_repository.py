from __future__ import annotations

from typing import Optional, Sequence

from ..core.constants import USERS_COLLECTION
from ..sync.document_store import DocumentStore
from .model import UserProfile
from .repository import ProfileRepository


class DocumentProfileRepository(ProfileRepository):
    """Profiles kept one document per uid in the `users` collection."""

    def __init__(self, documents: DocumentStore, *, collection: str = USERS_COLLECTION):
        self._documents = documents
        self._collection = collection

    def _path(self, uid: str) -> str:
        return f"{self._collection}/{uid}"

    def get_by_uid(self, uid: str) -> Optional[UserProfile]:
        snap = self._documents.get(self._path(uid))
        if not snap.exists:
            return None
        return UserProfile.from_document(uid, snap.data or {})

    def save(self, profile: UserProfile) -> None:
        self._documents.set(self._path(profile.uid), profile.to_document())

    def update(self, uid: str, *, name: str, is_admin: bool, permissions: Sequence[str]) -> None:
        self._documents.update(
            self._path(uid),
            {"name": name, "isAdmin": is_admin, "permissions": list(permissions)},
        )

    def list_all(self) -> Sequence[UserProfile]:
        profiles = [UserProfile.from_document(uid, doc) for uid, doc in self._documents.list_collection(self._collection)]
        profiles.sort(key=lambda p: p.name.lower())
        return profiles
