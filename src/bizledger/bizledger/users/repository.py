from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import UserProfile


class ProfileRepository(Protocol):
    """Repository interface for user profiles.

    Note (DIP): services depend on this interface, not on a concrete store.
    """

    def get_by_uid(self, uid: str) -> Optional[UserProfile]:
        raise NotImplementedError

    def save(self, profile: UserProfile) -> None:
        raise NotImplementedError

    def update(self, uid: str, *, name: str, is_admin: bool, permissions: Sequence[str]) -> None:
        raise NotImplementedError

    def list_all(self) -> Sequence[UserProfile]:
        raise NotImplementedError
