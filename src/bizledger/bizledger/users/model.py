from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class UserProfile:
    """Profile document stored under `users/{uid}`."""

    uid: str
    name: str
    email: str
    is_admin: bool = False
    permissions: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_document(cls, uid: str, doc: dict) -> "UserProfile":
        return cls(
            uid=uid,
            name=str(doc.get("name") or ""),
            email=str(doc.get("email") or ""),
            is_admin=bool(doc.get("isAdmin", False)),
            permissions=tuple(doc.get("permissions") or ()),
        )

    def to_document(self) -> dict:
        return {
            "name": self.name,
            "email": self.email,
            "isAdmin": self.is_admin,
            "permissions": list(self.permissions),
        }


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    uid: str
    name: str
    email: str
    is_admin: bool
    permissions: tuple[str, ...]

    def can(self, permission: str) -> bool:
        if self.is_admin:
            return True
        # A module permission (e.g. "hr") covers its sub-permissions ("hr/payroll").
        module = permission.split("/", 1)[0]
        return permission in self.permissions or module in self.permissions

    def to_session(self) -> dict:
        return {
            "uid": self.uid,
            "name": self.name,
            "email": self.email,
            "is_admin": self.is_admin,
            "permissions": list(self.permissions),
        }

    @classmethod
    def from_session(cls, data: dict) -> "SessionUser":
        return cls(
            uid=data["uid"],
            name=data.get("name", ""),
            email=data.get("email", ""),
            is_admin=bool(data.get("is_admin")),
            permissions=tuple(data.get("permissions") or ()),
        )
