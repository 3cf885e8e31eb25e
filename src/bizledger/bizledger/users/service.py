from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.validators import require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from .identity import IdentityProvider
from .model import SessionUser, UserProfile
from .permissions import ALL_PERMISSIONS
from .repository import ProfileRepository

logger = logging.getLogger(__name__)


def require_admin(current: SessionUser) -> None:
    if not current.is_admin:
        raise AuthorizationError("You do not have permission for this action")


class AuthService:
    """Use case: authenticate user (login) and resolve the profile."""

    def __init__(
        self,
        identity: IdentityProvider,
        profiles: ProfileRepository,
        *,
        bootstrap_admin_email: Optional[str] = None,
    ):
        self._identity = identity
        self._profiles = profiles
        self._bootstrap_admin_email = (bootstrap_admin_email or "").strip().lower() or None

    def authenticate(self, email: str, password: str) -> SessionUser:
        email = require_non_empty(email, "Email")
        if not password:
            raise AuthenticationError("Invalid email or password")

        result = self._identity.sign_in(email, password)
        profile = self._profiles.get_by_uid(result.uid)

        if profile is None and self._bootstrap_admin_email and result.email.lower() == self._bootstrap_admin_email:
            profile = UserProfile(
                uid=result.uid,
                name=result.email.split("@", 1)[0],
                email=result.email,
                is_admin=True,
                permissions=ALL_PERMISSIONS,
            )
            self._profiles.save(profile)
            logger.info("Created bootstrap admin profile", extra={"uid": result.uid})

        if profile is None:
            logger.warning("Sign-in without profile rejected", extra={"uid": result.uid})
            raise AuthenticationError("No profile is set up for this account")

        return SessionUser(
            uid=profile.uid,
            name=profile.name,
            email=profile.email or result.email,
            is_admin=profile.is_admin,
            permissions=tuple(ALL_PERMISSIONS) if profile.is_admin else profile.permissions,
        )


class UserService:
    """Use case: manage user accounts (admin)."""

    def __init__(self, identity: IdentityProvider, profiles: ProfileRepository):
        self._identity = identity
        self._profiles = profiles

    def list_users(self, *, current: SessionUser) -> Sequence[UserProfile]:
        require_admin(current)
        return self._profiles.list_all()

    def create_user(
        self,
        *,
        current: SessionUser,
        name: str,
        email: str,
        password: str,
        is_admin: bool = False,
        permissions: Sequence[str] = (),
    ) -> UserProfile:
        require_admin(current)
        name = require_non_empty(name, "Name")
        email = require_non_empty(email, "Email")
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        uid = self._identity.create_account(email=email, password=password, display_name=name)
        profile = UserProfile(
            uid=uid,
            name=name,
            email=email,
            is_admin=bool(is_admin),
            permissions=self._effective_permissions(is_admin, permissions),
        )
        self._profiles.save(profile)
        return profile

    def update_user(
        self,
        *,
        current: SessionUser,
        uid: str,
        name: str,
        is_admin: bool,
        permissions: Sequence[str] = (),
    ) -> None:
        require_admin(current)
        name = require_non_empty(name, "Name")
        if self._profiles.get_by_uid(uid) is None:
            raise ValidationError("User does not exist")
        self._profiles.update(
            uid,
            name=name,
            is_admin=bool(is_admin),
            permissions=self._effective_permissions(is_admin, permissions),
        )

    def _effective_permissions(self, is_admin: bool, permissions: Sequence[str]) -> tuple[str, ...]:
        if is_admin:
            return tuple(ALL_PERMISSIONS)
        unknown = [p for p in permissions if p not in ALL_PERMISSIONS]
        if unknown:
            raise ValidationError(f"Unknown permissions: {', '.join(unknown)}")
        return tuple(p for p in ALL_PERMISSIONS if p in permissions)
