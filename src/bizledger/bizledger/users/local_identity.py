from __future__ import annotations

import threading
import uuid

from werkzeug.security import check_password_hash, generate_password_hash

from ..core.exceptions import AuthenticationError, ValidationError
from .identity import IdentityProvider, SignInResult


class LocalIdentityProvider(IdentityProvider):
    """In-process email/password accounts for the `memory` backend.

    Passwords are kept as werkzeug hashes; nothing is persisted.
    """

    def __init__(self):
        self._accounts: dict[str, tuple[str, str]] = {}
        self._lock = threading.Lock()

    def sign_in(self, email: str, password: str) -> SignInResult:
        with self._lock:
            account = self._accounts.get(email.strip().lower())
        if not account or not check_password_hash(account[1], password):
            raise AuthenticationError("Invalid email or password")
        return SignInResult(uid=account[0], email=email.strip().lower(), id_token="")

    def create_account(self, *, email: str, password: str, display_name: str) -> str:
        key = email.strip().lower()
        with self._lock:
            if key in self._accounts:
                raise ValidationError("An account with this email already exists")
            uid = uuid.uuid4().hex
            self._accounts[key] = (uid, generate_password_hash(password))
        return uid
