from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

import requests
from firebase_admin import auth as firebase_auth
from firebase_admin.exceptions import FirebaseError

from ..core.exceptions import AuthenticationError, RemoteStoreError, ValidationError
from ..sync.connection import FirebaseConnection

logger = logging.getLogger(__name__)

SIGN_IN_URL = "https://identitytoolkit.googleapis.com/v1/accounts:signInWithPassword"

# Identity Toolkit error codes that mean "wrong credentials" rather than an outage.
_CREDENTIAL_ERRORS = {
    "EMAIL_NOT_FOUND",
    "INVALID_PASSWORD",
    "INVALID_LOGIN_CREDENTIALS",
    "INVALID_EMAIL",
    "USER_DISABLED",
    "MISSING_PASSWORD",
}


@dataclass(frozen=True)
class SignInResult:
    uid: str
    email: str
    id_token: str


class IdentityProvider(Protocol):
    def sign_in(self, email: str, password: str) -> SignInResult:
        raise NotImplementedError

    def create_account(self, *, email: str, password: str, display_name: str) -> str:
        """Create an email/password account and return its uid."""

        raise NotImplementedError


class FirebaseIdentityProvider(IdentityProvider):
    """Email/password accounts backed by Firebase Authentication.

    Password sign-in is not part of the Admin SDK, so it goes through the
    Identity Toolkit REST endpoint with the project's web API key.
    """

    def __init__(self, conn: FirebaseConnection, *, timeout: float = 10.0, session: Optional[requests.Session] = None):
        self._conn = conn
        self._timeout = timeout
        self._http = session or requests.Session()

    def sign_in(self, email: str, password: str) -> SignInResult:
        api_key = self._conn.config.web_api_key
        if not api_key:
            raise RemoteStoreError("FIREBASE_WEB_API_KEY is not configured")

        try:
            response = self._http.post(
                SIGN_IN_URL,
                params={"key": api_key},
                json={"email": email, "password": password, "returnSecureToken": True},
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            raise RemoteStoreError(f"Identity service unreachable: {e}") from e

        if response.status_code != 200:
            code = _error_code(response)
            if code.split(" ", 1)[0] in _CREDENTIAL_ERRORS:
                raise AuthenticationError("Invalid email or password")
            raise RemoteStoreError(f"Identity service error: {code or response.status_code}")

        body = response.json()
        return SignInResult(uid=body["localId"], email=body.get("email", email), id_token=body.get("idToken", ""))

    def create_account(self, *, email: str, password: str, display_name: str) -> str:
        try:
            record = firebase_auth.create_user(
                email=email,
                password=password,
                display_name=display_name,
                app=self._conn.app(),
            )
        except firebase_auth.EmailAlreadyExistsError:
            raise ValidationError("An account with this email already exists")
        except ValueError as e:
            raise ValidationError(str(e))
        except FirebaseError as e:
            raise RemoteStoreError(f"Failed to create account: {e}") from e
        return record.uid


def _error_code(response: requests.Response) -> str:
    try:
        return str(response.json().get("error", {}).get("message", ""))
    except ValueError:
        return ""
