import pytest

from src.bizledger.bizledger.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    RemoteStoreError,
    ValidationError,
)
from src.bizledger.bizledger.sync.connection import FirebaseConfig
from src.bizledger.bizledger.sync.memory_document_store import InMemoryDocumentStore
from src.bizledger.bizledger.users.document_profile_repository import DocumentProfileRepository
from src.bizledger.bizledger.users.identity import FirebaseIdentityProvider, SignInResult
from src.bizledger.bizledger.users.local_identity import LocalIdentityProvider
from src.bizledger.bizledger.users.model import SessionUser, UserProfile
from src.bizledger.bizledger.users.permissions import ALL_PERMISSIONS
from src.bizledger.bizledger.users.service import AuthService, UserService

ADMIN = SessionUser(uid="admin", name="Admin", email="admin@x.com", is_admin=True, permissions=())
CLERK = SessionUser(uid="clerk", name="Clerk", email="clerk@x.com", is_admin=False, permissions=("hr",))


class FakeIdentity:
    def __init__(self):
        self.accounts = {}

    def sign_in(self, email, password):
        account = self.accounts.get(email)
        if not account or account[1] != password:
            raise AuthenticationError("Invalid email or password")
        return SignInResult(uid=account[0], email=email, id_token="token")

    def create_account(self, *, email, password, display_name):
        uid = f"uid-{len(self.accounts) + 1}"
        self.accounts[email] = (uid, password)
        return uid


class FakeResponse:
    def __init__(self, status_code, body):
        self.status_code = status_code
        self._body = body

    def json(self):
        return self._body


class FakeHttp:
    def __init__(self, response):
        self.response = response
        self.calls = []

    def post(self, url, **kwargs):
        self.calls.append((url, kwargs))
        return self.response


class FakeConnection:
    config = FirebaseConfig(credentials_path=None, project_id="p", web_api_key="web-key")


def _profiles():
    return DocumentProfileRepository(InMemoryDocumentStore())


def test_authenticate_returns_session_user_from_profile():
    identity = FakeIdentity()
    identity.accounts["clerk@x.com"] = ("clerk", "secret1")
    profiles = _profiles()
    profiles.save(UserProfile(uid="clerk", name="Clerk", email="clerk@x.com", permissions=("hr/payroll",)))

    user = AuthService(identity, profiles).authenticate("clerk@x.com", "secret1")

    assert user.uid == "clerk"
    assert user.can("hr/payroll")
    assert not user.can("setup")


def test_authenticate_without_profile_is_rejected():
    identity = FakeIdentity()
    identity.accounts["x@x.com"] = ("x", "secret1")

    with pytest.raises(AuthenticationError):
        AuthService(identity, _profiles()).authenticate("x@x.com", "secret1")


def test_bootstrap_admin_gets_profile_on_first_sign_in():
    identity = FakeIdentity()
    identity.accounts["Boss@X.com"] = ("boss", "secret1")
    profiles = _profiles()

    user = AuthService(identity, profiles, bootstrap_admin_email="boss@x.com").authenticate("Boss@X.com", "secret1")

    assert user.is_admin
    assert profiles.get_by_uid("boss").is_admin


def test_empty_password_never_reaches_identity_service():
    with pytest.raises(AuthenticationError):
        AuthService(FakeIdentity(), _profiles()).authenticate("a@x.com", "")


def test_module_permission_covers_sub_permissions():
    user = SessionUser(uid="u", name="U", email="u@x.com", is_admin=False, permissions=("hr",))

    assert user.can("hr/attendance")
    assert not user.can("setup/items")


def test_create_and_update_users():
    identity = FakeIdentity()
    profiles = _profiles()
    service = UserService(identity, profiles)

    profile = service.create_user(
        current=ADMIN, name="New", email="new@x.com", password="secret1", permissions=["hr/tasks", "hr"]
    )
    assert profile.permissions == ("hr", "hr/tasks")

    service.update_user(current=ADMIN, uid=profile.uid, name="Renamed", is_admin=True)
    updated = profiles.get_by_uid(profile.uid)
    assert updated.name == "Renamed"
    assert updated.permissions == tuple(ALL_PERMISSIONS)
    assert [p.name for p in service.list_users(current=ADMIN)] == ["Renamed"]


def test_user_management_validation():
    service = UserService(FakeIdentity(), _profiles())

    with pytest.raises(AuthorizationError):
        service.list_users(current=CLERK)
    with pytest.raises(ValidationError):
        service.create_user(current=ADMIN, name="A", email="a@x.com", password="12345")
    with pytest.raises(ValidationError):
        service.create_user(current=ADMIN, name="A", email="a@x.com", password="123456", permissions=["root"])
    with pytest.raises(ValidationError):
        service.update_user(current=ADMIN, uid="missing", name="A", is_admin=False)


def test_local_identity_hashes_passwords():
    identity = LocalIdentityProvider()
    uid = identity.create_account(email="A@x.com", password="secret1", display_name="A")

    assert identity.sign_in("a@x.com", "secret1").uid == uid
    with pytest.raises(AuthenticationError):
        identity.sign_in("a@x.com", "wrong")
    with pytest.raises(ValidationError):
        identity.create_account(email="a@x.com", password="other1", display_name="A")


def test_firebase_sign_in_posts_credentials_with_web_key():
    http = FakeHttp(FakeResponse(200, {"localId": "u-1", "email": "a@x.com", "idToken": "t"}))
    provider = FirebaseIdentityProvider(FakeConnection(), session=http)

    result = provider.sign_in("a@x.com", "secret1")

    assert result == SignInResult(uid="u-1", email="a@x.com", id_token="t")
    _, kwargs = http.calls[0]
    assert kwargs["params"] == {"key": "web-key"}
    assert kwargs["json"]["returnSecureToken"] is True


def test_firebase_sign_in_maps_errors():
    bad_password = FakeHttp(FakeResponse(400, {"error": {"message": "INVALID_LOGIN_CREDENTIALS"}}))
    outage = FakeHttp(FakeResponse(503, {"error": {"message": "UNAVAILABLE"}}))

    with pytest.raises(AuthenticationError):
        FirebaseIdentityProvider(FakeConnection(), session=bad_password).sign_in("a@x.com", "x")
    with pytest.raises(RemoteStoreError):
        FirebaseIdentityProvider(FakeConnection(), session=outage).sign_in("a@x.com", "x")
