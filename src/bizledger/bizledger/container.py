from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .accounting.service import LedgerService
from .admin.service import AdminService
from .attendance.service import AttendanceService
from .core.constants import STATE_DOC_PATH, USERS_COLLECTION
from .employees.service import EmployeeService
from .overtime.service import OvertimeService
from .payroll.service import PayrollService
from .state.store import StateStore
from .sync.connection import FirebaseConfig, FirebaseConnection
from .sync.document_store import DocumentStore
from .sync.engine import SyncEngine
from .sync.firestore_document_store import FirestoreDocumentStore
from .sync.memory_document_store import InMemoryDocumentStore
from .users.document_profile_repository import DocumentProfileRepository
from .users.identity import FirebaseIdentityProvider, IdentityProvider
from .users.local_identity import LocalIdentityProvider
from .users.model import UserProfile
from .users.permissions import ALL_PERMISSIONS
from .users.service import AuthService, UserService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Container:
    documents: DocumentStore
    identity: IdentityProvider
    profiles_repo: DocumentProfileRepository

    store: StateStore
    sync_engine: SyncEngine

    auth_service: AuthService
    user_service: UserService
    employee_service: EmployeeService
    attendance_service: AttendanceService
    overtime_service: OvertimeService
    payroll_service: PayrollService
    ledger_service: LedgerService
    admin_service: AdminService


def _firebase_connection(settings) -> FirebaseConnection:
    config = FirebaseConfig(
        credentials_path=getattr(settings, "FIREBASE_CREDENTIALS", "") or None,
        project_id=getattr(settings, "FIREBASE_PROJECT_ID", "") or None,
        web_api_key=getattr(settings, "FIREBASE_WEB_API_KEY", "") or None,
    )
    return FirebaseConnection.get_instance(config)


def build_container(
    settings,
    *,
    documents: Optional[DocumentStore] = None,
    identity: Optional[IdentityProvider] = None,
) -> Container:
    """Wire repositories and services for the configured backend.

    `documents` and `identity` override the backend (tests pass fakes).
    """

    backend = str(getattr(settings, "DOCUMENT_BACKEND", "memory")).lower()
    if backend not in {"memory", "firestore"}:
        raise ValueError(f"Unknown DOCUMENT_BACKEND: {backend}")

    if backend == "firestore" and (documents is None or identity is None):
        conn = _firebase_connection(settings)
        documents = documents or FirestoreDocumentStore(conn)
        identity = identity or FirebaseIdentityProvider(conn)
    documents = documents or InMemoryDocumentStore()
    if identity is None:
        identity = LocalIdentityProvider()

    profiles_repo = DocumentProfileRepository(
        documents, collection=getattr(settings, "USERS_COLLECTION", USERS_COLLECTION)
    )

    if isinstance(identity, LocalIdentityProvider):
        _bootstrap_local_admin(settings, identity, profiles_repo)

    store = StateStore()
    sync_engine = SyncEngine(store, documents, doc_path=getattr(settings, "STATE_DOC_PATH", STATE_DOC_PATH))

    auth_service = AuthService(
        identity,
        profiles_repo,
        bootstrap_admin_email=getattr(settings, "BOOTSTRAP_ADMIN_EMAIL", "") or None,
    )
    user_service = UserService(identity, profiles_repo)
    employee_service = EmployeeService(store)
    attendance_service = AttendanceService(store, employee_service)
    overtime_service = OvertimeService(store, employee_service)
    payroll_service = PayrollService(store, employee_service, attendance_service, overtime_service)
    ledger_service = LedgerService(store)
    admin_service = AdminService(store)

    return Container(
        documents=documents,
        identity=identity,
        profiles_repo=profiles_repo,
        store=store,
        sync_engine=sync_engine,
        auth_service=auth_service,
        user_service=user_service,
        employee_service=employee_service,
        attendance_service=attendance_service,
        overtime_service=overtime_service,
        payroll_service=payroll_service,
        ledger_service=ledger_service,
        admin_service=admin_service,
    )


def _bootstrap_local_admin(settings, identity: LocalIdentityProvider, profiles: DocumentProfileRepository) -> None:
    email = getattr(settings, "BOOTSTRAP_ADMIN_EMAIL", "")
    password = getattr(settings, "BOOTSTRAP_ADMIN_PASSWORD", "")
    if not email or not password:
        return
    uid = identity.create_account(email=email, password=password, display_name="Administrator")
    profiles.save(
        UserProfile(uid=uid, name="Administrator", email=email, is_admin=True, permissions=tuple(ALL_PERMISSIONS))
    )
    logger.info("Created local bootstrap admin", extra={"uid": uid})
