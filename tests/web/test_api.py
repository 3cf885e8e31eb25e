import io
import json
from types import SimpleNamespace

import pytest

from src.bizledger.bizledger.container import build_container
from src.bizledger.bizledger.main import create_app

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "admin-pass"


@pytest.fixture
def container():
    settings = SimpleNamespace(
        DOCUMENT_BACKEND="memory",
        STATE_DOC_PATH="appState/web-test",
        USERS_COLLECTION="users",
        BOOTSTRAP_ADMIN_EMAIL=ADMIN_EMAIL,
        BOOTSTRAP_ADMIN_PASSWORD=ADMIN_PASSWORD,
    )
    return build_container(settings)


@pytest.fixture
def app(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(container)


def _login(client, email=ADMIN_EMAIL, password=ADMIN_PASSWORD):
    return client.post("/api/login", json={"email": email, "password": password})


def test_login_rejects_bad_credentials(app):
    client = app.test_client()

    res = _login(client, password="nope")

    assert res.status_code == 401
    assert res.get_json()["success"] is False


def test_routes_require_sign_in(app):
    client = app.test_client()

    assert client.get("/api/employees").status_code == 401
    assert client.get("/api/me").status_code == 401


def test_admin_session_and_employee_crud(app):
    client = app.test_client()
    assert _login(client).status_code == 200
    assert client.get("/api/me").get_json()["data"]["is_admin"] is True

    res = client.post("/api/employees", json={"fullName": "Ali", "basicSalary": 3000, "joiningDate": "2020-01-01"})
    assert res.status_code == 201
    assert res.get_json()["data"]["id"] == "EMP-001"

    res = client.put("/api/employees/EMP-001", json={"allowance": 250})
    assert res.get_json()["data"]["allowance"] == 250.0

    assert client.get("/api/employees/EMP-404").status_code == 404
    assert client.post("/api/employees", json={"fullName": ""}).status_code == 400
    assert client.delete("/api/employees/EMP-001").status_code == 200


def test_non_admin_cannot_delete_employees_or_reset(app):
    admin = app.test_client()
    _login(admin)
    admin.post("/api/employees", json={"fullName": "Ali"})
    res = admin.post(
        "/api/users",
        json={"name": "Clerk", "email": "clerk@example.com", "password": "clerk-pass", "permissions": ["hr"]},
    )
    assert res.status_code == 201

    clerk = app.test_client()
    assert _login(clerk, "clerk@example.com", "clerk-pass").status_code == 200

    assert clerk.get("/api/employees").status_code == 200
    assert clerk.delete("/api/employees/EMP-001").status_code == 403
    assert clerk.post("/api/admin/hard-reset").status_code == 403
    assert clerk.get("/api/users").status_code == 403


def test_attendance_overtime_and_payroll_flow(app):
    client = app.test_client()
    _login(client)
    client.post("/api/employees", json={"fullName": "Ali", "basicSalary": 3000, "joiningDate": "2020-01-01"})

    res = client.put("/api/attendance/EMP-001/2024-06-03", json={"status": "Absent"})
    assert res.status_code == 400

    res = client.put("/api/attendance/EMP-001/2024-06-03", json={"status": "Absent", "reason": "no show"})
    assert res.status_code == 200
    grid = client.get("/api/attendance/2024-06").get_json()["data"]
    assert grid[0]["days"]["3"] == "A"

    assert client.put("/api/overtime/EMP-001/2024-06-04", json={"hours": 2}).status_code == 200
    res = client.post("/api/overtime-press/pool", json={"date": "2024-06-05", "extraBales": 4, "workerIds": ["EMP-001"]})
    assert res.get_json()["data"]["share"] == 20.0

    report = client.get("/api/payroll/2024-06").get_json()["data"]
    # 3000 - 100 + 2h * 7 + 20
    assert report[0]["net_payable_salary"] == 2934.0

    res = client.put("/api/payroll/2024-06/payments/EMP-001", json={"method": "Cash"})
    assert res.get_json()["data"]["amountPaid"] == 2934.0
    assert res.get_json()["data"]["bankId"] is None

    res = client.get("/api/payroll/2024-06/export.csv")
    assert res.mimetype == "text/csv"

    assert client.get("/api/payroll/2024-13").status_code == 400


def test_vouchers_and_balances(app):
    client = app.test_client()
    _login(client)

    res = client.post(
        "/api/vouchers",
        json={"entryType": "Receipt", "date": "2024-03-01", "lines": [{"account": "CASH", "debit": 10}, {"account": "AR-001", "credit": 9}]},
    )
    assert res.status_code == 400

    res = client.post(
        "/api/vouchers",
        json={"entryType": "Receipt", "date": "2024-03-01", "lines": [{"account": "CASH", "debit": 10}, {"account": "AR-001", "credit": 10}]},
    )
    assert res.status_code == 201
    assert res.get_json()["data"]["voucherId"] == "RV-0001"

    balances = client.get("/api/ledger/balances").get_json()["data"]
    assert balances == {"AR-001": -10.0, "CASH": 10.0}
    assert client.get("/api/vouchers/unbalanced").get_json()["data"] == []


def test_backup_and_restore(app, container):
    client = app.test_client()
    _login(client)
    client.post("/api/employees", json={"fullName": "Ali"})

    res = client.get("/api/admin/backup")
    assert res.status_code == 200
    backup = res.data

    client.post("/api/employees", json={"fullName": "Bea"})
    res = client.post(
        "/api/admin/restore",
        data={"file": (io.BytesIO(backup), "backup.json")},
        content_type="multipart/form-data",
    )
    assert res.status_code == 200
    assert [e["fullName"] for e in container.store.state["employees"]] == ["Ali"]

    res = client.post("/api/admin/restore", data=json.dumps({"employees": []}), content_type="application/json")
    assert res.status_code == 400


def test_sync_status_and_unknown_routes(app):
    client = app.test_client()
    _login(client)

    data = client.get("/api/sync/status").get_json()["data"]
    assert data["status"] == "synced"
    assert data["unloadWarning"] is None

    res = client.get("/api/nothing-here")
    assert res.status_code == 404
    assert res.get_json()["success"] is False


def test_pool_rate_defaults_only_when_missing(app):
    client = app.test_client()
    _login(client)
    client.post("/api/employees", json={"fullName": "Ali"})

    res = client.post(
        "/api/overtime-press/pool",
        json={"date": "2024-06-05", "extraBales": 4, "workerIds": ["EMP-001"], "ratePerExtra": 0},
    )
    assert res.status_code == 400

    res = client.post(
        "/api/overtime-press/pool",
        json={"date": "2024-06-05", "extraBales": 4, "workerIds": ["EMP-001"], "ratePerExtra": None},
    )
    assert res.status_code == 200
    assert res.get_json()["data"]["share"] == 20.0
