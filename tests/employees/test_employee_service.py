import threading
import time

import pytest

from src.bizledger.bizledger.core.exceptions import AuthorizationError, ValidationError
from src.bizledger.bizledger.employees import service as employees_module
from src.bizledger.bizledger.employees.service import EmployeeService, generate_employee_id
from src.bizledger.bizledger.state.store import StateStore
from src.bizledger.bizledger.users.model import SessionUser

ADMIN = SessionUser(uid="u-admin", name="Admin", email="a@x.com", is_admin=True, permissions=())
CLERK = SessionUser(uid="u-clerk", name="Clerk", email="c@x.com", is_admin=False, permissions=("hr",))


def test_generate_employee_id_follows_highest_number():
    assert generate_employee_id([]) == "EMP-001"
    assert generate_employee_id([{"id": "EMP-007"}, {"id": "X-99"}, {"id": "EMP-002"}]) == "EMP-008"


def test_create_applies_defaults_and_requires_name():
    service = EmployeeService(StateStore())

    record = service.create({"fullName": "  Zara  ", "basicSalary": "1500"})

    assert record["id"] == "EMP-001"
    assert record["fullName"] == "Zara"
    assert record["status"] == "Active"
    assert record["employeeType"] == "Office"
    assert record["basicSalary"] == 1500.0

    with pytest.raises(ValidationError):
        service.create({"fullName": "  "})


def test_create_rejects_unknown_type_and_bad_numbers():
    service = EmployeeService(StateStore())

    with pytest.raises(ValidationError):
        service.create({"fullName": "A", "employeeType": "Contractor"})
    with pytest.raises(ValidationError):
        service.create({"fullName": "A", "basicSalary": "lots"})


def test_list_filters_and_sorts_by_name():
    service = EmployeeService(StateStore())
    service.create({"fullName": "Omar", "section": "Press", "employeeType": "Labour"})
    service.create({"fullName": "bilal", "section": "Office"})
    service.create({"fullName": "Adam", "section": "Press", "status": "Inactive"})

    assert [e["fullName"] for e in service.list_employees()] == ["Adam", "bilal", "Omar"]
    assert [e["fullName"] for e in service.list_employees(active_only=True)] == ["bilal", "Omar"]
    assert [e["fullName"] for e in service.list_employees(section="Press")] == ["Adam", "Omar"]
    assert [e["fullName"] for e in service.list_employees(employee_type="Labour")] == ["Omar"]
    assert [e["id"] for e in service.list_employees(search="emp-002")] == ["EMP-002"]


def test_create_many_is_one_batch_with_sequential_ids():
    store = StateStore()
    seen = []
    store.subscribe(lambda state, action, origin: seen.append(action))
    service = EmployeeService(store)

    created = service.create_many([{"fullName": "A"}, {"fullName": "B"}])

    assert [e["id"] for e in created] == ["EMP-001", "EMP-002"]
    assert len(seen) == 1


def test_update_merges_fields():
    service = EmployeeService(StateStore())
    service.create({"fullName": "A", "basicSalary": 1000})

    updated = service.update("EMP-001", {"basicSalary": 1200, "designation": "Driver"})

    assert updated["basicSalary"] == 1200.0
    assert updated["designation"] == "Driver"
    assert updated["fullName"] == "A"

    with pytest.raises(ValidationError):
        service.update("EMP-404", {"basicSalary": 1})


def test_delete_requires_admin():
    service = EmployeeService(StateStore())
    service.create({"fullName": "A"})

    with pytest.raises(AuthorizationError):
        service.delete(current=CLERK, employee_id="EMP-001")

    service.delete(current=ADMIN, employee_id="EMP-001")
    assert service.get("EMP-001") is None


@pytest.mark.parametrize("salary", ["NaN", "Infinity", "sNaN"])
def test_create_rejects_non_finite_salary(salary):
    store = StateStore()
    service = EmployeeService(store)

    with pytest.raises(ValidationError):
        service.create({"fullName": "Omar", "basicSalary": salary})

    assert store.state["employees"] == []


def test_concurrent_creates_get_distinct_ids(monkeypatch):
    store = StateStore()
    service = EmployeeService(store)
    original = employees_module.generate_employee_id

    def slow_generate(existing):
        employee_id = original(existing)
        time.sleep(0.05)
        return employee_id

    monkeypatch.setattr(employees_module, "generate_employee_id", slow_generate)

    start = threading.Barrier(2)

    def create(name):
        start.wait()
        service.create({"fullName": name})

    threads = [threading.Thread(target=create, args=(name,)) for name in ("Ali", "Bea")]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(e["id"] for e in store.state["employees"]) == ["EMP-001", "EMP-002"]
    assert sorted(e["fullName"] for e in store.state["employees"]) == ["Ali", "Bea"]
