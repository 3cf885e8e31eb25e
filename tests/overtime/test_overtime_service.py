from datetime import date
from decimal import Decimal

import pytest

from src.bizledger.bizledger.core.exceptions import ValidationError
from src.bizledger.bizledger.employees.service import EmployeeService
from src.bizledger.bizledger.overtime.service import OvertimeService
from src.bizledger.bizledger.state.store import StateStore

DAY = date(2024, 5, 6)


def _services():
    store = StateStore()
    employees = EmployeeService(store)
    for name in ("A", "B", "C"):
        employees.create({"fullName": name, "employeeType": "Labour"})
    return store, OvertimeService(store, employees)


def test_set_hours_upserts_and_zero_deletes():
    store, service = _services()

    service.set_hours(employee_id="EMP-001", work_date=DAY, hours="2")
    service.set_hours(employee_id="EMP-001", work_date=DAY, hours=3.5)

    assert store.state["overtimeRecords"] == [
        {"id": "OT-EMP-001-2024-05-06", "employeeId": "EMP-001", "date": "2024-05-06", "hours": 3.5}
    ]

    assert service.set_hours(employee_id="EMP-001", work_date=DAY, hours="") is None
    assert store.state["overtimeRecords"] == []


def test_set_hours_rejects_negative_and_garbage():
    _, service = _services()

    with pytest.raises(ValidationError):
        service.set_hours(employee_id="EMP-001", work_date=DAY, hours=-1)
    with pytest.raises(ValidationError):
        service.set_hours(employee_id="EMP-001", work_date=DAY, hours="abc")


def test_pool_is_split_equally_and_added_to_existing_amounts():
    store, service = _services()
    service.set_press_hours(employee_id="EMP-001", work_date=DAY, hours=2)
    seen = []
    store.subscribe(lambda state, action, origin: seen.append(action))

    share = service.distribute_press_pool(
        work_date=DAY, extra_bales=10, worker_ids=["EMP-001", "EMP-002"], rate_per_extra=5
    )
    service.distribute_press_pool(work_date=DAY, extra_bales=4, worker_ids=["EMP-001"], rate_per_extra=5)

    assert share == Decimal("25.00")
    assert len(seen) == 2
    by_id = {r["employeeId"]: r for r in store.state["overtimePressRecords"]}
    assert by_id["EMP-001"]["amount"] == 45.0
    assert by_id["EMP-001"]["hours"] == 2.0
    assert by_id["EMP-002"]["amount"] == 25.0
    assert by_id["EMP-002"]["hours"] == 0.0
    assert "EMP-003" not in by_id


def test_pool_validation():
    _, service = _services()

    with pytest.raises(ValidationError):
        service.distribute_press_pool(work_date=DAY, extra_bales=0, worker_ids=["EMP-001"])
    with pytest.raises(ValidationError):
        service.distribute_press_pool(work_date=DAY, extra_bales=3, worker_ids=[])
    with pytest.raises(ValidationError):
        service.distribute_press_pool(work_date=DAY, extra_bales=3, worker_ids=["EMP-404"])


def test_clearing_press_hours_keeps_pooled_record():
    store, service = _services()
    service.distribute_press_pool(work_date=DAY, extra_bales=2, worker_ids=["EMP-003"])
    service.set_press_hours(employee_id="EMP-003", work_date=DAY, hours=1)

    record = service.set_press_hours(employee_id="EMP-003", work_date=DAY, hours=0)

    assert record.amount == Decimal("10")
    assert len(store.state["overtimePressRecords"]) == 1


def test_press_records_for_month():
    _, service = _services()
    service.set_press_hours(employee_id="EMP-002", work_date=DAY, hours=4)
    service.set_press_hours(employee_id="EMP-002", work_date=date(2024, 6, 1), hours=1)

    records = service.press_records_for_month(2024, 5, employee_id="EMP-002")

    assert [r.hours for r in records] == [Decimal("4")]


@pytest.mark.parametrize("hours", ["NaN", "Infinity", "sNaN"])
def test_set_hours_rejects_non_finite_values(hours):
    store, service = _services()

    with pytest.raises(ValidationError):
        service.set_hours(employee_id="EMP-001", work_date=DAY, hours=hours)
    with pytest.raises(ValidationError):
        service.set_press_hours(employee_id="EMP-001", work_date=DAY, hours=hours)

    assert store.state["overtimeRecords"] == []
    assert store.state["overtimePressRecords"] == []


def test_pool_rejects_non_finite_bales():
    _, service = _services()

    with pytest.raises(ValidationError):
        service.distribute_press_pool(work_date=DAY, extra_bales="Infinity", worker_ids=["EMP-001"])
