import csv
import io
from datetime import date, datetime
from decimal import Decimal

import pytest

from src.bizledger.bizledger.attendance.service import AttendanceService
from src.bizledger.bizledger.core.enums import PaymentMethod
from src.bizledger.bizledger.core.exceptions import ValidationError
from src.bizledger.bizledger.employees.service import EmployeeService
from src.bizledger.bizledger.overtime.service import OvertimeService
from src.bizledger.bizledger.payroll import service as payroll_module
from src.bizledger.bizledger.payroll.service import PayrollService
from src.bizledger.bizledger.state.actions import AddEntity
from src.bizledger.bizledger.state.store import StateStore


def _setup():
    store = StateStore()
    employees = EmployeeService(store)
    employees.create(
        {"fullName": "Ali", "employeeType": "Office", "joiningDate": "2015-01-01", "basicSalary": 3000, "allowance": 300}
    )
    employees.create({"fullName": "Gone", "status": "Inactive", "basicSalary": 9999})
    attendance = AttendanceService(store, employees)
    overtime = OvertimeService(store, employees)
    payroll = PayrollService(store, employees, attendance, overtime)
    return store, attendance, overtime, payroll


def test_report_covers_active_employees_with_their_month_records():
    _, attendance, overtime, payroll = _setup()
    attendance.mark(employee_id="EMP-001", work_date=date(2024, 6, 3), status="Absent", reason="x")
    attendance.mark(employee_id="EMP-001", work_date=date(2024, 5, 3), status="Absent", reason="x")
    overtime.set_hours(employee_id="EMP-001", work_date=date(2024, 6, 4), hours=2)

    rows = payroll.build_salary_report(2024, 6)

    assert [r.employee_id for r in rows] == ["EMP-001"]
    row = rows[0]
    assert row.deductions == Decimal("100.00")
    assert row.ot_amount == Decimal("14.00")
    assert row.net_payable_salary == Decimal("3214.00")
    assert row.payment is None


def test_report_rejects_invalid_month():
    *_, payroll = _setup()

    with pytest.raises(ValidationError):
        payroll.build_salary_report(2024, 13)


def test_record_cash_payment_then_overwrite_with_bank(monkeypatch):
    store, _, _, payroll = _setup()
    store.dispatch(AddEntity("banks", {"id": "BNK-1", "accountTitle": "Main"}))
    monkeypatch.setattr(payroll_module, "now_local", lambda: datetime(2024, 7, 1, 9, 0))

    payment = payroll.record_payment(employee_id="EMP-001", year=2024, month=6, method="Cash")

    assert payment.id == "SP-EMP-001-2024-06"
    assert payment.amount_paid == Decimal("3300")
    assert payment.bank_id is None
    assert payment.payment_date == date(2024, 7, 1)

    payroll.record_payment(employee_id="EMP-001", year=2024, month=6, method="Bank", bank_id="BNK-1")

    stored = store.state["salaryPayments"]
    assert len(stored) == 1
    assert stored[0]["paymentMethod"] == "Bank"
    assert stored[0]["bankId"] == "BNK-1"
    row = payroll.build_salary_report(2024, 6)[0]
    assert row.payment.payment_method == PaymentMethod.BANK


def test_bank_payment_requires_known_bank():
    *_, payroll = _setup()

    with pytest.raises(ValidationError):
        payroll.record_payment(employee_id="EMP-001", year=2024, month=6, method="Bank")
    with pytest.raises(ValidationError):
        payroll.record_payment(employee_id="EMP-001", year=2024, month=6, method="Bank", bank_id="BNK-404")


def test_payment_for_inactive_employee_is_rejected():
    *_, payroll = _setup()

    with pytest.raises(ValidationError):
        payroll.record_payment(employee_id="EMP-002", year=2024, month=6, method="Cash")


def test_report_csv_has_one_line_per_employee():
    *_, payroll = _setup()

    data = payroll.report_csv(2024, 6)

    rows = list(csv.DictReader(io.StringIO(data.decode("utf-8-sig"))))
    assert len(rows) == 1
    assert rows[0]["employee_id"] == "EMP-001"
    assert rows[0]["net_payable_salary"] == "3300.00"
    assert rows[0]["paid"] == "No"
