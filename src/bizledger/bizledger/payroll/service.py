from __future__ import annotations

import csv
import io
import logging
from dataclasses import replace
from typing import Optional

from ..attendance.service import AttendanceService
from ..common.datetime_utils import month_key, now_local
from ..common.validators import require_choice
from ..core.enums import PaymentMethod
from ..core.exceptions import ValidationError
from ..employees.service import EmployeeService
from ..overtime.service import OvertimeService
from ..state.actions import upsert
from ..state.store import StateStore
from ..sync.serialization import UNDEFINED
from .calculator.accrual_calculator import AccrualPayrollCalculator
from .calculator.base import PayrollCalculator
from .model import SalaryPayment, SalaryRow, salary_payment_id

logger = logging.getLogger(__name__)

ENTITY = "salaryPayments"

REPORT_COLUMNS = (
    "employee_id",
    "full_name",
    "employee_type",
    "basic_salary",
    "allowance",
    "other_exps",
    "total_fixed",
    "payable_days",
    "deductions",
    "ot_hours",
    "ot_amount",
    "advances",
    "net_payable_salary",
    "gratuity_accrued",
    "leave_salary_accrued",
    "paid",
)


class PayrollService:
    def __init__(
        self,
        store: StateStore,
        employees: EmployeeService,
        attendance: AttendanceService,
        overtime: OvertimeService,
        *,
        calculator: Optional[PayrollCalculator] = None,
    ):
        self._store = store
        self._employees = employees
        self._attendance = attendance
        self._overtime = overtime
        self._calculator = calculator or AccrualPayrollCalculator()

    def payments_for_month(self, year: int, month: int) -> dict[str, SalaryPayment]:
        key = month_key(year, month)
        return {
            p["employeeId"]: SalaryPayment.from_document(p)
            for p in self._store.state.get(ENTITY, [])
            if p.get("monthYear") == key
        }

    def build_salary_report(self, year: int, month: int, *, employee_id: Optional[str] = None) -> list[SalaryRow]:
        """Salary rows for every active employee (or one of them)."""

        if not 1 <= month <= 12:
            raise ValidationError("Month must be between 1 and 12")

        employees = self._employees.list_active()
        if employee_id:
            employees = [e for e in employees if e.id == employee_id]

        attendance = self._attendance.records_for_month(year, month)
        overtime = self._overtime.records_for_month(year, month)
        press = self._overtime.press_records_for_month(year, month)
        payments = self.payments_for_month(year, month)

        rows = []
        for e in employees:
            row = self._calculator.salary_row(
                e,
                year=year,
                month=month,
                attendance=[r for r in attendance if r.employee_id == e.id],
                overtime=[r for r in overtime if r.employee_id == e.id],
                press_overtime=[r for r in press if r.employee_id == e.id],
            )
            rows.append(replace(row, payment=payments.get(e.id)))
        return rows

    def record_payment(
        self,
        *,
        employee_id: str,
        year: int,
        month: int,
        method: str,
        bank_id: Optional[str] = None,
    ) -> SalaryPayment:
        """Mark the month's net salary as paid. Paying again overwrites the record."""

        method_enum = require_choice(method, PaymentMethod, "Payment method")
        bank_id = (bank_id or "").strip() or None
        if method_enum == PaymentMethod.BANK:
            if not bank_id:
                raise ValidationError("Select a bank for bank payments")
            if not any(b.get("id") == bank_id for b in self._store.state.get("banks", [])):
                raise ValidationError("Bank does not exist")

        rows = self.build_salary_report(year, month, employee_id=employee_id)
        if not rows:
            raise ValidationError("Employee is not active or does not exist")
        row = rows[0]

        month_year = month_key(year, month)
        doc = {
            "id": salary_payment_id(employee_id, month_year),
            "employeeId": employee_id,
            "monthYear": month_year,
            "paymentDate": now_local().date().isoformat(),
            "paymentMethod": method_enum.value,
            "bankId": bank_id if method_enum == PaymentMethod.BANK else UNDEFINED,
            "amountPaid": float(row.net_payable_salary),
        }
        with self._store.locked() as state:
            exists = any(p.get("id") == doc["id"] for p in state.get(ENTITY, []))
            self._store.dispatch(upsert(ENTITY, doc, exists=exists))
        logger.info("Recorded salary payment %s", doc["id"])
        return SalaryPayment.from_document(doc)

    def report_csv(self, year: int, month: int, *, employee_id: Optional[str] = None) -> bytes:
        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=list(REPORT_COLUMNS))
        writer.writeheader()
        for row in self.build_salary_report(year, month, employee_id=employee_id):
            data = row.to_dict()
            data["paid"] = "Yes" if row.is_paid else "No"
            writer.writerow({k: data[k] for k in REPORT_COLUMNS})
        return out.getvalue().encode("utf-8-sig")
