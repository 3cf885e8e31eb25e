from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..common.datetime_utils import parse_iso_date
from ..common.numbers import money
from ..core.enums import EmployeeType, PaymentMethod


def salary_payment_id(employee_id: str, month_year: str) -> str:
    return f"SP-{employee_id}-{month_year}"


@dataclass(frozen=True)
class SalaryPayment:
    id: str
    employee_id: str
    month_year: str
    payment_date: date
    payment_method: PaymentMethod
    amount_paid: Decimal
    bank_id: Optional[str] = None

    @classmethod
    def from_document(cls, doc: dict) -> "SalaryPayment":
        return cls(
            id=str(doc["id"]),
            employee_id=str(doc["employeeId"]),
            month_year=str(doc["monthYear"]),
            payment_date=parse_iso_date(str(doc["paymentDate"])[:10]),
            payment_method=PaymentMethod(doc["paymentMethod"]),
            amount_paid=money(doc.get("amountPaid")),
            bank_id=doc.get("bankId") or None,
        )


@dataclass(frozen=True)
class SalaryRow:
    """One employee's payable salary for a month. Amounts are rounded to cents."""

    employee_id: str
    full_name: str
    employee_type: EmployeeType
    basic_salary: Decimal
    allowance: Decimal
    other_exps: Decimal
    years_of_service: Decimal
    payable_days: Decimal
    unpaid_days: Decimal
    deductions: Decimal
    ot_hours: Decimal
    ot_amount: Decimal
    advances: Decimal
    net_payable_salary: Decimal
    gratuity_accrued: Decimal
    leave_salary_accrued: Decimal
    gratuity_balance: Decimal
    leave_salary_balance: Decimal
    payment: Optional[SalaryPayment] = None

    @property
    def total_fixed(self) -> Decimal:
        return self.basic_salary + self.allowance + self.other_exps

    @property
    def is_paid(self) -> bool:
        return self.payment is not None

    def to_dict(self) -> dict:
        out = asdict(self)
        out["employee_type"] = self.employee_type.value
        out["total_fixed"] = self.total_fixed
        if self.payment is not None:
            out["payment"]["payment_method"] = self.payment.payment_method.value
        return out
