from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..common.datetime_utils import parse_iso_date
from ..common.numbers import money
from ..core.enums import EmployeeStatus, EmployeeType


@dataclass(frozen=True)
class Employee:
    """Domain entity: employee master record (read-model over the state document)."""

    id: str
    full_name: str
    employee_type: EmployeeType
    status: EmployeeStatus
    joining_date: Optional[date]
    basic_salary: Decimal
    allowance: Decimal
    other_exps: Decimal
    advances: Decimal
    gratuity_paid: Decimal = Decimal("0")
    leave_salary_paid: Decimal = Decimal("0")
    section: Optional[str] = None
    designation: Optional[str] = None
    visa_expiry_date: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.status == EmployeeStatus.ACTIVE

    @classmethod
    def from_document(cls, doc: dict) -> "Employee":
        joining = doc.get("joiningDate")
        try:
            employee_type = EmployeeType(doc.get("employeeType"))
        except ValueError:
            employee_type = EmployeeType.OFFICE
        try:
            status = EmployeeStatus(doc.get("status"))
        except ValueError:
            status = EmployeeStatus.INACTIVE
        return cls(
            id=str(doc["id"]),
            full_name=str(doc.get("fullName") or ""),
            employee_type=employee_type,
            status=status,
            joining_date=parse_iso_date(joining[:10]) if joining else None,
            basic_salary=money(doc.get("basicSalary")),
            allowance=money(doc.get("allowance")),
            other_exps=money(doc.get("otherExps")),
            advances=money(doc.get("advances")),
            gratuity_paid=money(doc.get("gratuityPaid")),
            leave_salary_paid=money(doc.get("leaveSalaryPaid")),
            section=doc.get("section") or None,
            designation=doc.get("designation") or None,
            visa_expiry_date=doc.get("visaExpiryDate") or None,
        )
