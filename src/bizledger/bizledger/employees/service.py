from __future__ import annotations

import re
from typing import Iterable, Optional

from ..common.numbers import to_decimal
from ..common.validators import require_choice, require_non_empty
from ..core.enums import EmployeeStatus, EmployeeType
from ..core.exceptions import ValidationError
from ..state.actions import AddEntity, BatchUpdate, DeleteEntity, UpdateEntity
from ..state.store import StateStore
from ..users.model import SessionUser
from ..users.service import require_admin
from .model import Employee

ENTITY = "employees"

TEXT_FIELDS = (
    "fullName",
    "designation",
    "section",
    "nationality",
    "passportNumber",
    "visaExpiryDate",
    "joiningDate",
    "biennialLeaveStatus",
)
NUMBER_FIELDS = (
    "basicSalary",
    "allowance",
    "otherExps",
    "advances",
    "gratuityPaid",
    "leaveSalaryPaid",
)

_ID_PATTERN = re.compile(r"^EMP-(\d+)$")


def generate_employee_id(existing: Iterable[dict]) -> str:
    highest = 0
    for row in existing:
        m = _ID_PATTERN.match(str(row.get("id", "")))
        if m:
            highest = max(highest, int(m.group(1)))
    return f"EMP-{highest + 1:03d}"


def clean_employee_fields(data: dict) -> dict:
    """Whitelist and normalize employee fields coming from forms or CSV rows."""

    out: dict = {}
    for key in TEXT_FIELDS:
        if key in data and data[key] is not None:
            out[key] = str(data[key]).strip()
    for key in NUMBER_FIELDS:
        if key in data and data[key] not in (None, ""):
            try:
                out[key] = float(to_decimal(data[key]))
            except ValueError:
                raise ValidationError(f"{key} must be a number")
    if data.get("employeeType"):
        out["employeeType"] = require_choice(data["employeeType"], EmployeeType, "Employee type").value
    if data.get("status"):
        out["status"] = require_choice(data["status"], EmployeeStatus, "Status").value
    if "onDuty" in data:
        out["onDuty"] = bool(data["onDuty"])
    return out


class EmployeeService:
    def __init__(self, store: StateStore):
        self._store = store

    def _rows(self) -> list[dict]:
        return list(self._store.state.get(ENTITY, []))

    def get(self, employee_id: str) -> Optional[dict]:
        return next((e for e in self._rows() if e.get("id") == employee_id), None)

    def list_employees(
        self,
        *,
        active_only: bool = False,
        section: Optional[str] = None,
        employee_type: Optional[str] = None,
        search: Optional[str] = None,
    ) -> list[dict]:
        rows = self._rows()
        if active_only:
            rows = [e for e in rows if e.get("status") == EmployeeStatus.ACTIVE.value]
        if section:
            rows = [e for e in rows if e.get("section") == section]
        if employee_type:
            rows = [e for e in rows if e.get("employeeType") == employee_type]
        if search:
            term = search.lower()
            rows = [e for e in rows if term in str(e.get("fullName", "")).lower() or term in str(e.get("id", "")).lower()]
        rows.sort(key=lambda e: str(e.get("fullName", "")).lower())
        return rows

    def list_active(self) -> list[Employee]:
        return [Employee.from_document(e) for e in self.list_employees(active_only=True)]

    def create(self, data: dict) -> dict:
        fields = clean_employee_fields(data)
        fields["fullName"] = require_non_empty(fields.get("fullName", ""), "Full name")
        with self._store.locked():
            record = {
                "status": EmployeeStatus.ACTIVE.value,
                "employeeType": EmployeeType.OFFICE.value,
                "onDuty": True,
                "biennialLeaveStatus": "Pending",
                "basicSalary": 0.0,
                "allowance": 0.0,
                "otherExps": 0.0,
                "advances": 0.0,
                **fields,
                "id": generate_employee_id(self._rows()),
            }
            self._store.dispatch(AddEntity(ENTITY, record))
        return record

    def create_many(self, rows: list[dict]) -> list[dict]:
        """Create several employees in one batch (CSV import)."""

        cleaned = []
        for data in rows:
            fields = clean_employee_fields(data)
            fields["fullName"] = require_non_empty(fields.get("fullName", ""), "Full name")
            cleaned.append(fields)

        records: list[dict] = []
        with self._store.locked():
            existing = self._rows()
            for fields in cleaned:
                record = {
                    "status": EmployeeStatus.ACTIVE.value,
                    "employeeType": EmployeeType.OFFICE.value,
                    "onDuty": True,
                    "biennialLeaveStatus": "Pending",
                    **fields,
                    "id": generate_employee_id(existing + records),
                }
                records.append(record)
            if records:
                self._store.dispatch(BatchUpdate(tuple(AddEntity(ENTITY, r) for r in records)))
        return records

    def update(self, employee_id: str, data: dict) -> dict:
        fields = clean_employee_fields(data)
        if "fullName" in fields:
            fields["fullName"] = require_non_empty(fields["fullName"], "Full name")
        with self._store.locked():
            if not self.get(employee_id):
                raise ValidationError("Employee does not exist")
            self._store.dispatch(UpdateEntity(ENTITY, {**fields, "id": employee_id}))
            return self.get(employee_id)

    def delete(self, *, current: SessionUser, employee_id: str) -> None:
        require_admin(current)
        with self._store.locked():
            if not self.get(employee_id):
                raise ValidationError("Employee does not exist")
            self._store.dispatch(DeleteEntity(ENTITY, employee_id))
