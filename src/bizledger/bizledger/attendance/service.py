from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from ..common.datetime_utils import iter_month_days, month_key
from ..common.validators import require_choice
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from ..employees.service import EmployeeService
from ..state.actions import DeleteEntity, upsert
from ..state.store import StateStore
from .model import AttendanceRecord, attendance_id

logger = logging.getLogger(__name__)

ENTITY = "attendanceRecords"

# Grid codes; Present is the implicit default.
STATUS_CODES = {
    AttendanceStatus.ABSENT: "A",
    AttendanceStatus.HALF_DAY: "HD",
    AttendanceStatus.PAID_LEAVE: "PL",
    AttendanceStatus.SICK_LEAVE: "SL",
    AttendanceStatus.HOLIDAY: "H",
}
PRESENT_CODE = "P"


class AttendanceService:
    def __init__(self, store: StateStore, employees: EmployeeService):
        self._store = store
        self._employees = employees

    def _find(self, record_id: str) -> Optional[dict]:
        return next((r for r in self._store.state.get(ENTITY, []) if r.get("id") == record_id), None)

    def records_for_month(self, year: int, month: int, *, employee_id: Optional[str] = None) -> list[AttendanceRecord]:
        prefix = month_key(year, month)
        out = []
        for doc in self._store.state.get(ENTITY, []):
            if not str(doc.get("date", "")).startswith(prefix):
                continue
            if employee_id and doc.get("employeeId") != employee_id:
                continue
            try:
                out.append(AttendanceRecord.from_document(doc))
            except (KeyError, TypeError, ValueError):
                logger.warning("Skipping malformed attendance record", extra={"record_id": doc.get("id")})
        return out

    def mark(self, *, employee_id: str, work_date: date, status: str, reason: str = "") -> Optional[AttendanceRecord]:
        """Record an exception for one register cell, or reset it to Present.

        Returns the stored record, or None when the cell is Present.
        """

        if not self._employees.get(employee_id):
            raise ValidationError("Employee does not exist")
        status_enum = require_choice(status, AttendanceStatus, "Status")
        if status_enum == AttendanceStatus.PRESENT:
            self.reset_to_present(employee_id=employee_id, work_date=work_date)
            return None

        reason = (reason or "").strip()
        if not reason:
            raise ValidationError("A reason is required for marking an exception (Absent, Leave, etc.).")

        record = AttendanceRecord(
            id=attendance_id(employee_id, work_date),
            employee_id=employee_id,
            date=work_date,
            status=status_enum,
            reason=reason,
        )
        with self._store.locked():
            exists = self._find(record.id) is not None
            self._store.dispatch(upsert(ENTITY, record.to_document(), exists=exists))
        return record

    def reset_to_present(self, *, employee_id: str, work_date: date) -> bool:
        record_id = attendance_id(employee_id, work_date)
        with self._store.locked():
            if self._find(record_id) is None:
                return False
            self._store.dispatch(DeleteEntity(ENTITY, record_id))
        return True

    def register_grid(self, year: int, month: int, *, employee_id: Optional[str] = None) -> list[dict]:
        """Employee x day matrix of status codes for the month."""

        by_key = {(r.employee_id, r.date): r for r in self.records_for_month(year, month)}
        days = list(iter_month_days(year, month))

        employees = self._employees.list_employees(active_only=True)
        if employee_id:
            employees = [e for e in employees if e.get("id") == employee_id]

        grid = []
        for e in employees:
            cells = {}
            for d in days:
                r = by_key.get((e["id"], d))
                cells[d.day] = STATUS_CODES.get(r.status, PRESENT_CODE) if r else PRESENT_CODE
            grid.append({"employee_id": e["id"], "full_name": e.get("fullName", ""), "days": cells})
        return grid
