from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..common.datetime_utils import parse_iso_date
from ..core.enums import AttendanceStatus


def attendance_id(employee_id: str, work_date: date) -> str:
    return f"ATT-{employee_id}-{work_date.isoformat()}"


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: an attendance exception. Days without a record are Present."""

    id: str
    employee_id: str
    date: date
    status: AttendanceStatus
    reason: Optional[str] = None

    @classmethod
    def from_document(cls, doc: dict) -> "AttendanceRecord":
        return cls(
            id=str(doc["id"]),
            employee_id=str(doc["employeeId"]),
            date=parse_iso_date(str(doc["date"])[:10]),
            status=AttendanceStatus(doc["status"]),
            reason=doc.get("reason") or None,
        )

    def to_document(self) -> dict:
        return {
            "id": self.id,
            "employeeId": self.employee_id,
            "date": self.date.isoformat(),
            "status": self.status.value,
            "reason": self.reason or "",
        }
