from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..common.datetime_utils import parse_iso_date
from ..common.numbers import money


def overtime_id(employee_id: str, work_date: date) -> str:
    return f"OT-{employee_id}-{work_date.isoformat()}"


def press_overtime_id(employee_id: str, work_date: date) -> str:
    return f"OTP-{employee_id}-{work_date.isoformat()}"


@dataclass(frozen=True)
class OvertimeRecord:
    """Regular hourly overtime for one employee and day."""

    id: str
    employee_id: str
    date: date
    hours: Decimal

    @classmethod
    def from_document(cls, doc: dict) -> "OvertimeRecord":
        return cls(
            id=str(doc["id"]),
            employee_id=str(doc["employeeId"]),
            date=parse_iso_date(str(doc["date"])[:10]),
            hours=money(doc.get("hours")),
        )


@dataclass(frozen=True)
class OvertimePressRecord:
    """Press overtime: either hourly, or a share of a team bonus pool (`amount`)."""

    id: str
    employee_id: str
    date: date
    hours: Decimal
    amount: Optional[Decimal] = None

    @classmethod
    def from_document(cls, doc: dict) -> "OvertimePressRecord":
        amount = doc.get("amount")
        return cls(
            id=str(doc["id"]),
            employee_id=str(doc["employeeId"]),
            date=parse_iso_date(str(doc["date"])[:10]),
            hours=money(doc.get("hours")),
            amount=None if amount is None else money(amount),
        )
