from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from ..common.datetime_utils import month_key
from ..common.numbers import money, quantize_money, to_decimal
from ..common.validators import require_positive
from ..core.constants import DEFAULT_PRESS_RATE_PER_EXTRA
from ..core.exceptions import ValidationError
from ..employees.service import EmployeeService
from ..state.actions import AddEntity, BatchUpdate, DeleteEntity, UpdateEntity, upsert
from ..state.store import StateStore
from .model import OvertimePressRecord, OvertimeRecord, overtime_id, press_overtime_id

logger = logging.getLogger(__name__)

REGULAR_ENTITY = "overtimeRecords"
PRESS_ENTITY = "overtimePressRecords"


def _parse_hours(hours) -> Decimal:
    try:
        value = to_decimal(hours, Decimal("0"))
    except ValueError:
        raise ValidationError("Hours must be a number")
    if value < 0:
        raise ValidationError("Hours cannot be negative")
    return value


class OvertimeService:
    """Regular and press overtime registers."""

    def __init__(self, store: StateStore, employees: EmployeeService):
        self._store = store
        self._employees = employees

    def _find(self, entity: str, record_id: str) -> Optional[dict]:
        return next((r for r in self._store.state.get(entity, []) if r.get("id") == record_id), None)

    def _month_docs(self, entity: str, year: int, month: int, employee_id: Optional[str]) -> list[dict]:
        prefix = month_key(year, month)
        return [
            doc
            for doc in self._store.state.get(entity, [])
            if str(doc.get("date", "")).startswith(prefix) and (not employee_id or doc.get("employeeId") == employee_id)
        ]

    def records_for_month(self, year: int, month: int, *, employee_id: Optional[str] = None) -> list[OvertimeRecord]:
        return [OvertimeRecord.from_document(d) for d in self._month_docs(REGULAR_ENTITY, year, month, employee_id)]

    def press_records_for_month(
        self, year: int, month: int, *, employee_id: Optional[str] = None
    ) -> list[OvertimePressRecord]:
        return [OvertimePressRecord.from_document(d) for d in self._month_docs(PRESS_ENTITY, year, month, employee_id)]

    def set_hours(self, *, employee_id: str, work_date: date, hours) -> Optional[OvertimeRecord]:
        """Set regular overtime hours for one cell; zero or blank clears it."""

        if not self._employees.get(employee_id):
            raise ValidationError("Employee does not exist")
        value = _parse_hours(hours)
        record_id = overtime_id(employee_id, work_date)

        with self._store.locked():
            existing = self._find(REGULAR_ENTITY, record_id)
            if value == 0:
                if existing is not None:
                    self._store.dispatch(DeleteEntity(REGULAR_ENTITY, record_id))
                return None

            doc = {"id": record_id, "employeeId": employee_id, "date": work_date.isoformat(), "hours": float(value)}
            self._store.dispatch(upsert(REGULAR_ENTITY, doc, exists=existing is not None))
        return OvertimeRecord.from_document(doc)

    def set_press_hours(self, *, employee_id: str, work_date: date, hours) -> Optional[OvertimePressRecord]:
        """Set press overtime hours for one cell.

        Clearing the hours keeps a record that still carries a pooled amount.
        """

        if not self._employees.get(employee_id):
            raise ValidationError("Employee does not exist")
        value = _parse_hours(hours)
        record_id = press_overtime_id(employee_id, work_date)

        with self._store.locked():
            existing = self._find(PRESS_ENTITY, record_id)
            if value == 0 and (existing is None or not existing.get("amount")):
                if existing is not None:
                    self._store.dispatch(DeleteEntity(PRESS_ENTITY, record_id))
                return None

            doc = {"id": record_id, "employeeId": employee_id, "date": work_date.isoformat(), "hours": float(value)}
            self._store.dispatch(upsert(PRESS_ENTITY, doc, exists=existing is not None))
            return OvertimePressRecord.from_document(self._find(PRESS_ENTITY, record_id))

    def distribute_press_pool(
        self,
        *,
        work_date: date,
        extra_bales,
        worker_ids: Sequence[str],
        rate_per_extra=DEFAULT_PRESS_RATE_PER_EXTRA,
    ) -> Decimal:
        """Split `extra_bales * rate_per_extra` equally among the workers.

        Each share is added to the worker's press record for the day (hours are
        kept). All records change in a single batch. Returns the share.
        """

        extra = require_positive(extra_bales, "Extra bales")
        rate = require_positive(rate_per_extra, "Rate per extra bale")
        workers = list(dict.fromkeys(w for w in worker_ids if w))
        if not workers:
            raise ValidationError("Select at least one worker")
        for worker in workers:
            if not self._employees.get(worker):
                raise ValidationError(f"Employee {worker} does not exist")

        share = quantize_money(extra * rate / Decimal(len(workers)))
        with self._store.locked():
            actions = []
            for worker in workers:
                record_id = press_overtime_id(worker, work_date)
                existing = self._find(PRESS_ENTITY, record_id)
                if existing is None:
                    actions.append(
                        AddEntity(
                            PRESS_ENTITY,
                            {
                                "id": record_id,
                                "employeeId": worker,
                                "date": work_date.isoformat(),
                                "hours": 0.0,
                                "amount": float(share),
                            },
                        )
                    )
                else:
                    total = money(existing.get("amount")) + share
                    actions.append(UpdateEntity(PRESS_ENTITY, {"id": record_id, "amount": float(total)}))

            self._store.dispatch(BatchUpdate(tuple(actions)))
        logger.info("Distributed press pool of %s among %d workers", extra * rate, len(workers))
        return share
