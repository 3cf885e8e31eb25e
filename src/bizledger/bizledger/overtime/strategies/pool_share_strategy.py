from __future__ import annotations

from decimal import Decimal

from .base import AnyOvertimeRecord, OvertimePayStrategy


class PoolShareStrategy(OvertimePayStrategy):
    """The pre-computed share of a press team pool; hours are not paid on top."""

    def pay(self, record: AnyOvertimeRecord) -> Decimal:
        return getattr(record, "amount", None) or Decimal("0")
