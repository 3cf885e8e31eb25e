from __future__ import annotations

from decimal import Decimal

from ...core.constants import OVERTIME_HOURLY_RATE
from .base import AnyOvertimeRecord, OvertimePayStrategy


class HourlyStrategy(OvertimePayStrategy):
    """Hours times the fixed overtime rate."""

    def __init__(self, rate: Decimal = OVERTIME_HOURLY_RATE):
        self._rate = rate

    def pay(self, record: AnyOvertimeRecord) -> Decimal:
        return record.hours * self._rate
