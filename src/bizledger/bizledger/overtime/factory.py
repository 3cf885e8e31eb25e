from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from ..core.constants import OVERTIME_HOURLY_RATE
from .model import OvertimePressRecord
from .strategies.base import AnyOvertimeRecord, OvertimePayStrategy
from .strategies.hourly_strategy import HourlyStrategy
from .strategies.pool_share_strategy import PoolShareStrategy


@dataclass
class OvertimePayStrategyFactory:
    """Factory Pattern: choose how a record is paid.

    Press records carrying a positive pooled amount are paid that amount;
    everything else is paid by the hour.
    """

    hourly_rate: Decimal = OVERTIME_HOURLY_RATE
    _hourly: HourlyStrategy = field(init=False)
    _pool: PoolShareStrategy = field(init=False)

    def __post_init__(self) -> None:
        self._hourly = HourlyStrategy(self.hourly_rate)
        self._pool = PoolShareStrategy()

    def for_record(self, record: AnyOvertimeRecord) -> OvertimePayStrategy:
        if isinstance(record, OvertimePressRecord) and record.amount is not None and record.amount > 0:
            return self._pool
        return self._hourly
