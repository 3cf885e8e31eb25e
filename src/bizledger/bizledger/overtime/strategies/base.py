from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Union

from ..model import OvertimePressRecord, OvertimeRecord

AnyOvertimeRecord = Union[OvertimeRecord, OvertimePressRecord]


class OvertimePayStrategy(ABC):
    """Strategy Pattern: encapsulate how one overtime record is paid."""

    @abstractmethod
    def pay(self, record: AnyOvertimeRecord) -> Decimal:
        raise NotImplementedError
