from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from ...attendance.model import AttendanceRecord
from ...employees.model import Employee
from ...overtime.model import OvertimePressRecord, OvertimeRecord
from ..model import SalaryRow


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll).

    Implementations are pure: the caller passes the employee's records for the
    month and gets a row back.
    """

    @abstractmethod
    def salary_row(
        self,
        employee: Employee,
        *,
        year: int,
        month: int,
        attendance: Sequence[AttendanceRecord],
        overtime: Sequence[OvertimeRecord],
        press_overtime: Sequence[OvertimePressRecord],
    ) -> SalaryRow:
        raise NotImplementedError
