"""Monthly salary and end-of-service accruals.

Rules:

* years of service = days from joining to the last day of the month / 365.25
  (never negative);
* Labour gratuity accrues a flat 600 per year of service;
* other employees accrue 21 days' wage per year up to 5 years and 30 days'
  wage per year (over the whole tenure) beyond that, nothing before 1 year;
  the daily wage is basic / 30;
* leave salary accrues 600 per year for everybody;
* each Absent day and half of each HalfDay is deducted at basic / 30;
* overtime is paid per record (see `OvertimePayStrategyFactory`);
* net = basic + allowance + other expenses + overtime - deductions - advances.

Arithmetic is done in `Decimal`; row amounts are rounded half-up to cents.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from ...attendance.model import AttendanceRecord
from ...common.datetime_utils import days_in_month, last_day_of_month
from ...common.numbers import quantize_money
from ...core.constants import (
    DAYS_PER_YEAR,
    GRATUITY_LONG_TENURE_DAYS,
    GRATUITY_MIN_YEARS,
    GRATUITY_SHORT_TENURE_DAYS,
    GRATUITY_SHORT_TENURE_YEARS,
    HALF_DAY_WEIGHT,
    LABOUR_GRATUITY_PER_YEAR,
    LEAVE_SALARY_PER_YEAR,
    WAGE_DAYS_PER_MONTH,
)
from ...core.enums import AttendanceStatus, EmployeeType
from ...employees.model import Employee
from ...overtime.factory import OvertimePayStrategyFactory
from ...overtime.model import OvertimePressRecord, OvertimeRecord
from ..model import SalaryRow
from .base import PayrollCalculator

_ZERO = Decimal("0")


def daily_wage(basic_salary: Decimal) -> Decimal:
    return basic_salary / WAGE_DAYS_PER_MONTH


def years_of_service(joining_date: Optional[date], end_date: date) -> Decimal:
    if joining_date is None:
        return _ZERO
    days = (end_date - joining_date).days
    return max(_ZERO, Decimal(days) / DAYS_PER_YEAR)


def gratuity_accrued(employee_type: EmployeeType, basic_salary: Decimal, years: Decimal) -> Decimal:
    if employee_type == EmployeeType.LABOUR:
        return years * LABOUR_GRATUITY_PER_YEAR
    if years < GRATUITY_MIN_YEARS:
        return _ZERO
    days_per_year = GRATUITY_SHORT_TENURE_DAYS if years <= GRATUITY_SHORT_TENURE_YEARS else GRATUITY_LONG_TENURE_DAYS
    return daily_wage(basic_salary) * days_per_year * years


def leave_salary_accrued(years: Decimal) -> Decimal:
    return years * LEAVE_SALARY_PER_YEAR


def unpaid_days(attendance: Sequence[AttendanceRecord]) -> Decimal:
    absent = sum(1 for r in attendance if r.status == AttendanceStatus.ABSENT)
    half = sum(1 for r in attendance if r.status == AttendanceStatus.HALF_DAY)
    return Decimal(absent) + Decimal(half) * HALF_DAY_WEIGHT


def unpaid_day_deduction(days: Decimal, basic_salary: Decimal) -> Decimal:
    return days * daily_wage(basic_salary)


class AccrualPayrollCalculator(PayrollCalculator):
    def __init__(self, overtime_pay: Optional[OvertimePayStrategyFactory] = None):
        self._overtime_pay = overtime_pay or OvertimePayStrategyFactory()

    def overtime_pay(
        self, overtime: Sequence[OvertimeRecord], press_overtime: Sequence[OvertimePressRecord]
    ) -> Decimal:
        total = _ZERO
        for record in list(overtime) + list(press_overtime):
            total += self._overtime_pay.for_record(record).pay(record)
        return total

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
        years = years_of_service(employee.joining_date, last_day_of_month(year, month))
        gratuity = gratuity_accrued(employee.employee_type, employee.basic_salary, years)
        leave = leave_salary_accrued(years)

        unpaid = unpaid_days(attendance)
        deductions = unpaid_day_deduction(unpaid, employee.basic_salary)

        ot_amount = self.overtime_pay(overtime, press_overtime)
        ot_hours = sum((r.hours for r in overtime), _ZERO) + sum((r.hours for r in press_overtime), _ZERO)

        net = (
            employee.basic_salary
            + employee.allowance
            + employee.other_exps
            + ot_amount
            - deductions
            - employee.advances
        )

        return SalaryRow(
            employee_id=employee.id,
            full_name=employee.full_name,
            employee_type=employee.employee_type,
            basic_salary=employee.basic_salary,
            allowance=employee.allowance,
            other_exps=employee.other_exps,
            years_of_service=quantize_money(years),
            payable_days=Decimal(days_in_month(year, month)) - unpaid,
            unpaid_days=unpaid,
            deductions=quantize_money(deductions),
            ot_hours=ot_hours,
            ot_amount=quantize_money(ot_amount),
            advances=employee.advances,
            net_payable_salary=quantize_money(net),
            gratuity_accrued=quantize_money(gratuity),
            leave_salary_accrued=quantize_money(leave),
            gratuity_balance=quantize_money(gratuity - employee.gratuity_paid),
            leave_salary_balance=quantize_money(leave - employee.leave_salary_paid),
        )
