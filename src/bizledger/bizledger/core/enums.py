from __future__ import annotations

from enum import Enum


class EmployeeType(str, Enum):
    OFFICE = "Office"
    LABOUR = "Labour"


class EmployeeStatus(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"


class AttendanceStatus(str, Enum):
    """Exception statuses stored in the register. No record means present."""

    PRESENT = "Present"
    ABSENT = "Absent"
    HALF_DAY = "HalfDay"
    PAID_LEAVE = "PaidLeave"
    SICK_LEAVE = "SickLeave"
    HOLIDAY = "Holiday"


class PaymentMethod(str, Enum):
    CASH = "Cash"
    BANK = "Bank"


class JournalEntryType(str, Enum):
    RECEIPT = "Receipt"
    PAYMENT = "Payment"
    EXPENSE = "Expense"
    JOURNAL = "Journal"


class SaveStatus(str, Enum):
    """Coarse remote-write status exposed to clients."""

    SYNCED = "synced"
    SAVING = "saving"
    ERROR = "error"


class PlannerEntityType(str, Enum):
    CUSTOMER = "customer"
    SUPPLIER = "supplier"
    EXPENSE_ACCOUNT = "expenseAccount"
