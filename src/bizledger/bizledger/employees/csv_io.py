"""Employee CSV template import/export.

The template has fixed columns (see `EMPLOYEE_COLUMNS`); the header row is
optional on import. Quoted cells may contain commas and line breaks. Numeric
cells are sanitized (currency symbols, thousands separators) before parsing.
"""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass, field
from typing import Iterable

from ..common.numbers import sanitize_numeric
from .service import NUMBER_FIELDS

# (header label, document key)
EMPLOYEE_COLUMNS = (
    ("Full Name", "fullName"),
    ("Employee Type", "employeeType"),
    ("Designation", "designation"),
    ("Section", "section"),
    ("Nationality", "nationality"),
    ("Passport Number", "passportNumber"),
    ("Joining Date", "joiningDate"),
    ("Visa Expiry Date", "visaExpiryDate"),
    ("Basic Salary", "basicSalary"),
    ("Allowance", "allowance"),
    ("Other Expenses", "otherExps"),
    ("Advances", "advances"),
    ("Status", "status"),
)


@dataclass
class ImportResult:
    rows: list[dict] = field(default_factory=list)
    skipped: list[tuple[int, str]] = field(default_factory=list)


def parse_employee_csv(text: str) -> ImportResult:
    result = ImportResult()
    reader = csv.reader(io.StringIO(text.lstrip("\ufeff"), newline=""))

    for index, cells in enumerate(reader, start=1):
        if not any(c.strip() for c in cells):
            continue
        if index == 1 and cells[0].strip().lower() == EMPLOYEE_COLUMNS[0][0].lower():
            continue

        row: dict = {}
        for (_, key), raw in zip(EMPLOYEE_COLUMNS, cells):
            raw = raw.strip()
            if key in NUMBER_FIELDS:
                row[key] = float(sanitize_numeric(raw))
            elif raw:
                row[key] = raw

        if not row.get("fullName"):
            result.skipped.append((reader.line_num, "missing full name"))
            continue
        result.rows.append(row)

    return result


def employees_to_csv(employees: Iterable[dict]) -> bytes:
    out = io.StringIO()
    writer = csv.writer(out)
    # The id goes last so an exported file is itself a valid import template.
    writer.writerow([label for label, _ in EMPLOYEE_COLUMNS] + ["Employee ID"])
    for e in employees:
        writer.writerow(["" if e.get(key) is None else e.get(key) for _, key in EMPLOYEE_COLUMNS] + [e.get("id", "")])
    return out.getvalue().encode("utf-8-sig")
