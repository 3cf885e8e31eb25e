"""Storage-safe serialization of the aggregate.

Firestore rejects values it cannot encode, so before a write every
`UNDEFINED` placeholder becomes `None`, `Decimal` becomes `float`, dates become
ISO strings and tuples become lists.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any


class _Undefined:
    """Placeholder for a field that was never set (e.g. bank id on a cash payment)."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False


UNDEFINED = _Undefined()


def to_storage(value: Any) -> Any:
    if value is UNDEFINED or value is None:
        return None
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, bool):
        return value
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(k): to_storage(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_storage(v) for v in value]
    return value
