from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..common.datetime_utils import parse_iso_date
from ..common.numbers import money
from ..core.enums import JournalEntryType


@dataclass(frozen=True)
class JournalEntry:
    """One debit or credit line. Lines sharing a voucher id form one voucher."""

    id: str
    voucher_id: str
    date: date
    entry_type: JournalEntryType
    account: str
    debit: Decimal
    credit: Decimal
    description: str = ""
    entity_id: Optional[str] = None
    entity_type: Optional[str] = None
    created_by: Optional[str] = None

    @classmethod
    def from_document(cls, doc: dict) -> "JournalEntry":
        try:
            entry_type = JournalEntryType(doc.get("entryType"))
        except ValueError:
            entry_type = JournalEntryType.JOURNAL
        return cls(
            id=str(doc["id"]),
            voucher_id=str(doc.get("voucherId") or ""),
            date=parse_iso_date(str(doc["date"])[:10]),
            entry_type=entry_type,
            account=str(doc.get("account") or ""),
            debit=money(doc.get("debit")),
            credit=money(doc.get("credit")),
            description=str(doc.get("description") or ""),
            entity_id=doc.get("entityId") or None,
            entity_type=doc.get("entityType") or None,
            created_by=doc.get("createdBy") or None,
        )

    def to_document(self) -> dict:
        doc = {
            "id": self.id,
            "voucherId": self.voucher_id,
            "date": self.date.isoformat(),
            "entryType": self.entry_type.value,
            "account": self.account,
            "debit": float(self.debit),
            "credit": float(self.credit),
            "description": self.description,
            "createdBy": self.created_by,
        }
        if self.entity_id:
            doc["entityId"] = self.entity_id
            doc["entityType"] = self.entity_type
        return doc


@dataclass(frozen=True)
class VoucherImbalance:
    voucher_id: str
    total_debit: Decimal
    total_credit: Decimal

    @property
    def difference(self) -> Decimal:
        return self.total_debit - self.total_credit
