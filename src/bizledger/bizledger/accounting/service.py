"""Double-entry ledger over the journal entries collection.

A voucher is the set of lines sharing a voucher id. Vouchers posted here are
checked to balance (total debits equal total credits) before they are
dispatched; vouchers written by other clients are only reported.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from ..common.numbers import quantize_money, to_decimal
from ..common.validators import require_choice, require_non_empty
from ..core.enums import JournalEntryType
from ..core.exceptions import ValidationError
from ..state.actions import AddEntity, BatchUpdate
from ..state.model import VOUCHER_SERIES
from ..state.store import StateStore
from .model import JournalEntry, VoucherImbalance

logger = logging.getLogger(__name__)

ENTITY = "journalEntries"
_ZERO = Decimal("0")


def _amount(value, field_name: str) -> Decimal:
    try:
        amount = to_decimal(value, _ZERO)
    except ValueError:
        raise ValidationError(f"{field_name} must be a number")
    if amount < 0:
        raise ValidationError(f"{field_name} cannot be negative")
    return quantize_money(amount)


class LedgerService:
    def __init__(self, store: StateStore):
        self._store = store

    def entries(self, *, voucher_id: Optional[str] = None) -> list[JournalEntry]:
        rows = self._store.state.get(ENTITY, [])
        if voucher_id:
            rows = [r for r in rows if r.get("voucherId") == voucher_id]
        return [JournalEntry.from_document(r) for r in rows]

    def next_voucher_id(self, entry_type: str) -> str:
        type_enum = require_choice(entry_type, JournalEntryType, "Entry type")
        prefix, counter = VOUCHER_SERIES[type_enum]
        return f"{prefix}{int(self._store.state.get(counter, 1)):04d}"

    def post_voucher(
        self,
        *,
        entry_type: str,
        entry_date: date,
        lines: Sequence[dict],
        created_by: Optional[str] = None,
        description: str = "",
    ) -> list[JournalEntry]:
        """Post a balanced voucher under the next id of its series.

        Each line is `{"account", "debit" | "credit", "description"?,
        "entityId"?, "entityType"?}` with exactly one positive side.
        """

        type_enum = require_choice(entry_type, JournalEntryType, "Entry type")
        if len(lines) < 2:
            raise ValidationError("A voucher needs at least two lines")

        with self._store.locked():
            voucher_id = self.next_voucher_id(type_enum.value)
            entries = []
            total_debit = total_credit = _ZERO
            for index, line in enumerate(lines, start=1):
                account = require_non_empty(str(line.get("account") or ""), f"Line {index} account")
                debit = _amount(line.get("debit"), f"Line {index} debit")
                credit = _amount(line.get("credit"), f"Line {index} credit")
                if (debit > 0) == (credit > 0):
                    raise ValidationError(f"Line {index} must have either a debit or a credit amount")
                total_debit += debit
                total_credit += credit
                entries.append(
                    JournalEntry(
                        id=f"je-{voucher_id}-{index}",
                        voucher_id=voucher_id,
                        date=entry_date,
                        entry_type=type_enum,
                        account=account,
                        debit=debit,
                        credit=credit,
                        description=str(line.get("description") or description),
                        entity_id=line.get("entityId") or None,
                        entity_type=line.get("entityType") or None,
                        created_by=created_by,
                    )
                )

            if total_debit != total_credit:
                raise ValidationError(f"Voucher is not balanced: debits {total_debit} != credits {total_credit}")
            self._store.dispatch(BatchUpdate(tuple(AddEntity(ENTITY, e.to_document()) for e in entries)))
        logger.info("Posted voucher %s", voucher_id)
        return entries

    def unbalanced_vouchers(self) -> list[VoucherImbalance]:
        totals: dict[str, list[Decimal]] = defaultdict(lambda: [_ZERO, _ZERO])
        for e in self.entries():
            totals[e.voucher_id][0] += e.debit
            totals[e.voucher_id][1] += e.credit
        return [
            VoucherImbalance(voucher_id=v, total_debit=quantize_money(d), total_credit=quantize_money(c))
            for v, (d, c) in sorted(totals.items())
            if quantize_money(d) != quantize_money(c)
        ]

    def account_balances(self, *, as_of: Optional[date] = None) -> dict[str, Decimal]:
        """Debit-positive balance per account."""

        balances: dict[str, Decimal] = defaultdict(lambda: _ZERO)
        for e in self.entries():
            if as_of is not None and e.date > as_of:
                continue
            balances[e.account] += e.debit - e.credit
        return {account: quantize_money(amount) for account, amount in sorted(balances.items())}
