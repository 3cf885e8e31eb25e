import threading
import time
from datetime import date
from decimal import Decimal

import pytest

from src.bizledger.bizledger.accounting.service import LedgerService
from src.bizledger.bizledger.core.exceptions import ValidationError
from src.bizledger.bizledger.state.actions import AddEntity
from src.bizledger.bizledger.state.store import StateStore

DAY = date(2024, 3, 1)


def test_post_balanced_voucher_uses_series_counter():
    store = StateStore()
    ledger = LedgerService(store)

    assert ledger.next_voucher_id("Receipt") == "RV-0001"
    entries = ledger.post_voucher(
        entry_type="Receipt",
        entry_date=DAY,
        lines=[
            {"account": "CASH-001", "debit": "150.10"},
            {"account": "AR-001", "credit": 100},
            {"account": "REV-001", "credit": "50.10"},
        ],
        created_by="Admin",
    )

    assert [e.id for e in entries] == ["je-RV-0001-1", "je-RV-0001-2", "je-RV-0001-3"]
    assert {e.voucher_id for e in entries} == {"RV-0001"}
    assert store.state["nextReceiptVoucherNumber"] == 2
    assert ledger.next_voucher_id("Receipt") == "RV-0002"
    assert ledger.next_voucher_id("Payment") == "PV-0001"


def test_unbalanced_voucher_is_rejected_and_nothing_is_written():
    store = StateStore()
    ledger = LedgerService(store)

    with pytest.raises(ValidationError):
        ledger.post_voucher(
            entry_type="Journal",
            entry_date=DAY,
            lines=[{"account": "A", "debit": 100}, {"account": "B", "credit": 99.99}],
        )

    assert store.state["journalEntries"] == []
    assert store.state["nextJournalVoucherNumber"] == 1


def test_lines_need_exactly_one_side_and_two_lines():
    ledger = LedgerService(StateStore())

    with pytest.raises(ValidationError):
        ledger.post_voucher(entry_type="Journal", entry_date=DAY, lines=[{"account": "A", "debit": 1}])
    with pytest.raises(ValidationError):
        ledger.post_voucher(
            entry_type="Journal",
            entry_date=DAY,
            lines=[{"account": "A", "debit": 1, "credit": 1}, {"account": "B", "credit": 0}],
        )
    with pytest.raises(ValidationError):
        ledger.post_voucher(
            entry_type="Journal", entry_date=DAY, lines=[{"account": "A", "debit": -5}, {"account": "B", "credit": -5}]
        )


def test_float_amounts_balance_in_decimal():
    ledger = LedgerService(StateStore())

    entries = ledger.post_voucher(
        entry_type="Expense",
        entry_date=DAY,
        lines=[
            {"account": "EXP-001", "debit": 0.1},
            {"account": "EXP-002", "debit": 0.2},
            {"account": "CASH-001", "credit": 0.3},
        ],
    )

    assert entries[0].voucher_id == "EV-0001"


def test_unbalanced_vouchers_and_balances_report_stored_entries():
    store = StateStore()
    ledger = LedgerService(store)
    ledger.post_voucher(
        entry_type="Payment",
        entry_date=DAY,
        lines=[{"account": "AP-001", "debit": 80}, {"account": "CASH-001", "credit": 80}],
    )
    # Written by another client without a balance check.
    store.dispatch(
        AddEntity(
            "journalEntries",
            {"id": "je-x", "voucherId": "JV-0009", "date": "2024-04-01", "entryType": "Journal",
             "account": "CASH-001", "debit": 10, "credit": 0},
        )
    )

    [imbalance] = ledger.unbalanced_vouchers()
    assert imbalance.voucher_id == "JV-0009"
    assert imbalance.difference == Decimal("10.00")

    assert ledger.account_balances() == {"AP-001": Decimal("80.00"), "CASH-001": Decimal("-70.00")}
    assert ledger.account_balances(as_of=DAY) == {"AP-001": Decimal("80.00"), "CASH-001": Decimal("-80.00")}


@pytest.mark.parametrize("amount", ["NaN", "Infinity", "-Infinity", "sNaN"])
def test_non_finite_amounts_are_rejected(amount):
    store = StateStore()
    ledger = LedgerService(store)

    with pytest.raises(ValidationError):
        ledger.post_voucher(
            entry_type="Journal",
            entry_date=DAY,
            lines=[{"account": "A", "debit": amount}, {"account": "B", "credit": 10}],
        )

    assert store.state["journalEntries"] == []


def test_concurrent_posts_get_distinct_voucher_ids(monkeypatch):
    store = StateStore()
    ledger = LedgerService(store)
    original = LedgerService.next_voucher_id

    def slow_next_voucher_id(self, entry_type):
        voucher_id = original(self, entry_type)
        time.sleep(0.05)
        return voucher_id

    monkeypatch.setattr(LedgerService, "next_voucher_id", slow_next_voucher_id)

    start = threading.Barrier(2)
    posted = []

    def post(amount):
        start.wait()
        entries = ledger.post_voucher(
            entry_type="Receipt",
            entry_date=DAY,
            lines=[{"account": "CASH", "debit": amount}, {"account": "SALES", "credit": amount}],
        )
        posted.append(entries[0].voucher_id)

    threads = [threading.Thread(target=post, args=(amount,)) for amount in (10, 20)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(posted) == ["RV-0001", "RV-0002"]
    assert len(store.state["journalEntries"]) == 4
    assert ledger.unbalanced_vouchers() == []
