from __future__ import annotations

from typing import Any, Dict

from ..core.enums import JournalEntryType, PlannerEntityType

AppState = Dict[str, Any]

MASTER_COLLECTIONS = (
    "customers",
    "suppliers",
    "vendors",
    "subSuppliers",
    "commissionAgents",
    "freightForwarders",
    "clearingAgents",
    "items",
    "originalTypes",
    "originalProducts",
    "divisions",
    "subDivisions",
    "warehouses",
    "sections",
    "categories",
    "logos",
    "assetTypes",
    "banks",
    "cashAccounts",
    "loanAccounts",
    "capitalAccounts",
    "investmentAccounts",
    "expenseAccounts",
    "inventoryAccounts",
    "packingMaterialInventoryAccounts",
    "fixedAssetAccounts",
    "accumulatedDepreciationAccounts",
    "receivableAccounts",
    "revenueAccounts",
    "payableAccounts",
    "employees",
    "vehicles",
    "packingMaterialItems",
)

TRANSACTION_COLLECTIONS = (
    "attendanceRecords",
    "overtimeRecords",
    "overtimePressRecords",
    "salaryPayments",
    "hrTasks",
    "hrEnquiries",
    "fixedAssets",
    "depreciationEntries",
    "originalOpenings",
    "originalPurchases",
    "productions",
    "salesInvoices",
    "ongoingOrders",
    "finishedGoodsPurchases",
    "packingMaterialPurchases",
    "logisticsEntries",
    "guaranteeCheques",
    "customsDocuments",
    "journalEntries",
    "testEntries",
)

# Entity collections addressable by ADD/UPDATE/DELETE.
ENTITY_COLLECTIONS = MASTER_COLLECTIONS + TRANSACTION_COLLECTIONS

# Collections cleared by a hard reset. Guarantee cheques, customs documents and
# fixed assets are registers, not postings, and are kept.
RESET_COLLECTIONS = tuple(
    name for name in TRANSACTION_COLLECTIONS if name not in ("guaranteeCheques", "customsDocuments", "fixedAssets")
) + ("favoriteCombinations",)

COUNTERS = (
    "nextInvoiceNumber",
    "nextOngoingOrderNumber",
    "nextFinishedGoodsPurchaseNumber",
    "nextPackingMaterialPurchaseNumber",
    "nextLogisticsSNo",
    "nextHRTaskId",
    "nextHREnquiryId",
    "nextGuaranteeChequeSNo",
    "nextReceiptVoucherNumber",
    "nextPaymentVoucherNumber",
    "nextExpenseVoucherNumber",
    "nextJournalVoucherNumber",
    "nextTestEntryNumber",
)

# Counters that survive a hard reset.
PRESERVED_COUNTERS = ("nextGuaranteeChequeSNo",)

# Adding to one of these collections advances the paired counter.
COUNTER_BY_COLLECTION = {
    "salesInvoices": "nextInvoiceNumber",
    "ongoingOrders": "nextOngoingOrderNumber",
    "finishedGoodsPurchases": "nextFinishedGoodsPurchaseNumber",
    "packingMaterialPurchases": "nextPackingMaterialPurchaseNumber",
    "logisticsEntries": "nextLogisticsSNo",
    "guaranteeCheques": "nextGuaranteeChequeSNo",
    "hrTasks": "nextHRTaskId",
    "hrEnquiries": "nextHREnquiryId",
    "testEntries": "nextTestEntryNumber",
}

# Journal entry type -> (voucher id prefix, counter).
VOUCHER_SERIES = {
    JournalEntryType.RECEIPT: ("RV-", "nextReceiptVoucherNumber"),
    JournalEntryType.PAYMENT: ("PV-", "nextPaymentVoucherNumber"),
    JournalEntryType.EXPENSE: ("EV-", "nextExpenseVoucherNumber"),
    JournalEntryType.JOURNAL: ("JV-", "nextJournalVoucherNumber"),
}

PLANNER_ID_FIELDS = {
    PlannerEntityType.CUSTOMER.value: "plannerCustomerIds",
    PlannerEntityType.SUPPLIER.value: "plannerSupplierIds",
    PlannerEntityType.EXPENSE_ACCOUNT.value: "plannerExpenseAccountIds",
}

_SEEDED_ACCOUNTS = {
    "expenseAccounts": [{"id": "EXP-012", "name": "Depreciation Expense"}],
    "inventoryAccounts": [{"id": "INV-FG-001", "name": "Finished Goods Inventory"}],
    "packingMaterialInventoryAccounts": [{"id": "INV-PM-001", "name": "Packing Material Inventory"}],
    "fixedAssetAccounts": [{"id": "FA-001", "name": "Fixed Assets at Cost"}],
    "accumulatedDepreciationAccounts": [{"id": "AD-001", "name": "Accumulated Depreciation"}],
    "receivableAccounts": [{"id": "AR-001", "name": "Accounts Receivable"}],
    "revenueAccounts": [{"id": "REV-001", "name": "Sales Revenue"}],
    "payableAccounts": [
        {"id": "AP-001", "name": "Accounts Payable"},
        {"id": "AP-002", "name": "Customs Charges Payable"},
    ],
}


def planner_defaults() -> dict:
    return {
        "plannerData": {},
        "plannerLastWeeklyReset": "",
        "plannerLastMonthlyReset": "",
    }


def initial_state() -> AppState:
    """A fresh aggregate. Every call returns new containers."""

    state: AppState = {name: [] for name in ENTITY_COLLECTIONS}
    for name, rows in _SEEDED_ACCOUNTS.items():
        state[name] = [dict(r) for r in rows]
    state["favoriteCombinations"] = []
    for counter in COUNTERS:
        state[counter] = 1
    state.update(planner_defaults())
    for field in PLANNER_ID_FIELDS.values():
        state[field] = []
    return derive(state)


def derive(state: AppState) -> AppState:
    """Recompute derived fields: each item's next bale number."""

    produced: dict[str, float] = {}
    for p in state.get("productions", []):
        item_id = p.get("itemId")
        produced[item_id] = produced.get(item_id, 0) + (p.get("quantityProduced") or 0)

    items = [
        {**item, "nextBaleNumber": (item.get("openingStock") or 0) + produced.get(item.get("id"), 0) + 1}
        for item in state.get("items", [])
    ]
    return {**state, "items": items}
