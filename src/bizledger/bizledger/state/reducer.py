"""Pure reducer over the application aggregate.

`reduce(state, action)` never mutates `state` and never raises: unknown actions,
unknown collections and undecodable restore payloads leave the state as is.
"""

from __future__ import annotations

import logging

from ..core.enums import JournalEntryType
from ..core.exceptions import SnapshotDecodeError
from .actions import (
    Action,
    AddEntity,
    AddPlannerEntity,
    BatchUpdate,
    DeleteEntity,
    HardResetTransactions,
    RemovePlannerEntity,
    RestoreState,
    SetPlannerData,
    ToggleFavoriteCombination,
    UpdateEntity,
)
from .model import (
    COUNTER_BY_COLLECTION,
    COUNTERS,
    ENTITY_COLLECTIONS,
    PLANNER_ID_FIELDS,
    PRESERVED_COUNTERS,
    RESET_COLLECTIONS,
    VOUCHER_SERIES,
    AppState,
    planner_defaults,
)
from .snapshot import decode_snapshot

logger = logging.getLogger(__name__)


def reduce(state: AppState, action: Action) -> AppState:
    if isinstance(action, AddEntity):
        return _add(state, action)
    if isinstance(action, UpdateEntity):
        return _update(state, action)
    if isinstance(action, DeleteEntity):
        return _delete(state, action)
    if isinstance(action, BatchUpdate):
        for nested in action.actions:
            state = reduce(state, nested)
        return state
    if isinstance(action, RestoreState):
        return _restore(state, action)
    if isinstance(action, HardResetTransactions):
        return _hard_reset(state)
    if isinstance(action, ToggleFavoriteCombination):
        return _toggle_favorite(state, action.date)
    if isinstance(action, SetPlannerData):
        return _set_planner(state, action)
    if isinstance(action, AddPlannerEntity):
        key = PLANNER_ID_FIELDS.get(action.entity_type)
        if not key:
            return state
        current = state.get(key) or []
        if action.entity_id in current:
            return state
        return {**state, key: [*current, action.entity_id]}
    if isinstance(action, RemovePlannerEntity):
        key = PLANNER_ID_FIELDS.get(action.entity_type)
        if not key:
            return state
        return {**state, key: [i for i in (state.get(key) or []) if i != action.entity_id]}
    return state


def _add(state: AppState, action: AddEntity) -> AppState:
    if action.entity not in ENTITY_COLLECTIONS:
        return state
    rows = state.get(action.entity) or []
    data = dict(action.data)
    if any(r.get("id") == data.get("id") for r in rows):
        # Replayed add: keep the stored record and the counters.
        return state

    new_state = {**state, action.entity: [*rows, data]}

    counter = COUNTER_BY_COLLECTION.get(action.entity)
    if counter:
        new_state[counter] = state.get(counter, 1) + 1

    if action.entity == "journalEntries":
        counter = _voucher_counter_for(state, data)
        if counter:
            new_state[counter] = state.get(counter, 1) + 1

    return new_state


def _voucher_counter_for(state: AppState, entry: dict):
    voucher_id = str(entry.get("voucherId") or "")
    if any(je.get("voucherId") == voucher_id for je in state.get("journalEntries", [])):
        return None
    try:
        entry_type = JournalEntryType(entry.get("entryType"))
    except ValueError:
        return None
    prefix, counter = VOUCHER_SERIES[entry_type]
    return counter if voucher_id.startswith(prefix) else None


def _update(state: AppState, action: UpdateEntity) -> AppState:
    if action.entity not in ENTITY_COLLECTIONS:
        return state
    target = action.data.get("id")
    rows = [{**r, **action.data} if r.get("id") == target else r for r in state.get(action.entity) or []]
    return {**state, action.entity: rows}


def _delete(state: AppState, action: DeleteEntity) -> AppState:
    if action.entity not in ENTITY_COLLECTIONS:
        return state
    rows = [r for r in state.get(action.entity) or [] if r.get("id") != action.id]
    return {**state, action.entity: rows}


def _restore(state: AppState, action: RestoreState) -> AppState:
    try:
        return decode_snapshot(action.payload)
    except SnapshotDecodeError as e:
        logger.warning("Ignoring restore payload: %s", e)
        return state


def _hard_reset(state: AppState) -> AppState:
    new_state = {**state}
    for name in RESET_COLLECTIONS:
        new_state[name] = []
    for counter in COUNTERS:
        if counter not in PRESERVED_COUNTERS:
            new_state[counter] = 1
    new_state.update(planner_defaults())
    return new_state


def _toggle_favorite(state: AppState, date: str) -> AppState:
    favorites = state.get("favoriteCombinations") or []
    if any(f.get("date") == date for f in favorites):
        return {**state, "favoriteCombinations": [f for f in favorites if f.get("date") != date]}
    updated = sorted([*favorites, {"date": date}], key=lambda f: f.get("date", ""), reverse=True)
    return {**state, "favoriteCombinations": updated}


def _set_planner(state: AppState, action: SetPlannerData) -> AppState:
    new_state = {**state}
    if action.planner_data is not None:
        new_state["plannerData"] = dict(action.planner_data)
    if action.last_weekly_reset is not None:
        new_state["plannerLastWeeklyReset"] = action.last_weekly_reset
    if action.last_monthly_reset is not None:
        new_state["plannerLastMonthlyReset"] = action.last_monthly_reset
    return new_state
