"""Schema-validated decoding of state snapshots.

Payloads arrive from the remote document or from an uploaded backup. A payload
is accepted only if it is a mapping carrying the `customers` collection and
every known field has the right shape. Missing and null fields fall back to the
defaults of a fresh aggregate; unknown fields are dropped.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, List, Mapping

from pydantic import BaseModel, ConfigDict, Field, create_model, model_validator
from pydantic import ValidationError as SchemaValidationError

from ..core.exceptions import SnapshotDecodeError
from .model import COUNTERS, ENTITY_COLLECTIONS, PLANNER_ID_FIELDS, AppState, derive, initial_state

SENTINEL_FIELD = "customers"


class _SnapshotBase(BaseModel):
    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, Mapping):
            return {k: v for k, v in data.items() if v is not None}
        return data


def _default(value: Any):
    return Field(default_factory=lambda: copy.deepcopy(value))


def _build_schema() -> type[BaseModel]:
    defaults = initial_state()
    fields: dict[str, Any] = {}
    for name in ENTITY_COLLECTIONS + ("favoriteCombinations",):
        fields[name] = (List[Dict[str, Any]], _default(defaults[name]))
    for name in COUNTERS:
        fields[name] = (int, Field(default=defaults[name], ge=0))
    for name in PLANNER_ID_FIELDS.values():
        fields[name] = (List[str], _default(defaults[name]))
    fields["plannerData"] = (Dict[str, Any], _default(defaults["plannerData"]))
    fields["plannerLastWeeklyReset"] = (str, "")
    fields["plannerLastMonthlyReset"] = (str, "")
    return create_model("AppStateSnapshot", __base__=_SnapshotBase, **fields)


AppStateSnapshot = _build_schema()


def dedupe_by_id(rows: List[dict]) -> tuple[List[dict], int]:
    """Keep the first record per id. Returns (rows, number of dropped duplicates)."""

    seen: set = set()
    unique: List[dict] = []
    for row in rows:
        key = row.get("id")
        if key in seen:
            continue
        seen.add(key)
        unique.append(row)
    return unique, len(rows) - len(unique)


def decode_snapshot(payload: Any) -> AppState:
    """Validate `payload` and return a complete aggregate.

    Raises SnapshotDecodeError when the payload is not a state document.
    """

    if not isinstance(payload, Mapping):
        raise SnapshotDecodeError(f"Snapshot must be a mapping, got {type(payload).__name__}")
    if SENTINEL_FIELD not in payload:
        raise SnapshotDecodeError(f"Snapshot is missing the '{SENTINEL_FIELD}' collection")

    try:
        snapshot = AppStateSnapshot.model_validate(dict(payload))
    except SchemaValidationError as e:
        raise SnapshotDecodeError(f"Snapshot has an invalid shape: {e.error_count()} error(s)") from e

    state: AppState = snapshot.model_dump()
    # Duplicate divisions have been observed in stored documents.
    state["divisions"], _ = dedupe_by_id(state["divisions"])
    return derive(state)
