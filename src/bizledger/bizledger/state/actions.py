from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Sequence, Union


@dataclass(frozen=True)
class AddEntity:
    entity: str
    data: Mapping[str, Any]


@dataclass(frozen=True)
class UpdateEntity:
    entity: str
    data: Mapping[str, Any]


@dataclass(frozen=True)
class DeleteEntity:
    entity: str
    id: Any


EntityAction = Union[AddEntity, UpdateEntity, DeleteEntity]


@dataclass(frozen=True)
class BatchUpdate:
    actions: Sequence[EntityAction] = field(default_factory=tuple)


@dataclass(frozen=True)
class RestoreState:
    """Replace the aggregate from an externally supplied snapshot."""

    payload: Any


@dataclass(frozen=True)
class HardResetTransactions:
    pass


@dataclass(frozen=True)
class ToggleFavoriteCombination:
    date: str


@dataclass(frozen=True)
class SetPlannerData:
    planner_data: Optional[Mapping[str, Any]] = None
    last_weekly_reset: Optional[str] = None
    last_monthly_reset: Optional[str] = None


@dataclass(frozen=True)
class AddPlannerEntity:
    entity_type: str
    entity_id: str


@dataclass(frozen=True)
class RemovePlannerEntity:
    entity_type: str
    entity_id: str


Action = Union[
    AddEntity,
    UpdateEntity,
    DeleteEntity,
    BatchUpdate,
    RestoreState,
    HardResetTransactions,
    ToggleFavoriteCombination,
    SetPlannerData,
    AddPlannerEntity,
    RemovePlannerEntity,
]


def upsert(entity: str, data: Mapping[str, Any], *, exists: bool) -> EntityAction:
    """Update when the record is already stored, add otherwise."""
    return UpdateEntity(entity, data) if exists else AddEntity(entity, data)
