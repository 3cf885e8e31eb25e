from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional, Protocol


@dataclass(frozen=True)
class DocumentSnapshot:
    path: str
    exists: bool
    data: Optional[dict[str, Any]] = None


SnapshotCallback = Callable[[DocumentSnapshot], None]
ErrorCallback = Callable[[Exception], None]


class DocumentStore(Protocol):
    """Whole-document access to the hosted store.

    Implementations wrap a vendor SDK; no merge or field patching is offered.
    """

    def get(self, path: str) -> DocumentSnapshot:
        raise NotImplementedError

    def set(self, path: str, data: dict[str, Any]) -> None:
        raise NotImplementedError

    def update(self, path: str, data: dict[str, Any]) -> None:
        raise NotImplementedError

    def list_collection(self, collection: str) -> list[tuple[str, dict[str, Any]]]:
        raise NotImplementedError

    def on_snapshot(
        self,
        path: str,
        callback: SnapshotCallback,
        on_error: Optional[ErrorCallback] = None,
    ) -> Callable[[], None]:
        """Subscribe to changes of one document. Returns an unsubscribe callable."""

        raise NotImplementedError
