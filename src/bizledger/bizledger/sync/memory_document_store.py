from __future__ import annotations

import copy
import threading
from typing import Any, Callable, Optional

from .document_store import DocumentSnapshot, DocumentStore, ErrorCallback, SnapshotCallback


class InMemoryDocumentStore(DocumentStore):
    """Process-local document store with snapshot listeners.

    Used by the `memory` backend for development and by tests. With
    `deliver_immediately=False` notifications are queued until
    `deliver_pending()` so tests can interleave writers like a slow transport.
    """

    def __init__(self, *, deliver_immediately: bool = True):
        self._docs: dict[str, dict[str, Any]] = {}
        self._listeners: dict[str, list[tuple[SnapshotCallback, Optional[ErrorCallback]]]] = {}
        self._pending: list[tuple[SnapshotCallback, DocumentSnapshot]] = []
        self._deliver_immediately = deliver_immediately
        self._lock = threading.RLock()
        self.write_count = 0

    def get(self, path: str) -> DocumentSnapshot:
        with self._lock:
            data = self._docs.get(path)
            return DocumentSnapshot(path=path, exists=data is not None, data=copy.deepcopy(data))

    def set(self, path: str, data: dict[str, Any]) -> None:
        with self._lock:
            self._docs[path] = copy.deepcopy(data)
            self.write_count += 1
        self._notify(path)

    def update(self, path: str, data: dict[str, Any]) -> None:
        with self._lock:
            if path not in self._docs:
                raise KeyError(path)
            self._docs[path] = {**self._docs[path], **copy.deepcopy(data)}
            self.write_count += 1
        self._notify(path)

    def list_collection(self, collection: str) -> list[tuple[str, dict[str, Any]]]:
        prefix = collection.rstrip("/") + "/"
        with self._lock:
            return [
                (path[len(prefix):], copy.deepcopy(data))
                for path, data in sorted(self._docs.items())
                if path.startswith(prefix) and "/" not in path[len(prefix):]
            ]

    def on_snapshot(
        self,
        path: str,
        callback: SnapshotCallback,
        on_error: Optional[ErrorCallback] = None,
    ) -> Callable[[], None]:
        entry = (callback, on_error)
        with self._lock:
            self._listeners.setdefault(path, []).append(entry)
        # Like Firestore, the current document is delivered on subscribe.
        self._deliver(callback, self.get(path))

        def unsubscribe() -> None:
            with self._lock:
                listeners = self._listeners.get(path, [])
                if entry in listeners:
                    listeners.remove(entry)

        return unsubscribe

    def deliver_pending(self) -> int:
        with self._lock:
            pending, self._pending = self._pending, []
        for callback, snapshot in pending:
            callback(snapshot)
        return len(pending)

    def _notify(self, path: str) -> None:
        with self._lock:
            listeners = list(self._listeners.get(path, []))
        for callback, _ in listeners:
            self._deliver(callback, self.get(path))

    def _deliver(self, callback: SnapshotCallback, snapshot: DocumentSnapshot) -> None:
        if self._deliver_immediately:
            callback(snapshot)
        else:
            with self._lock:
                self._pending.append((callback, snapshot))
