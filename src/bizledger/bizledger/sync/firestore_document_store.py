from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from google.api_core.exceptions import GoogleAPIError

from ..core.exceptions import RemoteStoreError
from .connection import FirebaseConnection
from .document_store import DocumentSnapshot, DocumentStore, ErrorCallback, SnapshotCallback

logger = logging.getLogger(__name__)


class FirestoreDocumentStore(DocumentStore):
    def __init__(self, conn: FirebaseConnection):
        self._conn = conn

    def _client(self):
        return self._conn.firestore()

    def get(self, path: str) -> DocumentSnapshot:
        try:
            snap = self._client().document(path).get()
        except GoogleAPIError as e:
            raise RemoteStoreError(f"Failed to read {path}: {e}") from e
        return DocumentSnapshot(path=path, exists=snap.exists, data=snap.to_dict() if snap.exists else None)

    def set(self, path: str, data: dict[str, Any]) -> None:
        try:
            self._client().document(path).set(data)
        except GoogleAPIError as e:
            raise RemoteStoreError(f"Failed to write {path}: {e}") from e

    def update(self, path: str, data: dict[str, Any]) -> None:
        try:
            self._client().document(path).update(data)
        except GoogleAPIError as e:
            raise RemoteStoreError(f"Failed to update {path}: {e}") from e

    def list_collection(self, collection: str) -> list[tuple[str, dict[str, Any]]]:
        try:
            return [(doc.id, doc.to_dict() or {}) for doc in self._client().collection(collection).stream()]
        except GoogleAPIError as e:
            raise RemoteStoreError(f"Failed to list {collection}: {e}") from e

    def on_snapshot(
        self,
        path: str,
        callback: SnapshotCallback,
        on_error: Optional[ErrorCallback] = None,
    ) -> Callable[[], None]:
        def _on_docs(docs, changes, read_time) -> None:
            # Runs on the Firestore watch thread; exceptions here would kill the watch.
            try:
                if not docs:
                    callback(DocumentSnapshot(path=path, exists=False))
                    return
                snap = docs[0]
                callback(
                    DocumentSnapshot(path=path, exists=snap.exists, data=snap.to_dict() if snap.exists else None)
                )
            except Exception as e:
                logger.exception("Snapshot handler failed", extra={"doc_path": path})
                if on_error:
                    on_error(e)

        watch = self._client().document(path).on_snapshot(_on_docs)
        return watch.unsubscribe
