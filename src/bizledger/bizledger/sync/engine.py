"""Whole-document, last-write-wins synchronization.

Local dispatches are written out by a background writer that consumes a write
queue; each write overwrites the entire remote document with the current
aggregate. Remote notifications replace the local aggregate, except the one
notification that follows our own write (echo suppression). Two clients writing
within the same round-trip overwrite each other: there is no merge, version
check or field-level patching.
"""

from __future__ import annotations

import logging
import queue
import threading
from typing import Callable, Optional

from ..core.constants import STATE_DOC_PATH, UNLOAD_WARNING
from ..core.enums import SaveStatus
from ..state.actions import Action
from ..state.model import AppState, initial_state
from ..state.store import Origin, StateStore
from .document_store import DocumentSnapshot, DocumentStore
from .serialization import to_storage

logger = logging.getLogger(__name__)

_WRITE = "write"
_STOP = "stop"


class SyncEngine:
    def __init__(self, store: StateStore, documents: DocumentStore, *, doc_path: str = STATE_DOC_PATH):
        self._store = store
        self._documents = documents
        self._doc_path = doc_path

        self._jobs: "queue.Queue[str]" = queue.Queue()
        self._lock = threading.Lock()
        self._worker: Optional[threading.Thread] = None
        self._unsubscribe_remote: Optional[Callable[[], None]] = None

        self._local_change = False
        self._loaded = False
        self._status = SaveStatus.SYNCED

        store.subscribe(self._on_state_change)

    @property
    def doc_path(self) -> str:
        return self._doc_path

    @property
    def loaded(self) -> bool:
        with self._lock:
            return self._loaded

    @property
    def status(self) -> SaveStatus:
        with self._lock:
            return self._status

    @property
    def running(self) -> bool:
        return self._unsubscribe_remote is not None

    def start(self, *, background_writer: bool = True) -> None:
        """Attach the remote listener and (optionally) start the writer thread."""

        if self._unsubscribe_remote is not None:
            return
        if background_writer and (self._worker is None or not self._worker.is_alive()):
            self._worker = threading.Thread(target=self._run, name="bizledger-sync-writer", daemon=True)
            self._worker.start()
        logger.info("Listening to remote state", extra={"doc_path": self._doc_path})
        self._unsubscribe_remote = self._documents.on_snapshot(
            self._doc_path, self._on_remote_snapshot, self._on_remote_error
        )

    def stop(self) -> None:
        """Stop listening. Writes already queued still go out."""

        if self._unsubscribe_remote is not None:
            self._unsubscribe_remote()
            self._unsubscribe_remote = None
        with self._lock:
            self._loaded = False
        if self._worker is not None and self._worker.is_alive():
            self._jobs.put(_STOP)

    def flush(self) -> None:
        """Block until every queued write has been attempted.

        Without a writer thread the queue is drained in the caller's thread.
        """

        if self._worker is not None and self._worker.is_alive():
            self._jobs.join()
            return
        while True:
            try:
                job = self._jobs.get_nowait()
            except queue.Empty:
                return
            try:
                if job == _WRITE:
                    self._write_current_state()
            finally:
                self._jobs.task_done()

    def unload_warning(self) -> Optional[str]:
        return UNLOAD_WARNING if self.status == SaveStatus.SAVING else None

    def _on_state_change(self, state: AppState, action: Action, origin: Origin) -> None:
        if origin is not Origin.LOCAL:
            return
        with self._lock:
            if not self._loaded:
                return
            self._local_change = True
        self._set_status(SaveStatus.SAVING)
        self._jobs.put(_WRITE)

    def _on_remote_snapshot(self, snapshot: DocumentSnapshot) -> None:
        with self._lock:
            if self._local_change:
                self._local_change = False
                logger.debug("Ignoring echo of local write", extra={"doc_path": self._doc_path})
                return

        if snapshot.exists:
            self._store.apply_remote(snapshot.data)
            self._set_status(SaveStatus.SYNCED)
        else:
            logger.info("Remote state missing, creating it", extra={"doc_path": self._doc_path})
            try:
                self._documents.set(self._doc_path, to_storage(initial_state()))
            except Exception:
                logger.exception("Failed to create remote state", extra={"doc_path": self._doc_path})
                self._set_status(SaveStatus.ERROR)

        with self._lock:
            self._loaded = True

    def _on_remote_error(self, error: Exception) -> None:
        logger.error("Remote listener failed: %s", error, extra={"doc_path": self._doc_path})
        with self._lock:
            self._loaded = True

    def _run(self) -> None:
        while True:
            job = self._jobs.get()
            try:
                if job == _STOP:
                    return
                self._write_current_state()
            finally:
                self._jobs.task_done()

    def _write_current_state(self) -> None:
        document = to_storage(self._store.state)
        try:
            self._documents.set(self._doc_path, document)
        except Exception:
            logger.exception("Failed to write remote state", extra={"doc_path": self._doc_path})
            self._set_status(SaveStatus.ERROR)
            return
        if self._jobs.unfinished_tasks <= 1:
            self._set_status(SaveStatus.SYNCED)

    def _set_status(self, status: SaveStatus) -> None:
        with self._lock:
            changed = self._status != status
            self._status = status
        if changed:
            logger.info("Save status changed", extra={"save_status": status.value, "doc_path": self._doc_path})
