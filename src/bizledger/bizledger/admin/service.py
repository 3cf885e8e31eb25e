from __future__ import annotations

import json
import logging
from typing import Any

from ..common.datetime_utils import now_local
from ..core.exceptions import SnapshotDecodeError, ValidationError
from ..state.actions import HardResetTransactions, RestoreState
from ..state.snapshot import decode_snapshot
from ..state.store import StateStore
from ..sync.serialization import to_storage
from ..users.model import SessionUser
from ..users.service import require_admin

logger = logging.getLogger(__name__)


class AdminService:
    """Use case: whole-aggregate maintenance (admin only)."""

    def __init__(self, store: StateStore):
        self._store = store

    def hard_reset(self, *, current: SessionUser) -> None:
        """Clear transactions and reset numbering; master data is kept."""

        require_admin(current)
        self._store.dispatch(HardResetTransactions())
        logger.warning("Transactions hard reset", extra={"uid": current.uid})

    def export_backup(self, *, current: SessionUser) -> tuple[str, bytes]:
        """Return `(filename, json bytes)` of the current aggregate."""

        require_admin(current)
        stamp = now_local().strftime("%Y%m%d_%H%M%S")
        body = json.dumps(to_storage(self._store.state), ensure_ascii=False, indent=2)
        return f"bizledger_backup_{stamp}.json", body.encode("utf-8")

    def restore_backup(self, *, current: SessionUser, payload: Any) -> None:
        """Replace the aggregate with an uploaded backup.

        The payload is decoded up front so a bad file is reported instead of
        being silently ignored by the reducer. The restore is dispatched as a
        local action, so it is written out to the remote document.
        """

        require_admin(current)
        if isinstance(payload, (bytes, str)):
            try:
                payload = json.loads(payload)
            except ValueError:
                raise ValidationError("Backup file is not valid JSON")
        try:
            decode_snapshot(payload)
        except SnapshotDecodeError as e:
            raise ValidationError(f"Backup file is not a valid state snapshot: {e}")
        self._store.dispatch(RestoreState(payload))
        logger.warning("State restored from backup", extra={"uid": current.uid})
