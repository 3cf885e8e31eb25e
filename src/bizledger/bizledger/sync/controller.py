from __future__ import annotations

from flask import Flask

from ..common.web import login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/sync/status", methods=["GET"], endpoint="sync_status")
    @login_required
    def sync_status():
        engine = container.sync_engine
        return ok(
            {
                "status": engine.status.value,
                "loaded": engine.loaded,
                "running": engine.running,
                "unloadWarning": engine.unload_warning(),
            }
        )
