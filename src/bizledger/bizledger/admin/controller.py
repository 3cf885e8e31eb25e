from __future__ import annotations

from flask import Flask, request

from ..common.web import admin_required, current_user, ok
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    service = container.admin_service

    @app.route("/api/admin/hard-reset", methods=["POST"], endpoint="admin_hard_reset")
    @admin_required
    def admin_hard_reset():
        service.hard_reset(current=current_user())
        return ok(message="Transactions cleared")

    @app.route("/api/admin/backup", methods=["GET"], endpoint="admin_backup")
    @admin_required
    def admin_backup():
        filename, body = service.export_backup(current=current_user())
        return app.response_class(
            body,
            mimetype="application/json",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/admin/restore", methods=["POST"], endpoint="admin_restore")
    @admin_required
    def admin_restore():
        upload = request.files.get("file")
        raw = upload.read() if upload is not None else request.get_data()
        if not raw:
            raise ValidationError("Upload a backup file")
        service.restore_backup(current=current_user(), payload=raw)
        return ok(message="State restored")
