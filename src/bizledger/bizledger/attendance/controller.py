from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import parse_month_key
from ..common.validators import require_iso_date
from ..common.web import json_body, ok, permission_required
from ..container import Container

PERMISSION = "hr/attendance"


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/api/attendance/<month>", methods=["GET"], endpoint="attendance_grid")
    @permission_required(PERMISSION)
    def attendance_grid(month: str):
        year, month_no = parse_month_key(month)
        grid = service.register_grid(year, month_no, employee_id=request.args.get("employee") or None)
        return ok(grid)

    @app.route("/api/attendance/<employee_id>/<day>", methods=["PUT"], endpoint="attendance_mark")
    @permission_required(PERMISSION)
    def attendance_mark(employee_id: str, day: str):
        data = json_body()
        record = service.mark(
            employee_id=employee_id,
            work_date=require_iso_date(day, "Date"),
            status=str(data.get("status") or ""),
            reason=str(data.get("reason") or ""),
        )
        return ok(record.to_document() if record else None, message="Attendance saved")

    @app.route("/api/attendance/<employee_id>/<day>", methods=["DELETE"], endpoint="attendance_reset")
    @permission_required(PERMISSION)
    def attendance_reset(employee_id: str, day: str):
        service.reset_to_present(employee_id=employee_id, work_date=require_iso_date(day, "Date"))
        return ok(message="Marked present")
