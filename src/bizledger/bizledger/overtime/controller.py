from __future__ import annotations

from dataclasses import asdict

from flask import Flask, request

from ..common.datetime_utils import parse_month_key
from ..common.validators import require_iso_date
from ..common.web import json_body, ok, permission_required
from ..container import Container
from ..core.constants import DEFAULT_PRESS_RATE_PER_EXTRA

PERMISSION = "hr/attendance"


def register(app: Flask, container: Container) -> None:
    service = container.overtime_service

    @app.route("/api/overtime/<month>", methods=["GET"], endpoint="overtime_list")
    @permission_required(PERMISSION)
    def overtime_list(month: str):
        year, month_no = parse_month_key(month)
        employee_id = request.args.get("employee") or None
        return ok(
            {
                "regular": [asdict(r) for r in service.records_for_month(year, month_no, employee_id=employee_id)],
                "press": [asdict(r) for r in service.press_records_for_month(year, month_no, employee_id=employee_id)],
            }
        )

    @app.route("/api/overtime/<employee_id>/<day>", methods=["PUT"], endpoint="overtime_set")
    @permission_required(PERMISSION)
    def overtime_set(employee_id: str, day: str):
        record = service.set_hours(
            employee_id=employee_id,
            work_date=require_iso_date(day, "Date"),
            hours=json_body().get("hours"),
        )
        return ok(asdict(record) if record else None, message="Overtime saved")

    @app.route("/api/overtime-press/<employee_id>/<day>", methods=["PUT"], endpoint="overtime_press_set")
    @permission_required(PERMISSION)
    def overtime_press_set(employee_id: str, day: str):
        record = service.set_press_hours(
            employee_id=employee_id,
            work_date=require_iso_date(day, "Date"),
            hours=json_body().get("hours"),
        )
        return ok(asdict(record) if record else None, message="Press overtime saved")

    @app.route("/api/overtime-press/pool", methods=["POST"], endpoint="overtime_press_pool")
    @permission_required(PERMISSION)
    def overtime_press_pool():
        data = json_body()
        rate = data.get("ratePerExtra")
        share = service.distribute_press_pool(
            work_date=require_iso_date(data.get("date"), "Date"),
            extra_bales=data.get("extraBales"),
            worker_ids=list(data.get("workerIds") or []),
            rate_per_extra=DEFAULT_PRESS_RATE_PER_EXTRA if rate is None else rate,
        )
        return ok({"share": share}, message="Pool distributed")
