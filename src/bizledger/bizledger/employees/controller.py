from __future__ import annotations

from flask import Flask, request

from ..common.web import admin_required, current_user, fail, json_body, ok, permission_required
from ..container import Container
from ..core.exceptions import ValidationError
from .csv_io import employees_to_csv, parse_employee_csv

PERMISSION = "hr"


def register(app: Flask, container: Container) -> None:
    service = container.employee_service

    @app.route("/api/employees", methods=["GET"], endpoint="employees_list")
    @permission_required(PERMISSION)
    def employees_list():
        rows = service.list_employees(
            active_only=request.args.get("active") in {"1", "true"},
            section=request.args.get("section") or None,
            employee_type=request.args.get("type") or None,
            search=request.args.get("q") or None,
        )
        return ok(rows)

    @app.route("/api/employees/<employee_id>", methods=["GET"], endpoint="employees_get")
    @permission_required(PERMISSION)
    def employees_get(employee_id: str):
        row = service.get(employee_id)
        if row is None:
            return fail("Employee does not exist", 404)
        return ok(row)

    @app.route("/api/employees", methods=["POST"], endpoint="employees_create")
    @permission_required(PERMISSION)
    def employees_create():
        return ok(service.create(json_body()), message="Employee created", status=201)

    @app.route("/api/employees/<employee_id>", methods=["PUT"], endpoint="employees_update")
    @permission_required(PERMISSION)
    def employees_update(employee_id: str):
        return ok(service.update(employee_id, json_body()), message="Employee updated")

    @app.route("/api/employees/<employee_id>", methods=["DELETE"], endpoint="employees_delete")
    @admin_required
    def employees_delete(employee_id: str):
        service.delete(current=current_user(), employee_id=employee_id)
        return ok(message="Employee deleted")

    @app.route("/api/employees/import", methods=["POST"], endpoint="employees_import")
    @permission_required(PERMISSION)
    def employees_import():
        upload = request.files.get("file")
        if upload is not None:
            raw = upload.read()
        else:
            raw = request.get_data()
        if not raw:
            raise ValidationError("Upload a CSV file")
        try:
            text = raw.decode("utf-8-sig")
        except UnicodeDecodeError:
            raise ValidationError("CSV file must be UTF-8 encoded")

        result = parse_employee_csv(text)
        created = service.create_many(result.rows)
        return ok(
            {
                "created": [e["id"] for e in created],
                "skipped": [{"line": line, "reason": reason} for line, reason in result.skipped],
            },
            message=f"Imported {len(created)} employees",
        )

    @app.route("/api/employees/export.csv", methods=["GET"], endpoint="employees_export")
    @permission_required(PERMISSION)
    def employees_export():
        return app.response_class(
            employees_to_csv(service.list_employees()),
            mimetype="text/csv",
            headers={"Content-Disposition": "attachment; filename=employees.csv"},
        )
