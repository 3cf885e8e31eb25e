from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import parse_month_key
from ..common.web import json_body, ok, permission_required
from ..container import Container

PERMISSION = "hr/payroll"


def register(app: Flask, container: Container) -> None:
    service = container.payroll_service

    @app.route("/api/payroll/<month>", methods=["GET"], endpoint="payroll_report")
    @permission_required(PERMISSION)
    def payroll_report(month: str):
        year, month_no = parse_month_key(month)
        rows = service.build_salary_report(year, month_no, employee_id=request.args.get("employee") or None)
        return ok([r.to_dict() for r in rows])

    @app.route("/api/payroll/<month>/export.csv", methods=["GET"], endpoint="payroll_export")
    @permission_required(PERMISSION)
    def payroll_export(month: str):
        year, month_no = parse_month_key(month)
        return app.response_class(
            service.report_csv(year, month_no, employee_id=request.args.get("employee") or None),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename=salary_{month}.csv"},
        )

    @app.route("/api/payroll/<month>/payments/<employee_id>", methods=["PUT"], endpoint="payroll_pay")
    @permission_required(PERMISSION)
    def payroll_pay(month: str, employee_id: str):
        year, month_no = parse_month_key(month)
        data = json_body()
        payment = service.record_payment(
            employee_id=employee_id,
            year=year,
            month=month_no,
            method=str(data.get("method") or ""),
            bank_id=data.get("bankId"),
        )
        return ok(
            {
                "id": payment.id,
                "employeeId": payment.employee_id,
                "monthYear": payment.month_year,
                "paymentDate": payment.payment_date,
                "paymentMethod": payment.payment_method,
                "bankId": payment.bank_id,
                "amountPaid": payment.amount_paid,
            },
            message="Salary marked as paid",
        )
