from __future__ import annotations

from dataclasses import asdict

from flask import Flask, request

from ..common.validators import require_iso_date
from ..common.web import current_user, json_body, login_required, ok
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    service = container.ledger_service

    @app.route("/api/vouchers", methods=["POST"], endpoint="vouchers_post")
    @login_required
    def vouchers_post():
        data = json_body()
        lines = data.get("lines")
        if not isinstance(lines, list) or not all(isinstance(line, dict) for line in lines):
            raise ValidationError("Lines must be a list of objects")
        entries = service.post_voucher(
            entry_type=str(data.get("entryType") or ""),
            entry_date=require_iso_date(data.get("date"), "Date"),
            lines=lines,
            created_by=current_user().name,
            description=str(data.get("description") or ""),
        )
        return ok(
            {"voucherId": entries[0].voucher_id, "entries": [e.to_document() for e in entries]},
            message="Voucher posted",
            status=201,
        )

    @app.route("/api/vouchers/next-id/<entry_type>", methods=["GET"], endpoint="vouchers_next_id")
    @login_required
    def vouchers_next_id(entry_type: str):
        return ok({"voucherId": service.next_voucher_id(entry_type)})

    @app.route("/api/vouchers/unbalanced", methods=["GET"], endpoint="vouchers_unbalanced")
    @login_required
    def vouchers_unbalanced():
        return ok([{**asdict(v), "difference": v.difference} for v in service.unbalanced_vouchers()])

    @app.route("/api/ledger/balances", methods=["GET"], endpoint="ledger_balances")
    @login_required
    def ledger_balances():
        as_of = request.args.get("asOf")
        return ok(service.account_balances(as_of=require_iso_date(as_of, "As of date") if as_of else None))
