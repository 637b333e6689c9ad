from __future__ import annotations

from flask import Flask

from ..common.web import current_caller, json_body, ok, required_field
from ..container import Container


def register(app: Flask, container: Container) -> None:
    ledger = container.ledger_service

    @app.route("/api/records/<int:year>/<int:month>", methods=["PUT"], endpoint="upsert_record")
    def upsert_record(year: int, month: int):
        data = json_body()
        record = ledger.create_or_update_record(
            current_caller(),
            month=month,
            year=year,
            worked_hours=required_field(data, "worked_hours"),
            # Absent key or null: keep stored value / use profile default.
            hourly_rate_cents=data.get("hourly_rate_cents"),
            transport_allowance_cents=data.get("transport_allowance_cents"),
        )
        return ok(record.to_dict())

    @app.route("/api/records/<int:year>/<int:month>", methods=["GET"], endpoint="get_record")
    def get_record(year: int, month: int):
        return ok(ledger.get_record(current_caller(), month=month, year=year).to_dict())

    @app.route("/api/records/<int:year>/<int:month>", methods=["DELETE"], endpoint="delete_record")
    def delete_record(year: int, month: int):
        ledger.delete_record(current_caller(), month=month, year=year)
        return ok()

    @app.route("/api/records/<int:year>/<int:month>/has-payments", methods=["GET"], endpoint="has_existing_payments")
    def has_existing_payments(year: int, month: int):
        return ok(ledger.has_existing_payments(current_caller(), month=month, year=year))

    @app.route("/api/records/<int:year>/<int:month>/payments", methods=["GET"], endpoint="list_payments")
    def list_payments(year: int, month: int):
        payments = ledger.get_payments(current_caller(), month=month, year=year)
        return ok([p.to_dict() for p in payments])

    @app.route("/api/records/<int:year>/<int:month>/payments", methods=["POST"], endpoint="add_payment")
    def add_payment(year: int, month: int):
        data = json_body()
        payment = ledger.add_payment(
            current_caller(),
            month=month,
            year=year,
            amount_cents=required_field(data, "amount_cents"),
            payment_type=data.get("payment_type"),
        )
        return ok(payment.to_dict(), 201)

    @app.route(
        "/api/records/<int:year>/<int:month>/payments/<int:payment_date>",
        methods=["DELETE"],
        endpoint="delete_payment",
    )
    def delete_payment(year: int, month: int, payment_date: int):
        ledger.delete_payment(current_caller(), month=month, year=year, payment_date=payment_date)
        return ok()
