from __future__ import annotations

from flask import Flask

from ..common.web import current_caller, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    reports = container.report_service

    @app.route("/api/records", methods=["GET"], endpoint="list_records")
    def list_records():
        return ok([r.to_dict() for r in reports.get_all_records(current_caller())])

    @app.route("/api/summaries", methods=["GET"], endpoint="list_summaries")
    def list_summaries():
        return ok([s.to_dict() for s in reports.get_all_summaries(current_caller())])

    @app.route("/api/summaries/<int:year>/<int:month>", methods=["GET"], endpoint="get_summary")
    def get_summary(year: int, month: int):
        return ok(reports.get_summary(current_caller(), month=month, year=year).to_dict())
