from __future__ import annotations

from flask import Flask

from ..common.web import current_caller, json_body, ok, required_field
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/profile", methods=["GET"], endpoint="get_caller_profile")
    def get_caller_profile():
        profile = container.profile_service.get_caller_profile(current_caller())
        return ok(profile.to_dict() if profile else None)

    @app.route("/api/profile", methods=["PUT"], endpoint="save_caller_profile")
    def save_caller_profile():
        data = json_body()
        profile = container.profile_service.save_caller_profile(
            current_caller(),
            name=required_field(data, "name"),
            default_hourly_rate_cents=required_field(data, "default_hourly_rate_cents"),
            default_transport_allowance_cents=required_field(data, "default_transport_allowance_cents"),
        )
        return ok(profile.to_dict())

    @app.route("/api/profiles/<string:principal>", methods=["GET"], endpoint="get_user_profile")
    def get_user_profile(principal: str):
        profile = container.profile_service.get_user_profile(current_caller(), principal)
        return ok(profile.to_dict() if profile else None)
