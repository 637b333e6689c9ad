from __future__ import annotations

from flask import Flask

from ..common.web import current_caller, json_body, ok, required_field
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/access/initialize", methods=["POST"], endpoint="initialize_access_control")
    def initialize_access_control():
        bootstrapped = container.access_service.initialize(current_caller())
        return ok({"bootstrapped": bootstrapped})

    @app.route("/api/access/role", methods=["GET"], endpoint="get_caller_role")
    def get_caller_role():
        return ok({"role": container.access_service.get_caller_role(current_caller()).value})

    @app.route("/api/access/is-admin", methods=["GET"], endpoint="is_caller_admin")
    def is_caller_admin():
        return ok(container.access_service.is_caller_admin(current_caller()))

    @app.route("/api/access/roles/<string:principal>", methods=["PUT"], endpoint="assign_role")
    def assign_role(principal: str):
        role_s = required_field(json_body(), "role")
        try:
            role = Role(role_s)
        except ValueError:
            raise ValidationError("Role must be one of: admin, user, guest")

        container.access_service.assign_role(current_caller(), target=principal, role=role)
        return ok({"principal": principal, "role": role.value})
