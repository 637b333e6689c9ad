from __future__ import annotations

import logging

from ..common.validators import require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from .model import Caller
from .repository import RoleRepository

logger = logging.getLogger(__name__)


class AccessControlService:
    """Use case: resolve caller roles and gate operations by role.

    Role resolution for a caller:
    - anonymous principal -> ``guest``
    - explicitly assigned -> that role
    - otherwise ``user`` once an admin exists, ``guest`` before bootstrap
    """

    def __init__(self, roles: RoleRepository):
        self._roles = roles

    def initialize(self, caller: Caller) -> bool:
        """Make ``caller`` the first admin unless an admin already exists.

        Safe to call any number of times; returns True only for the call that
        performed the bootstrap. Anonymous callers never become admin.
        """
        if caller.is_anonymous:
            return False

        claimed = self._roles.claim_admin_if_none(caller.principal)
        if claimed:
            logger.info("Access control bootstrapped; admin=%s", caller.principal)
        return claimed

    def get_caller_role(self, caller: Caller) -> Role:
        if caller.is_anonymous:
            return Role.GUEST

        role = self._roles.get_role(caller.principal)
        if role is not None:
            return role
        return Role.USER if self._roles.has_admin() else Role.GUEST

    def is_caller_admin(self, caller: Caller) -> bool:
        return self.get_caller_role(caller) == Role.ADMIN

    def assign_role(self, caller: Caller, *, target: str, role: Role) -> None:
        self.require_admin(caller)

        target = require_non_empty(target, "Target principal")
        if Caller(principal=target).is_anonymous:
            raise ValidationError("Cannot assign a role to the anonymous principal")
        if not isinstance(role, Role):
            raise ValidationError("Unknown role")

        self._roles.set_role(target, role)
        logger.info("Role assigned by %s: %s -> %s", caller.principal, target, role.value)

    def require_user(self, caller: Caller) -> Role:
        """Allow ``user`` and ``admin``; reject guests and anonymous callers."""
        role = self.get_caller_role(caller)
        if role not in (Role.USER, Role.ADMIN):
            logger.warning("Rejected %s caller %s", role.value, caller.principal)
            raise AuthorizationError("Unauthorized: only users can perform this action")
        return role

    def require_admin(self, caller: Caller) -> None:
        if self.get_caller_role(caller) != Role.ADMIN:
            logger.warning("Rejected non-admin caller %s", caller.principal)
            raise AuthorizationError("Unauthorized: only admins can perform this action")
