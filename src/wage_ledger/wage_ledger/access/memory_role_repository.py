from __future__ import annotations

import threading
from typing import Dict, Optional

from ..core.enums import Role
from .repository import RoleRepository


class InMemoryRoleRepository(RoleRepository):
    def __init__(self, roles: Optional[Dict[str, Role]] = None):
        self._roles: Dict[str, Role] = dict(roles or {})
        self._lock = threading.Lock()

    def get_role(self, principal: str) -> Optional[Role]:
        with self._lock:
            return self._roles.get(principal)

    def set_role(self, principal: str, role: Role) -> None:
        with self._lock:
            self._roles[principal] = role

    def has_admin(self) -> bool:
        with self._lock:
            return Role.ADMIN in self._roles.values()

    def claim_admin_if_none(self, principal: str) -> bool:
        with self._lock:
            if Role.ADMIN in self._roles.values():
                return False
            self._roles[principal] = Role.ADMIN
            return True
