from __future__ import annotations

from typing import Optional, Protocol

from ..core.enums import Role


class RoleRepository(Protocol):
    """Repository interface for principal -> role assignments."""

    def get_role(self, principal: str) -> Optional[Role]:
        raise NotImplementedError

    def set_role(self, principal: str, role: Role) -> None:
        raise NotImplementedError

    def has_admin(self) -> bool:
        raise NotImplementedError

    def claim_admin_if_none(self, principal: str) -> bool:
        """Atomically assign ``admin`` to ``principal`` if no admin exists yet.

        Returns True when the assignment happened.
        """

        raise NotImplementedError
