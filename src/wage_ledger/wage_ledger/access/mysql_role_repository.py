from __future__ import annotations

from typing import Optional

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .repository import RoleRepository


class MySQLRoleRepository(RoleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_role(self, principal: str) -> Optional[Role]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT role FROM user_roles WHERE principal=%s", (principal,))
            row = fetchone(cur)
            return Role(row["role"]) if row else None

    def set_role(self, principal: str, role: Role) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO user_roles(principal, role)
                VALUES(%s,%s)
                ON DUPLICATE KEY UPDATE role=VALUES(role)
                """,
                (principal, role.value),
            )

    def has_admin(self) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT 1 AS found FROM user_roles WHERE role='admin' LIMIT 1")
            return fetchone(cur) is not None

    def claim_admin_if_none(self, principal: str) -> bool:
        # The locking read and the insert share one serializable transaction,
        # so two concurrent bootstraps cannot both see "no admin".
        with db_cursor(self._conn_factory, serializable=True) as (_, cur):
            cur.execute("SELECT principal FROM user_roles WHERE role='admin' LIMIT 1 FOR UPDATE")
            if fetchone(cur):
                return False
            cur.execute(
                """
                INSERT INTO user_roles(principal, role)
                VALUES(%s,'admin')
                ON DUPLICATE KEY UPDATE role='admin'
                """,
                (principal,),
            )
            return True
