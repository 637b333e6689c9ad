from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import UserProfile
from .repository import ProfileRepository


class MySQLProfileRepository(ProfileRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, principal: str) -> Optional[UserProfile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT name, default_hourly_rate_cents, default_transport_allowance_cents
                FROM user_profiles
                WHERE principal=%s
                """,
                (principal,),
            )
            row = fetchone(cur)
            if not row:
                return None
            return UserProfile(
                name=row["name"],
                default_hourly_rate_cents=int(row["default_hourly_rate_cents"]),
                default_transport_allowance_cents=int(row["default_transport_allowance_cents"]),
            )

    def save(self, principal: str, profile: UserProfile) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO user_profiles(principal, name, default_hourly_rate_cents, default_transport_allowance_cents)
                VALUES(%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    name=VALUES(name),
                    default_hourly_rate_cents=VALUES(default_hourly_rate_cents),
                    default_transport_allowance_cents=VALUES(default_transport_allowance_cents)
                """,
                (
                    principal,
                    profile.name,
                    profile.default_hourly_rate_cents,
                    profile.default_transport_allowance_cents,
                ),
            )
