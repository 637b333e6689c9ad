from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from .access.memory_role_repository import InMemoryRoleRepository
from .access.mysql_role_repository import MySQLRoleRepository
from .access.repository import RoleRepository
from .access.service import AccessControlService
from .common.datetime_utils import now_ns
from .common.locks import KeyedLocks
from .database.connection import DBConfig, DatabaseConnection
from .ledger.memory_ledger_repository import InMemoryLedgerRepository
from .ledger.mysql_ledger_repository import MySQLLedgerRepository
from .ledger.repository import LedgerRepository
from .ledger.service import LedgerService
from .profiles.memory_profile_repository import InMemoryProfileRepository
from .profiles.mysql_profile_repository import MySQLProfileRepository
from .profiles.repository import ProfileRepository
from .profiles.service import ProfileService
from .reports.service import LedgerReportService

BACKENDS = ("memory", "mysql")


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    roles_repo: RoleRepository
    profiles_repo: ProfileRepository
    ledger_repo: LedgerRepository

    access_service: AccessControlService
    profile_service: ProfileService
    ledger_service: LedgerService
    report_service: LedgerReportService


def build_container(
    *,
    backend: str = "memory",
    db_config: Optional[dict] = None,
    clock: Callable[[], int] = now_ns,
) -> Container:
    if backend not in BACKENDS:
        raise ValueError(f"Unknown storage backend: {backend!r} (expected one of {BACKENDS})")

    conn: Optional[DatabaseConnection] = None
    if backend == "mysql":
        if not db_config:
            raise ValueError("mysql backend requires db_config")
        conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
        roles_repo = MySQLRoleRepository(conn)
        profiles_repo = MySQLProfileRepository(conn)
        ledger_repo = MySQLLedgerRepository(conn)
    else:
        roles_repo = InMemoryRoleRepository()
        profiles_repo = InMemoryProfileRepository()
        ledger_repo = InMemoryLedgerRepository()

    access_service = AccessControlService(roles_repo)
    profile_service = ProfileService(profiles_repo, access_service)
    ledger_service = LedgerService(
        ledger_repo,
        profile_service,
        access_service,
        locks=KeyedLocks(),
        clock=clock,
    )
    report_service = LedgerReportService(ledger_repo, access_service)

    return Container(
        conn=conn,
        roles_repo=roles_repo,
        profiles_repo=profiles_repo,
        ledger_repo=ledger_repo,
        access_service=access_service,
        profile_service=profile_service,
        ledger_service=ledger_service,
        report_service=report_service,
    )
