from __future__ import annotations

from dataclasses import replace
from typing import Callable, Optional, Sequence

from ..core.enums import PaymentType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, retry_on_deadlock
from .model import MonthlyRecord, Payment
from .repository import LedgerRepository

_SELECT_RECORD = """
    SELECT month, year, worked_hours, hourly_rate_cents, transport_allowance_cents
    FROM monthly_records
    WHERE principal=%s AND year=%s AND month=%s
"""


def _to_payment(row: dict) -> Payment:
    return Payment(
        date=int(row["paid_at"]),
        amount_cents=int(row["amount_cents"]),
        payment_type=PaymentType(row["payment_type"]),
    )


def _to_record(row: dict, payments: Sequence[Payment]) -> MonthlyRecord:
    return MonthlyRecord(
        month=int(row["month"]),
        year=int(row["year"]),
        worked_hours=int(row["worked_hours"]),
        hourly_rate_cents=int(row["hourly_rate_cents"]),
        transport_allowance_cents=int(row["transport_allowance_cents"]),
        payments=tuple(payments),
    )


def _read_record(cur, key: tuple, *, for_update: bool = False) -> Optional[MonthlyRecord]:
    # FOR UPDATE locks the record row; every writer of its payments takes that lock first.
    cur.execute(_SELECT_RECORD + (" FOR UPDATE" if for_update else ""), key)
    row = fetchone(cur)
    if not row:
        return None

    cur.execute(
        """
        SELECT paid_at, amount_cents, payment_type
        FROM payments
        WHERE principal=%s AND year=%s AND month=%s
        ORDER BY seq ASC
        """,
        key,
    )
    return _to_record(row, [_to_payment(p) for p in fetchall(cur)])


class MySQLLedgerRepository(LedgerRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, principal: str, *, month: int, year: int) -> Optional[MonthlyRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            return _read_record(cur, (principal, int(year), int(month)))

    def list_for_owner(self, principal: str) -> Sequence[MonthlyRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT month, year, worked_hours, hourly_rate_cents, transport_allowance_cents
                FROM monthly_records
                WHERE principal=%s
                ORDER BY year ASC, month ASC
                """,
                (principal,),
            )
            rows = fetchall(cur)

            cur.execute(
                """
                SELECT year, month, paid_at, amount_cents, payment_type
                FROM payments
                WHERE principal=%s
                ORDER BY year ASC, month ASC, seq ASC
                """,
                (principal,),
            )
            payments: dict[tuple[int, int], list[Payment]] = {}
            for p in fetchall(cur):
                payments.setdefault((int(p["year"]), int(p["month"])), []).append(_to_payment(p))

            return [_to_record(r, payments.get((int(r["year"]), int(r["month"])), [])) for r in rows]

    @retry_on_deadlock
    def upsert(
        self,
        principal: str,
        *,
        month: int,
        year: int,
        build: Callable[[Optional[MonthlyRecord]], MonthlyRecord],
    ) -> MonthlyRecord:
        key = (principal, int(year), int(month))
        with db_cursor(self._conn_factory, serializable=True) as (_, cur):
            existing = _read_record(cur, key, for_update=True)
            record = build(existing)
            cur.execute(
                """
                INSERT INTO monthly_records(principal, year, month, worked_hours, hourly_rate_cents, transport_allowance_cents)
                VALUES(%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    worked_hours=VALUES(worked_hours),
                    hourly_rate_cents=VALUES(hourly_rate_cents),
                    transport_allowance_cents=VALUES(transport_allowance_cents)
                """,
                key + (record.worked_hours, record.hourly_rate_cents, record.transport_allowance_cents),
            )
            return replace(record, month=int(month), year=int(year), payments=existing.payments if existing else ())

    @retry_on_deadlock
    def append_payment(
        self,
        principal: str,
        *,
        month: int,
        year: int,
        build: Callable[[MonthlyRecord], Payment],
    ) -> Optional[Payment]:
        key = (principal, int(year), int(month))
        with db_cursor(self._conn_factory, serializable=True) as (_, cur):
            record = _read_record(cur, key, for_update=True)
            if not record:
                return None
            payment = build(record)

            cur.execute(
                "SELECT COALESCE(MAX(seq), 0) AS last_seq FROM payments WHERE principal=%s AND year=%s AND month=%s",
                key,
            )
            seq = int(fetchone(cur)["last_seq"]) + 1
            cur.execute(
                """
                INSERT INTO payments(principal, year, month, seq, paid_at, amount_cents, payment_type)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                key + (seq, payment.date, payment.amount_cents, payment.payment_type.value),
            )
            return payment

    @retry_on_deadlock
    def remove_payment(self, principal: str, *, month: int, year: int, date: int) -> bool:
        key = (principal, int(year), int(month))
        with db_cursor(self._conn_factory, serializable=True) as (_, cur):
            cur.execute(_SELECT_RECORD + " FOR UPDATE", key)
            if not fetchone(cur):
                return False
            cur.execute(
                "DELETE FROM payments WHERE principal=%s AND year=%s AND month=%s AND paid_at=%s",
                key + (int(date),),
            )
            return cur.rowcount > 0

    @retry_on_deadlock
    def delete_if_settled(self, principal: str, *, month: int, year: int) -> Optional[MonthlyRecord]:
        key = (principal, int(year), int(month))
        with db_cursor(self._conn_factory, serializable=True) as (_, cur):
            record = _read_record(cur, key, for_update=True)
            if record and record.is_settled:
                # Payments go with it (ON DELETE CASCADE).
                cur.execute("DELETE FROM monthly_records WHERE principal=%s AND year=%s AND month=%s", key)
            return record
