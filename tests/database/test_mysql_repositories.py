from __future__ import annotations

from dataclasses import replace

import pytest
from mysql.connector import Error as MySQLError
from mysql.connector import errorcode

from src.wage_ledger.wage_ledger.access.mysql_role_repository import MySQLRoleRepository
from src.wage_ledger.wage_ledger.core.enums import PaymentType
from src.wage_ledger.wage_ledger.ledger.model import Payment
from src.wage_ledger.wage_ledger.ledger.mysql_ledger_repository import MySQLLedgerRepository


class FakeCursor:
    def __init__(self, results):
        self._results = list(results)
        self.executed = []
        self.rowcount = 0
        self.closed = False

    def execute(self, sql, params=None):
        self.executed.append((" ".join(sql.split()), params))

    def executemany(self, sql, rows):
        self.executed.append((" ".join(sql.split()), list(rows)))

    def fetchone(self):
        return self._results.pop(0) if self._results else None

    def fetchall(self):
        return self._results.pop(0) if self._results else []

    def close(self):
        self.closed = True


class FakeConnection:
    def __init__(self, cursor):
        self.cursor_obj = cursor
        self.isolation_level = None
        self.committed = False
        self.rolled_back = False

    def start_transaction(self, isolation_level=None):
        self.isolation_level = isolation_level

    def cursor(self, dictionary=False):
        return self.cursor_obj

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        pass


class FakeConnectionFactory:
    def __init__(self, *results):
        self.cursor = FakeCursor(results)
        self.conn = FakeConnection(self.cursor)
        self.connects = 0

    def connect(self, with_database=True):
        self.connects += 1
        return self.conn


RECORD_ROW = {"month": 3, "year": 2025, "worked_hours": 2, "hourly_rate_cents": 10, "transport_allowance_cents": 5}


def test_append_payment_locks_record_and_inserts_next_seq_in_one_transaction():
    factory = FakeConnectionFactory(
        RECORD_ROW,
        [{"paid_at": 7, "amount_cents": 5, "payment_type": "bank"}],
        {"last_seq": 1},
    )
    seen = []

    def build(record):
        seen.append(record)
        return Payment(date=record.next_payment_date(7), amount_cents=20, payment_type=PaymentType.CASH)

    payment = MySQLLedgerRepository(factory).append_payment("p1", month=3, year=2025, build=build)

    assert payment == Payment(date=8, amount_cents=20, payment_type=PaymentType.CASH)
    assert seen[0].total_paid_cents == 5
    lock, _, _, insert = factory.cursor.executed
    assert lock[0].endswith("FOR UPDATE")
    assert lock[1] == ("p1", 2025, 3)
    assert insert[0].startswith("INSERT INTO payments")
    assert insert[1] == ("p1", 2025, 3, 2, 8, 20, "cash")
    assert not any(sql.startswith("DELETE") for sql, _ in factory.cursor.executed)
    assert factory.connects == 1
    assert factory.conn.isolation_level == "SERIALIZABLE"
    assert factory.conn.committed


def test_append_payment_to_missing_record_writes_nothing():
    factory = FakeConnectionFactory()

    def build(record):
        raise AssertionError("build must not run without a record")

    assert MySQLLedgerRepository(factory).append_payment("p1", month=3, year=2025, build=build) is None
    assert len(factory.cursor.executed) == 1


def test_delete_if_settled_keeps_unbalanced_record():
    factory = FakeConnectionFactory(RECORD_ROW, [{"paid_at": 7, "amount_cents": 24, "payment_type": "bank"}])

    record = MySQLLedgerRepository(factory).delete_if_settled("p1", month=3, year=2025)

    assert record.remaining_cents == 1
    assert factory.cursor.executed[0][0].endswith("FOR UPDATE")
    assert not any(sql.startswith("DELETE") for sql, _ in factory.cursor.executed)
    assert factory.connects == 1


def test_delete_if_settled_deletes_under_the_same_lock():
    factory = FakeConnectionFactory(RECORD_ROW, [{"paid_at": 7, "amount_cents": 25, "payment_type": "bank"}])

    record = MySQLLedgerRepository(factory).delete_if_settled("p1", month=3, year=2025)

    assert record.is_settled
    lock, _, delete = factory.cursor.executed
    assert lock[0].endswith("FOR UPDATE")
    assert delete == ("DELETE FROM monthly_records WHERE principal=%s AND year=%s AND month=%s", ("p1", 2025, 3))
    assert factory.connects == 1
    assert factory.conn.committed


def test_upsert_writes_fields_and_keeps_payments():
    factory = FakeConnectionFactory(RECORD_ROW, [{"paid_at": 7, "amount_cents": 5, "payment_type": "cash"}])

    record = MySQLLedgerRepository(factory).upsert(
        "p1", month=3, year=2025, build=lambda existing: replace(existing, worked_hours=4)
    )

    assert record.worked_hours == 4
    assert record.total_paid_cents == 5
    upsert = factory.cursor.executed[-1]
    assert upsert[0].startswith("INSERT INTO monthly_records")
    assert upsert[1] == ("p1", 2025, 3, 4, 10, 5)
    assert not any(sql.startswith("DELETE") for sql, _ in factory.cursor.executed)


def test_remove_payment_reports_whether_a_row_went_away():
    factory = FakeConnectionFactory(RECORD_ROW)
    factory.cursor.rowcount = 1

    assert MySQLLedgerRepository(factory).remove_payment("p1", month=3, year=2025, date=7) is True
    assert factory.cursor.executed[-1][1] == ("p1", 2025, 3, 7)

    assert MySQLLedgerRepository(FakeConnectionFactory()).remove_payment("p1", month=3, year=2025, date=7) is False


def test_get_assembles_record_with_payments():
    factory = FakeConnectionFactory(
        {"month": 3, "year": 2025, "worked_hours": 2, "hourly_rate_cents": 10, "transport_allowance_cents": 5},
        [{"paid_at": 7, "amount_cents": 25, "payment_type": "cash"}],
    )

    record = MySQLLedgerRepository(factory).get("p1", month=3, year=2025)

    assert record.total_due_cents == 25
    assert record.payments == (Payment(date=7, amount_cents=25, payment_type=PaymentType.CASH),)
    assert record.is_settled


def test_get_missing_record_returns_none():
    assert MySQLLedgerRepository(FakeConnectionFactory()).get("p1", month=3, year=2025) is None


def test_failed_statement_rolls_back():
    factory = FakeConnectionFactory()

    def boom(sql, params=None):
        raise RuntimeError("db down")

    factory.cursor.execute = boom

    with pytest.raises(RuntimeError):
        MySQLLedgerRepository(factory).delete_if_settled("p1", month=3, year=2025)

    assert factory.conn.rolled_back
    assert not factory.conn.committed


def test_claim_admin_when_one_exists_inserts_nothing():
    factory = FakeConnectionFactory({"principal": "someone"})

    assert MySQLRoleRepository(factory).claim_admin_if_none("p1") is False
    assert len(factory.cursor.executed) == 1
    assert factory.cursor.executed[0][0].endswith("FOR UPDATE")


def test_claim_admin_when_none_exists():
    factory = FakeConnectionFactory()

    assert MySQLRoleRepository(factory).claim_admin_if_none("p1") is True
    assert factory.cursor.executed[1][1] == ("p1",)


def test_deadlock_victim_is_retried():
    factory = FakeConnectionFactory()
    real_execute = factory.cursor.execute
    failures = [MySQLError(msg="Deadlock found", errno=errorcode.ER_LOCK_DEADLOCK)]

    def flaky(sql, params=None):
        if failures:
            raise failures.pop()
        real_execute(sql, params)

    factory.cursor.execute = flaky

    assert MySQLLedgerRepository(factory).delete_if_settled("p1", month=3, year=2025) is None
    assert factory.connects == 2
    assert factory.conn.rolled_back
