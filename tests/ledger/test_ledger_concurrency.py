from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from src.wage_ledger.wage_ledger.core.exceptions import ConflictError, NotFoundError
from src.wage_ledger.wage_ledger.ledger.service import LedgerService


def test_concurrent_payments_all_recorded_with_unique_dates(container, owner):
    container.ledger_service.create_or_update_record(
        owner, month=6, year=2025, worked_hours=10, hourly_rate_cents=100, transport_allowance_cents=0
    )

    def pay(_):
        return container.ledger_service.add_payment(owner, month=6, year=2025, amount_cents=10)

    with ThreadPoolExecutor(max_workers=8) as pool:
        payments = list(pool.map(pay, range(50)))

    record = container.ledger_service.get_record(owner, month=6, year=2025)
    assert len(record.payments) == 50
    assert len({p.date for p in payments}) == 50
    assert record.total_paid_cents == 500


def test_delete_never_removes_a_record_with_a_racing_payment(container, owner):
    # Due 1000, settled by one payment; racing payments push it out of balance.
    for attempt in range(20):
        month = attempt % 12 + 1
        year = 2030 + attempt // 12
        container.ledger_service.create_or_update_record(
            owner, month=month, year=year, worked_hours=10, hourly_rate_cents=100, transport_allowance_cents=0
        )
        container.ledger_service.add_payment(owner, month=month, year=year, amount_cents=1000)

        def extra_payment():
            return container.ledger_service.add_payment(owner, month=month, year=year, amount_cents=1)

        def delete():
            container.ledger_service.delete_record(owner, month=month, year=year)

        with ThreadPoolExecutor(max_workers=2) as pool:
            pay_future = pool.submit(extra_payment)
            delete_future = pool.submit(delete)

        pay_error = pay_future.exception()
        delete_error = delete_future.exception()

        if delete_error is None:
            # Deleted first: the payment must have found nothing to pay into.
            assert isinstance(pay_error, NotFoundError)
            with pytest.raises(NotFoundError):
                container.ledger_service.get_record(owner, month=month, year=year)
        else:
            # Paid first: the record is unbalanced and survives with both payments.
            assert isinstance(delete_error, ConflictError)
            assert pay_error is None
            record = container.ledger_service.get_record(owner, month=month, year=year)
            assert record.total_paid_cents == 1001


def _second_worker(container, clock):
    # Same store, separate service and per-caller locks: a second app process.
    return LedgerService(container.ledger_repo, container.profile_service, container.access_service, clock=clock)


def test_payments_from_two_workers_are_both_kept(container, owner, clock):
    container.ledger_service.create_or_update_record(
        owner, month=7, year=2025, worked_hours=10, hourly_rate_cents=100, transport_allowance_cents=0
    )
    workers = [container.ledger_service, _second_worker(container, clock)]
    barrier = threading.Barrier(2)

    def pay(args):
        worker, amount = args
        barrier.wait()
        return worker.add_payment(owner, month=7, year=2025, amount_cents=amount)

    with ThreadPoolExecutor(max_workers=2) as pool:
        list(pool.map(pay, [(workers[0], 40), (workers[1], 60)]))

    record = container.ledger_service.get_record(owner, month=7, year=2025)
    assert sorted(p.amount_cents for p in record.payments) == [40, 60]
    assert len({p.date for p in record.payments}) == 2


def test_delete_from_one_worker_never_drops_a_payment_from_another(container, owner, clock):
    other = _second_worker(container, clock)
    for attempt in range(20):
        month = attempt % 12 + 1
        year = 2040 + attempt // 12
        container.ledger_service.create_or_update_record(
            owner, month=month, year=year, worked_hours=1, hourly_rate_cents=100, transport_allowance_cents=0
        )
        container.ledger_service.add_payment(owner, month=month, year=year, amount_cents=100)

        with ThreadPoolExecutor(max_workers=2) as pool:
            pay_future = pool.submit(other.add_payment, owner, month=month, year=year, amount_cents=1)
            delete_future = pool.submit(container.ledger_service.delete_record, owner, month=month, year=year)

        if delete_future.exception() is None:
            assert isinstance(pay_future.exception(), NotFoundError)
        else:
            assert isinstance(delete_future.exception(), ConflictError)
            assert container.ledger_service.get_record(owner, month=month, year=year).total_paid_cents == 101
