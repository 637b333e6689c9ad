from __future__ import annotations

import threading
from dataclasses import replace
from typing import Callable, Dict, Optional, Sequence

from .model import MonthlyRecord, Payment
from .repository import LedgerRepository


class InMemoryLedgerRepository(LedgerRepository):
    """principal -> {(year, month) -> record}; records are immutable snapshots.

    One lock guards the whole store, so each mutation is atomic across every
    service instance sharing the repository.
    """

    def __init__(self):
        self._by_owner: Dict[str, Dict[tuple[int, int], MonthlyRecord]] = {}
        self._lock = threading.Lock()

    def get(self, principal: str, *, month: int, year: int) -> Optional[MonthlyRecord]:
        with self._lock:
            return self._by_owner.get(principal, {}).get((year, month))

    def list_for_owner(self, principal: str) -> Sequence[MonthlyRecord]:
        with self._lock:
            owned = self._by_owner.get(principal, {})
            return [owned[k] for k in sorted(owned)]

    def upsert(
        self,
        principal: str,
        *,
        month: int,
        year: int,
        build: Callable[[Optional[MonthlyRecord]], MonthlyRecord],
    ) -> MonthlyRecord:
        with self._lock:
            owned = self._by_owner.setdefault(principal, {})
            existing = owned.get((year, month))
            record = build(existing)
            record = replace(record, month=month, year=year, payments=existing.payments if existing else ())
            owned[(year, month)] = record
            return record

    def append_payment(
        self,
        principal: str,
        *,
        month: int,
        year: int,
        build: Callable[[MonthlyRecord], Payment],
    ) -> Optional[Payment]:
        with self._lock:
            owned = self._by_owner.get(principal, {})
            record = owned.get((year, month))
            if not record:
                return None
            payment = build(record)
            owned[(year, month)] = record.with_payment(payment)
            return payment

    def remove_payment(self, principal: str, *, month: int, year: int, date: int) -> bool:
        with self._lock:
            owned = self._by_owner.get(principal, {})
            record = owned.get((year, month))
            if not record or record.find_payment(date) is None:
                return False
            owned[(year, month)] = record.without_payment(date)
            return True

    def delete_if_settled(self, principal: str, *, month: int, year: int) -> Optional[MonthlyRecord]:
        with self._lock:
            owned = self._by_owner.get(principal, {})
            record = owned.get((year, month))
            if record and record.is_settled:
                del owned[(year, month)]
            return record
