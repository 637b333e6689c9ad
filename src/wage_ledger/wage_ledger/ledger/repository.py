from __future__ import annotations

from typing import Callable, Optional, Protocol, Sequence

from .model import MonthlyRecord, Payment


class LedgerRepository(Protocol):
    """Storage for monthly records, partitioned by owner principal.

    Every mutation reads the current record and writes its change in one
    atomic step. The ``build`` callbacks run inside that step against the
    locked record, so they must be pure and may be invoked again on retry.
    """

    def get(self, principal: str, *, month: int, year: int) -> Optional[MonthlyRecord]:
        raise NotImplementedError

    def list_for_owner(self, principal: str) -> Sequence[MonthlyRecord]:
        """Records of one owner ordered by (year, month)."""

        raise NotImplementedError

    def upsert(
        self,
        principal: str,
        *,
        month: int,
        year: int,
        build: Callable[[Optional[MonthlyRecord]], MonthlyRecord],
    ) -> MonthlyRecord:
        """Write the fields returned by ``build(existing)``; stored payments are kept."""

        raise NotImplementedError

    def append_payment(
        self,
        principal: str,
        *,
        month: int,
        year: int,
        build: Callable[[MonthlyRecord], Payment],
    ) -> Optional[Payment]:
        """Append ``build(record)`` to the record; None when the record does not exist."""

        raise NotImplementedError

    def remove_payment(self, principal: str, *, month: int, year: int, date: int) -> bool:
        raise NotImplementedError

    def delete_if_settled(self, principal: str, *, month: int, year: int) -> Optional[MonthlyRecord]:
        """Delete the record only if it is settled.

        Returns the record as seen under the lock (None when absent); the
        caller tells from ``is_settled`` whether it was deleted.
        """

        raise NotImplementedError
