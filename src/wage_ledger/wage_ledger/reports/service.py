from __future__ import annotations

from typing import Sequence

from ..access.model import Caller
from ..access.service import AccessControlService
from ..common.validators import require_month, require_year
from ..core.exceptions import NotFoundError
from ..ledger.model import MonthlyRecord
from ..ledger.repository import LedgerRepository
from .model import MonthSummary


class LedgerReportService:
    """Read-only views over the caller's ledger.

    Summaries are computed from the stored records on every call; nothing is cached.
    """

    def __init__(self, records: LedgerRepository, access: AccessControlService):
        self._records = records
        self._access = access

    def get_all_records(self, caller: Caller) -> Sequence[MonthlyRecord]:
        self._access.require_user(caller)
        return list(self._records.list_for_owner(caller.principal))

    def get_all_summaries(self, caller: Caller) -> Sequence[MonthSummary]:
        return [MonthSummary.of(r) for r in self.get_all_records(caller)]

    def get_summary(self, caller: Caller, *, month: int, year: int) -> MonthSummary:
        self._access.require_user(caller)
        month = require_month(month)
        year = require_year(year)

        record = self._records.get(caller.principal, month=month, year=year)
        if not record:
            raise NotFoundError(f"No record for {month:02d}/{year}")
        return MonthSummary.of(record)
