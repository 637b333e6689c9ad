from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Optional, Sequence

from ..access.model import Caller
from ..access.service import AccessControlService
from ..common.datetime_utils import now_ns
from ..common.locks import KeyedLocks
from ..common.validators import require_int, require_month, require_non_negative, require_positive, require_year
from ..core.enums import PaymentType
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..profiles.service import ProfileService
from .model import MonthlyRecord, Payment, default_payment_type
from .repository import LedgerRepository

logger = logging.getLogger(__name__)


def _coerce_payment_type(value) -> PaymentType:
    if isinstance(value, PaymentType):
        return value
    try:
        return PaymentType(value)
    except ValueError:
        raise ValidationError("Payment type must be 'bank' or 'cash'")


class LedgerService:
    """Use case: maintain the caller's monthly records and their payments.

    Each mutation is a single repository step that checks and writes under the
    store's own lock or transaction, so "is the balance settled? then delete"
    never interleaves with a payment, even across processes. The per-caller
    lock additionally serializes one owner's calls within this process.
    """

    def __init__(
        self,
        records: LedgerRepository,
        profiles: ProfileService,
        access: AccessControlService,
        *,
        locks: Optional[KeyedLocks] = None,
        clock: Callable[[], int] = now_ns,
    ):
        self._records = records
        self._profiles = profiles
        self._access = access
        self._locks = locks or KeyedLocks()
        self._clock = clock

    def _require(self, caller: Caller, *, month: int, year: int) -> MonthlyRecord:
        record = self._records.get(caller.principal, month=month, year=year)
        if not record:
            raise NotFoundError(f"No record for {month:02d}/{year}")
        return record

    def create_or_update_record(
        self,
        caller: Caller,
        *,
        month: int,
        year: int,
        worked_hours: int,
        hourly_rate_cents: Optional[int] = None,
        transport_allowance_cents: Optional[int] = None,
    ) -> MonthlyRecord:
        """Upsert the record for (month, year).

        ``None`` for rate/allowance means "not supplied": a new record takes
        the caller's profile defaults, an existing record keeps its values.
        """
        self._access.require_user(caller)

        month = require_month(month)
        year = require_year(year)
        worked_hours = require_non_negative(worked_hours, "Worked hours")
        if hourly_rate_cents is not None:
            hourly_rate_cents = require_non_negative(hourly_rate_cents, "Hourly rate")
        if transport_allowance_cents is not None:
            transport_allowance_cents = require_non_negative(transport_allowance_cents, "Transport allowance")

        default_rate, default_allowance = self._profiles.defaults_for(caller.principal)
        created = False

        def build(existing: Optional[MonthlyRecord]) -> MonthlyRecord:
            nonlocal created
            created = existing is None
            if existing:
                return replace(
                    existing,
                    worked_hours=worked_hours,
                    hourly_rate_cents=(
                        existing.hourly_rate_cents if hourly_rate_cents is None else hourly_rate_cents
                    ),
                    transport_allowance_cents=(
                        existing.transport_allowance_cents
                        if transport_allowance_cents is None
                        else transport_allowance_cents
                    ),
                )
            return MonthlyRecord(
                month=month,
                year=year,
                worked_hours=worked_hours,
                hourly_rate_cents=default_rate if hourly_rate_cents is None else hourly_rate_cents,
                transport_allowance_cents=(
                    default_allowance if transport_allowance_cents is None else transport_allowance_cents
                ),
            )

        with self._locks.hold(caller.principal):
            record = self._records.upsert(caller.principal, month=month, year=year, build=build)

        logger.info(
            "%s record %02d/%d for %s (due=%d)",
            "Created" if created else "Updated",
            month,
            year,
            caller.principal,
            record.total_due_cents,
        )
        return record

    def get_record(self, caller: Caller, *, month: int, year: int) -> MonthlyRecord:
        self._access.require_user(caller)
        return self._require(caller, month=require_month(month), year=require_year(year))

    def get_payments(self, caller: Caller, *, month: int, year: int) -> Sequence[Payment]:
        return list(self.get_record(caller, month=month, year=year).payments)

    def has_existing_payments(self, caller: Caller, *, month: int, year: int) -> bool:
        self._access.require_user(caller)
        record = self._records.get(caller.principal, month=require_month(month), year=require_year(year))
        return bool(record and record.payments)

    def add_payment(
        self,
        caller: Caller,
        *,
        month: int,
        year: int,
        amount_cents: int,
        payment_type: PaymentType | str | None = None,
    ) -> Payment:
        """Append a payment dated "now".

        Without an explicit ``payment_type`` the client default applies
        (see :func:`default_payment_type`).
        """
        self._access.require_user(caller)

        month = require_month(month)
        year = require_year(year)
        amount_cents = require_positive(amount_cents, "Payment amount")
        if payment_type is not None:
            payment_type = _coerce_payment_type(payment_type)

        def build(record: MonthlyRecord) -> Payment:
            return Payment(
                date=record.next_payment_date(self._clock()),
                amount_cents=amount_cents,
                payment_type=payment_type or default_payment_type(bool(record.payments)),
            )

        with self._locks.hold(caller.principal):
            payment = self._records.append_payment(caller.principal, month=month, year=year, build=build)
        if payment is None:
            raise NotFoundError(f"No record for {month:02d}/{year}")

        logger.info(
            "Payment %d (%s) added to %02d/%d for %s",
            amount_cents,
            payment.payment_type.value,
            month,
            year,
            caller.principal,
        )
        return payment

    def delete_payment(self, caller: Caller, *, month: int, year: int, payment_date: int) -> None:
        self._access.require_user(caller)

        month = require_month(month)
        year = require_year(year)
        payment_date = require_int(payment_date, "Payment date")

        with self._locks.hold(caller.principal):
            removed = self._records.remove_payment(caller.principal, month=month, year=year, date=payment_date)
        if not removed:
            raise NotFoundError("Payment not found")

        logger.info("Payment %d removed from %02d/%d for %s", payment_date, month, year, caller.principal)

    def delete_record(self, caller: Caller, *, month: int, year: int) -> None:
        """Delete a record; allowed only when payments equal the amount due exactly."""
        self._access.require_user(caller)

        month = require_month(month)
        year = require_year(year)

        with self._locks.hold(caller.principal):
            record = self._records.delete_if_settled(caller.principal, month=month, year=year)
        if not record:
            raise NotFoundError(f"No record for {month:02d}/{year}")
        if not record.is_settled:
            raise ConflictError(f"Cannot delete month with unpaid balance (remaining {record.remaining_cents})")

        logger.info("Deleted settled record %02d/%d for %s", month, year, caller.principal)
