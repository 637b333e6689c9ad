from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from ..core.enums import PaymentType


@dataclass(frozen=True)
class Payment:
    """One payment against a monthly record.

    ``date`` is nanoseconds since the epoch and doubles as the payment's key
    inside its record.
    """

    date: int
    amount_cents: int
    payment_type: PaymentType

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "amount_cents": self.amount_cents,
            "payment_type": self.payment_type.value,
        }


@dataclass(frozen=True)
class MonthlyRecord:
    """Work done in one (month, year) and the payments received for it.

    Payments keep append order. Totals are derived on every access.
    """

    month: int
    year: int
    worked_hours: int
    hourly_rate_cents: int
    transport_allowance_cents: int
    payments: tuple[Payment, ...] = ()

    @property
    def key(self) -> tuple[int, int]:
        return self.year, self.month

    @property
    def total_due_cents(self) -> int:
        return self.worked_hours * self.hourly_rate_cents + self.transport_allowance_cents

    @property
    def total_paid_cents(self) -> int:
        return sum(p.amount_cents for p in self.payments)

    @property
    def remaining_cents(self) -> int:
        return self.total_due_cents - self.total_paid_cents

    @property
    def is_settled(self) -> bool:
        return self.remaining_cents == 0

    def find_payment(self, date: int) -> Optional[Payment]:
        for p in self.payments:
            if p.date == date:
                return p
        return None

    def next_payment_date(self, now: int) -> int:
        """First timestamp >= ``now`` that is later than every existing payment.

        Keeps payment dates strictly increasing, hence unique, even when two
        appends land in the same clock tick.
        """
        if not self.payments:
            return now
        return max(now, max(p.date for p in self.payments) + 1)

    def with_payment(self, payment: Payment) -> "MonthlyRecord":
        return replace(self, payments=self.payments + (payment,))

    def without_payment(self, date: int) -> "MonthlyRecord":
        return replace(self, payments=tuple(p for p in self.payments if p.date != date))

    def to_dict(self) -> dict:
        return {
            "month": self.month,
            "year": self.year,
            "worked_hours": self.worked_hours,
            "hourly_rate_cents": self.hourly_rate_cents,
            "transport_allowance_cents": self.transport_allowance_cents,
            "total_due_cents": self.total_due_cents,
            "payments": [p.to_dict() for p in self.payments],
        }


def default_payment_type(has_existing_payments: bool) -> PaymentType:
    """Client-side default: the first payment of a month goes by bank, later ones in cash."""
    return PaymentType.CASH if has_existing_payments else PaymentType.BANK
