from __future__ import annotations

from dataclasses import dataclass

from ..ledger.model import MonthlyRecord


@dataclass(frozen=True)
class MonthSummary:
    """Read-model: derived balance figures of one monthly record."""

    month: int
    year: int
    total_due_cents: int
    total_paid_cents: int
    remaining_cents: int

    @classmethod
    def of(cls, record: MonthlyRecord) -> "MonthSummary":
        return cls(
            month=record.month,
            year=record.year,
            total_due_cents=record.total_due_cents,
            total_paid_cents=record.total_paid_cents,
            remaining_cents=record.remaining_cents,
        )

    def to_dict(self) -> dict:
        return {
            "month": self.month,
            "year": self.year,
            "total_due_cents": self.total_due_cents,
            "total_paid_cents": self.total_paid_cents,
            "remaining_cents": self.remaining_cents,
        }
