from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UserProfile:
    """Per-principal profile; the defaults feed new monthly records."""

    name: str
    default_hourly_rate_cents: int = 0
    default_transport_allowance_cents: int = 0

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "default_hourly_rate_cents": self.default_hourly_rate_cents,
            "default_transport_allowance_cents": self.default_transport_allowance_cents,
        }
