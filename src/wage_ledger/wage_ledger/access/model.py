from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.constants import ANONYMOUS_PRINCIPAL


@dataclass(frozen=True)
class Caller:
    """Opaque caller principal supplied by the identity provider on every call.

    The principal is the ownership key for profiles and monthly records.
    """

    principal: str

    @classmethod
    def from_raw(cls, value: Optional[str]) -> "Caller":
        value = (value or "").strip()
        return cls(principal=value or ANONYMOUS_PRINCIPAL)

    @property
    def is_anonymous(self) -> bool:
        return self.principal == ANONYMOUS_PRINCIPAL


ANONYMOUS = Caller(principal=ANONYMOUS_PRINCIPAL)
