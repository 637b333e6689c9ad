from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Caller role used for authorization."""

    ADMIN = "admin"
    USER = "user"
    GUEST = "guest"


class PaymentType(str, Enum):
    BANK = "bank"
    CASH = "cash"
