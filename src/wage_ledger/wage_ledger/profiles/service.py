from __future__ import annotations

import logging
from typing import Optional

from ..access.model import Caller
from ..access.service import AccessControlService
from ..common.validators import require_non_empty, require_non_negative
from .model import UserProfile
from .repository import ProfileRepository

logger = logging.getLogger(__name__)


class ProfileService:
    """Use case: callers manage their own profile; admins may read any profile."""

    def __init__(self, profiles: ProfileRepository, access: AccessControlService):
        self._profiles = profiles
        self._access = access

    def save_caller_profile(
        self,
        caller: Caller,
        *,
        name: str,
        default_hourly_rate_cents: int,
        default_transport_allowance_cents: int,
    ) -> UserProfile:
        self._access.require_user(caller)

        # Validate everything before touching the store.
        profile = UserProfile(
            name=require_non_empty(name, "Name"),
            default_hourly_rate_cents=require_non_negative(default_hourly_rate_cents, "Default hourly rate"),
            default_transport_allowance_cents=require_non_negative(
                default_transport_allowance_cents, "Default transport allowance"
            ),
        )
        self._profiles.save(caller.principal, profile)
        logger.info("Profile saved for %s", caller.principal)
        return profile

    def get_caller_profile(self, caller: Caller) -> Optional[UserProfile]:
        self._access.require_user(caller)
        return self._profiles.get(caller.principal)

    def get_user_profile(self, caller: Caller, principal: str) -> Optional[UserProfile]:
        if principal == caller.principal:
            self._access.require_user(caller)
        else:
            self._access.require_admin(caller)
        return self._profiles.get(principal)

    def defaults_for(self, principal: str) -> tuple[int, int]:
        """(hourly rate, transport allowance) used when creating a record; zeros without a profile."""
        profile = self._profiles.get(principal)
        if not profile:
            return 0, 0
        return profile.default_hourly_rate_cents, profile.default_transport_allowance_cents
