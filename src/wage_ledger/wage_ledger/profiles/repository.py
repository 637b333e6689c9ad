from __future__ import annotations

from typing import Optional, Protocol

from .model import UserProfile


class ProfileRepository(Protocol):
    def get(self, principal: str) -> Optional[UserProfile]:
        """Return the profile or None when it was never saved."""

        raise NotImplementedError

    def save(self, principal: str, profile: UserProfile) -> None:
        """Create or overwrite all profile fields at once."""

        raise NotImplementedError
