from __future__ import annotations

import threading
from typing import Dict, Optional

from .model import UserProfile
from .repository import ProfileRepository


class InMemoryProfileRepository(ProfileRepository):
    def __init__(self):
        self._profiles: Dict[str, UserProfile] = {}
        self._lock = threading.Lock()

    def get(self, principal: str) -> Optional[UserProfile]:
        with self._lock:
            return self._profiles.get(principal)

    def save(self, principal: str, profile: UserProfile) -> None:
        with self._lock:
            self._profiles[principal] = profile
