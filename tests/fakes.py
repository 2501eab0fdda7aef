"""Test doubles for the profile store and alarm facility."""

import datetime as dt

from gum_taper_bot.core.entities.errors import RegistrationFailure
from gum_taper_bot.core.entities.profile import UserProfile


class FakeAlarmFacility:
    """Records registrations keyed by slot index, like a real alarm manager."""

    def __init__(self, reject: set[int] | None = None) -> None:
        self.installed: dict[int, tuple[dt.datetime, dict[str, str]]] = {}
        self.reject = reject or set()
        self.calls: list[tuple[str, int]] = []

    def cancel(self, slot_index: int) -> None:
        self.calls.append(("cancel", slot_index))
        self.installed.pop(slot_index, None)

    def register(self, slot_index: int, fires_at: dt.datetime, payload: dict[str, str]) -> None:
        self.calls.append(("register", slot_index))
        if slot_index in self.reject:
            raise RegistrationFailure(slot_index, "quota exceeded")
        self.installed[slot_index] = (fires_at, dict(payload))


class MemoryProfileStore:
    def __init__(self, profile: UserProfile | None = None) -> None:
        self.profile = profile

    def read(self) -> UserProfile | None:
        return self.profile

    def write(self, profile: UserProfile) -> None:
        self.profile = profile

    def clear(self) -> None:
        self.profile = None
