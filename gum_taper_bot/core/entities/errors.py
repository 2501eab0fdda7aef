"""Domain errors raised while building or installing a reminder schedule."""

from __future__ import annotations


class SchedulingError(Exception):
    """Base class for everything that can stop a reschedule."""


class InvalidTimeFormat(SchedulingError):
    pass


class WindowTooShort(SchedulingError):
    pass


class MissingProfile(SchedulingError):
    pass


class ConfigurationError(SchedulingError):
    """Bad scheduling parameters, never caused by user input."""


class InvalidSpacing(ConfigurationError):
    pass


class ExcessiveSlotCount(ConfigurationError):
    pass


class RegistrationFailure(SchedulingError):
    """The alarm facility rejected a single slot."""

    def __init__(self, slot_index: int, reason: str) -> None:
        super().__init__(f"slot {slot_index}: {reason}")
        self.slot_index = slot_index
        self.reason = reason
