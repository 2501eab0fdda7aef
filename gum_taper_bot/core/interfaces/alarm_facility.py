"""Interface to whatever fires wall-clock callbacks (OS alarms, a job scheduler)."""

from __future__ import annotations

import abc
import datetime as dt
from typing import Protocol


class AbstractAlarmFacility(Protocol):
    """Alarm registration contract.

    ``cancel`` of an unknown index must be a no-op. ``register`` raises
    ``RegistrationFailure`` when the underlying facility refuses the slot.
    """

    @abc.abstractmethod
    def cancel(self, slot_index: int) -> None: ...

    @abc.abstractmethod
    def register(self, slot_index: int, fires_at: dt.datetime, payload: dict[str, str]) -> None: ...
