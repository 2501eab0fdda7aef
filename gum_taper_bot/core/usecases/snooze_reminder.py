"""Push a fired reminder a few minutes later."""

from __future__ import annotations

import datetime as dt

from gum_taper_bot.core.interfaces.alarm_facility import AbstractAlarmFacility
from gum_taper_bot.core.usecases.generate_reminder_times import MAX_SLOTS
from gum_taper_bot.core.usecases.reschedule_reminders import DEFAULT_MESSAGE

SNOOZE_MINUTES = 5
# Outside the daily range so a reschedule never cancels a pending snooze.
SNOOZE_SLOT_INDEX = MAX_SLOTS


def execute(
    alarm_facility: AbstractAlarmFacility,
    now: dt.datetime | None = None,
    message: str = DEFAULT_MESSAGE,
    minutes: int = SNOOZE_MINUTES,
) -> dt.datetime:
    """Register the snoozed reminder and return when it will fire."""
    now = now or dt.datetime.now()
    fires_at = now + dt.timedelta(minutes=minutes)
    alarm_facility.register(SNOOZE_SLOT_INDEX, fires_at, {"message": message})
    return fires_at
