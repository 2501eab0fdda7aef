"""Replace every installed reminder with a fresh schedule for today."""

from __future__ import annotations

import datetime as dt
import logging
import threading

from gum_taper_bot.core.entities.errors import MissingProfile, RegistrationFailure, WindowTooShort
from gum_taper_bot.core.entities.reminder import ReminderSlot, RescheduleResult, RescheduleTrigger
from gum_taper_bot.core.interfaces.alarm_facility import AbstractAlarmFacility
from gum_taper_bot.core.interfaces.repositories.profile_store import AbstractProfileStore
from gum_taper_bot.core.usecases import generate_reminder_times, interval_policy, program_clock

logger = logging.getLogger(__name__)

DEFAULT_MESSAGE = "Time for Nicotine Gum"

# Serializes cancel/install so an older run can't wipe a newer run's registrations.
_reschedule_lock = threading.Lock()


def next_firing(slot_time: dt.time, now: dt.datetime) -> dt.datetime:
    """Today at ``slot_time``, or tomorrow if that moment is not in the future."""
    fires_at = dt.datetime.combine(now.date(), slot_time)
    if fires_at <= now:
        fires_at += dt.timedelta(days=1)
    return fires_at


def execute(
    profile_store: AbstractProfileStore,
    alarm_facility: AbstractAlarmFacility,
    now: dt.datetime | None = None,
    *,
    trigger: RescheduleTrigger = RescheduleTrigger.APP_START,
    min_window_minutes: int = 0,
    message: str = DEFAULT_MESSAGE,
    cancel_range: int = generate_reminder_times.MAX_SLOTS,
) -> RescheduleResult:
    """Validate the profile, then cancel and reinstall all reminders.

    Validation errors are raised before anything is cancelled, so a bad
    profile leaves the previous schedule in place. Per-slot registration
    failures are collected on the result instead of aborting the batch.
    """
    with _reschedule_lock:
        now = now or dt.datetime.now()

        profile = profile_store.read()
        if profile is None or not profile.quit_start:
            raise MissingProfile("No active profile. Finish onboarding first.")

        wake_time = generate_reminder_times.parse_time(profile.wake_up_time)
        sleep_time = generate_reminder_times.parse_time(profile.sleep_time)
        quit_start = program_clock.parse_quit_start(profile.quit_start)

        if min_window_minutes > 0:
            window = generate_reminder_times.waking_window(wake_time, sleep_time)
            if window < dt.timedelta(minutes=min_window_minutes):
                raise WindowTooShort(
                    f"Waking window of {int(window.total_seconds() // 60)} min is shorter than {min_window_minutes} min"
                )

        week = program_clock.current_week(quit_start, now)
        spacing = interval_policy.spacing_minutes(week)
        times = generate_reminder_times.generate(wake_time, sleep_time, spacing)

        result = RescheduleResult(trigger=trigger, week=week, spacing_minutes=spacing)

        for index in range(max(cancel_range, len(times))):
            alarm_facility.cancel(index)

        for index, slot_time in enumerate(times):
            slot = ReminderSlot(index=index, time=slot_time, fires_at=next_firing(slot_time, now))
            result.slots.append(slot)
            try:
                alarm_facility.register(index, slot.fires_at, {"message": message})
            except RegistrationFailure as exc:
                logger.warning("Failed to register reminder %s at %s: %s", index, slot.fires_at, exc.reason)
                result.failures.append(exc)

        logger.info(
            "Rescheduled (%s): week %s, every %s min, %s/%s reminders installed",
            trigger.value,
            week,
            spacing,
            result.installed,
            len(result.slots),
        )
        return result
