"""Build the list of reminder times between wake-up and sleep.

The sleep boundary is the sleep time on the same day when it is later than
the wake time, otherwise the sleep time on the following day. A 06:00 wake
and 02:00 sleep therefore give a 20 hour window that crosses midnight.
"""

from __future__ import annotations

import datetime as dt
import logging
import re

from gum_taper_bot.core.entities.errors import ExcessiveSlotCount, InvalidSpacing, InvalidTimeFormat

logger = logging.getLogger(__name__)

MAX_SLOTS = 1000
TIME_FORMAT = "%H:%M"
_HH_MM = re.compile(r"\d{2}:\d{2}")
DEFAULT_WAKE_TIME = dt.time(6, 0)
DEFAULT_SLEEP_TIME = dt.time(22, 0)

# Any date works, it only anchors time-of-day arithmetic.
_ANCHOR = dt.date(2000, 1, 1)


def parse_time(raw: str) -> dt.time:
    """Parse a stored ``HH:MM`` string, raising InvalidTimeFormat on anything else."""
    try:
        text = raw.strip()
        if not _HH_MM.fullmatch(text):
            raise ValueError("expected zero-padded HH:MM")
        return dt.datetime.strptime(text, TIME_FORMAT).time()
    except (AttributeError, ValueError) as exc:
        raise InvalidTimeFormat(f"Invalid time of day: {raw!r}") from exc


def parse_time_or_default(raw: str | None, default: dt.time) -> dt.time:
    """Lenient variant for display paths."""
    try:
        return parse_time(raw)
    except InvalidTimeFormat:
        logger.warning("Falling back to %s for unparseable time %r", default.strftime(TIME_FORMAT), raw)
        return default


def waking_window(wake_time: dt.time, sleep_time: dt.time) -> dt.timedelta:
    wake = dt.datetime.combine(_ANCHOR, wake_time)
    sleep = dt.datetime.combine(_ANCHOR, sleep_time)
    if sleep == wake:
        return dt.timedelta(0)
    if sleep < wake:
        sleep += dt.timedelta(days=1)
    return sleep - wake


def generate(wake_time: dt.time, sleep_time: dt.time, spacing_minutes: int) -> list[dt.time]:
    """Return today's reminder times, starting at ``wake_time``.

    At least one time is always returned. A slot landing exactly on the
    sleep boundary is kept.
    """
    if spacing_minutes <= 0:
        raise InvalidSpacing(f"Spacing must be positive, got {spacing_minutes}")

    step = dt.timedelta(minutes=spacing_minutes)
    current = dt.datetime.combine(_ANCHOR, wake_time)
    boundary = current + waking_window(wake_time, sleep_time)

    times: list[dt.time] = []
    while current <= boundary:
        if len(times) >= MAX_SLOTS:
            raise ExcessiveSlotCount(
                f"More than {MAX_SLOTS} reminders between {wake_time} and {sleep_time} every {spacing_minutes} min"
            )
        times.append(current.time())
        current += step
    return times
