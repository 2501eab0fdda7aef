"""Tests for gum_taper_bot/core/usecases/snooze_reminder.py"""

import datetime as dt

from gum_taper_bot.core.usecases import reschedule_reminders as reschedule_uc
from gum_taper_bot.core.usecases import snooze_reminder as snooze_uc


class TestSnooze:
    def test_registers_one_job_five_minutes_ahead(self, fake_alarms, now):
        fires_at = snooze_uc.execute(fake_alarms, now, message="Chew")

        assert fires_at == now + dt.timedelta(minutes=5)
        assert fake_alarms.installed == {snooze_uc.SNOOZE_SLOT_INDEX: (fires_at, {"message": "Chew"})}

    def test_survives_reschedule(self, fake_alarms, memory_store, now):
        snooze_uc.execute(fake_alarms, now)
        reschedule_uc.execute(memory_store, fake_alarms, now)
        assert snooze_uc.SNOOZE_SLOT_INDEX in fake_alarms.installed
