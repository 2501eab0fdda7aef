"""Entry point for GumTaperBot Telegram bot.

Usage:
    export BOT_TOKEN="<your_token>"
    export CHAT_ID="<your_chat_id>"
    python -m gum_taper_bot.entrypoints.bot_main
"""

from __future__ import annotations

import asyncio
import datetime as dt
import logging
import os

from aiogram import Bot, Dispatcher, F
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode
from aiogram.exceptions import TelegramBadRequest
from aiogram.filters import Command, CommandStart
from aiogram.fsm.context import FSMContext
from aiogram.fsm.state import State, StatesGroup
from aiogram.fsm.storage.memory import MemoryStorage
from aiogram.types import CallbackQuery, Message
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from gum_taper_bot.core.entities.errors import InvalidTimeFormat, SchedulingError
from gum_taper_bot.core.entities.profile import UserProfile
from gum_taper_bot.core.entities.reminder import RescheduleResult, RescheduleTrigger
from gum_taper_bot.core.interfaces.repositories.profile_store import AbstractProfileStore
from gum_taper_bot.core.usecases import (
    generate_reminder_times,
    interval_policy,
    program_clock,
    progress_summary as progress_summary_uc,
    reschedule_reminders as reschedule_uc,
    snooze_reminder as snooze_uc,
)
from gum_taper_bot.dataproviders.alarms.apscheduler_facility import ApschedulerAlarmFacility
from gum_taper_bot.dataproviders.db import init_db
from gum_taper_bot.dataproviders.repositories.profile_store import SqlAlchemyProfileStore
from gum_taper_bot.utils import hub

# ---------------------------------------------------------------------------
# Configure logging & DB
# ---------------------------------------------------------------------------
logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(name)s - %(message)s")
logger = logging.getLogger(__name__)

init_db()

profile_store: AbstractProfileStore = SqlAlchemyProfileStore()

# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------
BOT_TOKEN = os.getenv("BOT_TOKEN")
if not BOT_TOKEN:
    raise RuntimeError("BOT_TOKEN env variable not set.")

CHAT_ID = os.getenv("CHAT_ID")
if not CHAT_ID:
    raise RuntimeError("CHAT_ID env variable not set.")
CHAT_ID = int(CHAT_ID)

MIN_WINDOW_MINUTES = int(os.getenv("GT_MIN_WINDOW_MINUTES", "0"))  # 0 disables the check
REMINDER_MESSAGE = os.getenv("GT_REMINDER_MESSAGE", reschedule_uc.DEFAULT_MESSAGE)
ROLLOVER_TIME = generate_reminder_times.parse_time(os.getenv("GT_ROLLOVER_TIME", "00:05"))

bot = Bot(token=BOT_TOKEN, default=DefaultBotProperties(parse_mode=ParseMode.HTML))
storage = MemoryStorage()
dp = Dispatcher(storage=storage)

# Single-user bot: ignore everyone else.
dp.message.filter(F.chat.id == CHAT_ID)
dp.callback_query.filter(F.message.chat.id == CHAT_ID)

# Scheduler runs in local wall-clock time
scheduler = AsyncIOScheduler()

# ---------------------------------------------------------------------------
# Reminder delivery & rescheduling
# ---------------------------------------------------------------------------


async def deliver_reminder(slot_index: int, payload: dict[str, str]) -> None:
    try:
        await bot.send_message(
            CHAT_ID,
            f"💊 {payload.get('message') or REMINDER_MESSAGE}",
            reply_markup=hub.build_reminder_keyboard(),
        )
    except Exception as e:
        logger.warning("Failed to deliver reminder %s: %s", slot_index, e)


alarm_facility = ApschedulerAlarmFacility(scheduler, deliver_reminder)


def reschedule(trigger: RescheduleTrigger) -> RescheduleResult:
    return reschedule_uc.execute(
        profile_store,
        alarm_facility,
        trigger=trigger,
        min_window_minutes=MIN_WINDOW_MINUTES,
        message=REMINDER_MESSAGE,
    )


async def run_daily_rollover() -> None:
    """Re-derive the week and re-arm today's one-shot reminders."""
    profile = profile_store.read()
    if not profile or not profile.is_complete:
        return
    await _reschedule_and_report(RescheduleTrigger.DAILY_ROLLOVER)


def setup_jobs() -> None:
    scheduler.add_job(
        run_daily_rollover,
        "cron",
        hour=ROLLOVER_TIME.hour,
        minute=ROLLOVER_TIME.minute,
        id="daily_rollover",
        replace_existing=True,
    )


async def startup() -> None:
    """Start the scheduler and reinstall reminders for an existing profile."""
    setup_jobs()
    if not scheduler.running:
        scheduler.start()

    profile = profile_store.read()
    if not profile or not profile.is_complete:
        logger.info("No active profile yet, waiting for onboarding")
        return
    await _reschedule_and_report(RescheduleTrigger.APP_START)


# ---------------------------------------------------------------------------
# FSM States
# ---------------------------------------------------------------------------


class SetupState(StatesGroup):
    gender = State()
    age = State()
    cigarettes_per_day = State()
    cigarette_price = State()
    years_of_smoking = State()
    wake_up_time = State()
    sleep_time = State()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _failures_text(result: RescheduleResult) -> str:
    return f"⚠️ {len(result.failures)} of {len(result.slots)} reminders could not be scheduled."


async def _reschedule_and_report(trigger: RescheduleTrigger) -> RescheduleResult | None:
    """Reschedule and tell the user when something went wrong."""
    try:
        result = reschedule(trigger)
    except SchedulingError as e:
        logger.error("Could not schedule reminders (%s): %s", trigger.value, e)
        await bot.send_message(CHAT_ID, hub.describe_error(e))
        return None
    if not result.ok:
        await bot.send_message(CHAT_ID, _failures_text(result))
    return result


def _parse_positive_int(text: str | None) -> int | None:
    try:
        value = int(text)
    except (TypeError, ValueError):
        return None
    return value if value > 0 else None


def _today_times(profile: UserProfile, now: dt.datetime) -> tuple[int, list[dt.time]]:
    """Spacing and reminder times for display; tolerates corrupt stored times."""
    wake = generate_reminder_times.parse_time_or_default(
        profile.wake_up_time, generate_reminder_times.DEFAULT_WAKE_TIME
    )
    sleep = generate_reminder_times.parse_time_or_default(
        profile.sleep_time, generate_reminder_times.DEFAULT_SLEEP_TIME
    )
    week = program_clock.current_week(program_clock.parse_quit_start(profile.quit_start), now)
    spacing = interval_policy.spacing_minutes(week)
    return spacing, generate_reminder_times.generate(wake, sleep, spacing)


# ---------------------------------------------------------------------------
# Hub refresh function
# ---------------------------------------------------------------------------

LAST_HUB_MSG: dict[int, int] = {}


async def refresh_hub(profile: UserProfile) -> None:
    """Create or update the single hub message."""
    now = dt.datetime.now()
    try:
        summary = progress_summary_uc.execute(profile, now)
        spacing, times = _today_times(profile, now)
    except SchedulingError as e:
        await bot.send_message(CHAT_ID, hub.describe_error(e))
        return

    text = hub.build_hub_text(summary, spacing, times, now)
    keyboard = hub.build_hub_keyboard()

    if mid := LAST_HUB_MSG.get(CHAT_ID):
        try:
            await bot.edit_message_text(chat_id=CHAT_ID, message_id=mid, text=text, reply_markup=keyboard)
            return
        except TelegramBadRequest as e:
            if "message is not modified" in str(e).lower():
                return
            # other bad request -> send new

    sent = await bot.send_message(CHAT_ID, text, reply_markup=keyboard)
    LAST_HUB_MSG[CHAT_ID] = sent.message_id


async def _save_and_reschedule(profile: UserProfile) -> None:
    profile_store.write(profile)
    if await _reschedule_and_report(RescheduleTrigger.SETTINGS_SAVED) is not None:
        await refresh_hub(profile)


async def _start_onboarding(message: Message, state: FSMContext, greeting: str) -> None:
    await state.clear()
    await state.set_state(SetupState.gender)
    await message.answer(f"{greeting} Let's set up your plan. What is your gender?", reply_markup=hub.build_gender_keyboard())


# ---------------------------------------------------------------------------
# Commands (registered before the onboarding states so they always win)
# ---------------------------------------------------------------------------


@dp.message(CommandStart())
async def cmd_start(message: Message, state: FSMContext) -> None:
    """Show the hub or (re)start onboarding if not configured."""
    profile = profile_store.read()
    if profile and profile.is_complete:
        await state.clear()
        await refresh_hub(profile)
        return
    await _start_onboarding(message, state, "👋 Hi!")


@dp.message(Command("settings"))
async def cmd_settings(message: Message, state: FSMContext) -> None:
    """Change wake/sleep times: /settings 07:00 23:00"""
    profile = profile_store.read()
    if not profile or not profile.is_complete:
        await message.reply("Finish setup first with /start.")
        return
    await state.clear()

    parts = message.text.split()
    if len(parts) != 3:
        await message.reply("Wrong format. Example: /settings 07:00 23:00")
        return

    try:
        generate_reminder_times.parse_time(parts[1])
        generate_reminder_times.parse_time(parts[2])
    except InvalidTimeFormat:
        await message.reply("Use the HH:MM format. Example: /settings 07:00 23:00")
        return

    profile.wake_up_time, profile.sleep_time = parts[1], parts[2]
    await message.reply("Settings saved ✅")
    await _save_and_reschedule(profile)


@dp.message(Command("reset"))
async def cmd_reset(message: Message, state: FSMContext) -> None:
    """Delete the profile, drop all reminders and restart onboarding."""
    profile_store.clear()
    for index in range(generate_reminder_times.MAX_SLOTS):
        alarm_facility.cancel(index)
    alarm_facility.cancel(snooze_uc.SNOOZE_SLOT_INDEX)
    LAST_HUB_MSG.pop(CHAT_ID, None)

    await _start_onboarding(message, state, "⚠️ Settings reset.")


# ---------------------------------------------------------------------------
# Onboarding handlers
# ---------------------------------------------------------------------------


@dp.callback_query(SetupState.gender, F.data.startswith(hub.GENDER_PREFIX))
async def setup_gender(callback: CallbackQuery, state: FSMContext) -> None:
    await state.update_data(gender=callback.data.removeprefix(hub.GENDER_PREFIX))
    await state.set_state(SetupState.age)
    await callback.answer()
    await bot.send_message(CHAT_ID, "How old are you?")


@dp.message(SetupState.gender)
async def setup_gender_text(message: Message) -> None:
    await message.reply("Please pick one of the buttons above.", reply_markup=hub.build_gender_keyboard())


@dp.message(SetupState.age)
async def setup_age(message: Message, state: FSMContext) -> None:
    age = _parse_positive_int(message.text)
    if age is None:
        await message.reply("Please enter your age as a positive whole number.")
        return

    await state.update_data(age=age)
    await state.set_state(SetupState.cigarettes_per_day)
    await message.answer("How many cigarettes do you usually smoke per day?")


@dp.message(SetupState.cigarettes_per_day)
async def setup_cigs_per_day(message: Message, state: FSMContext) -> None:
    cigs_per_day = _parse_positive_int(message.text)
    if cigs_per_day is None:
        await message.reply("Please enter a positive whole number of cigarettes per day.")
        return

    await state.update_data(cigs_per_day=cigs_per_day)
    await state.set_state(SetupState.cigarette_price)
    await message.answer("How much does one cigarette cost?")


@dp.message(SetupState.cigarette_price)
async def setup_cigarette_price(message: Message, state: FSMContext) -> None:
    try:
        price = float(message.text.replace(",", "."))
        if price <= 0:
            raise ValueError
    except (AttributeError, ValueError):
        await message.reply("Please enter a positive price.")
        return

    await state.update_data(price=price)
    await state.set_state(SetupState.years_of_smoking)
    await message.answer("For how many years have you been smoking?")


@dp.message(SetupState.years_of_smoking)
async def setup_years_of_smoking(message: Message, state: FSMContext) -> None:
    try:
        years = int(message.text)
        if years < 0:
            raise ValueError
    except (TypeError, ValueError):
        await message.reply("Please enter a whole number of years.")
        return

    await state.update_data(years=years)
    await state.set_state(SetupState.wake_up_time)
    await message.answer("When do you usually wake up? (HH:MM, e.g. 07:00)")


@dp.message(SetupState.wake_up_time)
async def setup_wake_up_time(message: Message, state: FSMContext) -> None:
    try:
        generate_reminder_times.parse_time(message.text)
    except InvalidTimeFormat:
        await message.reply("Use the HH:MM format, e.g. 07:00")
        return

    await state.update_data(wake_up_time=message.text.strip())
    await state.set_state(SetupState.sleep_time)
    await message.answer("And when do you go to sleep? (HH:MM, e.g. 23:00)")


@dp.message(SetupState.sleep_time)
async def setup_sleep_time(message: Message, state: FSMContext) -> None:
    try:
        generate_reminder_times.parse_time(message.text)
    except InvalidTimeFormat:
        await message.reply("Use the HH:MM format, e.g. 23:00")
        return

    data = await state.get_data()
    await state.clear()

    profile = UserProfile(
        wake_up_time=data["wake_up_time"],
        sleep_time=message.text.strip(),
        quit_start=dt.datetime.now().isoformat(timespec="seconds"),
        cigarettes_per_day=data["cigs_per_day"],
        cigarette_price=data["price"],
        years_of_smoking=data["years"],
        age=data["age"],
        gender=data["gender"],
    )
    await message.answer(hub.build_confirmation_text(profile))
    await message.answer("✅ Setup complete! Your first week starts today.")
    await _save_and_reschedule(profile)


# ---------------------------------------------------------------------------
# Callbacks
# ---------------------------------------------------------------------------


@dp.callback_query(F.data == "TAKE")
async def handle_take(callback: CallbackQuery) -> None:
    logger.info("Reminder acknowledged")
    await callback.answer("Well done 💪")


@dp.callback_query(F.data == "SNOOZE")
async def handle_snooze(callback: CallbackQuery) -> None:
    try:
        fires_at = snooze_uc.execute(alarm_facility, message=REMINDER_MESSAGE)
    except SchedulingError as e:
        logger.warning("Snooze failed: %s", e)
        await callback.answer("Could not snooze", show_alert=True)
        return
    await callback.answer(f"Snoozed until {fires_at:%H:%M}")


@dp.callback_query(F.data == "REFRESH")
async def handle_refresh(callback: CallbackQuery) -> None:
    profile = profile_store.read()
    if profile and profile.is_complete:
        await refresh_hub(profile)
    await callback.answer("Updated")


@dp.callback_query(F.data == "FAQ")
async def handle_faq(callback: CallbackQuery) -> None:
    text = (
        "ℹ️ <b>FAQ / Commands</b>\n"
        "• /start — show the hub or start setup\n"
        "• /settings HH:MM HH:MM — change wake and sleep time\n"
        "• /reset — delete your data and start over\n\n"
        f"The gap between reminders grows every week, from "
        f"{interval_policy.spacing_minutes(1)} to "
        f"{interval_policy.spacing_minutes(interval_policy.PROGRAM_WEEKS)} minutes."
    )
    await callback.answer()
    await bot.send_message(CHAT_ID, text)


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------


async def _runner() -> None:
    """Async runner: start scheduler and polling concurrently."""
    # Scheduler must be started inside running loop
    await startup()
    await dp.start_polling(bot)


def main() -> None:
    logger.info("Starting GumTaperBot...")
    asyncio.run(_runner())


if __name__ == "__main__":
    main()
