"""SQLAlchemy implementation of AbstractProfileStore."""

from __future__ import annotations

from sqlalchemy import delete, select

from gum_taper_bot.core.entities.profile import UserProfile
from gum_taper_bot.core.interfaces.repositories.profile_store import AbstractProfileStore
from gum_taper_bot.dataproviders.db import session_scope
from gum_taper_bot.dataproviders.repositories._models import ProfileEntryModel

WAKE_UP_TIME = "wake_up_time"
SLEEP_TIME = "sleep_time"
QUIT_START = "quit_start"
CIGARETTES_PER_DAY = "cigarettes_per_day"
CIGARETTE_PRICE = "cigarette_price"
YEARS_OF_SMOKING = "years_of_smoking"
AGE = "age"
GENDER = "gender"


def _int(raw: str | None) -> int:
    try:
        return int(raw) if raw else 0
    except ValueError:
        return 0


def _float(raw: str | None) -> float:
    try:
        return float(raw) if raw else 0.0
    except ValueError:
        return 0.0


class SqlAlchemyProfileStore(AbstractProfileStore):
    """Stores the profile as key/value rows; values are kept as written."""

    def _to_entity(self, entries: dict[str, str | None]) -> UserProfile | None:
        wake_up_time = entries.get(WAKE_UP_TIME)
        sleep_time = entries.get(SLEEP_TIME)
        if not wake_up_time or not sleep_time:
            return None
        return UserProfile(
            wake_up_time=wake_up_time,
            sleep_time=sleep_time,
            quit_start=entries.get(QUIT_START),
            cigarettes_per_day=_int(entries.get(CIGARETTES_PER_DAY)),
            cigarette_price=_float(entries.get(CIGARETTE_PRICE)),
            years_of_smoking=_int(entries.get(YEARS_OF_SMOKING)),
            age=_int(entries.get(AGE)),
            gender=entries.get(GENDER) or "",
        )

    def _to_entries(self, profile: UserProfile) -> dict[str, str | None]:
        return {
            WAKE_UP_TIME: profile.wake_up_time,
            SLEEP_TIME: profile.sleep_time,
            QUIT_START: profile.quit_start,
            CIGARETTES_PER_DAY: str(profile.cigarettes_per_day),
            CIGARETTE_PRICE: str(profile.cigarette_price),
            YEARS_OF_SMOKING: str(profile.years_of_smoking),
            AGE: str(profile.age),
            GENDER: profile.gender,
        }

    # ---------------------------------------------------------------------
    # Public methods
    # ---------------------------------------------------------------------

    def read(self) -> UserProfile | None:
        with session_scope() as session:
            models = session.scalars(select(ProfileEntryModel)).all()
            return self._to_entity({m.key: m.value for m in models})

    def write(self, profile: UserProfile) -> None:
        with session_scope() as session:
            for key, value in self._to_entries(profile).items():
                session.merge(ProfileEntryModel(key=key, value=value))

    def clear(self) -> None:
        with session_scope() as session:
            session.execute(delete(ProfileEntryModel))
