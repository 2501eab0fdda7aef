"""SQLAlchemy ORM models."""

from __future__ import annotations

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from gum_taper_bot.dataproviders.db import Base


class ProfileEntryModel(Base):
    """One key of the flat profile mapping."""

    __tablename__ = "profile_entries"

    key: Mapped[str] = mapped_column(String(64), primary_key=True)
    value: Mapped[str | None] = mapped_column(Text, nullable=True)
