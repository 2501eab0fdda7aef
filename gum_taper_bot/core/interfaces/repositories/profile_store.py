"""Abstract key-value store holding the single user profile."""

from __future__ import annotations

import abc
from typing import Protocol

from gum_taper_bot.core.entities.profile import UserProfile


class AbstractProfileStore(Protocol):
    """Profile store contract."""

    @abc.abstractmethod
    def read(self) -> UserProfile | None: ...

    @abc.abstractmethod
    def write(self, profile: UserProfile) -> None: ...

    @abc.abstractmethod
    def clear(self) -> None: ...
