"""User record and loyalty levels."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import IntEnum

from ..exceptions import IllegalLevelUpgradeError


def _utcnow() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(tz=timezone.utc)


class Level(IntEnum):
    """Loyalty tier, ordered from the entry level upwards."""

    BASIC = 1
    SILVER = 2
    GOLD = 3

    @property
    def next_level(self) -> Level | None:
        """Return the tier a user moves to on upgrade, ``None`` at the top."""

        return _NEXT_LEVELS[self]

    @classmethod
    def from_value(cls, value: int) -> Level:
        """Resolve the integer stored in the database."""

        try:
            return cls(value)
        except ValueError as exc:
            raise ValueError(f"unknown level value: {value}") from exc


_NEXT_LEVELS: dict[Level, Level | None] = {
    Level.BASIC: Level.SILVER,
    Level.SILVER: Level.GOLD,
    Level.GOLD: None,
}


@dataclass(slots=True)
class User:
    id: str
    name: str
    password: str
    level: Level | None = None
    login: int = 0
    recommend: int = 0
    email: str | None = None
    created_at: datetime = field(default_factory=_utcnow)
    last_login_at: datetime | None = None

    def upgrade_level(self) -> None:
        """Move the user one tier up."""

        current = self.level or Level.BASIC
        next_level = current.next_level
        if next_level is None:
            raise IllegalLevelUpgradeError(f"user '{self.id}' cannot be upgraded past {current.name}")
        self.level = next_level
