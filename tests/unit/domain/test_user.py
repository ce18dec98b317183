from __future__ import annotations

import pytest

from usertx.domain import Level, User
from usertx.exceptions import IllegalLevelUpgradeError

pytestmark = pytest.mark.unit


def test_levels_are_strictly_ordered() -> None:
    assert Level.BASIC < Level.SILVER < Level.GOLD
    assert sorted([Level.GOLD, Level.BASIC, Level.SILVER]) == [
        Level.BASIC,
        Level.SILVER,
        Level.GOLD,
    ]


def test_next_level_chain() -> None:
    assert Level.BASIC.next_level is Level.SILVER
    assert Level.SILVER.next_level is Level.GOLD
    assert Level.GOLD.next_level is None


def test_from_value_resolves_stored_integers() -> None:
    assert Level.from_value(1) is Level.BASIC
    assert Level.from_value(3) is Level.GOLD

    with pytest.raises(ValueError, match="unknown level value: 4"):
        Level.from_value(4)


@pytest.mark.parametrize(
    ("start", "expected"),
    [(Level.BASIC, Level.SILVER), (Level.SILVER, Level.GOLD)],
)
def test_upgrade_level_moves_one_step(start: Level, expected: Level) -> None:
    user = User(id="1", name="hong", password="1234", level=start)

    user.upgrade_level()

    assert user.level is expected


def test_upgrade_level_rejects_top_level() -> None:
    user = User(id="1", name="hong", password="1234", level=Level.GOLD)

    with pytest.raises(IllegalLevelUpgradeError, match="GOLD"):
        user.upgrade_level()
    assert user.level is Level.GOLD
