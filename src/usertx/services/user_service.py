"""User administration and loyalty leveling."""

from __future__ import annotations

from contextlib import AbstractContextManager
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Protocol

import structlog

from ..domain import Level, User
from ..repositories import UserDao
from ..transaction import (
    TransactionDefinition,
    TransactionManager,
    TransactionStatus,
    TransactionSynchronization,
)
from .mail import MailMessage, MailSender

logger = structlog.get_logger(__name__)

LOG_COUNT_FOR_SILVER = 50
REC_COUNT_FOR_GOLD = 30


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class UserLevelUpgradePolicy(Protocol):
    def can_upgrade_level(self, user: User) -> bool:
        """Whether ``user`` has earned the next level."""

        raise NotImplementedError

    def upgrade_level(self, user: User) -> None:
        """Move ``user`` to the next level in place."""

        raise NotImplementedError


@dataclass(slots=True)
class DefaultUserLevelUpgradePolicy:
    """BASIC users move up on logins, SILVER users on recommendations."""

    log_count_for_silver: int = LOG_COUNT_FOR_SILVER
    rec_count_for_gold: int = REC_COUNT_FOR_GOLD

    def can_upgrade_level(self, user: User) -> bool:
        level = user.level or Level.BASIC
        if level is Level.BASIC:
            return user.login >= self.log_count_for_silver
        if level is Level.SILVER:
            return user.recommend >= self.rec_count_for_gold
        return False

    def upgrade_level(self, user: User) -> None:
        user.upgrade_level()


class _UpgradeNotification(TransactionSynchronization):
    """Send the upgrade mail only once the upgrade is committed."""

    def __init__(self, mail_sender: MailSender, message: MailMessage) -> None:
        self._mail_sender = mail_sender
        self._message = message

    def after_commit(self) -> None:
        self._mail_sender.send(self._message)


class UserService:
    """CRUD operations on users plus level upgrades."""

    def __init__(
        self,
        user_dao: UserDao,
        transaction_manager: TransactionManager,
        *,
        mail_sender: MailSender | None = None,
        upgrade_policy: UserLevelUpgradePolicy | None = None,
        mail_from: str | None = None,
    ) -> None:
        self._user_dao = user_dao
        self._transaction_manager = transaction_manager
        self._mail_sender = mail_sender
        self._upgrade_policy = upgrade_policy or DefaultUserLevelUpgradePolicy()
        self._mail_from = mail_from

    def add(self, user: User) -> None:
        """Persist a new user; users without a level start at BASIC."""

        if user.level is None:
            user.level = Level.BASIC
        self._user_dao.add(user)

    def get(self, user_id: str) -> User:
        return self._user_dao.get(user_id)

    def get_all(self) -> list[User]:
        return self._user_dao.get_all()

    def update(self, user: User) -> None:
        self._user_dao.update(user)

    def delete_all(self) -> None:
        self._user_dao.delete_all()

    def get_count(self) -> int:
        return self._user_dao.get_count()

    def upgrade_levels(self) -> list[User]:
        """Upgrade every eligible user; either all upgrades persist or none do."""

        with self._transaction("upgrade_levels"):
            upgraded: list[User] = []
            for user in self._user_dao.get_all():
                if self._upgrade_policy.can_upgrade_level(user):
                    self.upgrade_level(user)
                    upgraded.append(user)
        return upgraded

    def upgrade_level(self, user: User) -> None:
        with self._transaction("upgrade_level"):
            self._upgrade_policy.upgrade_level(user)
            self._user_dao.update(user)
            if self._mail_sender is not None and user.email:
                self._transaction_manager.register_synchronization(
                    _UpgradeNotification(self._mail_sender, self._upgrade_message(user))
                )
        logger.info(
            "user.level_upgraded",
            user_id=user.id,
            level=user.level.name if user.level else None,
        )

    def record_login(self, user_id: str, at: datetime | None = None) -> User:
        with self._transaction("record_login"):
            user = self._user_dao.get(user_id)
            user.login += 1
            user.last_login_at = at or _utcnow()
            self._user_dao.update(user)
        return user

    def recommend(self, user_id: str) -> User:
        with self._transaction("recommend"):
            user = self._user_dao.get(user_id)
            user.recommend += 1
            self._user_dao.update(user)
        return user

    def _transaction(self, name: str) -> AbstractContextManager[TransactionStatus]:
        return self._transaction_manager.transaction(TransactionDefinition(name=name))

    def _upgrade_message(self, user: User) -> MailMessage:
        level = user.level.name if user.level else Level.BASIC.name
        return MailMessage(
            to=user.email or "",
            subject="Upgrade notice",
            text=f"Your level has been upgraded to {level}",
            sender=self._mail_from,
        )
