"""Domain services for user administration."""

from .mail import LoggingMailSender, MailMessage, MailSender
from .user_service import (
    LOG_COUNT_FOR_SILVER,
    REC_COUNT_FOR_GOLD,
    DefaultUserLevelUpgradePolicy,
    UserLevelUpgradePolicy,
    UserService,
)

__all__ = [
    "LOG_COUNT_FOR_SILVER",
    "REC_COUNT_FOR_GOLD",
    "DefaultUserLevelUpgradePolicy",
    "LoggingMailSender",
    "MailMessage",
    "MailSender",
    "UserLevelUpgradePolicy",
    "UserService",
]
