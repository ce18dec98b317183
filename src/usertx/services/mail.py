"""Outbound notification mail."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Protocol


@dataclass(slots=True)
class MailMessage:
    to: str
    subject: str
    text: str
    sender: str | None = None


class MailSender(Protocol):
    def send(self, message: MailMessage) -> None:
        """Deliver ``message``."""

        raise NotImplementedError


@dataclass(slots=True)
class LoggingMailSender:
    """Mail sender that records messages in the log instead of delivering them."""

    sender: str | None = None
    log: logging.Logger = field(default_factory=lambda: logging.getLogger(__name__))

    def send(self, message: MailMessage) -> None:
        self.log.info(
            "mail.send",
            extra={
                "to": message.to,
                "sender": message.sender or self.sender,
                "subject": message.subject,
            },
        )
