from __future__ import annotations

import logging

import pytest

from usertx.services import LoggingMailSender, MailMessage

pytestmark = pytest.mark.unit


def test_logging_mail_sender_records_message(caplog) -> None:
    sender = LoggingMailSender(sender="noreply@example.com")

    with caplog.at_level(logging.INFO, logger="usertx.services.mail"):
        sender.send(MailMessage(to="hong@example.com", subject="Upgrade notice", text="hi"))

    record = next(r for r in caplog.records if r.getMessage() == "mail.send")
    assert record.to == "hong@example.com"
    assert record.sender == "noreply@example.com"
    assert record.subject == "Upgrade notice"
