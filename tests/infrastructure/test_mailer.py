import logging
import smtplib

import pytest

from cashtrackr.config import Settings
from cashtrackr.core.errors import EmailDeliveryError
from cashtrackr.infrastructure import mailer as mailer_module
from cashtrackr.infrastructure.mailer import (
    EmailMessage, LoggingMailer, SmtpMailer, build_mailer,
)

MESSAGE = EmailMessage("test@test.com", "Asunto", "<b>123456</b>")


def test_build_mailer_defaults_to_logging():
    assert isinstance(build_mailer(Settings(mail_backend="log")), LoggingMailer)


def test_build_mailer_smtp_backend():
    mailer = build_mailer(Settings(mail_backend="smtp", smtp_host="mail.test"))
    assert isinstance(mailer, SmtpMailer)


async def test_logging_mailer_does_not_log_body(caplog):
    with caplog.at_level(logging.INFO, logger=mailer_module.__name__):
        await LoggingMailer().send(MESSAGE)
    assert "Asunto" in caplog.text
    assert "123456" not in caplog.text


async def test_smtp_failure_becomes_delivery_error(monkeypatch):
    def refuse(*args, **kwargs):
        raise smtplib.SMTPConnectError(421, b"unavailable")

    monkeypatch.setattr(mailer_module.smtplib, "SMTP", refuse)
    with pytest.raises(EmailDeliveryError) as exc:
        await SmtpMailer("mail.test", 587, "noreply@test.com").send(MESSAGE)
    assert exc.value.http_status == 500
