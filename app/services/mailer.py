"""Outbound email delivery of rendered reports."""

from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage
from typing import Optional, Protocol

from app.core.config import Settings

logger = logging.getLogger(__name__)


class ReportDeliveryError(Exception):
    """The report could not be handed to the mail server."""


class Mailer(Protocol):
    enabled: bool

    def send_report(self, recipient: str, name: str, report_text: str) -> None: ...


class DisabledMailer:
    """Used when mail is switched off; never sends anything."""

    enabled = False

    def send_report(self, recipient: str, name: str, report_text: str) -> None:
        logger.debug("Mail disabled; not sending report for %s", name)


class SmtpMailer:
    """Sends plain-text reports through an SMTP relay (blocking; run in a threadpool)."""

    enabled = True

    def __init__(
        self,
        host: str,
        port: int,
        sender: str,
        subject: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        starttls: bool = True,
        timeout: float = 10.0,
    ):
        self.host = host
        self.port = port
        self.sender = sender
        self.subject = subject
        self.username = username
        self.password = password
        self.starttls = starttls
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "SmtpMailer":
        return cls(
            host=settings.smtp_host,
            port=settings.smtp_port,
            sender=settings.mail_sender,
            subject=settings.mail_subject,
            username=settings.smtp_username,
            password=settings.smtp_password,
            starttls=settings.smtp_starttls,
            timeout=settings.smtp_timeout_seconds,
        )

    def build_message(self, recipient: str, name: str, report_text: str) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = self.sender
        msg["To"] = recipient
        msg["Subject"] = self.subject
        msg.set_content(f"Hi {name},\n\nHere is your body measurement report.\n\n{report_text}")
        return msg

    def send_report(self, recipient: str, name: str, report_text: str) -> None:
        msg = self.build_message(recipient, name, report_text)
        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
                if self.starttls:
                    smtp.starttls()
                if self.username:
                    smtp.login(self.username, self.password or "")
                smtp.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            raise ReportDeliveryError(f"Could not deliver report to {recipient}: {e}") from e
        logger.info("Emailed report to %s", recipient)


def build_mailer(settings: Settings) -> Mailer:
    if not settings.mail_enabled:
        return DisabledMailer()
    return SmtpMailer.from_settings(settings)
