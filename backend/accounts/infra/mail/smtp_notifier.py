"""SMTP delivery of account emails."""

from __future__ import annotations

import logging
import smtplib
from datetime import timedelta
from email.message import EmailMessage

from accounts.services._shared.ports import MailMessage, NotificationError, Notifier

log = logging.getLogger(__name__)


class SMTPNotifier(Notifier):
    """
    Send :class:`MailMessage` objects through an SMTP relay.

    A connection is opened per message; STARTTLS and login are used when
    credentials are configured.

    Parameters
    ----------
    host, port:
        Relay address.
    from_address:
        Envelope and header sender.
    username, password:
        Optional credentials. When ``username`` is empty no login happens.
    timeout:
        Socket timeout for the whole conversation.
    """

    def __init__(
        self,
        *,
        host: str,
        port: int,
        from_address: str,
        username: str = "",
        password: str = "",
        timeout: timedelta = timedelta(seconds=10),
    ) -> None:
        self.host = host
        self.port = port
        self.from_address = from_address
        self.username = username
        self.password = password
        self.timeout = timeout

    def _build(self, message: MailMessage) -> EmailMessage:
        email = EmailMessage()
        email["From"] = self.from_address
        email["To"] = message.to
        email["Subject"] = message.subject
        email.set_content(message.body)
        return email

    def send(self, message: MailMessage) -> None:
        message.validate()
        email = self._build(message)
        try:
            with smtplib.SMTP(
                host=self.host, port=self.port, timeout=self.timeout.total_seconds()
            ) as conn:
                if self.username:
                    conn.starttls()
                    conn.login(self.username, self.password)
                conn.send_message(email)
        except (smtplib.SMTPException, OSError) as exc:
            raise NotificationError(f"SMTP delivery failed: {exc.__class__.__name__}") from exc
        log.info("Mail sent", extra={"op": "notifier.send"})
