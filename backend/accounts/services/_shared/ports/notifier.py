from __future__ import annotations

import logging
import re
import threading
from dataclasses import dataclass
from typing import Protocol

log = logging.getLogger(__name__)

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class NotificationError(Exception):
    """Raised when a message cannot be validated or delivered."""


@dataclass(frozen=True, slots=True)
class MailMessage:
    """
    Outbound email.

    :param to: Recipient address.
    :type to: str
    :param subject: Non-empty subject line.
    :type subject: str
    :param body: Non-empty plain-text body.
    :type body: str
    """

    to: str
    subject: str
    body: str

    def validate(self) -> None:
        """
        Reject messages that no transport should attempt.

        :raises NotificationError: On empty subject/body or malformed recipient.
        """
        if not self.subject.strip():
            raise NotificationError("Subject must not be empty.")
        if not self.body.strip():
            raise NotificationError("Body must not be empty.")
        if not _EMAIL_RE.match(self.to):
            raise NotificationError("Recipient is not a valid email address.")


class Notifier(Protocol):
    """Port for delivering messages to users."""

    def send(self, message: MailMessage) -> None: ...


class RecordingNotifier(Notifier):
    """
    In-memory notifier that keeps every message instead of delivering it.

    Used by the test-suite and whenever SMTP is not configured. Set
    :attr:`fail` to simulate a broken transport.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.outbox: list[MailMessage] = []
        self.fail = False

    def send(self, message: MailMessage) -> None:
        message.validate()
        if self.fail:
            raise NotificationError("Delivery disabled for this notifier.")
        with self._lock:
            self.outbox.append(message)
        log.info("Mail kept in memory (testing)", extra={"op": "notifier.send"})

    def last_to(self, address: str) -> MailMessage | None:
        """Return the most recent message sent to ``address``."""
        with self._lock:
            for message in reversed(self.outbox):
                if message.to == address:
                    return message
        return None
