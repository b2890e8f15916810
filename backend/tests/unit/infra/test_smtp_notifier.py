from __future__ import annotations

import smtplib
from datetime import timedelta

import pytest
from accounts.infra.mail import SMTPNotifier
from accounts.services._shared.ports import MailMessage, NotificationError


class FakeSMTP:
    """Stand-in for :class:`smtplib.SMTP` recording the conversation."""

    instances: list[FakeSMTP] = []
    fail_with: Exception | None = None

    def __init__(self, host, port, timeout):
        self.host, self.port, self.timeout = host, port, timeout
        self.calls: list[tuple] = []
        self.sent = []
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        self.calls.append(("starttls",))

    def login(self, username, password):
        self.calls.append(("login", username))

    def send_message(self, message):
        if FakeSMTP.fail_with is not None:
            raise FakeSMTP.fail_with
        self.sent.append(message)


@pytest.fixture(autouse=True)
def fake_smtp(monkeypatch):
    FakeSMTP.instances = []
    FakeSMTP.fail_with = None
    monkeypatch.setattr(smtplib, "SMTP", FakeSMTP)
    return FakeSMTP


def _notifier(**overrides):
    options = {
        "host": "smtp.example.com",
        "port": 587,
        "from_address": "no-reply@example.com",
        "timeout": timedelta(seconds=3),
    }
    options.update(overrides)
    return SMTPNotifier(**options)


def test_send_builds_a_plain_text_email(fake_smtp):
    _notifier().send(MailMessage(to="a@b.com", subject="Verification email", body="Code: X"))

    conn = fake_smtp.instances[0]
    assert (conn.host, conn.port, conn.timeout) == ("smtp.example.com", 587, 3.0)
    assert conn.calls == []
    email = conn.sent[0]
    assert email["To"] == "a@b.com"
    assert email["From"] == "no-reply@example.com"
    assert email["Subject"] == "Verification email"
    assert email.get_content().strip() == "Code: X"


def test_credentials_enable_starttls_and_login(fake_smtp):
    _notifier(username="mailer", password="secret").send(
        MailMessage(to="a@b.com", subject="s", body="b")
    )

    assert fake_smtp.instances[0].calls == [("starttls",), ("login", "mailer")]


def test_transport_failures_become_notification_errors(fake_smtp):
    fake_smtp.fail_with = smtplib.SMTPServerDisconnected("gone")

    with pytest.raises(NotificationError):
        _notifier().send(MailMessage(to="a@b.com", subject="s", body="b"))


@pytest.mark.parametrize(
    "message",
    [
        MailMessage(to="not-an-email", subject="s", body="b"),
        MailMessage(to="a@b.com", subject=" ", body="b"),
        MailMessage(to="a@b.com", subject="s", body=""),
    ],
)
def test_invalid_messages_never_reach_the_relay(fake_smtp, message):
    with pytest.raises(NotificationError):
        _notifier().send(message)

    assert fake_smtp.instances == []
