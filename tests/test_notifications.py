"""Tests for result notifications."""

from datetime import date

import pytest
from rich.console import Console

import notifications
from config import SmtpConfig
from models import LearnerContext, Mode, SessionSummary
from notifications import ConsoleNotifier, EmailNotifier, format_result_message
from session import SessionController


class FakeSMTP:
    """Records what an SMTP client was asked to do."""

    instances: list["FakeSMTP"] = []

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port
        self.started_tls = False
        self.login_args = None
        self.sent = []
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        self.started_tls = True

    def login(self, username, password):
        self.login_args = (username, password)

    def send_message(self, message):
        self.sent.append(message)


class FailingSMTP(FakeSMTP):
    def send_message(self, message):
        raise OSError("connection refused")


@pytest.fixture
def fake_smtp(monkeypatch):
    FakeSMTP.instances = []
    monkeypatch.setattr(notifications.smtplib, "SMTP", FakeSMTP)
    return FakeSMTP


@pytest.fixture
def smtp_config() -> SmtpConfig:
    return SmtpConfig(
        host="smtp.example.com",
        username="tutor",
        password="secret",
        sender="tutor@example.com",
    )


def make_summary(mode: Mode = Mode.TEST, tally: int = 7, total: int = 9) -> SessionSummary:
    return SessionSummary(
        session_id="s1",
        user_id=1,
        mode=mode,
        total=total,
        tally=tally,
        results=tuple([True] * tally + [False] * (total - tally)),
        finished_on=date(2024, 5, 1),
    )


class TestFormat:
    def test_result_message(self):
        assert format_result_message(make_summary()) == "Final test result: 7/9"


class TestConsoleNotifier:
    """Tests for ConsoleNotifier."""

    def test_prints_test_result(self):
        """A finished test should be printed."""
        console = Console(record=True, width=80)
        ConsoleNotifier(console).on_session_finished(make_summary())
        assert "Final test result: 7/9" in console.export_text()

    def test_silent_for_practice(self):
        """Practice runs should not be announced."""
        console = Console(record=True, width=80)
        ConsoleNotifier(console).on_session_finished(make_summary(Mode.PRACTICE))
        assert console.export_text() == ""


class TestEmailNotifier:
    """Tests for EmailNotifier."""

    def test_sends_result_email(self, fake_smtp, smtp_config):
        """The learner should get one email with the score."""
        learner = LearnerContext(user_id=1, username="alsu", email="alsu@example.com")
        EmailNotifier(smtp_config, learner).on_session_finished(make_summary())

        (client,) = fake_smtp.instances
        assert (client.host, client.port) == ("smtp.example.com", 587)
        assert client.started_tls
        assert client.login_args == ("tutor", "secret")

        (message,) = client.sent
        assert message["To"] == "alsu@example.com"
        assert message["From"] == "tutor@example.com"
        assert "Final test result: 7/9" in message.get_content()

    def test_skips_learner_without_email(self, fake_smtp, smtp_config):
        """No email address means no connection at all."""
        learner = LearnerContext(user_id=1, username="alsu")
        EmailNotifier(smtp_config, learner).on_session_finished(make_summary())
        assert fake_smtp.instances == []

    def test_skips_practice_runs(self, fake_smtp, smtp_config):
        """Only final tests are emailed."""
        learner = LearnerContext(user_id=1, username="alsu", email="alsu@example.com")
        EmailNotifier(smtp_config, learner).on_session_finished(make_summary(Mode.PRACTICE))
        assert fake_smtp.instances == []

    def test_no_tls_or_login_when_not_configured(self, fake_smtp):
        """Plain SMTP without credentials should skip TLS and login."""
        config = SmtpConfig(host="localhost", port=25, sender="t@example.com", use_tls=False)
        learner = LearnerContext(user_id=1, username="alsu", email="alsu@example.com")
        EmailNotifier(config, learner).on_session_finished(make_summary())

        (client,) = fake_smtp.instances
        assert not client.started_tls
        assert client.login_args is None

    def test_delivery_errors_propagate(self, monkeypatch, smtp_config):
        """SMTP failures should reach the caller."""
        monkeypatch.setattr(notifications.smtplib, "SMTP", FailingSMTP)
        learner = LearnerContext(user_id=1, username="alsu", email="alsu@example.com")
        with pytest.raises(OSError):
            EmailNotifier(smtp_config, learner).on_session_finished(make_summary())

    def test_controller_survives_delivery_error(self, monkeypatch, smtp_config, test_mode):
        """A failed email should not stop the session from finishing."""
        monkeypatch.setattr(notifications.smtplib, "SMTP", FailingSMTP)
        learner = LearnerContext(user_id=1, username="alsu", email="alsu@example.com")
        controller = SessionController(
            learner, policy=test_mode, listeners=[EmailNotifier(smtp_config, learner)]
        )
        controller.start([])
        assert controller.tally == 0
