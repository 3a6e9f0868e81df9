"""
Tests for the email dispatcher. No real SMTP server is contacted.
"""

import smtplib
from datetime import date

import pytest

from grc_backoffice.config import Settings
from grc_backoffice.services import email_service as email_module
from grc_backoffice.services.email_service import EmailService


@pytest.fixture
def smtp_settings():
    return Settings(
        SMTP_HOST="smtp.example.com",
        SMTP_PORT="587",
        SMTP_USER="grc@example.com",
        SMTP_PASSWORD="secret",
        SMTP_FROM_EMAIL="noreply@example.com",
    )


class FakeSMTP:
    """Records the calls an SMTP session would make."""

    sent: list = []
    fail_login = False

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port

    def starttls(self):
        pass

    def login(self, user, password):
        if FakeSMTP.fail_login:
            raise smtplib.SMTPAuthenticationError(535, b"bad credentials")

    def send_message(self, msg, from_addr, to_addrs):
        FakeSMTP.sent.append((msg["Subject"], from_addr, to_addrs))

    def quit(self):
        pass


@pytest.fixture
def fake_smtp(monkeypatch):
    FakeSMTP.sent = []
    FakeSMTP.fail_login = False
    monkeypatch.setattr(email_module.smtplib, "SMTP", FakeSMTP)
    return FakeSMTP


class TestEmailService:

    def test_disabled_without_smtp_host(self, email_service):
        assert email_service.is_enabled() is False

    def test_disabled_send_reports_success(self, email_service):
        assert email_service.send_email("a@example.com", "Hi", "<p>Hi</p>") is True

    def test_enabled_with_full_config(self, smtp_settings):
        assert EmailService(smtp_settings).is_enabled() is True

    def test_render_escapes_and_splits_paragraphs(self, email_service):
        html = email_service.render_email(
            "Jane <Admin>",
            "Subject",
            "Title",
            "First paragraph.\n\nSecond paragraph.",
            action_url="https://compliance.example.com/x",
            action_text="Open it",
        )

        assert "Jane &lt;Admin&gt;" in html
        assert "<p>First paragraph.</p>" in html
        assert "<p>Second paragraph.</p>" in html
        assert "Open it" in html

    def test_send_through_smtp(self, smtp_settings, fake_smtp):
        service = EmailService(smtp_settings)

        ok = service.send_due_control_reminder(
            "owner@example.com",
            "Owner",
            "Encrypt Sensitive Data at Rest",
            "CIS-3.1",
            date(2026, 2, 1),
            "abc",
        )

        assert ok is True
        subject, from_addr, to_addrs = fake_smtp.sent[0]
        assert "Encrypt Sensitive Data at Rest" in subject
        assert from_addr == "noreply@example.com"
        assert to_addrs == ["owner@example.com"]

    def test_smtp_failure_returns_false(self, smtp_settings, fake_smtp):
        fake_smtp.fail_login = True

        ok = EmailService(smtp_settings).send_email("a@example.com", "Hi", "<p>Hi</p>")

        assert ok is False
        assert fake_smtp.sent == []

    def test_links_use_frontend_base_url(self, smtp_settings):
        service = EmailService(smtp_settings)

        assert service.link("/dashboard") == "https://compliance.yourcompany.com/dashboard"
