"""Tests for the email notifier."""

import json

import httpx
import pytest

from glowmate.config import Settings
from glowmate.services.email import EmailNotifier


@pytest.fixture
def email_settings():
    return Settings(resend_api_key="re_test_key", app_url="https://app.test", frontend_url="https://web.test")


def _notifier(settings, handler):
    return EmailNotifier(settings, client=httpx.Client(transport=httpx.MockTransport(handler)))


class TestEmailNotifier:
    def test_send_verification_email(self, email_settings):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json={"id": "email_123"})

        outcome = _notifier(email_settings, handler).send_verification_email("to@example.com", "abc123")

        assert outcome.delivered is True
        assert outcome.error is None
        assert len(requests) == 1
        request = requests[0]
        assert str(request.url) == "https://api.resend.com/emails"
        assert request.headers["Authorization"] == "Bearer re_test_key"
        body = json.loads(request.content)
        assert body["to"] == ["to@example.com"]
        assert body["from"] == email_settings.email_from
        assert "https://app.test/auth/verify-email?token=abc123" in body["html"]

    def test_waitlist_link_points_at_frontend(self, email_settings):
        captured = {}

        def handler(request):
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json={"id": "email_456"})

        _notifier(email_settings, handler).send_waitlist_verification_email("to@example.com", "tok")
        assert "https://web.test/verify-waitlist?token=tok" in captured["body"]["html"]

    def test_gateway_error_is_reported_not_raised(self, email_settings):
        outcome = _notifier(
            email_settings, lambda request: httpx.Response(500, json={"message": "boom"})
        ).send_password_reset_email("to@example.com", "tok")

        assert outcome.delivered is False
        assert "500" in outcome.error

    def test_timeout_is_reported_not_raised(self, email_settings):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        outcome = _notifier(email_settings, handler).send("to@example.com", "Subject", "<p>hi</p>")
        assert outcome.delivered is False
        assert outcome.error == "timeout"

    def test_connection_error_is_reported_not_raised(self, email_settings):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        outcome = _notifier(email_settings, handler).send("to@example.com", "Subject", "<p>hi</p>")
        assert outcome.delivered is False

    def test_not_configured_skips_send(self):
        def handler(request):
            raise AssertionError("no request expected")

        outcome = _notifier(Settings(resend_api_key=""), handler).send(
            "to@example.com", "Subject", "<p>hi</p>"
        )
        assert outcome.delivered is False
        assert outcome.error == "not configured"
