"""Transactional email delivery through the Resend HTTP API.

Delivery is best effort: every send returns a ``NotificationOutcome`` and never
raises, so callers can log a failure without failing the request that
triggered it.
"""

import logging
from dataclasses import dataclass

import httpx

from glowmate.config import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotificationOutcome:
    """Result of a single email send."""

    delivered: bool
    error: str | None = None


class EmailNotifier:
    """Service for sending transactional email."""

    def __init__(self, settings: Settings, client: httpx.Client | None = None) -> None:
        self.settings = settings
        self._client = client

    def send_verification_email(self, to_email: str, token: str) -> NotificationOutcome:
        """Send the account activation link."""
        verification_url = f"{self.settings.app_url}/auth/verify-email?token={token}"
        html = f"""
            <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
                <h2>Welcome to GlowMate!</h2>
                <p>Please click the button below to verify your email address and activate your account.</p>
                <a href="{verification_url}" style="background-color: #4CAF50; color: white; padding: 10px 20px; text-decoration: none; border-radius: 5px; display: inline-block; margin: 20px 0;">Verify Email</a>
                <p>This link will expire in {self.settings.verification_token_ttl_hours} hours.</p>
                <p>If you didn't create an account, you can safely ignore this email.</p>
            </div>
        """
        return self.send(to_email, "Verify your GlowMate Account", html)

    def send_password_reset_email(self, to_email: str, token: str) -> NotificationOutcome:
        """Send the password reset link."""
        reset_url = f"{self.settings.app_url}/auth/reset-password?token={token}"
        html = f"""
            <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
                <h2>Reset Password</h2>
                <p>You requested a password reset. Click the button below to reset it.</p>
                <a href="{reset_url}" style="background-color: #008CBA; color: white; padding: 10px 20px; text-decoration: none; border-radius: 5px; display: inline-block; margin: 20px 0;">Reset Password</a>
                <p>If you didn't request this, you can safely ignore this email.</p>
            </div>
        """
        return self.send(to_email, "Reset your GlowMate Password", html)

    def send_waitlist_verification_email(self, to_email: str, token: str) -> NotificationOutcome:
        """Send the waitlist spot confirmation link."""
        verification_url = f"{self.settings.frontend_url}/verify-waitlist?token={token}"
        html = f"""
            <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
                <h2>Verify Your Spot!</h2>
                <p>Thanks for joining the GlowMate waitlist. Please verify your email to secure your position.</p>
                <a href="{verification_url}" style="background-color: #9333ea; color: white; padding: 10px 20px; text-decoration: none; border-radius: 5px; display: inline-block; margin: 20px 0;">Verify Email</a>
            </div>
        """
        return self.send(to_email, "Verify your Spot on GlowMate Waitlist", html)

    def send(self, to_email: str, subject: str, html: str) -> NotificationOutcome:
        """Post one email to the gateway."""
        if not self.settings.email_configured:
            logger.warning("Email API key not configured, skipping email send")
            return NotificationOutcome(delivered=False, error="not configured")

        payload = {
            "from": self.settings.email_from,
            "to": [to_email],
            "subject": subject,
            "html": html,
        }
        headers = {"Authorization": f"Bearer {self.settings.resend_api_key}"}
        url = self.settings.resend_api_url

        try:
            if self._client is not None:
                response = self._client.post(url, json=payload, headers=headers)
            else:
                with httpx.Client(timeout=self.settings.email_timeout_seconds) as client:
                    response = client.post(url, json=payload, headers=headers)
            response.raise_for_status()
        except httpx.TimeoutException:
            logger.warning(f"Timed out sending email to {to_email}: {subject[:50]}")
            return NotificationOutcome(delivered=False, error="timeout")
        except httpx.HTTPError as e:
            logger.warning(f"Failed to send email to {to_email}: {e}")
            return NotificationOutcome(delivered=False, error=str(e))

        logger.info(f"Email sent to {to_email}: {subject[:50]}")
        return NotificationOutcome(delivered=True)
