"""Opaque token generation and expiry helpers."""

import re
import secrets
import string
from datetime import UTC, datetime, timedelta

TOKEN_BYTES = 32
REFERRAL_PREFIX_LENGTH = 6
REFERRAL_SUFFIX_LENGTH = 4
BASE36_ALPHABET = string.digits + string.ascii_lowercase

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")


def issue_token(nbytes: int = TOKEN_BYTES) -> str:
    """Generate an unguessable hex token (64 chars for the default 32 bytes)."""
    return secrets.token_hex(nbytes)


def expiry_from(now: datetime, duration: timedelta) -> datetime:
    return now + duration


def is_expired(expires_at: datetime, now: datetime | None = None) -> bool:
    """Check whether an expiry timestamp has passed.

    Some backends (SQLite) hand back naive datetimes; those are read as UTC.
    """
    now = now or datetime.now(UTC)
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=UTC)
    return expires_at < now


def generate_referral_code(email: str) -> str:
    """Build a shareable referral code like ``janedo-x7k2``.

    The prefix is the alphanumeric part of the email's local part, cut to six
    characters; the suffix is four random base36 characters.
    """
    local_part = email.split("@", 1)[0]
    prefix = _NON_ALNUM.sub("", local_part)[:REFERRAL_PREFIX_LENGTH]
    suffix = "".join(secrets.choice(BASE36_ALPHABET) for _ in range(REFERRAL_SUFFIX_LENGTH))
    return f"{prefix}-{suffix}".lower()
