"""Waitlist ledger: joining, referral awards, ranking and verification."""

import logging
from dataclasses import dataclass

from sqlalchemy import and_, func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from glowmate.config import Settings
from glowmate.errors import InternalError, InvalidTokenError
from glowmate.models.waitlist import REFERRAL_CODE_MAX_LENGTH, WaitlistEntry
from glowmate.services.email import EmailNotifier
from glowmate.services.tokens import generate_referral_code, issue_token

logger = logging.getLogger(__name__)


@dataclass
class JoinResult:
    """Outcome of a join request."""

    entry: WaitlistEntry
    position: int
    created: bool


class WaitlistService:
    """Service for waitlist operations."""

    def __init__(self, db: Session, settings: Settings, notifier: EmailNotifier):
        self.db = db
        self.settings = settings
        self.notifier = notifier

    def get_entry_by_email(self, email: str) -> WaitlistEntry | None:
        return self.db.query(WaitlistEntry).filter(WaitlistEntry.email == email).first()

    def get_entry_by_referral_code(self, referral_code: str) -> WaitlistEntry | None:
        return (
            self.db.query(WaitlistEntry)
            .filter(WaitlistEntry.referral_code == referral_code)
            .first()
        )

    def position_of(self, entry: WaitlistEntry) -> int:
        """Compute the 1-based rank of an entry.

        Entries with more points rank first; equal points rank by earlier
        creation time.
        """
        ahead = (
            self.db.query(func.count(WaitlistEntry.id))
            .filter(
                or_(
                    WaitlistEntry.points > entry.points,
                    and_(
                        WaitlistEntry.points == entry.points,
                        WaitlistEntry.created_at < entry.created_at,
                    ),
                )
            )
            .scalar()
        )
        return ahead + 1

    def join(self, email: str, referred_by: str | None = None) -> JoinResult:
        """Add an email to the waitlist, or report its existing standing.

        Joining again is not an error: an unverified entry gets its
        verification email resent, a verified one is returned unchanged.
        """
        existing = self.get_entry_by_email(email)
        if existing is not None:
            return self._rejoin(existing)

        try:
            entry = self._create_entry(email, referred_by)
        except IntegrityError:
            self.db.rollback()
            # Lost a race against a concurrent join for the same email
            existing = self.get_entry_by_email(email)
            if existing is None:
                logger.exception("Failed to create waitlist entry")
                raise InternalError() from None
            return self._rejoin(existing)

        outcome = self.notifier.send_waitlist_verification_email(
            entry.email, entry.verification_token
        )
        if not outcome.delivered:
            logger.warning(
                f"Waitlist verification email for entry {entry.id} not delivered: {outcome.error}"
            )

        return JoinResult(entry=entry, position=self.position_of(entry), created=True)

    def _rejoin(self, entry: WaitlistEntry) -> JoinResult:
        position = self.position_of(entry)
        if not entry.is_verified:
            if not entry.verification_token:
                entry.verification_token = issue_token()
                self.db.commit()
                self.db.refresh(entry)
            outcome = self.notifier.send_waitlist_verification_email(
                entry.email, entry.verification_token
            )
            if outcome.delivered:
                logger.info(f"Resent waitlist verification email for entry {entry.id}")
            else:
                logger.warning(
                    f"Failed to resend waitlist verification email for entry {entry.id}: "
                    f"{outcome.error}"
                )
        return JoinResult(entry=entry, position=position, created=False)

    def _create_entry(self, email: str, referred_by: str | None) -> WaitlistEntry:
        referral_code = self._allocate_referral_code(email)

        referrer = None
        # Codes longer than any issued code cannot match
        if referred_by and len(referred_by) <= REFERRAL_CODE_MAX_LENGTH:
            referrer = self.get_entry_by_referral_code(referred_by)
        if referrer is not None:
            # Atomic increment at the store, not read-modify-write
            self.db.query(WaitlistEntry).filter(WaitlistEntry.id == referrer.id).update(
                {WaitlistEntry.points: WaitlistEntry.points + self.settings.referral_award_points},
                synchronize_session=False,
            )
        elif referred_by:
            logger.info("Ignoring unknown referral code on waitlist join")

        entry = WaitlistEntry(
            email=email,
            referral_code=referral_code,
            referred_by=referrer.referral_code if referrer is not None else None,
            points=0,
            is_verified=False,
            verification_token=issue_token(),
        )
        self.db.add(entry)
        self.db.commit()
        self.db.refresh(entry)

        if referrer is not None:
            award = self.settings.referral_award_points
            logger.info(f"Awarded {award} points to waitlist entry {referrer.id}")
        logger.info(f"Waitlist entry {entry.id} created")
        return entry

    def _allocate_referral_code(self, email: str) -> str:
        """Generate a referral code not yet used by another entry."""
        for _ in range(self.settings.referral_code_max_attempts):
            candidate = generate_referral_code(email)
            if self.get_entry_by_referral_code(candidate) is None:
                return candidate
        logger.error(
            f"No free referral code after {self.settings.referral_code_max_attempts} attempts"
        )
        raise InternalError("Unable to join the waitlist. Please try again later.")

    def verify(self, token: str) -> None:
        """Mark the entry owning ``token`` verified and consume the token."""
        updated = (
            self.db.query(WaitlistEntry)
            .filter(WaitlistEntry.verification_token == token)
            .update(
                {WaitlistEntry.is_verified: True, WaitlistEntry.verification_token: None},
                synchronize_session=False,
            )
        )
        if not updated:
            self.db.rollback()
            raise InvalidTokenError()
        self.db.commit()
        self.db.expire_all()
        logger.info("Waitlist entry verified")
