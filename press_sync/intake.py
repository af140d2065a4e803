"""
Article submission gate.

A submission passes, in order:
1. Field validation (title, content, 0x-prefixed payment TXID)
2. Outlet configuration check (verification is never skipped)
3. Fee verification against the installer API
4. AI moderation

Each step either advances the submission record or ends the attempt.
Nothing is retried; a failed submitter resubmits with a fresh request.
"""
import logging
from typing import Any, Dict, Optional

from press_sync.config import OutletConfig, load_config
from press_sync.database import get_session, init_db
from press_sync.errors import (
    ConfigurationError,
    GatewayUnreachable,
    ModerationRejected,
    NonJSONResponse,
    PressSyncError,
    ValidationError,
)
from press_sync.models import (
    AWAITING_MODERATION,
    AWAITING_PAYMENT_VERIFICATION,
    PUBLISHED,
    REJECTED,
    Article,
    Submission,
    _utcnow,
)
from press_sync.moderator import ContentModerator
from press_sync.provenance import stamp_provenance
from press_sync.verifier import FeeVerifier

logger = logging.getLogger(__name__)

TX_PREFIX = "0x"


def _validate(title: str, content: str, tx_reference: str) -> None:
    if not title or not content:
        raise ValidationError("Title and content required")
    if not tx_reference or not tx_reference.startswith(TX_PREFIX) or len(tx_reference) <= len(TX_PREFIX):
        raise ValidationError("Submission fee TXID required (0x-prefixed transaction hash)")


class SubmissionIntake:
    """
    Runs submissions through fee verification and moderation.

    Collaborators are injected so tests (and alternative deployments) can
    swap the HTTP-backed verifier and moderator.
    """

    def __init__(
        self,
        config: OutletConfig,
        verifier: Optional[FeeVerifier] = None,
        moderator: Optional[ContentModerator] = None,
    ):
        self.config = config
        self.verifier = verifier or FeeVerifier(config)
        self.moderator = moderator or ContentModerator(config)

    def submit(
        self,
        title: str,
        content: str,
        tx_reference: str,
        image_url: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Submit an article.

        Args:
            title: Headline
            content: Article body
            tx_reference: TXID of the PRESS fee payment ("0x...")
            image_url: Optional lead image

        Returns:
            Published: {"ok": True, "record_id": N, "article_id": M, "status": "published", "reason": "OK"}
            Rejected: {"ok": False, "record_id": N, "status": "rejected", "error_kind": "...", "error": "..."}
            Invalid: {"ok": False, "error_kind": "validation_error" | "configuration_error", "error": "..."}
        """
        title = (title or "").strip()
        content = (content or "").strip()
        tx_reference = (tx_reference or "").strip()
        image_url = (image_url or "").strip() or None

        try:
            _validate(title, content, tx_reference)
            missing = self.config.missing_payment_settings()
            if missing:
                raise ConfigurationError(
                    "Outlet not fully configured (missing: " + ", ".join(missing) + ")"
                )
        except PressSyncError as e:
            return e.to_dict()

        init_db()
        session = get_session()
        try:
            record = Submission(
                title=title,
                content=content,
                image_url=image_url,
                fee_amount=self.config.publish_fee_press,
                fee_asset=self.config.press_token,
                tx_reference=tx_reference,
                status=AWAITING_PAYMENT_VERIFICATION,
            )
            session.add(record)
            session.commit()

            # ── Fee verification ──
            try:
                self.verifier.verify(tx_reference)
            except PressSyncError as e:
                record.status = REJECTED
                record.failure_reason = str(e)
                session.commit()
                logger.info("Submission #%s rejected at fee verification: %s", record.id, e)
                return e.to_dict(record_id=record.id, status=REJECTED)
            except Exception as e:
                session.rollback()
                record.status = REJECTED
                record.failure_reason = f"Fee verification failed unexpectedly: {e}"
                session.commit()
                logger.exception("Submission #%s: fee verifier raised", record.id)
                raise

            # ── Paid: create the pending article ──
            article = Article(
                title=title,
                content=content,
                image_url=image_url,
                visibility="pending",
            )
            session.add(article)
            session.flush()
            record.article = article
            record.status = AWAITING_MODERATION
            session.commit()
            logger.info("Submission #%s paid (%s); awaiting moderation", record.id, tx_reference)

            return self._moderate(session, record)
        finally:
            session.close()

    def resume_moderation(self, record_id: int) -> Dict[str, Any]:
        """
        Re-run moderation for a submission stuck in awaiting_moderation.

        Operator action for records left behind by an unreachable moderator
        or a dropped request. Any other status is refused.
        """
        init_db()
        session = get_session()
        try:
            record = session.get(Submission, record_id)
            if record is None:
                return ValidationError(f"Submission #{record_id} not found").to_dict()
            if record.status != AWAITING_MODERATION:
                return ValidationError(
                    f"Submission #{record_id} is '{record.status}', not '{AWAITING_MODERATION}'"
                ).to_dict(record_id=record.id, status=record.status)

            if record.article is None:
                article = Article(
                    title=record.title,
                    content=record.content,
                    image_url=record.image_url,
                    visibility="pending",
                )
                session.add(article)
                session.flush()
                record.article = article
                session.commit()

            return self._moderate(session, record)
        finally:
            session.close()

    def _moderate(self, session, record: Submission) -> Dict[str, Any]:
        """Apply the moderator's verdict to a paid submission."""
        try:
            result = self.moderator.review(record.title, record.content, record.image_url)
        except (GatewayUnreachable, NonJSONResponse) as e:
            logger.warning("Moderation failed for submission #%s: %s", record.id, e)
            return e.to_dict(record_id=record.id, status=record.status)

        record.moderation_verdict = result.verdict
        record.moderation_reason = result.reason

        if not result.approved:
            record.status = REJECTED
            session.commit()
            logger.info("Submission #%s rejected by moderation: %s", record.id, result.reason)
            return ModerationRejected(result.reason).to_dict(
                record_id=record.id,
                status=REJECTED,
                reason=result.reason,
            )

        article = record.article
        article.visibility = "public"
        article.published_at = _utcnow()
        stamp_provenance(article, outlet_domain=self.config.outlet_domain)
        record.status = PUBLISHED
        session.commit()
        logger.info("Submission #%s published as article #%s", record.id, article.id)

        return {
            "ok": True,
            "record_id": record.id,
            "article_id": article.id,
            "status": PUBLISHED,
            "reason": result.reason,
        }


def submit(
    title: str,
    content: str,
    tx_reference: str,
    image_url: Optional[str] = None,
) -> Dict[str, Any]:
    """Submit with the outlet configuration from disk."""
    return SubmissionIntake(load_config()).submit(
        title=title,
        content=content,
        tx_reference=tx_reference,
        image_url=image_url,
    )


def resume_moderation(record_id: int) -> Dict[str, Any]:
    """Resume moderation with the outlet configuration from disk."""
    return SubmissionIntake(load_config()).resume_moderation(record_id)
