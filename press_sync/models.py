"""
ORM models for the Press SYNC gateway.

Articles and the submissions that publish them, plus the Arweave import
queue.
"""
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()

# Submission statuses
AWAITING_PAYMENT_VERIFICATION = "awaiting_payment_verification"
AWAITING_MODERATION = "awaiting_moderation"
PUBLISHED = "published"
REJECTED = "rejected"

SUBMISSION_STATUSES = (
    AWAITING_PAYMENT_VERIFICATION,
    AWAITING_MODERATION,
    PUBLISHED,
    REJECTED,
)

VOTE_ROLES = ("journalist", "editor", "outlet", "community")

ARWEAVE_QUEUED = "queued"


def _utcnow():
    """Return current UTC time as a naive datetime (SQLite doesn't store tz info)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Article(Base):
    __tablename__ = "articles"

    id = Column(Integer, primary_key=True)
    created_at = Column(DateTime, default=_utcnow)
    title = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    image_url = Column(String, nullable=True)
    author = Column(String, nullable=True)
    visibility = Column(String, default="pending")  # pending | public
    published_at = Column(DateTime, nullable=True)

    provenance_hash = Column(String(64), nullable=True)
    provenance_ts = Column(Integer, nullable=True)  # epoch seconds
    chain_commit_status = Column(String, nullable=True)  # queued
    outlet_domain = Column(String, nullable=True)

    secondary_author_wallet = Column(String, nullable=True)
    secondary_author_split = Column(String, nullable=True)
    secondary_author_lock = Column(Boolean, default=False)
    secondary_author_fee = Column(Float, nullable=True)

    votes_journalist = Column(Integer, default=0)
    votes_editor = Column(Integer, default=0)
    votes_outlet = Column(Integer, default=0)
    votes_community = Column(Integer, default=0)

    submissions = relationship("Submission", back_populates="article")

    def vote_counts(self):
        return {role: int(getattr(self, f"votes_{role}") or 0) for role in VOTE_ROLES}

    def to_dict(self):
        return {
            "id": self.id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "title": self.title,
            "image_url": self.image_url,
            "author": self.author,
            "visibility": self.visibility,
            "published_at": self.published_at.isoformat() if self.published_at else None,
            "provenance_hash": self.provenance_hash,
            "provenance_ts": self.provenance_ts,
            "chain_commit_status": self.chain_commit_status,
            "outlet_domain": self.outlet_domain,
            "secondary_author_wallet": self.secondary_author_wallet,
            "secondary_author_split": self.secondary_author_split,
            "secondary_author_lock": bool(self.secondary_author_lock),
        }


class Submission(Base):
    __tablename__ = "submissions"

    id = Column(Integer, primary_key=True)
    created_at = Column(DateTime, default=_utcnow)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)
    article_id = Column(Integer, ForeignKey("articles.id"), nullable=True, index=True)
    title = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    image_url = Column(String, nullable=True)
    fee_amount = Column(Float, nullable=True)
    fee_asset = Column(String, nullable=True)
    tx_reference = Column(String, nullable=False, index=True)
    status = Column(String, nullable=False, default=AWAITING_PAYMENT_VERIFICATION, index=True)
    moderation_verdict = Column(String, nullable=True)  # approved | rejected
    moderation_reason = Column(String, nullable=True)
    failure_reason = Column(String, nullable=True)

    article = relationship("Article", back_populates="submissions")

    def to_dict(self):
        return {
            "id": self.id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
            "article_id": self.article_id,
            "title": self.title,
            "image_url": self.image_url,
            "fee_amount": self.fee_amount,
            "fee_asset": self.fee_asset,
            "tx_reference": self.tx_reference,
            "status": self.status,
            "moderation_verdict": self.moderation_verdict,
            "moderation_reason": self.moderation_reason,
            "failure_reason": self.failure_reason,
        }


class ArweaveImport(Base):
    """A legacy Arweave transaction waiting to be imported as a Press article."""
    __tablename__ = "arweave_imports"

    id = Column(Integer, primary_key=True)
    tx_id = Column(String, nullable=False, index=True)
    queued_at = Column(Integer, nullable=False)  # epoch seconds
    status = Column(String, nullable=False, default=ARWEAVE_QUEUED, index=True)
    fee_wei = Column(String, nullable=True)
    bond_wei = Column(String, nullable=True)

    def to_dict(self):
        return {
            "id": self.id,
            "tx": self.tx_id,
            "ts": self.queued_at,
            "status": self.status,
            "fee_wei": self.fee_wei,
            "bond_wei": self.bond_wei,
        }
