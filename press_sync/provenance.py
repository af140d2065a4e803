"""
Provenance stamping for published articles.

A published article is fingerprinted locally and queued for a chain commit.
An off-chain relay (not part of this package) picks up queued commits.
"""
import hashlib
import time
from typing import Optional

from press_sync.models import Article, _utcnow


def provenance_hash(article: Article) -> str:
    """SHA-256 over title|content|author|published_at."""
    published = article.published_at.isoformat() if article.published_at else ""
    material = "|".join([
        article.title or "",
        article.content or "",
        article.author or "",
        published,
    ])
    return hashlib.sha256(material.encode("utf-8")).hexdigest()


def stamp_provenance(article: Article, outlet_domain: str = "", now: Optional[float] = None) -> Article:
    """
    Fingerprint an article and queue its chain commit.

    Does not commit; the caller owns the session.
    """
    if article.published_at is None:
        article.published_at = _utcnow()
    article.provenance_hash = provenance_hash(article)
    article.provenance_ts = int(now if now is not None else time.time())
    article.chain_commit_status = "queued"
    if outlet_domain:
        article.outlet_domain = outlet_domain
    return article
