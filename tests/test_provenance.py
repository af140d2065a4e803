"""
Tests for provenance stamping.
"""
import hashlib
from datetime import datetime

from press_sync.models import Article
from press_sync.provenance import provenance_hash, stamp_provenance

PUBLISHED = datetime(2026, 5, 4, 9, 30, 0)


def _article(**kwargs) -> Article:
    values = dict(title="Bridge reopens", content="Traffic resumed at noon.", author="r.diaz")
    values.update(kwargs)
    return Article(**values)


def test_hash_covers_title_content_author_and_publish_time():
    article = _article(published_at=PUBLISHED)
    expected = hashlib.sha256(
        "Bridge reopens|Traffic resumed at noon.|r.diaz|2026-05-04T09:30:00".encode("utf-8")
    ).hexdigest()
    assert provenance_hash(article) == expected


def test_hash_changes_with_content():
    a = _article(published_at=PUBLISHED)
    b = _article(published_at=PUBLISHED, content="Traffic resumed at one.")
    assert provenance_hash(a) != provenance_hash(b)


def test_stamp_sets_fields():
    article = stamp_provenance(_article(published_at=PUBLISHED), outlet_domain="news.test", now=1_750_000_000.7)

    assert article.provenance_ts == 1_750_000_000
    assert article.chain_commit_status == "queued"
    assert article.outlet_domain == "news.test"
    assert article.provenance_hash == provenance_hash(article)


def test_stamp_fills_missing_publish_time():
    article = stamp_provenance(_article(), now=1)
    assert article.published_at is not None
    assert article.outlet_domain is None
