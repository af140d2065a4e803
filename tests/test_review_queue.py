"""
Tests for the submission queue and portal statistics.
"""
from datetime import datetime, timedelta

from press_sync.models import (
    AWAITING_MODERATION,
    AWAITING_PAYMENT_VERIFICATION,
    PUBLISHED,
    REJECTED,
    Submission,
)
from press_sync.review_queue import get_portal_stats, list_submissions

BASE = datetime(2026, 3, 1, 12, 0, 0)


def _add(session, title, status, minutes=0, txid="0xabc"):
    submission = Submission(
        title=title,
        content="body",
        tx_reference=txid,
        status=status,
        created_at=BASE + timedelta(minutes=minutes),
    )
    session.add(submission)
    session.commit()
    return submission


class TestListSubmissions:

    def test_default_is_awaiting_moderation_newest_first(self, db_session):
        _add(db_session, "older", AWAITING_MODERATION, minutes=1)
        _add(db_session, "done", PUBLISHED, minutes=2)
        _add(db_session, "newer", AWAITING_MODERATION, minutes=3)

        result = list_submissions()

        assert result["ok"] is True
        assert result["status"] == AWAITING_MODERATION
        assert [e["title"] for e in result["entries"]] == ["newer", "older"]
        assert result["count"] == 2

    def test_limit(self, db_session):
        for i in range(5):
            _add(db_session, f"s{i}", REJECTED, minutes=i)

        result = list_submissions(status=REJECTED, limit=2)

        assert [e["title"] for e in result["entries"]] == ["s4", "s3"]

    def test_invalid_status(self):
        result = list_submissions(status="draft")
        assert result["ok"] is False
        assert result["error_kind"] == "validation_error"

    def test_empty(self):
        assert list_submissions(status=PUBLISHED)["entries"] == []


class TestPortalStats:

    def test_counts_every_status(self, db_session):
        _add(db_session, "a", PUBLISHED)
        _add(db_session, "b", PUBLISHED)
        _add(db_session, "c", REJECTED)

        counts = get_portal_stats()["counts"]

        assert counts == {
            AWAITING_PAYMENT_VERIFICATION: 0,
            AWAITING_MODERATION: 0,
            PUBLISHED: 2,
            REJECTED: 1,
        }

    def test_latest_entries(self, db_session):
        _add(db_session, "first", REJECTED, minutes=0, txid="0x01")
        _add(db_session, "second", PUBLISHED, minutes=5, txid="0x02")

        latest = get_portal_stats(latest=1)["latest"]

        assert len(latest) == 1
        assert latest[0]["title"] == "second"
        assert latest[0]["txid"] == "0x02"
        assert latest[0]["status"] == PUBLISHED
        assert latest[0]["date"] == "2026-03-01T12:05:00"
