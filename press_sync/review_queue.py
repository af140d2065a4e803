"""
Submission queue and portal statistics.

Read-only views over stored submissions for reviewers and the outlet
portal.
"""
from typing import Any, Dict

from sqlalchemy import desc, func

from press_sync.database import get_session, init_db
from press_sync.errors import ValidationError
from press_sync.models import AWAITING_MODERATION, SUBMISSION_STATUSES, Submission


def list_submissions(status: str = AWAITING_MODERATION, limit: int = 50) -> Dict[str, Any]:
    """
    List submissions in one status, newest first.

    Args:
        status: One of the submission statuses
        limit: Maximum entries (default 50)
    """
    if status not in SUBMISSION_STATUSES:
        return ValidationError(
            f"Invalid status: '{status}'. Must be one of: {', '.join(SUBMISSION_STATUSES)}."
        ).to_dict()

    init_db()
    session = get_session()
    try:
        entries = (
            session.query(Submission)
            .filter(Submission.status == status)
            .order_by(desc(Submission.created_at), desc(Submission.id))
            .limit(limit)
            .all()
        )
        return {
            "ok": True,
            "status": status,
            "entries": [e.to_dict() for e in entries],
            "count": len(entries),
        }
    finally:
        session.close()


def get_portal_stats(latest: int = 10) -> Dict[str, Any]:
    """Counts per status plus the most recent submissions."""
    init_db()
    session = get_session()
    try:
        rows = (
            session.query(Submission.status, func.count(Submission.id))
            .group_by(Submission.status)
            .all()
        )
        counts = {status: 0 for status in SUBMISSION_STATUSES}
        counts.update({status: count for status, count in rows})

        recent = (
            session.query(Submission)
            .order_by(desc(Submission.created_at), desc(Submission.id))
            .limit(latest)
            .all()
        )
        return {
            "ok": True,
            "counts": counts,
            "latest": [
                {
                    "id": s.id,
                    "article_id": s.article_id,
                    "title": s.title,
                    "status": s.status,
                    "txid": s.tx_reference,
                    "date": s.created_at.isoformat() if s.created_at else None,
                }
                for s in recent
            ],
        }
    finally:
        session.close()
