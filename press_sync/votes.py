"""
Vote snapshots for published articles.

Voting runs for 72 hours from an article's provenance timestamp. Counts per
role come either from stored counters (placeholder until the on-chain
indexer is connected) or verbatim from the gateway. Nothing here tallies or
mutates votes on the read path.
"""
import logging
import time
from typing import Any, Dict, Optional, Tuple

from press_sync.config import OutletConfig, load_config
from press_sync.database import get_session, init_db, session_scope
from press_sync.errors import GatewayUnreachable, NonJSONResponse, PressSyncError, ValidationError
from press_sync.gateway_client import GatewayClient, get_json
from press_sync.models import VOTE_ROLES, Article

logger = logging.getLogger(__name__)

VOTING_WINDOW_SECONDS = 72 * 3600


def voting_window(provenance_ts: Optional[int], now: float) -> Dict[str, Any]:
    """Compute end time and open state. Closed at exactly ends_at."""
    if not provenance_ts or provenance_ts <= 0:
        return {"ends_at": None, "is_open": False, "seconds_remaining": 0}
    ends_at = int(provenance_ts) + VOTING_WINDOW_SECONDS
    is_open = now < ends_at
    return {
        "ends_at": ends_at,
        "is_open": is_open,
        "seconds_remaining": max(0, int(ends_at - now)) if is_open else 0,
    }


def _gateway_counts(client: GatewayClient, article_id: int) -> Dict[str, Any]:
    """Counts exactly as the gateway reports them (`counts` or per-role `roles`)."""
    reply = client.article_votes(article_id)
    if "error_kind" in reply:
        raise GatewayUnreachable(reply.get("error") or "Gateway vote endpoint failed")
    if reply.get("ok") is False:
        raise GatewayUnreachable(reply.get("error") or "Gateway returned no vote counts")
    return reply.get("counts") or reply.get("roles") or {}


class VoteReader:
    """Read path for vote bars."""

    def __init__(self, config: OutletConfig, client: Optional[GatewayClient] = None):
        self.config = config
        self.client = client or GatewayClient(config)

    def get_vote_snapshot(self, article_id: int, now: Optional[float] = None) -> Dict[str, Any]:
        """
        Snapshot of an article's vote counts and window.

        Args:
            article_id: Local article ID
            now: Epoch seconds to evaluate the window at (defaults to now)

        Returns:
            {"ok": True, "article_id": N, "counts": {...}, "ends_at": epoch | None,
             "is_open": bool, "seconds_remaining": int, "source": "local" | "gateway"}
        """
        now = time.time() if now is None else now

        init_db()
        session = get_session()
        try:
            article = session.get(Article, article_id)
            if article is None:
                return ValidationError(f"Article #{article_id} not found").to_dict()

            if self.config.vote_source == "gateway":
                try:
                    counts = _gateway_counts(self.client, article_id)
                except PressSyncError as e:
                    logger.warning("Vote counts unavailable for article #%s: %s", article_id, e)
                    return e.to_dict(article_id=article_id)
            else:
                counts = article.vote_counts()

            return {
                "ok": True,
                "article_id": article.id,
                "counts": counts,
                "source": self.config.vote_source,
                **voting_window(article.provenance_ts, now),
            }
        finally:
            session.close()


def record_vote_counts(article_id: int, counts: Dict[str, int]) -> Dict[str, Any]:
    """
    Overwrite stored per-role counters for an article.

    Admin stand-in for the indexer feed. Unknown roles are refused.
    """
    unknown = set(counts) - set(VOTE_ROLES)
    if unknown:
        return ValidationError(f"Unknown vote roles: {', '.join(sorted(unknown))}").to_dict()

    parsed = {}
    for role, value in counts.items():
        if isinstance(value, bool):
            return ValidationError(f"Vote count for {role} must be an integer").to_dict()
        try:
            parsed[role] = int(value)
        except (TypeError, ValueError):
            return ValidationError(f"Vote count for {role} must be an integer: {value!r}").to_dict()
    negative = [role for role, value in parsed.items() if value < 0]
    if negative:
        return ValidationError(f"Vote counts cannot be negative: {', '.join(negative)}").to_dict()

    init_db()
    with session_scope() as session:
        article = session.get(Article, article_id)
        if article is None:
            return ValidationError(f"Article #{article_id} not found").to_dict()
        for role, value in parsed.items():
            setattr(article, f"votes_{role}", value)
        session.flush()
        return {"ok": True, "article_id": article.id, "counts": article.vote_counts()}


def proxy_article_votes(article_id: Optional[str], config: OutletConfig) -> Tuple[int, Dict[str, Any]]:
    """
    Public vote endpoint: forward to {gateway}/articles/votes.

    Returns:
        (http_status, body). 400 without an article ID, 502 when the
        gateway is unreachable or answers with something other than JSON.
    """
    article_id = (article_id or "").strip()
    if not article_id:
        return 400, {"error": "missing"}

    url = config.gateway_url.rstrip("/") + "/articles/votes"
    try:
        body = get_json(url, config.vote_proxy_seconds, params={"articleId": article_id})
    except GatewayUnreachable:
        return 502, {"error": "gateway_unreachable"}
    except NonJSONResponse:
        return 502, {"error": "bad_response"}
    return 200, body


def get_vote_snapshot(article_id: int, now: Optional[float] = None) -> Dict[str, Any]:
    """Snapshot with the outlet configuration from disk."""
    return VoteReader(load_config()).get_vote_snapshot(article_id, now=now)
