"""
AI content moderation.

Posts the article to the configured moderation endpoint together with the
outlet's content policy. An unset endpoint approves everything.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from press_sync.config import OutletConfig
from press_sync.errors import NonJSONResponse
from press_sync.gateway_client import post_json

logger = logging.getLogger(__name__)

MODERATION_POLICY = {
    "block_porn": True,
    "block_graphic": True,
    "block_illegal": True,
    "block_profanity": True,
    "block_illegal_images": True,
}


@dataclass
class ModerationResult:
    approved: bool
    reason: str

    @property
    def verdict(self) -> str:
        return "approved" if self.approved else "rejected"


class ContentModerator:
    """Client for POST {ai_endpoint}."""

    def __init__(self, config: OutletConfig):
        self.config = config

    @property
    def configured(self) -> bool:
        return bool(self.config.ai_endpoint)

    def review(self, title: str, content: str, image_url: Optional[str] = None) -> ModerationResult:
        """
        Ask the moderator for a verdict.

        Raises:
            GatewayUnreachable: network error or timeout
            NonJSONResponse: reply missing, unparseable, or without a boolean `ok`
        """
        if not self.configured:
            # TODO: decide with outlet operators whether this should fail closed.
            logger.warning("Moderation endpoint not configured; approving without review")
            return ModerationResult(approved=True, reason="OK")

        reply = post_json(
            self.config.ai_endpoint,
            {
                "title": title,
                "content": content,
                "image": image_url or "",
                "policy": MODERATION_POLICY,
            },
            self.config.moderation_seconds,
        )
        # Only a JSON boolean is a verdict
        if reply.get("ok") is not True and reply.get("ok") is not False:
            raise NonJSONResponse(f"Moderator reply has no boolean 'ok' field: {reply!r}")

        approved = reply["ok"] is True
        reason = reply.get("reason") or ("OK" if approved else "Rejected")
        return ModerationResult(approved=approved, reason=str(reason))
