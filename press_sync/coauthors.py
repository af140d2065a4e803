"""
Secondary co-author binding.

Adding a co-author fixes a 50/50 revenue split and records a lock that is
meant to hold until a rights-sale event on chain. The lock is recorded
here, not enforced.
"""
import logging
from typing import Any, Dict

from press_sync.config import OutletConfig, load_config
from press_sync.database import init_db, session_scope
from press_sync.errors import NoOpError, ValidationError
from press_sync.models import Article

logger = logging.getLogger(__name__)

COAUTHOR_SPLIT = "50_50"


class CoauthorBinder:

    def __init__(self, config: OutletConfig):
        self.config = config

    def set_secondary_author(self, article_id: int, wallet_address: str) -> Dict[str, Any]:
        """
        Bind a secondary co-author wallet to an article.

        Returns:
            Changed: {"ok": True, "article_id": N, "wallet": "0x...", "split": "50_50", "locked": True, "fee_press": F}
            Same wallet: {"ok": False, "error_kind": "no_op", ...}
        """
        wallet = (wallet_address or "").strip()
        if not wallet:
            return ValidationError("Co-author wallet address required").to_dict()

        init_db()
        with session_scope() as session:
            article = session.get(Article, article_id)
            if article is None:
                return ValidationError(f"Article #{article_id} not found").to_dict()

            if wallet == article.secondary_author_wallet:
                return NoOpError(
                    f"{wallet} is already the secondary author of article #{article_id}"
                ).to_dict(article_id=article_id)

            previous = article.secondary_author_wallet
            article.secondary_author_wallet = wallet
            article.secondary_author_split = COAUTHOR_SPLIT
            article.secondary_author_lock = True
            article.secondary_author_fee = self.config.coauthor_fee_press
            session.flush()

            logger.info(
                "Article #%s secondary author %s -> %s", article_id, previous or "(none)", wallet
            )
            return {
                "ok": True,
                "article_id": article_id,
                "wallet": wallet,
                "previous_wallet": previous,
                "split": COAUTHOR_SPLIT,
                "locked": True,
                "fee_press": self.config.coauthor_fee_press,
            }


def set_secondary_author(article_id: int, wallet_address: str) -> Dict[str, Any]:
    return CoauthorBinder(load_config()).set_secondary_author(article_id, wallet_address)
