"""
Arweave import queue.

Operators paste legacy Arweave transaction IDs; each one is queued with the
outlet's current import fee and bond. An external importer picks queued
entries up and republishes them as Arweave-origin Press articles.
"""
import logging
import re
import time
from typing import Any, Dict, Iterable, Optional, Union

from sqlalchemy import asc

from press_sync.config import OutletConfig, load_config
from press_sync.database import get_session, init_db, session_scope
from press_sync.errors import ValidationError
from press_sync.models import ARWEAVE_QUEUED, ArweaveImport

logger = logging.getLogger(__name__)


def _split_tx_ids(tx_ids: Union[str, Iterable[str]]) -> list:
    """One ID per line (or per item); blanks dropped, whitespace trimmed."""
    if isinstance(tx_ids, str):
        tx_ids = re.split(r"\r\n|\r|\n", tx_ids)
    return [tx.strip() for tx in tx_ids if tx and tx.strip()]


def queue_arweave_imports(
    tx_ids: Union[str, Iterable[str]],
    config: Optional[OutletConfig] = None,
    now: Optional[float] = None,
) -> Dict[str, Any]:
    """
    Append Arweave transactions to the import queue.

    Args:
        tx_ids: Newline-separated text or a list of TX IDs
        config: Outlet settings for the fee and bond (loaded from disk if omitted)
        now: Epoch seconds to stamp entries with

    Returns:
        {"ok": True, "queued": N, "entries": [...]}
    """
    lines = _split_tx_ids(tx_ids)
    if not lines:
        return ValidationError("At least one Arweave TX ID required").to_dict()

    config = config or load_config()
    ts = int(now if now is not None else time.time())

    init_db()
    with session_scope() as session:
        entries = [
            ArweaveImport(
                tx_id=tx,
                queued_at=ts,
                status=ARWEAVE_QUEUED,
                fee_wei=config.arweave_import_fee_wei,
                bond_wei=config.arweave_import_bond_wei,
            )
            for tx in lines
        ]
        session.add_all(entries)
        session.flush()
        logger.info("Queued %d Arweave import(s)", len(entries))
        return {
            "ok": True,
            "queued": len(entries),
            "entries": [e.to_dict() for e in entries],
        }


def list_arweave_queue() -> Dict[str, Any]:
    """The whole import queue, oldest first."""
    init_db()
    session = get_session()
    try:
        entries = (
            session.query(ArweaveImport)
            .order_by(asc(ArweaveImport.queued_at), asc(ArweaveImport.id))
            .all()
        )
        return {
            "ok": True,
            "count": len(entries),
            "entries": [e.to_dict() for e in entries],
        }
    finally:
        session.close()
