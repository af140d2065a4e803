"""
Press SYNC MCP Server

Exposes the submission gate, vote snapshots, co-author binding, the review
queue, the Arweave import queue and outlet onboarding as MCP tools, plus the
public GET /article-votes route when served over HTTP (SSE transport).
Tools that call the gateway, fee verifier or moderator run in a worker
thread.

Run with: python -m press_sync.server [--sse]
"""
import sys
from typing import Any, Optional

from mcp.server.fastmcp import FastMCP
from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import JSONResponse

from press_sync.config import load_config

# Initialize FastMCP server
mcp = FastMCP("press-sync")


@mcp.tool()
async def press_submit_article(
    title: str,
    content: str,
    tx_reference: str,
    image_url: Optional[str] = None,
) -> dict[str, Any]:
    """
    Submit an article through the fee + moderation gate.

    Steps (fail-fast, no retries):
    1. Title, content and a 0x-prefixed fee TXID are required
    2. Outlet payment settings must be complete
    3. The fee TXID is verified on-chain by the installer API
    4. The article is reviewed by the AI moderation endpoint

    Args:
        title: Headline
        content: Article body
        tx_reference: TXID of the PRESS submission fee payment
        image_url: Optional lead image URL

    Returns:
        Published: {"ok": True, "record_id": N, "article_id": M, "status": "published"}
        Failed: {"ok": False, "error_kind": "...", "error": "...", "status": "..."}
    """
    from press_sync.intake import SubmissionIntake

    return await run_in_threadpool(
        SubmissionIntake(load_config()).submit,
        title=title,
        content=content,
        tx_reference=tx_reference,
        image_url=image_url,
    )


@mcp.tool()
async def press_resume_moderation(record_id: int) -> dict[str, Any]:
    """
    Re-run moderation for a submission left in awaiting_moderation.

    Use only after the moderation endpoint was unreachable or a request
    dropped mid-flight. Payment is not re-verified.
    """
    from press_sync.intake import SubmissionIntake

    return await run_in_threadpool(SubmissionIntake(load_config()).resume_moderation, record_id)


@mcp.tool()
async def press_vote_snapshot(article_id: int) -> dict[str, Any]:
    """
    Vote counts by role and the 72-hour voting window for an article.

    Returns:
        {"ok": True, "counts": {...}, "ends_at": epoch, "is_open": bool, "seconds_remaining": N}
    """
    from press_sync.votes import VoteReader

    return await run_in_threadpool(VoteReader(load_config()).get_vote_snapshot, article_id)


@mcp.tool()
async def press_set_coauthor(article_id: int, wallet_address: str) -> dict[str, Any]:
    """
    Bind a secondary co-author wallet (50/50 revenue split, locked).

    Setting the wallet that is already stored is a no-op and returns
    error_kind "no_op".
    """
    from press_sync.coauthors import CoauthorBinder

    return CoauthorBinder(load_config()).set_secondary_author(article_id, wallet_address)


@mcp.tool()
async def press_review_queue(status: str = "awaiting_moderation", limit: int = 50) -> dict[str, Any]:
    """List submissions in one status (awaiting_payment_verification, awaiting_moderation, published, rejected)."""
    from press_sync.review_queue import list_submissions

    return list_submissions(status=status, limit=limit)


@mcp.tool()
async def press_portal_stats() -> dict[str, Any]:
    """Submission counts per status and the latest submissions."""
    from press_sync.review_queue import get_portal_stats

    return get_portal_stats()


@mcp.tool()
async def press_outlet_status() -> dict[str, Any]:
    """Configured outlet settings plus the gateway's outlet info."""
    from press_sync.gateway_client import GatewayClient

    return await run_in_threadpool(GatewayClient(load_config()).get_outlet_status)


@mcp.tool()
async def press_create_outlet(
    name: str,
    domain: str,
    owner_private_key: Optional[str] = None,
) -> dict[str, Any]:
    """Register this outlet with the gateway. Saves the domain on success."""
    from press_sync.gateway_client import GatewayClient

    return await run_in_threadpool(
        GatewayClient(load_config()).create_outlet, name, domain, owner_private_key
    )


@mcp.tool()
async def press_deploy_outlet_token(
    token_name: str,
    token_symbol: str,
    minted_supply_wei: str = "0",
    test_transfer_to_self_wei: str = "0",
    domain: Optional[str] = None,
    owner_private_key: Optional[str] = None,
) -> dict[str, Any]:
    """Deploy the outlet token through the gateway."""
    from press_sync.gateway_client import GatewayClient

    return await run_in_threadpool(
        GatewayClient(load_config()).deploy_outlet_token,
        token_name=token_name,
        token_symbol=token_symbol,
        minted_supply_wei=minted_supply_wei,
        test_transfer_to_self_wei=test_transfer_to_self_wei,
        domain=domain,
        owner_private_key=owner_private_key,
    )


@mcp.tool()
async def press_list_token(
    token_address: str,
    tier: int = 1,
    domain: Optional[str] = None,
    owner_private_key: Optional[str] = None,
) -> dict[str, Any]:
    """List the outlet token on the exchange."""
    from press_sync.gateway_client import GatewayClient

    return await run_in_threadpool(
        GatewayClient(load_config()).list_token,
        token_address=token_address,
        tier=tier,
        domain=domain,
        owner_private_key=owner_private_key,
    )


@mcp.tool()
async def press_queue_arweave_imports(tx_ids: list[str]) -> dict[str, Any]:
    """
    Queue legacy Arweave transactions for import as Press articles.

    Each entry records the outlet's current import fee and bond (PRESS wei).
    Blank IDs are ignored; surrounding whitespace is trimmed.
    """
    from press_sync.arweave_imports import queue_arweave_imports

    return queue_arweave_imports(tx_ids, load_config())


@mcp.tool()
async def press_arweave_queue() -> dict[str, Any]:
    """The Arweave import queue, oldest first."""
    from press_sync.arweave_imports import list_arweave_queue

    return list_arweave_queue()


@mcp.custom_route("/article-votes", methods=["GET"])
async def article_votes(request: Request) -> JSONResponse:
    """Public vote read endpoint, proxied to the gateway."""
    from press_sync.votes import proxy_article_votes

    status_code, body = await run_in_threadpool(
        proxy_article_votes, request.query_params.get("articleId"), load_config()
    )
    return JSONResponse(body, status_code=status_code)


def main():
    """Entry point. stdio by default; --sse serves HTTP including /article-votes."""
    transport = "sse" if "--sse" in sys.argv[1:] else "stdio"
    mcp.run(transport=transport)


if __name__ == "__main__":
    main()
