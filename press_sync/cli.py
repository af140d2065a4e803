"""
CLI entry point for the Press SYNC gateway.

Usage:
    python -m press_sync submit --title T --content C --txid 0x... [--image URL]
    python -m press_sync resume RECORD_ID
    python -m press_sync votes ARTICLE_ID
    python -m press_sync votes-set ARTICLE_ID --journalist N --editor N --outlet N --community N
    python -m press_sync coauthor ARTICLE_ID --wallet 0x...
    python -m press_sync queue [--status S] [--limit N]
    python -m press_sync stats
    python -m press_sync outlet status|ping
    python -m press_sync outlet create --name N --domain D
    python -m press_sync outlet deploy-token --token-name N --token-symbol S [--minted-supply-wei W]
    python -m press_sync outlet list-token --token-address A [--tier T]
    python -m press_sync arweave queue TXID [TXID ...] [--file F]
    python -m press_sync arweave list

All output is JSON. Exit codes: 0=success, 1=rejected or no-op, 2=error.
"""
import argparse
import json
import logging
import sys
from typing import Any, Dict

# Outcomes that are a decision rather than a failure
_REJECTION_KINDS = ("payment_verification_error", "moderation_rejected", "no_op")


def _output(data: Dict[str, Any], exit_code: int = 0):
    """Print JSON output and exit."""
    print(json.dumps(data, indent=2, default=str))
    sys.exit(exit_code)


def _finish(result: Dict[str, Any]):
    if result.get("ok"):
        _output(result, exit_code=0)
    elif result.get("error_kind") in _REJECTION_KINDS:
        _output(result, exit_code=1)
    else:
        _output(result, exit_code=2)


def _read_content(args) -> str:
    content = args.content
    if args.content_file:
        try:
            with open(args.content_file, "r", encoding="utf-8") as f:
                content = f.read()
        except OSError as e:
            _output({"ok": False, "error": f"Cannot read content file: {e}"}, exit_code=2)
    return content or ""


def cmd_submit(args):
    """Handle submit subcommand."""
    from press_sync.config import load_config
    from press_sync.intake import SubmissionIntake

    content = _read_content(args)
    _finish(SubmissionIntake(load_config()).submit(
        title=args.title,
        content=content,
        tx_reference=args.txid,
        image_url=args.image,
    ))


def cmd_resume(args):
    from press_sync.config import load_config
    from press_sync.intake import SubmissionIntake

    _finish(SubmissionIntake(load_config()).resume_moderation(args.record_id))


def cmd_votes(args):
    from press_sync.votes import get_vote_snapshot
    _finish(get_vote_snapshot(args.article_id))


def cmd_votes_set(args):
    """Handle votes-set subcommand (manual counter update)."""
    from press_sync.models import VOTE_ROLES
    from press_sync.votes import record_vote_counts

    counts = {
        role: getattr(args, role)
        for role in VOTE_ROLES
        if getattr(args, role) is not None
    }
    if not counts:
        _output({"ok": False, "error": "Give at least one role count."}, exit_code=2)
    _finish(record_vote_counts(args.article_id, counts))


def cmd_coauthor(args):
    from press_sync.coauthors import set_secondary_author
    _finish(set_secondary_author(args.article_id, args.wallet))


def cmd_queue(args):
    from press_sync.review_queue import list_submissions
    _finish(list_submissions(status=args.status, limit=args.limit))


def cmd_stats(args):
    from press_sync.review_queue import get_portal_stats
    _finish(get_portal_stats())


def cmd_arweave(args):
    """Handle arweave subcommand."""
    from press_sync.arweave_imports import list_arweave_queue, queue_arweave_imports

    if args.arweave_action == "list":
        _finish(list_arweave_queue())
    elif args.arweave_action == "queue":
        tx_ids = list(args.tx_ids or [])
        if args.file:
            try:
                with open(args.file, "r", encoding="utf-8") as f:
                    tx_ids.extend(f.read().splitlines())
            except OSError as e:
                _output({"ok": False, "error": f"Cannot read TX ID file: {e}"}, exit_code=2)
        _finish(queue_arweave_imports(tx_ids))


def cmd_outlet(args):
    """Handle outlet subcommand."""
    from press_sync.config import load_config
    from press_sync.gateway_client import GatewayClient

    client = GatewayClient(load_config())

    if args.outlet_action == "status":
        _finish(client.get_outlet_status())
    elif args.outlet_action == "ping":
        _finish(client.ping())
    elif args.outlet_action == "defaults":
        _finish(client.approval_defaults())
    elif args.outlet_action == "create":
        _finish(client.create_outlet(args.name, args.domain, args.owner_private_key))
    elif args.outlet_action == "deploy-token":
        _finish(client.deploy_outlet_token(
            token_name=args.token_name,
            token_symbol=args.token_symbol,
            minted_supply_wei=args.minted_supply_wei,
            test_transfer_to_self_wei=args.test_transfer_to_self_wei,
            domain=args.domain,
            owner_private_key=args.owner_private_key,
        ))
    elif args.outlet_action == "list-token":
        _finish(client.list_token(
            token_address=args.token_address,
            tier=args.tier,
            domain=args.domain,
            owner_private_key=args.owner_private_key,
        ))


def build_parser() -> argparse.ArgumentParser:
    from press_sync.models import SUBMISSION_STATUSES, VOTE_ROLES

    parser = argparse.ArgumentParser(
        prog="press-sync",
        description="Press SYNC gateway: fee-verified, moderated article submission",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log to stderr")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # ── submit ──
    submit_parser = subparsers.add_parser("submit", help="Submit an article")
    submit_parser.add_argument("--title", required=True, help="Headline")
    submit_parser.add_argument("--content", help="Article body")
    submit_parser.add_argument("--content-file", help="Read article body from file")
    submit_parser.add_argument("--txid", required=True, help="Fee payment TXID (0x...)")
    submit_parser.add_argument("--image", help="Optional image URL")
    submit_parser.set_defaults(func=cmd_submit)

    # ── resume ──
    resume_parser = subparsers.add_parser("resume", help="Re-run moderation for a stuck submission")
    resume_parser.add_argument("record_id", type=int)
    resume_parser.set_defaults(func=cmd_resume)

    # ── votes ──
    votes_parser = subparsers.add_parser("votes", help="Vote snapshot for an article")
    votes_parser.add_argument("article_id", type=int)
    votes_parser.set_defaults(func=cmd_votes)

    votes_set = subparsers.add_parser("votes-set", help="Overwrite stored vote counters")
    votes_set.add_argument("article_id", type=int)
    for role in VOTE_ROLES:
        votes_set.add_argument(f"--{role}", type=int)
    votes_set.set_defaults(func=cmd_votes_set)

    # ── coauthor ──
    coauthor_parser = subparsers.add_parser("coauthor", help="Set secondary co-author wallet")
    coauthor_parser.add_argument("article_id", type=int)
    coauthor_parser.add_argument("--wallet", required=True)
    coauthor_parser.set_defaults(func=cmd_coauthor)

    # ── queue / stats ──
    queue_parser = subparsers.add_parser("queue", help="List submissions by status")
    queue_parser.add_argument("--status", choices=SUBMISSION_STATUSES, default="awaiting_moderation")
    queue_parser.add_argument("--limit", type=int, default=50)
    queue_parser.set_defaults(func=cmd_queue)

    stats_parser = subparsers.add_parser("stats", help="Portal statistics")
    stats_parser.set_defaults(func=cmd_stats)

    # ── outlet ──
    outlet_parser = subparsers.add_parser("outlet", help="Outlet onboarding via the gateway")
    outlet_sub = outlet_parser.add_subparsers(dest="outlet_action", help="Outlet actions")

    outlet_sub.add_parser("status", help="Configured settings and gateway outlet info")
    outlet_sub.add_parser("ping", help="Show RPC URL and server time")
    outlet_sub.add_parser("defaults", help="Gateway article approval defaults")

    create = outlet_sub.add_parser("create", help="Create the outlet")
    create.add_argument("--name", required=True)
    create.add_argument("--domain", required=True)
    create.add_argument("--owner-private-key")

    deploy = outlet_sub.add_parser("deploy-token", help="Deploy the outlet token")
    deploy.add_argument("--token-name", required=True)
    deploy.add_argument("--token-symbol", required=True)
    deploy.add_argument("--minted-supply-wei", default="0")
    deploy.add_argument("--test-transfer-to-self-wei", default="0")
    deploy.add_argument("--domain")
    deploy.add_argument("--owner-private-key")

    list_token = outlet_sub.add_parser("list-token", help="List the outlet token on the exchange")
    list_token.add_argument("--token-address", required=True)
    list_token.add_argument("--tier", type=int, default=1)
    list_token.add_argument("--domain")
    list_token.add_argument("--owner-private-key")

    outlet_parser.set_defaults(func=cmd_outlet)

    # ── arweave ──
    arweave_parser = subparsers.add_parser("arweave", help="Arweave import queue")
    arweave_sub = arweave_parser.add_subparsers(dest="arweave_action", help="Arweave actions")
    arweave_queue = arweave_sub.add_parser("queue", help="Queue Arweave TX IDs for import")
    arweave_queue.add_argument("tx_ids", nargs="*", help="Arweave TX IDs")
    arweave_queue.add_argument("--file", help="Read TX IDs from file, one per line")
    arweave_sub.add_parser("list", help="Show the import queue")
    arweave_parser.set_defaults(func=cmd_arweave)
    return parser


def main(argv=None):
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s:%(name)s:%(message)s",
        stream=sys.stderr,
    )

    if not args.command:
        parser.print_help()
        sys.exit(2)

    if args.command == "outlet" and not args.outlet_action:
        _output({"ok": False, "error": "Missing outlet action (status, ping, defaults, "
                                       "create, deploy-token, list-token)."}, exit_code=2)

    if args.command == "arweave" and not args.arweave_action:
        _output({"ok": False, "error": "Missing arweave action (queue, list)."}, exit_code=2)

    try:
        args.func(args)
    except Exception as e:
        _output({"ok": False, "error": str(e)}, exit_code=2)


if __name__ == "__main__":
    main()
