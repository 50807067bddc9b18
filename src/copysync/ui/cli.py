from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from copysync.app import delete_item, list_items, run_copy_sync, set_item_status
from copysync.config import configure_logging
from copysync.domain.model import CopyStatus, CopyType, Scope
from copysync.ui.drafts import load_drafts

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from copysync.domain.model import CopyDraft, CopyRecord
    from copysync.domain.reconciliation import ReconciliationPlan

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Synchronise copywriting items")
    subparsers = parser.add_subparsers(dest="command", required=True)

    sync = subparsers.add_parser("sync", help="Reconcile a draft list with stored copy items")
    _add_scope_arguments(sync)
    sync.add_argument(
        "--drafts",
        type=Path,
        required=True,
        help="JSON file holding the edited copy items",
    )
    sync.add_argument(
        "--authoritative",
        action="store_true",
        help="Treat the draft list as the complete state and delete stored items missing from it",
    )
    sync.add_argument(
        "--dry-run",
        action="store_true",
        help="Compute and log the plan without writing anything",
    )
    sync.add_argument(
        "--no-title-fallback",
        dest="title_fallback",
        action="store_false",
        default=None,
        help="Match drafts by id only (defaults to COPYSYNC_TITLE_FALLBACK)",
    )

    listing = subparsers.add_parser("list", help="List stored copy items")
    _add_scope_arguments(listing)
    listing.add_argument(
        "--category",
        choices=[item.value for item in CopyType],
        help="Only list items of this copy type",
    )
    listing.add_argument(
        "--status",
        choices=[item.value for item in CopyStatus],
        help="Only list items with this status",
    )

    status = subparsers.add_parser("set-status", help="Change the status of one copy item")
    status.add_argument("--id", dest="record_id", required=True, help="Copy item id")
    status.add_argument(
        "--status",
        choices=[item.value for item in CopyStatus],
        required=True,
        help="New status",
    )

    remove = subparsers.add_parser("delete", help="Delete one copy item")
    remove.add_argument("--id", dest="record_id", required=True, help="Copy item id")

    return parser.parse_args(list(argv))


def _add_scope_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--site-id", required=True, help="Owning site id")
    parser.add_argument("--user-id", required=True, help="Owning user id")


def _build_scope(args: argparse.Namespace) -> Scope:
    scope = Scope(site_id=args.site_id.strip(), user_id=args.user_id.strip())
    if not scope.is_complete:
        raise ValueError("Both --site-id and --user-id must be non-empty")
    return scope


def _log_plan(scope: Scope, plan: ReconciliationPlan) -> None:
    log.info("Plan for %s: %s", scope, plan.summary())
    for draft in plan.to_create:
        log.info("  create %r", draft.title.strip())
    for instruction in plan.to_update:
        log.info("  update %s -> %r", instruction.record_id, instruction.draft.title.strip())
    for record_id in plan.to_delete:
        log.info("  delete %s", record_id)


def _record_line(record: CopyRecord) -> str:
    return json.dumps(
        {
            "id": record.id,
            "title": record.title,
            "copy_type": record.category.value,
            "status": record.status.value,
            "tags": sorted(record.labels),
            "created_at": record.created_at.isoformat() if record.created_at else None,
        }
    )


def _run_sync(args: argparse.Namespace, scope: Scope, drafts: list[CopyDraft]) -> int:
    result = run_copy_sync(
        scope,
        drafts,
        scope_is_authoritative=args.authoritative,
        dry_run=args.dry_run,
        title_fallback=args.title_fallback,
        on_plan=_log_plan if args.dry_run else None,
    )
    if not result.success:
        log.error("Copy sync failed: %s", result.error)
        return 1
    return 0


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    parsed_args: argparse.Namespace
    scope: Scope | None = None
    drafts: list[CopyDraft] = []
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        if parsed_args.command in {"sync", "list"}:
            scope = _build_scope(parsed_args)
        if parsed_args.command == "sync":
            drafts = load_drafts(parsed_args.drafts)
    except (ValueError, OSError):
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.command == "sync" and scope is not None:
            exit_code = _run_sync(parsed_args, scope, drafts)
            if exit_code:
                sys.exit(exit_code)
        elif parsed_args.command == "list" and scope is not None:
            records = list_items(
                scope,
                category=CopyType(parsed_args.category) if parsed_args.category else None,
                status=CopyStatus(parsed_args.status) if parsed_args.status else None,
            )
            for record in records:
                print(_record_line(record))  # noqa: T201
        elif parsed_args.command == "set-status":
            set_item_status(parsed_args.record_id, CopyStatus(parsed_args.status))
            log.info("Set status of %s to %s", parsed_args.record_id, parsed_args.status)
        elif parsed_args.command == "delete":
            delete_item(parsed_args.record_id)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error during copy sync")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
