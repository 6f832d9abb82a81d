"""
Maintenance commands for the AI Summary service.

Usage:
    python -m ai_summary.cli init-db
    python -m ai_summary.cli generate 42 --force
    python -m ai_summary.cli bulk 1 2 3 --delay 1.0
    python -m ai_summary.cli sweep-cache
    python -m ai_summary.cli stats
    python -m ai_summary.cli uninstall --yes
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Optional, Sequence

from ai_summary.config import configure_logging, get_settings
from ai_summary.context import AppContext, build_context
from ai_summary.db.session import init_db
from ai_summary.summarization.batch import FixedDelayPacer


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ai-summary", description="AI Summary maintenance")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="Create tables (development only; use Alembic in production)")

    gen = sub.add_parser("generate", help="Generate a summary for one document")
    gen.add_argument("document_id", type=int)
    gen.add_argument("--force", action="store_true", help="Regenerate an existing summary")

    bulk = sub.add_parser("bulk", help="Generate summaries for several documents")
    bulk.add_argument("document_ids", type=int, nargs="+")
    bulk.add_argument("--force", action="store_true")
    bulk.add_argument("--delay", type=float, default=None, help="Seconds between documents")

    sub.add_parser("sweep-cache", help="Purge expired cache entries")
    sub.add_parser("stats", help="Print summary statistics")

    uninstall = sub.add_parser("uninstall", help="Delete every summary and clear the cache")
    uninstall.add_argument("--yes", action="store_true", help="Confirm deletion")
    return parser


def main(argv: Optional[Sequence[str]] = None, context: Optional[AppContext] = None) -> int:
    args = build_parser().parse_args(argv)

    if context is None:
        settings = get_settings()
        configure_logging(settings)
        context = build_context(settings)

    if args.command == "init-db":
        init_db(context.engine)
        print("[init-db] Tables created")
        return 0

    if args.command == "generate":
        ok = context.pipeline.generate(args.document_id, force=args.force)
        print(f"[generate] document {args.document_id}: {'ok' if ok else 'failed'}")
        return 0 if ok else 1

    if args.command == "bulk":
        delay = context.pipeline.bulk_delay if args.delay is None else args.delay
        result = context.pipeline.bulk_generate(
            args.document_ids,
            force=args.force,
            pacer=FixedDelayPacer(delay),
        )
        print(json.dumps(result.to_dict(), indent=2))
        return 0 if result.failed == 0 else 1

    if args.command == "sweep-cache":
        print(f"[sweep-cache] Purged {context.cache.purge_expired()} entries")
        return 0

    if args.command == "stats":
        stats = context.pipeline.stats()
        stats["cache"] = context.cache.stats()
        print(json.dumps(stats, indent=2))
        return 0

    if args.command == "uninstall":
        if not args.yes:
            print("[uninstall] Refusing to delete summaries without --yes", file=sys.stderr)
            return 1
        removed = context.store.clear_all()
        print(f"[uninstall] Deleted {removed} summaries and cleared the cache")
        return 0

    return 2


if __name__ == "__main__":
    sys.exit(main())
