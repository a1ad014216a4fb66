# ==============================================
# CLI — Command Line Entry Point
# ==============================================
#
# PURPOSE:
#   Run the repair jobs against the configured MongoDB database.
#
# COMMANDS:
# ---------
#   python -m content_repair.cli booleans
#   python -m content_repair.cli question-order
#   python -m content_repair.cli structure
#   python -m content_repair.cli snippets [--catalog path/to/catalog.json]
#   python -m content_repair.cli verify
#   python -m content_repair.cli all
#
#   --dry-run   compute and report patches without writing them
#               (also enabled by REPAIR_DRY_RUN=true)
#
# EXIT STATUS:
# ------------
#   0 → every requested job finished (however many records it patched)
#   1 → a job failed; the remaining jobs were not run
#
# ==============================================

import argparse
import sys
from typing import List, Optional

from content_repair.config import get_config
from content_repair.normalization.snippets import SnippetCatalog
from content_repair.repair_jobs import JOBS, RepairRunner
from content_repair.storage.mongo_client import MongoDocumentStore

ALL = "all"
VERIFY = "verify"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="content-repair",
        description="Repair and normalize course content stored in MongoDB.",
    )
    parser.add_argument(
        "command",
        choices=list(JOBS) + [VERIFY, ALL],
        help="repair job to run, 'verify' for the integrity report, or 'all'",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="report the patches without writing them",
    )
    parser.add_argument(
        "--catalog",
        default=None,
        help="snippet catalog JSON file (defaults to the bundled catalog)",
    )
    return parser


def run(command: str, runner: RepairRunner) -> None:
    if command == VERIFY:
        runner.verify()
        return

    names = list(JOBS) if command == ALL else [command]
    summaries = runner.run_jobs(names)

    if command == ALL:
        runner.verify()

    total = sum(summary.patched for summary in summaries)
    verb = "Would patch" if runner.dry_run else "Patched"
    print(f"\n✅ {verb} {total} records in total.")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = get_config()
        dry_run = args.dry_run or config.repair.dry_run
        store = MongoDocumentStore(
            host=config.mongo.host,
            port=config.mongo.port,
            database=config.mongo.database,
            user=config.mongo.user,
            password=config.mongo.password,
            uri=config.mongo.uri,
        )

        catalog_path = args.catalog or config.repair.snippet_catalog_path
        catalog = SnippetCatalog.load(catalog_path) if args.command in ("snippets", ALL) else None

        with store:
            runner = RepairRunner(store, snippet_catalog=catalog, dry_run=dry_run)
            run(args.command, runner)
    except Exception as e:
        print(f"\n✗ Repair failed: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
