"""Top-level pipeline: search -> enrich -> summarise -> export."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
from collections.abc import Sequence
from pathlib import Path

import httpx
from dotenv import load_dotenv

from pr_tracker import __version__
from pr_tracker.config import ConfigError, ReportConfig, split_list
from pr_tracker.enrichment import enrich
from pr_tracker.fetcher import fetch_all_pull_requests
from pr_tracker.github_client import GitHubClient
from pr_tracker.models import PullRequestRecord, ReportSummary
from pr_tracker.report import export_to_excel
from pr_tracker.summary import summarize

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG = 2


async def collect(
    config: ReportConfig,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[PullRequestRecord]:
    """Run the search and enrichment phases against the GitHub API."""
    async with GitHubClient(
        config.token,
        max_concurrency=config.max_concurrency,
        transport=transport,
    ) as client:
        logger.info("Phase 1: searching PRs for %d authors", len(config.authors))
        records = await fetch_all_pull_requests(client, config)

        logger.info("Phase 2: fetching PR details and files")
        return await enrich(client, records, config)


def run(
    config: ReportConfig,
    transport: httpx.AsyncBaseTransport | None = None,
) -> tuple[Path | None, ReportSummary]:
    """Collect PRs, aggregate them and write the Excel report."""
    logger.info(
        "Starting GitHub PR tracker for period: %s to %s",
        config.start_date,
        config.end_date,
    )
    prs = asyncio.run(collect(config, transport))
    summary = summarize(prs, config.authors, config.top_n)
    return export_to_excel(prs, summary, config), summary


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pr_tracker",
        description=(
            "Build an Excel report of pull requests opened by a set of authors "
            "in a GitHub organization. Flags override environment variables."
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--org", help="GitHub organization (GITHUB_ORGANIZATION)")
    parser.add_argument("--authors", help="Comma-separated logins (GITHUB_AUTHORS)")
    parser.add_argument("--start", help="Start date YYYY-MM-DD, inclusive (START_DATE)")
    parser.add_argument("--end", help="End date YYYY-MM-DD, inclusive (END_DATE)")
    parser.add_argument("--output-dir", type=Path, help="Report directory (OUTPUT_DIR)")
    parser.add_argument(
        "--log-level",
        default=os.environ.get("LOG_LEVEL", "INFO"),
        help="Logging level (LOG_LEVEL), default INFO",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point. Returns the process exit status."""
    load_dotenv()
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )

    try:
        config = ReportConfig.from_env(
            organization=args.org,
            authors=split_list(args.authors) if args.authors else None,
            start_date=args.start,
            end_date=args.end,
            output_dir=args.output_dir,
        )
    except ConfigError as exc:
        logger.error("Invalid configuration: %s", exc)
        return EXIT_CONFIG

    try:
        out_path, _summary = run(config)
    except Exception:
        logger.exception("Error in main process")
        return EXIT_FAILURE

    if out_path is None:
        return EXIT_FAILURE
    print(out_path)
    return EXIT_OK
