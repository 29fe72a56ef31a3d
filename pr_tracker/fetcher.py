"""Search phase: one ``/search/issues`` query per tracked author."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from pr_tracker.config import ReportConfig
from pr_tracker.dates import parse_timestamp
from pr_tracker.github_client import GitHubAPIError, GitHubClient
from pr_tracker.models import PullRequestRecord

logger = logging.getLogger(__name__)


def build_search_query(
    organization: str,
    author: str,
    start_date: str,
    end_date: str,
) -> str:
    """Search qualifier for an author's PRs created within the inclusive range."""
    return f"org:{organization} is:pr author:{author} created:{start_date}..{end_date}"


def parse_search_item(item: dict[str, Any]) -> PullRequestRecord:
    """Convert one search hit into a partial ``PullRequestRecord``."""
    user = item.get("user") or {}
    return PullRequestRecord(
        number=item["number"],
        title=item.get("title", ""),
        author_login=user.get("login", "ghost"),
        html_url=item.get("html_url", ""),
        created_at=parse_timestamp(item.get("created_at")),
        closed_at=parse_timestamp(item.get("closed_at")),
    )


async def fetch_author_prs(
    client: GitHubClient,
    author: str,
    config: ReportConfig,
) -> list[PullRequestRecord]:
    """Fetch a single page of PRs for *author*.

    Any failure is logged and yields an empty list, so one bad author never
    affects the others.
    """
    logger.info("Fetching %s's pull requests", author)
    query = build_search_query(
        config.organization, author, config.start_date, config.end_date
    )

    try:
        data = await client.search_issues(query)
    except GitHubAPIError as exc:
        logger.error("Error fetching PRs for author %s: %s", author, exc)
        return []

    items = data.get("items") if isinstance(data, dict) else None
    if not isinstance(items, list):
        logger.error("Invalid response for author %s: %r", author, data)
        return []

    try:
        return [parse_search_item(item) for item in items]
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        logger.error("Malformed search item for author %s: %s", author, exc)
        return []


async def fetch_all_pull_requests(
    client: GitHubClient,
    config: ReportConfig,
) -> list[PullRequestRecord]:
    """Search every configured author concurrently and concatenate the hits.

    Results keep author order; no cross-author deduplication is done.
    """
    per_author = await asyncio.gather(
        *(fetch_author_prs(client, author, config) for author in config.authors)
    )
    records = [record for batch in per_author for record in batch]
    logger.info("Found %d pull requests", len(records))
    return records
