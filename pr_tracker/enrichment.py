"""Enrichment phase: PR detail + changed files for every search hit.

For each record the pipeline:
    1. derives owner/repo from the PR web URL and attaches the repo name,
    2. drops PRs that are closed without being merged,
    3. attaches lowercased head/base branch names and the PR body,
    4. drops branch-synchronisation PRs (see ``SYNC_BRANCH_PAIRS``),
    5. sums additions/deletions over files not matching the exclusion list.

Failures inside a record are logged and the record is returned with
whatever was attached before the failure. Exclusions return ``None``.
"""

from __future__ import annotations

import asyncio
import copy
import logging
from collections.abc import Iterable
from typing import Any

from pr_tracker.config import SYNC_BRANCH_PAIRS, ReportConfig
from pr_tracker.github_client import GitHubAPIError, GitHubClient
from pr_tracker.models import FileChange, PullRequestRecord

logger = logging.getLogger(__name__)


# ── Policies ────────────────────────────────────────────────────────────────

def extract_repo_info(url: str) -> tuple[str, str]:
    """Return ``(owner, repo)`` from ``https://github.com/<owner>/<repo>/pull/<n>``.

    Positional split only; the URL is assumed to have that exact shape.
    """
    parts = url.split("/")
    if len(parts) < 5 or not parts[3] or not parts[4]:
        raise ValueError(f"Cannot find owner/repo in PR URL {url!r}")
    return parts[3], parts[4]


def is_sync_pr(head: str | None, base: str | None) -> bool:
    """True when head/base form one of the known branch-sync pairs, either way round."""
    if not head or not base:
        return False
    return frozenset({head.lower(), base.lower()}) in SYNC_BRANCH_PAIRS


def is_excluded_file(filename: str, patterns: Iterable[str]) -> bool:
    """Return True if *filename* matches any exclusion pattern.

    ``.ext`` patterns match as a suffix, ``dir/`` patterns and everything
    else match as a substring anywhere in the path.
    """
    for pattern in patterns:
        if pattern.startswith(".") and filename.endswith(pattern):
            return True
        if pattern.endswith("/") and pattern in filename:
            return True
        if pattern in filename:
            return True
    return False


def parse_file_changes(files_data: list[dict[str, Any]]) -> list[FileChange]:
    return [
        FileChange(
            filename=f.get("filename", ""),
            additions=f.get("additions", 0),
            deletions=f.get("deletions", 0),
        )
        for f in files_data
    ]


def calculate_code_changes(
    files: list[FileChange],
    patterns: Iterable[str],
) -> tuple[int, int]:
    """Sum ``(additions, deletions)`` over the files that are not excluded."""
    patterns = tuple(patterns)
    additions = 0
    deletions = 0
    for f in files:
        if is_excluded_file(f.filename, patterns):
            continue
        additions += f.additions
        deletions += f.deletions
    return additions, deletions


# ── Per-record enrichment ──────────────────────────────────────────────────

async def enrich_record(
    client: GitHubClient,
    record: PullRequestRecord,
    config: ReportConfig,
) -> PullRequestRecord | None:
    """Enrich a copy of *record*; ``None`` means the PR is excluded."""
    pr = copy.copy(record)
    try:
        owner, repo = extract_repo_info(pr.html_url)
        pr.project = repo

        detail = await client.get_pull(owner, repo, pr.number)
        is_open = detail.get("state") == "open"
        is_merged = detail.get("merged_at") is not None
        if not is_open and not is_merged:
            logger.debug("Skipping PR #%d: closed without merge", pr.number)
            return None

        pr.head = _branch_ref(detail, "head")
        pr.base = _branch_ref(detail, "base")
        pr.description = detail.get("body")

        if is_sync_pr(pr.head, pr.base):
            logger.debug("Skipping PR #%d: sync %s -> %s", pr.number, pr.head, pr.base)
            return None

        files_data = await client.get_pull_files(owner, repo, pr.number)
        pr.additions, pr.deletions = calculate_code_changes(
            parse_file_changes(files_data), config.excluded_files
        )
    except (GitHubAPIError, LookupError, TypeError, ValueError, AttributeError) as exc:
        logger.error("Error processing PR #%d (%s): %s", pr.number, pr.html_url, exc)
        return pr

    return pr


def _branch_ref(detail: dict[str, Any], side: str) -> str | None:
    ref = (detail.get(side) or {}).get("ref")
    return ref.lower() if ref else None


async def enrich(
    client: GitHubClient,
    records: list[PullRequestRecord],
    config: ReportConfig,
) -> list[PullRequestRecord]:
    """Enrich all *records* concurrently; excluded PRs are dropped.

    Output preserves input order. The input list and its records are not
    modified.
    """
    if not records:
        logger.info("No pull requests found.")
        return []

    logger.info("Fetching %d pull request details...", len(records))
    results = await asyncio.gather(
        *(enrich_record(client, record, config) for record in records)
    )
    kept = [pr for pr in results if pr is not None]
    logger.info("Kept %d of %d pull requests", len(kept), len(records))
    return kept
