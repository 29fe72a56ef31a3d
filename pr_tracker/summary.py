"""Aggregation of enriched PRs into per-author, top-PR and top-repo tables.

All rankings use Python's stable sort, so ties keep input order: author
configuration order for ``author_stats``, record order for ``top_prs`` and
first-seen repository order for ``top_repos``.
"""

from __future__ import annotations

from collections.abc import Sequence

from pr_tracker.config import DEFAULT_TOP_N
from pr_tracker.models import AuthorStat, PullRequestRecord, RepoStat, ReportSummary


def calculate_author_stats(
    prs: Sequence[PullRequestRecord],
    authors: Sequence[str],
) -> list[AuthorStat]:
    """One entry per configured author, most changes first.

    Authors without PRs are listed with zero counts.
    """
    stats: list[AuthorStat] = []
    for author in authors:
        authored = [pr for pr in prs if pr.author_login == author]
        additions = sum(pr.additions or 0 for pr in authored)
        deletions = sum(pr.deletions or 0 for pr in authored)
        stats.append(AuthorStat(
            author=author,
            pr_count=len(authored),
            additions=additions,
            deletions=deletions,
            changes=additions + deletions,
        ))

    return sorted(stats, key=lambda s: s.changes, reverse=True)


def top_prs_by_changes(
    prs: Sequence[PullRequestRecord],
    limit: int = DEFAULT_TOP_N,
) -> list[PullRequestRecord]:
    """The *limit* PRs with the most changes.

    PRs without change counts (enrichment failed) are not ranked.
    """
    ranked = sorted(
        (pr for pr in prs if pr.has_changes),
        key=lambda pr: pr.total_changes,
        reverse=True,
    )
    return ranked[:limit]


def top_repos_by_changes(
    prs: Sequence[PullRequestRecord],
    limit: int = DEFAULT_TOP_N,
) -> list[RepoStat]:
    """The *limit* repositories with the most changes summed over their PRs."""
    changes_by_repo: dict[str, int] = {}
    for pr in prs:
        changes_by_repo[pr.project] = changes_by_repo.get(pr.project, 0) + pr.total_changes

    ranked = sorted(
        (RepoStat(repo=repo, changes=changes) for repo, changes in changes_by_repo.items()),
        key=lambda r: r.changes,
        reverse=True,
    )
    return ranked[:limit]


def summarize(
    prs: Sequence[PullRequestRecord],
    authors: Sequence[str],
    top_n: int = DEFAULT_TOP_N,
) -> ReportSummary:
    """Compute everything the summary sheet shows from the final PR list."""
    return ReportSummary(
        total_prs=len(prs),
        total_additions=sum(pr.additions or 0 for pr in prs),
        total_deletions=sum(pr.deletions or 0 for pr in prs),
        author_stats=calculate_author_stats(prs, authors),
        top_prs=top_prs_by_changes(prs, top_n),
        top_repos=top_repos_by_changes(prs, top_n),
    )
