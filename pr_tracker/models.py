"""Domain models for the PR activity report."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class FileChange:
    """A single file touched in a pull request."""

    filename: str
    additions: int
    deletions: int


@dataclass
class PullRequestRecord:
    """A pull request found by search, filled in during enrichment.

    ``additions`` and ``deletions`` are either both set or both ``None``.
    """

    number: int
    title: str
    author_login: str
    html_url: str
    created_at: datetime | None = None
    closed_at: datetime | None = None
    project: str = ""
    description: str | None = None
    additions: int | None = None
    deletions: int | None = None
    head: str | None = None
    base: str | None = None

    @property
    def has_changes(self) -> bool:
        """True once file-change counts have been attached."""
        return self.additions is not None and self.deletions is not None

    @property
    def total_changes(self) -> int:
        """Additions plus deletions, treating missing counts as zero."""
        return (self.additions or 0) + (self.deletions or 0)


@dataclass
class AuthorStat:
    """Per-author totals for the summary sheet."""

    author: str
    pr_count: int
    additions: int
    deletions: int
    changes: int


@dataclass
class RepoStat:
    """Total changes landed in one repository."""

    repo: str
    changes: int


@dataclass
class ReportSummary:
    """Aggregates printed on the summary sheet."""

    total_prs: int
    total_additions: int
    total_deletions: int
    author_stats: list[AuthorStat] = field(default_factory=list)
    top_prs: list[PullRequestRecord] = field(default_factory=list)
    top_repos: list[RepoStat] = field(default_factory=list)

    @property
    def total_changes(self) -> int:
        return self.total_additions + self.total_deletions
