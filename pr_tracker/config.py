"""Centralised configuration and constants."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import date, tzinfo
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

# ── GitHub API ──────────────────────────────────────────────────────────────
GITHUB_API_BASE: str = "https://api.github.com"
GITHUB_API_VERSION: str = "2022-11-28"
USER_AGENT: str = "pr-tracker"
REQUEST_TIMEOUT: int = 30  # seconds
SEARCH_PER_PAGE: int = 100

# ── Report ─────────────────────────────────────────────────────────────────
DEFAULT_OUTPUT_DIR: str = "output"
DEFAULT_TOP_N: int = 5
REPORT_FILE_PREFIX: str = "github_prs_"
DATE_FORMAT: str = "%Y-%m-%d"

# ── Branch pairs that only synchronise long-lived branches ─────────────────
SYNC_BRANCH_PAIRS: frozenset[frozenset[str]] = frozenset({
    frozenset({"develop", "master"}),
    frozenset({"main", "develop"}),
    frozenset({"main", "deploy-to-main"}),
})

# ── Files left out of change totals ────────────────────────────────────────
EXCLUDED_FILES: tuple[str, ...] = (
    # Lock files
    "package-lock.json",
    "composer.lock",
    "yarn.lock",
    "pnpm-lock.yaml",
    # Generated files & binaries
    ".svg",
    ".png",
    ".jpg",
    ".jpeg",
    ".gif",
    ".ico",
    ".pdf",
    ".zip",
    ".ttf",
    ".woff",
    ".woff2",
    ".eot",
    # Build outputs
    "dist/",
    "build/",
    "public/build/",
    # Minified files
    ".min.js",
    ".min.css",
    # Translation files
    ".po",
    ".mo",
    # Data files
    ".csv",
)


class ConfigError(ValueError):
    """Raised when the environment does not describe a runnable report."""


@dataclass(frozen=True)
class ReportConfig:
    """Everything one report run needs, passed explicitly to each phase."""

    token: str
    organization: str
    authors: tuple[str, ...]
    start_date: str
    end_date: str
    output_dir: Path = Path(DEFAULT_OUTPUT_DIR)
    excluded_files: tuple[str, ...] = EXCLUDED_FILES
    top_n: int = DEFAULT_TOP_N
    max_concurrency: int | None = None
    timezone: tzinfo | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if not self.token:
            raise ConfigError("GITHUB_TOKEN is required.")
        if not self.organization:
            raise ConfigError("GITHUB_ORGANIZATION is required.")
        if not self.authors:
            raise ConfigError("GITHUB_AUTHORS must list at least one login.")
        start = _parse_date("START_DATE", self.start_date)
        end = _parse_date("END_DATE", self.end_date)
        if start > end:
            raise ConfigError(
                f"START_DATE {self.start_date} is after END_DATE {self.end_date}."
            )
        if self.max_concurrency is not None and self.max_concurrency < 1:
            raise ConfigError("MAX_CONCURRENCY must be a positive integer.")

    @classmethod
    def from_env(cls, **overrides: object) -> ReportConfig:
        """Build a config from environment variables.

        Keyword *overrides* (e.g. from CLI flags) win over the environment;
        ``None`` values are ignored.
        """
        values: dict[str, object] = {
            "token": os.getenv("GITHUB_TOKEN", ""),
            "organization": os.getenv("GITHUB_ORGANIZATION", ""),
            "authors": split_list(os.getenv("GITHUB_AUTHORS", "")),
            "start_date": os.getenv("START_DATE", ""),
            "end_date": os.getenv("END_DATE", ""),
            "output_dir": Path(os.getenv("OUTPUT_DIR") or DEFAULT_OUTPUT_DIR),
            "max_concurrency": _parse_int(
                "MAX_CONCURRENCY", os.getenv("MAX_CONCURRENCY")
            ),
            "timezone": _parse_timezone(os.getenv("REPORT_TIMEZONE")),
        }
        excluded = os.getenv("EXCLUDED_FILES")
        if excluded:
            values["excluded_files"] = split_list(excluded)

        for key, value in overrides.items():
            if value is not None:
                values[key] = value
        return cls(**values)  # type: ignore[arg-type]


def split_list(raw: str) -> tuple[str, ...]:
    """Split a comma-separated value, dropping blanks."""
    return tuple(part.strip() for part in raw.split(",") if part.strip())


def _parse_date(name: str, value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise ConfigError(f"{name} must be YYYY-MM-DD, got {value!r}.") from exc


def _parse_int(name: str, value: str | None) -> int | None:
    if not value:
        return None
    try:
        return int(value)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {value!r}.") from exc


def _parse_timezone(value: str | None) -> tzinfo | None:
    if not value:
        return None
    try:
        return ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigError(f"Unknown REPORT_TIMEZONE {value!r}.") from exc
