"""Tests for environment-driven configuration."""

from __future__ import annotations

from pathlib import Path

import pytest

from pr_tracker.config import EXCLUDED_FILES, ConfigError, ReportConfig, split_list

ENV = {
    "GITHUB_TOKEN": "t0k3n",
    "GITHUB_ORGANIZATION": "acme",
    "GITHUB_AUTHORS": "alice, bob,,carol ",
    "START_DATE": "2025-01-01",
    "END_DATE": "2025-01-31",
}


@pytest.fixture
def env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in ("OUTPUT_DIR", "EXCLUDED_FILES", "MAX_CONCURRENCY", "REPORT_TIMEZONE"):
        monkeypatch.delenv(name, raising=False)
    for name, value in ENV.items():
        monkeypatch.setenv(name, value)
    return monkeypatch


def test_split_list() -> None:
    assert split_list(" a, b ,,c") == ("a", "b", "c")
    assert split_list("") == ()


def test_from_env_defaults(env: pytest.MonkeyPatch) -> None:
    config = ReportConfig.from_env()
    assert config.token == "t0k3n"
    assert config.organization == "acme"
    assert config.authors == ("alice", "bob", "carol")
    assert config.output_dir == Path("output")
    assert config.excluded_files == EXCLUDED_FILES
    assert config.max_concurrency is None
    assert config.timezone is None
    assert config.top_n == 5


def test_from_env_optional_values(env: pytest.MonkeyPatch) -> None:
    env.setenv("OUTPUT_DIR", "/tmp/reports")
    env.setenv("EXCLUDED_FILES", "dist/,.lock")
    env.setenv("MAX_CONCURRENCY", "8")
    env.setenv("REPORT_TIMEZONE", "Asia/Jakarta")
    config = ReportConfig.from_env()
    assert config.output_dir == Path("/tmp/reports")
    assert config.excluded_files == ("dist/", ".lock")
    assert config.max_concurrency == 8
    assert str(config.timezone) == "Asia/Jakarta"


def test_overrides_win_over_env(env: pytest.MonkeyPatch) -> None:
    config = ReportConfig.from_env(organization="other", authors=("dave",), end_date=None)
    assert config.organization == "other"
    assert config.authors == ("dave",)
    assert config.end_date == "2025-01-31"


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("GITHUB_TOKEN", ""),
        ("GITHUB_ORGANIZATION", ""),
        ("GITHUB_AUTHORS", " , "),
        ("START_DATE", "01/01/2025"),
        ("END_DATE", "2024-12-31"),
        ("MAX_CONCURRENCY", "many"),
        ("MAX_CONCURRENCY", "0"),
        ("REPORT_TIMEZONE", "Mars/Olympus"),
    ],
)
def test_invalid_env_rejected(env: pytest.MonkeyPatch, name: str, value: str) -> None:
    env.setenv(name, value)
    with pytest.raises(ConfigError):
        ReportConfig.from_env()
