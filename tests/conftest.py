"""Shared fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from pr_tracker.config import ReportConfig


@pytest.fixture
def config(tmp_path: Path) -> ReportConfig:
    return ReportConfig(
        token="test-token",
        organization="acme",
        authors=("alice", "bob"),
        start_date="2025-01-01",
        end_date="2025-01-31",
        output_dir=tmp_path / "output",
    )
