"""Excel export: a ``Pull Requests`` sheet and a ``Summary`` sheet."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import pandas as pd
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter
from openpyxl.utils.exceptions import IllegalCharacterError

from pr_tracker.config import REPORT_FILE_PREFIX, ReportConfig
from pr_tracker.dates import current_datetime, file_timestamp, format_date
from pr_tracker.models import PullRequestRecord, ReportSummary

logger = logging.getLogger(__name__)

PRS_SHEET = "Pull Requests"
SUMMARY_SHEET = "Summary"
NO_DATA = "N/A"

# (header, width) per column of the PR sheet.
PR_COLUMNS: list[tuple[str, int]] = [
    ("Project", 10),
    ("Judul", 50),
    ("Deskripsi", 75),
    ("Author", 20),
    ("URL", 50),
    ("Baris Ditambahkan", 20),
    ("Baris Dihapus", 20),
    ("Total Perubahan", 20),
    ("Tanggal Buat", 20),
    ("Tanggal Merge", 20),
]
SUMMARY_WIDTHS: list[int] = [30, 20, 20, 20, 20]

BOLD = Font(bold=True)


def display_total(pr: PullRequestRecord) -> int | str:
    """Total changes for the PR sheet; ``"N/A"`` when the sum is zero."""
    return pr.total_changes or NO_DATA


def clean_text(value: Any) -> Any:
    """Drop control characters (e.g. ANSI escapes) that worksheets cannot hold."""
    if isinstance(value, str):
        return ILLEGAL_CHARACTERS_RE.sub("", value)
    return value


# ── Sheet contents ──────────────────────────────────────────────────────────

def build_prs_frame(
    prs: Sequence[PullRequestRecord],
    config: ReportConfig,
) -> pd.DataFrame:
    """One row per PR, columns as in ``PR_COLUMNS``."""
    rows = [
        [
            clean_text(pr.project),
            clean_text(pr.title),
            clean_text(pr.description),
            clean_text(pr.author_login),
            clean_text(pr.html_url),
            pr.additions or 0,
            pr.deletions or 0,
            display_total(pr),
            format_date(pr.created_at, config.timezone),
            format_date(pr.closed_at, config.timezone),
        ]
        for pr in prs
    ]
    return pd.DataFrame(rows, columns=[name for name, _ in PR_COLUMNS])


class _SummaryRows:
    """Accumulates summary rows and remembers which ones are bold."""

    def __init__(self) -> None:
        self.rows: list[list[Any]] = []
        self.bold: list[int] = []

    def add(self, *values: Any, bold: bool = False) -> None:
        row = [clean_text(v) for v in values]
        row += [None] * (len(SUMMARY_WIDTHS) - len(values))
        self.rows.append(row)
        if bold:
            self.bold.append(len(self.rows))

    def blank(self) -> None:
        self.add()

    def section(self, title: str) -> None:
        self.add(title, "", bold=True)


def build_summary_rows(summary: ReportSummary, config: ReportConfig) -> _SummaryRows:
    """Lay out the summary sheet top to bottom."""
    out = _SummaryRows()
    out.add("Metric", "Value", bold=True)

    out.section("Periode Laporan")
    out.add("Tanggal Mulai", format_date(config.start_date))
    out.add("Tanggal Akhir", format_date(config.end_date))
    out.blank()
    out.add("Tanggal Pembuatan Laporan", current_datetime(config.timezone))
    out.blank()

    out.section("Ringkasan Pull Request")
    out.add("Total Pull Requests", summary.total_prs)
    out.add("Total Penambahan Kode", summary.total_additions)
    out.add("Total Penghapusan Kode", summary.total_deletions)
    out.add("Total Perubahan Kode", summary.total_changes)
    out.blank()

    out.section("Ringkasan Per Author")
    out.add("Author", "Jumlah PR", "Penambahan Kode", "Penghapusan Kode",
            "Total Perubahan", bold=True)
    for stat in summary.author_stats:
        out.add(stat.author, stat.pr_count, stat.additions, stat.deletions, stat.changes)
    out.blank()

    out.section(f"Top {config.top_n} PR dengan Perubahan Terbanyak")
    out.add("Judul PR", "Author", "Total Perubahan", "Tanggal Merge", "URL", bold=True)
    for pr in summary.top_prs:
        out.add(
            pr.title,
            pr.author_login,
            pr.total_changes,
            format_date(pr.closed_at, config.timezone),
            pr.html_url,
        )
    out.blank()

    out.section(f"Top {config.top_n} Repo Berdasarkan Jumlah Perubahan")
    out.add("Repo", "Total Perubahan", bold=True)
    for repo in summary.top_repos:
        out.add(repo.repo, repo.changes)

    return out


# ── Writing ─────────────────────────────────────────────────────────────────

def _set_widths(worksheet: Any, widths: Sequence[int]) -> None:
    for idx, width in enumerate(widths, 1):
        worksheet.column_dimensions[get_column_letter(idx)].width = width


def write_workbook(
    path: Path,
    prs: Sequence[PullRequestRecord],
    summary: ReportSummary,
    config: ReportConfig,
) -> None:
    """Write both sheets to *path*."""
    prs_frame = build_prs_frame(prs, config)
    summary_rows = build_summary_rows(summary, config)

    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        prs_frame.to_excel(writer, sheet_name=PRS_SHEET, index=False)
        ws = writer.sheets[PRS_SHEET]
        _set_widths(ws, [width for _, width in PR_COLUMNS])
        for cell in ws[1]:
            cell.font = BOLD

        pd.DataFrame(summary_rows.rows, dtype=object).to_excel(
            writer, sheet_name=SUMMARY_SHEET, index=False, header=False
        )
        ws = writer.sheets[SUMMARY_SHEET]
        _set_widths(ws, SUMMARY_WIDTHS)
        for row_idx in summary_rows.bold:
            for cell in ws[row_idx]:
                cell.font = BOLD


def export_to_excel(
    prs: Sequence[PullRequestRecord],
    summary: ReportSummary,
    config: ReportConfig,
) -> Path | None:
    """Write the report into ``config.output_dir`` and return its path.

    The workbook is written to a temporary file first and moved into place,
    so a failed write never leaves a half-written report. Write errors are
    logged and ``None`` is returned.
    """
    logger.info("Processing %d pull requests for Excel file...", len(prs))

    out_path = config.output_dir / f"{REPORT_FILE_PREFIX}{file_timestamp()}.xlsx"
    tmp_path = out_path.with_name(f".{out_path.stem}.partial.xlsx")

    try:
        config.output_dir.mkdir(parents=True, exist_ok=True)
        write_workbook(tmp_path, prs, summary, config)
        tmp_path.replace(out_path)
    except (OSError, ValueError, IllegalCharacterError) as exc:
        logger.error("Error saving Excel file %s: %s", out_path, exc)
        return None
    finally:
        if tmp_path.exists():
            tmp_path.unlink()

    logger.info("Excel file created successfully: %s", out_path.name)
    return out_path
