"""Date parsing and Indonesian long-form date formatting for the report."""

from __future__ import annotations

import re
from datetime import date, datetime, timezone, tzinfo

DAY_NAMES: tuple[str, ...] = (
    "Senin", "Selasa", "Rabu", "Kamis", "Jumat", "Sabtu", "Minggu",
)
MONTH_NAMES: tuple[str, ...] = (
    "Januari", "Februari", "Maret", "April", "Mei", "Juni",
    "Juli", "Agustus", "September", "Oktober", "November", "Desember",
)


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse a GitHub ISO-8601 timestamp (``...Z``); ``None`` stays ``None``."""
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _localise(value: date | datetime | str, tz: tzinfo | None) -> date:
    if isinstance(value, str):
        value = (
            parse_timestamp(value) if "T" in value else date.fromisoformat(value)
        )
    if isinstance(value, datetime) and value.tzinfo is not None:
        # Aware timestamps are shown in the report timezone (local by default).
        value = value.astimezone(tz)
    return value


def _long_date(d: date) -> str:
    return f"{DAY_NAMES[d.weekday()]}, {d.day} {MONTH_NAMES[d.month - 1]} {d.year}"


def format_date(value: date | datetime | str | None, tz: tzinfo | None = None) -> str:
    """``Senin, 6 Januari 2025``. Missing values render as an empty string."""
    if value is None or value == "":
        return ""
    return _long_date(_localise(value, tz))


def format_datetime(value: datetime | str | None, tz: tzinfo | None = None) -> str:
    """``Senin, 6 Januari 2025 14:03:00``."""
    if value is None or value == "":
        return ""
    d = _localise(value, tz)
    if not isinstance(d, datetime):
        d = datetime(d.year, d.month, d.day)
    return f"{_long_date(d)} {d:%H:%M:%S}"


def current_datetime(tz: tzinfo | None = None) -> str:
    """Long-form timestamp of *now*, used as the report generation time."""
    return format_datetime(datetime.now(timezone.utc), tz)


def file_timestamp(now: datetime | None = None) -> str:
    """Sortable, filesystem-safe UTC timestamp, e.g. ``2025-01-06T14-03-00-123Z``."""
    now = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    iso = now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"
    return re.sub(r"[:.]", "-", iso)
