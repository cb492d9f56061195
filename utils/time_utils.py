"""
utils/time_utils.py

Purpose: Time and date helpers

- Local "today" for the date menu (platform runs in UTC)
- Compact YYYYMMDD / display MM/DD formatting
- Normalization of date-picker values
"""

import re
from datetime import datetime, timedelta
from typing import Optional

_DATE_SEPARATORS = re.compile(r"[-/.]")


def local_now(offset_hours: int, now: Optional[datetime] = None) -> datetime:
    """
    Shifts a naive UTC timestamp to the configured local offset.
    """
    if now is None:
        now = datetime.utcnow()
    return now + timedelta(hours=offset_hours)


def format_compact_date(dt: datetime) -> str:
    """
    Formats a date as YYYYMMDD, the form stored on records.
    """
    return dt.strftime("%Y%m%d")


def format_display_date(dt: datetime) -> str:
    """
    Formats a date as MM/DD for button labels.
    """
    return dt.strftime("%m/%d")


def normalize_picker_date(value: Optional[str]) -> str:
    """
    Strips separators from a date-picker value.

    "2024-01-01" -> "20240101". Empty or missing input returns "".
    """
    if not value:
        return ""
    return _DATE_SEPARATORS.sub("", value.strip())
