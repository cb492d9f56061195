"""
utils/validation_utils.py

Purpose: Input validation

- Registration text parsing ("ministry sutra_name name")
- Compact date validation
- Input sanitization
"""

import re
from typing import Optional, Tuple

from utils.constants import REGISTRATION_FIELD_COUNT

_COMPACT_DATE = re.compile(r"^\d{8}$")


def parse_registration_text(text: str) -> Optional[Tuple[str, str, str]]:
    """
    Splits registration input on any whitespace.

    Args:
        text: Message text, e.g. "青年部 經親 王小明"

    Returns:
        (ministry, sutra_name, name) when exactly three tokens are given,
        None otherwise
    """
    if not text:
        return None

    parts = text.split()
    if len(parts) != REGISTRATION_FIELD_COUNT:
        return None

    ministry, sutra_name, name = parts
    return ministry, sutra_name, name


def is_compact_date(value: Optional[str]) -> bool:
    """
    Checks for the YYYYMMDD form produced by the date menu.
    """
    return bool(value) and bool(_COMPACT_DATE.match(value))


def sanitize_text(text: Optional[str]) -> str:
    """
    Trims incoming message text; None becomes "".
    """
    if text is None:
        return ""
    return text.strip()
