"""
Text Utilities

Helper functions for text cleanup and numeric parsing.
"""

import re
from typing import Optional

_TAG_RE = re.compile(r'<[^>]+>')


def clean_text(text) -> str:
    """Collapse whitespace and strip. Non-strings are converted first."""
    if text is None:
        return ""
    return ' '.join(str(text).split()).strip()


def strip_tags(markup: str) -> str:
    """Remove HTML tags, leaving a space where each tag was."""
    if not markup:
        return ""
    return clean_text(_TAG_RE.sub(' ', markup))


def parse_decimal(value) -> float:
    """
    Parse a number that may use a decimal comma.

    Args:
        value: "25,5", "25.5", 25.5 or None

    Returns:
        Float value, 0.0 when unparseable

    Example:
        >>> parse_decimal("25,5") == parse_decimal("25.5") == 25.5
        True
    """
    if value is None:
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).strip().replace(',', '.')
    try:
        return float(text)
    except ValueError:
        return 0.0


def is_numeric_identifier(value: Optional[str], min_len: int = 8, max_len: int = 14) -> bool:
    """Return True if value is purely numeric with min_len..max_len digits."""
    if value is None:
        return False
    text = str(value).strip()
    return re.fullmatch(r'[0-9]+', text) is not None and min_len <= len(text) <= max_len
