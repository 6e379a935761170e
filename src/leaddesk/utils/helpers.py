"""
General helper functions
"""
import math
from typing import Any, Optional


def clean_string(value: Any) -> Optional[str]:
    """Strip a raw cell value; blank or missing becomes None"""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def truncate_string(value: Any, max_length: int = 255) -> Optional[str]:
    """
    Strip a value and cut it down to a fixed column width.

    Args:
        value: Raw value (any type, usually a CSV cell)
        max_length: Maximum number of characters to keep

    Returns:
        The trimmed, truncated string, or None for blank input
    """
    text = clean_string(value)
    if text is None:
        return None
    return text[:max_length]


def parse_float(value: Any) -> Optional[float]:
    """Parse a float leniently; anything unparseable (or nan/inf) becomes None"""
    text = clean_string(value)
    if text is None:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def parse_int(value: Any) -> Optional[int]:
    """
    Parse an integer leniently.
    "12" and "12.0" parse; "12.5", "abc" and blanks become None.
    """
    text = clean_string(value)
    if text is None:
        return None
    try:
        return int(text)
    except ValueError:
        pass
    number = parse_float(text)
    if number is None or not number.is_integer():
        return None
    return int(number)
