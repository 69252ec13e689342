"""Phone number utilities for the contact directory."""

import re

_SEPARATORS = re.compile(r"[ \-()]")


def format_phone_for_directory(phone: str) -> str:
    """Format a phone number the way the contact directory stores it.

    Spaces, dashes and parentheses are stripped and a leading "1" (US
    country code) is added when absent.

    Examples:
        (802) 555-0100 → 18025550100
        1-802-555-0100 → 18025550100
        802 555 0100 → 18025550100

    Args:
        phone: Phone number in any format

    Returns:
        Phone number as sent to the directory search/create calls
    """
    cleaned = _SEPARATORS.sub("", phone)
    if not cleaned.startswith("1"):
        cleaned = "1" + cleaned
    return cleaned
