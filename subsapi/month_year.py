"""
SubsAPI: Month-Year Text Codec
================================

What:  Converts between the "MM-YYYY" strings used at the HTTP boundary and
       `datetime.date` values pinned to the first day of the month.
Who:   Used by SubscriptionService for request dates and by the response
       schemas for serialization.

Format:
    "03-2024"  ⇄  date(2024, 3, 1)

    Two-digit month (01-12), a hyphen, four-digit year. No surrounding
    whitespace, no single-digit months.
"""

import re
from datetime import date
from typing import Optional

MONTH_YEAR_PATTERN = re.compile(r"(0[1-9]|1[0-2])-(\d{4})")


def parse_month_year(value: str) -> date:
    """
    Parse "MM-YYYY" into the first day of that month.

    Raises:
        ValueError: value is not a well-formed month-year string
    """
    match = MONTH_YEAR_PATTERN.fullmatch(value or "")
    if match is None:
        raise ValueError(f"'{value}' is not in MM-YYYY format")
    month, year = int(match.group(1)), int(match.group(2))
    if year < 1:
        raise ValueError(f"'{value}' has an invalid year")
    return date(year, month, 1)


def format_month_year(value: Optional[date]) -> Optional[str]:
    """Format a date as "MM-YYYY"; None stays None (ongoing subscriptions)."""
    if value is None:
        return None
    return f"{value.month:02d}-{value.year:04d}"
