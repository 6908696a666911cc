"""
Match date validation helpers.
"""

import re
from datetime import datetime
from typing import Optional

from footpredict.utils.exceptions import InvalidDateError

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def validate_match_date(value: Optional[str]) -> str:
    """
    Check that value is a real calendar date in YYYY-MM-DD form and return it.

    Raises InvalidDateError for a missing value, the wrong shape
    (e.g. "2025-8-1") or an impossible date (e.g. "2025-13-40").
    """
    if not value:
        raise InvalidDateError("Date parameter is required")

    if not DATE_PATTERN.match(value):
        raise InvalidDateError("Invalid date format. Please use YYYY-MM-DD format.")

    try:
        datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        raise InvalidDateError("Invalid date format. Please use YYYY-MM-DD format.")

    return value
