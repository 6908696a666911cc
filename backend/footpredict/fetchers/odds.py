"""
Conversion of bookmaker decimal odds and confidence values into win percentages.
"""

import math
import re
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional

# Leading numeric prefix, the way the feed's string values are read ("1.80", "56%", " 3.1 ")
_NUMBER_PREFIX = re.compile(r"^\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def parse_decimal(value: Any) -> Optional[float]:
    """Parse a number from a feed value. Returns None when nothing numeric can be read."""
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        number = float(value)
    else:
        match = _NUMBER_PREFIX.match(str(value))
        if not match:
            return None
        number = float(match.group(0))

    if math.isnan(number) or math.isinf(number):
        return None
    return number


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (12.5 -> 13)."""
    return int(math.floor(value + 0.5))


def round_half_up_2dp(value: float) -> float:
    """Round to two decimals with .005 going up (2.125 -> 2.13)."""
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def _clamp_percent(value: int) -> int:
    return max(0, min(100, value))


def parse_odds(value: Any) -> Optional[float]:
    """Decimal odds as a float, or None when missing, unparsable or not positive."""
    odds = parse_decimal(value)
    if odds is None or odds <= 0:
        return None
    return odds


def win_chance_from_odds(value: Any) -> Optional[int]:
    """
    Implied probability of decimal odds as an integer percentage.

    round(100 / odds), capped to 0-100. Returns None for unparsable or
    non-positive odds.
    """
    odds = parse_odds(value)
    if odds is None:
        return None
    return _clamp_percent(round_half_up(min(100.0 / odds, 100.0)))


def win_chance_from_confidence(value: Any) -> Optional[int]:
    """A pre-computed confidence percentage, rounded. None if unparsable."""
    confidence = parse_decimal(value)
    if confidence is None:
        return None
    return _clamp_percent(round_half_up(confidence))


def resolve_win_chance(odds: Any, confidence: Any = None) -> int:
    """Odds-derived chance first, then the confidence value, then 0."""
    return win_chance_from_odds(odds) or win_chance_from_confidence(confidence) or 0
