"""
Progress reporting for batch sets.
Percentages, relative time strings and progress message placeholders.
"""

import math
import re
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Tuple, Union


Number = Union[int, float]

# Units used by format_interval, largest first.
INTERVAL_UNITS: List[Tuple[int, str, str]] = [
    (31536000, "1 year", "{count} years"),
    (2592000, "1 month", "{count} months"),
    (604800, "1 week", "{count} weeks"),
    (86400, "1 day", "{count} days"),
    (3600, "1 hour", "{count} hours"),
    (60, "1 min", "{count} min"),
    (1, "1 sec", "{count} sec"),
]


def percentage(total: int, current: Number) -> str:
    """
    Format the percentage of processed operations.

    A value below total never renders as 100: a decimal place is added
    at 200, 2000, ... operations and more are added while the rounded
    value still reads as 100.

    :param total: Total number of operations.
    :param current: Operations processed so far, the fraction of the
        operation in flight included.
    :returns: The percentage as a string without percent sign.
    """
    if not total or current == total:
        return "100"

    value = Decimal(str(current)) / Decimal(total) * 100
    decimal_places = max(0, math.floor(math.log10(total / 2.0)) - 1)

    while True:
        rounded = value.quantize(
            Decimal(1).scaleb(-decimal_places), rounding=ROUND_HALF_UP
        )
        decimal_places += 1
        if rounded != 100:
            return format(rounded, "f")


def format_interval(seconds: Number, granularity: int = 2) -> str:
    """
    Format a time interval as a human readable string, e.g. "1 min 5 sec".

    :param seconds: Length of the interval in seconds.
    :param granularity: Maximum number of units to show.
    """
    remaining = int(seconds) if seconds > 0 else 0
    parts: List[str] = []

    for unit, singular, plural in INTERVAL_UNITS:
        if remaining >= unit:
            count = remaining // unit
            parts.append(singular if count == 1 else plural.format(count=count))
            remaining %= unit
            granularity -= 1

        if granularity <= 0:
            break

    return " ".join(parts) if parts else "0 sec"


def progress_values(
    total: int, remaining: int, current: Number, elapsed: float
) -> Dict[str, Any]:
    """
    Build the placeholder values of a progress message.

    :param total: Total operations of the set.
    :param remaining: Operations still queued.
    :param current: Processed operations including the fractional one.
    :param elapsed: Seconds spent on the set so far.
    """
    if current > 0:
        estimate = format_interval(elapsed * (total - current) / current)
    else:
        estimate = "-"

    return {
        "@remaining": remaining,
        "@total": total,
        "@current": math.floor(current),
        "@percentage": percentage(total, current),
        "@elapsed": format_interval(elapsed),
        "@estimate": estimate,
    }


def format_progress_message(template: str, values: Dict[str, Any]) -> str:
    """
    Replace placeholders in a progress message.
    Longer placeholders win over shorter ones sharing a prefix.
    """
    if not values:
        return template

    keys = sorted(values, key=len, reverse=True)
    pattern = re.compile("|".join(re.escape(key) for key in keys))
    return pattern.sub(lambda match: str(values[match.group(0)]), template)
