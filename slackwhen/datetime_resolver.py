"""Turn a human dd/mm/yyyy date and hh:mm[:ss] time into epoch seconds.

Times are interpreted in the host's local timezone. There is no
timezone argument: the caller is expected to type the wall-clock time
they saw in Slack on the same machine.
"""

import logging
import math
from datetime import datetime

from .errors import InvalidDate, InvalidFormat, InvalidTime

logger = logging.getLogger("slackwhen.datetime_resolver")


def _to_int(part: str) -> int:
    """Parse one numeric component, raising ValueError on anything else."""
    part = part.strip()
    if not part or not part.lstrip("+-").isdigit():
        raise ValueError(f"not a number: {part!r}")
    return int(part)


def _parse_date(date_str: str) -> tuple[int, int, int]:
    parts = date_str.split("/")
    if len(parts) != 3:
        raise InvalidFormat("Invalid date format. Use dd/mm/yyyy")
    try:
        day, month, year = (_to_int(p) for p in parts)
    except ValueError:
        raise InvalidFormat("Invalid date format. Use dd/mm/yyyy") from None
    if not day or not month or not year:
        raise InvalidFormat("Invalid date format. Use dd/mm/yyyy")
    return day, month, year


def _parse_time(time_str: str) -> tuple[int, int, int]:
    parts = time_str.split(":")
    if len(parts) not in (2, 3):
        raise InvalidTime("Invalid time format. Use hh:mm or hh:mm:ss")
    try:
        numbers = [_to_int(p) for p in parts]
    except ValueError:
        raise InvalidTime("Invalid time format. Use hh:mm or hh:mm:ss") from None
    hours, minutes = numbers[0], numbers[1]
    seconds = numbers[2] if len(numbers) == 3 else 0
    return hours, minutes, seconds


def resolve(date_str: str, time_str: str) -> int:
    """Convert a date and a time string into epoch seconds.

    Args:
        date_str: Date as dd/mm/yyyy (all parts non-zero)
        time_str: Time as hh:mm or hh:mm:ss

    Returns:
        Whole epoch seconds for that local wall-clock moment

    Raises:
        InvalidFormat: date or time missing, or date not dd/mm/yyyy
        InvalidTime: time components are not numbers
        InvalidDate: components do not form a real calendar moment
    """
    if not date_str or not time_str:
        raise InvalidFormat("Date and time are required")

    day, month, year = _parse_date(date_str)
    hours, minutes, seconds = _parse_time(time_str)

    try:
        moment = datetime(year, month, day, hours, minutes, seconds)
        # Local-time conversion can still overflow near the ends of the year range
        return math.floor(moment.timestamp())
    except (ValueError, OverflowError, OSError) as e:
        logger.debug(f"Rejected {date_str} {time_str}: {e}")
        raise InvalidDate(f"Invalid date or time values: {date_str} {time_str}") from None


def format_epoch(epoch: float) -> tuple[str, str]:
    """Render epoch seconds back to (dd/mm/yyyy, hh:mm:ss) in local time."""
    moment = datetime.fromtimestamp(epoch)
    return moment.strftime("%d/%m/%Y"), moment.strftime("%H:%M:%S")
