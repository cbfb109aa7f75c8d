"""Serial number formatting and check digit helpers.

Format: ``<2-digit year><6-digit sequence>-<check digit>``, e.g. ``26000001-9``.
The check digit is the digit sum of the body modulo 10. It catches most
single-digit typos on manual re-entry but not transpositions.
"""

import re
from datetime import datetime

SEQUENCE_WIDTH = 6

SERIAL_PATTERN = re.compile(r"^(\d{2})(\d{6})-(\d)$")


def calc_check_digit(body: str) -> str:
    """Return the check digit for a string of decimal digits."""
    if not body.isdigit():
        raise ValueError(f"Serial body must be digits only, got {body!r}")
    return str(sum(int(ch) for ch in body) % 10)


def format_serial(prefix: str, seq: int) -> str:
    """Build a serial from a year prefix and sequence number."""
    if seq < 1 or seq >= 10**SEQUENCE_WIDTH:
        raise ValueError(f"Sequence {seq} does not fit in {SEQUENCE_WIDTH} digits")
    body = f"{prefix}{seq:0{SEQUENCE_WIDTH}d}"
    return f"{body}-{calc_check_digit(body)}"


def year_prefix(now: datetime) -> str:
    """Counter prefix for a point in time: last two digits of the year."""
    return f"{now.year % 100:02d}"


def is_valid_serial(serial: str) -> bool:
    """Check shape and check digit of a serial string."""
    match = SERIAL_PATTERN.match(serial)
    if match is None:
        return False
    body = match.group(1) + match.group(2)
    return calc_check_digit(body) == match.group(3)
