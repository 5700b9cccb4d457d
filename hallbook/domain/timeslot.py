"""Time-of-day arithmetic for booking slots.

Times travel as ``HH:MM`` strings but every comparison happens on integer
minutes since midnight. Slots are half-open: ``[start, end)``.
"""

import re

from hallbook.core.exceptions import ValidationError

TIME_PATTERN = re.compile(r"^([0-1]?[0-9]|2[0-3]):([0-5][0-9])$")
MINUTES_PER_DAY = 24 * 60


def parse_time(value: str) -> int:
    """Convert ``H:MM``/``HH:MM`` to minutes since midnight.

    Raises:
        ValidationError: If the string is not a valid time of day
    """
    match = TIME_PATTERN.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise ValidationError(f"Time '{value}' must be in HH:MM format")
    return int(match.group(1)) * 60 + int(match.group(2))


def format_time(minutes: int) -> str:
    """Render minutes since midnight as zero-padded ``HH:MM``."""
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise ValueError(f"{minutes} is outside a single day")
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def normalize_time(value: str) -> str:
    """Normalize ``9:05`` to ``09:05``."""
    return format_time(parse_time(value))


def parse_interval(start_time: str, end_time: str) -> tuple[int, int]:
    """Parse a slot and check it has positive length.

    Returns:
        Tuple of (start_minutes, end_minutes)

    Raises:
        ValidationError: If either time is malformed or end <= start
    """
    start = parse_time(start_time)
    end = parse_time(end_time)
    if end <= start:
        raise ValidationError("End time must be after start time")
    return start, end


def intervals_overlap(start1: int, end1: int, start2: int, end2: int) -> bool:
    """Half-open overlap test; slots sharing only an endpoint do not overlap."""
    return start1 < end2 and start2 < end1


def duration_minutes(start_time: str, end_time: str) -> int:
    return parse_time(end_time) - parse_time(start_time)
