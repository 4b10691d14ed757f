"""Next lesson display text."""

from __future__ import annotations

from datetime import datetime

DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M"


def parse_lesson_datetime(date_str: str, time_str: str) -> datetime | None:
    """Combine ``YYYY-MM-DD`` and ``HH:MM`` cells, or None if either is invalid."""
    try:
        return datetime.strptime(
            f"{date_str.strip()} {time_str.strip()}", f"{DATE_FORMAT} {TIME_FORMAT}"
        )
    except (ValueError, AttributeError):
        return None


def format_next_lesson(date_str: str, time_str: str, length_str: str) -> str:
    """Format the next lesson line shown on the dashboard.

    Examples:
        ("2025-03-03", "16:30", "30 mins") -> "Monday, Mar 3 at 04:30 PM (30 mins)"
        ("", "16:30", "30 mins") -> ""

    Returns:
        Display text, or "" unless date, time and length are all present
        and the date/time parse.
    """
    length = (length_str or "").strip()
    if not (date_str or "").strip() or not (time_str or "").strip() or not length:
        return ""

    when = parse_lesson_datetime(date_str, time_str)
    if when is None:
        return ""

    return f"{when:%A}, {when:%b} {when.day} at {when:%I:%M %p} ({length})"
