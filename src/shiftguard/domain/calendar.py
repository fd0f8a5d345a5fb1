"""Instant and calendar-day handling in the fixed reference zone.

All day-boundary comparisons are made in a single display zone so that
two callers in different local zones always agree on which calendar day
a shift or time-off request falls on.
"""

from datetime import date, datetime, timedelta, timezone
from typing import Iterator, Optional, Union
from zoneinfo import ZoneInfo

DISPLAY_TIMEZONE = "America/Vancouver"

InstantLike = Union[datetime, str]
DayLike = Union[date, datetime, str]


class InvalidInterval(ValueError):
    """Raised when an instant, day or interval cannot be used.

    Covers unparsable values and intervals whose start is after their end.
    """


def display_zone() -> ZoneInfo:
    """Return the fixed reference zone."""
    return ZoneInfo(DISPLAY_TIMEZONE)


def parse_instant(value: InstantLike) -> datetime:
    """Parse an instant into an aware UTC datetime.

    Naive values are taken as UTC, which is how the backend stores them.
    Instants are kept in UTC so that arithmetic and ordering stay exact
    across DST transitions; use :func:`to_display` for day boundaries.

    Raises:
        InvalidInterval: If the value is missing or unparsable.
    """
    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            moment = datetime.fromisoformat(text)
        except ValueError as exc:
            raise InvalidInterval(f"Unparsable instant: {value!r}") from exc
    else:
        raise InvalidInterval(f"Unparsable instant: {value!r}")

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def to_display(instant: datetime) -> datetime:
    """Convert an instant to the display zone."""
    return parse_instant(instant).astimezone(display_zone())


def parse_day(value: DayLike) -> date:
    """Parse a calendar day.

    Strings without a time part (``YYYY-MM-DD``) and ``date`` objects are
    calendar dates already and are used as-is. Timestamps are moved into
    the display zone before the date is taken.

    Raises:
        InvalidInterval: If the value is missing or unparsable.
    """
    if isinstance(value, datetime):
        return day_of(value)
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        text = value.strip()
        if not any(mark in text for mark in ("T", "t", " ", ":")):
            try:
                return date.fromisoformat(text)
            except ValueError as exc:
                raise InvalidInterval(f"Unparsable day: {value!r}") from exc
        return day_of(parse_instant(text))
    raise InvalidInterval(f"Unparsable day: {value!r}")


def day_of(instant: datetime) -> date:
    """Calendar day of an instant in the display zone."""
    return to_display(instant).date()


def today_in_zone(now: Optional[datetime] = None) -> date:
    """Current calendar day in the display zone."""
    if now is None:
        now = datetime.now(timezone.utc)
    return day_of(now)


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every day from start to end, both inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def hours_between(earlier: datetime, later: datetime) -> float:
    """Signed fractional elapsed hours from earlier to later."""
    return (parse_instant(later) - parse_instant(earlier)).total_seconds() / 3600


def add_hours(instant: datetime, hours: float) -> datetime:
    """Move an instant by a number of elapsed hours."""
    return parse_instant(instant) + timedelta(hours=hours)


def format_clock(moment: datetime) -> str:
    """Format a display-zone time as e.g. "9:05 AM"."""
    hour = moment.hour % 12 or 12
    meridiem = "AM" if moment.hour < 12 else "PM"
    return f"{hour}:{moment.minute:02d} {meridiem}"


def format_day(day: date) -> str:
    """Format a date as e.g. "Jan 5, 2024"."""
    return f"{day.strftime('%b')} {day.day}, {day.year}"


def format_conflict_time(instant: datetime, include_date: bool = False) -> str:
    """Format an instant in the display zone.

    Args:
        instant: The instant to format.
        include_date: If True, prefix the calendar date.
    """
    local = to_display(instant)
    if include_date:
        return f"{format_day(local)} {format_clock(local)}"
    return format_clock(local)
