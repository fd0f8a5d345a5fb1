"""Earliest legal start time for a new shift."""

from datetime import datetime
from typing import Iterable, Optional

from shiftguard.conflicts.shift_checker import ShiftLike, coerce_shifts
from shiftguard.domain.calendar import InstantLike, InvalidInterval, add_hours, parse_instant
from shiftguard.domain.policies import DefaultRestPolicy, RestPolicy


def calculate_earliest_available_time(
    existing: Optional[Iterable[ShiftLike]],
    proposed_start: InstantLike,
    rest_policy: Optional[RestPolicy] = None,
) -> Optional[datetime]:
    """Earliest start that keeps the rest gap after every active shift.

    Every active shift ending after the proposed start pushes the floor to
    its end plus the rest threshold. The result is the maximum of those
    floors, so the order of ``existing`` never matters.

    Args:
        existing: The worker's existing shifts.
        proposed_start: The start originally proposed.
        rest_policy: Rest rule to apply (8 hours by default).

    Returns:
        The later start as an aware UTC datetime, or None when the
        proposed start already satisfies every floor (or is unparsable).
    """
    rest_policy = rest_policy or DefaultRestPolicy()
    try:
        start = parse_instant(proposed_start)
    except InvalidInterval:
        return None

    floors = [
        add_hours(shift.end, rest_policy.min_rest_hours())
        for shift in coerce_shifts(existing)
        if shift.is_active and shift.end > start
    ]
    earliest = max([start, *floors])
    return earliest if earliest > start else None
