"""Disabled calendar days for a worker's date pickers.

A day is disabled when it falls inside one of the worker's active
time-off requests or active job assignments. Assignment records arrive in
two shapes (``start_time``/``end_time`` with ``worker_status``, or
``start_date``/``end_date`` with ``status``); both are mapped to a single
day range before anything else looks at them.
"""

from datetime import date
from typing import Iterable, Optional, Union

from shiftguard.conflicts.time_off import TimeOffLike, coerce_time_off_list
from shiftguard.domain.calendar import DayLike, InvalidInterval, parse_day, today_in_zone
from shiftguard.domain.models import (
    ACTIVE_SHIFT_STATUSES,
    DayRange,
    InstantInterval,
    ShiftInterval,
    ShiftStatus,
    first_present,
)
from shiftguard.domain.policies import DefaultTimeOffNoticePolicy, TimeOffNoticePolicy

AssignmentLike = Union[ShiftInterval, dict]


def normalize_assignment(assignment: AssignmentLike) -> Optional[DayRange]:
    """Map an assignment in either field shape to the days it blocks.

    Returns:
        The closed day range for an active assignment, or None when the
        assignment is inactive (e.g. rejected) or malformed.
    """
    try:
        if isinstance(assignment, ShiftInterval):
            return assignment.day_range() if assignment.is_active else None

        status = ShiftStatus.parse(
            first_present(assignment, "worker_status", "status") or ShiftStatus.PENDING
        )
        if status not in ACTIVE_SHIFT_STATUSES:
            return None
        start_time = first_present(assignment, "start_time")
        end_time = first_present(assignment, "end_time")
        if start_time is not None and end_time is not None:
            return InstantInterval.parse(start_time, end_time).day_range()
        return DayRange(
            start=parse_day(first_present(assignment, "start_date")),
            end=parse_day(first_present(assignment, "end_date")),
        )
    except (InvalidInterval, AttributeError):
        return None


class DisabledDateBuilder:
    """Builds the set of days a worker cannot request or be booked on.

    The bulk form (:meth:`build`) and the point query
    (:meth:`is_date_disabled`) read the same normalised ranges, so a day
    is in the built set exactly when the point query reports it disabled.
    """

    def __init__(self, notice_policy: Optional[TimeOffNoticePolicy] = None):
        self.notice_policy = notice_policy or DefaultTimeOffNoticePolicy()

    def blocking_ranges(
        self,
        time_off: Optional[Iterable[TimeOffLike]],
        assignments: Optional[Iterable[AssignmentLike]] = None,
        exclude_id: Optional[str] = None,
    ) -> list[DayRange]:
        """Day ranges that disable days, skipping the excluded request."""
        if exclude_id is not None:
            exclude_id = str(exclude_id)
        ranges = []
        for request in coerce_time_off_list(time_off):
            if exclude_id and request.id == exclude_id:
                continue
            if request.is_active:
                ranges.append(request.day_range)

        for assignment in assignments or []:
            day_range = normalize_assignment(assignment)
            if day_range is not None:
                ranges.append(day_range)
        return ranges

    def build(
        self,
        time_off: Optional[Iterable[TimeOffLike]],
        assignments: Optional[Iterable[AssignmentLike]] = None,
        exclude_id: Optional[str] = None,
    ) -> frozenset[date]:
        """Union of every day covered by a blocking range."""
        days: set[date] = set()
        for day_range in self.blocking_ranges(time_off, assignments, exclude_id):
            days.update(day_range.days())
        return frozenset(days)

    def is_date_disabled(
        self,
        day: DayLike,
        time_off: Optional[Iterable[TimeOffLike]],
        assignments: Optional[Iterable[AssignmentLike]] = None,
        exclude_id: Optional[str] = None,
    ) -> bool:
        """Check a single day. Unparsable days are not disabled."""
        try:
            query = parse_day(day)
        except InvalidInterval:
            return False
        return any(
            day_range.contains(query)
            for day_range in self.blocking_ranges(time_off, assignments, exclude_id)
        )

    def is_selectable(
        self,
        day: DayLike,
        time_off: Optional[Iterable[TimeOffLike]],
        assignments: Optional[Iterable[AssignmentLike]] = None,
        exclude_id: Optional[str] = None,
        today: Optional[date] = None,
    ) -> bool:
        """Whether a day may start a new time-off request.

        The day must be past the notice window and not disabled.
        """
        try:
            query = parse_day(day)
        except InvalidInterval:
            return False
        if today is None:
            today = today_in_zone()
        if not self.notice_policy.is_within_notice(query, today):
            return False
        return not self.is_date_disabled(query, time_off, assignments, exclude_id)


def generate_disabled_dates(
    time_off: Optional[Iterable[TimeOffLike]],
    assignments: Optional[Iterable[AssignmentLike]] = None,
    exclude_id: Optional[str] = None,
) -> frozenset[date]:
    """Module-level shortcut for :meth:`DisabledDateBuilder.build`."""
    return DisabledDateBuilder().build(time_off, assignments, exclude_id)


def is_date_disabled(
    day: DayLike,
    time_off: Optional[Iterable[TimeOffLike]],
    assignments: Optional[Iterable[AssignmentLike]] = None,
    exclude_id: Optional[str] = None,
) -> bool:
    """Module-level shortcut for :meth:`DisabledDateBuilder.is_date_disabled`."""
    return DisabledDateBuilder().is_date_disabled(day, time_off, assignments, exclude_id)
