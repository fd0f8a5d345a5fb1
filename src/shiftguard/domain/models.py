"""Domain models for the scheduling conflict engine.

This module contains the value objects that flow through the engine:
instant and calendar-day intervals, shift and time-off records, and the
conflict results handed back to callers. Every object here is built
fresh for a single evaluation and nothing is mutated after construction.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Any, Iterator, Optional

from shiftguard.domain.calendar import (
    InvalidInterval,
    day_of,
    hours_between,
    iter_days,
    parse_day,
    parse_instant,
    to_display,
)


class ShiftStatus(Enum):
    """Lifecycle status of a worker on a job."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    DRAFT = "draft"
    APPROVED = "approved"
    CANCELLED = "cancelled"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: Any) -> "ShiftStatus":
        """Map a raw status string to a member, UNKNOWN if unrecognised."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.UNKNOWN


class TimeOffStatus(Enum):
    """Review status of a time-off request."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: Any) -> "TimeOffStatus":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.UNKNOWN


class TimeOffType(Enum):
    """Kinds of time-off a worker can request."""

    DAY_OFF = "day_off"
    SICK_LEAVE = "sick_leave"
    VACATION = "vacation"
    PERSONAL_LEAVE = "personal_leave"
    OTHER = "other"

    @classmethod
    def parse(cls, value: Any) -> "TimeOffType":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.OTHER

    @property
    def label(self) -> str:
        """Display label, e.g. "Day Off"."""
        return " ".join(word.capitalize() for word in self.value.split("_"))


# Only these statuses block a worker's time
ACTIVE_SHIFT_STATUSES = frozenset({ShiftStatus.PENDING, ShiftStatus.ACCEPTED})
ACTIVE_TIME_OFF_STATUSES = frozenset({TimeOffStatus.PENDING, TimeOffStatus.APPROVED})


class ConflictKind(Enum):
    """Classification of a shift pair against the rest rule."""

    DIRECT_OVERLAP = "direct_overlap"
    INSUFFICIENT_GAP = "insufficient_gap"


@dataclass(frozen=True)
class InstantInterval:
    """A span between two instants in the display zone.

    Attributes:
        start: Start instant (inclusive).
        end: End instant (exclusive).
    """

    start: datetime
    end: datetime

    def __post_init__(self):
        object.__setattr__(self, "start", parse_instant(self.start))
        object.__setattr__(self, "end", parse_instant(self.end))
        if self.start > self.end:
            raise InvalidInterval(f"Interval starts after it ends: {self.start} > {self.end}")

    @classmethod
    def parse(cls, start: Any, end: Any) -> "InstantInterval":
        """Build an interval from raw instants (strings or datetimes)."""
        return cls(start=parse_instant(start), end=parse_instant(end))

    @property
    def duration_hours(self) -> float:
        return hours_between(self.start, self.end)

    def overlaps(self, other: "InstantInterval") -> bool:
        """Check if the intervals share any time. Touching is not overlap."""
        return self.start < other.end and other.start < self.end

    def day_range(self) -> "DayRange":
        """Calendar days covered by this interval in the display zone.

        The end is exclusive, so an interval ending exactly at local
        midnight does not reach into the following day.
        """
        last = to_display(self.end)
        if self.end > self.start and last.time() == time(0):
            return DayRange(start=day_of(self.start), end=last.date() - timedelta(days=1))
        return DayRange(start=day_of(self.start), end=last.date())


@dataclass(frozen=True)
class DayRange:
    """A closed range of calendar days.

    Attributes:
        start: First day (inclusive).
        end: Last day (inclusive).
    """

    start: date
    end: date

    def __post_init__(self):
        object.__setattr__(self, "start", parse_day(self.start))
        object.__setattr__(self, "end", parse_day(self.end))
        if self.start > self.end:
            raise InvalidInterval(f"Day range starts after it ends: {self.start} > {self.end}")

    @classmethod
    def parse(cls, start: Any, end: Any) -> "DayRange":
        return cls(start=parse_day(start), end=parse_day(end))

    @property
    def duration_days(self) -> int:
        """Number of days in the range, counting both ends."""
        return (self.end - self.start).days + 1

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def overlap_days(self, other: "DayRange") -> int:
        """Number of calendar days shared with another range (0 if disjoint)."""
        first = max(self.start, other.start)
        last = min(self.end, other.end)
        if first > last:
            return 0
        return (last - first).days + 1

    def days(self) -> Iterator[date]:
        return iter_days(self.start, self.end)

    def __repr__(self) -> str:
        return f"DayRange({self.start.isoformat()}..{self.end.isoformat()})"


def first_present(record: dict, *keys: str) -> Any:
    """Value of the first key holding something other than None or ""."""
    for key in keys:
        value = record.get(key)
        if value not in (None, ""):
            return value
    return None


@dataclass(frozen=True)
class ShiftInterval:
    """A worker's scheduled shift on a job.

    Attributes:
        worker_id: Identifier of the worker.
        job_id: Identifier of the job.
        job_number: Human-facing job number.
        start: Start instant in the display zone.
        end: End instant in the display zone.
        status: Worker status on the job.
        site_name: Optional site display name.
        client_name: Optional client display name.
        worker_name: Optional worker display name.
    """

    worker_id: str
    job_id: str
    job_number: Optional[str]
    start: datetime
    end: datetime
    status: ShiftStatus = ShiftStatus.PENDING
    site_name: Optional[str] = None
    client_name: Optional[str] = None
    worker_name: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "start", parse_instant(self.start))
        object.__setattr__(self, "end", parse_instant(self.end))
        object.__setattr__(self, "status", ShiftStatus.parse(self.status))
        if self.start > self.end:
            raise InvalidInterval(
                f"Shift for job {self.job_id} starts after it ends: {self.start} > {self.end}"
            )

    @classmethod
    def from_record(cls, record: dict) -> "ShiftInterval":
        """Build a shift from an API-shaped dictionary.

        Worker times take precedence over the job's scheduled times, since
        a worker may have been booked for only part of the job.

        Raises:
            InvalidInterval: If the times are missing, unparsable or reversed.
        """
        start = first_present(record, "worker_start_time", "scheduled_start_time", "start_time")
        end = first_present(record, "worker_end_time", "scheduled_end_time", "end_time")
        job_number = first_present(record, "job_number")
        return cls(
            worker_id=str(first_present(record, "user_id", "worker_id") or ""),
            job_id=str(first_present(record, "job_id", "id") or ""),
            job_number=str(job_number) if job_number is not None else None,
            start=parse_instant(start),
            end=parse_instant(end),
            status=ShiftStatus.parse(
                first_present(record, "status", "worker_status") or ShiftStatus.PENDING
            ),
            site_name=first_present(record, "site_name"),
            client_name=first_present(record, "client_name"),
            worker_name=first_present(record, "name", "worker_name"),
        )

    @property
    def interval(self) -> InstantInterval:
        return InstantInterval(self.start, self.end)

    @property
    def is_active(self) -> bool:
        """Whether the shift occupies the worker's time."""
        return self.status in ACTIVE_SHIFT_STATUSES

    def day_range(self) -> DayRange:
        return self.interval.day_range()


@dataclass(frozen=True)
class TimeOffInterval:
    """A time-off request covering a closed range of calendar days.

    Attributes:
        id: Identifier of the request.
        worker_id: Identifier of the requesting worker.
        start: First day off (inclusive).
        end: Last day off (inclusive).
        status: Review status.
        type: Kind of time-off.
        role: Role of the requesting worker, used for peer comparisons.
    """

    id: str
    worker_id: str
    start: date
    end: date
    status: TimeOffStatus = TimeOffStatus.PENDING
    type: TimeOffType = TimeOffType.DAY_OFF
    role: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "id", "" if self.id is None else str(self.id))
        object.__setattr__(self, "start", parse_day(self.start))
        object.__setattr__(self, "end", parse_day(self.end))
        object.__setattr__(self, "status", TimeOffStatus.parse(self.status))
        object.__setattr__(self, "type", TimeOffType.parse(self.type))
        if self.start > self.end:
            raise InvalidInterval(
                f"Time-off {self.id} starts after it ends: {self.start} > {self.end}"
            )

    @classmethod
    def from_record(cls, record: dict) -> "TimeOffInterval":
        """Build a time-off request from an API-shaped dictionary.

        Raises:
            InvalidInterval: If the days are missing, unparsable or reversed.
        """
        return cls(
            id=first_present(record, "id"),
            worker_id=str(first_present(record, "user_id", "worker_id") or ""),
            start=parse_day(first_present(record, "start_date")),
            end=parse_day(first_present(record, "end_date")),
            status=TimeOffStatus.parse(first_present(record, "status") or TimeOffStatus.PENDING),
            type=TimeOffType.parse(first_present(record, "type") or TimeOffType.DAY_OFF),
            role=first_present(record, "role", "position"),
        )

    @property
    def day_range(self) -> DayRange:
        return DayRange(self.start, self.end)

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_TIME_OFF_STATUSES

    @property
    def duration_days(self) -> int:
        return self.day_range.duration_days


@dataclass(frozen=True)
class ConflictRecord:
    """A conflict between a proposed shift and one existing shift.

    Attributes:
        kind: Direct overlap or insufficient gap.
        gap_hours: Signed gap (negative means overlapping).
        resolvable: Whether an earlier finish of the existing shift fixes it.
        subject: The existing shift in conflict.
        required_boundary_time: Latest finish for the existing shift that
            would restore the rest gap (only set when resolvable).
        description: Human-readable explanation.
    """

    kind: ConflictKind
    gap_hours: float
    resolvable: bool
    subject: ShiftInterval
    required_boundary_time: Optional[datetime] = None
    description: str = ""

    @property
    def is_direct_overlap(self) -> bool:
        return self.kind == ConflictKind.DIRECT_OVERLAP


@dataclass
class ConflictSummary:
    """Outcome of checking a proposed shift against a worker's schedule."""

    has_conflicts: bool = False
    direct_overlaps: list[ConflictRecord] = field(default_factory=list)
    gap_violations: list[ConflictRecord] = field(default_factory=list)
    can_assign: bool = True
    warnings: list[str] = field(default_factory=list)

    @property
    def total_conflicts(self) -> int:
        return len(self.direct_overlaps) + len(self.gap_violations)

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)

    @property
    def resolvable_violations(self) -> list[ConflictRecord]:
        return [v for v in self.gap_violations if v.resolvable]

    @property
    def unresolvable_violations(self) -> list[ConflictRecord]:
        return [v for v in self.gap_violations if not v.resolvable]

    @property
    def conflicts(self) -> list[ConflictRecord]:
        return self.direct_overlaps + self.gap_violations


class TimeOffConflictCategory(Enum):
    """Which time-off rule produced a conflict."""

    SELF = "self"  # Worker's own other request
    PEER = "peer"  # Another worker in the same role


@dataclass(frozen=True)
class TimeOffConflictResult:
    """Outcome of checking a time-off request for overlaps.

    Attributes:
        has_conflict: True if the request is disqualified.
        category: Rule that disqualified it.
        conflicting: The existing request it collided with.
        overlap_days: Shared calendar days with the conflicting request.
        overlap_percentage: Measured percentage (peer rule only).
        message: Explanatory text for the caller.
    """

    has_conflict: bool
    category: Optional[TimeOffConflictCategory] = None
    conflicting: Optional[TimeOffInterval] = None
    overlap_days: int = 0
    overlap_percentage: Optional[float] = None
    message: str = ""

    @classmethod
    def clear(cls) -> "TimeOffConflictResult":
        return cls(has_conflict=False)
