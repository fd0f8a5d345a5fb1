"""Domain models and business rules for scheduling conflicts."""

from shiftguard.domain.calendar import (
    DISPLAY_TIMEZONE,
    InvalidInterval,
    day_of,
    parse_day,
    parse_instant,
    to_display,
)
from shiftguard.domain.models import (
    ACTIVE_SHIFT_STATUSES,
    ACTIVE_TIME_OFF_STATUSES,
    ConflictKind,
    ConflictRecord,
    ConflictSummary,
    DayRange,
    InstantInterval,
    ShiftInterval,
    ShiftStatus,
    TimeOffConflictCategory,
    TimeOffConflictResult,
    TimeOffInterval,
    TimeOffStatus,
    TimeOffType,
)
from shiftguard.domain.policies import (
    DefaultOverlapPolicy,
    DefaultRestPolicy,
    DefaultTimeOffNoticePolicy,
    OverlapPolicy,
    RestPolicy,
    TimeOffNoticePolicy,
)

__all__ = [
    # Calendar
    "DISPLAY_TIMEZONE",
    "InvalidInterval",
    "day_of",
    "parse_day",
    "parse_instant",
    "to_display",
    # Models
    "ACTIVE_SHIFT_STATUSES",
    "ACTIVE_TIME_OFF_STATUSES",
    "ConflictKind",
    "ConflictRecord",
    "ConflictSummary",
    "DayRange",
    "InstantInterval",
    "ShiftInterval",
    "ShiftStatus",
    "TimeOffConflictCategory",
    "TimeOffConflictResult",
    "TimeOffInterval",
    "TimeOffStatus",
    "TimeOffType",
    # Policies
    "DefaultOverlapPolicy",
    "DefaultRestPolicy",
    "DefaultTimeOffNoticePolicy",
    "OverlapPolicy",
    "RestPolicy",
    "TimeOffNoticePolicy",
]
