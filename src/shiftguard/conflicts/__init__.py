"""Conflict engines for shift assignment and time-off requests."""

from shiftguard.conflicts.availability import calculate_earliest_available_time
from shiftguard.conflicts.disabled_dates import (
    DisabledDateBuilder,
    generate_disabled_dates,
    is_date_disabled,
    normalize_assignment,
)
from shiftguard.conflicts.gap import GapEvaluation, calculate_gap_hours, evaluate_gap
from shiftguard.conflicts.shift_checker import ShiftConflictChecker, can_assign_worker
from shiftguard.conflicts.time_off import (
    TimeOffOverlapChecker,
    find_time_off_conflicts,
    overlap_percentage,
)

__all__ = [
    # Shift assignment
    "GapEvaluation",
    "ShiftConflictChecker",
    "calculate_earliest_available_time",
    "calculate_gap_hours",
    "can_assign_worker",
    "evaluate_gap",
    # Time-off
    "DisabledDateBuilder",
    "TimeOffOverlapChecker",
    "find_time_off_conflicts",
    "generate_disabled_dates",
    "is_date_disabled",
    "normalize_assignment",
    "overlap_percentage",
]
