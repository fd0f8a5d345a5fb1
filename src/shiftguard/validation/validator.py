"""Assignment validation combining every conflict rule for one worker.

This module is the single place where time-off conflicts, schedule
overlaps and rest gap violations are brought together into a decision
for assigning a worker to a proposed shift.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Iterable, Optional

from shiftguard.conflicts.availability import calculate_earliest_available_time
from shiftguard.conflicts.shift_checker import ShiftConflictChecker, ShiftLike, coerce_shift
from shiftguard.conflicts.time_off import TimeOffLike, find_time_off_conflicts
from shiftguard.domain.calendar import InvalidInterval
from shiftguard.domain.models import ConflictSummary, TimeOffInterval
from shiftguard.domain.policies import DefaultRestPolicy, RestPolicy
from shiftguard.output.messages import describe_time_off

logger = logging.getLogger(__name__)

# Sort weights for worker pickers; lower sorts first
TIME_OFF_PRIORITY = 3000
SCHEDULE_CONFLICT_PRIORITY = 2000


class ValidationErrorType(Enum):
    """Types of assignment issues."""

    TIME_OFF_CONFLICT = "time_off_conflict"
    SCHEDULE_OVERLAP = "schedule_overlap"
    REST_GAP_VIOLATION = "rest_gap_violation"


class WarningType(Enum):
    """Dialog a caller should show for an assessment."""

    TIME_OFF_CONFLICT = "time_off_conflict"
    SCHEDULE_CONFLICT = "schedule_conflict"
    WORKER_CONFLICT = "worker_conflict"
    MULTIPLE_ISSUES = "multiple_issues"


@dataclass
class ValidationError:
    """A single assignment issue."""

    error_type: ValidationErrorType
    message: str
    worker_id: Optional[str] = None
    blocking: bool = True
    details: dict = field(default_factory=dict)

    def __str__(self) -> str:
        parts = [f"[{self.error_type.value}]"]
        if self.worker_id:
            parts.append(f"Worker {self.worker_id}:")
        parts.append(self.message)
        return " ".join(parts)


@dataclass
class WorkerAssessment:
    """Result of assessing one worker for a proposed shift."""

    worker_id: Optional[str]
    summary: ConflictSummary = field(default_factory=ConflictSummary)
    time_off_conflicts: list[TimeOffInterval] = field(default_factory=list)
    errors: list[ValidationError] = field(default_factory=list)
    earliest_start: Optional[datetime] = None

    def add_error(self, error: ValidationError) -> None:
        self.errors.append(error)

    @property
    def has_time_off_conflict(self) -> bool:
        return bool(self.time_off_conflicts)

    @property
    def has_schedule_conflict(self) -> bool:
        return self.summary.has_conflicts

    @property
    def has_blocking_schedule_conflict(self) -> bool:
        return bool(self.summary.direct_overlaps)

    @property
    def can_proceed(self) -> bool:
        """True unless a blocking issue exists."""
        return not any(error.blocking for error in self.errors)

    @property
    def should_show_schedule_dialog(self) -> bool:
        """Rest gap violations get their own dialog with early-finish hints."""
        return bool(self.summary.gap_violations)

    @property
    def warning_type(self) -> Optional[WarningType]:
        kinds = {error.error_type for error in self.errors}
        if not kinds:
            return None
        if len(kinds) > 1:
            return WarningType.MULTIPLE_ISSUES
        kind = kinds.pop()
        if kind == ValidationErrorType.TIME_OFF_CONFLICT:
            return WarningType.TIME_OFF_CONFLICT
        if kind == ValidationErrorType.SCHEDULE_OVERLAP:
            return WarningType.SCHEDULE_CONFLICT
        return WarningType.WORKER_CONFLICT

    @property
    def sort_priority(self) -> int:
        if self.has_time_off_conflict:
            return TIME_OFF_PRIORITY
        if self.has_schedule_conflict:
            return SCHEDULE_CONFLICT_PRIORITY
        return 0

    @property
    def issues(self) -> list[str]:
        return [error.message for error in self.errors]


class AssignmentValidator:
    """Assesses whether a worker can take a proposed shift.

    Example:
        >>> validator = AssignmentValidator()
        >>> assessment = validator.assess(proposed, existing_shifts, time_off)
        >>> if not assessment.can_proceed:
        ...     for error in assessment.errors:
        ...         print(error)
    """

    def __init__(self, rest_policy: Optional[RestPolicy] = None):
        self.rest_policy = rest_policy or DefaultRestPolicy()
        self.shift_checker = ShiftConflictChecker(self.rest_policy)

    def assess(
        self,
        proposed: ShiftLike,
        existing_shifts: Optional[Iterable[ShiftLike]] = None,
        time_off: Optional[Iterable[TimeOffLike]] = None,
    ) -> WorkerAssessment:
        """Assess a worker against a proposed shift.

        Args:
            proposed: The shift the worker would be assigned to.
            existing_shifts: The worker's existing shifts.
            time_off: The worker's time-off requests.

        Returns:
            WorkerAssessment with every issue found. A malformed proposed
            shift yields an assessment with no issues.
        """
        try:
            candidate = coerce_shift(proposed)
        except InvalidInterval:
            return WorkerAssessment(worker_id=None)

        existing_shifts = list(existing_shifts or [])
        worker_id = candidate.worker_id or None
        assessment = WorkerAssessment(worker_id=worker_id)

        assessment.time_off_conflicts = find_time_off_conflicts(candidate, time_off)
        if assessment.time_off_conflicts:
            assessment.add_error(
                ValidationError(
                    error_type=ValidationErrorType.TIME_OFF_CONFLICT,
                    message=", ".join(describe_time_off(r) for r in assessment.time_off_conflicts),
                    worker_id=worker_id,
                    details={"time_off_ids": [r.id for r in assessment.time_off_conflicts]},
                )
            )

        summary = self.shift_checker.check(candidate, existing_shifts)
        assessment.summary = summary
        if summary.direct_overlaps:
            assessment.add_error(
                ValidationError(
                    error_type=ValidationErrorType.SCHEDULE_OVERLAP,
                    message=(
                        f"Schedule Conflict: {len(summary.direct_overlaps)} "
                        f"overlapping jobs detected"
                    ),
                    worker_id=worker_id,
                    details={"job_ids": [r.subject.job_id for r in summary.direct_overlaps]},
                )
            )
        for violation in summary.gap_violations:
            assessment.add_error(
                ValidationError(
                    error_type=ValidationErrorType.REST_GAP_VIOLATION,
                    message=violation.description,
                    worker_id=worker_id,
                    blocking=False,
                    details={
                        "job_id": violation.subject.job_id,
                        "gap_hours": violation.gap_hours,
                        "resolvable": violation.resolvable,
                    },
                )
            )

        if summary.has_conflicts:
            assessment.earliest_start = calculate_earliest_available_time(
                existing_shifts, candidate.start, self.rest_policy
            )

        logger.debug(
            "Assessed worker %s: %d issue(s), can_proceed=%s",
            worker_id,
            len(assessment.errors),
            assessment.can_proceed,
        )
        return assessment


def rank_workers(assessments: Iterable[WorkerAssessment]) -> list[WorkerAssessment]:
    """Order assessments for a worker picker, clear workers first."""
    return sorted(assessments, key=lambda a: a.sort_priority)
