"""Tests for assignment validation."""

from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from shiftguard.domain.models import ShiftInterval, TimeOffInterval
from shiftguard.validation.validator import (
    SCHEDULE_CONFLICT_PRIORITY,
    TIME_OFF_PRIORITY,
    AssignmentValidator,
    ValidationError,
    ValidationErrorType,
    WarningType,
    WorkerAssessment,
    rank_workers,
)

VANCOUVER = ZoneInfo("America/Vancouver")


def at(day, hour, minute=0):
    return datetime(2024, 1, day, hour, minute, tzinfo=VANCOUVER)


def make_shift(job_id, start, end, status="accepted", worker_id="W1"):
    return ShiftInterval(
        worker_id=worker_id,
        job_id=job_id,
        job_number=job_id,
        start=start,
        end=end,
        status=status,
    )


class TestAssignmentValidator:
    """Tests for AssignmentValidator."""

    @pytest.fixture
    def validator(self):
        """Create a validator with the default rest policy."""
        return AssignmentValidator()

    @pytest.fixture
    def proposed(self):
        """A 9 AM - 5 PM shift on Jan 5."""
        return make_shift("NEW", at(5, 9), at(5, 17), status="pending")

    @pytest.fixture
    def day_off(self):
        """Approved day off on Jan 5."""
        return TimeOffInterval(
            id="T1", worker_id="W1", start="2024-01-05", end="2024-01-05", status="approved"
        )

    def test_clear_worker(self, validator, proposed):
        """No shifts and no time-off gives a clean assessment."""
        assessment = validator.assess(proposed, [], [])

        assert assessment.worker_id == "W1"
        assert assessment.can_proceed is True
        assert assessment.errors == []
        assert assessment.warning_type is None
        assert assessment.sort_priority == 0
        assert assessment.earliest_start is None

    def test_time_off_conflict_blocks(self, validator, proposed, day_off):
        """A time-off day under the shift blocks the assignment."""
        assessment = validator.assess(proposed, [], [day_off])

        assert assessment.can_proceed is False
        assert assessment.has_time_off_conflict is True
        assert assessment.warning_type == WarningType.TIME_OFF_CONFLICT
        assert assessment.sort_priority == TIME_OFF_PRIORITY
        assert assessment.issues == ["Day Off approved at Jan 5, 2024"]
        assert assessment.errors[0].details == {"time_off_ids": ["T1"]}

    def test_rejected_time_off_ignored(self, validator, proposed):
        rejected = TimeOffInterval(
            id="T1", worker_id="W1", start="2024-01-05", end="2024-01-05", status="rejected"
        )
        assessment = validator.assess(proposed, [], [rejected])
        assert assessment.can_proceed is True

    def test_shift_ending_at_midnight_ignores_next_day_off(self, validator):
        """A 4 PM - midnight shift is not blocked by time-off the day after."""
        proposed = {
            "user_id": "W1",
            "job_id": "NEW",
            "worker_start_time": "2024-01-10T00:00:00Z",
            "worker_end_time": "2024-01-10T08:00:00Z",
        }
        time_off = [
            TimeOffInterval(
                id="T", worker_id="W1", start="2024-01-10", end="2024-01-10", status="approved"
            )
        ]
        assessment = validator.assess(proposed, [], time_off)
        assert assessment.time_off_conflicts == []
        assert assessment.can_proceed is True

    def test_direct_overlap_blocks(self, validator, proposed):
        """An overlapping shift blocks and suggests a later start."""
        existing = [make_shift("J1", at(5, 10), at(5, 15))]
        assessment = validator.assess(proposed, existing, [])

        assert assessment.can_proceed is False
        assert assessment.has_blocking_schedule_conflict is True
        assert assessment.warning_type == WarningType.SCHEDULE_CONFLICT
        assert assessment.sort_priority == SCHEDULE_CONFLICT_PRIORITY
        assert assessment.issues == ["Schedule Conflict: 1 overlapping jobs detected"]
        assert assessment.earliest_start == at(5, 23)

    def test_gap_violation_does_not_block(self, validator):
        """A short rest gap is a non-blocking worker conflict."""
        proposed = make_shift("NEW", at(5, 5), at(5, 13), status="pending")
        existing = [make_shift("J1", at(4, 18), at(4, 23))]
        assessment = validator.assess(proposed, existing, [])

        assert assessment.can_proceed is True
        assert assessment.should_show_schedule_dialog is True
        assert assessment.warning_type == WarningType.WORKER_CONFLICT
        assert assessment.sort_priority == SCHEDULE_CONFLICT_PRIORITY

        error = assessment.errors[0]
        assert error.error_type == ValidationErrorType.REST_GAP_VIOLATION
        assert error.blocking is False
        assert error.details["resolvable"] is True
        assert error.details["gap_hours"] == pytest.approx(6.0)
        assert "finish by 9:00 PM" in error.message

    def test_multiple_issues(self, validator, proposed, day_off):
        existing = [make_shift("J1", at(5, 10), at(5, 15))]
        assessment = validator.assess(proposed, existing, [day_off])

        assert assessment.warning_type == WarningType.MULTIPLE_ISSUES
        assert assessment.sort_priority == TIME_OFF_PRIORITY
        assert len(assessment.errors) == 2

    def test_accepts_api_records(self, validator):
        proposed = {
            "user_id": "W1",
            "job_id": "NEW",
            "scheduled_start_time": "2024-01-05T17:00:00Z",
            "scheduled_end_time": "2024-01-06T01:00:00Z",
        }
        time_off = [
            {"id": "T1", "user_id": "W1", "start_date": "2024-01-05", "end_date": "2024-01-05",
             "status": "pending", "type": "sick_leave"},
        ]
        assessment = validator.assess(proposed, [], time_off)
        assert assessment.issues == ["Sick Leave pending at Jan 5, 2024"]

    def test_malformed_proposed(self, validator):
        """A malformed proposed shift produces no issues."""
        assessment = validator.assess({"scheduled_start_time": "soon"}, [], [])
        assert assessment.worker_id is None
        assert assessment.errors == []
        assert assessment.can_proceed is True


class TestValidationError:
    """Tests for ValidationError."""

    def test_str_with_worker(self):
        error = ValidationError(
            error_type=ValidationErrorType.SCHEDULE_OVERLAP,
            message="Schedule Conflict: 1 overlapping jobs detected",
            worker_id="W1",
        )
        assert str(error) == (
            "[schedule_overlap] Worker W1: Schedule Conflict: 1 overlapping jobs detected"
        )

    def test_str_without_worker(self):
        error = ValidationError(ValidationErrorType.TIME_OFF_CONFLICT, "Day off")
        assert str(error) == "[time_off_conflict] Day off"


class TestRankWorkers:
    """Tests for rank_workers."""

    def test_clear_workers_first(self):
        validator = AssignmentValidator()
        proposed_for = {
            worker: make_shift("NEW", at(5, 9), at(5, 17), status="pending", worker_id=worker)
            for worker in ("W1", "W2", "W3")
        }
        time_off = [TimeOffInterval(id="T", worker_id="W1", start="2024-01-05", end="2024-01-05")]
        busy = [make_shift("J1", at(5, 10), at(5, 15), worker_id="W2")]

        assessments = [
            validator.assess(proposed_for["W1"], [], time_off),
            validator.assess(proposed_for["W2"], busy, []),
            validator.assess(proposed_for["W3"], [], []),
        ]
        ranked = rank_workers(assessments)
        assert [a.worker_id for a in ranked] == ["W3", "W2", "W1"]

    def test_stable_for_equal_priority(self):
        assessments = [WorkerAssessment(worker_id=w) for w in ("A", "B", "C")]
        assert [a.worker_id for a in rank_workers(assessments)] == ["A", "B", "C"]
