"""Tests for gap calculation and rest-rule evaluation."""

from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from shiftguard.conflicts.gap import calculate_gap_hours, evaluate_gap
from shiftguard.domain.models import ConflictKind, InstantInterval
from shiftguard.domain.policies import DefaultRestPolicy

VANCOUVER = ZoneInfo("America/Vancouver")


def at(day: int, hour: int, minute: int = 0) -> datetime:
    return datetime(2024, 1, day, hour, minute, tzinfo=VANCOUVER)


def span(start: datetime, end: datetime) -> InstantInterval:
    return InstantInterval(start, end)


class TestCalculateGapHours:
    """Tests for calculate_gap_hours."""

    def test_separated_forward(self):
        """First before second gives the positive gap."""
        assert calculate_gap_hours(span(at(1, 9), at(1, 17)), span(at(1, 18), at(1, 22))) == 1

    def test_separated_backward(self):
        """Argument order does not change a positive gap."""
        assert calculate_gap_hours(span(at(1, 18), at(1, 22)), span(at(1, 9), at(1, 17))) == 1

    def test_overlap_is_negative(self):
        """Intersecting intervals give the negative overlap duration."""
        gap = calculate_gap_hours(span(at(1, 9), at(1, 17)), span(at(1, 10), at(1, 15)))
        assert gap == -5

    def test_partial_overlap_symmetric(self):
        first = span(at(1, 9), at(1, 17))
        second = span(at(1, 15), at(1, 20))
        assert calculate_gap_hours(first, second) == -2
        assert calculate_gap_hours(second, first) == -2

    def test_touching_is_zero(self):
        """Exactly touching intervals are a zero gap, not an overlap."""
        assert calculate_gap_hours(span(at(1, 9), at(1, 17)), span(at(1, 17), at(1, 20))) == 0

    def test_fractional_hours(self):
        gap = calculate_gap_hours(span(at(1, 9), at(1, 17)), span(at(1, 17, 30), at(1, 20)))
        assert gap == pytest.approx(0.5)

    @pytest.mark.parametrize(
        "first,second",
        [
            ((1, 9, 1, 17), (2, 1, 2, 9)),
            ((1, 9, 1, 17), (1, 3, 1, 6)),
            ((3, 0, 3, 8), (1, 9, 1, 17)),
        ],
    )
    def test_disjoint_magnitude_is_order_independent(self, first, second):
        a = span(at(first[0], first[1]), at(first[2], first[3]))
        b = span(at(second[0], second[1]), at(second[2], second[3]))
        assert calculate_gap_hours(a, b) == calculate_gap_hours(b, a)
        assert calculate_gap_hours(a, b) >= 0


class TestEvaluateGap:
    """Tests for evaluate_gap."""

    def test_short_gap_after_existing_is_resolvable(self):
        """Existing 9-17, candidate 18-22: finish by 10:00 restores 8 hours."""
        result = evaluate_gap(span(at(1, 18), at(1, 22)), span(at(1, 9), at(1, 17)))
        assert result.kind == ConflictKind.INSUFFICIENT_GAP
        assert result.gap_hours == 1
        assert result.resolvable is True
        assert result.required_end == at(1, 10)
        assert "10:00 AM" in result.description
        assert "1.0 hours" in result.description

    def test_direct_overlap(self):
        """Existing 9-17, candidate 10-15 overlaps directly."""
        result = evaluate_gap(span(at(1, 10), at(1, 15)), span(at(1, 9), at(1, 17)))
        assert result.kind == ConflictKind.DIRECT_OVERLAP
        assert result.gap_hours == -5
        assert result.resolvable is False
        assert result.required_end is None
        assert "overlap" in result.description

    def test_exactly_eight_hours_is_fine(self):
        """Existing ends 17:00, candidate starts 01:00 next day."""
        result = evaluate_gap(span(at(2, 1), at(2, 9)), span(at(1, 9), at(1, 17)))
        assert result.kind is None
        assert result.gap_hours == 8
        assert result.is_conflict is False
        assert "Adequate" in result.description

    def test_unresolvable_when_boundary_before_existing_start(self):
        """A short existing shift cannot finish before it starts."""
        # Existing 16:00-17:00, candidate 18:00: required end 10:00 < 16:00
        result = evaluate_gap(span(at(1, 18), at(1, 22)), span(at(1, 16), at(1, 17)))
        assert result.kind == ConflictKind.INSUFFICIENT_GAP
        assert result.resolvable is False
        assert result.required_end is None
        assert "even with early finish" in result.description

    def test_boundary_equal_to_existing_start_is_resolvable(self):
        """Required end exactly at the existing start still counts."""
        result = evaluate_gap(span(at(1, 18), at(1, 22)), span(at(1, 10), at(1, 12)))
        assert result.resolvable is True
        assert result.required_end == at(1, 10)

    def test_following_existing_shift_is_never_resolvable(self):
        """Only an earlier finish of a preceding shift is offered."""
        # Candidate 9-17, existing starts 19:00
        result = evaluate_gap(span(at(1, 9), at(1, 17)), span(at(1, 19), at(1, 23)))
        assert result.kind == ConflictKind.INSUFFICIENT_GAP
        assert result.gap_hours == 2
        assert result.resolvable is False
        assert "required between consecutive shifts" in result.description

    def test_custom_rest_policy(self):
        result = evaluate_gap(
            span(at(2, 1), at(2, 9)),
            span(at(1, 9), at(1, 17)),
            DefaultRestPolicy(rest_hours=10),
        )
        assert result.kind == ConflictKind.INSUFFICIENT_GAP
        assert result.required_end == at(1, 15)
        assert "10-hour gap" in result.description
