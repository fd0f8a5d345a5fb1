"""Tests for conflict policies."""

from datetime import date, timedelta

import pytest

from shiftguard.domain.models import ConflictKind
from shiftguard.domain.policies import (
    DefaultOverlapPolicy,
    DefaultRestPolicy,
    DefaultTimeOffNoticePolicy,
)


class TestDefaultRestPolicy:
    """Tests for DefaultRestPolicy."""

    def test_default_rest_hours(self):
        """Minimum rest should be 8 hours."""
        policy = DefaultRestPolicy()
        assert policy.min_rest_hours() == 8
        assert policy.min_rest() == timedelta(hours=8)

    def test_custom_rest_hours(self):
        """Custom rest should be respected."""
        policy = DefaultRestPolicy(rest_hours=10)
        assert policy.min_rest_hours() == 10
        assert policy.classify(9.5) == ConflictKind.INSUFFICIENT_GAP

    @pytest.mark.parametrize(
        "gap,expected",
        [
            (-2.0, ConflictKind.DIRECT_OVERLAP),
            (-0.01, ConflictKind.DIRECT_OVERLAP),
            (0.0, ConflictKind.INSUFFICIENT_GAP),
            (1.0, ConflictKind.INSUFFICIENT_GAP),
            (7.99, ConflictKind.INSUFFICIENT_GAP),
            (8.0, None),
            (24.0, None),
        ],
    )
    def test_classify_is_exhaustive(self, gap, expected):
        """Negative overlaps, short gaps block; 8 hours exactly is fine."""
        assert DefaultRestPolicy().classify(gap) == expected


class TestDefaultOverlapPolicy:
    """Tests for DefaultOverlapPolicy."""

    def test_default_tolerance(self):
        assert DefaultOverlapPolicy().tolerance_percent() == 10

    def test_exactly_at_tolerance_is_permitted(self):
        """10.0% is not above the tolerance."""
        assert DefaultOverlapPolicy().exceeds_tolerance(10.0) is False

    def test_above_tolerance(self):
        assert DefaultOverlapPolicy().exceeds_tolerance(10.01) is True

    def test_custom_tolerance(self):
        policy = DefaultOverlapPolicy(tolerance_ratio_percent=50)
        assert policy.exceeds_tolerance(40) is False
        assert policy.exceeds_tolerance(60) is True


class TestDefaultTimeOffNoticePolicy:
    """Tests for DefaultTimeOffNoticePolicy."""

    def test_two_weeks_notice(self):
        policy = DefaultTimeOffNoticePolicy()
        assert policy.earliest_request_day(date(2024, 1, 1)) == date(2024, 1, 15)

    def test_within_notice_boundary(self):
        policy = DefaultTimeOffNoticePolicy()
        today = date(2024, 1, 1)
        assert policy.is_within_notice(date(2024, 1, 15), today) is True
        assert policy.is_within_notice(date(2024, 1, 14), today) is False

    def test_custom_notice(self):
        policy = DefaultTimeOffNoticePolicy(notice_days=0)
        assert policy.is_within_notice(date(2024, 1, 1), date(2024, 1, 1)) is True
