"""Policy definitions for scheduling conflict rules.

This module contains configurable policies that define the business rules
for rest gaps between shifts, time-off overlap between peers, and the
notice window for time-off requests. Policies are kept separate from the
conflict engines to allow independent testing and easy modification.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

from shiftguard.domain.models import ConflictKind


class RestPolicy(ABC):
    """Abstract base class for rest gap policies."""

    @abstractmethod
    def min_rest_hours(self) -> float:
        """Minimum rest between consecutive shifts in hours."""
        pass

    def min_rest(self) -> timedelta:
        """Minimum rest as a timedelta."""
        return timedelta(hours=self.min_rest_hours())

    def classify(self, gap_hours: float) -> Optional[ConflictKind]:
        """Classify a signed gap against the rest threshold.

        Args:
            gap_hours: Signed gap in hours (negative means overlapping).

        Returns:
            DIRECT_OVERLAP for a negative gap, INSUFFICIENT_GAP for a gap
            shorter than the threshold, or None when the gap is adequate.
        """
        if gap_hours < 0:
            return ConflictKind.DIRECT_OVERLAP
        if gap_hours < self.min_rest_hours():
            return ConflictKind.INSUFFICIENT_GAP
        return None


class OverlapPolicy(ABC):
    """Abstract base class for peer time-off overlap policies."""

    @abstractmethod
    def tolerance_percent(self) -> float:
        """Maximum tolerated overlap between peers, in percent."""
        pass

    def exceeds_tolerance(self, overlap_percent: float) -> bool:
        """Check if a measured overlap is above the tolerance.

        Overlap exactly at the tolerance is permitted.
        """
        return overlap_percent > self.tolerance_percent()


class TimeOffNoticePolicy(ABC):
    """Abstract base class for time-off notice windows."""

    @abstractmethod
    def min_notice_days(self) -> int:
        """Days of notice required before a time-off request may start."""
        pass

    def earliest_request_day(self, today: date) -> date:
        """First calendar day a new request may start on."""
        return today + timedelta(days=self.min_notice_days())

    def is_within_notice(self, day: date, today: date) -> bool:
        """Check if a day is far enough ahead to be requested."""
        return day >= self.earliest_request_day(today)


@dataclass
class DefaultRestPolicy(RestPolicy):
    """Default rest policy implementation.

    Workers need 8 hours between the end of one shift and the start of
    the next. A gap of exactly 8 hours is adequate.
    """

    rest_hours: float = 8.0

    def min_rest_hours(self) -> float:
        return self.rest_hours


@dataclass
class DefaultOverlapPolicy(OverlapPolicy):
    """Default peer overlap policy implementation.

    Workers sharing a role may overlap each other's time-off by up to 10%
    of the shorter request. Applies only to peers, never to a worker's
    own requests.
    """

    tolerance_ratio_percent: float = 10.0

    def tolerance_percent(self) -> float:
        return self.tolerance_ratio_percent


@dataclass
class DefaultTimeOffNoticePolicy(TimeOffNoticePolicy):
    """Default notice policy: requests must start two weeks out."""

    notice_days: int = 14

    def min_notice_days(self) -> int:
        return self.notice_days
