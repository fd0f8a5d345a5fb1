"""Time-off overlap rules.

Two independent rules govern a new or edited time-off request:

- Self rule: it may not share any calendar day with the same worker's
  other active requests.
- Peer rule: it may overlap the active requests of other workers in the
  same role only up to a tolerance, measured as shared days over the
  duration of the shorter request.

Both rules work on closed ranges of calendar days.
"""

import logging
from dataclasses import replace
from typing import Iterable, Optional, Union

from shiftguard.domain.calendar import InvalidInterval
from shiftguard.domain.models import (
    ShiftInterval,
    TimeOffConflictCategory,
    TimeOffConflictResult,
    TimeOffInterval,
)
from shiftguard.domain.policies import DefaultOverlapPolicy, OverlapPolicy
from shiftguard.output.messages import describe_time_off_conflict

logger = logging.getLogger(__name__)

TimeOffLike = Union[TimeOffInterval, dict]


def coerce_time_off(request: TimeOffLike) -> TimeOffInterval:
    """Return a TimeOffInterval, building one from a record if needed.

    Raises:
        InvalidInterval: If the record cannot be used.
    """
    if isinstance(request, TimeOffInterval):
        return request
    if isinstance(request, dict):
        return TimeOffInterval.from_record(request)
    raise InvalidInterval(f"Not a time-off request: {request!r}")


def coerce_time_off_list(requests: Optional[Iterable[TimeOffLike]]) -> list[TimeOffInterval]:
    """Coerce records to time-off requests, dropping any that are malformed."""
    result = []
    for request in requests or []:
        try:
            result.append(coerce_time_off(request))
        except InvalidInterval:
            continue
    return result


def overlap_percentage(first: TimeOffInterval, second: TimeOffInterval) -> float:
    """Shared days as a percentage of the shorter request.

    Both durations count both ends, so a single-day request has a
    duration of 1 and the denominator is never zero.
    """
    shared = first.day_range.overlap_days(second.day_range)
    shorter = min(first.duration_days, second.duration_days)
    return shared / shorter * 100


class TimeOffOverlapChecker:
    """Checks a time-off request against existing requests.

    Example:
        >>> checker = TimeOffOverlapChecker()
        >>> result = checker.check(candidate, own_requests, peer_requests)
        >>> if result.has_conflict:
        ...     print(result.message)
    """

    def __init__(self, overlap_policy: Optional[OverlapPolicy] = None):
        self.overlap_policy = overlap_policy or DefaultOverlapPolicy()

    def check(
        self,
        candidate: TimeOffLike,
        own_requests: Optional[Iterable[TimeOffLike]] = None,
        peer_requests: Optional[Iterable[TimeOffLike]] = None,
        exclude_id: Optional[str] = None,
    ) -> TimeOffConflictResult:
        """Return the first disqualifying conflict, or a clear result.

        Args:
            candidate: The request being submitted or edited.
            own_requests: The worker's existing requests.
            peer_requests: Requests from other workers. When the candidate
                carries a role, peers with a different role are skipped;
                otherwise peers are taken as already filtered by role.
            exclude_id: Id of the request being edited. The candidate's own
                id is always excluded as well.

        Returns:
            TimeOffConflictResult for the first self conflict found, else
            the first peer conflict found, else a clear result.
        """
        try:
            request = coerce_time_off(candidate)
        except InvalidInterval:
            return TimeOffConflictResult.clear()

        excluded = {str(i) for i in (exclude_id, request.id) if i not in (None, "")}

        result = self._check_self(request, coerce_time_off_list(own_requests), excluded)
        if result is None:
            result = self._check_peers(request, coerce_time_off_list(peer_requests), excluded)
        if result is None:
            return TimeOffConflictResult.clear()

        logger.debug(
            "Time-off %s conflicts with %s (%s rule)",
            request.id or "<new>",
            result.conflicting.id if result.conflicting else None,
            result.category.value if result.category else None,
        )
        return result

    def _check_self(
        self,
        request: TimeOffInterval,
        own_requests: list[TimeOffInterval],
        excluded: set[str],
    ) -> Optional[TimeOffConflictResult]:
        """Any shared day with the worker's other requests is a conflict."""
        for other in own_requests:
            if other.id in excluded or not other.is_active:
                continue
            if request.worker_id and other.worker_id and other.worker_id != request.worker_id:
                continue

            shared = request.day_range.overlap_days(other.day_range)
            if shared > 0:
                return self._conflict(request, other, TimeOffConflictCategory.SELF, shared)
        return None

    def _check_peers(
        self,
        request: TimeOffInterval,
        peer_requests: list[TimeOffInterval],
        excluded: set[str],
    ) -> Optional[TimeOffConflictResult]:
        """Peer overlap is tolerated up to the policy threshold."""
        for other in peer_requests:
            if other.id in excluded or not other.is_active:
                continue
            if request.worker_id and other.worker_id == request.worker_id:
                continue
            if request.role and other.role and other.role != request.role:
                continue

            shared = request.day_range.overlap_days(other.day_range)
            if shared == 0:
                continue

            percent = overlap_percentage(request, other)
            if self.overlap_policy.exceeds_tolerance(percent):
                return self._conflict(
                    request, other, TimeOffConflictCategory.PEER, shared, percent
                )
        return None

    def _conflict(
        self,
        request: TimeOffInterval,
        other: TimeOffInterval,
        category: TimeOffConflictCategory,
        shared: int,
        percent: Optional[float] = None,
    ) -> TimeOffConflictResult:
        result = TimeOffConflictResult(
            has_conflict=True,
            category=category,
            conflicting=other,
            overlap_days=shared,
            overlap_percentage=percent,
        )
        message = describe_time_off_conflict(result, self.overlap_policy.tolerance_percent())
        return replace(result, message=message)


def find_time_off_conflicts(
    shift: Union[ShiftInterval, dict],
    time_off: Optional[Iterable[TimeOffLike]],
) -> list[TimeOffInterval]:
    """Active time-off requests that share a calendar day with a shift.

    Days of the shift are taken in the display zone. Malformed shifts or
    requests never produce a conflict.
    """
    try:
        if isinstance(shift, dict):
            shift = ShiftInterval.from_record(shift)
        shift_days = shift.day_range()
    except InvalidInterval:
        return []

    conflicts = []
    for request in coerce_time_off_list(time_off):
        if not request.is_active:
            continue
        if shift.worker_id and request.worker_id and request.worker_id != shift.worker_id:
            continue
        if request.day_range.overlap_days(shift_days) > 0:
            conflicts.append(request)
    return conflicts
