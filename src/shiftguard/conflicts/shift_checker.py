"""Shift conflict checking for a single worker.

Folds a worker's existing shifts against a proposed shift, classifying
each pair with the rest rule and summarising whether the worker can be
assigned.
"""

import logging
from typing import Iterable, Optional, Union

from shiftguard.conflicts.gap import evaluate_gap
from shiftguard.domain.calendar import InvalidInterval
from shiftguard.domain.models import ConflictRecord, ConflictSummary, ShiftInterval
from shiftguard.domain.policies import DefaultRestPolicy, RestPolicy

logger = logging.getLogger(__name__)

ShiftLike = Union[ShiftInterval, dict]


def coerce_shift(shift: ShiftLike) -> ShiftInterval:
    """Return a ShiftInterval, building one from a record if needed.

    Raises:
        InvalidInterval: If the record cannot be used.
    """
    if isinstance(shift, ShiftInterval):
        return shift
    if isinstance(shift, dict):
        return ShiftInterval.from_record(shift)
    raise InvalidInterval(f"Not a shift: {shift!r}")


def coerce_shifts(shifts: Optional[Iterable[ShiftLike]]) -> list[ShiftInterval]:
    """Coerce records to shifts, dropping any that are malformed."""
    result = []
    for shift in shifts or []:
        try:
            result.append(coerce_shift(shift))
        except InvalidInterval:
            continue
    return result


def build_warnings(summary: ConflictSummary) -> list[str]:
    """Warning lines for a conflict summary."""
    warnings = []
    if summary.direct_overlaps:
        warnings.append(
            f"Worker has {len(summary.direct_overlaps)} direct schedule conflict(s)"
        )

    resolvable = summary.resolvable_violations
    if resolvable:
        warnings.append(
            f"Worker has {len(resolvable)} gap violation(s) that could be "
            f"resolved with early finish"
        )

    unresolvable = summary.unresolvable_violations
    if unresolvable:
        warnings.append(f"Worker has {len(unresolvable)} unresolvable gap violation(s)")

    return warnings


class ShiftConflictChecker:
    """Checks a proposed shift against a worker's existing shifts.

    Direct overlaps block assignment. Rest gap violations never block on
    their own; they are surfaced as warnings.

    Example:
        >>> checker = ShiftConflictChecker()
        >>> summary = checker.check(proposed, existing_shifts)
        >>> if not summary.can_assign:
        ...     for warning in summary.warnings:
        ...         print(warning)
    """

    def __init__(self, rest_policy: Optional[RestPolicy] = None):
        self.rest_policy = rest_policy or DefaultRestPolicy()

    def find_conflicts(
        self,
        proposed: ShiftLike,
        existing: Optional[Iterable[ShiftLike]],
    ) -> list[ConflictRecord]:
        """Collect conflict records for every active existing shift.

        Args:
            proposed: The shift being proposed.
            existing: The worker's existing shifts (already filtered to the
                worker). Rejected and other inactive shifts are ignored.

        Returns:
            Conflict records in input order. Empty if the proposed shift
            is malformed.
        """
        try:
            candidate = coerce_shift(proposed)
        except InvalidInterval:
            return []

        records = []
        for shift in coerce_shifts(existing):
            if not shift.is_active:
                continue

            evaluation = evaluate_gap(candidate.interval, shift.interval, self.rest_policy)
            if not evaluation.is_conflict:
                continue

            records.append(
                ConflictRecord(
                    kind=evaluation.kind,
                    gap_hours=evaluation.gap_hours,
                    resolvable=evaluation.resolvable,
                    subject=shift,
                    required_boundary_time=evaluation.required_end,
                    description=evaluation.description,
                )
            )
        return records

    def check(
        self,
        proposed: ShiftLike,
        existing: Optional[Iterable[ShiftLike]],
    ) -> ConflictSummary:
        """Summarise conflicts for a proposed shift.

        Returns:
            ConflictSummary where can_assign is False only when at least one
            direct overlap exists.
        """
        records = self.find_conflicts(proposed, existing)
        summary = ConflictSummary(
            direct_overlaps=[r for r in records if r.is_direct_overlap],
            gap_violations=[r for r in records if not r.is_direct_overlap],
        )
        summary.has_conflicts = bool(records)
        summary.can_assign = not summary.direct_overlaps
        summary.warnings = build_warnings(summary)

        logger.debug(
            "Shift check: %d overlap(s), %d gap violation(s), can_assign=%s",
            len(summary.direct_overlaps),
            len(summary.gap_violations),
            summary.can_assign,
        )
        return summary


def can_assign_worker(
    proposed: ShiftLike,
    existing: Optional[Iterable[ShiftLike]],
    rest_policy: Optional[RestPolicy] = None,
) -> bool:
    """Shortcut: whether a worker may take the proposed shift."""
    return ShiftConflictChecker(rest_policy).check(proposed, existing).can_assign
