"""Gap calculation and rest-rule evaluation between two shifts.

The gap between two intervals is a single signed number of hours:
negative when they overlap (its magnitude is the overlap), positive or
zero when they are separated (the distance from the earlier end to the
later start). Intervals that exactly touch have a gap of zero.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from shiftguard.domain.calendar import add_hours, format_conflict_time, hours_between
from shiftguard.domain.models import ConflictKind, InstantInterval
from shiftguard.domain.policies import DefaultRestPolicy, RestPolicy


@dataclass(frozen=True)
class GapEvaluation:
    """Result of evaluating one existing shift against a candidate.

    Attributes:
        kind: Conflict classification, None if the gap is adequate.
        gap_hours: Signed gap in hours.
        resolvable: True if the existing shift finishing earlier fixes it.
        required_end: Latest finish for the existing shift (resolvable only).
        description: Human-readable explanation of the gap.
    """

    kind: Optional[ConflictKind]
    gap_hours: float
    resolvable: bool = False
    required_end: Optional[datetime] = None
    description: str = ""

    @property
    def is_conflict(self) -> bool:
        return self.kind is not None


def calculate_gap_hours(first: InstantInterval, second: InstantInterval) -> float:
    """Signed gap in hours between two intervals.

    The magnitude is the same whichever order the intervals are given in.

    Returns:
        Negative overlap duration if the intervals intersect, otherwise the
        non-negative distance between them.
    """
    if first.overlaps(second):
        overlap_start = max(first.start, second.start)
        overlap_end = min(first.end, second.end)
        return -hours_between(overlap_start, overlap_end)

    if first.end <= second.start:
        return hours_between(first.end, second.start)
    # second ends before first starts
    return hours_between(second.end, first.start)


def evaluate_gap(
    candidate: InstantInterval,
    existing: InstantInterval,
    rest_policy: Optional[RestPolicy] = None,
) -> GapEvaluation:
    """Classify an existing shift against a candidate shift.

    Only a preceding existing shift can be resolved, by finishing it early
    enough that the rest gap holds before the candidate starts. A following
    existing shift is never offered a later start.

    Args:
        candidate: The shift being proposed.
        existing: A shift the worker already holds.
        rest_policy: Rest rule to apply (8 hours by default).

    Returns:
        GapEvaluation with classification, signed gap and explanation.
    """
    rest_policy = rest_policy or DefaultRestPolicy()
    rest_hours = rest_policy.min_rest_hours()

    gap = calculate_gap_hours(existing, candidate)
    kind = rest_policy.classify(gap)

    if kind == ConflictKind.DIRECT_OVERLAP:
        return GapEvaluation(
            kind=kind,
            gap_hours=gap,
            description="Shifts overlap directly. Worker cannot be assigned to both.",
        )

    if kind is None:
        return GapEvaluation(
            kind=None,
            gap_hours=gap,
            description=f"{gap:.1f} hours between shifts. Adequate gap maintained.",
        )

    if existing.end <= candidate.start:
        required_end = add_hours(candidate.start, -rest_hours)
        resolvable = required_end >= existing.start
        if resolvable:
            description = (
                f"Only {gap:.1f} hours between shifts. Worker needs to finish by "
                f"{format_conflict_time(required_end)} to maintain "
                f"{rest_hours:g}-hour gap."
            )
        else:
            description = (
                f"Only {gap:.1f} hours between shifts. Cannot maintain "
                f"{rest_hours:g}-hour gap even with early finish."
            )
        return GapEvaluation(
            kind=kind,
            gap_hours=gap,
            resolvable=resolvable,
            required_end=required_end if resolvable else None,
            description=description,
        )

    return GapEvaluation(
        kind=kind,
        gap_hours=gap,
        description=(
            f"Only {gap:.1f} hours between shifts. {rest_hours:g}-hour gap "
            f"required between consecutive shifts."
        ),
    )
