"""Human-readable text for conflicts and time-off requests.

All times are rendered in the display zone so that every caller shows
the same wall-clock times regardless of its own local zone.
"""

from typing import Optional

from shiftguard.domain.calendar import (
    format_clock,
    format_conflict_time,
    format_day,
    to_display,
)
from shiftguard.domain.models import (
    ConflictRecord,
    TimeOffConflictCategory,
    TimeOffConflictResult,
    TimeOffInterval,
    TimeOffType,
)


def format_time_off_type(value) -> str:
    """Display label for a time-off type ("day_off" -> "Day Off")."""
    return TimeOffType.parse(value).label if value else ""


def describe_job(record: ConflictRecord) -> str:
    """Job label with optional site and client names."""
    shift = record.subject
    text = f"Job #{shift.job_number or shift.job_id}"
    if shift.site_name:
        text += f" at {shift.site_name}"
    if shift.client_name:
        text += f" ({shift.client_name})"
    return text


def generate_conflict_messages(
    record: ConflictRecord,
    worker_name: Optional[str] = None,
    rest_hours: float = 8.0,
) -> list[str]:
    """Describe one schedule conflict as a list of display lines.

    Args:
        record: The conflict to describe.
        worker_name: Name to show; falls back to the shift's worker name.
        rest_hours: Rest threshold quoted in the early-finish hint.

    Returns:
        Lines naming the job, its times, and the nature of the conflict.
    """
    shift = record.subject
    name = worker_name or shift.worker_name or "Worker"
    start = to_display(shift.start)
    end = to_display(shift.end)

    messages = [
        f"{name} is scheduled for {describe_job(record)}",
        f"Time: {format_day(start)} {format_clock(start)} - "
        f"{end.strftime('%b')} {end.day}, {format_clock(end)}",
    ]

    if record.is_direct_overlap:
        messages.append("This shift directly overlaps with the new assignment")
    elif record.resolvable and record.required_boundary_time is not None:
        messages.append(
            f"Worker could finish by {format_conflict_time(record.required_boundary_time)} "
            f"to maintain {rest_hours:g}-hour gap"
        )
    return messages


def describe_time_off(request: TimeOffInterval) -> str:
    """One-line description, e.g. "Day Off approved at Jan 5, 2024"."""
    label = request.type.label
    status = request.status.value
    if request.start == request.end:
        return f"{label} {status} at {format_day(request.start)}"
    return f"{label} {status} from {format_day(request.start)} to {format_day(request.end)}"


def describe_time_off_conflict(
    result: TimeOffConflictResult,
    tolerance_percent: Optional[float] = None,
) -> str:
    """Explanatory text for a time-off conflict result."""
    if not result.has_conflict:
        return ""

    if result.category == TimeOffConflictCategory.SELF:
        return (
            "You already have a time-off request for this date range. "
            "Please choose different dates."
        )

    text = "This date is full for time-off requests. Please choose a different date."
    if result.overlap_percentage is not None:
        text += f" Overlap with a colleague in the same role is {result.overlap_percentage:.1f}%"
        if tolerance_percent is not None:
            text += f" (limit {tolerance_percent:g}%)"
        text += "."
    return text
