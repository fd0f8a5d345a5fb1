"""Plain-text conflict report for a worker assessment.

The report lists time-off conflicts, direct overlaps and rest gap
violations for one worker, followed by the final decision.
"""

from pathlib import Path
from typing import TYPE_CHECKING, Optional, Union

from shiftguard.output.messages import (
    describe_time_off,
    format_conflict_time,
    generate_conflict_messages,
)

if TYPE_CHECKING:
    from shiftguard.validation.validator import WorkerAssessment


class ConflictReportGenerator:
    """Generates a text report of a worker assessment."""

    def __init__(self, rest_hours: float = 8.0):
        self.rest_hours = rest_hours

    def generate(
        self,
        assessment: "WorkerAssessment",
        output_path: Union[str, Path],
        worker_name: Optional[str] = None,
    ) -> str:
        """Generate the report and save it to a file.

        Returns:
            The generated text content.
        """
        content = self._generate_content(assessment, worker_name)
        Path(output_path).write_text(content)
        return content

    def generate_to_string(
        self,
        assessment: "WorkerAssessment",
        worker_name: Optional[str] = None,
    ) -> str:
        """Generate the report and return it as a string."""
        return self._generate_content(assessment, worker_name)

    def _generate_content(
        self,
        assessment: "WorkerAssessment",
        worker_name: Optional[str],
    ) -> str:
        lines = []
        summary = assessment.summary

        lines.append("=" * 80)
        lines.append(f"ASSIGNMENT CHECK - Worker {worker_name or assessment.worker_id or '?'}")
        lines.append("=" * 80)
        lines.append("")

        lines.append("-" * 80)
        lines.append(f"TIME-OFF CONFLICTS ({len(assessment.time_off_conflicts)})")
        lines.append("-" * 80)
        for request in assessment.time_off_conflicts:
            lines.append(f"  {describe_time_off(request)}")
        lines.append("")

        lines.append("-" * 80)
        lines.append(f"DIRECT OVERLAPS ({len(summary.direct_overlaps)})")
        lines.append("-" * 80)
        for record in summary.direct_overlaps:
            for message in generate_conflict_messages(record, worker_name, self.rest_hours):
                lines.append(f"  {message}")
            lines.append("")

        lines.append("-" * 80)
        lines.append(f"REST GAP VIOLATIONS ({len(summary.gap_violations)})")
        lines.append("-" * 80)
        for record in summary.gap_violations:
            for message in generate_conflict_messages(record, worker_name, self.rest_hours):
                lines.append(f"  {message}")
            lines.append(f"  {record.description}")
            lines.append("")

        lines.append("-" * 80)
        lines.append("DECISION")
        lines.append("-" * 80)
        lines.append(f"  Can proceed: {'yes' if assessment.can_proceed else 'no'}")
        for warning in summary.warnings:
            lines.append(f"  {warning}")
        if assessment.earliest_start is not None:
            lines.append(
                f"  Earliest available start: "
                f"{format_conflict_time(assessment.earliest_start, include_date=True)}"
            )
        lines.append("")

        return "\n".join(lines)
