"""Output generation for conflict results (messages, text reports)."""

from shiftguard.output.messages import (
    describe_time_off,
    describe_time_off_conflict,
    format_conflict_time,
    format_time_off_type,
    generate_conflict_messages,
)
from shiftguard.output.report import ConflictReportGenerator

__all__ = [
    "ConflictReportGenerator",
    "describe_time_off",
    "describe_time_off_conflict",
    "format_conflict_time",
    "format_time_off_type",
    "generate_conflict_messages",
]
