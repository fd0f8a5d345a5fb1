"""Validation module for assessing worker assignments."""

from shiftguard.validation.validator import (
    AssignmentValidator,
    ValidationError,
    ValidationErrorType,
    WarningType,
    WorkerAssessment,
    rank_workers,
)

__all__ = [
    "AssignmentValidator",
    "ValidationError",
    "ValidationErrorType",
    "WarningType",
    "WorkerAssessment",
    "rank_workers",
]
