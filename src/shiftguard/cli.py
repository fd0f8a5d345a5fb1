"""Command-line interface for the shiftguard conflict engine.

Each command reads a JSON file of records, as returned by the scheduling
API, and prints the engine's decision.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

from shiftguard.conflicts.availability import calculate_earliest_available_time
from shiftguard.conflicts.disabled_dates import DisabledDateBuilder
from shiftguard.conflicts.shift_checker import ShiftConflictChecker
from shiftguard.conflicts.time_off import TimeOffOverlapChecker
from shiftguard.domain.policies import DefaultOverlapPolicy, DefaultRestPolicy
from shiftguard.output.messages import format_conflict_time, generate_conflict_messages
from shiftguard.output.report import ConflictReportGenerator
from shiftguard.validation.validator import AssignmentValidator

logger = logging.getLogger(__name__)


class InputError(Exception):
    """Raised when an input file cannot be read."""


def load_payload(path: str) -> dict[str, Any]:
    """Read a JSON object from a file."""
    try:
        payload = json.loads(Path(path).read_text())
    except OSError as exc:
        raise InputError(f"Cannot read {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise InputError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise InputError(f"Expected a JSON object in {path}")
    return payload


def run_check_shift(path: str, rest_hours: float) -> int:
    """Check a proposed shift against existing shifts."""
    payload = load_payload(path)
    rest_policy = DefaultRestPolicy(rest_hours=rest_hours)
    summary = ShiftConflictChecker(rest_policy).check(
        payload.get("proposed") or {},
        payload.get("existing") or [],
    )

    print(f"Direct overlaps: {len(summary.direct_overlaps)}")
    print(f"Gap violations: {len(summary.gap_violations)}")
    for record in summary.conflicts:
        print("")
        for message in generate_conflict_messages(record, rest_hours=rest_hours):
            print(f"  {message}")
        print(f"  {record.description}")

    if summary.warnings:
        print("\nWarnings:")
        for warning in summary.warnings:
            print(f"  - {warning}")

    print(f"\nCan assign: {'yes' if summary.can_assign else 'no'}")
    return 0 if summary.can_assign else 2


def run_check_time_off(path: str, tolerance: Optional[float]) -> int:
    """Check a time-off request against own and peer requests."""
    payload = load_payload(path)
    if tolerance is None:
        try:
            tolerance = float(payload.get("tolerance", 10.0))
        except (TypeError, ValueError) as exc:
            raise InputError(f"Invalid tolerance in {path}") from exc
    checker = TimeOffOverlapChecker(DefaultOverlapPolicy(tolerance_ratio_percent=tolerance))
    result = checker.check(
        payload.get("candidate") or {},
        payload.get("own") or [],
        payload.get("peers") or [],
        exclude_id=payload.get("exclude_id"),
    )

    if not result.has_conflict:
        print("No conflict")
        return 0

    print(f"Conflict ({result.category.value}) with request {result.conflicting.id}")
    print(f"  Shared days: {result.overlap_days}")
    if result.overlap_percentage is not None:
        print(f"  Overlap: {result.overlap_percentage:.1f}%")
    print(f"  {result.message}")
    return 2


def run_disabled_dates(path: str) -> int:
    """Print every disabled day, one per line."""
    payload = load_payload(path)
    days = DisabledDateBuilder().build(
        payload.get("time_off") or [],
        payload.get("assignments") or [],
        exclude_id=payload.get("exclude_id"),
    )
    for day in sorted(days):
        print(day.isoformat())
    return 0


def run_earliest(path: str, rest_hours: float) -> int:
    """Print the earliest legal start for a new shift."""
    payload = load_payload(path)
    earliest = calculate_earliest_available_time(
        payload.get("existing") or [],
        payload.get("proposed_start"),
        DefaultRestPolicy(rest_hours=rest_hours),
    )
    if earliest is None:
        print("Proposed start is already available")
    else:
        print(f"Earliest available start: {format_conflict_time(earliest, include_date=True)}")
        print(f"  ({earliest.isoformat()})")
    return 0


def run_assess(path: str, rest_hours: float, output_path: Optional[str] = None) -> int:
    """Print a full assignment report for one worker."""
    payload = load_payload(path)
    validator = AssignmentValidator(DefaultRestPolicy(rest_hours=rest_hours))
    assessment = validator.assess(
        payload.get("proposed") or {},
        payload.get("existing") or [],
        payload.get("time_off") or [],
    )

    generator = ConflictReportGenerator(rest_hours=rest_hours)
    worker_name = payload.get("worker_name")
    if output_path:
        generator.generate(assessment, output_path, worker_name)
        print(f"Report written to {output_path}")
    else:
        print(generator.generate_to_string(assessment, worker_name))
    return 0 if assessment.can_proceed else 2


def main() -> int:
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(
        description="Shiftguard - Worker scheduling conflict checks",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--rest-hours",
        type=float,
        default=8.0,
        help="Minimum rest between shifts in hours (default: 8)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    shift_parser = subparsers.add_parser(
        "check-shift",
        help="Check a proposed shift against existing shifts",
    )
    shift_parser.add_argument("file", help="JSON file with 'proposed' and 'existing'")

    time_off_parser = subparsers.add_parser(
        "check-time-off",
        help="Check a time-off request for overlaps",
    )
    time_off_parser.add_argument("file", help="JSON file with 'candidate', 'own' and 'peers'")
    time_off_parser.add_argument(
        "--tolerance", "-t",
        type=float,
        default=None,
        help="Peer overlap tolerance in percent (default: 10, or 'tolerance' in file)",
    )

    disabled_parser = subparsers.add_parser(
        "disabled-dates",
        help="List days a worker is unavailable",
    )
    disabled_parser.add_argument("file", help="JSON file with 'time_off' and 'assignments'")

    earliest_parser = subparsers.add_parser(
        "earliest",
        help="Compute the earliest legal start for a new shift",
    )
    earliest_parser.add_argument("file", help="JSON file with 'existing' and 'proposed_start'")

    assess_parser = subparsers.add_parser(
        "assess",
        help="Full assignment report for one worker",
    )
    assess_parser.add_argument(
        "file",
        help="JSON file with 'proposed', 'existing' and 'time_off'",
    )
    assess_parser.add_argument(
        "--output", "-o",
        type=str,
        help="Write the report to this file instead of stdout",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        if args.command == "check-shift":
            return run_check_shift(args.file, args.rest_hours)
        elif args.command == "check-time-off":
            return run_check_time_off(args.file, args.tolerance)
        elif args.command == "disabled-dates":
            return run_disabled_dates(args.file)
        elif args.command == "earliest":
            return run_earliest(args.file, args.rest_hours)
        elif args.command == "assess":
            return run_assess(args.file, args.rest_hours, args.output)
        else:
            parser.print_help()
            return 1
    except InputError as exc:
        logger.debug("Input error", exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
