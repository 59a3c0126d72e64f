"""Validate a generated timetable, auto-resolve what it can and print the report.

Run:
  PYTHONPATH=backend python scripts/validate_timetable.py [--data-dir data] [--entries FILE]

Exit status is 0 when the timetable is valid, 1 when conflicts remain or
manual review is required.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from timetable_validator.core.config import Settings, get_settings
from timetable_validator.core.exceptions import AppError
from timetable_validator.core.logging import setup_logging
from timetable_validator.services.reference_data import (
    load_reference_data,
    load_timetable_entries,
    write_resolved_entries,
)
from timetable_validator.services.report import render_report
from timetable_validator.services.timetable_validator import TimetableValidator

logger = logging.getLogger("validate_timetable")


def parse_args(settings: Settings, argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--data-dir", type=Path, default=settings.reference_data_dir)
    parser.add_argument("--entries", default=settings.entries_file, help="entry file, relative to --data-dir")
    parser.add_argument("--output", default=settings.resolved_entries_file, help="resolved entry file, relative to --data-dir")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    try:
        settings = get_settings()
        policy = settings.to_policy()
    except AppError as exc:
        setup_logging(environment="development")
        logger.error("%s: %s", exc.message, exc.details.get("error", ""))
        return 1

    setup_logging(environment=settings.environment, level=settings.log_level)
    args = parse_args(settings, argv)

    try:
        entries = load_timetable_entries(args.data_dir / args.entries)
    except AppError as exc:
        logger.error("%s", exc.message)
        return 1

    if not entries:
        print(f"No timetable entries found. Please ensure {args.entries} exists.")
        return 1

    print(f"Found {len(entries)} timetable entries")
    reference = load_reference_data(args.data_dir)
    result = TimetableValidator(reference, policy).validate(entries)
    print(render_report(result))

    if result.summary.resolutions_succeeded:
        output_path = args.data_dir / args.output
        try:
            write_resolved_entries(
                output_path,
                result.entries,
                original_file=args.entries,
                resolutions_applied=result.summary.resolutions_succeeded,
            )
            print(f"\nUpdated entries saved to: {output_path}")
        except OSError:
            logger.exception("Failed to save updated entries to %s", output_path)

    if result.needs_manual_review:
        print("\nMANUAL REVIEW REQUIRED:")
        print("Some conflicts could not be automatically resolved.")
        for entry_id in result.unresolved_entry_ids:
            print(f"  - {entry_id}")
        return 1

    if result.is_valid:
        print("\nValidation completed successfully!")
        return 0

    print("\nValidation failed. Please address the conflicts above.")
    return 1


if __name__ == "__main__":
    sys.exit(main())
