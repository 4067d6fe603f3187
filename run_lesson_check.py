#!/usr/bin/env python3
"""
Supplementary Lesson Check Script.

This script checks a supplementary lesson log against the NEIS duty-status
and business-trip exports and reports policy violations.

Usage:
    python run_lesson_check.py --lessons LOG --duty DUTY_XLSX --trip TRIP_XLSX
        [--min-session 40] [--min-consecutive 80] [--format json csv xlsx pdf]
        [--log-file PATH]

Examples:
    # Check a lesson log document (OCR + AI extraction)
    python run_lesson_check.py --lessons 지도일지.pdf \\
        --duty 근무상황목록.xlsx --trip 출장목록.xlsx

    # Re-check lessons extracted earlier, without calling any API
    python run_lesson_check.py --lessons output/lessons.json \\
        --duty 근무상황목록.xlsx --trip 출장목록.xlsx --format xlsx

    # Use API credentials from the environment
    export UPSTAGE_API_KEY="up_..."
    export ANTHROPIC_VERTEX_PROJECT_ID="my-gcp-project"

Exit codes:
    0  all lessons compliant
    1  input or configuration error
    2  violations found
    130 interrupted
"""

import sys
import argparse
import logging
from pathlib import Path
from typing import List, Optional

from lesson_audit.checking import CheckPolicy, ComplianceChecker
from lesson_audit.ingestion import (
    DocumentParseClient,
    LessonExtractor,
    ScheduleKind,
    load_lesson_log,
    load_lessons_json,
    load_schedules,
)
from lesson_audit.models.lesson import LessonRecord
from lesson_audit.models.result import Result
from lesson_audit.reporting.console import render_report
from lesson_audit.reporting.export import SUPPORTED_FORMATS, export_report
from lesson_audit.utils.config import config
from lesson_audit.utils.file_utils import generate_filename, save_json
from lesson_audit.utils.logger import setup_logger


EXIT_COMPLIANT = 0
EXIT_ERROR = 1
EXIT_VIOLATIONS = 2
EXIT_INTERRUPTED = 130


def parse_arguments(argv: Optional[List[str]] = None):
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        description="Check supplementary lesson logs against duty and trip schedules",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )

    parser.add_argument(
        "--lessons",
        required=True,
        type=Path,
        help="Lesson log (.pdf/.hwp/.hwpx) or previously extracted lessons (.json)"
    )

    parser.add_argument(
        "--duty",
        required=True,
        type=Path,
        help="NEIS duty-status list export (.xlsx/.xls)"
    )

    parser.add_argument(
        "--trip",
        required=True,
        type=Path,
        help="NEIS business-trip list export (.xlsx/.xls)"
    )

    parser.add_argument(
        "--min-session",
        type=int,
        help="Minimum single session minutes (overrides MIN_SESSION_MINUTES)"
    )

    parser.add_argument(
        "--min-consecutive",
        type=int,
        help="Minimum back-to-back session minutes (overrides MIN_CONSECUTIVE_MINUTES)"
    )

    parser.add_argument(
        "--output-dir",
        type=Path,
        help="Directory for exported reports (default: OUTPUT_DIR/reports)"
    )

    parser.add_argument(
        "--format",
        dest="formats",
        nargs="+",
        choices=list(SUPPORTED_FORMATS),
        default=["json"],
        help="Report formats to export (default: json)"
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: LOG_LEVEL or INFO)"
    )

    parser.add_argument(
        "--log-file",
        type=Path,
        help="Log file path (default: OUTPUT_DIR/logs/lesson_check.log when --output-dir is not given)"
    )

    return parser.parse_args(argv)


def build_policy(args) -> CheckPolicy:
    """
    Build the check policy from configuration and CLI overrides.

    Raises:
        ValueError: If a threshold is not positive
    """
    return CheckPolicy(
        min_session_minutes=(
            args.min_session if args.min_session is not None else config.min_session_minutes
        ),
        min_consecutive_minutes=(
            args.min_consecutive
            if args.min_consecutive is not None
            else config.min_consecutive_minutes
        )
    )


def load_lessons(lessons_path: Path, logger: logging.Logger) -> Result[List[LessonRecord]]:
    """
    Load lessons from a JSON file or through OCR + AI extraction.

    Freshly extracted lessons are saved next to the reports so later runs
    can skip the API calls.
    """
    if lessons_path.suffix.lower() == ".json":
        logger.info(f"Loading extracted lessons from {lessons_path}")
        return load_lessons_json(lessons_path)

    config.validate(require_document_parsing=True)

    parse_client = DocumentParseClient(
        api_key=config.upstage_api_key,
        base_url=config.upstage_base_url,
        timeout=config.upstage_timeout
    )
    extractor = LessonExtractor(
        project_id=config.vertex_project_id,
        region=config.vertex_region,
        model=config.anthropic_model
    )

    result = load_lesson_log(lessons_path, parse_client, extractor, config.lesson_year)

    if result.is_success:
        lessons_file = config.output_dir / "lessons" / generate_filename("lessons", "json")
        if save_json({"lessons": [lesson.to_dict() for lesson in result.value]}, lessons_file):
            print(f"  Extracted lessons saved to: {lessons_file}")

    return result


def main(argv: Optional[List[str]] = None) -> int:
    """Main execution function."""
    args = parse_arguments(argv)

    output_dir = args.output_dir
    log_file = args.log_file
    if output_dir is None:
        config.create_output_directories()
        output_dir = config.output_dir / "reports"
        if log_file is None:
            log_file = config.output_dir / "logs" / "lesson_check.log"

    log_level = args.log_level or config.log_level
    logger = setup_logger(
        "lesson_audit",
        level=getattr(logging, log_level, logging.INFO),
        log_file=str(log_file) if log_file else None
    )

    try:
        logger.info("Validating configuration")
        config.validate()
        policy = build_policy(args)

        # Step 1: Lesson log
        print(f"\n[1/4] Reading lesson log {args.lessons.name}...")
        lessons_result = load_lessons(args.lessons, logger)
        if lessons_result.is_failure:
            logger.error(f"Lesson log failed: {lessons_result.message}")
            print(f"ERROR: {lessons_result.message}")
            return EXIT_ERROR
        lessons = lessons_result.unwrap()
        print(f"✓ {len(lessons)} lessons")

        # Step 2: Duty-status list
        print(f"\n[2/4] Reading duty-status list {args.duty.name}...")
        duty_result = load_schedules(args.duty, ScheduleKind.DUTY)
        if duty_result.is_failure:
            logger.error(f"Duty-status list failed: {duty_result.message}")
            print(f"ERROR: {duty_result.message}")
            return EXIT_ERROR
        duty_schedules = duty_result.unwrap()
        print(f"✓ {len(duty_schedules)} approved duty windows")

        # Step 3: Business-trip list
        print(f"\n[3/4] Reading business-trip list {args.trip.name}...")
        trip_result = load_schedules(args.trip, ScheduleKind.TRIP)
        if trip_result.is_failure:
            logger.error(f"Business-trip list failed: {trip_result.message}")
            print(f"ERROR: {trip_result.message}")
            return EXIT_ERROR
        trip_schedules = trip_result.unwrap()
        print(f"✓ {len(trip_schedules)} approved business trips")

        # Step 4: Check
        print("\n[4/4] Checking lessons...")
        report = ComplianceChecker(policy).check(lessons, duty_schedules, trip_schedules)
        print(render_report(report))

        written = export_report(report, output_dir, args.formats)
        for fmt, path in written.items():
            print(f"Report ({fmt}) saved to: {path}")

        return EXIT_COMPLIANT if report.is_compliant else EXIT_VIOLATIONS

    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        logger.info("Interrupted by user")
        return EXIT_INTERRUPTED

    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        print(f"\nERROR: {e}")
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
