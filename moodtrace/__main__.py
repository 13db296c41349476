"""
moodtrace command line tool

Reads a JSON document of mood analyses and/or timestamped trajectory points,
runs the delta detection engine and prints the detected deltas, their
extraction trigger decisions and the trajectory-level signals.

Usage:
    moodtrace --file conversation.json [--significance 2.0] [--log-level DEBUG]
"""

from __future__ import annotations

import argparse
import logging
import sys

from dotenv import load_dotenv
from halo import Halo

from moodtrace.config import DeltaDetectorConfig
from moodtrace.documents import AnalysisDocument, load_analysis_document
from moodtrace.domain import EmotionalTrajectory, TrajectoryDirection
from moodtrace.engine import DeltaDetector
from moodtrace.utils import configure_logging, get_logger
from moodtrace.utils.report_utils import print_delta_table, print_trajectory_report

logger: logging.Logger = get_logger("moodtrace")


def build_parser() -> argparse.ArgumentParser:
    """Builds the command line parser."""
    defaults = DeltaDetectorConfig()
    parser = argparse.ArgumentParser(
        description="Mood delta and trajectory detection tool"
    )
    parser.add_argument(
        "--file",
        type=str,
        help="Path to a JSON document with 'analyses' and/or 'points'",
    )
    parser.add_argument(
        "--significance",
        type=float,
        default=2.0,
        help="Turning point significance threshold for the trajectory",
    )
    parser.add_argument(
        "--direction",
        choices=[direction.value for direction in TrajectoryDirection],
        default=TrajectoryDirection.VOLATILE.value,
        help="Overall trajectory direction hint passed to the analyzers",
    )
    parser.add_argument(
        "--minimum-magnitude",
        type=float,
        default=defaults.minimum_magnitude,
        help="Smallest score change reported as a delta",
    )
    parser.add_argument(
        "--celebration-threshold",
        type=float,
        default=defaults.celebration_threshold,
        help="Magnitude at which celebrations trigger extraction",
    )
    parser.add_argument(
        "--decline-threshold",
        type=float,
        default=defaults.decline_threshold,
        help="Magnitude at which declines trigger extraction",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Logging level (overrides LOG_LEVEL)",
    )
    return parser


def main() -> None:
    """
    Main function to handle the command line interface logic.
    """
    load_dotenv()
    args = build_parser().parse_args()
    configure_logging(args.log_level)

    if not args.file:
        logger.error(msg="No input file provided. Use --file to pass an analysis document.")
        sys.exit(1)

    try:
        config = DeltaDetectorConfig(
            minimum_magnitude=args.minimum_magnitude,
            celebration_threshold=args.celebration_threshold,
            decline_threshold=args.decline_threshold,
        )
        document = load_analysis_document(args.file)
        run_analysis(
            document,
            detector=DeltaDetector(config),
            significance=args.significance,
            direction=TrajectoryDirection(args.direction),
        )
    except ValueError as err:
        logger.error(msg=str(err))
        sys.exit(1)
    sys.exit(0)


def run_analysis(
    document: AnalysisDocument,
    *,
    detector: DeltaDetector,
    significance: float,
    direction: TrajectoryDirection = TrajectoryDirection.VOLATILE,
) -> None:
    """Runs the engine over a loaded document and prints the report."""
    with Halo(text="Detecting mood deltas", spinner="dots", text_color="green"):
        deltas = detector.detect_conversational_deltas(document.analyses)
        report = None
        if document.points:
            report = detector.analyze_trajectory(
                EmotionalTrajectory(
                    points=document.points,
                    direction=direction,
                    significance=significance,
                )
            )

    print_delta_table(deltas, detector)
    if report is not None:
        print_trajectory_report(report, detector)
    logger.info(
        "Analysis complete: %d deltas, %d triggering extraction.",
        len(deltas),
        sum(1 for delta in deltas if detector.should_trigger_extraction(delta)),
    )


if __name__ == "__main__":
    main()
