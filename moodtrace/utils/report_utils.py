"""
Report rendering for the moodtrace command line tool.

This module turns detected deltas and trajectory signals into aligned,
colorized terminal rows.

Functions:
    - display_elapsed_time: Formats a duration in seconds.
    - color_txt: Colorizes a string.
    - build_delta_rows: Builds printable rows for detected deltas.
    - print_delta_table: Prints delta rows with a colored header.
    - print_trajectory_report: Prints velocity, transitions, turning points and plateau.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from colored import attr, bg, fg

from moodtrace.domain import DeltaType, MoodDelta
from moodtrace.engine.detector import DeltaDetector, TrajectoryReport
from moodtrace.utils.logger import get_logger

logger: logging.Logger = get_logger(__name__)

DELTA_COLORS: dict[DeltaType, str] = {
    DeltaType.MOOD_REPAIR: "green",
    DeltaType.CELEBRATION: "yellow",
    DeltaType.DECLINE: "red",
    DeltaType.PLATEAU: "white",
}


def display_elapsed_time(elapsed_time: float, _format: str = "long") -> str:
    """
    Returns the elapsed time in seconds in long or short format.

    Arguments:
        elapsed_time (float): Elapsed time in seconds.
        _format (str, optional): 'long' or 'short', by default 'long'.

    Returns:
        str: Formatted elapsed time.
    """
    hours, remainder = divmod(int(elapsed_time), 3600)
    minutes, seconds = divmod(remainder, 60)
    if _format == "long":
        if hours:
            return f"{hours} h {minutes} min"
        return f"{minutes} min {seconds} seconds" if minutes else f"{elapsed_time} seconds"
    if hours:
        return f"{hours}h{minutes}m"
    return f"{minutes}m{seconds}s" if minutes else f"{elapsed_time:.2f}s"


def color_txt(string: str, fg_color: str, bg_color: str, padding: int = 0) -> str:
    """
    Colorizes a string.

    Arguments:
        string (str): String to be colorized.
        fg_color (str): Foreground color.
        bg_color (str): Background color.
        padding (int): Minimum width of the colored cell.

    Returns:
        str: Colorized string.
    """
    if padding:
        string = string.ljust(padding)
    return f"{fg(fg_color)}{bg(bg_color)}{string}{attr('reset')}"


def build_delta_rows(
    deltas: Sequence[MoodDelta],
    detector: DeltaDetector,
) -> list[tuple[str, str, str, str, str, str]]:
    """
    Builds printable rows for detected deltas.

    Returns:
        list: (index, type, direction, magnitude, confidence, trigger) rows.
    """
    rows: list[tuple[str, str, str, str, str, str]] = []
    for index, delta in enumerate(deltas, start=1):
        confidence = f"{delta.confidence:.2f}"
        if not detector.is_confident(delta):
            confidence = f"{confidence}?"
        rows.append(
            (
                str(index),
                str(delta.type),
                str(delta.direction),
                f"{delta.magnitude:.2f}",
                confidence,
                "yes" if detector.should_trigger_extraction(delta) else "no",
            )
        )
    return rows


def print_delta_table(deltas: Sequence[MoodDelta], detector: DeltaDetector) -> None:
    """Prints detected deltas, one row per delta, with their factors."""
    logger.info("Printing %d deltas.", len(deltas))
    if not deltas:
        print("No significant mood deltas detected.")
        return

    headers = ("#", "Type", "Direction", "Magnitude", "Confidence", "Trigger")
    rows = build_delta_rows(deltas, detector)
    widths = [
        max(len(header), *(len(row[column]) for row in rows))
        for column, header in enumerate(headers)
    ]
    print(" ".join(color_txt(h, "black", "green", w) for h, w in zip(headers, widths)))
    for delta, row in zip(deltas, rows):
        cells = [cell.ljust(width) for cell, width in zip(row, widths)]
        cells[1] = f"{fg(DELTA_COLORS[delta.type])}{cells[1]}{attr('reset')}"
        print(" ".join(cells))
        for factor in delta.factors:
            print(f"{' ' * (widths[0] + 1)}- {factor}")


def print_trajectory_report(report: TrajectoryReport, detector: DeltaDetector) -> None:
    """Prints trajectory-level signals."""
    print(color_txt("Trajectory", "black", "blue", 12))
    print(f"Velocity: {report.velocity:+.2f} points/hour")

    for transition in report.sudden_transitions:
        print(
            f"Sudden {transition.direction} shift at {transition.timestamp.isoformat()}: "
            f"{transition.magnitude:.2f} points ({transition.velocity:.1f} points/hour)"
        )

    for turning_point in report.turning_points:
        trigger = "trigger" if detector.should_trigger_on_turning_point(turning_point) else ""
        print(
            f"Turning point [{turning_point.type}] at "
            f"{turning_point.timestamp.isoformat()}: {turning_point.description} "
            f"(magnitude {turning_point.magnitude:.2f}) {trigger}".rstrip()
        )

    plateau = report.plateau
    if plateau.is_plateau:
        duration = display_elapsed_time(plateau.duration.total_seconds())
        print(f"Plateau around {plateau.average_score:.2f} for {duration}")
    else:
        print(f"No plateau (average score {plateau.average_score:.2f})")
