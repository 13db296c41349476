"""Velocity, transition, and plateau analysis over timestamped mood points."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import timedelta

import numpy as np

from moodtrace.config import DeltaDetectorConfig
from moodtrace.domain import (
    DeltaDirection,
    PlateauResult,
    SuddenTransition,
    TrajectoryPoint,
    TransitionType,
    VelocityMethod,
)
from moodtrace.utils.logger import get_logger

logger: logging.Logger = get_logger(__name__)

SECONDS_PER_HOUR = 3600.0
MIN_PLATEAU_POINTS = 3


class TrajectoryOrderError(ValueError):
    """Raised when trajectory points are not ordered by timestamp."""


def ensure_time_ordered(points: Sequence[TrajectoryPoint]) -> None:
    """Rejects point sequences whose timestamps decrease or cannot be compared.

    Raises:
        TrajectoryOrderError: If any point is earlier than its predecessor
            or mixes timezone awareness with it.
    """
    for index in range(1, len(points)):
        try:
            out_of_order = points[index].timestamp < points[index - 1].timestamp
        except TypeError as err:
            raise TrajectoryOrderError(
                "Trajectory points mix timezone-aware and naive timestamps; "
                f"point {index} cannot be compared with point {index - 1}."
            ) from err
        if out_of_order:
            raise TrajectoryOrderError(
                "Trajectory points must be ordered by timestamp; "
                f"point {index} precedes point {index - 1}."
            )


def elapsed_hours(first: TrajectoryPoint, last: TrajectoryPoint) -> float:
    """Wall-clock hours between two points."""
    return (last.timestamp - first.timestamp).total_seconds() / SECONDS_PER_HOUR


def calculate_mood_velocity(
    points: Sequence[TrajectoryPoint],
    *,
    method: VelocityMethod = VelocityMethod.ENDPOINT,
) -> float:
    """Returns the rate of mood change in points per hour.

    The endpoint method measures net movement between the first and last
    point. The least-squares method fits a line through every point.
    Fewer than two points or zero elapsed time yield 0.0.
    """
    if len(points) < 2:
        return 0.0
    ensure_time_ordered(points)

    first, last = points[0], points[-1]
    hours = elapsed_hours(first, last)
    if hours <= 0.0:
        return 0.0
    if method is VelocityMethod.LEAST_SQUARES:
        return _least_squares_velocity(points)
    return float((last.mood_score - first.mood_score) / hours)


def _least_squares_velocity(points: Sequence[TrajectoryPoint]) -> float:
    """Slope of the least-squares line through (hours, score) pairs."""
    origin = points[0]
    hours = np.array([elapsed_hours(origin, point) for point in points], dtype=float)
    scores = np.array([point.mood_score for point in points], dtype=float)
    slope, _intercept = np.polyfit(hours, scores, deg=1)
    return float(slope)


def classify_transition_type(
    velocity: float,
    points: Sequence[TrajectoryPoint],
    *,
    config: DeltaDetectorConfig,
) -> TransitionType:
    """Classifies a transition as sudden or gradual.

    Both the slope and the score magnitude between the first and last point
    must clear their thresholds for a transition to be sudden.
    """
    if len(points) < 2:
        return TransitionType.GRADUAL
    magnitude = abs(points[-1].mood_score - points[0].mood_score)
    if (
        abs(velocity) >= config.sudden_velocity_threshold
        and magnitude >= config.sudden_magnitude_threshold
    ):
        return TransitionType.SUDDEN
    return TransitionType.GRADUAL


def detect_sudden_transitions(
    points: Sequence[TrajectoryPoint],
    *,
    config: DeltaDetectorConfig,
) -> list[SuddenTransition]:
    """Finds consecutive point pairs whose change is sudden."""
    if len(points) < 2:
        return []
    ensure_time_ordered(points)

    transitions: list[SuddenTransition] = []
    for previous, current in zip(points, points[1:]):
        pair = (previous, current)
        velocity = calculate_mood_velocity(pair)
        transition_type = classify_transition_type(velocity, pair, config=config)
        if transition_type is not TransitionType.SUDDEN:
            continue
        transitions.append(
            SuddenTransition(
                type=TransitionType.SUDDEN,
                magnitude=abs(current.mood_score - previous.mood_score),
                timestamp=current.timestamp,
                velocity=abs(velocity),
                direction=(
                    DeltaDirection.POSITIVE
                    if current.mood_score > previous.mood_score
                    else DeltaDirection.NEGATIVE
                ),
            )
        )
    logger.debug("Detected %d sudden transitions.", len(transitions))
    return transitions


def detect_emotional_plateau(
    points: Sequence[TrajectoryPoint],
    *,
    config: DeltaDetectorConfig,
) -> PlateauResult:
    """Checks whether a window holds a low-variance mood for long enough."""
    if not points:
        return PlateauResult(is_plateau=False, average_score=0.0, duration=timedelta(0))
    ensure_time_ordered(points)

    scores = np.array([point.mood_score for point in points], dtype=float)
    average_score = float(np.mean(scores))
    if len(points) < MIN_PLATEAU_POINTS:
        return PlateauResult(
            is_plateau=False,
            average_score=average_score,
            duration=timedelta(0),
        )

    variance = float(np.var(scores))
    span = points[-1].timestamp - points[0].timestamp
    is_plateau = (
        variance < config.plateau_variance_threshold
        and span > config.plateau_minimum_duration
    )
    logger.debug(
        "Plateau check: variance=%.3f span=%s plateau=%s.",
        variance,
        span,
        is_plateau,
    )
    return PlateauResult(
        is_plateau=is_plateau,
        average_score=average_score,
        duration=span if is_plateau else timedelta(0),
    )


def segment_by_time_window(
    points: Sequence[TrajectoryPoint],
    *,
    time_window: timedelta,
) -> list[list[TrajectoryPoint]]:
    """Splits a point stream wherever consecutive points are too far apart."""
    if not points:
        return []
    ensure_time_ordered(points)

    windows: list[list[TrajectoryPoint]] = [[points[0]]]
    for previous, current in zip(points, points[1:]):
        if current.timestamp - previous.timestamp > time_window:
            windows.append([current])
            continue
        windows[-1].append(current)
    return windows
