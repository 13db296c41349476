"""Turning point identification over emotional trajectories."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from enum import StrEnum

from moodtrace.config import DeltaDetectorConfig
from moodtrace.domain import (
    EmotionalTrajectory,
    TrajectoryPoint,
    TurningPoint,
    TurningPointType,
)
from moodtrace.engine.trajectory import ensure_time_ordered
from moodtrace.utils.logger import get_logger

logger: logging.Logger = get_logger(__name__)


class ContextHint(StrEnum):
    """Normalized hint extracted from a point's context tag and emotions."""

    NONE = "none"
    SUPPORT = "support"
    INSIGHT = "insight"
    RECOVERY = "recovery"


class ReversalKind(StrEnum):
    """Shape of a local reversal."""

    TROUGH = "trough"
    PEAK = "peak"


HINT_KEYWORDS: dict[ContextHint, frozenset[str]] = {
    ContextHint.INSIGHT: frozenset(
        {
            "insight", "realization", "realized", "realised", "understanding",
            "pattern", "reflection", "reflective", "epiphany", "clarity", "aha",
        }
    ),
    ContextHint.SUPPORT: frozenset(
        {
            "support", "supported", "comforted", "validated", "heard", "helped",
            "reassured", "encouraged", "cared", "supportive", "comfort", "comforting",
        }
    ),
    ContextHint.RECOVERY: frozenset(
        {"recovery", "recovering", "relief", "relieved", "healing", "better"}
    ),
}
# Earlier entries win when a point carries several hints.
HINT_PRECEDENCE: tuple[ContextHint, ...] = (
    ContextHint.INSIGHT,
    ContextHint.SUPPORT,
    ContextHint.RECOVERY,
)

TURNING_POINT_TYPES: dict[tuple[ReversalKind, ContextHint], TurningPointType] = {
    (ReversalKind.TROUGH, ContextHint.NONE): TurningPointType.BREAKTHROUGH,
    (ReversalKind.TROUGH, ContextHint.RECOVERY): TurningPointType.BREAKTHROUGH,
    (ReversalKind.TROUGH, ContextHint.SUPPORT): TurningPointType.SUPPORT_RECEIVED,
    (ReversalKind.TROUGH, ContextHint.INSIGHT): TurningPointType.REALIZATION,
    (ReversalKind.PEAK, ContextHint.NONE): TurningPointType.SETBACK,
    (ReversalKind.PEAK, ContextHint.RECOVERY): TurningPointType.SETBACK,
    (ReversalKind.PEAK, ContextHint.SUPPORT): TurningPointType.SETBACK,
    (ReversalKind.PEAK, ContextHint.INSIGHT): TurningPointType.REALIZATION,
}

_DESCRIPTIONS: dict[TurningPointType, str] = {
    TurningPointType.BREAKTHROUGH: "Emotional breakthrough with mood improving from {score}",
    TurningPointType.SETBACK: "Emotional setback with mood declining from {score}",
    TurningPointType.REALIZATION: "Emotional shift at mood level {score}",
    TurningPointType.SUPPORT_RECEIVED: (
        "Support received leading to mood improvement from {score}"
    ),
}


def normalize_context_hint(
    context: str | None,
    emotions: Iterable[str] = (),
) -> ContextHint:
    """Maps a free-form context tag and emotion labels to one hint."""
    tokens: set[str] = set()
    for text in (context or "", *emotions):
        tokens.update(
            token.strip(".,!?").lower()
            for token in text.replace("_", " ").replace("-", " ").split()
        )
    for hint in HINT_PRECEDENCE:
        if tokens & HINT_KEYWORDS[hint]:
            return hint
    return ContextHint.NONE


def classify_turning_point(kind: ReversalKind, hint: ContextHint) -> TurningPointType:
    """Looks up the semantic type of a reversal."""
    return TURNING_POINT_TYPES[(kind, hint)]


def identify_turning_points(
    trajectory: EmotionalTrajectory,
    *,
    config: DeltaDetectorConfig,
) -> list[TurningPoint]:
    """Finds significant local reversals in a trajectory.

    Args:
        trajectory: Ordered points plus the significance threshold.
        config: Engine thresholds, including the merge window.

    Returns:
        Turning points in time order, merged so that one emotional event is
        reported once.
    """
    points = trajectory.points
    if len(points) < 3:
        return []
    ensure_time_ordered(points)

    candidates: list[TurningPoint] = []
    for index in range(1, len(points) - 1):
        previous, current, following = points[index - 1 : index + 2]
        before = current.mood_score - previous.mood_score
        after = following.mood_score - current.mood_score
        if before * after >= 0:
            continue
        magnitude = abs(before) + abs(after)
        if magnitude <= trajectory.significance:
            continue

        kind = ReversalKind.TROUGH if before < 0 else ReversalKind.PEAK
        hint = normalize_context_hint(current.context, current.emotions)
        turning_type = classify_turning_point(kind, hint)
        candidates.append(
            TurningPoint(
                timestamp=current.timestamp,
                magnitude=magnitude,
                type=turning_type,
                description=_DESCRIPTIONS[turning_type].format(
                    score=f"{current.mood_score:g}"
                ),
                factors=tuple(_turning_point_factors(previous, current, following)),
            )
        )

    merged = merge_turning_points(candidates, config=config)
    logger.debug(
        "Identified %d turning points (%d before merging).",
        len(merged),
        len(candidates),
    )
    return merged


def merge_turning_points(
    turning_points: Sequence[TurningPoint],
    *,
    config: DeltaDetectorConfig,
) -> list[TurningPoint]:
    """Collapses turning points closer than the merge window, keeping the larger."""
    merged: list[TurningPoint] = []
    for turning_point in turning_points:
        if merged and (
            turning_point.timestamp - merged[-1].timestamp
            <= config.turning_point_merge_threshold
        ):
            if turning_point.magnitude > merged[-1].magnitude:
                merged[-1] = turning_point
            continue
        merged.append(turning_point)
    return merged


def _turning_point_factors(
    previous: TrajectoryPoint,
    current: TrajectoryPoint,
    following: TrajectoryPoint,
) -> list[str]:
    factors: list[str] = []
    previous_emotions = set(previous.emotions)
    new_emotions = [
        emotion
        for emotion in dict.fromkeys(following.emotions)
        if emotion not in previous_emotions
    ]
    if new_emotions:
        factors.append(f"New emotions: {', '.join(new_emotions)}")
    if current.context and current.context != previous.context:
        factors.append(f"Context shift: {current.context}")
    total_change = abs(following.mood_score - previous.mood_score)
    factors.append(f"Total mood change: {total_change:.1f} points")
    return factors
