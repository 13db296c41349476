"""Extraction trigger decisions for deltas and turning points."""

from __future__ import annotations

from moodtrace.config import DeltaDetectorConfig
from moodtrace.domain import DeltaType, MoodDelta, TurningPoint


def should_trigger_extraction(delta: MoodDelta, *, config: DeltaDetectorConfig) -> bool:
    """Decides whether a delta should be handed to the extraction pipeline.

    Mood repairs always trigger, declines and celebrations trigger at their
    configured magnitudes, and plateaus never trigger on their own.
    """
    if delta.type is DeltaType.MOOD_REPAIR:
        return True
    if delta.type is DeltaType.DECLINE:
        return delta.magnitude >= config.decline_threshold
    if delta.type is DeltaType.CELEBRATION:
        return delta.magnitude >= config.celebration_threshold
    return False


def should_trigger_on_turning_point(
    turning_point: TurningPoint,
    *,
    config: DeltaDetectorConfig,
) -> bool:
    """Turning points trigger once they clear the general trigger magnitude."""
    return turning_point.magnitude >= config.general_trigger_magnitude


def is_confident(delta: MoodDelta, *, config: DeltaDetectorConfig) -> bool:
    """Returns True when a delta's confidence meets the configured threshold."""
    return delta.confidence >= config.confidence_threshold
