"""Mood delta and trajectory detection engine."""

from .comparator import calculate_delta_magnitude, detect_delta
from .detector import DeltaDetector, TrajectoryReport
from .sequencer import detect_conversational_deltas
from .trajectory import (
    TrajectoryOrderError,
    calculate_mood_velocity,
    classify_transition_type,
    detect_emotional_plateau,
    detect_sudden_transitions,
    segment_by_time_window,
)
from .triggers import should_trigger_extraction, should_trigger_on_turning_point
from .turning_points import ContextHint, identify_turning_points

__all__ = [
    "ContextHint",
    "DeltaDetector",
    "TrajectoryOrderError",
    "TrajectoryReport",
    "calculate_delta_magnitude",
    "calculate_mood_velocity",
    "classify_transition_type",
    "detect_conversational_deltas",
    "detect_delta",
    "detect_emotional_plateau",
    "detect_sudden_transitions",
    "identify_turning_points",
    "segment_by_time_window",
    "should_trigger_extraction",
    "should_trigger_on_turning_point",
]
