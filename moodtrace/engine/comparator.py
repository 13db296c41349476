"""Pairwise mood comparison: significance, classification, and confidence."""

from __future__ import annotations

import logging

from moodtrace.config import DeltaDetectorConfig
from moodtrace.domain import (
    DeltaDirection,
    DeltaType,
    MoodAnalysisResult,
    MoodDelta,
)
from moodtrace.utils.logger import get_logger

logger: logging.Logger = get_logger(__name__)

HEALING_DESCRIPTORS = frozenset(
    {"processing", "understood", "accepted", "comforted", "healing"}
)
POSITIVE_EMOTION_WORDS = frozenset(
    {
        "happy", "joy", "joyful", "grateful", "thankful", "relieved", "hopeful",
        "hope", "excited", "proud", "calm", "content", "supported", "loved",
        "ecstatic", "triumphant", "overjoyed", "pleased", "satisfied", "better",
        "good", "great", "wonderful", "amazing", "fantastic",
    }
)
NEGATIVE_EMOTION_WORDS = frozenset(
    {
        "sad", "anxious", "angry", "afraid", "scared", "overwhelmed", "hopeless",
        "lonely", "frustrated", "upset", "depressed", "worried", "stressed",
        "hurt", "ashamed", "guilty", "terrible", "awful", "devastated", "worse",
        "vulnerable", "disappointed",
    }
)

_MODERATE_REPAIR_CEILING = 4.5
_MODERATE_REPAIR_FLOOR = 5.5
_MODERATE_REPAIR_MAGNITUDE = 2.5
_HEALING_REPAIR_CEILING = 3.5

_NOVELTY_BOOST_PER_ITEM = 0.03
_NOVELTY_BOOST_CAP = 0.15
_SPARSE_EVIDENCE_ITEMS = 2
_SPARSE_EVIDENCE_PENALTY = 0.1
_CONFLICT_PENALTY = 0.1
_CONFLICT_PENALTY_CAP = 0.15
CONFLICTED_CONFIDENCE_CEILING = 0.85
_STRUCTURAL_SHIFT_BOOST = 0.05
_STRONG_REPAIR_MAGNITUDE = 3.5
_PEAK_CELEBRATION_SCORE = 8.0
_TYPE_BOOST = 0.05
_EXPRESSIVENESS_GROWTH_RATIO = 1.5


def detect_delta(
    current: MoodAnalysisResult,
    previous: MoodAnalysisResult,
    *,
    config: DeltaDetectorConfig,
) -> MoodDelta | None:
    """Compares two analyses and classifies the change between them.

    Args:
        current: The later analysis.
        previous: The earlier analysis.
        config: Engine thresholds.

    Returns:
        A classified delta, or ``None`` when the score change is below the
        configured significance floor.
    """
    magnitude = abs(float(current.score) - float(previous.score))
    if magnitude < config.minimum_magnitude:
        logger.debug(
            "Score change %.2f below significance floor %.2f.",
            magnitude,
            config.minimum_magnitude,
        )
        return None

    direction = (
        DeltaDirection.POSITIVE
        if current.score > previous.score
        else DeltaDirection.NEGATIVE
    )
    delta_type = classify_delta_type(
        current,
        previous,
        magnitude=magnitude,
        direction=direction,
        config=config,
    )
    factors = describe_delta_factors(current, previous)
    confidence = calculate_delta_confidence(
        current,
        previous,
        magnitude=magnitude,
        delta_type=delta_type,
    )
    logger.debug(
        "Detected %s delta (%s, magnitude=%.2f, confidence=%.2f).",
        delta_type,
        direction,
        magnitude,
        confidence,
    )
    return MoodDelta(
        magnitude=magnitude,
        direction=direction,
        type=delta_type,
        confidence=confidence,
        factors=tuple(factors) if factors else ("Basic delta detected",),
    )


def classify_delta_type(
    current: MoodAnalysisResult,
    previous: MoodAnalysisResult,
    *,
    magnitude: float,
    direction: DeltaDirection,
    config: DeltaDetectorConfig,
) -> DeltaType:
    """Classifies a significant change by the mood states it crosses."""
    if direction is DeltaDirection.POSITIVE and _is_mood_repair(
        current, previous, magnitude=magnitude, config=config
    ):
        return DeltaType.MOOD_REPAIR
    if direction is DeltaDirection.NEGATIVE:
        return DeltaType.DECLINE
    if (
        previous.score > config.positive_baseline_floor
        and current.score > config.celebration_score_floor
    ):
        return DeltaType.CELEBRATION
    return DeltaType.PLATEAU


def _is_mood_repair(
    current: MoodAnalysisResult,
    previous: MoodAnalysisResult,
    *,
    magnitude: float,
    config: DeltaDetectorConfig,
) -> bool:
    """Checks whether a rise crosses from a distressed state into relief."""
    if magnitude < config.repair_minimum_magnitude:
        return False
    if (
        previous.score < config.distressed_score_ceiling
        and current.score > config.recovered_score_floor
    ):
        return True
    if (
        previous.score < _MODERATE_REPAIR_CEILING
        and current.score > _MODERATE_REPAIR_FLOOR
        and magnitude >= _MODERATE_REPAIR_MAGNITUDE
    ):
        return True
    return previous.score < _HEALING_REPAIR_CEILING and any(
        descriptor.lower() in HEALING_DESCRIPTORS for descriptor in current.descriptors
    )


def describe_delta_factors(
    current: MoodAnalysisResult,
    previous: MoodAnalysisResult,
) -> list[str]:
    """Builds human-readable reasons for a delta."""
    factors: list[str] = []

    previous_descriptors = set(previous.descriptors)
    new_descriptors = [
        descriptor
        for descriptor in dict.fromkeys(current.descriptors)
        if descriptor not in previous_descriptors
    ]
    if new_descriptors:
        factors.append(f"New emotional expressions: {', '.join(new_descriptors)}")

    current_dominant = current.dominant_factor
    previous_dominant = previous.dominant_factor
    if (
        current_dominant is not None
        and previous_dominant is not None
        and current_dominant.type != previous_dominant.type
    ):
        factors.append(f"Shift from {previous_dominant.type} to {current_dominant.type}")

    current_evidence = current.evidence_count
    previous_evidence = previous.evidence_count
    if (
        current_evidence > previous_evidence
        and current_evidence > previous_evidence * _EXPRESSIVENESS_GROWTH_RATIO
    ):
        factors.append("Increased emotional expressiveness")
    return factors


def calculate_delta_confidence(
    current: MoodAnalysisResult,
    previous: MoodAnalysisResult,
    *,
    magnitude: float,
    delta_type: DeltaType,
) -> float:
    """Combines input confidence with evidence quality into one score in [0, 1]."""
    confidence = (float(current.confidence) + float(previous.confidence)) / 2.0

    previous_evidence = {
        item.lower() for factor in previous.factors for item in factor.evidence
    }
    novel_items = sum(
        1
        for factor in current.factors
        for item in factor.evidence
        if item.lower() not in previous_evidence
    )
    confidence += min(_NOVELTY_BOOST_CAP, novel_items * _NOVELTY_BOOST_PER_ITEM)
    if current.evidence_count + previous.evidence_count < _SPARSE_EVIDENCE_ITEMS:
        confidence -= _SPARSE_EVIDENCE_PENALTY

    conflicted = sum(1 for analysis in (current, previous) if has_conflicting_signals(analysis))
    confidence -= min(_CONFLICT_PENALTY_CAP, conflicted * _CONFLICT_PENALTY)

    current_dominant = current.dominant_factor
    previous_dominant = previous.dominant_factor
    if (
        current_dominant is not None
        and previous_dominant is not None
        and current_dominant.type != previous_dominant.type
    ):
        confidence += _STRUCTURAL_SHIFT_BOOST

    if delta_type is DeltaType.MOOD_REPAIR and magnitude >= _STRONG_REPAIR_MAGNITUDE:
        confidence += _TYPE_BOOST
    if delta_type is DeltaType.CELEBRATION and current.score > _PEAK_CELEBRATION_SCORE:
        confidence += _TYPE_BOOST

    # Conflicted comparisons stay below 0.9.
    if conflicted:
        confidence = min(confidence, CONFLICTED_CONFIDENCE_CEILING)
    return clamp_confidence(confidence)


def has_conflicting_signals(analysis: MoodAnalysisResult) -> bool:
    """Returns True when positive and negative emotion words co-occur."""
    tokens: set[str] = set()
    for text in (*analysis.descriptors, *_iter_evidence(analysis)):
        tokens.update(word.strip(".,!?'\"").lower() for word in text.split())
    return bool(tokens & POSITIVE_EMOTION_WORDS) and bool(
        tokens & NEGATIVE_EMOTION_WORDS
    )


def _iter_evidence(analysis: MoodAnalysisResult) -> list[str]:
    return [item for factor in analysis.factors for item in factor.evidence]


def calculate_delta_magnitude(delta: MoodDelta) -> float:
    """Returns the confidence-weighted magnitude used to rank deltas."""
    return float(delta.magnitude) * float(delta.confidence)


def clamp_confidence(value: float) -> float:
    """Clamps a confidence value into [0, 1]."""
    return float(min(1.0, max(0.0, value)))
