"""Conversation-level delta detection over ordered analysis sequences."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import replace

from moodtrace.config import DeltaDetectorConfig
from moodtrace.domain import DeltaType, MoodAnalysisResult, MoodDelta
from moodtrace.engine.comparator import (
    CONFLICTED_CONFIDENCE_CEILING,
    clamp_confidence,
    detect_delta,
    has_conflicting_signals,
)
from moodtrace.utils.logger import get_logger

logger: logging.Logger = get_logger(__name__)

EARLY_SHIFT_FACTOR = "Early conversation shift"
CONCLUSION_SHIFT_FACTOR = "Conversation conclusion shift"
MOOD_REPAIR_CONFIDENCE_MULTIPLIER = 1.1


def detect_conversational_deltas(
    sequence: Sequence[MoodAnalysisResult],
    *,
    config: DeltaDetectorConfig,
) -> list[MoodDelta]:
    """Detects deltas between adjacent analyses of one conversation.

    Args:
        sequence: Analyses in conversation order.
        config: Engine thresholds.

    Returns:
        Retained deltas in order, tagged with their position in the
        conversation.
    """
    if len(sequence) < 2:
        return []

    pair_count = len(sequence) - 1
    deltas: list[MoodDelta] = []
    for pair_index in range(pair_count):
        previous, current = sequence[pair_index], sequence[pair_index + 1]
        delta = detect_delta(current, previous, config=config)
        if delta is None:
            continue
        deltas.append(
            _with_conversational_context(
                delta,
                pair_index=pair_index,
                pair_count=pair_count,
                conflicted=(
                    has_conflicting_signals(current) or has_conflicting_signals(previous)
                ),
            )
        )

    logger.info(
        "Detected %d conversational deltas across %d analyses.",
        len(deltas),
        len(sequence),
    )
    return deltas


def conversation_position_factor(*, pair_index: int, pair_count: int) -> str | None:
    """Maps a pair index to its positional tag, if any.

    Pairs in the first third are early shifts, pairs in the final third are
    conclusion shifts, and middle pairs carry no tag. A lone pair opens the
    conversation.
    """
    if pair_count <= 1:
        return EARLY_SHIFT_FACTOR
    span = pair_count - 1
    if pair_index * 3 < span:
        return EARLY_SHIFT_FACTOR
    if pair_index * 3 > 2 * span:
        return CONCLUSION_SHIFT_FACTOR
    return None


def _with_conversational_context(
    delta: MoodDelta,
    *,
    pair_index: int,
    pair_count: int,
    conflicted: bool = False,
) -> MoodDelta:
    factors = list(delta.factors)
    position_factor = conversation_position_factor(
        pair_index=pair_index,
        pair_count=pair_count,
    )
    if position_factor is not None:
        factors.append(position_factor)

    confidence = delta.confidence
    if delta.type is DeltaType.MOOD_REPAIR:
        confidence = clamp_confidence(confidence * MOOD_REPAIR_CONFIDENCE_MULTIPLIER)
        if conflicted:
            confidence = min(confidence, CONFLICTED_CONFIDENCE_CEILING)
    return replace(delta, confidence=confidence, factors=tuple(factors))
