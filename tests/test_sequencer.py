"""Tests for conversation-level delta sequencing."""

from __future__ import annotations

import pytest

from moodtrace.config import DeltaDetectorConfig
from moodtrace.domain import DeltaDirection, DeltaType, MoodAnalysisResult, MoodFactor
from moodtrace.engine.comparator import detect_delta
from moodtrace.engine.sequencer import (
    CONCLUSION_SHIFT_FACTOR,
    EARLY_SHIFT_FACTOR,
    conversation_position_factor,
    detect_conversational_deltas,
)

CONFIG = DeltaDetectorConfig()


def _analysis(score: float, *evidence: str) -> MoodAnalysisResult:
    """Builds an analysis fixture with one emotional-words factor."""
    return MoodAnalysisResult(
        score=score,
        confidence=0.8,
        descriptors=(),
        factors=(MoodFactor(type="emotional_words", weight=0.7, evidence=evidence),),
    )


@pytest.mark.parametrize("length", [0, 1])
def test_short_sequences_yield_no_deltas(length: int) -> None:
    """Nothing can be compared with fewer than two analyses."""
    sequence = [_analysis(5.0, "fine")][:length]

    assert detect_conversational_deltas(sequence, config=CONFIG) == []


def test_sequence_keeps_significant_pairs_in_order() -> None:
    """Insignificant pairs are dropped and the rest keep conversation order."""
    sequence = [
        _analysis(4.0, "okay"),
        _analysis(5.8, "better"),
        _analysis(5.9, "better"),
        _analysis(7.6, "great"),
    ]

    deltas = detect_conversational_deltas(sequence, config=CONFIG)

    assert [round(delta.magnitude, 1) for delta in deltas] == [1.8, 1.7]
    assert all(delta.direction is DeltaDirection.POSITIVE for delta in deltas)
    assert EARLY_SHIFT_FACTOR in deltas[0].factors
    assert CONCLUSION_SHIFT_FACTOR in deltas[1].factors


def test_middle_of_conversation_shift_has_no_position_tag() -> None:
    """Pairs in the middle third are not tagged."""
    sequence = [
        _analysis(5.0, "fine"),
        _analysis(5.1, "fine"),
        _analysis(7.0, "good"),
        _analysis(7.1, "good"),
        _analysis(7.2, "good"),
    ]

    deltas = detect_conversational_deltas(sequence, config=CONFIG)

    assert len(deltas) == 1
    assert EARLY_SHIFT_FACTOR not in deltas[0].factors
    assert CONCLUSION_SHIFT_FACTOR not in deltas[0].factors


def test_mood_repair_confidence_is_boosted() -> None:
    """Repairs found in a conversation get a confidence boost."""
    previous = _analysis(3.0, "scared")
    current = _analysis(6.5, "relieved", "thankful")
    standalone = detect_delta(current, previous, config=CONFIG)

    deltas = detect_conversational_deltas([previous, current], config=CONFIG)

    assert standalone is not None
    assert deltas[0].type is DeltaType.MOOD_REPAIR
    assert deltas[0].confidence == pytest.approx(min(1.0, standalone.confidence * 1.1))
    assert deltas[0].confidence > 0.8
    assert deltas[0].factors[-1] == EARLY_SHIFT_FACTOR


def test_non_repair_confidence_is_unchanged() -> None:
    """Only repairs are boosted."""
    previous = _analysis(7.0, "good")
    current = _analysis(4.0, "upset")
    standalone = detect_delta(current, previous, config=CONFIG)

    deltas = detect_conversational_deltas([previous, current], config=CONFIG)

    assert standalone is not None
    assert deltas[0].confidence == standalone.confidence


@pytest.mark.parametrize(
    ("pair_index", "pair_count", "expected"),
    [
        (0, 1, EARLY_SHIFT_FACTOR),
        (0, 2, EARLY_SHIFT_FACTOR),
        (1, 2, CONCLUSION_SHIFT_FACTOR),
        (1, 3, None),
        (0, 4, EARLY_SHIFT_FACTOR),
        (1, 4, None),
        (2, 4, None),
        (3, 4, CONCLUSION_SHIFT_FACTOR),
    ],
)
def test_conversation_position_factor(
    pair_index: int,
    pair_count: int,
    expected: str | None,
) -> None:
    """Thirds of the conversation map to early, untagged, and conclusion."""
    assert (
        conversation_position_factor(pair_index=pair_index, pair_count=pair_count)
        == expected
    )


def test_sequencer_is_idempotent() -> None:
    """Repeated calls on the same sequence give the same result."""
    sequence = [_analysis(2.5, "alone"), _analysis(6.8, "heard"), _analysis(4.0, "tired")]

    assert detect_conversational_deltas(sequence, config=CONFIG) == (
        detect_conversational_deltas(sequence, config=CONFIG)
    )


def test_conflicted_mood_repair_boost_keeps_confidence_below_clear_level() -> None:
    """The repair boost does not lift a conflicted comparison to 0.9."""
    previous = _analysis(2.5, "too much")
    current = MoodAnalysisResult(
        score=6.8,
        confidence=0.8,
        descriptors=("relieved", "scared"),
        factors=(
            MoodFactor(
                type="emotional_words",
                weight=0.7,
                evidence=("talked to her", "lighter", "still shaky", "slept", "ate"),
            ),
        ),
    )

    deltas = detect_conversational_deltas([previous, current], config=CONFIG)

    assert deltas[0].type is DeltaType.MOOD_REPAIR
    assert deltas[0].confidence < 0.9
    assert deltas[0].confidence == pytest.approx(0.85)
