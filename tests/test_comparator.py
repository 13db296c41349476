"""Tests for pairwise delta detection and classification."""

from __future__ import annotations

import pytest

from moodtrace.config import DeltaDetectorConfig
from moodtrace.domain import DeltaDirection, DeltaType, MoodAnalysisResult, MoodFactor
from moodtrace.engine.comparator import (
    calculate_delta_magnitude,
    detect_delta,
    has_conflicting_signals,
)
from moodtrace.engine.triggers import should_trigger_extraction

CONFIG = DeltaDetectorConfig()


def _analysis(
    *,
    score: float,
    confidence: float = 0.8,
    descriptors: tuple[str, ...] = (),
    factor_type: str = "emotional_words",
    weight: float = 0.7,
    evidence: tuple[str, ...] = (),
) -> MoodAnalysisResult:
    """Builds a single-factor analysis fixture."""
    return MoodAnalysisResult(
        score=score,
        confidence=confidence,
        descriptors=descriptors,
        factors=(MoodFactor(type=factor_type, weight=weight, evidence=evidence),),
    )


def test_detect_delta_ignores_changes_below_significance_floor() -> None:
    """A 1.2-point change is noise and yields no delta."""
    previous = _analysis(score=5.0, evidence=("fine",))
    current = _analysis(score=6.2, evidence=("good",))

    assert detect_delta(current, previous, config=CONFIG) is None


def test_detect_delta_reports_moderate_positive_shift() -> None:
    """A 1.8-point rise from a neutral baseline is a positive plateau delta."""
    previous = _analysis(
        score=4.0,
        confidence=0.8,
        descriptors=("neutral",),
        evidence=("okay",),
    )
    current = _analysis(
        score=5.8,
        confidence=0.85,
        descriptors=("neutral", "hopeful"),
        evidence=("feeling better", "hopeful"),
    )

    delta = detect_delta(current, previous, config=CONFIG)

    assert delta is not None
    assert delta.magnitude == pytest.approx(1.8)
    assert delta.direction is DeltaDirection.POSITIVE
    assert delta.type is DeltaType.PLATEAU
    assert delta.confidence > 0.7
    assert "New emotional expressions: hopeful" in delta.factors


def test_detect_delta_classifies_negative_shift_as_decline() -> None:
    """A 2.5-point drop is a decline with an exact magnitude."""
    previous = _analysis(score=7.5, descriptors=("content",), evidence=("good day",))
    current = _analysis(
        score=5.0,
        descriptors=("worried",),
        evidence=("not sure anymore", "stressed"),
    )

    delta = detect_delta(current, previous, config=CONFIG)

    assert delta is not None
    assert delta.magnitude == 2.5
    assert delta.direction is DeltaDirection.NEGATIVE
    assert delta.type is DeltaType.DECLINE
    assert delta.confidence > 0.7
    assert should_trigger_extraction(delta, config=CONFIG)


def test_detect_delta_classifies_crisis_to_relief_as_mood_repair() -> None:
    """Rising from 2.8 to 6.5 crosses from distress into relief."""
    previous = _analysis(
        score=2.8,
        confidence=0.85,
        descriptors=("anxious", "overwhelmed"),
        factor_type="psychological_indicators",
        weight=0.8,
        evidence=("cant handle this", "too much"),
    )
    current = _analysis(
        score=6.5,
        confidence=0.9,
        descriptors=("relieved", "supported"),
        factor_type="relationship_context",
        weight=0.85,
        evidence=("talked it through", "not alone", "thankful"),
    )

    delta = detect_delta(current, previous, config=CONFIG)

    assert delta is not None
    assert delta.type is DeltaType.MOOD_REPAIR
    assert delta.magnitude == pytest.approx(3.7)
    assert delta.direction is DeltaDirection.POSITIVE
    assert "Shift from psychological_indicators to relationship_context" in delta.factors
    assert should_trigger_extraction(delta, config=CONFIG)


def test_detect_delta_recognizes_healing_language_as_repair() -> None:
    """A distressed baseline followed by healing descriptors is a repair."""
    previous = _analysis(score=3.0, descriptors=("hurt",), evidence=("it hurts",))
    current = _analysis(
        score=5.2,
        descriptors=("comforted",),
        evidence=("that helps", "thank you"),
    )

    delta = detect_delta(current, previous, config=CONFIG)

    assert delta is not None
    assert delta.type is DeltaType.MOOD_REPAIR


def test_detect_delta_classifies_rise_from_positive_baseline_as_celebration() -> None:
    """An already-positive mood climbing higher is a celebration."""
    previous = _analysis(
        score=6.5,
        descriptors=("happy", "content"),
        evidence=("good", "satisfied"),
    )
    current = _analysis(
        score=9.2,
        confidence=0.95,
        descriptors=("ecstatic", "triumphant"),
        weight=0.9,
        evidence=("amazing news", "so excited", "incredible"),
    )

    delta = detect_delta(current, previous, config=CONFIG)

    assert delta is not None
    assert delta.type is DeltaType.CELEBRATION
    assert delta.magnitude == pytest.approx(2.7)
    assert not should_trigger_extraction(delta, config=CONFIG)
    lowered = CONFIG.with_overrides(celebration_threshold=2.5)
    assert should_trigger_extraction(delta, config=lowered)


def test_detect_delta_keeps_unremarkable_rise_as_plateau() -> None:
    """A 1.7-point rise that crosses no state boundary stays a plateau delta."""
    previous = _analysis(score=5.5, descriptors=("content",), evidence=("fine", "okay"))
    current = _analysis(score=7.2, descriptors=("pleased",), evidence=("good", "pleased"))

    delta = detect_delta(current, previous, config=CONFIG)

    assert delta is not None
    assert delta.type is DeltaType.PLATEAU
    assert not should_trigger_extraction(delta, config=CONFIG)


@pytest.mark.parametrize(
    ("before", "after", "expected"),
    [
        (3.0, 5.0, DeltaDirection.POSITIVE),
        (5.0, 3.0, DeltaDirection.NEGATIVE),
        (8.0, 9.5, DeltaDirection.POSITIVE),
        (9.5, 1.0, DeltaDirection.NEGATIVE),
    ],
)
def test_detect_delta_direction_matches_score_sign(
    before: float,
    after: float,
    expected: DeltaDirection,
) -> None:
    """Direction is positive exactly when the later score is higher."""
    delta = detect_delta(
        _analysis(score=after, evidence=("later",)),
        _analysis(score=before, evidence=("earlier",)),
        config=CONFIG,
    )

    assert delta is not None
    assert delta.direction is expected
    assert delta.magnitude == abs(after - before)


def test_detect_delta_accepts_change_exactly_at_floor() -> None:
    """A change equal to the floor is significant."""
    delta = detect_delta(_analysis(score=3.5), _analysis(score=5.0), config=CONFIG)

    assert delta is not None
    assert delta.magnitude == 1.5


def test_detect_delta_reports_increased_expressiveness() -> None:
    """Evidence growing well beyond the previous analysis is called out."""
    previous = _analysis(score=4.5, evidence=("meh",))
    current = _analysis(score=6.3, evidence=("so glad", "really good", "proud"))

    delta = detect_delta(current, previous, config=CONFIG)

    assert delta is not None
    assert "Increased emotional expressiveness" in delta.factors


def test_detect_delta_falls_back_to_basic_factor() -> None:
    """With no descriptor, structure, or evidence change the factor is generic."""
    previous = _analysis(score=5.0, descriptors=("calm",), evidence=("fine",))
    current = _analysis(score=3.0, descriptors=("calm",), evidence=("fine",))

    delta = detect_delta(current, previous, config=CONFIG)

    assert delta is not None
    assert delta.factors == ("Basic delta detected",)


def test_detect_delta_handles_analyses_without_factors() -> None:
    """Empty factor and descriptor collections are valid input."""
    previous = MoodAnalysisResult(score=2.0, confidence=0.5)
    current = MoodAnalysisResult(score=8.0, confidence=0.5)

    delta = detect_delta(current, previous, config=CONFIG)

    assert delta is not None
    assert delta.type is DeltaType.MOOD_REPAIR
    # Sparse-evidence penalty plus the strong-repair boost.
    assert delta.confidence == pytest.approx(0.45)


def test_conflicting_signals_lower_confidence() -> None:
    """Mixed positive and negative language in one analysis reduces confidence."""
    previous = _analysis(score=4.0, descriptors=("neutral",), evidence=("okay",))
    clean = _analysis(score=6.0, descriptors=("happy",), evidence=("good news",))
    conflicted = _analysis(score=6.0, descriptors=("happy", "sad"), evidence=("good news",))

    clean_delta = detect_delta(clean, previous, config=CONFIG)
    conflicted_delta = detect_delta(conflicted, previous, config=CONFIG)

    assert has_conflicting_signals(conflicted)
    assert not has_conflicting_signals(clean)
    assert clean_delta is not None and conflicted_delta is not None
    assert conflicted_delta.confidence < clean_delta.confidence
    assert conflicted_delta.confidence < 0.9


def test_confidence_is_clamped_to_one() -> None:
    """Boosts never push confidence above 1.0."""
    previous = _analysis(
        score=2.0,
        confidence=1.0,
        factor_type="psychological_indicators",
        evidence=("alone",),
    )
    current = _analysis(
        score=8.0,
        confidence=1.0,
        factor_type="relationship_context",
        evidence=("heard", "seen", "held", "helped", "calmer", "lighter"),
    )

    delta = detect_delta(current, previous, config=CONFIG)

    assert delta is not None
    assert delta.confidence == 1.0


def test_calculate_delta_magnitude_weights_by_confidence() -> None:
    """The weighted magnitude is magnitude times confidence."""
    delta = detect_delta(
        _analysis(score=7.5, evidence=("fine",)),
        _analysis(score=4.5, evidence=("fine",)),
        config=CONFIG,
    )

    assert delta is not None
    assert calculate_delta_magnitude(delta) == pytest.approx(delta.magnitude * delta.confidence)


def test_detect_delta_is_idempotent() -> None:
    """Repeated calls on the same inputs return equal deltas."""
    previous = _analysis(score=2.8, evidence=("too much",))
    current = _analysis(score=6.5, evidence=("relieved",))

    first = detect_delta(current, previous, config=CONFIG)
    second = detect_delta(current, previous, config=CONFIG)

    assert first == second


def test_conflicted_delta_stays_below_clear_confidence_despite_rich_evidence() -> None:
    """Novel evidence and confident inputs cannot lift a conflicted delta to 0.9."""
    previous = _analysis(score=5.0, confidence=0.9, evidence=("okay",))
    current = _analysis(
        score=7.0,
        confidence=0.9,
        descriptors=("happy", "anxious"),
        evidence=("got the job", "so happy", "can't sleep", "nervous", "big change"),
    )

    delta = detect_delta(current, previous, config=CONFIG)

    assert has_conflicting_signals(current)
    assert delta is not None
    assert delta.confidence < 0.9
    assert delta.confidence == pytest.approx(0.85)
