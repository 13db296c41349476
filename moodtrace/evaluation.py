"""Accuracy evaluation of delta classification and trigger decisions."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from sklearn.metrics import accuracy_score, confusion_matrix, precision_score, recall_score

from moodtrace.domain import DeltaType, MoodAnalysisResult
from moodtrace.engine.detector import DeltaDetector

NO_DELTA_LABEL = "none"


@dataclass(frozen=True)
class LabeledDeltaCase:
    """One labelled before/after pair with its expected outcome."""

    name: str
    previous: MoodAnalysisResult
    current: MoodAnalysisResult
    expected_type: DeltaType | None
    expected_trigger: bool


@dataclass(frozen=True)
class TriggerEvaluation:
    """Aggregate quality of type classification and trigger decisions."""

    case_count: int
    type_accuracy: float
    trigger_accuracy: float
    trigger_precision: float
    trigger_recall: float
    false_positive_rate: float
    type_labels: tuple[str, ...]
    type_confusion_matrix: tuple[tuple[int, ...], ...]
    mismatched_cases: tuple[str, ...]


def evaluate_trigger_decisions(
    cases: Sequence[LabeledDeltaCase],
    *,
    detector: DeltaDetector,
) -> TriggerEvaluation:
    """Runs labelled cases through a detector and scores its decisions.

    A case whose comparison yields no delta counts as predicted type
    ``"none"`` with no trigger.

    Raises:
        ValueError: If no cases are provided.
    """
    if not cases:
        raise ValueError("Expected at least one labelled case for evaluation.")

    expected_types: list[str] = []
    predicted_types: list[str] = []
    expected_triggers: list[bool] = []
    predicted_triggers: list[bool] = []
    mismatched: list[str] = []
    for case in cases:
        delta = detector.detect_delta(case.current, case.previous)
        predicted_type = NO_DELTA_LABEL if delta is None else str(delta.type)
        predicted_trigger = delta is not None and detector.should_trigger_extraction(delta)
        expected_type = (
            NO_DELTA_LABEL if case.expected_type is None else str(case.expected_type)
        )

        expected_types.append(expected_type)
        predicted_types.append(predicted_type)
        expected_triggers.append(case.expected_trigger)
        predicted_triggers.append(predicted_trigger)
        if predicted_type != expected_type or predicted_trigger != case.expected_trigger:
            mismatched.append(case.name)

    labels = sorted({*expected_types, *predicted_types})
    confusion = confusion_matrix(expected_types, predicted_types, labels=labels)
    trigger_confusion = confusion_matrix(
        expected_triggers,
        predicted_triggers,
        labels=[False, True],
    )
    true_negatives = int(trigger_confusion[0, 0])
    false_positives = int(trigger_confusion[0, 1])
    negatives = true_negatives + false_positives

    return TriggerEvaluation(
        case_count=len(cases),
        type_accuracy=float(accuracy_score(expected_types, predicted_types)),
        trigger_accuracy=float(accuracy_score(expected_triggers, predicted_triggers)),
        trigger_precision=float(
            precision_score(expected_triggers, predicted_triggers, zero_division=0)
        ),
        trigger_recall=float(
            recall_score(expected_triggers, predicted_triggers, zero_division=0)
        ),
        false_positive_rate=(
            float(false_positives) / float(negatives) if negatives > 0 else 0.0
        ),
        type_labels=tuple(labels),
        type_confusion_matrix=tuple(tuple(int(value) for value in row) for row in confusion),
        mismatched_cases=tuple(mismatched),
    )
