"""Delta detection engine bound to one immutable configuration."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from moodtrace.config import DeltaDetectorConfig
from moodtrace.domain import (
    EmotionalTrajectory,
    MoodAnalysisResult,
    MoodDelta,
    PlateauResult,
    SuddenTransition,
    TrajectoryPoint,
    TransitionType,
    TurningPoint,
)
from moodtrace.engine import comparator, sequencer, trajectory, triggers, turning_points


@dataclass(frozen=True)
class TrajectoryReport:
    """Every trajectory-level signal computed for one trajectory."""

    velocity: float
    sudden_transitions: tuple[SuddenTransition, ...]
    plateau: PlateauResult
    turning_points: tuple[TurningPoint, ...]


class DeltaDetector:
    """Stateless facade over the comparator, sequencer, and trajectory analyzers.

    Instances only hold their configuration, so one detector can be shared
    across threads and conversations.
    """

    def __init__(self, config: DeltaDetectorConfig | None = None) -> None:
        self._config = config if config is not None else DeltaDetectorConfig()

    @property
    def config(self) -> DeltaDetectorConfig:
        return self._config

    def detect_delta(
        self,
        current: MoodAnalysisResult,
        previous: MoodAnalysisResult,
    ) -> MoodDelta | None:
        return comparator.detect_delta(current, previous, config=self._config)

    def detect_conversational_deltas(
        self,
        sequence: Sequence[MoodAnalysisResult],
    ) -> list[MoodDelta]:
        return sequencer.detect_conversational_deltas(sequence, config=self._config)

    def calculate_delta_magnitude(self, delta: MoodDelta) -> float:
        return comparator.calculate_delta_magnitude(delta)

    def calculate_mood_velocity(self, points: Sequence[TrajectoryPoint]) -> float:
        return trajectory.calculate_mood_velocity(
            points,
            method=self._config.velocity_method,
        )

    def classify_transition_type(
        self,
        velocity: float,
        points: Sequence[TrajectoryPoint],
    ) -> TransitionType:
        return trajectory.classify_transition_type(velocity, points, config=self._config)

    def detect_sudden_transitions(
        self,
        points: Sequence[TrajectoryPoint],
    ) -> list[SuddenTransition]:
        return trajectory.detect_sudden_transitions(points, config=self._config)

    def detect_emotional_plateau(self, points: Sequence[TrajectoryPoint]) -> PlateauResult:
        return trajectory.detect_emotional_plateau(points, config=self._config)

    def segment_conversations(
        self,
        points: Sequence[TrajectoryPoint],
    ) -> list[list[TrajectoryPoint]]:
        """Groups points into conversations separated by the configured window."""
        return trajectory.segment_by_time_window(
            points,
            time_window=self._config.time_window,
        )

    def identify_turning_points(
        self,
        emotional_trajectory: EmotionalTrajectory,
    ) -> list[TurningPoint]:
        return turning_points.identify_turning_points(
            emotional_trajectory,
            config=self._config,
        )

    def should_trigger_extraction(self, delta: MoodDelta) -> bool:
        return triggers.should_trigger_extraction(delta, config=self._config)

    def should_trigger_on_turning_point(self, turning_point: TurningPoint) -> bool:
        return triggers.should_trigger_on_turning_point(
            turning_point,
            config=self._config,
        )

    def is_confident(self, delta: MoodDelta) -> bool:
        return triggers.is_confident(delta, config=self._config)

    def analyze_trajectory(self, emotional_trajectory: EmotionalTrajectory) -> TrajectoryReport:
        """Runs every trajectory analyzer over one trajectory."""
        points = emotional_trajectory.points
        return TrajectoryReport(
            velocity=self.calculate_mood_velocity(points),
            sudden_transitions=tuple(self.detect_sudden_transitions(points)),
            plateau=self.detect_emotional_plateau(points),
            turning_points=tuple(self.identify_turning_points(emotional_trajectory)),
        )
