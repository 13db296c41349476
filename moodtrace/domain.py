"""Domain data structures for mood analyses, deltas, and trajectories."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from enum import StrEnum


class DeltaDirection(StrEnum):
    """Sign of a score change."""

    POSITIVE = "positive"
    NEGATIVE = "negative"


class DeltaType(StrEnum):
    """Closed set of delta classifications."""

    PLATEAU = "plateau"
    DECLINE = "decline"
    MOOD_REPAIR = "mood_repair"
    CELEBRATION = "celebration"


class TrajectoryDirection(StrEnum):
    """Caller-supplied hint describing the overall trajectory shape."""

    IMPROVING = "improving"
    DECLINING = "declining"
    VOLATILE = "volatile"
    STABLE = "stable"


class TurningPointType(StrEnum):
    """Semantic label attached to a trajectory reversal."""

    BREAKTHROUGH = "breakthrough"
    SETBACK = "setback"
    SUPPORT_RECEIVED = "support_received"
    REALIZATION = "realization"


class TransitionType(StrEnum):
    """Speed classification of a point-to-point change."""

    SUDDEN = "sudden"
    GRADUAL = "gradual"


class VelocityMethod(StrEnum):
    """How mood velocity is estimated over a point window."""

    ENDPOINT = "endpoint"
    LEAST_SQUARES = "least_squares"


@dataclass(frozen=True)
class MoodFactor:
    """One weighted evidence group produced by an upstream scorer."""

    type: str
    weight: float
    evidence: tuple[str, ...] = ()
    description: str = ""


@dataclass(frozen=True)
class MoodAnalysisResult:
    """Point-in-time mood score with its supporting evidence."""

    score: float
    confidence: float
    descriptors: tuple[str, ...] = ()
    factors: tuple[MoodFactor, ...] = ()

    @property
    def evidence_count(self) -> int:
        """Total number of evidence items across all factors."""
        return sum(len(factor.evidence) for factor in self.factors)

    @property
    def dominant_factor(self) -> MoodFactor | None:
        """Highest-weighted factor, first one winning ties."""
        if not self.factors:
            return None
        dominant = self.factors[0]
        for factor in self.factors[1:]:
            if factor.weight > dominant.weight:
                dominant = factor
        return dominant


@dataclass(frozen=True)
class MoodDelta:
    """A classified, significant change between two mood analyses."""

    magnitude: float
    direction: DeltaDirection
    type: DeltaType
    confidence: float
    factors: tuple[str, ...] = ()


@dataclass(frozen=True)
class TrajectoryPoint:
    """A timestamped mood score inside a conversation."""

    timestamp: datetime
    mood_score: float
    message_id: str | None = None
    emotions: tuple[str, ...] = ()
    context: str | None = None


@dataclass(frozen=True)
class TurningPoint:
    """A local reversal in a trajectory above its significance threshold."""

    timestamp: datetime
    magnitude: float
    type: TurningPointType
    description: str = ""
    factors: tuple[str, ...] = ()


@dataclass(frozen=True)
class EmotionalTrajectory:
    """Trajectory analysis request and its turning-point output slot."""

    points: tuple[TrajectoryPoint, ...]
    direction: TrajectoryDirection
    significance: float
    turning_points: tuple[TurningPoint, ...] = field(default=())

    def with_turning_points(
        self, turning_points: tuple[TurningPoint, ...] | list[TurningPoint]
    ) -> EmotionalTrajectory:
        """Returns a copy of this trajectory carrying the given turning points."""
        return replace(self, turning_points=tuple(turning_points))


@dataclass(frozen=True)
class SuddenTransition:
    """An abrupt point-to-point change."""

    type: TransitionType
    magnitude: float
    timestamp: datetime
    velocity: float
    direction: DeltaDirection


@dataclass(frozen=True)
class PlateauResult:
    """Outcome of plateau detection over a point window."""

    is_plateau: bool
    average_score: float
    duration: timedelta
