"""Typed, immutable configuration for the delta detection engine."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from datetime import timedelta

from moodtrace.domain import VelocityMethod

_DURATION_FIELDS = frozenset(
    {"time_window", "turning_point_merge_threshold", "plateau_minimum_duration"}
)


@dataclass(frozen=True)
class DeltaDetectorConfig:
    """Thresholds controlling delta classification, trajectories, and triggers."""

    minimum_magnitude: float = 1.5
    time_window: timedelta = timedelta(hours=1)
    confidence_threshold: float = 0.7
    celebration_threshold: float = 3.0
    decline_threshold: float = 2.5
    general_trigger_multiplier: float = 1.5
    plateau_variance_threshold: float = 0.5
    turning_point_merge_threshold: timedelta = timedelta(minutes=30)
    distressed_score_ceiling: float = 4.0
    recovered_score_floor: float = 6.0
    repair_minimum_magnitude: float = 2.0
    positive_baseline_floor: float = 6.0
    celebration_score_floor: float = 7.0
    sudden_velocity_threshold: float = 20.0
    sudden_magnitude_threshold: float = 2.0
    plateau_minimum_duration: timedelta = timedelta(hours=3)
    velocity_method: VelocityMethod = VelocityMethod.ENDPOINT

    def __post_init__(self) -> None:
        _validate_config(self)

    @property
    def general_trigger_magnitude(self) -> float:
        """Magnitude at which trajectory-level events trigger extraction."""
        return self.minimum_magnitude * self.general_trigger_multiplier

    def with_overrides(self, **overrides: object) -> DeltaDetectorConfig:
        """Returns a validated copy with selected fields replaced."""
        return replace(self, **_normalize_options(overrides))

    @classmethod
    def from_options(cls, options: Mapping[str, object]) -> DeltaDetectorConfig:
        """Builds a config from a plain options record.

        Duration options accept either ``timedelta`` values or seconds.

        Raises:
            ValueError: If an option name is unknown or a value is invalid.
        """
        return cls(**_normalize_options(options))


def _normalize_options(options: Mapping[str, object]) -> dict[str, object]:
    """Checks option names and coerces duration and enum values."""
    known = {item.name for item in fields(DeltaDetectorConfig)}
    unknown = sorted(set(options) - known)
    if unknown:
        raise ValueError(f"Unknown delta detector options: {', '.join(unknown)}.")

    normalized: dict[str, object] = {}
    for name, value in options.items():
        if name in _DURATION_FIELDS and not isinstance(value, timedelta):
            if not isinstance(value, int | float):
                raise ValueError(f"{name} must be a timedelta or a number of seconds.")
            value = timedelta(seconds=float(value))
        elif name == "velocity_method":
            value = VelocityMethod(str(value))
        normalized[name] = value
    return normalized


def _validate_config(config: DeltaDetectorConfig) -> None:
    """Validates thresholds before the engine uses them."""
    non_negative = (
        "minimum_magnitude",
        "celebration_threshold",
        "decline_threshold",
        "general_trigger_multiplier",
        "plateau_variance_threshold",
        "repair_minimum_magnitude",
        "sudden_velocity_threshold",
        "sudden_magnitude_threshold",
    )
    for name in non_negative:
        if float(getattr(config, name)) < 0.0:
            raise ValueError(f"{name} cannot be negative.")
    if not 0.0 <= config.confidence_threshold <= 1.0:
        raise ValueError("confidence_threshold must be between 0 and 1.")
    if config.time_window <= timedelta(0):
        raise ValueError("time_window must be positive.")
    if config.turning_point_merge_threshold < timedelta(0):
        raise ValueError("turning_point_merge_threshold cannot be negative.")
    if config.plateau_minimum_duration < timedelta(0):
        raise ValueError("plateau_minimum_duration cannot be negative.")
    if config.distressed_score_ceiling > config.recovered_score_floor:
        raise ValueError(
            "distressed_score_ceiling must be less than or equal to "
            "recovered_score_floor."
        )
