from .config import DeltaDetectorConfig
from .domain import (
    DeltaDirection,
    DeltaType,
    EmotionalTrajectory,
    MoodAnalysisResult,
    MoodDelta,
    MoodFactor,
    PlateauResult,
    SuddenTransition,
    TrajectoryDirection,
    TrajectoryPoint,
    TransitionType,
    TurningPoint,
    TurningPointType,
    VelocityMethod,
)
from .engine import DeltaDetector, TrajectoryOrderError, TrajectoryReport
from .evaluation import LabeledDeltaCase, TriggerEvaluation, evaluate_trigger_decisions
