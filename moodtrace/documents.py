"""JSON input loading for the command line interface."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from moodtrace.domain import MoodAnalysisResult, MoodFactor, TrajectoryPoint
from moodtrace.utils.logger import get_logger

logger: logging.Logger = get_logger(__name__)


class AnalysisInputError(ValueError):
    """Raised when an analysis document cannot be read or parsed."""


@dataclass(frozen=True)
class AnalysisDocument:
    """Analyses and trajectory points read from one input file."""

    analyses: tuple[MoodAnalysisResult, ...]
    points: tuple[TrajectoryPoint, ...]


def load_analysis_document(path: str | Path) -> AnalysisDocument:
    """Reads a JSON document with ``analyses`` and/or ``points`` arrays.

    Raises:
        AnalysisInputError: If the file is missing or malformed.
    """
    file_path = Path(path)
    try:
        payload = json.loads(file_path.read_text(encoding="utf-8"))
    except FileNotFoundError as err:
        raise AnalysisInputError(f"Input file not found: {file_path}") from err
    except json.JSONDecodeError as err:
        raise AnalysisInputError(f"Invalid JSON in {file_path}: {err}") from err

    document = parse_analysis_document(payload)
    logger.info(
        "Loaded %d analyses and %d points from %s.",
        len(document.analyses),
        len(document.points),
        file_path,
    )
    return document


def parse_analysis_document(payload: object) -> AnalysisDocument:
    """Converts decoded JSON into domain values."""
    if not isinstance(payload, Mapping):
        raise AnalysisInputError("Analysis document must be a JSON object.")
    analyses = payload.get("analyses", [])
    points = payload.get("points", [])
    if not isinstance(analyses, list) or not isinstance(points, list):
        raise AnalysisInputError("'analyses' and 'points' must be JSON arrays.")
    return AnalysisDocument(
        analyses=tuple(_parse_analysis(item, index) for index, item in enumerate(analyses)),
        points=tuple(_parse_point(item, index) for index, item in enumerate(points)),
    )


def _parse_analysis(item: object, index: int) -> MoodAnalysisResult:
    if not isinstance(item, Mapping):
        raise AnalysisInputError(f"Analysis {index} must be a JSON object.")
    try:
        factors = tuple(
            MoodFactor(
                type=str(factor["type"]),
                weight=float(factor["weight"]),
                evidence=tuple(str(evidence) for evidence in factor.get("evidence", [])),
                description=str(factor.get("description", "")),
            )
            for factor in item.get("factors", [])
        )
        return MoodAnalysisResult(
            score=float(item["score"]),
            confidence=float(item["confidence"]),
            descriptors=tuple(str(label) for label in item.get("descriptors", [])),
            factors=factors,
        )
    except (KeyError, TypeError, ValueError) as err:
        raise AnalysisInputError(f"Analysis {index} is malformed: {err}") from err


def _parse_point(item: object, index: int) -> TrajectoryPoint:
    if not isinstance(item, Mapping):
        raise AnalysisInputError(f"Point {index} must be a JSON object.")
    try:
        message_id = item.get("message_id")
        context = item.get("context")
        return TrajectoryPoint(
            timestamp=_parse_timestamp(item["timestamp"]),
            mood_score=float(item["mood_score"]),
            message_id=None if message_id is None else str(message_id),
            emotions=tuple(str(label) for label in item.get("emotions", [])),
            context=None if context is None else str(context),
        )
    except (KeyError, TypeError, ValueError) as err:
        raise AnalysisInputError(f"Point {index} is malformed: {err}") from err


def _parse_timestamp(value: object) -> datetime:
    """Parses an ISO-8601 timestamp, reading naive values as UTC."""
    timestamp = datetime.fromisoformat(str(value))
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=timezone.utc)
    return timestamp
