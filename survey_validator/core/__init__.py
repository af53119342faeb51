"""
Core module for survey validation.

Pure Python implementations of the checks, the traverse adjustment and the
leveling reduction. Nothing here knows about HTTP or the command line.
"""

from .models import (
    SurveyPoint,
    SurveyData,
    SurveyType,
    LevelingObservation,
    ToleranceClass,
    TraverseOptions,
    EngineOptions,
)

from .results import (
    Severity,
    ValidationStatus,
    ResultStatus,
    ValidationIssue,
    SummaryStatistics,
    ValidationReport,
    TraverseResult,
    LevelingResult,
)

from .solver import adjust_traverse_bowditch, suggest_fixes, reduce_leveling, reduce_rise_fall

from .validation import ValidationEngine, validate

from .geometry import (
    distance,
    distance_3d,
    bearing,
    centroid,
    bounding_box,
)

__all__ = [
    # Models
    "SurveyPoint",
    "SurveyData",
    "SurveyType",
    "LevelingObservation",
    "ToleranceClass",
    "TraverseOptions",
    "EngineOptions",

    # Results
    "Severity",
    "ValidationStatus",
    "ResultStatus",
    "ValidationIssue",
    "SummaryStatistics",
    "ValidationReport",
    "TraverseResult",
    "LevelingResult",

    # Solvers
    "adjust_traverse_bowditch",
    "suggest_fixes",
    "reduce_leveling",
    "reduce_rise_fall",

    # Validation
    "ValidationEngine",
    "validate",

    # Geometry
    "distance",
    "distance_3d",
    "bearing",
    "centroid",
    "bounding_box",
]
