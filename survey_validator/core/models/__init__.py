"""
Data models for survey validation.

This module provides the core input structures:
- SurveyPoint / SurveyData: Measured points and the dataset holding them
- LevelingObservation: One level book row
- TraverseOptions / EngineOptions / ToleranceClass: Configuration
"""

from .point import SurveyPoint, SurveyData, SurveyType
from .leveling import LevelingObservation
from .options import (
    ToleranceClass,
    TraverseOptions,
    EngineOptions,
    DEFAULT_REQUIRED_PRECISION,
)

__all__ = [
    # Points
    "SurveyPoint",
    "SurveyData",
    "SurveyType",

    # Leveling
    "LevelingObservation",

    # Options
    "ToleranceClass",
    "TraverseOptions",
    "EngineOptions",
    "DEFAULT_REQUIRED_PRECISION",
]
