"""
Survey Validator - data quality checks for field survey datasets

Validates measured points (duplicates, outliers, leg geometry, traverse
closure), adjusts traverses by the Bowditch rule and reduces level runs.

Conventions:
- Coordinates: Easting (X), Northing (Y) in meters
- Bearings: Degrees, North = 0, clockwise positive, range [0, 360)
- Relative precision: N of a 1:N ratio (larger is better)
- Heights and staff readings: Meters
- Point IDs: String type to allow alphanumeric station names
"""

__version__ = "1.0.0"
__author__ = "Survey Validator"

from .core.models import SurveyPoint, SurveyData, LevelingObservation
from .core.models import ToleranceClass, TraverseOptions, EngineOptions
from .core.results import ValidationReport, ValidationIssue, TraverseResult, LevelingResult
from .core.validation import ValidationEngine, validate
from .core.solver import adjust_traverse_bowditch, reduce_leveling

__all__ = [
    # Version
    "__version__",

    # Models
    "SurveyPoint",
    "SurveyData",
    "LevelingObservation",
    "ToleranceClass",
    "TraverseOptions",
    "EngineOptions",

    # Results
    "ValidationReport",
    "ValidationIssue",
    "TraverseResult",
    "LevelingResult",

    # Operations
    "ValidationEngine",
    "validate",
    "adjust_traverse_bowditch",
    "reduce_leveling",
]
