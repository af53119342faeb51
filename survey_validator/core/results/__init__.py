"""
Result classes for survey validation.

This module provides the output data structures:
- ValidationReport: Issues, summary, status and confidence of a run
- TraverseResult: Bowditch adjustment of the traverse
- LevelingResult: Reduced level run
"""

from .validation_report import (
    Severity,
    ValidationStatus,
    ResultStatus,
    ValidationIssue,
    TraverseClosureDetails,
    BoundingBox,
    SummaryStatistics,
    ValidationReport,
    format_ratio,
)
from .traverse_result import (
    TraverseType,
    TraverseLeg,
    AdjustedPoint,
    TraverseResult,
)
from .leveling_result import LevelingPoint, LevelingResult

__all__ = [
    # Report
    "Severity",
    "ValidationStatus",
    "ResultStatus",
    "ValidationIssue",
    "TraverseClosureDetails",
    "BoundingBox",
    "SummaryStatistics",
    "ValidationReport",
    "format_ratio",

    # Traverse
    "TraverseType",
    "TraverseLeg",
    "AdjustedPoint",
    "TraverseResult",

    # Leveling
    "LevelingPoint",
    "LevelingResult",
]
