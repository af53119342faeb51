"""Validation checks and the engine that runs them."""

from .checks import (
    validate_input,
    detect_duplicates,
    detect_outliers,
    check_distance_and_bearing,
    check_traverse_closure,
    calculate_summary_statistics,
)
from .engine import ValidationEngine, ValidationCheck, DEFAULT_CHECKS, validate

__all__ = [
    "validate_input",
    "detect_duplicates",
    "detect_outliers",
    "check_distance_and_bearing",
    "check_traverse_closure",
    "calculate_summary_statistics",
    "ValidationEngine",
    "ValidationCheck",
    "DEFAULT_CHECKS",
    "validate",
]
