"""
Traverse adjustment result classes.

Legs, adjusted stations and the summary of a Bowditch (compass rule)
adjustment.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List

from .validation_report import ResultStatus, _json_safe_value, format_ratio


class TraverseType(Enum):
    """Traverse classification."""
    CLOSED = "closed"  # returns to start point
    OPEN = "open"      # end point not at start (weak geometry)


@dataclass
class TraverseLeg:
    """
    One leg between consecutive traverse stations.

    Attributes:
        from_point: Station id at the start of the leg
        to_point: Station id at the end of the leg
        distance: Horizontal length (m)
        bearing: Bearing in degrees [0, 360)
        delta_e / delta_n: Raw coordinate differences (m)
        correction_e / correction_n: Bowditch corrections (m)
        adjusted_delta_e / adjusted_delta_n: Raw deltas plus corrections
    """

    from_point: str
    to_point: str
    distance: float
    bearing: float
    delta_e: float
    delta_n: float
    correction_e: float = 0.0
    correction_n: float = 0.0
    adjusted_delta_e: float = 0.0
    adjusted_delta_n: float = 0.0

    @property
    def correction_magnitude(self) -> float:
        return math.hypot(self.correction_e, self.correction_n)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "from_point": self.from_point,
            "to_point": self.to_point,
            "distance": self.distance,
            "bearing": self.bearing,
            "delta_e": self.delta_e,
            "delta_n": self.delta_n,
            "correction_e": self.correction_e,
            "correction_n": self.correction_n,
            "adjusted_delta_e": self.adjusted_delta_e,
            "adjusted_delta_n": self.adjusted_delta_n,
        }


@dataclass
class AdjustedPoint:
    """Adjusted coordinates of a traverse station and its shift from raw."""

    point_id: str
    raw_easting: float
    raw_northing: float
    adjusted_easting: float
    adjusted_northing: float
    residual_e: float = 0.0
    residual_n: float = 0.0
    residual_distance: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "point_id": self.point_id,
            "raw_easting": self.raw_easting,
            "raw_northing": self.raw_northing,
            "adjusted_easting": self.adjusted_easting,
            "adjusted_northing": self.adjusted_northing,
            "residual_e": self.residual_e,
            "residual_n": self.residual_n,
            "residual_distance": self.residual_distance,
        }


@dataclass
class TraverseResult:
    """
    Complete results of a Bowditch traverse adjustment.

    Attributes:
        status: PASS / FAIL against the required precision, ERROR when the
            traverse could not be adjusted
        message: Summary or error description
        traverse_type: Classification, None on ERROR
        traverse_type_desc: Human-readable classification note
        misclosure_e / misclosure_n: Misclosure vector components (m)
        linear_misclosure: Misclosure vector length (m)
        total_distance: Sum of leg lengths (m)
        precision: Relative precision N (inf for zero misclosure)
        required_precision: N required to pass
        legs: Legs in traverse order
        adjusted_points: Stations in traverse order, first held fixed
        suggested_fixes: Remediation hints
    """

    status: ResultStatus = ResultStatus.PASS
    message: str = ""
    traverse_type: TraverseType | None = None
    traverse_type_desc: str = ""
    misclosure_e: float = 0.0
    misclosure_n: float = 0.0
    linear_misclosure: float = 0.0
    total_distance: float = 0.0
    precision: float = 0.0
    required_precision: float = 0.0
    legs: List[TraverseLeg] = field(default_factory=list)
    adjusted_points: List[AdjustedPoint] = field(default_factory=list)
    suggested_fixes: List[str] = field(default_factory=list)

    @property
    def closure_ratio(self) -> str:
        if self.status is ResultStatus.ERROR:
            return ""
        return format_ratio(self.precision)

    @property
    def passed(self) -> bool:
        return self.status is ResultStatus.PASS

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize result to dictionary.

        An ERROR result has no classification or precision, so those keys
        are left out.
        """
        data: Dict[str, Any] = {
            "status": self.status.value,
            "message": self.message,
            "misclosure_e": self.misclosure_e,
            "misclosure_n": self.misclosure_n,
            "linear_misclosure": self.linear_misclosure,
            "total_distance": self.total_distance,
            "legs": [leg.to_dict() for leg in self.legs],
            "adjusted_points": [p.to_dict() for p in self.adjusted_points],
        }
        if self.status is not ResultStatus.ERROR:
            data["traverse_type"] = self.traverse_type.value if self.traverse_type else None
            data["traverse_type_desc"] = self.traverse_type_desc
            data["closure_ratio"] = self.closure_ratio
            data["precision"] = _json_safe_value(self.precision)
            data["required_precision"] = self.required_precision
        if self.suggested_fixes:
            data["suggested_fixes"] = list(self.suggested_fixes)
        return data

    @classmethod
    def failure(cls, message: str) -> "TraverseResult":
        """
        Create an ERROR result.

        Args:
            message: Description of the failure
        """
        return cls(status=ResultStatus.ERROR, message=message)

    def __repr__(self) -> str:
        kind = self.traverse_type.value if self.traverse_type else "-"
        return (
            f"TraverseResult({self.status.value}, {kind}, "
            f"legs={len(self.legs)}, {self.closure_ratio})"
        )
