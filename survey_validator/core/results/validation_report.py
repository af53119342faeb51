"""
Validation report classes.

This module defines the output of a validation run: graded issues,
summary statistics, the overall status and the confidence score.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union, TYPE_CHECKING

if TYPE_CHECKING:
    from .traverse_result import TraverseResult


def _iso_utc_now() -> str:
    """Return an ISO-8601 UTC timestamp ending with 'Z'."""
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _json_safe_value(value: Any) -> Any:
    """Convert non-JSON-safe floats (nan/inf) to None."""
    if value is None:
        return None
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return None
    return value


def format_ratio(precision: float) -> str:
    """Relative precision as '1:N'."""
    if math.isinf(precision):
        return "1:inf (perfect)"
    return f"1:{precision:.0f}"


class Severity(Enum):
    """Issue severity, ordered error > warning > info."""
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    @property
    def penalty(self) -> float:
        """Confidence score deduction for one issue of this severity."""
        return SEVERITY_PENALTY[self]


SEVERITY_PENALTY: Dict[Severity, float] = {
    Severity.ERROR: 15.0,
    Severity.WARNING: 5.0,
    Severity.INFO: 1.0,
}


class ValidationStatus(Enum):
    """Overall report status."""
    PASS = "PASS"
    WARNING = "WARNING"
    FAIL = "FAIL"


class ResultStatus(Enum):
    """Status of an adjustment / reduction sub-result."""
    PASS = "PASS"
    FAIL = "FAIL"
    ERROR = "ERROR"


@dataclass
class TraverseClosureDetails:
    """
    Detail payload of the traverse closure check.

    Attributes:
        misclosure_easting: Last minus first traverse point, easting (m)
        misclosure_northing: Last minus first traverse point, northing (m)
        linear_misclosure: Length of the misclosure vector (m)
        traverse_length: Sum of leg lengths (m)
        relative_precision: Precision written as '1:N'
        quality: Quality band label
    """

    misclosure_easting: float
    misclosure_northing: float
    linear_misclosure: float
    traverse_length: float
    relative_precision: str
    quality: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "misclosure_easting": self.misclosure_easting,
            "misclosure_northing": self.misclosure_northing,
            "linear_misclosure": self.linear_misclosure,
            "traverse_length": self.traverse_length,
            "relative_precision": self.relative_precision,
            "quality": self.quality,
        }


IssueDetails = Union[Mapping[str, Any], TraverseClosureDetails]


@dataclass
class ValidationIssue:
    """
    A single finding of a validation check.

    Attributes:
        check_name: Name of the check that produced the issue
        severity: Issue severity
        description: Human-readable description
        point_ids: Points involved (may be empty)
        details: Check-specific payload, shape depends on the check
    """

    check_name: str
    severity: Severity
    description: str
    point_ids: List[str] = field(default_factory=list)
    details: Optional[IssueDetails] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize issue; empty point list and missing details are omitted."""
        data: Dict[str, Any] = {
            "check_name": self.check_name,
            "severity": self.severity.value,
            "description": self.description,
        }
        if self.point_ids:
            data["point_ids"] = list(self.point_ids)
        if self.details is not None:
            if isinstance(self.details, TraverseClosureDetails):
                data["details"] = self.details.to_dict()
            else:
                data["details"] = {k: _json_safe_value(v) for k, v in self.details.items()}
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ValidationIssue":
        return cls(
            check_name=data["check_name"],
            severity=Severity(data["severity"]),
            description=data.get("description", ""),
            point_ids=list(data.get("point_ids", [])),
            details=data.get("details"),
        )


@dataclass
class BoundingBox:
    """Extent of a point set."""
    min_easting: float = 0.0
    max_easting: float = 0.0
    min_northing: float = 0.0
    max_northing: float = 0.0

    @property
    def width(self) -> float:
        return self.max_easting - self.min_easting

    @property
    def height(self) -> float:
        return self.max_northing - self.min_northing

    def to_dict(self) -> Dict[str, Any]:
        return {
            "min_easting": self.min_easting,
            "max_easting": self.max_easting,
            "min_northing": self.min_northing,
            "max_northing": self.max_northing,
        }


@dataclass
class SummaryStatistics:
    """Counts and extent of a dataset, recomputed on every run."""
    total_points: int = 0
    traverse_points: int = 0
    control_points: int = 0
    detail_points: int = 0
    points_with_height: int = 0
    bounding_box: BoundingBox = field(default_factory=BoundingBox)
    centroid_easting: float = 0.0
    centroid_northing: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_points": self.total_points,
            "traverse_points": self.traverse_points,
            "control_points": self.control_points,
            "detail_points": self.detail_points,
            "points_with_height": self.points_with_height,
            "bounding_box": self.bounding_box.to_dict(),
            "centroid_easting": self.centroid_easting,
            "centroid_northing": self.centroid_northing,
        }


@dataclass
class ValidationReport:
    """
    Complete result of a validation run.

    The status starts at PASS and is only ever downgraded by
    :meth:`add_issue`: an error makes it FAIL for good, a warning turns
    PASS into WARNING.

    Attributes:
        project_id: Project identifier of the validated dataset
        status: Overall status
        confidence_score: 0-100 quality indicator
        summary: Dataset summary statistics
        issues: All issues, grouped by check in check-name order
        checks_performed: Names of the checks that ran
        processing_time_ms: Wall time of the run in milliseconds
        traverse_result: Bowditch adjustment, when enough traverse points
        timestamp: ISO-8601 UTC creation time
    """

    project_id: str = ""
    status: ValidationStatus = ValidationStatus.PASS
    confidence_score: float = 100.0
    summary: SummaryStatistics = field(default_factory=SummaryStatistics)
    issues: List[ValidationIssue] = field(default_factory=list)
    checks_performed: List[str] = field(default_factory=list)
    processing_time_ms: float = 0.0
    traverse_result: Optional["TraverseResult"] = None
    timestamp: Optional[str] = None

    def __post_init__(self):
        """Set timestamp if not provided."""
        if self.timestamp is None:
            self.timestamp = _iso_utc_now()

    def add_issue(self, issue: ValidationIssue) -> None:
        """Append an issue and downgrade the status if needed."""
        self.issues.append(issue)

        if issue.severity is Severity.ERROR:
            self.status = ValidationStatus.FAIL
        elif issue.severity is Severity.WARNING and self.status is not ValidationStatus.FAIL:
            self.status = ValidationStatus.WARNING

    def calculate_confidence_score(self) -> float:
        """Start from 100 and deduct a fixed penalty per issue, floored at 0."""
        score = 100.0
        for issue in self.issues:
            score -= issue.severity.penalty
        self.confidence_score = max(score, 0.0)
        return self.confidence_score

    def issues_by_severity(self, severity: Severity) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity is severity]

    @property
    def error_count(self) -> int:
        return len(self.issues_by_severity(Severity.ERROR))

    @property
    def warning_count(self) -> int:
        return len(self.issues_by_severity(Severity.WARNING))

    @property
    def info_count(self) -> int:
        return len(self.issues_by_severity(Severity.INFO))

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize report to dictionary.

        ``traverse_adjustment`` is only present when the adjustment ran.
        """
        data: Dict[str, Any] = {
            "project_id": self.project_id,
            "timestamp": self.timestamp,
            "status": self.status.value,
            "confidence_score": self.confidence_score,
            "summary": self.summary.to_dict(),
            "issues": [issue.to_dict() for issue in self.issues],
            "checks_performed": list(self.checks_performed),
            "processing_time_ms": self.processing_time_ms,
        }
        if self.traverse_result is not None:
            data["traverse_adjustment"] = self.traverse_result.to_dict()
        return data

    def to_json(self, indent: int = 2) -> str:
        """
        Serialize report to JSON string.

        Args:
            indent: Number of spaces for indentation

        Returns:
            JSON string representation
        """
        return json.dumps(self.to_dict(), indent=indent)

    def __repr__(self) -> str:
        return (
            f"ValidationReport({self.project_id!r}, {self.status.value}, "
            f"score={self.confidence_score:.0f}, issues={len(self.issues)})"
        )
