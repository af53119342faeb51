"""
Survey point and dataset classes for validation.

Conventions:
- Coordinates: Easting (X), Northing (Y) - right-handed system
- Units: Meters for coordinates and heights
- Point IDs: String type, not required to be unique (a closed traverse
  repeats its starting station id)
- Point order in a dataset defines traverse adjacency
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class SurveyType(str, Enum):
    """Known survey type tags for a point."""
    TRAVERSE = "traverse"
    CONTROL = "control"
    DETAIL = "detail"

    @classmethod
    def is_known(cls, tag: str) -> bool:
        return tag in {t.value for t in cls}


@dataclass(frozen=True)
class SurveyPoint:
    """
    A single measured point.

    Attributes:
        point_id: Station identifier (may be empty in bad input, which is
            reported by the input check rather than rejected here)
        easting: X coordinate in meters
        northing: Y coordinate in meters
        height: Elevation in meters, None if not observed
        survey_type: Tag string, normally one of SurveyType; tags are kept
            verbatim and matched case-sensitively
        coordinate_system: Optional per-point coordinate system label
    """

    point_id: str
    easting: float
    northing: float
    height: Optional[float] = None
    survey_type: str = ""
    coordinate_system: Optional[str] = None

    @property
    def has_height(self) -> bool:
        return self.height is not None

    @property
    def is_traverse(self) -> bool:
        return self.survey_type == SurveyType.TRAVERSE.value

    @property
    def is_valid(self) -> bool:
        """Has an id and non-zero coordinates."""
        return bool(self.point_id) and self.easting != 0 and self.northing != 0

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize point to dictionary.

        Optional fields are omitted rather than written as null.
        """
        data: Dict[str, Any] = {
            "point_id": self.point_id,
            "easting": self.easting,
            "northing": self.northing,
            "survey_type": self.survey_type,
        }
        if self.height is not None:
            data["height"] = self.height
        if self.coordinate_system:
            data["coordinate_system"] = self.coordinate_system
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SurveyPoint":
        """
        Create a SurveyPoint from a dictionary.

        Args:
            data: Dictionary with point attributes

        Returns:
            New SurveyPoint instance

        Raises:
            KeyError: If easting or northing is missing
            ValueError: If a coordinate is not numeric
        """
        raw_id = data.get("point_id", data.get("id", ""))
        survey_type = data.get("survey_type", data.get("type", "")) or ""
        return cls(
            point_id="" if raw_id is None else str(raw_id),
            easting=float(data["easting"]),
            northing=float(data["northing"]),
            height=_parse_optional_float(data.get("height")),
            survey_type=str(survey_type).strip(),
            coordinate_system=data.get("coordinate_system") or None,
        )

    def __repr__(self) -> str:
        tag = self.survey_type or "untyped"
        return f"SurveyPoint({self.point_id!r}, E={self.easting:.3f}, N={self.northing:.3f}, {tag})"


@dataclass(frozen=True)
class SurveyData:
    """
    A survey dataset submitted for validation.

    The engine only reads it; point order is significant for traverse legs.

    Attributes:
        project_id: Project identifier carried into the report
        points: Ordered points
        coordinate_system: Optional coordinate system label
    """

    project_id: str
    points: Tuple[SurveyPoint, ...] = field(default_factory=tuple)
    coordinate_system: Optional[str] = None

    def __post_init__(self):
        # Accept any sequence but store an immutable tuple
        if not isinstance(self.points, tuple):
            object.__setattr__(self, "points", tuple(self.points))

    def __len__(self) -> int:
        return len(self.points)

    def traverse_points(self) -> List[SurveyPoint]:
        """Traverse-tagged points, in dataset order."""
        return [p for p in self.points if p.is_traverse]

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "project_id": self.project_id,
            "points": [p.to_dict() for p in self.points],
        }
        if self.coordinate_system:
            data["coordinate_system"] = self.coordinate_system
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SurveyData":
        """
        Create SurveyData from a decoded JSON request body.

        Raises:
            ValueError: If ``points`` is not a list or a point is malformed
            KeyError: If a point lacks coordinates
        """
        points = data.get("points") or []
        if not isinstance(points, list):
            raise ValueError("'points' must be a list")
        return cls(
            project_id=str(data.get("project_id", "")),
            points=tuple(SurveyPoint.from_dict(p) for p in points),
            coordinate_system=data.get("coordinate_system") or None,
        )


def _parse_optional_float(value: Any) -> Optional[float]:
    """Parse a value to optional float, handling empty strings and None."""
    if value is None or value == '' or value == 'None':
        return None
    return float(value)
