"""
Leveling reduction result classes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..models.options import ToleranceClass
from .validation_report import ResultStatus


@dataclass
class LevelingPoint:
    """
    Reduced level of one book row.

    Attributes:
        point_id: Point identifier
        raw_rl: Reduced level before correction (m)
        adjusted_rl: Reduced level after misclosure distribution (m)
        correction: Correction applied (m)
        rise: Rise from the previous point, None if it fell or stayed level
        fall: Fall from the previous point, None if it rose or stayed level
    """

    point_id: str
    raw_rl: float = 0.0
    adjusted_rl: float = 0.0
    correction: float = 0.0
    rise: Optional[float] = None
    fall: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"point_id": self.point_id}
        if self.rise is not None:
            data["rise"] = self.rise
        if self.fall is not None:
            data["fall"] = self.fall
        data.update({
            "raw_rl": self.raw_rl,
            "adjusted_rl": self.adjusted_rl,
            "correction": self.correction,
        })
        return data


@dataclass
class LevelingResult:
    """
    Result of a level run reduction.

    Attributes:
        status: PASS / FAIL against the allowable misclosure, ERROR when
            the run could not be reduced
        message: Summary or error description
        start_bm / end_bm: First and last point ids
        start_height: Known height of the starting benchmark (m)
        computed_end_height: Raw RL reached at the last point (m)
        known_end_height: Closing benchmark height, None for a loop
        total_distance_km: Sum of setup distances (km)
        height_misclosure: Computed minus known closing height (m)
        allowable_misclosure: Tolerance for the class and distance (m)
        tolerance_class: Accuracy class used
        sum_rise / sum_fall: Totals of the rise and fall columns (m)
        points: Reduced rows in book order
    """

    status: ResultStatus = ResultStatus.PASS
    message: str = ""
    start_bm: str = ""
    end_bm: str = ""
    start_height: float = 0.0
    computed_end_height: float = 0.0
    known_end_height: Optional[float] = None
    total_distance_km: float = 0.0
    height_misclosure: float = 0.0
    allowable_misclosure: float = 0.0
    tolerance_class: ToleranceClass = ToleranceClass.THIRD_ORDER
    sum_rise: float = 0.0
    sum_fall: float = 0.0
    points: List[LevelingPoint] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return self.status is ResultStatus.PASS

    @property
    def arithmetic_check(self) -> float:
        """Sum of rises minus falls less the change of RL; zero for a consistent book."""
        if not self.points:
            return 0.0
        return (self.sum_rise - self.sum_fall) - (self.points[-1].raw_rl - self.points[0].raw_rl)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "status": self.status.value,
            "message": self.message,
            "start_bm": self.start_bm,
            "start_height": self.start_height,
            "tolerance_class": self.tolerance_class.value,
            "total_distance_km": self.total_distance_km,
            "height_misclosure": self.height_misclosure,
            "allowable_misclosure": self.allowable_misclosure,
            "sum_rise": self.sum_rise,
            "sum_fall": self.sum_fall,
            "points": [p.to_dict() for p in self.points],
        }
        if self.end_bm:
            data["end_bm"] = self.end_bm
            data["computed_end_height"] = self.computed_end_height
        if self.known_end_height is not None:
            data["known_end_height"] = self.known_end_height
        return data

    @classmethod
    def failure(cls, message: str, start_height: float = 0.0) -> "LevelingResult":
        return cls(status=ResultStatus.ERROR, message=message, start_height=start_height)
