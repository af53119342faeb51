"""
Leveling observation class for differential leveling reductions.

A level book row records the staff readings taken on one point:
- backsight (BS): first reading after an instrument setup
- intermediate sight (IS): reading on a point between BS and FS
- foresight (FS): last reading before the instrument moves

A change (turning) point carries both a FS (closing the previous setup)
and a BS (opening the next one). Readings not taken are None.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class LevelingObservation:
    """
    Staff readings on a single point.

    Attributes:
        point_id: Point (or benchmark / change point) identifier
        backsight: BS reading in meters, None if not taken
        intermediate: IS reading in meters, None if not taken
        foresight: FS reading in meters, None if not taken
        distance: Sight distance for this setup in meters, used for the
            allowable misclosure
    """

    point_id: str
    backsight: Optional[float] = None
    intermediate: Optional[float] = None
    foresight: Optional[float] = None
    distance: float = 0.0

    def __post_init__(self):
        if self.distance < 0:
            raise ValueError("distance cannot be negative")
        for name in ("backsight", "intermediate", "foresight"):
            value = getattr(self, name)
            if value is not None and value < 0:
                raise ValueError(f"{name} reading cannot be negative")

    @property
    def is_change_point(self) -> bool:
        return self.backsight is not None and self.foresight is not None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"point_id": self.point_id}
        if self.backsight is not None:
            data["backsight"] = self.backsight
        if self.intermediate is not None:
            data["intermediate"] = self.intermediate
        if self.foresight is not None:
            data["foresight"] = self.foresight
        if self.distance:
            data["distance"] = self.distance
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LevelingObservation":
        """Create LevelingObservation from dictionary (accepts bs/is/fs aliases)."""
        return cls(
            point_id=str(data.get("point_id", data.get("id", ""))),
            backsight=_reading(data, "backsight", "bs"),
            intermediate=_reading(data, "intermediate", "is"),
            foresight=_reading(data, "foresight", "fs"),
            distance=float(data.get("distance") or 0.0),
        )


def _reading(data: Dict[str, Any], key: str, alias: str) -> Optional[float]:
    value = data.get(key, data.get(alias))
    if value is None or value == "":
        return None
    return float(value)
