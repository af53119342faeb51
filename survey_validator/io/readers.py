"""Survey file parsing utilities.

Supported formats:
- points CSV (one row per survey point)
- level book CSV (one row per staff reading position)

Column names are matched case-sensitively against a list of aliases so that
exports from common field software load without renaming.
"""

from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from ..core.models.leveling import LevelingObservation
from ..core.models.point import SurveyData, SurveyPoint

logger = logging.getLogger(__name__)


def _get(row: Dict[str, str], keys: Sequence[str], default: str = "") -> str:
    for k in keys:
        if k in row and row[k] is not None and row[k].strip() != "":
            return row[k].strip()
    return default


def _float_or_none(value: str, column: str, line: int, path: Path) -> Optional[float]:
    if value == "":
        return None
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"{path}:{line}: invalid {column} value {value!r}") from None


def parse_points_csv(path: str | Path, project_id: str = "") -> SurveyData:
    """Parse survey points from a CSV.

    Expected columns (flexible):
      - point_id/id/pid/name
      - easting/x/E/east
      - northing/y/N/north
      - height/elevation/z/H (optional)
      - survey_type/type/code (optional)
      - coordinate_system/crs (optional)

    Rows with an empty id are kept; input validation reports them.

    Raises:
        ValueError: If a row has a missing or non-numeric coordinate
    """
    path = Path(path)
    points: List[SurveyPoint] = []
    coordinate_system: Optional[str] = None

    with path.open(newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        # line 1 is the header
        for line, row in enumerate(reader, start=2):
            pid = _get(row, ["point_id", "id", "pid", "name"])
            e = _float_or_none(_get(row, ["easting", "x", "E", "east"]), "easting", line, path)
            n = _float_or_none(_get(row, ["northing", "y", "N", "north"]), "northing", line, path)
            if e is None or n is None:
                raise ValueError(f"{path}:{line}: missing easting/northing")

            h = _float_or_none(_get(row, ["height", "elevation", "z", "H"]), "height", line, path)
            crs = _get(row, ["coordinate_system", "crs"]) or None
            if crs and coordinate_system is None:
                coordinate_system = crs

            points.append(
                SurveyPoint(
                    point_id=pid,
                    easting=e,
                    northing=n,
                    height=h,
                    survey_type=_get(row, ["survey_type", "type", "code"]),
                    coordinate_system=crs,
                )
            )

    logger.debug("Read %d points from %s", len(points), path)
    return SurveyData(
        project_id=project_id or path.stem,
        points=tuple(points),
        coordinate_system=coordinate_system,
    )


def parse_level_book_csv(path: str | Path) -> List[LevelingObservation]:
    """Parse level book rows from a CSV.

    Expected columns (flexible):
      - point_id/id/station
      - backsight/bs, intermediate/is, foresight/fs (blank when not read)
      - distance/dist (optional, meters)

    Raises:
        ValueError: If a reading is not numeric or is negative
    """
    path = Path(path)
    out: List[LevelingObservation] = []

    with path.open(newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        for line, row in enumerate(reader, start=2):
            pid = _get(row, ["point_id", "id", "station"])
            if not pid:
                raise ValueError(f"{path}:{line}: missing point_id")

            bs = _float_or_none(_get(row, ["backsight", "bs", "BS"]), "backsight", line, path)
            is_ = _float_or_none(_get(row, ["intermediate", "is", "IS"]), "intermediate", line, path)
            fs = _float_or_none(_get(row, ["foresight", "fs", "FS"]), "foresight", line, path)
            distance = _float_or_none(_get(row, ["distance", "dist"]), "distance", line, path)
            try:
                obs = LevelingObservation(
                    point_id=pid,
                    backsight=bs,
                    intermediate=is_,
                    foresight=fs,
                    distance=distance or 0.0,
                )
            except ValueError as exc:
                raise ValueError(f"{path}:{line}: {exc}") from exc
            out.append(obs)

    logger.debug("Read %d level book rows from %s", len(out), path)
    return out
