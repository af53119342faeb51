"""survey_validator.core.geometry.spatial

Planar geometry and dispersion helpers for survey points.

Conventions:
  - Coordinates: Easting = X, Northing = Y
  - Bearing: North = 0, clockwise positive, degrees in [0, 360)

Implementation detail:
  - Bearing is computed using ``atan2(dE, dN)``.

Every function is total: empty inputs give zero-valued results.
"""

from __future__ import annotations

import math
from typing import Sequence, Tuple

import numpy as np

from ..models.point import SurveyPoint
from ..results.validation_report import BoundingBox


def wrap_360(angle: float) -> float:
    """Normalize angle in degrees to [0, 360)."""
    a = angle % 360.0
    if a < 0:
        a += 360.0
    # -1e-17 % 360 rounds to 360.0
    if a >= 360.0:
        a -= 360.0
    return a


LOOP_CLOSURE_FRACTION = 0.1  # closure gap / traverse length below which a traverse reads as a loop


def is_loop(closure_distance: float, total_length: float) -> bool:
    """Whether the gap between first and last station still reads as a closed loop."""
    return closure_distance < total_length * LOOP_CLOSURE_FRACTION


def bearing_from_deltas(de: float, dn: float) -> float:
    """Bearing in degrees of the vector (dE, dN)."""
    return wrap_360(math.degrees(math.atan2(de, dn)))


def distance(p1: SurveyPoint, p2: SurveyPoint) -> float:
    """Compute 2D horizontal distance."""
    return math.hypot(p2.easting - p1.easting, p2.northing - p1.northing)


def distance_3d(p1: SurveyPoint, p2: SurveyPoint) -> float:
    """Slope distance; horizontal distance when either height is missing."""
    if p1.height is None or p2.height is None:
        return distance(p1, p2)
    de = p2.easting - p1.easting
    dn = p2.northing - p1.northing
    dh = p2.height - p1.height
    return math.sqrt(de * de + dn * dn + dh * dh)


def bearing(p1: SurveyPoint, p2: SurveyPoint) -> float:
    """Compute bearing from p1 to p2 in degrees [0, 360)."""
    return bearing_from_deltas(p2.easting - p1.easting, p2.northing - p1.northing)


def bearing_difference(b1: float, b2: float) -> float:
    """Absolute difference of two bearings folded into [0, 180]."""
    diff = abs(b1 - b2)
    if diff > 180.0:
        diff = 360.0 - diff
    return diff


def _coords(points: Sequence[SurveyPoint]) -> np.ndarray:
    return np.array([(p.easting, p.northing) for p in points], dtype=float).reshape(-1, 2)


def centroid(points: Sequence[SurveyPoint]) -> Tuple[float, float]:
    """Mean easting and northing, (0, 0) for no points."""
    if len(points) == 0:
        return 0.0, 0.0
    ce, cn = _coords(points).mean(axis=0)
    return float(ce), float(cn)


def standard_deviation(points: Sequence[SurveyPoint], ce: float, cn: float) -> float:
    """RMS radial distance of the points from (ce, cn), 0 for no points."""
    if len(points) == 0:
        return 0.0
    d = _coords(points) - np.array([ce, cn])
    return float(math.sqrt((d * d).sum() / len(points)))


def bounding_box(points: Sequence[SurveyPoint]) -> BoundingBox:
    """Extent of the points; an all-zero box for no points."""
    if len(points) == 0:
        return BoundingBox()
    xy = _coords(points)
    mins = xy.min(axis=0)
    maxs = xy.max(axis=0)
    return BoundingBox(
        min_easting=float(mins[0]),
        max_easting=float(maxs[0]),
        min_northing=float(mins[1]),
        max_northing=float(maxs[1]),
    )
