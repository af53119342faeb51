"""Geometry utilities for survey validation."""

from .spatial import (
    wrap_360,
    is_loop,
    LOOP_CLOSURE_FRACTION,
    bearing_from_deltas,
    distance,
    distance_3d,
    bearing,
    bearing_difference,
    centroid,
    standard_deviation,
    bounding_box,
)

__all__ = [
    "wrap_360",
    "is_loop",
    "LOOP_CLOSURE_FRACTION",
    "bearing_from_deltas",
    "distance",
    "distance_3d",
    "bearing",
    "bearing_difference",
    "centroid",
    "standard_deviation",
    "bounding_box",
]
