"""survey_validator.core.solver.bowditch

Traverse adjustment by the Bowditch (compass) rule.

The misclosure vector is distributed over the legs in proportion to leg
length, on the assumption that distance errors dominate angular ones:

    c_i = -w * (d_i / sum(d))

where ``w`` is the misclosure vector and ``d_i`` the leg length. The first
station is held fixed and the adjusted deltas are accumulated from it.

Insufficient data is reported as an ERROR result, never raised.
"""

from __future__ import annotations

import logging
import math
from typing import List

import numpy as np

from ..geometry.spatial import bearing_from_deltas, is_loop
from ..models.options import TraverseOptions
from ..models.point import SurveyData
from ..results.traverse_result import (
    AdjustedPoint,
    TraverseLeg,
    TraverseResult,
    TraverseType,
)
from ..results.validation_report import ResultStatus, format_ratio

logger = logging.getLogger(__name__)

MIN_TRAVERSE_POINTS = 3
CLOSED_BY_COORDINATES = 0.001      # first/last within 1 mm
SIGNIFICANT_CORRECTION = 0.01      # 1 cm
DOMINANT_COMPONENT_FACTOR = 2.0
SHORT_LEG_FRACTION = 0.3           # of the mean leg length


def _round(value: float, places: int) -> float:
    return round(float(value), places)


def adjust_traverse_bowditch(
    data: SurveyData,
    options: TraverseOptions | None = None,
) -> TraverseResult:
    """Adjust the traverse-tagged points of a dataset with the compass rule.

    Args:
        data: Dataset; traverse points are taken in dataset order
        options: Required precision (defaults to 1:5000)

    Returns:
        TraverseResult with legs, adjusted stations and pass/fail status
    """
    options = options or TraverseOptions()
    pts = data.traverse_points()

    if len(pts) < MIN_TRAVERSE_POINTS:
        return TraverseResult.failure(
            f"Need at least {MIN_TRAVERSE_POINTS} traverse points for adjustment"
        )

    result = TraverseResult(required_precision=options.required_precision)

    # Step 1: legs from coordinates
    xy = np.array([(p.easting, p.northing) for p in pts], dtype=float)
    deltas = np.diff(xy, axis=0)
    lengths = np.hypot(deltas[:, 0], deltas[:, 1])
    total = float(lengths.sum())

    for i, (de, dn) in enumerate(deltas):
        result.legs.append(TraverseLeg(
            from_point=pts[i].point_id,
            to_point=pts[i + 1].point_id,
            distance=float(lengths[i]),
            bearing=bearing_from_deltas(float(de), float(dn)),
            delta_e=float(de),
            delta_n=float(dn),
        ))
    result.total_distance = total

    if total == 0.0:
        return TraverseResult.failure("Traverse has zero total length (all stations coincide)")

    # Step 2: classification
    first, last = pts[0], pts[-1]
    closure = math.hypot(last.easting - first.easting, last.northing - first.northing)

    if first.point_id == last.point_id or closure < CLOSED_BY_COORDINATES:
        result.traverse_type = TraverseType.CLOSED
        result.traverse_type_desc = "Closed traverse - returns to start point"
    elif is_loop(closure, total):
        result.traverse_type = TraverseType.CLOSED
        result.traverse_type_desc = "Closed traverse - loop with misclosure"
    else:
        result.traverse_type = TraverseType.OPEN
        result.traverse_type_desc = "Open traverse - end point not at start (weak geometry)"
        result.suggested_fixes.append(
            "Consider closing the traverse back to start point for stronger geometry"
        )
    logger.debug("Traverse classified as %s (closure gap %.4fm over %.3fm)",
                 result.traverse_type.value, closure, total)

    # Step 3: misclosure
    if result.traverse_type is TraverseType.CLOSED:
        misclosure = deltas.sum(axis=0)
    else:
        misclosure = xy[-1] - xy[0]

    result.misclosure_e = float(misclosure[0])
    result.misclosure_n = float(misclosure[1])
    result.linear_misclosure = float(math.hypot(result.misclosure_e, result.misclosure_n))
    result.precision = total / result.linear_misclosure if result.linear_misclosure > 0 else math.inf

    # Step 4: Bowditch corrections
    corrections = -np.outer(lengths / total, misclosure)
    adjusted = deltas + corrections

    for leg, (ce, cn), (ade, adn) in zip(result.legs, corrections, adjusted):
        leg.correction_e = float(ce)
        leg.correction_n = float(cn)
        leg.adjusted_delta_e = float(ade)
        leg.adjusted_delta_n = float(adn)

    # Step 5: adjusted coordinates, first station held fixed
    result.adjusted_points.append(AdjustedPoint(
        point_id=first.point_id,
        raw_easting=first.easting,
        raw_northing=first.northing,
        adjusted_easting=first.easting,
        adjusted_northing=first.northing,
    ))

    running = xy[0] + np.cumsum(adjusted, axis=0)
    for raw, (adj_e, adj_n) in zip(pts[1:], running):
        if raw.point_id == first.point_id:
            continue
        res_e = float(adj_e) - raw.easting
        res_n = float(adj_n) - raw.northing
        result.adjusted_points.append(AdjustedPoint(
            point_id=raw.point_id,
            raw_easting=raw.easting,
            raw_northing=raw.northing,
            adjusted_easting=_round(adj_e, 3),
            adjusted_northing=_round(adj_n, 3),
            residual_e=_round(res_e, 4),
            residual_n=_round(res_n, 4),
            residual_distance=_round(math.hypot(res_e, res_n), 4),
        ))

    # Step 6: pass / fail
    required = format_ratio(options.required_precision)
    achieved = format_ratio(result.precision)
    if result.precision >= options.required_precision:
        result.status = ResultStatus.PASS
        result.message = f"Traverse meets {required} requirement (achieved {achieved})"
    else:
        result.status = ResultStatus.FAIL
        result.message = f"Traverse does NOT meet {required} requirement (achieved {achieved})"
        result.suggested_fixes.extend(suggest_fixes(result))

    logger.debug("Bowditch adjustment %s: misclosure %.4fm, %s",
                 result.status.value, result.linear_misclosure, achieved)
    return result


def suggest_fixes(result: TraverseResult) -> List[str]:
    """Remediation hints for a traverse that failed its precision requirement."""
    fixes: List[str] = []
    if not result.legs:
        return fixes

    # Leg taking the largest correction is the likeliest error source
    worst = max(result.legs, key=lambda leg: leg.correction_magnitude)
    if worst.correction_magnitude > SIGNIFICANT_CORRECTION:
        fixes.append(
            f"Re-check distance {worst.from_point} to {worst.to_point} "
            f"(largest correction: {worst.correction_magnitude:.4f}m)"
        )

    abs_e = abs(result.misclosure_e)
    abs_n = abs(result.misclosure_n)
    if abs_e > abs_n * DOMINANT_COMPONENT_FACTOR:
        fixes.append("Easting error dominant - check angles/bearings for E-W pointing legs")
    elif abs_n > abs_e * DOMINANT_COMPONENT_FACTOR:
        fixes.append("Northing error dominant - check angles/bearings for N-S pointing legs")

    mean_leg = result.total_distance / len(result.legs)
    for leg in result.legs:
        if leg.distance < mean_leg * SHORT_LEG_FRACTION:
            fixes.append(
                f"Short leg {leg.from_point}-{leg.to_point} ({leg.distance:.2f}m) - "
                f"angle errors have larger effect on short legs"
            )
            break
    return fixes
