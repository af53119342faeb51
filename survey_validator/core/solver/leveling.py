"""survey_validator.core.solver.leveling

Reduction of a differential leveling run (rise-and-fall method).

For each book row the raw reduced level (RL) is derived from the most
recent backsight:
- foresight:    RL = RL_setup + (BS - FS), and the run moves to this RL
- intermediate: RL = RL_setup + (BS - IS), the run stays at RL_setup

The height misclosure is checked against an allowable value
``C * sqrt(K)`` (C in mm per sqrt(km) for the tolerance class, K in km) and
distributed equally per row index, the first row held fixed.

This is a closed-form reduction, not a least-squares adjustment.
"""

from __future__ import annotations

import logging
import math
from typing import Optional, Sequence

from ..models.leveling import LevelingObservation
from ..models.options import ToleranceClass
from ..results.leveling_result import LevelingPoint, LevelingResult
from ..results.validation_report import ResultStatus

logger = logging.getLogger(__name__)

MIN_OBSERVATIONS = 2


def allowable_misclosure(tolerance_class: ToleranceClass, total_distance_km: float) -> float:
    """Allowable misclosure in meters; a zero-length run is taken as 1 km."""
    c = tolerance_class.leveling_constant_mm
    if total_distance_km > 0:
        return c * math.sqrt(total_distance_km) / 1000.0
    return c / 1000.0


def _resolve_tolerance_class(value: ToleranceClass | str | None) -> ToleranceClass:
    """Parse a tolerance class; anything unrecognised is graded as third order."""
    try:
        return ToleranceClass.parse(value)
    except ValueError:
        logger.warning("Unknown tolerance class %r, using %s", value, ToleranceClass.THIRD_ORDER.value)
        return ToleranceClass.THIRD_ORDER


def _grade(result: LevelingResult) -> None:
    """Set the allowable misclosure, status and message of a reduced run."""
    result.allowable_misclosure = allowable_misclosure(result.tolerance_class, result.total_distance_km)

    if abs(result.height_misclosure) <= result.allowable_misclosure:
        result.status = ResultStatus.PASS
        result.message = (
            f"Level run acceptable: {result.height_misclosure:.4f}m misclosure "
            f"within {result.allowable_misclosure:.4f}m allowable"
        )
    else:
        result.status = ResultStatus.FAIL
        result.message = (
            f"Level run FAILED: {result.height_misclosure:.4f}m misclosure "
            f"exceeds {result.allowable_misclosure:.4f}m allowable"
        )


def reduce_leveling(
    observations: Sequence[LevelingObservation],
    start_height: float,
    end_height: Optional[float] = None,
    tolerance_class: ToleranceClass | str = ToleranceClass.THIRD_ORDER,
) -> LevelingResult:
    """Reduce a level run and distribute its misclosure.

    Args:
        observations: Book rows in field order
        start_height: Known RL of the first point (m)
        end_height: Known RL of the closing benchmark; None closes the run
            back on the start height (level loop)
        tolerance_class: Accuracy class for the allowable misclosure

    Returns:
        LevelingResult with raw / adjusted RLs and PASS / FAIL status
    """
    tolerance_class = _resolve_tolerance_class(tolerance_class)

    if len(observations) < MIN_OBSERVATIONS:
        return LevelingResult.failure(
            f"Need at least {MIN_OBSERVATIONS} observations for leveling",
            start_height=start_height,
        )

    result = LevelingResult(
        start_height=start_height,
        known_end_height=end_height,
        tolerance_class=tolerance_class,
        start_bm=observations[0].point_id,
        end_bm=observations[-1].point_id,
    )

    setup_rl = start_height          # RL of the point the last backsight was read on
    last_bs: Optional[float] = None
    prev_rl = start_height
    total_distance = 0.0

    for i, obs in enumerate(observations):
        total_distance += obs.distance

        if i == 0 or last_bs is None:
            rl = setup_rl
        elif obs.foresight is not None:
            setup_rl = setup_rl + (last_bs - obs.foresight)
            rl = setup_rl
        elif obs.intermediate is not None:
            rl = setup_rl + (last_bs - obs.intermediate)
        else:
            rl = setup_rl

        point = LevelingPoint(point_id=obs.point_id, raw_rl=rl)
        if i > 0:
            change = rl - prev_rl
            if change > 0:
                point.rise = change
                result.sum_rise += change
            elif change < 0:
                point.fall = -change
                result.sum_fall += -change
        result.points.append(point)
        prev_rl = rl

        if obs.backsight is not None:
            last_bs = obs.backsight

    closing_rl = result.points[-1].raw_rl
    result.computed_end_height = closing_rl
    result.total_distance_km = total_distance / 1000.0

    reference = end_height if end_height is not None else start_height
    result.height_misclosure = closing_rl - reference
    _grade(result)
    distribute_misclosure(result)

    logger.debug("Level run %s -> %s reduced: %s (%s)",
                 result.start_bm, result.end_bm, result.status.value, tolerance_class.value)
    return result


def reduce_rise_fall(
    points: Sequence[LevelingPoint],
    start_height: float,
    end_height: Optional[float] = None,
    tolerance_class: ToleranceClass | str = ToleranceClass.THIRD_ORDER,
    total_distance_km: float = 0.0,
) -> LevelingResult:
    """Carry reduced levels through pre-computed rises and falls.

    The first point takes ``start_height``; each later point adds its rise
    and subtracts its fall. Without ``end_height`` there is nothing to
    close on and the misclosure is zero.

    Args:
        points: Rows in run order, ``rise`` / ``fall`` set per row
        start_height: Known RL of the first point (m)
        end_height: Known RL of the last point, if any
        tolerance_class: Accuracy class for the allowable misclosure
        total_distance_km: Run length for the allowable misclosure

    Returns:
        LevelingResult with new LevelingPoint rows; the input is not modified
    """
    tolerance_class = _resolve_tolerance_class(tolerance_class)

    if len(points) < MIN_OBSERVATIONS:
        return LevelingResult.failure(
            f"Need at least {MIN_OBSERVATIONS} points for leveling",
            start_height=start_height,
        )

    result = LevelingResult(
        start_height=start_height,
        known_end_height=end_height,
        tolerance_class=tolerance_class,
        start_bm=points[0].point_id,
        end_bm=points[-1].point_id,
        total_distance_km=total_distance_km,
    )

    rl = start_height
    for i, src in enumerate(points):
        if i > 0:
            rl += (src.rise or 0.0) - (src.fall or 0.0)
            result.sum_rise += src.rise or 0.0
            result.sum_fall += src.fall or 0.0
        result.points.append(
            LevelingPoint(point_id=src.point_id, raw_rl=rl, rise=src.rise, fall=src.fall)
        )

    result.computed_end_height = rl
    result.height_misclosure = rl - end_height if end_height is not None else 0.0
    _grade(result)
    distribute_misclosure(result)

    logger.debug("Rise/fall run %s -> %s: %s", result.start_bm, result.end_bm, result.status.value)
    return result


def distribute_misclosure(result: LevelingResult) -> None:
    """Spread the negated misclosure equally per row index, first row fixed."""
    n = len(result.points)
    if n < 2:
        return

    per_point = -result.height_misclosure / (n - 1)
    for i, point in enumerate(result.points):
        if i == 0:
            point.correction = 0.0
            point.adjusted_rl = point.raw_rl
        else:
            point.correction = per_point * i
            point.adjusted_rl = round(point.raw_rl + point.correction, 4)
