"""Validation checks for survey datasets.

Every check has the same signature, ``SurveyData -> List[ValidationIssue]``,
is pure and total (degenerate input gives an empty or single-issue list,
never an exception) and can run concurrently with the others.

Checks:
- validate_input: empty dataset, empty ids, zero coordinates, unknown tags
- detect_duplicates: coincident and near-coincident point pairs
- check_distance_and_bearing: short legs, U-turns, leg length jumps
- detect_outliers: points far from the centroid
- check_traverse_closure: loop misclosure and relative precision
"""

from __future__ import annotations

import logging
import math
from typing import List

from ..geometry.spatial import (
    bearing,
    bearing_difference,
    bounding_box,
    centroid,
    distance,
    is_loop,
    standard_deviation,
)
from ..models.point import SurveyData, SurveyPoint, SurveyType
from ..results.validation_report import (
    Severity,
    SummaryStatistics,
    TraverseClosureDetails,
    ValidationIssue,
    format_ratio,
)

logger = logging.getLogger(__name__)

# Thresholds (meters unless noted)
DUPLICATE_THRESHOLD = 0.001
NEAR_DUPLICATE_THRESHOLD = 0.01
OUTLIER_FACTOR = 3.0              # standard deviations from centroid
MAX_BEARING_CHANGE = 170.0        # degrees, nearly a U-turn
MIN_TRAVERSE_DISTANCE = 0.1
MIN_DISTANCE_RATIO = 0.1
MAX_DISTANCE_RATIO = 10.0
GOOD_PRECISION = 10000.0
ACCEPTABLE_PRECISION = 5000.0
POOR_PRECISION = 1000.0

INPUT_VALIDATION = "input_validation"
DUPLICATE_DETECTION = "duplicate_detection"
DISTANCE_BEARING_CHECK = "distance_bearing_check"
OUTLIER_DETECTION = "outlier_detection"
TRAVERSE_CLOSURE = "traverse_closure"


def _traverse_length(points: List[SurveyPoint]) -> float:
    return sum(distance(points[i - 1], points[i]) for i in range(1, len(points)))


def validate_input(data: SurveyData) -> List[ValidationIssue]:
    """Basic sanity checks before anything else."""
    if len(data.points) == 0:
        return [ValidationIssue(
            check_name=INPUT_VALIDATION,
            severity=Severity.ERROR,
            description="No survey points provided",
        )]

    issues: List[ValidationIssue] = []
    for p in data.points:
        if not p.point_id:
            issues.append(ValidationIssue(
                check_name=INPUT_VALIDATION,
                severity=Severity.ERROR,
                description="Point found with empty Point ID",
            ))

        if p.easting == 0 and p.northing == 0:
            issues.append(ValidationIssue(
                check_name=INPUT_VALIDATION,
                severity=Severity.WARNING,
                point_ids=[p.point_id],
                description=f"Point {p.point_id} has zero coordinates",
            ))

        if p.survey_type and not SurveyType.is_known(p.survey_type):
            issues.append(ValidationIssue(
                check_name=INPUT_VALIDATION,
                severity=Severity.WARNING,
                point_ids=[p.point_id],
                description=f"Point {p.point_id} has unknown type: {p.survey_type}",
            ))
    return issues


def detect_duplicates(data: SurveyData) -> List[ValidationIssue]:
    """Compare every unordered pair of points once (O(n^2))."""
    issues: List[ValidationIssue] = []
    points = data.points

    for i in range(len(points)):
        for j in range(i + 1, len(points)):
            a, b = points[i], points[j]
            dist = distance(a, b)

            if dist < DUPLICATE_THRESHOLD:
                severity = Severity.ERROR
                label = "Duplicate"
            elif dist < NEAR_DUPLICATE_THRESHOLD:
                severity = Severity.WARNING
                label = "Near-duplicate"
            else:
                continue

            issues.append(ValidationIssue(
                check_name=DUPLICATE_DETECTION,
                severity=severity,
                point_ids=[a.point_id, b.point_id],
                description=f"{label} points: {a.point_id} and {b.point_id} ({dist:.4f}m apart)",
                details={"distance": dist},
            ))
    return issues


def detect_outliers(data: SurveyData) -> List[ValidationIssue]:
    """Flag points farther than OUTLIER_FACTOR standard deviations from the centroid.

    The centroid and dispersion include every point, the outliers too, which
    dampens how far out an outlier appears.
    """
    points = data.points
    if len(points) < 3:
        return []

    ce, cn = centroid(points)
    sd = standard_deviation(points, ce, cn)
    if sd == 0:
        return []

    threshold = OUTLIER_FACTOR * sd
    issues: List[ValidationIssue] = []
    for p in points:
        dist = math.hypot(p.easting - ce, p.northing - cn)
        if dist > threshold:
            issues.append(ValidationIssue(
                check_name=OUTLIER_DETECTION,
                severity=Severity.WARNING,
                point_ids=[p.point_id],
                description=f"Point {p.point_id} may be an outlier ({dist:.1f}m from centroid)",
                details={"distance": dist, "threshold": threshold},
            ))
    return issues


def check_distance_and_bearing(data: SurveyData) -> List[ValidationIssue]:
    """Leg plausibility along the traverse-tagged points, in dataset order."""
    pts = data.traverse_points()
    if len(pts) < 2:
        return []

    issues: List[ValidationIssue] = []
    prev_bearing = 0.0
    prev_dist = 0.0

    for i in range(1, len(pts)):
        p1, p2 = pts[i - 1], pts[i]
        dist = distance(p1, p2)
        brg = bearing(p1, p2)

        if dist < MIN_TRAVERSE_DISTANCE:
            issues.append(ValidationIssue(
                check_name=DISTANCE_BEARING_CHECK,
                severity=Severity.WARNING,
                point_ids=[p1.point_id, p2.point_id],
                description=f"Very short distance between {p1.point_id} and {p2.point_id}: {dist:.4f}m",
                details={"distance": dist},
            ))

        if i > 1:
            change = bearing_difference(brg, prev_bearing)
            if change > MAX_BEARING_CHANGE:
                issues.append(ValidationIssue(
                    check_name=DISTANCE_BEARING_CHECK,
                    severity=Severity.WARNING,
                    point_ids=[p1.point_id, p2.point_id],
                    description=f"Large bearing change at {p1.point_id}: {change:.1f}°",
                    details={"bearing_change": change},
                ))

            if prev_dist > 0:
                ratio = dist / prev_dist
                if ratio > MAX_DISTANCE_RATIO or ratio < MIN_DISTANCE_RATIO:
                    issues.append(ValidationIssue(
                        check_name=DISTANCE_BEARING_CHECK,
                        severity=Severity.INFO,
                        point_ids=[p1.point_id, p2.point_id],
                        description=f"Unusual distance ratio at {p1.point_id}: {ratio:.1f}",
                        details={"ratio": ratio},
                    ))

        prev_bearing = brg
        prev_dist = dist
    return issues


def _closure_quality(precision: float):
    if precision >= GOOD_PRECISION:
        return "Good (better than 1:10000)", Severity.INFO
    if precision >= ACCEPTABLE_PRECISION:
        return "Acceptable (1:5000 to 1:10000)", Severity.INFO
    if precision >= POOR_PRECISION:
        return "Poor (1:1000 to 1:5000)", Severity.WARNING
    return "Unacceptable (worse than 1:1000)", Severity.ERROR


def check_traverse_closure(data: SurveyData) -> List[ValidationIssue]:
    """Grade the misclosure of a traverse that returns near its start."""
    pts = data.traverse_points()
    if len(pts) < 3:
        return []

    first, last = pts[0], pts[-1]
    total_len = _traverse_length(pts)
    if not is_loop(distance(first, last), total_len):
        logger.debug("Traverse does not close on itself; closure check skipped")
        return []

    misc_e = last.easting - first.easting
    misc_n = last.northing - first.northing
    lin_misc = math.hypot(misc_e, misc_n)
    precision = total_len / lin_misc if lin_misc > 0 else math.inf

    quality, severity = _closure_quality(precision)
    ratio = format_ratio(precision)

    return [ValidationIssue(
        check_name=TRAVERSE_CLOSURE,
        severity=severity,
        point_ids=[first.point_id, last.point_id],
        description=f"Traverse closure: {lin_misc:.4f}m misclosure, {ratio} precision ({quality})",
        details=TraverseClosureDetails(
            misclosure_easting=misc_e,
            misclosure_northing=misc_n,
            linear_misclosure=lin_misc,
            traverse_length=total_len,
            relative_precision=ratio,
            quality=quality,
        ),
    )]


def calculate_summary_statistics(data: SurveyData) -> SummaryStatistics:
    """Point counts by type, height coverage, extent and centroid."""
    stats = SummaryStatistics(total_points=len(data.points))
    if not data.points:
        return stats

    for p in data.points:
        if p.survey_type == SurveyType.TRAVERSE.value:
            stats.traverse_points += 1
        elif p.survey_type == SurveyType.CONTROL.value:
            stats.control_points += 1
        elif p.survey_type == SurveyType.DETAIL.value:
            stats.detail_points += 1
        if p.has_height:
            stats.points_with_height += 1

    stats.bounding_box = bounding_box(data.points)
    stats.centroid_easting, stats.centroid_northing = centroid(data.points)
    return stats
