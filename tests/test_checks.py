"""Tests for the individual validation checks."""

from __future__ import annotations

import math

import pytest

from survey_validator.core.models.point import SurveyData, SurveyPoint
from survey_validator.core.results.validation_report import Severity, TraverseClosureDetails
from survey_validator.core.validation.checks import (
    validate_input,
    detect_duplicates,
    detect_outliers,
    check_distance_and_bearing,
    check_traverse_closure,
    calculate_summary_statistics,
    INPUT_VALIDATION,
    DUPLICATE_DETECTION,
    OUTLIER_DETECTION,
    TRAVERSE_CLOSURE,
)


def dataset(*points: SurveyPoint) -> SurveyData:
    return SurveyData(project_id="T", points=points)


def tp(pid: str, e: float, n: float) -> SurveyPoint:
    return SurveyPoint(point_id=pid, easting=e, northing=n, survey_type="traverse")


# ---------------------------------------------------------------------------
# Input validation
# ---------------------------------------------------------------------------

class TestValidateInput:
    def test_empty_dataset_single_error(self):
        issues = validate_input(dataset())
        assert len(issues) == 1
        assert issues[0].severity is Severity.ERROR
        assert issues[0].check_name == INPUT_VALIDATION
        assert issues[0].description == "No survey points provided"

    def test_empty_identifier_is_error(self):
        issues = validate_input(dataset(SurveyPoint("", 10.0, 20.0)))
        assert [i.severity for i in issues] == [Severity.ERROR]

    def test_zero_coordinates_warning(self):
        issues = validate_input(dataset(SurveyPoint("Z", 0.0, 0.0)))
        assert len(issues) == 1
        assert issues[0].severity is Severity.WARNING
        assert issues[0].point_ids == ["Z"]

    def test_single_zero_coordinate_is_fine(self):
        assert validate_input(dataset(SurveyPoint("Z", 0.0, 5.0))) == []

    def test_unknown_type_warning(self):
        issues = validate_input(dataset(SurveyPoint("X", 1.0, 1.0, survey_type="gps")))
        assert len(issues) == 1
        assert issues[0].severity is Severity.WARNING
        assert "gps" in issues[0].description

    def test_type_tags_are_case_sensitive(self):
        data = SurveyData.from_dict({"points": [
            {"point_id": "A", "easting": 1.0, "northing": 2.0, "survey_type": "Traverse"},
        ]})
        issues = validate_input(data)
        assert len(issues) == 1
        assert issues[0].severity is Severity.WARNING
        assert "Traverse" in issues[0].description
        assert data.traverse_points() == []

    def test_known_and_missing_types_are_fine(self):
        data = dataset(
            SurveyPoint("A", 1.0, 1.0, survey_type="traverse"),
            SurveyPoint("B", 2.0, 2.0, survey_type="control"),
            SurveyPoint("C", 3.0, 3.0, survey_type="detail"),
            SurveyPoint("D", 4.0, 4.0),
        )
        assert validate_input(data) == []


# ---------------------------------------------------------------------------
# Duplicates
# ---------------------------------------------------------------------------

class TestDetectDuplicates:
    def test_close_pair_flagged_far_point_not(self):
        p1 = SurveyPoint("P1", 100.0, 100.0)
        p2 = SurveyPoint("P2", 100.0005, 100.0005)
        p3 = SurveyPoint("P3", 200.0, 200.0)

        issues = detect_duplicates(dataset(p1, p2, p3))

        assert len(issues) == 1
        assert set(issues[0].point_ids) == {"P1", "P2"}
        assert issues[0].check_name == DUPLICATE_DETECTION
        flagged = {pid for i in issues for pid in i.point_ids}
        assert "P3" not in flagged

    def test_exact_duplicate_is_error(self):
        issues = detect_duplicates(dataset(SurveyPoint("A", 5.0, 5.0), SurveyPoint("B", 5.0, 5.0)))
        assert issues[0].severity is Severity.ERROR
        assert issues[0].description.startswith("Duplicate")
        assert issues[0].details == {"distance": 0.0}

    def test_near_duplicate_is_warning(self):
        issues = detect_duplicates(dataset(SurveyPoint("A", 5.0, 5.0), SurveyPoint("B", 5.005, 5.0)))
        assert len(issues) == 1
        assert issues[0].severity is Severity.WARNING
        assert issues[0].description.startswith("Near-duplicate")

    def test_one_centimetre_is_not_flagged(self):
        assert detect_duplicates(dataset(SurveyPoint("A", 5.0, 5.0), SurveyPoint("B", 5.02, 5.0))) == []

    def test_symmetric(self):
        a = SurveyPoint("A", 1.0, 1.0)
        b = SurveyPoint("B", 1.0, 1.0005)
        forward = detect_duplicates(dataset(a, b))
        backward = detect_duplicates(dataset(b, a))
        assert len(forward) == len(backward) == 1
        assert set(forward[0].point_ids) == set(backward[0].point_ids)
        assert forward[0].severity is backward[0].severity

    def test_each_unordered_pair_once(self):
        points = [SurveyPoint(f"P{i}", 10.0, 10.0) for i in range(4)]
        issues = detect_duplicates(dataset(*points))
        pairs = [frozenset(i.point_ids) for i in issues]
        # C(4, 2)
        assert len(pairs) == 6
        assert len(set(pairs)) == 6


# ---------------------------------------------------------------------------
# Outliers
# ---------------------------------------------------------------------------

class TestDetectOutliers:
    def test_needs_three_points(self):
        assert detect_outliers(dataset(SurveyPoint("A", 0.0, 0.0), SurveyPoint("B", 1e6, 1e6))) == []

    def test_coincident_points_have_no_outliers(self):
        points = [SurveyPoint(f"P{i}", 3.0, 3.0) for i in range(5)]
        assert detect_outliers(dataset(*points)) == []

    def test_far_point_flagged(self):
        points = [SurveyPoint(f"P{i}", 100.0 + (i % 5), 100.0 + (i // 5)) for i in range(20)]
        points.append(SurveyPoint("FAR", 10000.0, 10000.0))

        issues = detect_outliers(dataset(*points))

        assert [i.point_ids for i in issues] == [["FAR"]]
        issue = issues[0]
        assert issue.check_name == OUTLIER_DETECTION
        assert issue.severity is Severity.WARNING
        assert issue.details["distance"] > issue.details["threshold"]

    def test_outlier_masked_in_small_set(self):
        # With few points the outlier inflates the dispersion enough to hide itself
        points = [SurveyPoint("A", 0.0, 0.0), SurveyPoint("B", 1.0, 0.0), SurveyPoint("C", 1000.0, 0.0)]
        assert detect_outliers(dataset(*points)) == []


# ---------------------------------------------------------------------------
# Distance and bearing
# ---------------------------------------------------------------------------

class TestDistanceAndBearing:
    def test_needs_two_traverse_points(self):
        assert check_distance_and_bearing(dataset(tp("A", 0.0, 0.0))) == []

    def test_non_traverse_points_ignored(self):
        data = dataset(
            tp("A", 0.0, 0.0),
            SurveyPoint("D", 0.0, 0.05, survey_type="detail"),
            tp("B", 0.0, 100.0),
        )
        assert check_distance_and_bearing(data) == []

    def test_short_leg_warning(self):
        issues = check_distance_and_bearing(dataset(tp("A", 0.0, 0.0), tp("B", 0.05, 0.0)))
        assert len(issues) == 1
        assert issues[0].severity is Severity.WARNING
        assert issues[0].point_ids == ["A", "B"]
        assert issues[0].details["distance"] == pytest.approx(0.05)

    def test_u_turn_warning(self):
        data = dataset(tp("A", 0.0, 0.0), tp("B", 0.0, 100.0), tp("C", 0.5, 0.0))
        issues = check_distance_and_bearing(data)
        turns = [i for i in issues if "bearing_change" in i.details]
        assert len(turns) == 1
        assert turns[0].severity is Severity.WARNING
        assert turns[0].details["bearing_change"] > 170.0

    def test_distance_ratio_info(self):
        data = dataset(tp("A", 0.0, 0.0), tp("B", 100.0, 0.0), tp("C", 100.0, 5.0))
        issues = check_distance_and_bearing(data)
        assert len(issues) == 1
        assert issues[0].severity is Severity.INFO
        assert issues[0].details["ratio"] == pytest.approx(0.05)

    def test_regular_traverse_clean(self):
        data = dataset(tp("A", 0.0, 0.0), tp("B", 100.0, 0.0), tp("C", 100.0, 100.0), tp("D", 0.0, 100.0))
        assert check_distance_and_bearing(data) == []


# ---------------------------------------------------------------------------
# Traverse closure
# ---------------------------------------------------------------------------

def square(close_e: float, close_n: float):
    return dataset(
        tp("A", 1000.0, 1000.0),
        tp("B", 1100.0, 1000.0),
        tp("C", 1100.0, 1100.0),
        tp("D", 1000.0, 1100.0),
        tp("A", 1000.0 + close_e, 1000.0 + close_n),
    )


class TestTraverseClosure:
    def test_needs_three_points(self):
        assert check_traverse_closure(dataset(tp("A", 0.0, 0.0), tp("B", 0.0, 10.0))) == []

    def test_open_traverse_skipped(self):
        data = dataset(tp("A", 0.0, 0.0), tp("B", 100.0, 0.0), tp("C", 200.0, 0.0))
        assert check_traverse_closure(data) == []

    @pytest.mark.parametrize(
        "misclosure, severity, quality",
        [
            (0.02, Severity.INFO, "Good"),            # 1:20000
            (0.06, Severity.INFO, "Acceptable"),      # ~1:6667
            (0.2, Severity.WARNING, "Poor"),          # 1:2000
            (0.8, Severity.ERROR, "Unacceptable"),    # 1:500
        ],
    )
    def test_quality_bands(self, misclosure, severity, quality):
        issues = check_traverse_closure(square(misclosure, 0.0))
        assert len(issues) == 1
        issue = issues[0]
        assert issue.check_name == TRAVERSE_CLOSURE
        assert issue.severity is severity
        assert isinstance(issue.details, TraverseClosureDetails)
        assert issue.details.quality.startswith(quality)
        assert issue.details.linear_misclosure == pytest.approx(misclosure)

    def test_perfect_closure(self):
        issues = check_traverse_closure(square(0.0, 0.0))
        assert issues[0].severity is Severity.INFO
        assert issues[0].details.relative_precision == "1:inf (perfect)"
        assert issues[0].details.linear_misclosure == 0.0


# ---------------------------------------------------------------------------
# Summary
# ---------------------------------------------------------------------------

class TestSummaryStatistics:
    def test_counts_and_extent(self):
        data = dataset(
            SurveyPoint("T1", 0.0, 0.0, height=10.0, survey_type="traverse"),
            SurveyPoint("T2", 10.0, 0.0, survey_type="traverse"),
            SurveyPoint("C1", 10.0, 20.0, height=12.0, survey_type="control"),
            SurveyPoint("D1", 0.0, 20.0, survey_type="detail"),
            SurveyPoint("U1", 5.0, 10.0, survey_type="gps"),
        )
        s = calculate_summary_statistics(data)
        assert s.total_points == 5
        assert s.traverse_points == 2
        assert s.control_points == 1
        assert s.detail_points == 1
        assert s.points_with_height == 2
        assert s.bounding_box.max_northing == 20.0
        assert s.centroid_easting == pytest.approx(5.0)
        assert s.centroid_northing == pytest.approx(10.0)

    def test_empty(self):
        s = calculate_summary_statistics(dataset())
        assert s.total_points == 0
        assert s.centroid_easting == 0.0
