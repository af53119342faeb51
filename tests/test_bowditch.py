"""Tests for the Bowditch (compass rule) traverse adjustment."""

from __future__ import annotations

import math

import pytest

from survey_validator.core.models.options import TraverseOptions
from survey_validator.core.models.point import SurveyData, SurveyPoint
from survey_validator.core.results.traverse_result import TraverseResult, TraverseType
from survey_validator.core.results.validation_report import ResultStatus
from survey_validator.core.solver.bowditch import adjust_traverse_bowditch, suggest_fixes


def tp(pid: str, e: float, n: float) -> SurveyPoint:
    return SurveyPoint(point_id=pid, easting=e, northing=n, survey_type="traverse")


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def square_traverse() -> SurveyData:
    """Closed 100 m square, last station repeats the first id with ~14 mm misclosure."""
    return SurveyData(
        project_id="SQ",
        points=(
            tp("A", 1000.000, 1000.000),
            tp("B", 1100.005, 1000.002),
            tp("C", 1100.008, 1100.004),
            tp("D", 1000.003, 1100.006),
            tp("A", 1000.012, 1000.008),
        ),
    )


@pytest.fixture
def bad_square_traverse() -> SurveyData:
    """Same square closing 25 cm east of the start."""
    return SurveyData(
        project_id="SQ-BAD",
        points=(
            tp("A", 1000.000, 1000.000),
            tp("B", 1100.005, 1000.002),
            tp("C", 1100.008, 1100.004),
            tp("D", 1000.003, 1100.006),
            tp("A", 1000.250, 1000.000),
        ),
    )


# ---------------------------------------------------------------------------
# Scenarios
# ---------------------------------------------------------------------------

class TestSquareTraverse:
    def test_passes(self, square_traverse):
        result = adjust_traverse_bowditch(square_traverse)

        assert result.status is ResultStatus.PASS
        assert result.traverse_type is TraverseType.CLOSED
        assert len(result.legs) == 4
        assert result.total_distance == pytest.approx(400.0, abs=0.2)
        assert result.linear_misclosure < 0.02
        assert result.precision > 10000
        assert result.message.startswith("Traverse meets 1:5000 requirement")
        assert result.suggested_fixes == []

    def test_misclosure_is_sum_of_deltas(self, square_traverse):
        result = adjust_traverse_bowditch(square_traverse)
        assert result.misclosure_e == pytest.approx(0.012, abs=1e-9)
        assert result.misclosure_n == pytest.approx(0.008, abs=1e-9)

    def test_corrections_cancel_misclosure(self, square_traverse):
        result = adjust_traverse_bowditch(square_traverse)
        sum_ce = sum(leg.correction_e for leg in result.legs)
        sum_cn = sum(leg.correction_n for leg in result.legs)
        assert sum_ce == pytest.approx(-result.misclosure_e, abs=1e-12)
        assert sum_cn == pytest.approx(-result.misclosure_n, abs=1e-12)

    def test_corrections_proportional_to_leg_length(self, square_traverse):
        result = adjust_traverse_bowditch(square_traverse)
        for leg in result.legs:
            share = leg.distance / result.total_distance
            assert leg.correction_e == pytest.approx(-result.misclosure_e * share)
            assert leg.adjusted_delta_e == pytest.approx(leg.delta_e + leg.correction_e)

    def test_first_point_held_fixed(self, square_traverse):
        result = adjust_traverse_bowditch(square_traverse)
        first = result.adjusted_points[0]
        assert first.point_id == "A"
        assert first.adjusted_easting == 1000.000
        assert first.adjusted_northing == 1000.000
        assert first.residual_distance == 0.0

    def test_closing_station_not_repeated(self, square_traverse):
        result = adjust_traverse_bowditch(square_traverse)
        ids = [p.point_id for p in result.adjusted_points]
        assert ids == ["A", "B", "C", "D"]

    def test_adjusted_coordinates_rounded(self, square_traverse):
        result = adjust_traverse_bowditch(square_traverse)
        for p in result.adjusted_points:
            assert p.adjusted_easting == round(p.adjusted_easting, 3)
            assert p.residual_e == round(p.residual_e, 4)

    def test_bearings_in_range(self, square_traverse):
        result = adjust_traverse_bowditch(square_traverse)
        assert all(0.0 <= leg.bearing < 360.0 for leg in result.legs)
        assert result.legs[0].bearing == pytest.approx(90.0, abs=0.01)


class TestFailingTraverse:
    def test_fails_required_precision(self, bad_square_traverse):
        result = adjust_traverse_bowditch(bad_square_traverse, TraverseOptions(required_precision=10000))

        assert result.status is ResultStatus.FAIL
        assert result.precision < 2000
        assert result.required_precision == 10000
        assert "does NOT meet 1:10000" in result.message

    def test_fix_suggestions(self, bad_square_traverse):
        result = adjust_traverse_bowditch(bad_square_traverse, TraverseOptions(required_precision=10000))

        assert any(f.startswith("Re-check distance") for f in result.suggested_fixes)
        assert any("Easting error dominant" in f for f in result.suggested_fixes)
        assert not any("Northing error dominant" in f for f in result.suggested_fixes)

    def test_short_leg_hint(self):
        data = SurveyData(project_id="S", points=(
            tp("A", 0.0, 0.0),
            tp("B", 100.0, 0.0),
            tp("C", 100.0, 100.0),
            tp("D", 5.0, 100.0),
            tp("E", 0.0, 100.0),
            tp("A", 0.3, 0.3),
        ))
        result = adjust_traverse_bowditch(data, TraverseOptions(required_precision=10000))
        assert result.status is ResultStatus.FAIL
        short = [f for f in result.suggested_fixes if f.startswith("Short leg")]
        assert len(short) == 1
        assert "D-E" in short[0]

    def test_suggest_fixes_without_legs(self):
        assert suggest_fixes(TraverseResult.failure("x")) == []


class TestDegenerateTraverse:
    def test_two_points_is_error(self):
        data = SurveyData(project_id="T", points=(tp("A", 0.0, 0.0), tp("B", 10.0, 0.0)))
        result = adjust_traverse_bowditch(data)

        assert result.status is ResultStatus.ERROR
        assert result.legs == []
        assert result.adjusted_points == []
        assert result.closure_ratio == ""

    def test_only_traverse_points_used(self):
        data = SurveyData(project_id="T", points=(
            tp("A", 0.0, 0.0),
            SurveyPoint("X", 50.0, 50.0, survey_type="detail"),
            tp("B", 10.0, 0.0),
        ))
        assert adjust_traverse_bowditch(data).status is ResultStatus.ERROR

    def test_zero_length_is_error(self):
        data = SurveyData(project_id="T", points=(tp("A", 5.0, 5.0), tp("B", 5.0, 5.0), tp("C", 5.0, 5.0)))
        result = adjust_traverse_bowditch(data)
        assert result.status is ResultStatus.ERROR
        assert result.legs == []

    @pytest.mark.parametrize("coords", [
        [(0.0, 0.0), (10.0, 0.0)],
        [(5.0, 5.0), (5.0, 5.0), (5.0, 5.0)],
    ])
    def test_error_to_dict_omits_classification(self, coords):
        points = tuple(tp(chr(ord("A") + i), e, n) for i, (e, n) in enumerate(coords))
        data = adjust_traverse_bowditch(SurveyData(project_id="T", points=points)).to_dict()

        assert data["status"] == "ERROR"
        for key in ("traverse_type", "traverse_type_desc", "closure_ratio", "precision", "required_precision"):
            assert key not in data
        assert data["legs"] == []

    def test_pass_to_dict_keeps_classification(self):
        data = SurveyData(project_id="T", points=(
            tp("A", 0.0, 0.0), tp("B", 100.0, 0.0), tp("C", 100.0, 100.0), tp("A", 0.0, 0.0),
        ))
        out = adjust_traverse_bowditch(data).to_dict()
        assert out["traverse_type"] == "closed"
        assert out["required_precision"] == 5000.0
        assert "closure_ratio" in out

    def test_perfect_closure_infinite_precision(self):
        data = SurveyData(project_id="T", points=(
            tp("A", 0.0, 0.0), tp("B", 100.0, 0.0), tp("C", 100.0, 100.0), tp("A", 0.0, 0.0),
        ))
        result = adjust_traverse_bowditch(data)
        assert result.status is ResultStatus.PASS
        assert math.isinf(result.precision)
        assert result.closure_ratio == "1:inf (perfect)"
        assert result.to_dict()["precision"] is None


class TestOpenTraverse:
    def test_open_classification(self):
        data = SurveyData(project_id="T", points=(
            tp("A", 0.0, 0.0), tp("B", 100.0, 0.0), tp("C", 200.0, 10.0),
        ))
        result = adjust_traverse_bowditch(data)

        assert result.traverse_type is TraverseType.OPEN
        assert result.traverse_type_desc.startswith("Open traverse")
        assert result.suggested_fixes[0].startswith("Consider closing the traverse")
        assert result.misclosure_e == pytest.approx(200.0)
        assert result.misclosure_n == pytest.approx(10.0)

    def test_loop_with_misclosure_is_closed(self):
        data = SurveyData(project_id="T", points=(
            tp("A", 0.0, 0.0), tp("B", 100.0, 0.0), tp("C", 100.0, 100.0), tp("D", 0.0, 100.0), tp("E", 1.0, 1.0),
        ))
        result = adjust_traverse_bowditch(data)
        assert result.traverse_type is TraverseType.CLOSED
        assert "loop with misclosure" in result.traverse_type_desc
        # E is a distinct station, so it is emitted
        assert [p.point_id for p in result.adjusted_points] == ["A", "B", "C", "D", "E"]
