"""Tests for the input models and options."""

from __future__ import annotations

import dataclasses

import pytest

from survey_validator.core.models import (
    SurveyPoint,
    SurveyData,
    SurveyType,
    LevelingObservation,
    ToleranceClass,
    TraverseOptions,
    EngineOptions,
    DEFAULT_REQUIRED_PRECISION,
)
from survey_validator.core.results.validation_report import Severity, ValidationIssue


class TestSurveyPoint:
    def test_from_dict_aliases(self):
        p = SurveyPoint.from_dict({"id": "T1", "easting": "100.5", "northing": 200, "type": " traverse "})
        assert p.point_id == "T1"
        assert p.easting == 100.5
        assert p.survey_type == "traverse"
        assert p.is_traverse
        assert p.height is None

    def test_from_dict_keeps_type_case(self):
        p = SurveyPoint.from_dict({"id": "T1", "easting": 1.0, "northing": 2.0, "type": "Traverse"})
        assert p.survey_type == "Traverse"
        assert not p.is_traverse

    def test_from_dict_missing_coordinate(self):
        with pytest.raises(KeyError):
            SurveyPoint.from_dict({"point_id": "X", "easting": 1.0})

    def test_from_dict_bad_coordinate(self):
        with pytest.raises(ValueError):
            SurveyPoint.from_dict({"point_id": "X", "easting": "abc", "northing": 1.0})

    def test_to_dict_omits_missing_height(self):
        assert "height" not in SurveyPoint("A", 1.0, 2.0).to_dict()
        assert SurveyPoint("A", 1.0, 2.0, height=3.0).to_dict()["height"] == 3.0

    def test_round_trip(self):
        p = SurveyPoint("A", 1.0, 2.0, height=3.0, survey_type="control", coordinate_system="EPSG:2193")
        assert SurveyPoint.from_dict(p.to_dict()) == p

    def test_is_valid(self):
        assert SurveyPoint("A", 1.0, 2.0).is_valid
        assert not SurveyPoint("", 1.0, 2.0).is_valid
        assert not SurveyPoint("A", 0.0, 2.0).is_valid

    def test_frozen(self):
        p = SurveyPoint("A", 1.0, 2.0)
        with pytest.raises(dataclasses.FrozenInstanceError):
            p.easting = 5.0

    def test_known_types(self):
        assert SurveyType.is_known("detail")
        assert not SurveyType.is_known("gps")


class TestSurveyData:
    def test_points_stored_as_tuple(self):
        data = SurveyData(project_id="P", points=[SurveyPoint("A", 1.0, 1.0)])
        assert isinstance(data.points, tuple)
        assert len(data) == 1

    def test_traverse_points_keep_order(self):
        data = SurveyData(project_id="P", points=(
            SurveyPoint("T2", 2.0, 2.0, survey_type="traverse"),
            SurveyPoint("D1", 5.0, 5.0, survey_type="detail"),
            SurveyPoint("T1", 1.0, 1.0, survey_type="traverse"),
        ))
        assert [p.point_id for p in data.traverse_points()] == ["T2", "T1"]

    def test_from_dict(self):
        data = SurveyData.from_dict({
            "project_id": "P-7",
            "coordinate_system": "local",
            "points": [
                {"point_id": "A", "easting": 1, "northing": 2, "height": None},
                {"point_id": "B", "easting": 3, "northing": 4, "height": ""},
            ],
        })
        assert data.project_id == "P-7"
        assert data.coordinate_system == "local"
        assert [p.point_id for p in data.points] == ["A", "B"]
        assert not any(p.has_height for p in data.points)

    def test_from_dict_rejects_non_list_points(self):
        with pytest.raises(ValueError):
            SurveyData.from_dict({"project_id": "P", "points": {"A": {}}})

    def test_from_dict_without_points(self):
        assert len(SurveyData.from_dict({"project_id": "P"})) == 0


class TestLevelingObservation:
    def test_from_dict_short_keys(self):
        obs = LevelingObservation.from_dict({"point_id": "CP1", "bs": 1.3, "fs": "1.2", "distance": 50})
        assert obs.backsight == 1.3
        assert obs.foresight == 1.2
        assert obs.intermediate is None
        assert obs.is_change_point

    def test_to_dict_omits_missing_readings(self):
        d = LevelingObservation("P1", intermediate=0.9).to_dict()
        assert d == {"point_id": "P1", "intermediate": 0.9}

    def test_negative_distance_rejected(self):
        with pytest.raises(ValueError):
            LevelingObservation("P1", backsight=1.0, distance=-1.0)


class TestOptions:
    def test_default_precision(self):
        assert TraverseOptions().required_precision == DEFAULT_REQUIRED_PRECISION == 5000.0

    def test_non_positive_precision_rejected(self):
        with pytest.raises(ValueError):
            TraverseOptions(required_precision=0)

    @pytest.mark.parametrize(
        "payload, expected",
        [
            ({}, 5000.0),
            ({"required_precision": 10000}, 10000.0),
            ({"required_precision": 0}, 5000.0),
            ({"required_precision": -3, "tolerance_class": "first_order"}, 25000.0),
            ({"tolerance_class": "construction"}, 1000.0),
        ],
    )
    def test_traverse_options_from_dict(self, payload, expected):
        assert TraverseOptions.from_dict(payload).required_precision == expected

    def test_tolerance_class_parse(self):
        assert ToleranceClass.parse(None) is ToleranceClass.THIRD_ORDER
        assert ToleranceClass.parse(" Second_Order ") is ToleranceClass.SECOND_ORDER
        with pytest.raises(ValueError):
            ToleranceClass.parse("zeroth_order")

    def test_construction_levels_as_third_order(self):
        assert ToleranceClass.CONSTRUCTION.leveling_constant_mm == 12.0

    def test_engine_options(self):
        opts = EngineOptions.from_dict({"max_workers": 2, "traverse": {"required_precision": 8000}})
        assert opts.max_workers == 2
        assert opts.traverse.required_precision == 8000
        assert EngineOptions.from_dict(opts.to_dict()) == opts
        with pytest.raises(ValueError):
            EngineOptions(max_workers=0)


class TestValidationIssue:
    def test_from_dict(self):
        issue = ValidationIssue.from_dict({
            "check_name": "duplicate_detection",
            "severity": "warning",
            "description": "Near-duplicate points",
            "point_ids": ["A", "B"],
            "details": {"distance": 0.004},
        })
        assert issue.severity is Severity.WARNING
        assert issue.to_dict()["details"] == {"distance": 0.004}

    def test_severity_penalties(self):
        assert [s.penalty for s in Severity] == [15, 5, 1]
