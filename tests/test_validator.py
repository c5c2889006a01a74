from __future__ import annotations

import pytest
from pydantic import ValidationError

from chartgen.engine.errors import (
    ChartSpecError,
    InvalidChartTypeError,
    MissingFieldError,
    UnknownColumnError,
)
from chartgen.engine.validator import validate_chart_spec

COLUMNS = ["region", "month", "sales"]


def _candidate(**overrides):
    candidate = {
        "chartType": "bar",
        "x": "month",
        "y": "sales",
        "groupBy": "region",
        "dataTransform": "sum",
        "summary": "Sales by month and region.",
    }
    candidate.update(overrides)
    return candidate


def test_validate_chart_spec_accepts_valid_candidate() -> None:
    spec = validate_chart_spec(_candidate(), COLUMNS)

    assert spec.chart_type == "bar"
    assert spec.x == "month"
    assert spec.y == "sales"
    assert spec.group_by == "region"
    assert spec.data_transform == "sum"
    assert spec.summary == "Sales by month and region."


def test_validate_chart_spec_missing_y_is_fatal() -> None:
    candidate = _candidate()
    del candidate["y"]

    with pytest.raises(MissingFieldError) as exc_info:
        validate_chart_spec(candidate, COLUMNS)

    assert exc_info.value.field == "y"
    assert exc_info.value.reason == "MissingField"
    assert exc_info.value.to_detail()["code"] == "MISSING_FIELD"


def test_validate_chart_spec_missing_summary_is_fatal() -> None:
    candidate = _candidate()
    del candidate["summary"]

    with pytest.raises(MissingFieldError):
        validate_chart_spec(candidate, COLUMNS)


def test_validate_chart_spec_non_mapping_is_missing_fields() -> None:
    with pytest.raises(MissingFieldError):
        validate_chart_spec(["bar", "month", "sales"], COLUMNS)


def test_validate_chart_spec_checks_required_fields_before_chart_type() -> None:
    candidate = _candidate(chartType="donut")
    del candidate["x"]

    with pytest.raises(MissingFieldError):
        validate_chart_spec(candidate, COLUMNS)


def test_validate_chart_spec_invalid_chart_type() -> None:
    with pytest.raises(InvalidChartTypeError) as exc_info:
        validate_chart_spec(_candidate(chartType="donut"), COLUMNS)

    assert exc_info.value.code == "INVALID_ENUM"
    assert exc_info.value.reason == "InvalidEnum"


def test_validate_chart_spec_unknown_axis_column() -> None:
    with pytest.raises(UnknownColumnError) as exc_info:
        validate_chart_spec(_candidate(y="revenue"), COLUMNS)

    assert exc_info.value.columns == ["revenue"]
    assert isinstance(exc_info.value, ChartSpecError)
    assert exc_info.value.reason == "UnknownColumn"


def test_validate_chart_spec_resets_unknown_group_by() -> None:
    spec = validate_chart_spec(_candidate(groupBy="nonexistent_col"), COLUMNS)

    assert spec.group_by is None


def test_validate_chart_spec_empty_group_by_is_null() -> None:
    assert validate_chart_spec(_candidate(groupBy=""), COLUMNS).group_by is None
    candidate = _candidate()
    del candidate["groupBy"]
    assert validate_chart_spec(candidate, COLUMNS).group_by is None


@pytest.mark.parametrize("data_transform", [None, "median", 3])
def test_validate_chart_spec_defaults_data_transform(data_transform) -> None:
    spec = validate_chart_spec(_candidate(dataTransform=data_transform), COLUMNS)

    assert spec.data_transform == "none"


def test_validate_chart_spec_absent_data_transform_defaults_to_none() -> None:
    candidate = _candidate()
    del candidate["dataTransform"]

    assert validate_chart_spec(candidate, COLUMNS).data_transform == "none"


def test_validate_chart_spec_null_summary_becomes_empty() -> None:
    spec = validate_chart_spec(_candidate(summary=None), COLUMNS)

    assert spec.summary == ""


def test_validated_spec_is_immutable() -> None:
    spec = validate_chart_spec(_candidate(), COLUMNS)

    with pytest.raises(ValidationError):
        spec.x = "region"  # type: ignore[misc]
