"""Promote an untrusted chart suggestion to a ChartSpec.

Checks run in a fixed order: required fields, chart type, axis columns.
Those three are fatal. An unknown ``groupBy`` or ``dataTransform`` is repaired
silently (null / ``none``) and only logged.
"""
from __future__ import annotations

from typing import Any, List, Mapping, Optional, Sequence

from chartgen.engine.errors import (
    ChartSpecError,
    InvalidChartTypeError,
    MissingFieldError,
    UnknownColumnError,
)
from chartgen.models.chart_spec import CHART_TYPES, DATA_TRANSFORMS, REQUIRED_FIELDS, ChartSpec
from chartgen.utils.logging import log_event


def _is_column(value: Any, columns: Sequence[str]) -> bool:
    return isinstance(value, str) and value in columns


def _normalize_group_by(candidate: Mapping[str, Any], columns: Sequence[str]) -> Optional[str]:
    group_by = candidate.get("groupBy")
    if not group_by:
        return None
    if _is_column(group_by, columns):
        return group_by
    log_event("spec.repair", {"field": "groupBy", "value": group_by, "repaired_to": None}, level="warning")
    return None


def _normalize_data_transform(candidate: Mapping[str, Any]) -> str:
    data_transform = candidate.get("dataTransform")
    if isinstance(data_transform, str) and data_transform in DATA_TRANSFORMS:
        return data_transform
    if data_transform is not None:
        log_event(
            "spec.repair",
            {"field": "dataTransform", "value": data_transform, "repaired_to": "none"},
            level="warning",
        )
    return "none"


def _normalize_summary(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def validate_chart_spec(candidate: Any, columns: Sequence[str], *, request_id: Optional[str] = None) -> ChartSpec:
    """Validate ``candidate`` against the dataset's column names.

    Raises MissingFieldError, InvalidChartTypeError or UnknownColumnError.
    """
    column_list: List[str] = [str(col) for col in columns]
    try:
        if not isinstance(candidate, Mapping):
            raise MissingFieldError(REQUIRED_FIELDS[0])

        for field in REQUIRED_FIELDS:
            if field not in candidate:
                raise MissingFieldError(field)

        chart_type = candidate.get("chartType")
        if not isinstance(chart_type, str) or chart_type not in CHART_TYPES:
            raise InvalidChartTypeError(chart_type)

        x = candidate.get("x")
        y = candidate.get("y")
        missing = [value for value in (x, y) if not _is_column(value, column_list)]
        if missing:
            raise UnknownColumnError(missing)
    except ChartSpecError as exc:
        log_event(
            "spec.rejected",
            {"request_id": request_id, "code": exc.code, "reason": exc.reason, "message": exc.message},
            level="warning",
        )
        raise

    return ChartSpec(
        chart_type=chart_type,
        x=x,
        y=y,
        group_by=_normalize_group_by(candidate, column_list),
        data_transform=_normalize_data_transform(candidate),
        summary=_normalize_summary(candidate.get("summary")),
    )
