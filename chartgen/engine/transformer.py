"""Turn raw rows plus a validated ChartSpec into render-ready series.

Four strategies, picked in this order:

- pie: aggregate ``y`` per ``x`` category, largest slice first (``groupBy`` ignored)
- scatter: both axes parsed as numbers, rows that fail are dropped (``groupBy`` ignored)
- grouped: bar/line/area with ``groupBy``; one record per distinct ``x``,
  one numeric field per ``groupBy`` value
- plain: rows copied with ``y`` zero-filled to a number

Every call builds its own accumulators; nothing is shared between calls and
the input rows are never mutated.
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Sequence, Tuple

from chartgen.engine.coercion import coerce_number, parse_number
from chartgen.models.chart_spec import ChartSpec
from chartgen.utils.logging import log_event

Row = Mapping[str, Any]

_ABSENT_KEY = ""


def select_strategy(spec: ChartSpec) -> str:
    if spec.chart_type == "pie":
        return "pie"
    if spec.chart_type == "scatter":
        return "scatter"
    if spec.group_by:
        return "grouped"
    return "plain"


def _category_key(value: Any) -> str:
    if value is None:
        return _ABSENT_KEY
    return value if isinstance(value, str) else str(value)


def _accumulate(current: float, y_value: Any, data_transform: str) -> float:
    if data_transform == "count":
        return current + 1
    # sum, average, none: running total (average divides out later)
    return current + coerce_number(y_value)


def prepare_plain_data(rows: Sequence[Row], spec: ChartSpec) -> List[Dict[str, Any]]:
    return [{**row, spec.y: coerce_number(row.get(spec.y))} for row in rows]


def prepare_grouped_data(rows: Sequence[Row], spec: ChartSpec) -> List[Dict[str, Any]]:
    x_col, y_col, group_col = spec.x, spec.y, spec.group_by
    data_transform = spec.data_transform

    x_values: Dict[str, Any] = {}
    group_keys: Dict[str, None] = {}
    for row in rows:
        raw_x = row.get(x_col)
        x_values.setdefault(_category_key(raw_x), raw_x)
        group_keys.setdefault(_category_key(row.get(group_col)), None)

    sorted_x = sorted(x_values)
    groups = list(group_keys)
    # 모든 (x, group) 칸을 0으로 채워 series 길이를 맞춘다
    cells: Dict[str, Dict[str, float]] = {x_key: {g: 0 for g in groups} for x_key in sorted_x}
    counts: Dict[Tuple[str, str], int] = {}

    for row in rows:
        x_key = _category_key(row.get(x_col))
        bucket = cells.get(x_key)
        if bucket is None:
            continue
        group_key = _category_key(row.get(group_col))
        bucket[group_key] = _accumulate(bucket.get(group_key, 0), row.get(y_col), data_transform)
        if data_transform == "average":
            counts[(x_key, group_key)] = counts.get((x_key, group_key), 0) + 1

    if data_transform == "average":
        for x_key, bucket in cells.items():
            for group_key in groups:
                count = counts.get((x_key, group_key), 0)
                if count:
                    bucket[group_key] = bucket[group_key] / count

    records: List[Dict[str, Any]] = []
    for x_key in sorted_x:
        record: Dict[str, Any] = {x_col: x_values[x_key]}
        record.update(cells[x_key])
        # group 값이 x 컬럼명과 같아도 x 필드는 유지
        record[x_col] = x_values[x_key]
        records.append(record)
    return records


def prepare_pie_data(rows: Sequence[Row], spec: ChartSpec) -> List[Dict[str, Any]]:
    totals: Dict[str, float] = {}
    counts: Dict[str, int] = {}
    for row in rows:
        category = _category_key(row.get(spec.x))
        totals[category] = _accumulate(totals.get(category, 0), row.get(spec.y), spec.data_transform)
        counts[category] = counts.get(category, 0) + 1

    slices = []
    for name, total in totals.items():
        value = total / counts[name] if spec.data_transform == "average" else total
        slices.append({"name": name, "value": value})
    # 큰 조각부터 (동률은 처음 등장한 순서 유지)
    return sorted(slices, key=lambda item: item["value"], reverse=True)


def prepare_scatter_data(rows: Sequence[Row], spec: ChartSpec) -> List[Dict[str, Any]]:
    points: List[Dict[str, Any]] = []
    for row in rows:
        x_value = parse_number(row.get(spec.x))
        y_value = parse_number(row.get(spec.y))
        if x_value is None or y_value is None:
            continue
        points.append({**row, spec.x: x_value, spec.y: y_value})
    return points


_STRATEGIES = {
    "plain": prepare_plain_data,
    "grouped": prepare_grouped_data,
    "pie": prepare_pie_data,
    "scatter": prepare_scatter_data,
}


def transform_series(rows: Sequence[Row], spec: ChartSpec) -> List[Dict[str, Any]]:
    """Build the series for ``spec`` from ``rows`` (pure, no shared state)."""
    strategy = select_strategy(spec)
    series = _STRATEGIES[strategy](rows, spec)
    log_event(
        "transform.done",
        {
            "strategy": strategy,
            "chart_type": spec.chart_type,
            "data_transform": spec.data_transform,
            "input_rows": len(rows),
            "output_records": len(series),
        },
    )
    return series
