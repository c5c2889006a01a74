"""Column profiling over raw tabular cells.

- Each non-empty cell is classified on its own (numeric > date > text); dates
  are parsed in one pass per column.
- A column takes the majority type only when it covers more than half of the
  non-empty cells; anything else (including an exact 50/50 split) is text.
- min/max are computed only over cells that classify as numeric themselves.
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

import pandas as pd

from chartgen.engine.coercion import NUMERIC, TEXT, classify_series, is_present, strict_number
from chartgen.models.chart_spec import ColumnProfile

_MAJORITY_RATIO = 0.5


def header_from_rows(rows: Sequence[Mapping[str, Any]]) -> List[str]:
    """Column order taken from the first row, as a header-driven parser yields it."""
    if not rows:
        return []
    return [str(col) for col in rows[0].keys()]


def _column_series(rows: Iterable[Mapping[str, Any]], column: str) -> pd.Series:
    values = [row.get(column) for row in rows]
    return pd.Series(values, dtype=object)


def _resolve_type(kinds: pd.Series) -> str:
    if kinds.empty:
        return TEXT
    counts = kinds.value_counts(sort=True)
    top_kind = str(counts.index[0])
    top_count = int(counts.iloc[0])
    if top_count / len(kinds) > _MAJORITY_RATIO:
        return top_kind
    return TEXT


def profile_column(name: str, series: pd.Series) -> ColumnProfile:
    if series.empty:
        return ColumnProfile(name=name, type=TEXT, unique_count=0)
    values = series[series.map(is_present).astype(bool)]
    if values.empty:
        return ColumnProfile(name=name, type=TEXT, unique_count=0)

    kinds = classify_series(values)
    column_type = _resolve_type(kinds)
    unique_count = int(values.nunique(dropna=True))

    col_min: Optional[float] = None
    col_max: Optional[float] = None
    if column_type == NUMERIC:
        # 컬럼 전체가 아니라 개별적으로 numeric인 값만 사용
        numbers = pd.Series([strict_number(v) for v in values[kinds == NUMERIC]], dtype=float).dropna()
        if not numbers.empty:
            col_min = float(numbers.min())
            col_max = float(numbers.max())

    return ColumnProfile(
        name=name,
        type=column_type,
        min=col_min,
        max=col_max,
        unique_count=unique_count,
    )


def profile_columns(
    rows: Sequence[Mapping[str, Any]],
    columns: Optional[Sequence[str]] = None,
) -> List[ColumnProfile]:
    """Profile every column, preserving header order."""
    names = list(columns) if columns is not None else header_from_rows(rows)
    return [profile_column(name, _column_series(rows, name)) for name in names]


def column_types(profiles: Iterable[ColumnProfile]) -> Dict[str, str]:
    return {profile.name: profile.type for profile in profiles}


def column_stats(profiles: Iterable[ColumnProfile]) -> Dict[str, Dict[str, Any]]:
    return {
        profile.name: {
            "min": profile.min,
            "max": profile.max,
            "uniqueCount": profile.unique_count,
        }
        for profile in profiles
    }
