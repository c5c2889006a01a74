"""Chart generation pipeline: profile → suggest → validate, and render."""
from __future__ import annotations

from time import perf_counter
from typing import Any, Dict, List, Mapping, Optional, Sequence

from chartgen.agent import oracle
from chartgen.engine.profiler import column_stats as derive_column_stats
from chartgen.engine.profiler import column_types as derive_column_types
from chartgen.engine.profiler import header_from_rows, profile_columns
from chartgen.engine.transformer import select_strategy, transform_series
from chartgen.engine.validator import validate_chart_spec
from chartgen.models.chart_spec import GenerateResponse, RenderResponse
from chartgen.utils.logging import log_event, new_request_id


def _elapsed_ms(started: float) -> float:
    return round((perf_counter() - started) * 1000.0, 2)


def _columns_from_rows(rows: Sequence[Mapping[str, Any]]) -> List[str]:
    # render 요청에 columns가 없으면 모든 행의 키를 등장 순서대로 모은다
    seen: Dict[str, None] = {}
    for row in rows:
        for key in row.keys():
            seen.setdefault(str(key), None)
    return list(seen)


def generate_chart_spec(
    columns: Sequence[str],
    rows: List[Dict[str, Any]],
    column_types: Optional[Mapping[str, str]],
    column_stats: Optional[Mapping[str, Any]],
    objective: str,
    *,
    suggest: Optional[oracle.SuggestFn] = None,
    request_id: Optional[str] = None,
) -> GenerateResponse:
    """Suggest a chart for ``objective`` and return it validated, with the rows echoed back.

    Raises ChartSpecError when the suggestion fails a hard check and OracleError
    when the suggestion call itself fails.
    """
    request_id = request_id or new_request_id()
    suggest_fn = suggest or oracle.suggest_chart_spec
    column_names = list(columns) if columns else header_from_rows(rows)
    stage_latency_ms: Dict[str, float] = {}
    total_started = perf_counter()

    started = perf_counter()
    if column_types is None or column_stats is None:
        profiles = profile_columns(rows, column_names)
        column_types = column_types if column_types is not None else derive_column_types(profiles)
        column_stats = column_stats if column_stats is not None else derive_column_stats(profiles)
    data_context = oracle.build_data_context(column_names, rows, column_types, column_stats)
    stage_latency_ms["profile"] = _elapsed_ms(started)

    started = perf_counter()
    try:
        candidate = suggest_fn(objective, data_context)
    except Exception as exc:
        log_event("oracle.error", {"request_id": request_id, "error": str(exc)}, level="error")
        raise
    stage_latency_ms["suggest"] = _elapsed_ms(started)

    started = perf_counter()
    spec = validate_chart_spec(candidate, column_names, request_id=request_id)
    stage_latency_ms["validate"] = _elapsed_ms(started)
    stage_latency_ms["total"] = _elapsed_ms(total_started)

    log_event(
        "request.generate.done",
        {
            "request_id": request_id,
            "chart_type": spec.chart_type,
            "x": spec.x,
            "y": spec.y,
            "group_by": spec.group_by,
            "data_transform": spec.data_transform,
            "stage_latency_ms": stage_latency_ms,
        },
    )
    return GenerateResponse(
        **spec.model_dump(),
        data=rows,
        request_id=request_id,
        stage_latency_ms=stage_latency_ms,
    )


def render_chart_data(
    candidate: Any,
    rows: Sequence[Mapping[str, Any]],
    columns: Optional[Sequence[str]] = None,
    *,
    request_id: Optional[str] = None,
) -> RenderResponse:
    """Validate a (possibly user-edited) spec and build its series."""
    request_id = request_id or new_request_id()
    column_names = list(columns) if columns else _columns_from_rows(rows)
    spec = validate_chart_spec(candidate, column_names, request_id=request_id)
    series = transform_series(rows, spec)
    return RenderResponse(
        chart_type=spec.chart_type,
        strategy=select_strategy(spec),
        series=series,
        request_id=request_id,
    )
