"""Evaluation helpers for chart suggestion quality."""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from statistics import mean
from typing import Any, Dict, List, Optional

from chartgen.agent import oracle
from chartgen.agent.orchestrator import generate_chart_spec, render_chart_data
from chartgen.engine.errors import ChartSpecError, OracleError


@dataclass
class EvalCase:
    name: str
    objective: str
    columns: List[str]
    rows: List[Dict[str, Any]]
    expected_chart_type: Optional[str] = None
    column_types: Optional[Dict[str, str]] = None


def _safe_rate(numerator: int, denominator: int) -> float:
    if denominator <= 0:
        return 0.0
    return round((numerator / denominator) * 100.0, 2)


def _evaluate_case(case: EvalCase, suggest: Optional[oracle.SuggestFn]) -> Dict[str, Any]:
    result: Dict[str, Any] = {
        "name": case.name,
        "accepted": False,
        "renderable": False,
        "chart_type": None,
        "chart_type_match": None,
        "error_code": None,
        "total_latency_ms": 0.0,
    }
    try:
        response = generate_chart_spec(
            case.columns,
            case.rows,
            case.column_types,
            None,
            case.objective,
            suggest=suggest,
            request_id=f"eval-{case.name}",
        )
    except (ChartSpecError, OracleError) as exc:
        result["error_code"] = exc.code
        return result

    result["accepted"] = True
    result["chart_type"] = response.chart_type
    result["total_latency_ms"] = response.stage_latency_ms.get("total", 0.0)
    if case.expected_chart_type:
        result["chart_type_match"] = response.chart_type == case.expected_chart_type

    rendered = render_chart_data(
        response.model_dump(by_alias=True, include={"chart_type", "x", "y", "group_by", "data_transform", "summary"}),
        case.rows,
        case.columns,
        request_id=f"eval-{case.name}",
    )
    result["renderable"] = bool(rendered.series)
    return result


def evaluate_cases(cases: List[EvalCase], *, suggest: Optional[oracle.SuggestFn] = None) -> Dict[str, Any]:
    results = [_evaluate_case(case, suggest) for case in cases]

    accepted = sum(1 for r in results if r["accepted"])
    renderable = sum(1 for r in results if r["renderable"])
    judged = [r for r in results if r["chart_type_match"] is not None]
    matched = sum(1 for r in judged if r["chart_type_match"])
    latency_values = [float(r["total_latency_ms"]) for r in results if r["accepted"]]
    rejection_codes = Counter(r["error_code"] for r in results if r["error_code"])

    return {
        "case_count": len(results),
        "acceptance_rate_pct": _safe_rate(accepted, len(results)),
        "render_success_rate_pct": _safe_rate(renderable, len(results)),
        "chart_type_match_rate_pct": _safe_rate(matched, len(judged)),
        "rejections": dict(rejection_codes),
        "avg_latency_ms": round(mean(latency_values), 2) if latency_values else 0.0,
        "max_latency_ms": round(max(latency_values), 2) if latency_values else 0.0,
        "results": results,
    }
