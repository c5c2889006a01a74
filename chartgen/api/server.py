from __future__ import annotations

import math
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import Field

from chartgen.agent import orchestrator
from chartgen.config.app_config import CORS_ALLOW_ORIGINS, MAX_OBJECTIVE_LENGTH, MAX_ROWS
from chartgen.engine.errors import ChartSpecError, OracleError
from chartgen.engine.profiler import header_from_rows, profile_columns
from chartgen.models.chart_spec import CamelModel, GenerateResponse, ProfileResponse, RenderResponse
from chartgen.utils.logging import log_event, new_request_id

load_dotenv()

app = FastAPI(title="Chart Generation API")

if CORS_ALLOW_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ALLOW_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


class ProfileRequest(CamelModel):
    columns: Optional[List[str]] = None
    data: List[Dict[str, Any]]


class GenerateRequest(CamelModel):
    columns: List[str]
    data: List[Dict[str, Any]]
    column_types: Optional[Dict[str, str]] = None
    column_stats: Optional[Dict[str, Dict[str, Any]]] = None
    objective: str = Field(..., min_length=1, max_length=MAX_OBJECTIVE_LENGTH)


class RenderRequest(CamelModel):
    # spec은 검증 전 payload 그대로 받는다(사용자 수정본 포함)
    spec: Dict[str, Any]
    columns: Optional[List[str]] = None
    data: List[Dict[str, Any]]


def _validate_rows(rows: List[Dict[str, Any]]) -> None:
    if len(rows) > MAX_ROWS:
        raise HTTPException(
            status_code=413,
            detail={"code": "ROWS_LIMIT_EXCEEDED", "message": f"rows size must be <= {MAX_ROWS}"},
        )


def _sanitize_non_finite(value: Any) -> Any:
    # 합계가 overflow(inf)되면 JSON에 실을 수 없으므로 null로 내린다
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, dict):
        return {key: _sanitize_non_finite(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_sanitize_non_finite(item) for item in value]
    return value


def _spec_error(exc: ChartSpecError, request_id: str) -> HTTPException:
    log_event("request.rejected", {"request_id": request_id, **exc.to_detail()}, level="warning")
    return HTTPException(status_code=422, detail=exc.to_detail())


@app.get("/health")
def health_check() -> dict:
    return {"status": "ok"}


@app.post("/profile", response_model=ProfileResponse, response_model_exclude_none=True)
def profile(req: ProfileRequest) -> ProfileResponse:
    _validate_rows(req.data)
    columns = req.columns or header_from_rows(req.data)
    log_event("request.profile", {"row_count": len(req.data), "column_count": len(columns)})
    return ProfileResponse(columns=profile_columns(req.data, columns), row_count=len(req.data))


@app.post("/generate", response_model=GenerateResponse)
def generate(req: GenerateRequest) -> GenerateResponse:
    _validate_rows(req.data)
    request_id = new_request_id()
    log_event(
        "request.generate",
        {
            "request_id": request_id,
            "row_count": len(req.data),
            "column_count": len(req.columns),
            "objective_chars": len(req.objective),
        },
    )
    try:
        return orchestrator.generate_chart_spec(
            req.columns,
            req.data,
            req.column_types,
            req.column_stats,
            req.objective,
            request_id=request_id,
        )
    except ChartSpecError as exc:
        raise _spec_error(exc, request_id) from exc
    except OracleError as exc:
        raise HTTPException(status_code=502, detail=exc.to_detail()) from exc


@app.post("/render", response_model=RenderResponse)
def render(req: RenderRequest) -> RenderResponse:
    _validate_rows(req.data)
    request_id = new_request_id()
    log_event(
        "request.render",
        {"request_id": request_id, "row_count": len(req.data), "chart_type": req.spec.get("chartType")},
    )
    try:
        result = orchestrator.render_chart_data(req.spec, req.data, req.columns, request_id=request_id)
    except ChartSpecError as exc:
        raise _spec_error(exc, request_id) from exc
    return result.model_copy(update={"series": _sanitize_non_finite(result.series)})
