"""차트 스펙/프로파일/응답 타입 정의."""
from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

ChartType = Literal["bar", "line", "pie", "scatter", "area"]
DataTransform = Literal["none", "sum", "average", "count"]
ColumnType = Literal["numeric", "date", "text"]
Strategy = Literal["plain", "grouped", "pie", "scatter"]

CHART_TYPES = ("bar", "line", "pie", "scatter", "area")
DATA_TRANSFORMS = ("none", "sum", "average", "count")
REQUIRED_FIELDS = ("chartType", "x", "y", "summary")


class CamelModel(BaseModel):
    # wire 포맷은 camelCase, 파이썬 속성은 snake_case
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# 입력: 컬럼 하나의 raw cell 값들
# 출력: ColumnProfile 모델
# min/max는 numeric 컬럼에서 숫자 값이 하나 이상 있을 때만 채운다
class ColumnProfile(CamelModel):
    name: str
    type: ColumnType = "text"
    min: Optional[float] = None
    max: Optional[float] = None
    unique_count: int = 0


# 검증을 통과한 차트 스펙
# oracle 응답(dict)은 validate_chart_spec을 거쳐야만 이 모델이 된다
class ChartSpec(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    chart_type: ChartType
    x: str
    y: str
    group_by: Optional[str] = None
    data_transform: DataTransform = "none"
    summary: str = ""


# 생성 응답: 스펙 + 전체 행(렌더 단계에서 다시 보내지 않도록 echo)
class GenerateResponse(ChartSpec):
    data: List[Dict[str, Any]] = Field(default_factory=list)
    # 요청 추적 ID
    request_id: Optional[str] = None
    # 단계별 처리 지연시간(ms)
    stage_latency_ms: Dict[str, float] = Field(default_factory=dict)


# 렌더 응답: 변환된 series 레코드(pie는 {name, value} 목록)
class RenderResponse(CamelModel):
    chart_type: ChartType
    strategy: Strategy
    series: List[Dict[str, Any]] = Field(default_factory=list)
    request_id: Optional[str] = None


class ProfileResponse(CamelModel):
    columns: List[ColumnProfile] = Field(default_factory=list)
    row_count: int = 0
