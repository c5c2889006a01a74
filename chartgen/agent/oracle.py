"""차트 스펙 추천(LLM) 호출.

- 데이터셋 요약(컬럼 타입/통계, 샘플 행, 고유값)과 사용자 목표로 프롬프트를 만든다.
- 응답에서 JSON 객체만 추출해 그대로 돌려준다. 검증은 하지 않는다(untrusted).
"""
from __future__ import annotations

import json
import re
from typing import Any, Callable, Dict, List, Mapping, Sequence

from openai import OpenAI

from chartgen.config import app_config, llm_config
from chartgen.engine.errors import OracleError
from chartgen.utils.logging import log_event

SuggestFn = Callable[[str, Dict[str, Any]], Dict[str, Any]]

_JSON_FENCE_RE = re.compile(r"```(?:json)?(.*?)```", re.IGNORECASE | re.DOTALL)
_JSON_DECODER = json.JSONDecoder()
_ARABIC_RE = re.compile(r"[\u0600-\u06FF]")
_CHINESE_RE = re.compile(r"[\u4E00-\u9FFF]")
_WORD_RE = re.compile(r"[^\W\d_]+", re.UNICODE)
_FRENCH_WORDS = frozenset(
    (
        "le", "la", "les", "et", "à", "un", "une", "dans", "par", "pour", "avec", "sur",
        "de", "du", "des", "je", "tu", "il", "elle", "nous", "vous", "ils", "elles",
    )
)
_LANGUAGE_NAMES = {"en": "English", "fr": "French", "ar": "Arabic", "zh": "Chinese"}


def detect_language(text: str) -> str:
    """Coarse guess of the objective's language: ar, zh, fr or en."""
    normalized = str(text or "")
    if _ARABIC_RE.search(normalized):
        return "ar"
    if _CHINESE_RE.search(normalized):
        return "zh"
    words = {word.lower() for word in _WORD_RE.findall(normalized)}
    if words & _FRENCH_WORDS:
        return "fr"
    return "en"


def _unique_head(values: Sequence[Any], limit: int) -> List[Any]:
    seen: List[Any] = []
    for value in values:
        if value not in seen:
            seen.append(value)
            if len(seen) >= limit:
                break
    return seen


def build_data_context(
    columns: Sequence[str],
    rows: Sequence[Mapping[str, Any]],
    column_types: Mapping[str, str],
    column_stats: Mapping[str, Any],
    *,
    sample_rows: int = app_config.SAMPLE_ROWS,
    unique_values: int = app_config.UNIQUE_VALUES,
) -> Dict[str, Any]:
    sample_lines = [
        ", ".join("" if row.get(col) is None else str(row.get(col)) for col in columns)
        for row in rows[:sample_rows]
    ]
    return {
        "totalRows": len(rows),
        "columns": [
            {"name": col, "type": column_types.get(col), "stats": column_stats.get(col)}
            for col in columns
        ],
        "sampleRows": "\n".join(sample_lines),
        "uniqueValues": {
            col: _unique_head([row.get(col) for row in rows], unique_values) for col in columns
        },
    }


def build_prompt(objective: str, data_context: Mapping[str, Any]) -> str:
    language = _LANGUAGE_NAMES[detect_language(objective)]
    columns_json = json.dumps(data_context.get("columns", []), ensure_ascii=False, indent=2, default=str)
    unique_json = json.dumps(data_context.get("uniqueValues", {}), ensure_ascii=False, indent=2, default=str)
    return (
        "You are a data visualization expert. Analyze the dataset and the user objective "
        "and recommend the best visualization.\n\n"
        f"The user asked in {language}. Write the summary in {language}.\n\n"
        "Dataset overview:\n"
        f"- Total rows: {data_context.get('totalRows', 0)}\n"
        f"- Columns with types and stats: {columns_json}\n"
        f"- Sample rows:\n{data_context.get('sampleRows', '')}\n\n"
        f"Unique values per column (first few): {unique_json}\n\n"
        f'User objective: "{objective}"\n\n'
        "Return a JSON object with:\n"
        '1. chartType: one of ["bar","line","pie","scatter","area"]\n'
        "2. x: x-axis column name (must exist in columns)\n"
        "3. y: y-axis column name (must exist in columns, numeric for most charts)\n"
        "4. groupBy: grouping column name for multi-series, or null\n"
        '5. dataTransform: one of ["none","sum","average","count"]\n'
        "6. summary: 2-4 sentences with key insights, what the chart shows, notable "
        "patterns and practical implications\n\n"
        "Return only valid JSON, no markdown or explanation."
    )


def extract_json_object(text: str) -> Dict[str, Any]:
    """First JSON object in a model reply: bare, inside a ``` fence, or inside prose."""
    raw = str(text or "").strip()
    fence = _JSON_FENCE_RE.search(raw)
    body = fence.group(1) if fence else raw

    start = body.find("{")
    while start != -1:
        try:
            parsed, _ = _JSON_DECODER.raw_decode(body, start)
        except json.JSONDecodeError:
            parsed = None
        if isinstance(parsed, dict):
            return parsed
        start = body.find("{", start + 1)

    raise ValueError("no JSON object in model reply" if raw else "model reply is empty")


def _complete(prompt: str) -> str:
    api_key = llm_config.OPENAI_API_KEY
    if not api_key:
        raise OracleError("ORACLE_UNAVAILABLE", "OPENAI_API_KEY is not configured")

    client = OpenAI(api_key=api_key, timeout=llm_config.OPENAI_TIMEOUT_SEC)
    try:
        response = client.chat.completions.create(
            model=llm_config.OPENAI_MODEL or "gpt-4o-mini",
            messages=[
                {"role": "system", "content": "You answer with a single JSON object."},
                {"role": "user", "content": prompt},
            ],
            response_format={"type": "json_object"},
        )
    except Exception as exc:
        raise OracleError("ORACLE_CALL_FAILED", f"chart suggestion call failed: {exc}") from exc

    choices = list(getattr(response, "choices", []) or [])
    if not choices:
        raise OracleError("ORACLE_CALL_FAILED", "chart suggestion response has no choices")
    content = getattr(choices[0].message, "content", None)
    return content if isinstance(content, str) else ""


def suggest_chart_spec(objective: str, data_context: Dict[str, Any]) -> Dict[str, Any]:
    """Ask the model for a candidate spec. The result is not validated."""
    prompt = build_prompt(objective, data_context)
    log_event(
        "oracle.request",
        {
            "model": llm_config.OPENAI_MODEL,
            "language": detect_language(objective),
            "total_rows": data_context.get("totalRows"),
            "prompt_chars": len(prompt),
        },
    )
    text = _complete(prompt)
    try:
        candidate = extract_json_object(text)
    except ValueError as exc:
        log_event("oracle.error", {"error": str(exc), "raw_text": text[:500]}, level="error")
        raise OracleError("ORACLE_PARSE_FAILED", "Failed to parse AI response", raw_text=text) from exc

    log_event("oracle.success", {"fields": sorted(candidate.keys())})
    return candidate
