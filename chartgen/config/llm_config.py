"""OpenAI settings for the chart suggestion call."""
from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()

# .env에서 읽은 API 키 (없으면 suggestion 호출이 ORACLE_UNAVAILABLE로 실패)
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")

# 기본 모델명
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")


def _env_float(name: str, default: float) -> float:
    raw = str(os.getenv(name, "")).strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


# 클라이언트 단위 timeout(초). 엔진은 재시도하지 않는다.
OPENAI_TIMEOUT_SEC = _env_float("OPENAI_TIMEOUT_SEC", 30.0)
