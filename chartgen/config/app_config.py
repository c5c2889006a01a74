"""Request limits and oracle context sizes read from the environment."""
from __future__ import annotations

import os
from typing import List

from dotenv import load_dotenv

load_dotenv()


def _env_int(name: str, default: int, *, minimum: int = 1) -> int:
    raw = str(os.getenv(name, "")).strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return max(minimum, value)


def _env_list(name: str, default: str) -> List[str]:
    return [item.strip() for item in os.getenv(name, default).split(",") if item.strip()]


MAX_ROWS = _env_int("CHARTGEN_MAX_ROWS", 50000)
MAX_OBJECTIVE_LENGTH = _env_int("CHARTGEN_MAX_OBJECTIVE_LENGTH", 2000)
# 프롬프트에 넣을 샘플 행 / 컬럼별 고유값 개수
SAMPLE_ROWS = _env_int("CHARTGEN_SAMPLE_ROWS", 10)
UNIQUE_VALUES = _env_int("CHARTGEN_UNIQUE_VALUES", 10)
CORS_ALLOW_ORIGINS = _env_list("CORS_ALLOW_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000")
