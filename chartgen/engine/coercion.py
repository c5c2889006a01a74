"""Cell-level numeric/date classification and tolerant number parsing."""
from __future__ import annotations

import math
import re
from typing import Any, Optional

import pandas as pd

_NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

NUMERIC = "numeric"
DATE = "date"
TEXT = "text"

_RELATIVE_DATE_WORDS = frozenset(("now", "today"))


def is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, float) and math.isnan(value):
        return False
    if isinstance(value, str) and value == "":
        return False
    return True


def _native_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        numeric = float(value)
        return numeric if math.isfinite(numeric) else None
    return None


def strict_number(value: Any) -> Optional[float]:
    """Return the value as a float only when the whole cell is a finite number."""
    if isinstance(value, (bool, int, float)):
        return _native_number(value)
    text = str(value).strip()
    if not _NUMBER_RE.fullmatch(text):
        return None
    numeric = float(text)
    return numeric if math.isfinite(numeric) else None


def _date_text(value: Any) -> Optional[str]:
    if isinstance(value, (bool, int, float)):
        return None
    text = str(value).strip()
    # pandas가 상대 시각 키워드도 날짜로 받아들이므로 제외
    if not text or text.lower() in _RELATIVE_DATE_WORDS:
        return None
    return text


def _to_timestamps(texts: Any) -> Any:
    # format="mixed": 첫 값으로 형식을 추론하지 않고 셀마다 따로 해석
    return pd.to_datetime(texts, errors="coerce", format="mixed", utc=True)


def _parse_date(text: str) -> Any:
    try:
        return _to_timestamps(text)
    except (ValueError, TypeError, OverflowError):
        return pd.NaT


def is_date(value: Any) -> bool:
    text = _date_text(value)
    if text is None:
        return False
    return not pd.isna(_parse_date(text))


def classify_cell(value: Any) -> str:
    # numeric 판정이 date 판정보다 우선
    if strict_number(value) is not None:
        return NUMERIC
    if is_date(value):
        return DATE
    return TEXT


def classify_series(values: pd.Series) -> pd.Series:
    """Column-wide ``classify_cell``: one date parse over the non-numeric cells."""
    kinds = pd.Series(TEXT, index=values.index, dtype=object)
    if values.empty:
        return kinds
    numeric_mask = values.map(lambda v: strict_number(v) is not None).astype(bool)
    kinds[numeric_mask] = NUMERIC

    texts = values[~numeric_mask].map(_date_text).dropna()
    if texts.empty:
        return kinds
    try:
        parsed = _to_timestamps(texts.astype(str))
    except (ValueError, TypeError, OverflowError):
        parsed = texts.map(_parse_date)
    kinds.loc[parsed.index[parsed.notna().to_numpy()]] = DATE
    return kinds


def parse_number(value: Any) -> Optional[float]:
    """Tolerant parse: longest leading decimal literal, whitespace ignored.

    Returns ``None`` for anything unparseable or non-finite.
    """
    if value is None:
        return None
    if isinstance(value, (bool, int, float)):
        return _native_number(value)
    match = _NUMBER_RE.match(str(value).strip())
    if not match:
        return None
    numeric = float(match.group(0))
    return numeric if math.isfinite(numeric) else None


def coerce_number(value: Any) -> float:
    parsed = parse_number(value)
    return 0.0 if parsed is None else parsed
