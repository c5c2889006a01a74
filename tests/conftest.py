from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List

import pandas as pd
import pytest

FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"


@pytest.fixture
def sales_rows() -> List[Dict[str, Any]]:
    return [
        {"region": "east", "month": "Jan", "sales": "10"},
        {"region": "east", "month": "Feb", "sales": "20"},
        {"region": "west", "month": "Jan", "sales": "5"},
    ]


@pytest.fixture
def sales_csv() -> pd.DataFrame:
    return pd.read_csv(FIXTURES_DIR / "sales.csv", dtype=str, keep_default_na=False)
