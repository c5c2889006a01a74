from __future__ import annotations

import json
import sys
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parents[1]
if str(BASE_DIR) not in sys.path:
    sys.path.insert(0, str(BASE_DIR))

from chartgen.metrics.evaluator import EvalCase, evaluate_cases


def _sales_rows() -> list[dict]:
    return [
        {"region": "east", "month": "Jan", "sales": "10"},
        {"region": "east", "month": "Feb", "sales": "20"},
        {"region": "west", "month": "Jan", "sales": "5"},
        {"region": "west", "month": "Feb", "sales": "7"},
    ]


def _default_cases() -> list[EvalCase]:
    return [
        EvalCase(
            name="monthly_by_region",
            objective="Compare monthly sales for each region",
            columns=["region", "month", "sales"],
            rows=_sales_rows(),
            expected_chart_type="bar",
        ),
        EvalCase(
            name="region_share",
            objective="What share of sales comes from each region?",
            columns=["region", "month", "sales"],
            rows=_sales_rows(),
            expected_chart_type="pie",
        ),
        EvalCase(
            name="height_vs_weight",
            objective="Is there a relationship between height and weight?",
            columns=["height", "weight"],
            rows=[
                {"height": "170", "weight": "65"},
                {"height": "182", "weight": "80"},
                {"height": "158", "weight": "52"},
            ],
            expected_chart_type="scatter",
        ),
        EvalCase(
            name="empty_dataset",
            objective="Show anything you can",
            columns=["region", "sales"],
            rows=[],
        ),
    ]


def main() -> None:
    summary = evaluate_cases(_default_cases())
    print(json.dumps(summary, ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()
