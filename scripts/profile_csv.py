from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

import pandas as pd

BASE_DIR = Path(__file__).resolve().parents[1]
if str(BASE_DIR) not in sys.path:
    sys.path.insert(0, str(BASE_DIR))

from chartgen.engine.profiler import profile_columns
from chartgen.engine.transformer import transform_series
from chartgen.engine.validator import validate_chart_spec


def _load_rows(path: Path) -> tuple[list[str], list[dict]]:
    # 모든 셀을 문자열 그대로 읽는다(빈 셀은 "")
    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    return [str(col) for col in df.columns], df.to_dict(orient="records")


def main() -> None:
    parser = argparse.ArgumentParser(description="Profile a CSV file and optionally build chart series.")
    parser.add_argument("csv_path", type=Path)
    parser.add_argument("--spec", help="chart spec JSON, e.g. '{\"chartType\": \"pie\", ...}'")
    args = parser.parse_args()

    columns, rows = _load_rows(args.csv_path)
    output: dict = {
        "rowCount": len(rows),
        "columns": [p.model_dump(by_alias=True, exclude_none=True) for p in profile_columns(rows, columns)],
    }
    if args.spec:
        spec = validate_chart_spec(json.loads(args.spec), columns)
        output["spec"] = spec.model_dump(by_alias=True)
        output["series"] = transform_series(rows, spec)
    print(json.dumps(output, ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()
