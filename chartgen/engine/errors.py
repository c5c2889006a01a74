"""Request-level failures raised while promoting a chart suggestion."""
from __future__ import annotations

from typing import Any, Dict, List, Optional


class ChartSpecError(ValueError):
    """A candidate chart spec that cannot be repaired.

    ``code`` is the machine-readable value surfaced in HTTP error details and
    ``reason`` the taxonomy name (MissingField, InvalidEnum, UnknownColumn).
    """

    code = "INVALID_CHART_SPEC"
    reason = "InvalidChartSpec"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_detail(self) -> Dict[str, Any]:
        return {"code": self.code, "reason": self.reason, "message": self.message}


class MissingFieldError(ChartSpecError):
    code = "MISSING_FIELD"
    reason = "MissingField"

    def __init__(self, field: str) -> None:
        super().__init__(f"Missing required field: {field}")
        self.field = field


class InvalidChartTypeError(ChartSpecError):
    code = "INVALID_ENUM"
    reason = "InvalidEnum"

    def __init__(self, chart_type: Any) -> None:
        super().__init__(f"Invalid chart type: {chart_type}")
        self.chart_type = chart_type


class UnknownColumnError(ChartSpecError):
    code = "UNKNOWN_COLUMN"
    reason = "UnknownColumn"

    def __init__(self, columns: List[Any]) -> None:
        names = ", ".join(str(col) for col in columns)
        super().__init__(f"Selected columns not found in dataset: {names}")
        self.columns = list(columns)


class OracleError(RuntimeError):
    """The chart suggestion call failed or returned something unusable."""

    def __init__(self, code: str, message: str, *, raw_text: Optional[str] = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.raw_text = raw_text

    def to_detail(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message}
