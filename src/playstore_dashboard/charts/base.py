from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Literal

import pandas as pd

from playstore_dashboard.records import CleanRecord

ChartStatus = Literal["ok", "no_data", "error"]
ChartKind = Literal["bar", "barh", "area", "scatter_trend"]

NO_VALID_DATA = "No valid data"
NO_PAID_APPS = "No paid apps"
NO_VALID_DATES = "No valid dates"
PROCESSING_ERROR = "Error processing data"


@dataclass(frozen=True)
class ChartResult:
    """Aggregate behind one chart, or the reason there is nothing to draw.

    ``data`` holds the aggregate in display order; ``layout`` carries the
    render hints (kind, axis titles, scales) the figure helper needs.
    """

    chart: str
    title: str
    status: ChartStatus
    data: pd.DataFrame = field(default_factory=pd.DataFrame)
    layout: dict[str, Any] = field(default_factory=dict)
    summary: dict[str, Any] = field(default_factory=dict)
    insights: list[str] = field(default_factory=list)
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @classmethod
    def no_data(cls, chart: str, title: str, message: str = NO_VALID_DATA) -> ChartResult:
        return cls(chart=chart, title=title, status="no_data", message=message)

    @classmethod
    def error(cls, chart: str, title: str, message: str = PROCESSING_ERROR) -> ChartResult:
        return cls(chart=chart, title=title, status="error", message=message)

    def status_row(self) -> dict[str, Any]:
        return {
            "chart": self.chart,
            "title": self.title,
            "status": self.status,
            "message": self.message,
            "points": int(len(self.data)),
            **{f"summary_{key}": value for key, value in self.summary.items()},
        }


class ChartBuilder:
    name: str
    title: str

    def build(self, records: Sequence[CleanRecord]) -> ChartResult:
        raise NotImplementedError

    def _no_data(self, message: str = NO_VALID_DATA) -> ChartResult:
        return ChartResult.no_data(self.name, self.title, message)

    def _result(
        self,
        data: pd.DataFrame,
        layout: dict[str, Any],
        *,
        summary: dict[str, Any] | None = None,
        insights: list[str] | None = None,
    ) -> ChartResult:
        return ChartResult(
            chart=self.name,
            title=self.title,
            status="ok",
            data=data.reset_index(drop=True),
            layout=layout,
            summary=summary or {},
            insights=insights or [],
        )
