from __future__ import annotations

import math
from collections.abc import Sequence

import pandas as pd

from playstore_dashboard.charts.base import NO_PAID_APPS, ChartBuilder, ChartResult
from playstore_dashboard.features.aggregates import count_by, group_by, mean_by, median_by, sum_by
from playstore_dashboard.formatting import PLACEHOLDER, format_number
from playstore_dashboard.records import CleanRecord

DEFAULT_TOP_N = 10


class TopCategoriesByInstallsChart(ChartBuilder):
    name = "top_categories_by_installs"
    title = "Top 10 categories by installs"

    def __init__(self, top_n: int = DEFAULT_TOP_N) -> None:
        self.top_n = top_n

    def build(self, records: Sequence[CleanRecord]) -> ChartResult:
        groups = group_by(records, lambda record: record.category)
        totals = [
            (category, sum_by(items, lambda record: record.installs))
            for category, items in groups.items()
        ]
        top = sorted(totals, key=lambda item: item[1], reverse=True)[: self.top_n]
        if not top:
            return self._no_data()

        # Largest last so a horizontal bar chart reads top-down.
        display = list(reversed(top))
        data = pd.DataFrame(display, columns=["category", "installs"])
        data["label"] = data["installs"].map(format_number)
        return self._result(
            data,
            {
                "kind": "barh",
                "x": "installs",
                "y": "category",
                "text": "label",
                "x_title": "Installs (sum)",
                "y_title": "",
                "color": "primary",
            },
            summary={"categories": len(top), "leader": top[0][0]},
            insights=[
                "Leading categories concentrate a significant share of installs.",
                f"The last category in the top {len(top)} is {top[-1][0]}.",
            ],
        )


class PriciestPaidCategoriesChart(ChartBuilder):
    name = "priciest_paid_categories"
    title = "Priciest paid categories (average price)"

    def __init__(self, top_n: int = DEFAULT_TOP_N) -> None:
        self.top_n = top_n

    def build(self, records: Sequence[CleanRecord]) -> ChartResult:
        paid = [
            record
            for record in records
            if record.is_paid and math.isfinite(record.price) and record.price > 0
        ]
        if not paid:
            return self._no_data(NO_PAID_APPS)

        rows = []
        for category, items in group_by(paid, lambda record: record.category).items():
            mean_price = mean_by(items, lambda record: record.price)
            if not math.isfinite(mean_price):
                continue
            rows.append(
                {
                    "category": category,
                    "mean_price": mean_price,
                    "median_price": median_by(items, lambda record: record.price),
                    "count": len(items),
                }
            )
        top = sorted(rows, key=lambda row: row["mean_price"], reverse=True)[: self.top_n]
        if not top:
            return self._no_data()

        return self._result(
            pd.DataFrame(top, columns=["category", "mean_price", "median_price", "count"]),
            {
                "kind": "bar",
                "x": "category",
                "y": "mean_price",
                "x_title": "Category",
                "y_title": "Average price (USD)",
                "color": "accent",
            },
            summary={"paid_apps": len(paid), "leader": top[0]["category"]},
            insights=[
                f"Paid apps in {top[0]['category'] or PLACEHOLDER} tend to cost the most.",
                "Other categories show more accessible prices.",
            ],
        )


class AppsByCategoryChart(ChartBuilder):
    name = "apps_by_category"
    title = "Number of apps by category"

    def build(self, records: Sequence[CleanRecord]) -> ChartResult:
        counts = count_by(records, lambda record: record.category)
        if not counts:
            return self._no_data()

        ordered = sorted(counts.items(), key=lambda item: item[1], reverse=True)
        return self._result(
            pd.DataFrame(ordered, columns=["category", "apps"]),
            {
                "kind": "bar",
                "x": "category",
                "y": "apps",
                "x_title": "Category",
                "y_title": "Number of apps",
                "color": "info",
            },
            summary={"categories": len(ordered), "leader": ordered[0][0]},
            insights=[
                f"The {ordered[0][0]} category stands out by number of apps.",
                "The distribution suggests saturated areas versus niches.",
            ],
        )
