from __future__ import annotations

import math
from collections.abc import Sequence

import pandas as pd

from playstore_dashboard.charts.base import ChartBuilder, ChartResult
from playstore_dashboard.features.aggregates import group_by, sum_by
from playstore_dashboard.features.regression import fit_log_log
from playstore_dashboard.formatting import format_number
from playstore_dashboard.records import CleanRecord

UNKNOWN_CONTENT_RATING = "Unknown"

# Half-open [lower, upper) price ranges in USD.
PRICE_BUCKETS: tuple[tuple[str, float, float], ...] = (
    ("[0, 1)", 0.0, 1.0),
    ("[1, 5)", 1.0, 5.0),
    ("[5, 10)", 5.0, 10.0),
    ("10+", 10.0, math.inf),
)


class InstallsByContentRatingChart(ChartBuilder):
    name = "installs_by_content_rating"
    title = "Installs by content rating"

    def build(self, records: Sequence[CleanRecord]) -> ChartResult:
        groups = group_by(records, lambda record: record.content_rating or UNKNOWN_CONTENT_RATING)
        if not groups:
            return self._no_data()

        data = pd.DataFrame(
            [
                (content_rating, sum_by(items, lambda record: record.installs))
                for content_rating, items in groups.items()
            ],
            columns=["content_rating", "installs"],
        )
        data["label"] = data["installs"].map(format_number)
        leader = data.sort_values("installs", ascending=False, kind="mergesort").iloc[0]
        return self._result(
            data,
            {
                "kind": "bar",
                "x": "content_rating",
                "y": "installs",
                "text": "label",
                "x_title": "Content rating",
                "y_title": "Installs (sum)",
                "color": "secondary",
            },
            summary={"groups": len(data), "leader": leader["content_rating"]},
            insights=[
                f"The {leader['content_rating']} group concentrates the most installs.",
                "The differences suggest age groups with different adoption.",
            ],
        )


class InstallsVsReviewsChart(ChartBuilder):
    name = "installs_vs_reviews"
    title = "Installs vs reviews"

    def build(self, records: Sequence[CleanRecord]) -> ChartResult:
        points = [
            (record.review_count, record.installs)
            for record in records
            if record.review_count > 0 and record.installs > 0
        ]
        if not points:
            return self._no_data()

        data = pd.DataFrame(points, columns=["reviews", "installs"])
        fit = fit_log_log(data["reviews"].to_numpy(), data["installs"].to_numpy())
        x_line = [float(data["reviews"].min()), float(data["reviews"].max())]
        y_line = fit.predict(x_line).tolist()
        correlation_text = f"{fit.correlation:.2f}" if math.isfinite(fit.correlation) else "0"
        return ChartResult(
            chart=self.name,
            title=f"{self.title} (r ≈ {correlation_text})",
            status="ok",
            data=data,
            layout={
                "kind": "scatter_trend",
                "x": "reviews",
                "y": "installs",
                "x_title": "Reviews (log)",
                "y_title": "Installs (log)",
                "x_scale": "log",
                "y_scale": "log",
                "color": "scatter",
                "trend_color": "primary",
                "trend_x": x_line,
                "trend_y": y_line,
                "annotation": f"r ≈ {correlation_text}",
            },
            summary={
                "points": fit.n,
                "correlation": fit.correlation,
                "slope": fit.slope,
                "intercept": fit.intercept,
            },
            insights=[
                "There is a positive relationship: more installs go with more reviews.",
                "The trend line reinforces the proportionality on a log scale.",
            ],
        )


class InstallsByPriceBucketChart(ChartBuilder):
    """Installs per price range.

    Buckets are filled from every record with a finite price, free apps
    included, so the [0, 1) range carries the free catalogue.
    """

    name = "installs_by_price_bucket"
    title = "Installs by price range (USD)"

    def build(self, records: Sequence[CleanRecord]) -> ChartResult:
        priced = [record for record in records if math.isfinite(record.price)]
        if not priced:
            return self._no_data()

        rows = [
            (
                label,
                sum_by(
                    [record for record in priced if lower <= record.price < upper],
                    lambda record: record.installs,
                ),
            )
            for label, lower, upper in PRICE_BUCKETS
        ]
        data = pd.DataFrame(rows, columns=["bucket", "installs"])
        data["label"] = data["installs"].map(format_number)
        leader = max(rows, key=lambda row: row[1])[0]
        return self._result(
            data,
            {
                "kind": "bar",
                "x": "bucket",
                "y": "installs",
                "text": "label",
                "x_title": "Price range",
                "y_title": "Installs (sum)",
                "color": "warning",
            },
            summary={"leader": leader},
            insights=[
                f"The {leader} range concentrates the most installs.",
                "Cheaper apps attract higher volume.",
            ],
        )
