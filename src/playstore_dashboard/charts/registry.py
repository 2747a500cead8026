from __future__ import annotations

import logging
from collections.abc import Sequence

from playstore_dashboard.charts.base import ChartBuilder, ChartResult
from playstore_dashboard.charts.categories import (
    AppsByCategoryChart,
    PriciestPaidCategoriesChart,
    TopCategoriesByInstallsChart,
)
from playstore_dashboard.charts.installs import (
    InstallsByContentRatingChart,
    InstallsByPriceBucketChart,
    InstallsVsReviewsChart,
)
from playstore_dashboard.charts.releases import AndroidRequirementChart, UpdatesByYearChart
from playstore_dashboard.config import AppConfig
from playstore_dashboard.records import CleanRecord

LOGGER = logging.getLogger(__name__)


def default_chart_builders(config: AppConfig | None = None) -> list[ChartBuilder]:
    top_n = config.charts.top_n if config is not None else 10
    return [
        TopCategoriesByInstallsChart(top_n=top_n),
        InstallsByContentRatingChart(),
        PriciestPaidCategoriesChart(top_n=top_n),
        InstallsVsReviewsChart(),
        AppsByCategoryChart(),
        UpdatesByYearChart(),
        AndroidRequirementChart(),
        InstallsByPriceBucketChart(),
    ]


def build_all_charts(
    records: Sequence[CleanRecord],
    builders: Sequence[ChartBuilder] | None = None,
) -> list[ChartResult]:
    """Run every builder over the same snapshot; one failure does not stop the rest."""
    results: list[ChartResult] = []
    for builder in builders if builders is not None else default_chart_builders():
        try:
            result = builder.build(records)
        except Exception:
            LOGGER.exception("Chart %s failed", builder.name)
            result = ChartResult.error(builder.name, builder.title)
        if not result.ok:
            LOGGER.info("Chart %s: %s", result.chart, result.message)
        results.append(result)
    return results
