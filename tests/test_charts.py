from __future__ import annotations

from pathlib import Path

import pytest

from playstore_dashboard.charts.base import (
    NO_PAID_APPS,
    NO_VALID_DATA,
    NO_VALID_DATES,
    PROCESSING_ERROR,
    ChartBuilder,
    ChartResult,
)
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
from playstore_dashboard.charts.registry import build_all_charts, default_chart_builders
from playstore_dashboard.charts.releases import AndroidRequirementChart, UpdatesByYearChart
from playstore_dashboard.config import ChartsConfig
from playstore_dashboard.records import CleanRecord
from playstore_dashboard.viz.charts import render_all_charts, render_chart


def _record(name: str, category: str = "GAME", **fields) -> CleanRecord:
    return CleanRecord(name=name, category=category, **fields)


def _records() -> list[CleanRecord]:
    return [
        _record("Game One", "GAME", installs=1_000, review_count=10, content_rating="Everyone",
                update_year=2018, android_version_min=4.1),
        _record("Game Two", "GAME", installs=5_000, review_count=100, type="Paid", price=2.5,
                content_rating="Teen", update_year=2018, android_version_min=4.4),
        _record("Tool One", "TOOLS", installs=20_000, review_count=1_000, type="Paid", price=12.0,
                content_rating="", update_year=2016, android_version_min=2.3),
        _record("Art One", "ART", installs=300, type="Free", content_rating="Everyone",
                update_year=2017, android_version_min=5.0),
    ]


class _ExplodingChart(ChartBuilder):
    name = "exploding"
    title = "Exploding"

    def build(self, records):
        raise RuntimeError("boom")


def test_top_categories_by_installs_orders_largest_last() -> None:
    result = TopCategoriesByInstallsChart(top_n=2).build(_records())

    assert result.ok
    assert result.data["category"].tolist() == ["GAME", "TOOLS"]
    assert result.data["installs"].tolist() == [6_000, 20_000]
    assert result.data["label"].tolist() == ["6.000", "20.000"]
    assert result.summary["leader"] == "TOOLS"
    assert result.layout["kind"] == "barh"


def test_installs_by_content_rating_labels_blank_as_unknown() -> None:
    result = InstallsByContentRatingChart().build(_records())

    totals = dict(zip(result.data["content_rating"], result.data["installs"]))
    assert totals == {"Everyone": 1_300, "Teen": 5_000, "Unknown": 20_000}
    assert result.summary["leader"] == "Unknown"


def test_priciest_paid_categories() -> None:
    records = [
        *_records(),
        _record("Game Three", "GAME", installs=10, type="Paid", price=1.0),
        _record("Game Four", "GAME", installs=10, type="Paid", price=9.0),
    ]

    result = PriciestPaidCategoriesChart().build(records)

    assert result.data["category"].tolist() == ["TOOLS", "GAME"]
    assert result.data["mean_price"].tolist() == pytest.approx([12.0, 12.5 / 3])
    assert result.data["median_price"].tolist() == pytest.approx([12.0, 2.5])
    assert result.data["count"].tolist() == [1, 3]

    free_only = [_record("Free App", installs=10, type="Free")]
    empty = PriciestPaidCategoriesChart().build(free_only)
    assert empty.status == "no_data"
    assert empty.message == NO_PAID_APPS


def test_installs_vs_reviews_reports_log_log_correlation() -> None:
    records = [
        _record("Small", review_count=10, installs=100),
        _record("Large", review_count=100, installs=1_000),
        _record("No Reviews", review_count=0, installs=50),
    ]

    result = InstallsVsReviewsChart().build(records)

    assert len(result.data) == 2
    assert result.summary["correlation"] == pytest.approx(1.0)
    assert result.summary["slope"] == pytest.approx(1.0)
    assert result.title == "Installs vs reviews (r ≈ 1.00)"
    assert result.layout["trend_x"] == [10.0, 100.0]
    assert result.layout["trend_y"] == pytest.approx([100.0, 1_000.0])


def test_apps_by_category_sorted_descending() -> None:
    result = AppsByCategoryChart().build(_records())

    assert result.data["category"].tolist() == ["GAME", "TOOLS", "ART"]
    assert result.data["apps"].tolist() == [2, 1, 1]


def test_updates_by_year_ascending() -> None:
    result = UpdatesByYearChart().build(_records())

    assert result.data["year"].tolist() == [2016, 2017, 2018]
    assert result.data["apps"].tolist() == [1, 1, 2]
    assert result.summary["peak_year"] == 2018

    undated = UpdatesByYearChart().build([_record("Undated App")])
    assert undated.message == NO_VALID_DATES


def test_android_requirement_groups_by_major_version() -> None:
    result = AndroidRequirementChart().build(_records())

    assert result.data["major_version"].tolist() == ["2", "4", "5"]
    assert result.data["apps"].tolist() == [1, 2, 1]


def test_price_buckets_include_free_apps() -> None:
    result = InstallsByPriceBucketChart().build(_records())

    totals = dict(zip(result.data["bucket"], result.data["installs"]))
    assert totals == {"[0, 1)": 1_300, "[1, 5)": 5_000, "[5, 10)": 0, "10+": 20_000}
    assert result.summary["leader"] == "10+"


@pytest.mark.parametrize("builder", default_chart_builders(), ids=lambda builder: builder.name)
def test_every_builder_reports_no_data_on_empty_input(builder: ChartBuilder) -> None:
    result = builder.build([])

    assert result.status == "no_data"
    assert result.message in {NO_VALID_DATA, NO_PAID_APPS, NO_VALID_DATES}
    assert result.data.empty


def test_build_all_charts_isolates_failures() -> None:
    builders = [AppsByCategoryChart(), _ExplodingChart(), UpdatesByYearChart()]

    results = build_all_charts(_records(), builders)

    assert [result.status for result in results] == ["ok", "error", "ok"]
    assert results[1].message == PROCESSING_ERROR
    assert results[1].status_row()["points"] == 0


def test_default_builders_cover_eight_charts_in_order() -> None:
    names = [builder.name for builder in default_chart_builders()]

    assert names == [
        "top_categories_by_installs",
        "installs_by_content_rating",
        "priciest_paid_categories",
        "installs_vs_reviews",
        "apps_by_category",
        "updates_by_year",
        "android_requirement",
        "installs_by_price_bucket",
    ]


def test_render_all_charts_writes_figures(tmp_path: Path) -> None:
    results = build_all_charts(_records())
    delays: list[float] = []

    written = render_all_charts(
        results,
        tmp_path / "figures",
        config=ChartsConfig(render_delay_ms=50, width_px=640, default_height_px=320),
        sleep=delays.append,
    )

    assert set(written) == {result.chart for result in results if result.ok}
    assert all(path.exists() for path in written.values())
    assert delays == [0.05] * (len(results) - 1)


def test_render_chart_skips_non_ok_results(tmp_path: Path) -> None:
    result = ChartResult.no_data("empty", "Empty")

    assert render_chart(result, tmp_path / "empty.png") is None
    assert not (tmp_path / "empty.png").exists()
