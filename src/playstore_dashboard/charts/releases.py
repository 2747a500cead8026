from __future__ import annotations

import math
from collections.abc import Sequence

import pandas as pd

from playstore_dashboard.charts.base import NO_VALID_DATES, ChartBuilder, ChartResult
from playstore_dashboard.features.aggregates import count_by
from playstore_dashboard.records import CleanRecord


class UpdatesByYearChart(ChartBuilder):
    name = "updates_by_year"
    title = "Updates by year"

    def build(self, records: Sequence[CleanRecord]) -> ChartResult:
        dated = [record for record in records if record.update_year]
        if not dated:
            return self._no_data(NO_VALID_DATES)

        counts = sorted(count_by(dated, lambda record: record.update_year).items())
        peak_year = max(counts, key=lambda item: item[1])[0]
        return self._result(
            pd.DataFrame(counts, columns=["year", "apps"]),
            {
                "kind": "area",
                "x": "year",
                "y": "apps",
                "x_title": "Year",
                "y_title": "Number of apps",
                "color": "timeline",
            },
            summary={"first_year": counts[0][0], "last_year": counts[-1][0], "peak_year": peak_year},
            insights=[
                f"Update activity peaks around {peak_year}.",
                "Activity may reflect adoption of new Android versions.",
            ],
        )


class AndroidRequirementChart(ChartBuilder):
    name = "android_requirement"
    title = "Minimum Android version (major)"

    def build(self, records: Sequence[CleanRecord]) -> ChartResult:
        versions = [
            record.android_version_min
            for record in records
            if record.android_version_min is not None and math.isfinite(record.android_version_min)
        ]
        if not versions:
            return self._no_data()

        counts = sorted(count_by(versions, lambda version: int(math.floor(version))).items())
        data = pd.DataFrame(counts, columns=["major_version", "apps"])
        data["major_version"] = data["major_version"].astype(str)
        lowest = counts[0][0]
        return self._result(
            data,
            {
                "kind": "bar",
                "x": "major_version",
                "y": "apps",
                "x_title": "Major version",
                "y_title": "Number of apps",
                "color": "android",
            },
            summary={"lowest_major": lowest, "highest_major": counts[-1][0]},
            insights=[
                f"Apps mostly require Android {lowest} or later.",
                "Most apps target modern versions.",
            ],
        )
