from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import pandas as pd

from playstore_dashboard.charts.base import ChartResult
from playstore_dashboard.charts.registry import build_all_charts, default_chart_builders
from playstore_dashboard.config import AppConfig
from playstore_dashboard.features.kpis import Kpi, build_dataset_stats, build_kpis
from playstore_dashboard.io.read import read_raw_csv
from playstore_dashboard.io.write import records_to_frame, write_summary, write_table
from playstore_dashboard.paths import build_output_paths
from playstore_dashboard.preprocess.clean import CleaningReport, clean_with_report
from playstore_dashboard.records import CleanRecord
from playstore_dashboard.viz.charts import render_all_charts

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class DashboardArtifacts:
    records: list[CleanRecord]
    report: CleaningReport
    kpis: list[Kpi]
    charts: list[ChartResult]
    figures: dict[str, Path] = field(default_factory=dict)
    outputs: dict[str, Path] = field(default_factory=dict)


def load_clean_records(
    csv_path: Path, config: AppConfig
) -> tuple[list[CleanRecord], CleaningReport]:
    raw = read_raw_csv(csv_path, config)
    return clean_with_report(raw, columns=config.columns)


def write_chart_outputs(
    charts: list[ChartResult],
    out_dir: Path,
    config: AppConfig,
) -> dict[str, Path]:
    paths = build_output_paths(out_dir)
    tables_format = config.outputs.tables_format
    outputs: dict[str, Path] = {}
    for chart in charts:
        if chart.ok:
            outputs[f"chart_{chart.chart}"] = write_table(
                chart.data,
                paths.table_path(f"chart_{chart.chart}", tables_format),
                fmt=tables_format,
            )
    outputs["charts"] = write_summary(
        [
            {**chart.status_row(), "insights": chart.insights}
            for chart in charts
        ],
        paths.summary_path("charts"),
    )
    return outputs


def run_all(
    csv_path: Path,
    out_dir: Path,
    config: AppConfig,
    *,
    current_year: int | None = None,
    render_figures: bool = True,
) -> DashboardArtifacts:
    """Load, clean, summarize and chart one dataset, writing every output under ``out_dir``."""
    paths = build_output_paths(out_dir)
    records, report = load_clean_records(csv_path, config)

    kpis = build_kpis(records, current_year=current_year)
    charts = build_all_charts(records, default_chart_builders(config))

    tables_format = config.outputs.tables_format
    outputs: dict[str, Path] = {
        "clean_records": write_table(
            records_to_frame(records),
            paths.table_path("clean_records", tables_format),
            fmt=tables_format,
        ),
        "kpis": write_summary([kpi.as_dict() for kpi in kpis], paths.summary_path("kpis")),
        "kpis_table": write_table(
            kpi_frame(kpis),
            paths.table_path("kpis", tables_format),
            fmt=tables_format,
        ),
        "dataset_stats": write_summary(
            build_dataset_stats(records), paths.summary_path("dataset_stats")
        ),
        "cleaning": write_summary(report.as_dict(), paths.summary_path("cleaning")),
    }
    outputs.update(write_chart_outputs(charts, out_dir=out_dir, config=config))

    figures: dict[str, Path] = {}
    if render_figures:
        figures = render_all_charts(
            charts,
            paths.figures,
            config=config.charts,
            figures_format=config.outputs.figures_format,
        )

    LOGGER.info(
        "Dashboard built: records=%d charts_ok=%d figures=%d",
        len(records),
        sum(1 for chart in charts if chart.ok),
        len(figures),
    )
    return DashboardArtifacts(
        records=records,
        report=report,
        kpis=kpis,
        charts=charts,
        figures=figures,
        outputs=outputs,
    )


def kpi_frame(kpis: list[Kpi]) -> pd.DataFrame:
    return pd.DataFrame(
        [(kpi.key, kpi.label, kpi.display) for kpi in kpis],
        columns=["key", "label", "display"],
    )
