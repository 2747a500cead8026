from __future__ import annotations

import asyncio
import math
from pathlib import Path

import typer

from playstore_dashboard.charts.registry import build_all_charts, default_chart_builders
from playstore_dashboard.config import DEFAULT_CONFIG_PATH, AppConfig, load_config
from playstore_dashboard.features.kpis import build_kpis
from playstore_dashboard.formatting import PLACEHOLDER, format_number, format_price
from playstore_dashboard.io.write import export_records_csv
from playstore_dashboard.logging import configure_logging
from playstore_dashboard.paths import build_output_paths
from playstore_dashboard.pipeline.run_all import (
    load_clean_records,
    run_all,
    write_chart_outputs,
)
from playstore_dashboard.preprocess.clean import CleaningReport
from playstore_dashboard.records import CleanRecord
from playstore_dashboard.state import DashboardState
from playstore_dashboard.viz.charts import render_all_charts

app = typer.Typer(no_args_is_help=True, add_completion=False)


def _load_app_config(config_path: Path) -> AppConfig:
    return load_config(config_path)


def _resolve_csv(csv: Path | None, cfg: AppConfig) -> Path:
    if csv is not None:
        return csv
    if not cfg.data.csv_path:
        raise typer.BadParameter("Missing --csv and no data.csv_path configured.")
    return Path(cfg.data.csv_path)


def _load_state(csv: Path, cfg: AppConfig) -> DashboardState:
    state = DashboardState(cfg)
    if not asyncio.run(state.reload(csv)):
        typer.echo(f"Could not load CSV: {state.last_error}", err=True)
        raise typer.Exit(code=1)
    return state


def _load_records_or_exit(
    csv: Path, cfg: AppConfig
) -> tuple[list[CleanRecord], CleaningReport]:
    try:
        return load_clean_records(csv, cfg)
    except (OSError, ValueError) as exc:
        typer.echo(f"Could not load CSV: {exc}", err=True)
        raise typer.Exit(code=1) from exc


@app.command()
def clean(
    csv: Path | None = typer.Option(None, help="Input CSV. Defaults to data.csv_path."),
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, exists=True, readable=True, resolve_path=True),
) -> None:
    """Clean and deduplicate the dataset and report row counts per stage."""
    configure_logging()
    cfg = _load_app_config(config)
    records, report = _load_records_or_exit(_resolve_csv(csv, cfg), cfg)
    typer.echo(f"Cleaning complete. Records: {len(records)}")
    for key, value in report.as_dict().items():
        typer.echo(f"- {key}: {value}")


@app.command()
def kpis(
    csv: Path | None = typer.Option(None, help="Input CSV. Defaults to data.csv_path."),
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, exists=True, readable=True, resolve_path=True),
) -> None:
    """Print the KPI cards for the cleaned dataset."""
    configure_logging("WARNING")
    cfg = _load_app_config(config)
    records, _ = _load_records_or_exit(_resolve_csv(csv, cfg), cfg)
    for kpi in build_kpis(records):
        typer.echo(f"{kpi.label}: {kpi.display}")


@app.command()
def charts(
    csv: Path | None = typer.Option(None, help="Input CSV. Defaults to data.csv_path."),
    out: Path = typer.Option(Path("out"), resolve_path=True),
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, exists=True, readable=True, resolve_path=True),
    figures: bool = typer.Option(True, help="Render chart images."),
) -> None:
    """Build the eight chart aggregates and optionally render them."""
    configure_logging()
    cfg = _load_app_config(config)
    records, _ = _load_records_or_exit(_resolve_csv(csv, cfg), cfg)
    paths = build_output_paths(out)
    results = build_all_charts(records, default_chart_builders(cfg))
    write_chart_outputs(results, out_dir=paths.root, config=cfg)
    if figures:
        render_all_charts(
            results,
            paths.figures,
            config=cfg.charts,
            figures_format=cfg.outputs.figures_format,
        )
    for result in results:
        typer.echo(f"- {result.chart}: {result.status}" + (f" ({result.message})" if result.message else ""))


@app.command()
def table(
    csv: Path | None = typer.Option(None, help="Input CSV. Defaults to data.csv_path."),
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, exists=True, readable=True, resolve_path=True),
    query: str = typer.Option("", help="Filter on app name, category or type."),
    page: int = typer.Option(1, help="Page to show; out-of-range pages are clamped."),
) -> None:
    """Print one page of the searchable records table."""
    configure_logging("WARNING")
    cfg = _load_app_config(config)
    state = _load_state(_resolve_csv(csv, cfg), cfg)
    state.search.submit(query)
    state.search.flush()
    state.table.set_page(page)
    visible = state.table.visible_page()
    if not visible.rows:
        typer.echo("No valid data")
    for record in visible.rows:
        rating = f"{record.rating:.2f}" if math.isfinite(record.rating) else PLACEHOLDER
        price = format_price(record.price) if record.is_paid else "Free"
        typer.echo(
            " | ".join(
                [
                    record.name,
                    record.category,
                    rating,
                    format_number(record.installs),
                    record.type,
                    price,
                ]
            )
        )
    pages = " ".join(str(number) for number in state.table.page_window(cfg.table.max_pages_shown))
    typer.echo(f"Page {visible.page} of {visible.total_pages} [{pages}]")


@app.command()
def export(
    csv: Path | None = typer.Option(None, help="Input CSV. Defaults to data.csv_path."),
    out: Path = typer.Option(Path("out"), resolve_path=True),
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, exists=True, readable=True, resolve_path=True),
    query: str = typer.Option("", help="Export only rows matching this search."),
) -> None:
    """Export the (optionally filtered) cleaned records to CSV."""
    configure_logging("WARNING")
    cfg = _load_app_config(config)
    state = _load_state(_resolve_csv(csv, cfg), cfg)
    state.search.submit(query)
    state.search.flush()
    if not state.table.filtered:
        typer.echo("No data to export", err=True)
        raise typer.Exit(code=1)
    paths = build_output_paths(out)
    path = export_records_csv(
        state.table.filtered,
        paths.exports,
        prefix=cfg.export.filename_prefix,
    )
    typer.echo(f"Exported {len(state.table.filtered)} apps to: {path}")


@app.command("run-all")
def run_all_command(
    csv: Path | None = typer.Option(None, help="Input CSV. Defaults to data.csv_path."),
    out: Path = typer.Option(Path("out"), resolve_path=True),
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, exists=True, readable=True, resolve_path=True),
    figures: bool = typer.Option(True, help="Render chart images."),
) -> None:
    """Clean, summarize and chart the dataset in one command."""
    configure_logging()
    cfg = _load_app_config(config)
    csv_path = _resolve_csv(csv, cfg)
    try:
        artifacts = run_all(csv_path=csv_path, out_dir=out, config=cfg, render_figures=figures)
    except (OSError, ValueError) as exc:
        typer.echo(f"Could not load CSV: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    typer.echo(f"Run complete. Records: {len(artifacts.records)}")
    typer.echo(f"Outputs: {', '.join(sorted(artifacts.outputs))}")
    typer.echo(f"Figures: {len(artifacts.figures)}")


if __name__ == "__main__":
    app()
