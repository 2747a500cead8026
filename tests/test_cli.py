from __future__ import annotations

import typing
from pathlib import Path

import yaml
from typer.testing import CliRunner

from playstore_dashboard.cli import _load_records_or_exit, app
from playstore_dashboard.config import AppConfig
from playstore_dashboard.preprocess.clean import CleaningReport
from playstore_dashboard.records import CleanRecord

ROOT = Path(__file__).resolve().parents[1]
SAMPLE_CSV = ROOT / "data" / "googleplaystore_sample.csv"


def _fast_config(tmp_path: Path) -> Path:
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        yaml.safe_dump(
            {
                "data": {"csv_path": str(SAMPLE_CSV)},
                "charts": {"render_delay_ms": 0},
            }
        ),
        encoding="utf-8",
    )
    return config_path


def test_cli_help() -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["--help"])

    assert result.exit_code == 0
    for command in ("clean", "kpis", "charts", "table", "export", "run-all"):
        assert command in result.stdout


def test_clean_command_reports_counts(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.delenv("PLAYSTORE_DASHBOARD_CSV", raising=False)
    runner = CliRunner()

    result = runner.invoke(app, ["clean", "--config", str(_fast_config(tmp_path))])

    assert result.exit_code == 0
    assert "Records: 16" in result.stdout
    assert "rows_raw: 21" in result.stdout


def test_load_records_helper_returns_records_and_report() -> None:
    hints = typing.get_type_hints(_load_records_or_exit)
    assert hints["return"] == tuple[list[CleanRecord], CleaningReport]

    records, report = _load_records_or_exit(SAMPLE_CSV, AppConfig())

    assert len(records) == report.rows_deduplicated == 16
    assert all(isinstance(record, CleanRecord) for record in records)


def test_table_command_searches_and_clamps_page(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.delenv("PLAYSTORE_DASHBOARD_CSV", raising=False)
    runner = CliRunner()

    result = runner.invoke(
        app,
        ["table", "--config", str(_fast_config(tmp_path)), "--query", "paid", "--page", "9"],
    )

    assert result.exit_code == 0
    assert "Minecraft | FAMILY" in result.stdout
    assert "Page 1 of 1 [1]" in result.stdout


def test_export_command_writes_filtered_csv(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.delenv("PLAYSTORE_DASHBOARD_CSV", raising=False)
    runner = CliRunner()
    out_dir = tmp_path / "out"

    result = runner.invoke(
        app,
        [
            "export",
            "--config",
            str(_fast_config(tmp_path)),
            "--out",
            str(out_dir),
            "--query",
            "SOCIAL",
        ],
    )

    assert result.exit_code == 0
    (exported,) = list((out_dir / "exports").glob("googleplaystore_2_apps_*.csv"))
    lines = exported.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 3
    assert lines[1].startswith('"Instagram","SOCIAL"')


def test_export_command_fails_when_nothing_matches(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.delenv("PLAYSTORE_DASHBOARD_CSV", raising=False)
    runner = CliRunner()

    result = runner.invoke(
        app,
        ["export", "--config", str(_fast_config(tmp_path)), "--out", str(tmp_path / "out"),
         "--query", "no such app"],
    )

    assert result.exit_code == 1


def test_missing_csv_exits_with_error(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(
        app,
        ["kpis", "--config", str(_fast_config(tmp_path)), "--csv", str(tmp_path / "absent.csv")],
    )

    assert result.exit_code == 1


def test_run_all_command_writes_outputs(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.delenv("PLAYSTORE_DASHBOARD_CSV", raising=False)
    runner = CliRunner()
    out_dir = tmp_path / "out"

    result = runner.invoke(
        app,
        ["run-all", "--config", str(_fast_config(tmp_path)), "--out", str(out_dir), "--no-figures"],
    )

    assert result.exit_code == 0
    assert "Records: 16" in result.stdout
    assert (out_dir / "summary" / "kpis.json").exists()
    assert (out_dir / "summary" / "charts.json").exists()
    assert (out_dir / "tables" / "clean_records.csv").exists()


def test_charts_command_lists_statuses(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.delenv("PLAYSTORE_DASHBOARD_CSV", raising=False)
    runner = CliRunner()
    out_dir = tmp_path / "out"

    result = runner.invoke(
        app,
        ["charts", "--config", str(_fast_config(tmp_path)), "--out", str(out_dir), "--no-figures"],
    )

    assert result.exit_code == 0
    assert "- installs_vs_reviews: ok" in result.stdout
    assert (out_dir / "tables" / "chart_apps_by_category.csv").exists()
