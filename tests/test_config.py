from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from playstore_dashboard.config import CSV_PATH_ENV, AppConfig, load_config

ROOT = Path(__file__).resolve().parents[1]


def test_default_config_matches_dashboard_settings(monkeypatch) -> None:
    monkeypatch.delenv(CSV_PATH_ENV, raising=False)

    config = load_config(ROOT / "configs/default.yaml")

    assert config.table.page_size == 10
    assert config.table.search_debounce_ms == 300
    assert config.table.max_pages_shown == 5
    assert config.charts.render_delay_ms == 200
    assert config.charts.default_height_px == 360
    assert config.data.max_file_size_mb == 50
    assert config.data.supported_formats == [".csv"]
    assert Path(config.data.csv_path) == ROOT / "data/googleplaystore_sample.csv"


def test_load_config_resolves_relative_csv_path(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.delenv(CSV_PATH_ENV, raising=False)
    config_path = tmp_path / "conf" / "config.yaml"
    config_path.parent.mkdir()
    config_path.write_text(
        yaml.safe_dump(
            {
                "data": {"csv_path": "../apps.csv", "supported_formats": ["CSV"]},
                "table": {"page_size": 25},
            }
        ),
        encoding="utf-8",
    )

    config = load_config(config_path)

    assert config.data.csv_path == str((tmp_path / "apps.csv").resolve())
    assert config.data.supported_formats == [".csv"]
    assert config.table.page_size == 25
    assert config.charts.top_n == 10


def test_environment_overrides_csv_path(monkeypatch, tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text("{}", encoding="utf-8")
    monkeypatch.setenv(CSV_PATH_ENV, "/data/override.csv")

    config = load_config(config_path)

    assert config.data.csv_path == "/data/override.csv"


def test_unknown_sections_and_invalid_values_are_rejected() -> None:
    with pytest.raises(ValidationError):
        AppConfig.model_validate({"unknown": {}})
    with pytest.raises(ValidationError):
        AppConfig.model_validate({"table": {"page_size": 0}})
    with pytest.raises(ValidationError):
        AppConfig.model_validate({"outputs": {"tables_format": "xlsx"}})
