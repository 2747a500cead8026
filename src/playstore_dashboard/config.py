from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field

CSV_PATH_ENV = "PLAYSTORE_DASHBOARD_CSV"


class ColumnsConfig(BaseModel):
    """Source CSV header for each raw field."""

    app: str = "App"
    category: str = "Category"
    rating: str = "Rating"
    reviews: str = "Reviews"
    size: str = "Size"
    installs: str = "Installs"
    type: str = "Type"
    price: str = "Price"
    content_rating: str = "Content Rating"
    genres: str = "Genres"
    last_updated: str = "Last Updated"
    current_version: str = "Current Ver"
    android_version: str = "Android Ver"


class DataConfig(BaseModel):
    csv_path: str = "data/googleplaystore_sample.csv"
    supported_formats: list[str] = Field(default_factory=lambda: [".csv"])
    max_file_size_mb: float = Field(default=50.0, gt=0.0)


class TableConfig(BaseModel):
    page_size: int = Field(default=10, ge=1)
    search_debounce_ms: int = Field(default=300, ge=0)
    max_pages_shown: int = Field(default=5, ge=1)


class ChartColorsConfig(BaseModel):
    primary: str = "#2563EB"
    secondary: str = "#0EA5E9"
    accent: str = "#22C55E"
    info: str = "#60a5fa"
    scatter: str = "#93c5fd"
    timeline: str = "#a78bfa"
    android: str = "#34d399"
    warning: str = "#f59e0b"


class ChartsConfig(BaseModel):
    render_delay_ms: int = Field(default=200, ge=0)
    default_height_px: int = Field(default=360, ge=100)
    width_px: int = Field(default=1280, ge=100)
    top_n: int = Field(default=10, ge=1)
    colors: ChartColorsConfig = Field(default_factory=ChartColorsConfig)


class ExportConfig(BaseModel):
    filename_prefix: str = "googleplaystore"


class OutputsConfig(BaseModel):
    tables_format: Literal["csv", "parquet"] = "csv"
    figures_format: str = "png"


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    columns: ColumnsConfig = Field(default_factory=ColumnsConfig)
    data: DataConfig = Field(default_factory=DataConfig)
    table: TableConfig = Field(default_factory=TableConfig)
    charts: ChartsConfig = Field(default_factory=ChartsConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
    outputs: OutputsConfig = Field(default_factory=OutputsConfig)


DEFAULT_CONFIG_PATH = Path("configs/default.yaml")


def _resolve_optional_path(path_value: str | None, base_dir: Path) -> str | None:
    if not path_value:
        return None
    candidate = Path(path_value)
    if candidate.is_absolute():
        return str(candidate)
    return str((base_dir / candidate).resolve())


def load_config(path: Path) -> AppConfig:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}

    config = AppConfig.model_validate(data)
    base_dir = path.resolve().parent

    env_csv_path = os.getenv(CSV_PATH_ENV)
    config.data.csv_path = env_csv_path or (
        _resolve_optional_path(config.data.csv_path, base_dir) or ""
    )
    config.data.supported_formats = [
        fmt.lower() if fmt.startswith(".") else f".{fmt.lower()}"
        for fmt in config.data.supported_formats
    ]
    return config
