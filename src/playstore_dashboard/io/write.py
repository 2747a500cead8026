from __future__ import annotations

import csv
import json
import math
from collections.abc import Sequence
from dataclasses import asdict
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Any

import pandas as pd

from playstore_dashboard.records import CleanRecord

EXPORT_HEADERS = (
    "App",
    "Category",
    "Rating",
    "Reviews",
    "Size (MB)",
    "Installs",
    "Type",
    "Price (USD)",
    "Content Rating",
    "Genres",
    "Last Updated",
    "Current Version",
    "Android Version",
)


def write_table(df: pd.DataFrame, path: Path, fmt: str = "csv") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    if fmt == "parquet":
        df.to_parquet(path, index=False)
        return path
    if fmt == "csv":
        df.to_csv(path, index=False)
        return path
    raise ValueError(f"Unsupported table format: {fmt}")


def _json_safe(value: Any) -> Any:
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, dict):
        return {key: _json_safe(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(item) for item in value]
    if hasattr(value, "item"):
        return _json_safe(value.item())
    return value


def write_summary(data: dict[str, Any] | list[Any], path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(_json_safe(data), indent=2, sort_keys=True), encoding="utf-8")
    return path


def records_to_frame(records: Sequence[CleanRecord]) -> pd.DataFrame:
    columns = list(CleanRecord.__dataclass_fields__)
    return pd.DataFrame([asdict(record) for record in records], columns=columns)


def _two_decimals(value: float) -> Decimal:
    # Decimal keeps the trailing zeros and still counts as numeric for quoting.
    return Decimal(f"{value:.2f}")


def _export_row(record: CleanRecord) -> list[Any]:
    return [
        record.name,
        record.category,
        record.rating if record.has_rating and record.rating else None,
        record.review_count or None,
        _two_decimals(record.size_mb) if record.size_mb else None,
        record.installs or None,
        record.type,
        _two_decimals(record.price) if record.is_paid else 0,
        record.content_rating,
        record.genres,
        record.last_updated.isoformat() if record.last_updated else None,
        record.current_version,
        record.android_version_min or None,
    ]


def export_frame(records: Sequence[CleanRecord]) -> pd.DataFrame:
    """Export rows under the fixed headers; blanks are None, numbers stay numeric."""
    return pd.DataFrame(
        [_export_row(record) for record in records],
        columns=list(EXPORT_HEADERS),
        dtype=object,
    )


def records_to_export_csv(records: Sequence[CleanRecord]) -> str:
    """CSV text with fixed headers; every text field is quoted by the writer."""
    return export_frame(records).to_csv(
        index=False, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n"
    )


def export_filename(count: int, prefix: str = "googleplaystore", on: date | None = None) -> str:
    day = on or date.today()
    return f"{prefix}_{count}_apps_{day.isoformat()}.csv"


def export_records_csv(
    records: Sequence[CleanRecord],
    out_dir: Path,
    prefix: str = "googleplaystore",
    on: date | None = None,
) -> Path:
    if not records:
        raise ValueError("No data to export")
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / export_filename(len(records), prefix=prefix, on=on)
    export_frame(records).to_csv(
        path, index=False, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n", encoding="utf-8"
    )
    return path
