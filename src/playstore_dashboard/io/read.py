from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path

import pandas as pd

from playstore_dashboard.config import AppConfig, DataConfig
from playstore_dashboard.io.schema import normalize_columns

LOGGER = logging.getLogger(__name__)

BYTES_PER_MB = 1024 * 1024


@dataclass(frozen=True)
class LoadSuccess:
    frame: pd.DataFrame
    source: str

    ok = True


@dataclass(frozen=True)
class LoadFailure:
    reason: str
    source: str

    ok = False


LoadResult = LoadSuccess | LoadFailure


def validate_csv_file(path: Path, data: DataConfig) -> Path:
    """Reject files that are not a supported format or exceed the size limit."""
    extension = path.suffix.lower()
    if extension not in data.supported_formats:
        supported = ", ".join(data.supported_formats)
        raise ValueError(f"Unsupported file format {extension or '<none>'}. Use: {supported}")
    if not path.exists():
        raise ValueError(f"CSV file not found: {path}")
    size_bytes = path.stat().st_size
    max_bytes = data.max_file_size_mb * BYTES_PER_MB
    if size_bytes > max_bytes:
        raise ValueError(
            f"CSV file is too large ({size_bytes} bytes). "
            f"Maximum {round(data.max_file_size_mb)}MB"
        )
    return path


def read_raw_csv(csv_path: Path, config: AppConfig) -> pd.DataFrame:
    """Decode the whole CSV into canonical string columns, one row per input line."""
    validate_csv_file(csv_path, config.data)
    # utf-8-sig strips BOM-prefixed headers commonly found in exported CSV files.
    df = pd.read_csv(
        csv_path,
        encoding="utf-8-sig",
        dtype=str,
        keep_default_na=False,
        skip_blank_lines=True,
        on_bad_lines="skip",
    )
    LOGGER.info("Read %d raw rows from %s", len(df), csv_path)
    return normalize_columns(df=df, columns=config.columns)


async def load_raw_dataset(csv_path: Path, config: AppConfig) -> LoadResult:
    """Decode ``csv_path`` off the event loop and report success or failure as a value."""
    source = str(csv_path)
    try:
        frame = await asyncio.to_thread(read_raw_csv, csv_path, config)
    except (OSError, ValueError) as exc:
        LOGGER.warning("Could not load CSV %s: %s", source, exc)
        return LoadFailure(reason=str(exc), source=source)
    return LoadSuccess(frame=frame, source=source)
