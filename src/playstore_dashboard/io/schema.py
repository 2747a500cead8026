from __future__ import annotations

import logging

import pandas as pd

from playstore_dashboard.config import ColumnsConfig
from playstore_dashboard.records import RAW_COLUMNS

LOGGER = logging.getLogger(__name__)


def source_column_map(columns: ColumnsConfig) -> dict[str, str]:
    """Map configured source headers to the canonical CSV headers."""
    canonical = dict(
        zip(
            RAW_COLUMNS,
            (
                columns.app,
                columns.category,
                columns.rating,
                columns.reviews,
                columns.size,
                columns.installs,
                columns.type,
                columns.price,
                columns.content_rating,
                columns.genres,
                columns.last_updated,
                columns.current_version,
                columns.android_version,
            ),
        )
    )
    return {source: target for target, source in canonical.items()}


def normalize_columns(df: pd.DataFrame, columns: ColumnsConfig | None = None) -> pd.DataFrame:
    """Rename source columns to canonical headers and fill absent ones with blanks.

    Absent columns are not an error: every field has a safe default, so the
    affected rows either survive with defaults or drop out during cleaning.
    """
    rename_map = source_column_map(columns or ColumnsConfig())
    working = df.rename(columns=rename_map)
    missing = [column for column in RAW_COLUMNS if column not in working.columns]
    if missing:
        LOGGER.warning("Input is missing columns: %s", ", ".join(missing))
        for column in missing:
            working[column] = ""
    return working[list(RAW_COLUMNS)].fillna("").astype(str)
