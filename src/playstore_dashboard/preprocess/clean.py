from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from dataclasses import asdict, dataclass

import pandas as pd

from playstore_dashboard.config import ColumnsConfig
from playstore_dashboard.io.schema import normalize_columns
from playstore_dashboard.preprocess.fields import (
    parse_android_version,
    parse_installs,
    parse_last_updated_column,
    parse_number,
    parse_price,
    parse_rating,
    parse_reviews,
    parse_size_mb,
    parse_text,
)
from playstore_dashboard.records import MISSING_RATING, PAID_TYPE, RAW_COLUMNS, CleanRecord

LOGGER = logging.getLogger(__name__)

MIN_NAME_LENGTH = 2
VALID_RATING_MIN = 1.0
VALID_RATING_MAX = 5.0


@dataclass(frozen=True)
class CleaningReport:
    rows_raw: int
    rows_required: int
    rows_valid: int
    rows_deduplicated: int

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


def _raw_frame(
    raw: pd.DataFrame | Iterable[Mapping[str, str]],
    columns: ColumnsConfig | None,
) -> pd.DataFrame:
    if isinstance(raw, pd.DataFrame):
        frame = raw
    else:
        frame = pd.DataFrame.from_records(list(raw))
    if frame.empty and not len(frame.columns):
        frame = pd.DataFrame(columns=list(RAW_COLUMNS))
    return normalize_columns(df=frame, columns=columns)


def parse_raw_frame(raw: pd.DataFrame) -> pd.DataFrame:
    """Run every field parser over canonical raw columns."""
    parsed = pd.DataFrame(index=raw.index)
    parsed["name"] = raw["App"].map(parse_text)
    parsed["category"] = raw["Category"].map(parse_text)
    parsed["rating"] = raw["Rating"].map(parse_rating).astype(float)
    parsed["review_count"] = raw["Reviews"].map(parse_reviews)
    parsed["size_mb"] = raw["Size"].map(parse_size_mb)
    parsed["installs"] = raw["Installs"].map(parse_installs)
    parsed["type"] = raw["Type"].map(parse_text)
    parsed["price"] = raw["Price"].map(parse_price)
    parsed.loc[parsed["type"] != PAID_TYPE, "price"] = 0.0
    parsed["content_rating"] = raw["Content Rating"].map(parse_text)
    parsed["genres"] = raw["Genres"].map(parse_text)
    parsed["last_updated"] = parse_last_updated_column(raw["Last Updated"])
    parsed["update_year"] = parsed["last_updated"].map(
        lambda value: None if value is None else value.year
    )
    parsed["android_version_min"] = raw["Android Ver"].map(parse_android_version)
    parsed["current_version"] = raw["Current Ver"].map(parse_text)
    return parsed


def _valid_row_mask(parsed: pd.DataFrame) -> pd.Series:
    # Rows shifted one column left put a number where the category belongs.
    numeric_category = parsed["category"].map(lambda text: parse_number(text) is not None)
    rating = parsed["rating"]
    bad_rating = rating.notna() & ((rating < VALID_RATING_MIN) | (rating > VALID_RATING_MAX))
    short_name = parsed["name"].str.len() < MIN_NAME_LENGTH
    return ~(numeric_category | bad_rating | short_name)


def _optional(value: object) -> object | None:
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    return value


def _to_record(row: Mapping[str, object]) -> CleanRecord:
    rating = float(row["rating"])
    size_mb = _optional(row["size_mb"])
    update_year = _optional(row["update_year"])
    android_version = _optional(row["android_version_min"])
    return CleanRecord(
        name=str(row["name"]),
        category=str(row["category"]),
        rating=rating if math.isfinite(rating) else MISSING_RATING,
        review_count=int(row["review_count"]),
        size_mb=None if size_mb is None else float(size_mb),
        installs=int(row["installs"]),
        type=str(row["type"]),
        price=float(row["price"]),
        content_rating=str(row["content_rating"]),
        genres=str(row["genres"]),
        last_updated=_optional(row["last_updated"]),
        update_year=None if update_year is None else int(update_year),
        android_version_min=None if android_version is None else float(android_version),
        current_version=str(row["current_version"]),
    )


def clean_with_report(
    raw: pd.DataFrame | Iterable[Mapping[str, str]],
    columns: ColumnsConfig | None = None,
) -> tuple[list[CleanRecord], CleaningReport]:
    """Parse, filter and deduplicate raw rows, preserving input order.

    Rows are excluded rather than failing the load: empty name or category,
    numeric-looking category, a present rating outside [1, 5] after clamping,
    a name shorter than two characters, and any repeat of an earlier
    case-insensitive (name, category) pair.
    """
    frame = _raw_frame(raw, columns)
    parsed = parse_raw_frame(frame)

    required = parsed[(parsed["name"] != "") & (parsed["category"] != "")]
    valid = required[_valid_row_mask(required)] if not required.empty else required

    deduplicated = valid
    if not valid.empty:
        keys = pd.DataFrame(
            {"name": valid["name"].str.lower(), "category": valid["category"].str.lower()}
        )
        deduplicated = valid[~keys.duplicated(keep="first")]

    records = [_to_record(row) for row in deduplicated.to_dict(orient="records")]
    report = CleaningReport(
        rows_raw=int(len(frame)),
        rows_required=int(len(required)),
        rows_valid=int(len(valid)),
        rows_deduplicated=len(records),
    )
    LOGGER.info(
        "Cleaned rows: raw=%d required=%d valid=%d deduplicated=%d",
        report.rows_raw,
        report.rows_required,
        report.rows_valid,
        report.rows_deduplicated,
    )
    return records, report


def clean_records(
    raw: pd.DataFrame | Iterable[Mapping[str, str]],
    columns: ColumnsConfig | None = None,
) -> list[CleanRecord]:
    records, _ = clean_with_report(raw, columns=columns)
    return records
