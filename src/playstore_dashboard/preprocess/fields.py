from __future__ import annotations

import math
import re
from datetime import date
from typing import Any

import pandas as pd

from playstore_dashboard.records import MISSING_RATING

NUMBER_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")
INTEGER_RE = re.compile(r"^\d+$")
INSTALLS_STRIP_RE = re.compile(r"[+,]")
VARIES_RE = re.compile(r"varies", re.IGNORECASE)
VERSION_RE = re.compile(r"\d+(?:\.\d+)?")

RATING_MIN = 0.0
RATING_MAX = 5.0


def parse_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and math.isnan(value):
        return ""
    return str(value).strip()


def parse_number(value: Any) -> float | None:
    """Return the numeric value of ``value`` or None when it is not a plain number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    text = parse_text(value)
    if not NUMBER_RE.match(text):
        return None
    number = float(text)
    return number if math.isfinite(number) else None


def parse_installs(value: Any) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return max(value, 0)
    text = INSTALLS_STRIP_RE.sub("", parse_text(value))
    if not INTEGER_RE.match(text):
        return 0
    return int(text)


def parse_price(value: Any) -> float:
    text = parse_text(value)
    if text.startswith("$"):
        text = text[1:]
    number = parse_number(text)
    if number is None or number < 0:
        return 0.0
    return number


def parse_reviews(value: Any) -> int:
    number = parse_number(value)
    if number is None or number < 0:
        return 0
    return int(number)


def parse_rating(value: Any) -> float:
    """Clamp a numeric rating into [0, 5]; anything unparseable is the missing sentinel."""
    number = parse_number(value)
    if number is None:
        return MISSING_RATING
    return min(max(number, RATING_MIN), RATING_MAX)


def parse_size_mb(value: Any) -> float | None:
    text = parse_text(value)
    if not text or VARIES_RE.search(text):
        return None
    if text[-1] in "kK":
        number = parse_number(text[:-1])
        return None if number is None else number / 1000
    if text[-1] in "mM":
        return parse_number(text[:-1])
    return parse_number(text)


def parse_android_version(value: Any) -> float | None:
    match = VERSION_RE.search(parse_text(value))
    if match is None:
        return None
    return float(match.group(0))


def parse_last_updated(value: Any) -> date | None:
    text = parse_text(value)
    if not text:
        return None
    timestamp = pd.to_datetime(text, errors="coerce")
    if pd.isna(timestamp):
        return None
    return timestamp.date()


def parse_update_year(value: Any) -> int | None:
    parsed = parse_last_updated(value)
    return None if parsed is None else parsed.year


def parse_last_updated_column(values: pd.Series) -> pd.Series:
    """Column form of ``parse_last_updated``: one ``to_datetime`` pass, dates or None."""
    text = values.map(parse_text)
    timestamps = pd.to_datetime(text.where(text != ""), format="mixed", errors="coerce")
    return pd.Series(
        [None if pd.isna(timestamp) else timestamp.date() for timestamp in timestamps],
        index=values.index,
        dtype=object,
    )
