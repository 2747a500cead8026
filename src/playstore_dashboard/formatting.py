from __future__ import annotations

import math
from typing import Any

# Fixed es-CO conventions: "." groups thousands, "," marks decimals.
THOUSANDS_SEPARATOR = "."
DECIMAL_SEPARATOR = ","
PLACEHOLDER = "—"
NOT_AVAILABLE = "N/A"
LABEL_MAX_LENGTH = 15


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, float) and math.isnan(value)


def _localize(text: str) -> str:
    return (
        text.replace(",", "\0")
        .replace(".", DECIMAL_SEPARATOR)
        .replace("\0", THOUSANDS_SEPARATOR)
    )


def round_half_up(value: float) -> int:
    return int(math.floor(float(value) + 0.5))


def format_number(value: Any) -> str:
    if _is_missing(value):
        return PLACEHOLDER
    return _localize(f"{round_half_up(value):,}")


def format_price(value: Any) -> str:
    if _is_missing(value):
        return "USD 0"
    text = f"{float(value):,.2f}".rstrip("0").rstrip(".")
    return f"USD {_localize(text)}"


def truncate_label(text: str, limit: int = LABEL_MAX_LENGTH) -> str:
    if len(text) > limit:
        return text[:limit] + "..."
    return text
