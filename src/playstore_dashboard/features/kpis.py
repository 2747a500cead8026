from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from typing import Any

from playstore_dashboard.features.aggregates import count_by, mean_by, sum_by
from playstore_dashboard.formatting import (
    NOT_AVAILABLE,
    PLACEHOLDER,
    format_number,
    truncate_label,
)
from playstore_dashboard.records import CleanRecord


@dataclass(frozen=True)
class Kpi:
    key: str
    label: str
    value: Any
    display: str

    def as_dict(self) -> dict[str, Any]:
        value = self.value
        if isinstance(value, float) and not math.isfinite(value):
            value = None
        return {"key": self.key, "label": self.label, "value": value, "display": self.display}


def _top_by(records: Sequence[CleanRecord], value_fn) -> CleanRecord | None:
    # max() keeps the first of equal maxima, matching a stable descending sort.
    if not records:
        return None
    return max(records, key=value_fn)


def _rated(records: Sequence[CleanRecord]) -> list[CleanRecord]:
    return [record for record in records if record.has_rating and record.rating > 0]


def _premium(records: Sequence[CleanRecord]) -> list[CleanRecord]:
    return [record for record in records if record.is_paid and record.price > 0]


def _top_category(records: Sequence[CleanRecord]) -> tuple[str | None, int]:
    counts = count_by(records, lambda record: record.category)
    if not counts:
        return None, 0
    name = max(counts, key=lambda key: counts[key])
    return name, counts[name]


def _name_or_na(record: CleanRecord | None) -> str:
    return record.name if record is not None else NOT_AVAILABLE


def build_kpis(records: Sequence[CleanRecord], current_year: int | None = None) -> list[Kpi]:
    """Compute the KPI cards; each one degrades on its own for empty input."""
    year = current_year if current_year is not None else date.today().year
    total_apps = len(records)
    total_installs = sum_by(records, lambda record: record.installs)
    total_reviews = sum_by(records, lambda record: record.review_count)

    rated = _rated(records)
    mean_rating = mean_by(rated, lambda record: record.rating)

    paid_count = sum(1 for record in records if record.is_paid)
    paid_percentage = (paid_count / total_apps) * 100 if total_apps else 0.0

    unique_categories = len({record.category for record in records})

    top_installed = _name_or_na(_top_by(records, lambda record: record.installs))
    top_rated = _name_or_na(_top_by(rated, lambda record: record.rating))
    category_name, category_count = _top_category(records)
    category_label = category_name if category_name is not None else NOT_AVAILABLE

    updated_this_year = sum(1 for record in records if record.update_year == year)

    premium = _premium(records)
    mean_premium_price = mean_by(premium, lambda record: record.price) if premium else 0.0
    most_expensive = _name_or_na(_top_by(premium, lambda record: record.price))

    return [
        Kpi("total_apps", "Total apps", total_apps, format_number(total_apps)),
        Kpi("total_installs", "Total installs", total_installs, format_number(total_installs)),
        Kpi("total_reviews", "Total reviews", total_reviews, format_number(total_reviews)),
        Kpi(
            "mean_rating",
            "Average rating",
            mean_rating,
            f"{mean_rating:.2f}" if math.isfinite(mean_rating) and mean_rating else PLACEHOLDER,
        ),
        Kpi("paid_percentage", "Paid apps (%)", paid_percentage, f"{paid_percentage:.1f}%"),
        Kpi(
            "unique_categories",
            "Unique categories",
            unique_categories,
            format_number(unique_categories),
        ),
        Kpi("top_installed_app", "Most installed app", top_installed, truncate_label(top_installed)),
        Kpi("top_rated_app", "Top rated app", top_rated, truncate_label(top_rated)),
        Kpi(
            "top_category",
            "Most popular category",
            {"category": category_name, "count": category_count},
            f"{category_label} ({category_count})",
        ),
        Kpi(
            "updated_current_year",
            f"Apps updated in {year}",
            updated_this_year,
            format_number(updated_this_year),
        ),
        Kpi(
            "mean_premium_price",
            "Average premium price",
            mean_premium_price,
            f"${mean_premium_price:.2f}" if mean_premium_price else PLACEHOLDER,
        ),
        Kpi("most_expensive_app", "Most expensive app", most_expensive, truncate_label(most_expensive)),
    ]


def build_dataset_stats(records: Sequence[CleanRecord]) -> dict[str, Any]:
    """Secondary dataset panel: split counts, leaders and per-field means."""
    paid = sum(1 for record in records if record.is_paid)
    category_name, category_count = _top_category(records)
    top_app = _top_by(records, lambda record: record.installs)
    stats: dict[str, Any] = {
        "total": len(records),
        "paid": paid,
        "free": len(records) - paid,
        "categories": len({record.category for record in records}),
        "top_category": category_name,
        "top_category_count": category_count,
        "top_app": top_app.name if top_app is not None else None,
        "total_installs": sum_by(records, lambda record: record.installs),
        "total_reviews": sum_by(records, lambda record: record.review_count),
        "mean_rating": mean_by(_rated(records), lambda record: record.rating),
        "mean_premium_price": mean_by(_premium(records), lambda record: record.price),
        "mean_size_mb": mean_by(
            [record for record in records if record.size_mb and record.size_mb > 0],
            lambda record: record.size_mb,
        ),
        "mean_android_version": mean_by(
            [
                record
                for record in records
                if record.android_version_min and record.android_version_min > 0
            ],
            lambda record: record.android_version_min,
        ),
    }
    return {
        key: (None if isinstance(value, float) and not math.isfinite(value) else value)
        for key, value in stats.items()
    }
