from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from typing import TypedDict

RAW_COLUMNS: tuple[str, ...] = (
    "App",
    "Category",
    "Rating",
    "Reviews",
    "Size",
    "Installs",
    "Type",
    "Price",
    "Content Rating",
    "Genres",
    "Last Updated",
    "Current Ver",
    "Android Ver",
)

# Header names contain spaces, so the functional form is required.
RawRecord = TypedDict(
    "RawRecord",
    {
        "App": str,
        "Category": str,
        "Rating": str,
        "Reviews": str,
        "Size": str,
        "Installs": str,
        "Type": str,
        "Price": str,
        "Content Rating": str,
        "Genres": str,
        "Last Updated": str,
        "Current Ver": str,
        "Android Ver": str,
    },
    total=False,
)

PAID_TYPE = "Paid"
MISSING_RATING = float("nan")


@dataclass(frozen=True)
class CleanRecord:
    """One validated application entry.

    ``rating`` is NaN when the source had no usable rating, which keeps
    "unrated" distinct from a rating of zero.
    """

    name: str
    category: str
    rating: float = MISSING_RATING
    review_count: int = 0
    size_mb: float | None = None
    installs: int = 0
    type: str = ""
    price: float = 0.0
    content_rating: str = ""
    genres: str = ""
    last_updated: date | None = None
    update_year: int | None = None
    android_version_min: float | None = None
    current_version: str = ""

    @property
    def has_rating(self) -> bool:
        return math.isfinite(self.rating)

    @property
    def is_paid(self) -> bool:
        return self.type == PAID_TYPE

    @property
    def dedup_key(self) -> tuple[str, str]:
        return self.name.lower(), self.category.lower()

    def as_raw(self) -> RawRecord:
        """Serialize back to the CSV shape; cleaning the result yields an equal record."""
        return {
            "App": self.name,
            "Category": self.category,
            "Rating": repr(self.rating) if self.has_rating else "",
            "Reviews": str(self.review_count),
            "Size": "Varies with device" if self.size_mb is None else f"{self.size_mb!r}M",
            "Installs": str(self.installs),
            "Type": self.type,
            "Price": repr(self.price),
            "Content Rating": self.content_rating,
            "Genres": self.genres,
            "Last Updated": self.last_updated.isoformat() if self.last_updated else "",
            "Current Ver": self.current_version,
            "Android Ver": "" if self.android_version_min is None else repr(self.android_version_min),
        }
