from __future__ import annotations

import math
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from playstore_dashboard.records import CleanRecord

DEFAULT_PAGE_SIZE = 10


@dataclass(frozen=True)
class TablePage:
    rows: list[CleanRecord]
    page: int
    total_pages: int
    total_rows: int
    has_prev: bool
    has_next: bool


def _matches(record: CleanRecord, query: str) -> bool:
    return (
        query in record.name.lower()
        or query in record.category.lower()
        or query in record.type.lower()
    )


class TableViewModel:
    """Search and pagination cursor over the cleaned records."""

    def __init__(
        self,
        records: Sequence[CleanRecord] = (),
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        if page_size < 1:
            raise ValueError("page_size must be >= 1")
        self.page_size = page_size
        self.query = ""
        self.page = 1
        self._records: tuple[CleanRecord, ...] = tuple(records)
        self.filtered: tuple[CleanRecord, ...] = self._records

    @property
    def records(self) -> tuple[CleanRecord, ...]:
        return self._records

    @property
    def total_pages(self) -> int:
        return max(1, math.ceil(len(self.filtered) / self.page_size))

    def set_records(self, records: Sequence[CleanRecord]) -> None:
        """Swap in a new dataset, keeping the current query."""
        self._records = tuple(records)
        self.set_query(self.query)

    def set_query(self, text: str) -> None:
        query = (text or "").strip().lower()
        self.query = query
        if not query:
            self.filtered = self._records
        else:
            self.filtered = tuple(record for record in self._records if _matches(record, query))
        self.page = 1

    def set_page(self, page: int) -> int:
        self.page = min(max(int(page), 1), self.total_pages)
        return self.page

    def next_page(self) -> int:
        return self.set_page(self.page + 1)

    def prev_page(self) -> int:
        return self.set_page(self.page - 1)

    def visible_page(self) -> TablePage:
        start = (self.page - 1) * self.page_size
        total_pages = self.total_pages
        return TablePage(
            rows=list(self.filtered[start : start + self.page_size]),
            page=self.page,
            total_pages=total_pages,
            total_rows=len(self.filtered),
            has_prev=self.page > 1,
            has_next=self.page < total_pages,
        )

    def page_window(self, max_pages_shown: int) -> list[int]:
        """Consecutive page numbers for a pager, centred on the current page where possible."""
        shown = max(1, min(int(max_pages_shown), self.total_pages))
        first = self.page - shown // 2
        first = min(max(first, 1), self.total_pages - shown + 1)
        return list(range(first, first + shown))


class SearchDebouncer:
    """Apply the latest submitted query only after ``interval_ms`` of quiet."""

    def __init__(
        self,
        apply: Callable[[str], None],
        interval_ms: int,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._apply = apply
        self._interval = max(0, interval_ms) / 1000.0
        self._clock = clock
        self._pending: str | None = None
        self._deadline = 0.0

    @property
    def pending(self) -> str | None:
        return self._pending

    def submit(self, text: str) -> None:
        self._pending = text
        self._deadline = self._clock() + self._interval

    def poll(self) -> bool:
        if self._pending is None or self._clock() < self._deadline:
            return False
        return self.flush()

    def flush(self) -> bool:
        if self._pending is None:
            return False
        text, self._pending = self._pending, None
        self._apply(text)
        return True
