from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from playstore_dashboard.config import AppConfig
from playstore_dashboard.io.read import LoadResult, LoadSuccess, load_raw_dataset
from playstore_dashboard.preprocess.clean import CleaningReport, clean_with_report
from playstore_dashboard.records import CleanRecord
from playstore_dashboard.view.table import SearchDebouncer, TableViewModel

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class DatasetSnapshot:
    generation: int
    source: str
    records: tuple[CleanRecord, ...]
    report: CleaningReport
    loaded_at: datetime = field(default_factory=datetime.now)


class DashboardState:
    """Owns the current dataset and the table cursor over it.

    Every load attempt gets a generation number. A finished load only replaces
    the snapshot when its generation is newer than the committed one, so a
    slow decode that started earlier can never overwrite a later dataset.
    A failed load leaves the current snapshot in place.
    """

    def __init__(self, config: AppConfig) -> None:
        self.config = config
        self.snapshot: DatasetSnapshot | None = None
        self.table = TableViewModel(page_size=config.table.page_size)
        self.search = SearchDebouncer(self.table.set_query, config.table.search_debounce_ms)
        self.last_error: str | None = None
        self._next_generation = 0
        self._committed_generation = 0

    @property
    def records(self) -> tuple[CleanRecord, ...]:
        return self.snapshot.records if self.snapshot is not None else ()

    def begin_load(self) -> int:
        self._next_generation += 1
        return self._next_generation

    def apply_load(self, generation: int, result: LoadResult) -> bool:
        if generation <= self._committed_generation:
            LOGGER.info(
                "Discarding stale load generation=%d (committed=%d)",
                generation,
                self._committed_generation,
            )
            return False
        if not isinstance(result, LoadSuccess):
            self.last_error = result.reason
            LOGGER.warning("Load generation=%d failed: %s", generation, result.reason)
            return False

        records, report = clean_with_report(result.frame, columns=self.config.columns)
        self.snapshot = DatasetSnapshot(
            generation=generation,
            source=result.source,
            records=tuple(records),
            report=report,
        )
        self._committed_generation = generation
        self.last_error = None
        self.table.set_records(self.snapshot.records)
        return True

    async def reload(self, csv_path: Path) -> bool:
        generation = self.begin_load()
        result = await load_raw_dataset(csv_path, self.config)
        return self.apply_load(generation, result)
