"""In-memory dataset repository.

One DatasetRepository is constructed per session and handed to every
component that needs the loaded data. A load normalizes every row, drops
invalid records, and computes the per-region statistics once; the result is
an immutable DatasetSnapshot that is only ever replaced wholesale by a reload.
"""

import logging
import threading
import time
from collections import defaultdict
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

import pandas as pd

from salary_explorer.aggregation import national_median, region_stats
from salary_explorer.domain.models import JobRecord, RegionStatistic
from salary_explorer.logging import get_logger
from salary_explorer.logging.context import log_context
from salary_explorer.normalization import RecordNormalizer

from .exceptions import DatasetNotLoadedError, IngestionError

logger = get_logger(__name__, component="repository")

DEFAULT_READY_TIMEOUT = 10.0
DEFAULT_POLL_INTERVAL = 0.1


@dataclass(frozen=True)
class DatasetSnapshot:
    """Everything derived from one load of the dataset.

    Attributes:
        records: Valid records only, in input order
        total_rows: Number of rows normalized
        dropped_count: Rows excluded for an unknown region or non-positive salary
        region_statistics: Per-region count and mean, ordered by region code
        national_median: Median of the per-region means (None when no regions)
        source: Path or label the rows came from
    """

    records: Tuple[JobRecord, ...]
    total_rows: int
    dropped_count: int
    region_statistics: Tuple[RegionStatistic, ...]
    national_median: Optional[float]
    source: str = "memory"
    by_region: Dict[str, Tuple[JobRecord, ...]] = field(default_factory=dict, repr=False)


class DatasetRepository:
    """Holds the loaded dataset and the one-time load barrier.

    Loading can happen inline (load_rows / load_csv) or on a single background
    thread (load_in_background); readers call wait_until_ready() before use.
    """

    def __init__(
        self,
        normalizer: Optional[RecordNormalizer] = None,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """
        Args:
            normalizer: Row normalizer (defaults to RecordNormalizer())
            logger_instance: Logger instance (defaults to module logger)
        """
        self.normalizer = normalizer or RecordNormalizer()
        self.logger = logger_instance or logger
        self._snapshot: Optional[DatasetSnapshot] = None
        self._failure: Optional[BaseException] = None
        self._finished = threading.Event()
        self._lock = threading.Lock()

    # Loading

    def load_rows(self, rows: Iterable[Mapping[str, Any]], source: str = "memory") -> DatasetSnapshot:
        """Normalize ``rows`` and replace the current snapshot.

        Args:
            rows: Raw rows (column name -> value)
            source: Label for logs and diagnostics

        Returns:
            The new DatasetSnapshot
        """
        with log_context(dataset=source):
            normalized = list(self.normalizer.normalize_batch(rows))
            valid = tuple(record for record in normalized if record.is_valid)
            dropped = len(normalized) - len(valid)

            stats = tuple(region_stats(valid))
            by_region: Dict[str, List[JobRecord]] = defaultdict(list)
            for record in valid:
                by_region[record.region].append(record)

            snapshot = DatasetSnapshot(
                records=valid,
                total_rows=len(normalized),
                dropped_count=dropped,
                region_statistics=stats,
                national_median=national_median(stats),
                source=source,
                by_region={region: tuple(members) for region, members in by_region.items()},
            )

            if dropped:
                self.logger.info(
                    f"Dropped {dropped} of {len(normalized)} rows without a known region or salary",
                    extra={
                        "event": "repository.records.dropped",
                        "dropped_count": dropped,
                        "total_rows": len(normalized),
                    },
                )

            with self._lock:
                self._snapshot = snapshot
                self._failure = None
            self._finished.set()

            self.logger.info(
                "Dataset loaded",
                extra={
                    "event": "repository.dataset.loaded",
                    "record_count": len(valid),
                    "region_count": len(stats),
                    "national_median": snapshot.national_median,
                },
            )
        return snapshot

    def load_csv(self, path: Union[str, Path], encoding: str = "utf-8") -> DatasetSnapshot:
        """Read a CSV file and load its rows.

        Every column is read as text so the normalizer sees the values exactly
        as written.

        Raises:
            IngestionError: If the file cannot be read or parsed
        """
        source = str(path)
        try:
            frame = pd.read_csv(path, dtype=str, keep_default_na=False, encoding=encoding)
        except (OSError, UnicodeDecodeError, ValueError, pd.errors.ParserError) as e:
            error = IngestionError(f"Failed to read dataset {source}: {e}", source=source)
            self._record_failure(error)
            raise error from e

        return self.load_rows(frame.to_dict(orient="records"), source=source)

    def load_in_background(self, path: Union[str, Path], encoding: str = "utf-8") -> threading.Thread:
        """Start loading ``path`` on a daemon thread.

        Failures are kept and re-raised by wait_until_ready().
        """
        with self._lock:
            self._failure = None
        self._finished.clear()

        def _load() -> None:
            try:
                self.load_csv(path, encoding=encoding)
            except IngestionError:
                pass  # already recorded by load_csv
            except Exception as e:
                self.logger.error(
                    f"Unexpected error loading dataset {path}: {e}",
                    extra={"event": "repository.dataset.failed"},
                    exc_info=True,
                )
                self._record_failure(IngestionError(str(e), source=str(path)))

        thread = threading.Thread(target=_load, name="dataset-loader", daemon=True)
        thread.start()
        return thread

    def wait_until_ready(
        self,
        timeout: float = DEFAULT_READY_TIMEOUT,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ) -> DatasetSnapshot:
        """Block until a load has completed.

        Args:
            timeout: Seconds to wait before giving up
            poll_interval: Seconds between readiness checks

        Returns:
            The loaded DatasetSnapshot

        Raises:
            IngestionError: If the load failed or did not finish within ``timeout``
        """
        deadline = time.monotonic() + timeout
        while True:
            with self._lock:
                failure, snapshot = self._failure, self._snapshot
            if failure is not None:
                raise IngestionError(
                    f"Dataset ingestion failed: {failure}",
                    source=getattr(failure, "source", ""),
                ) from failure
            if snapshot is not None and self._finished.is_set():
                return snapshot

            remaining = deadline - time.monotonic()
            if remaining <= 0:
                self.logger.error(
                    f"Dataset not ready after {timeout}s",
                    extra={"event": "repository.dataset.timeout", "timeout_seconds": timeout},
                )
                raise IngestionError(f"Dataset not ready within {timeout} seconds")
            self._finished.wait(min(poll_interval, remaining))

    def _record_failure(self, error: IngestionError) -> None:
        with self._lock:
            self._failure = error
        self._finished.set()
        self.logger.error(
            str(error),
            extra={"event": "repository.dataset.failed", "dataset": error.source},
        )

    # Access

    @property
    def is_loaded(self) -> bool:
        return self._snapshot is not None

    @property
    def snapshot(self) -> DatasetSnapshot:
        """The current snapshot.

        Raises:
            DatasetNotLoadedError: If nothing has been loaded yet
        """
        snapshot = self._snapshot
        if snapshot is None:
            raise DatasetNotLoadedError("Dataset has not been loaded")
        return snapshot

    @property
    def records(self) -> Tuple[JobRecord, ...]:
        return self.snapshot.records

    @property
    def region_statistics(self) -> Tuple[RegionStatistic, ...]:
        return self.snapshot.region_statistics

    @property
    def national_median(self) -> Optional[float]:
        return self.snapshot.national_median

    @property
    def dropped_count(self) -> int:
        return self.snapshot.dropped_count

    def records_for_region(self, region: Optional[str]) -> Tuple[JobRecord, ...]:
        """Valid records of ``region``; all valid records when region is None."""
        snapshot = self.snapshot
        if region is None:
            return snapshot.records
        return snapshot.by_region.get(region, ())

    def region_statistic(self, region: str) -> Optional[RegionStatistic]:
        for stat in self.snapshot.region_statistics:
            if stat.region == region:
                return stat
        return None
