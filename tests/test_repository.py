"""Tests for the dataset repository and its load barrier."""

import threading
from pathlib import Path

import pytest

from salary_explorer.repository import (
    DatasetNotLoadedError,
    DatasetRepository,
    FipsBoundaryLookup,
    IngestionError,
)
from tests.helpers import load_repository, make_row, scenario_rows

FIXTURES_DIR = Path(__file__).parent / "fixtures"


class TestLoadRows:
    def test_scenario_statistics(self):
        repository = load_repository(scenario_rows())

        assert [(s.region, s.sample_count, s.mean_salary) for s in repository.region_statistics] == [
            ("CA", 2, 120000.0),
            ("NY", 1, 90000.0),
        ]
        assert repository.national_median == 105000.0
        assert repository.dropped_count == 0

    def test_invalid_rows_dropped_and_counted(self):
        rows = scenario_rows() + [
            make_row("ZZ", 100000),
            make_row("CA", 0),
            {"Location": "Remote", "avg_salary": 100},
        ]
        repository = load_repository(rows)

        assert len(repository.records) == 3
        assert repository.dropped_count == 3
        assert repository.snapshot.total_rows == 6
        assert all(record.is_valid for record in repository.records)

    def test_drop_is_logged(self, caplog):
        repository = DatasetRepository()
        with caplog.at_level("INFO"):
            repository.load_rows([make_row("ZZ")])

        events = [getattr(record, "event", None) for record in caplog.records]
        assert "repository.records.dropped" in events

    def test_records_for_region(self):
        repository = load_repository(scenario_rows())

        assert [r.salary_avg for r in repository.records_for_region("CA")] == [100000, 140000]
        assert repository.records_for_region("TX") == ()
        assert len(repository.records_for_region(None)) == 3

    def test_region_statistic(self):
        repository = load_repository(scenario_rows())
        assert repository.region_statistic("NY").mean_salary == 90000
        assert repository.region_statistic("TX") is None

    def test_empty_dataset(self):
        repository = load_repository([])
        assert repository.region_statistics == ()
        assert repository.national_median is None

    def test_reload_replaces_snapshot(self):
        repository = load_repository(scenario_rows())
        first = repository.snapshot
        repository.load_rows([make_row("TX", 50000)])

        assert repository.snapshot is not first
        assert [s.region for s in repository.region_statistics] == ["TX"]
        assert len(first.records) == 3


class TestNotLoaded:
    def test_access_before_load(self):
        repository = DatasetRepository()

        assert repository.is_loaded is False
        with pytest.raises(DatasetNotLoadedError):
            repository.snapshot
        with pytest.raises(DatasetNotLoadedError):
            repository.records_for_region("CA")


class TestLoadCsv:
    def test_sample_file(self):
        repository = DatasetRepository()
        snapshot = repository.load_csv(FIXTURES_DIR / "sample_jobs.csv")

        assert snapshot.total_rows == 8
        assert snapshot.dropped_count == 2
        assert [(s.region, s.sample_count) for s in snapshot.region_statistics] == [
            ("CA", 2),
            ("NY", 2),
            ("WA", 2),
        ]
        assert snapshot.national_median == 120000.0
        assert snapshot.source.endswith("sample_jobs.csv")

    def test_missing_file(self, tmp_path):
        repository = DatasetRepository()
        missing = tmp_path / "missing.csv"

        with pytest.raises(IngestionError) as exc_info:
            repository.load_csv(missing)

        assert exc_info.value.source == str(missing)
        assert repository.is_loaded is False

    def test_failure_reported_by_barrier(self, tmp_path):
        repository = DatasetRepository()
        with pytest.raises(IngestionError):
            repository.load_csv(tmp_path / "missing.csv")

        with pytest.raises(IngestionError) as exc_info:
            repository.wait_until_ready(timeout=0.5, poll_interval=0.01)
        assert "ingestion failed" in str(exc_info.value)


class TestBackgroundLoad:
    def test_background_load_then_ready(self):
        repository = DatasetRepository()
        thread = repository.load_in_background(FIXTURES_DIR / "sample_jobs.csv")

        snapshot = repository.wait_until_ready(timeout=5, poll_interval=0.01)
        thread.join(timeout=5)

        assert snapshot.national_median == 120000.0
        assert repository.is_loaded

    def test_background_failure(self, tmp_path):
        repository = DatasetRepository()
        repository.load_in_background(tmp_path / "missing.csv")

        with pytest.raises(IngestionError):
            repository.wait_until_ready(timeout=5, poll_interval=0.01)

    def test_timeout_when_nothing_loads(self):
        repository = DatasetRepository()

        with pytest.raises(IngestionError) as exc_info:
            repository.wait_until_ready(timeout=0.05, poll_interval=0.01)
        assert "not ready within" in str(exc_info.value)

    def test_waiter_released_by_late_load(self):
        repository = DatasetRepository()
        timer = threading.Timer(0.05, repository.load_rows, args=(scenario_rows(),))
        timer.start()
        try:
            snapshot = repository.wait_until_ready(timeout=5, poll_interval=0.01)
        finally:
            timer.cancel()

        assert snapshot.national_median == 105000.0


class TestFipsBoundaryLookup:
    @pytest.mark.parametrize("feature_id,expected", [("06", "CA"), ("6", "CA"), (6, "CA"), (36, "NY")])
    def test_lookup(self, feature_id, expected):
        assert FipsBoundaryLookup().lookup(feature_id) == expected

    @pytest.mark.parametrize("feature_id", ["11", "99", "", "abc"])
    def test_lookup_miss(self, feature_id):
        assert FipsBoundaryLookup().lookup(feature_id) is None

    def test_custom_mapping(self):
        assert FipsBoundaryLookup({"X1": "CA"}).lookup("X1") == "CA"
