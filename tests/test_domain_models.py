"""Unit tests for domain models and taxonomy constants."""

import pytest
from pydantic import ValidationError

from salary_explorer.domain import KNOWN_REGIONS, is_known_region
from salary_explorer.domain.models import (
    QUARTILES,
    SIZE_BUCKETS,
    SKILLS,
    TRACKS,
    FilterStage,
    FilterState,
    JobRecord,
    RegionStatistic,
    SalaryQuartile,
    SizeBucket,
    Skill,
    Track,
)


class TestTaxonomy:
    """Enumeration orders are shared with renderers and must not drift."""

    def test_skill_order(self):
        assert [skill.value for skill in SKILLS] == ["Python", "R", "Spark", "Cloud", "Excel"]

    def test_track_order(self):
        assert [track.value for track in TRACKS] == [
            "DataScientist",
            "DataEngineer",
            "DataAnalyst",
            "MLEngineer",
            "Other",
        ]

    def test_size_and_quartile_order(self):
        assert [bucket.value for bucket in SIZE_BUCKETS] == ["Small", "Medium", "Large", "Unknown"]
        assert [quartile.value for quartile in QUARTILES] == ["Q1", "Q2", "Q3", "Q4"]

    def test_labels(self):
        assert Track.DATA_SCIENTIST.label == "Data Scientist"
        assert Track.ML_ENGINEER.label == "ML Engineer"
        assert SalaryQuartile.Q4.label == "Q4 (High)"
        assert Skill.CLOUD.field_name == "cloud"


class TestRegions:
    def test_fifty_states(self):
        assert len(KNOWN_REGIONS) == 50
        assert is_known_region("CA")
        assert not is_known_region("DC")
        assert not is_known_region("")


class TestJobRecord:
    def test_valid_record(self):
        record = JobRecord(region="ca", salary_avg=100000)
        assert record.region == "CA"
        assert record.is_valid is True

    def test_unknown_region_is_invalid(self):
        assert JobRecord(region="ZZ", salary_avg=100000).is_valid is False

    def test_zero_salary_is_invalid(self):
        assert JobRecord(region="CA", salary_avg=0).is_valid is False

    def test_negative_salary_rejected(self):
        with pytest.raises(ValidationError):
            JobRecord(region="CA", salary_avg=-5)

    def test_has_skill(self):
        record = JobRecord(region="CA", salary_avg=1, spark=True)
        assert record.has_skill(Skill.SPARK) is True
        assert record.has_skill(Skill.PYTHON) is False

    def test_frozen(self):
        record = JobRecord(region="CA", salary_avg=1)
        with pytest.raises(ValidationError):
            record.region = "NY"


class TestRegionStatistic:
    def test_requires_samples(self):
        with pytest.raises(ValidationError):
            RegionStatistic(region="CA", sample_count=0, mean_salary=100)

    def test_requires_positive_mean(self):
        with pytest.raises(ValidationError):
            RegionStatistic(region="CA", sample_count=1, mean_salary=0)


class TestFilterState:
    def test_default_is_unselected(self):
        state = FilterState()
        assert state.stage == FilterStage.UNSELECTED
        assert state.describe() == "Select a state"

    def test_stages(self):
        assert FilterState(selected_region="CA").stage == FilterStage.REGION_SELECTED
        state = FilterState(selected_region="CA", selected_track=Track.DATA_SCIENTIST)
        assert state.stage == FilterStage.REGION_AND_TRACK_SELECTED
        assert state.describe() == "CA → Data Scientist"

    def test_size_does_not_change_stage(self):
        state = FilterState(selected_region="CA", selected_size=SizeBucket.LARGE)
        assert state.stage == FilterStage.REGION_SELECTED

    def test_track_without_region_rejected(self):
        with pytest.raises(ValidationError):
            FilterState(selected_track=Track.DATA_SCIENTIST)

    def test_size_without_region_rejected(self):
        with pytest.raises(ValidationError):
            FilterState(selected_size=SizeBucket.SMALL)

    def test_region_code_normalized(self):
        assert FilterState(selected_region=" ca ").selected_region == "CA"
        assert FilterState(selected_region="  ").stage == FilterStage.UNSELECTED
