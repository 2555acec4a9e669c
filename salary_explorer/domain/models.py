"""Core domain models for job postings, regions and the selection state.

This module defines the data structures used throughout the application:
- Track, SizeBucket, Skill, SalaryQuartile: the fixed taxonomies shared with renderers
- JobRecord: one normalized job posting
- RegionStatistic: per-state sample count and mean salary
- FilterState: the single selection (region, track, size) driving every view
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from .regions import is_known_region


class Track(str, Enum):
    """Standardized job-title category."""

    DATA_SCIENTIST = "DataScientist"
    DATA_ENGINEER = "DataEngineer"
    DATA_ANALYST = "DataAnalyst"
    ML_ENGINEER = "MLEngineer"
    SOFTWARE_ENGINEER = "SoftwareEngineer"
    OTHER = "Other"

    @property
    def label(self) -> str:
        return _TRACK_LABELS[self]


_TRACK_LABELS = {
    Track.DATA_SCIENTIST: "Data Scientist",
    Track.DATA_ENGINEER: "Data Engineer",
    Track.DATA_ANALYST: "Data Analyst",
    Track.ML_ENGINEER: "ML Engineer",
    Track.SOFTWARE_ENGINEER: "Software Engineer",
    Track.OTHER: "Other",
}


class SizeBucket(str, Enum):
    """Standardized company-size category."""

    SMALL = "Small"
    MEDIUM = "Medium"
    LARGE = "Large"
    UNKNOWN = "Unknown"


class Skill(str, Enum):
    """Skills flagged on every posting."""

    PYTHON = "Python"
    R = "R"
    SPARK = "Spark"
    CLOUD = "Cloud"
    EXCEL = "Excel"

    @property
    def field_name(self) -> str:
        """Name of the JobRecord attribute carrying this flag."""
        return self.name.lower()


class SalaryQuartile(str, Enum):
    """Salary quartile bucket; boundaries depend on the record subset."""

    Q1 = "Q1"
    Q2 = "Q2"
    Q3 = "Q3"
    Q4 = "Q4"

    @property
    def label(self) -> str:
        return _QUARTILE_LABELS[self]


_QUARTILE_LABELS = {
    SalaryQuartile.Q1: "Q1 (Low)",
    SalaryQuartile.Q2: "Q2 (Med-Low)",
    SalaryQuartile.Q3: "Q3 (Med-High)",
    SalaryQuartile.Q4: "Q4 (High)",
}

# Interoperable enumeration orders; renderers address nodes and series by position.
SKILLS = (Skill.PYTHON, Skill.R, Skill.SPARK, Skill.CLOUD, Skill.EXCEL)
TRACKS = (
    Track.DATA_SCIENTIST,
    Track.DATA_ENGINEER,
    Track.DATA_ANALYST,
    Track.ML_ENGINEER,
    Track.OTHER,
)
FLOW_TRACKS = TRACKS[:4]
SIZE_BUCKETS = (SizeBucket.SMALL, SizeBucket.MEDIUM, SizeBucket.LARGE, SizeBucket.UNKNOWN)
QUARTILES = (SalaryQuartile.Q1, SalaryQuartile.Q2, SalaryQuartile.Q3, SalaryQuartile.Q4)


class JobRecord(BaseModel):
    """Normalized job posting.

    The normalizer always produces a record, even for rows with no usable
    region or salary. Whether a record takes part in statistics is decided by
    ``is_valid``: the region must be one of the 50 known state codes and the
    average salary must be positive.
    """

    region: str = Field("", description="Two-letter state code, empty when not found")
    title: str = Field("", description="Job title as published")
    salary_avg: float = Field(0.0, ge=0, description="Average annual salary")
    salary_min: float = Field(0.0, ge=0, description="Lower end of the salary range")
    salary_max: float = Field(0.0, ge=0, description="Upper end of the salary range")
    python: bool = False
    r: bool = False
    spark: bool = False
    cloud: bool = False
    excel: bool = False
    size_text: str = Field("", description="Company size as published")
    industry: str = ""
    company: str = "Unknown"

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "example": {
                "region": "CA",
                "title": "Senior Data Scientist",
                "salary_avg": 120000.0,
                "salary_min": 96000.0,
                "salary_max": 144000.0,
                "python": True,
                "r": False,
                "spark": True,
                "cloud": True,
                "excel": False,
                "size_text": "1001 to 5000 employees",
                "industry": "Internet",
                "company": "Example Corp",
            }
        },
    }

    @field_validator("region")
    @classmethod
    def normalize_region(cls, v: str) -> str:
        """Strip and upper-case the region code."""
        return v.strip().upper()

    @property
    def is_valid(self) -> bool:
        return is_known_region(self.region) and self.salary_avg > 0

    def has_skill(self, skill: Skill) -> bool:
        return getattr(self, skill.field_name)


class RegionStatistic(BaseModel):
    """Sample count and mean salary for one state."""

    region: str = Field(..., min_length=2, max_length=2)
    sample_count: int = Field(..., ge=1)
    mean_salary: float = Field(..., gt=0)

    model_config = {"frozen": True}


class FilterStage(str, Enum):
    """Position of a FilterState in the selection hierarchy."""

    UNSELECTED = "unselected"
    REGION_SELECTED = "region_selected"
    REGION_AND_TRACK_SELECTED = "region_and_track_selected"


class FilterState(BaseModel):
    """The active selection.

    Track and size only mean something once a region is selected; a state
    carrying a track or size without a region is rejected.
    """

    selected_region: Optional[str] = None
    selected_track: Optional[Track] = None
    selected_size: Optional[SizeBucket] = None

    model_config = {"frozen": True}

    @field_validator("selected_region")
    @classmethod
    def normalize_selected_region(cls, v: Optional[str]) -> Optional[str]:
        """Same casing as JobRecord.region; a blank code means no selection."""
        if v is None:
            return None
        return v.strip().upper() or None

    @model_validator(mode="after")
    def validate_hierarchy(self):
        if self.selected_region is None and (
            self.selected_track is not None or self.selected_size is not None
        ):
            raise ValueError("selected_track and selected_size require selected_region")
        return self

    @property
    def stage(self) -> FilterStage:
        if self.selected_region is None:
            return FilterStage.UNSELECTED
        if self.selected_track is None:
            return FilterStage.REGION_SELECTED
        return FilterStage.REGION_AND_TRACK_SELECTED

    def describe(self) -> str:
        """Breadcrumb text for the selection path, e.g. ``CA → Data Scientist``."""
        if self.selected_region is None:
            return "Select a state"
        if self.selected_track is None:
            return f"{self.selected_region} → Select a job track"
        return f"{self.selected_region} → {self.selected_track.label}"
