"""Domain models for the salary explorer."""

from .models import (
    FLOW_TRACKS,
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
from .regions import FIPS_TO_REGION, KNOWN_REGIONS, is_known_region

__all__ = [
    "JobRecord",
    "RegionStatistic",
    "FilterState",
    "FilterStage",
    "Track",
    "SizeBucket",
    "Skill",
    "SalaryQuartile",
    "SKILLS",
    "TRACKS",
    "FLOW_TRACKS",
    "SIZE_BUCKETS",
    "QUARTILES",
    "FIPS_TO_REGION",
    "KNOWN_REGIONS",
    "is_known_region",
]
