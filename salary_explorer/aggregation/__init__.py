"""Aggregation layer: statistics over explicit record subsets.

This module provides:
- region_stats / national_median: choropleth inputs (median of per-region means)
- skill_frequency: radar input
- salary_quartiles: per-subset quartile boundaries
- size_bucket_stats: treemap input
- track_skill_breakdown: sunburst input
- skill_gaps: radar learning recommendations
"""

from .insights import skill_gaps
from .models import (
    GapStatus,
    QuartileBoundaries,
    RegionComparison,
    SizeBucketStat,
    SkillGap,
    SkillGapReport,
    TrackBreakdown,
)
from .statistics import (
    national_median,
    region_stats,
    relative_to_median,
    salary_quartiles,
    size_bucket_stats,
    skill_frequency,
    track_skill_breakdown,
    valid_records,
)

__all__ = [
    "valid_records",
    "region_stats",
    "national_median",
    "skill_frequency",
    "salary_quartiles",
    "size_bucket_stats",
    "relative_to_median",
    "track_skill_breakdown",
    "skill_gaps",
    "QuartileBoundaries",
    "SizeBucketStat",
    "RegionComparison",
    "TrackBreakdown",
    "GapStatus",
    "SkillGap",
    "SkillGapReport",
]
