"""Result models produced by the aggregation layer."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple

from salary_explorer.domain.models import SalaryQuartile, SizeBucket, Skill, Track


@dataclass(frozen=True)
class QuartileBoundaries:
    """The three salary values splitting a subset into four equal-count groups.

    Bucketing is inclusive on the lower bucket: a salary equal to ``q1`` is Q1.
    """

    q1: float
    q2: float
    q3: float

    def bucket(self, salary: float) -> SalaryQuartile:
        if salary <= self.q1:
            return SalaryQuartile.Q1
        if salary <= self.q2:
            return SalaryQuartile.Q2
        if salary <= self.q3:
            return SalaryQuartile.Q3
        return SalaryQuartile.Q4


@dataclass(frozen=True)
class SizeBucketStat:
    """Salary summary for one company-size bucket (treemap cell)."""

    bucket: SizeBucket
    count: int
    mean_salary: float
    min_salary: float
    max_salary: float


@dataclass(frozen=True)
class RegionComparison:
    """A state's mean salary relative to the national median.

    ``relative_difference`` is ``(mean - median) / median``: positive above the
    median, negative below it.
    """

    region: str
    mean_salary: float
    relative_difference: float


@dataclass(frozen=True)
class TrackBreakdown:
    """Record count and per-skill counts for one track (sunburst ring)."""

    track: Track
    count: int
    skill_counts: Dict[Skill, int] = field(default_factory=dict)


class GapStatus(str, Enum):
    """Overall outcome of comparing a user's skills against demand."""

    NO_DATA = "no_data"
    MEETS = "meets"
    CLOSE = "close"
    GAPS = "gaps"


@dataclass(frozen=True)
class SkillGap:
    skill: Skill
    demand: float
    user_level: float

    @property
    def gap(self) -> float:
        return self.demand - self.user_level


@dataclass(frozen=True)
class SkillGapReport:
    """Learning recommendations for the radar view.

    Attributes:
        status: Overall outcome
        gaps: Largest gaps above the threshold, biggest first
        minor_gaps: Unmet skills within the threshold (only when status is CLOSE)
    """

    status: GapStatus
    gaps: Tuple[SkillGap, ...] = ()
    minor_gaps: Tuple[SkillGap, ...] = ()

    @property
    def top_gap(self) -> Optional[SkillGap]:
        return self.gaps[0] if self.gaps else None
