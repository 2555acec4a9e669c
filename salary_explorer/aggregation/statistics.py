"""Statistics over explicit subsets of job records.

Every function takes the subset it should summarise instead of reaching for
"all records", so the same code serves the national view and any filtered
context. Invalid records (unknown region or non-positive salary) are ignored
everywhere; they are never counted.
"""

from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Sequence

import numpy as np

from salary_explorer.categorization import classify_size, classify_track
from salary_explorer.domain.models import (
    SIZE_BUCKETS,
    SKILLS,
    JobRecord,
    RegionStatistic,
    SizeBucket,
    Skill,
    Track,
)

from .models import QuartileBoundaries, RegionComparison, SizeBucketStat, TrackBreakdown


def valid_records(records: Iterable[JobRecord]) -> List[JobRecord]:
    """Keep only records with a known region and a positive average salary."""
    return [record for record in records if record.is_valid]


def region_stats(records: Iterable[JobRecord]) -> List[RegionStatistic]:
    """Per-region sample count and mean salary, ordered by region code.

    Only regions with at least one valid record appear.
    """
    salaries_by_region: Dict[str, List[float]] = defaultdict(list)
    for record in valid_records(records):
        salaries_by_region[record.region].append(record.salary_avg)

    return [
        RegionStatistic(
            region=region,
            sample_count=len(salaries),
            mean_salary=float(np.mean(salaries)),
        )
        for region, salaries in sorted(salaries_by_region.items())
    ]


def national_median(stats: Sequence[RegionStatistic]) -> Optional[float]:
    """Median of the per-region means.

    This is a median of means, not the median of individual salaries: each
    state counts once regardless of its sample size.

    Returns:
        The median, or None when there are no regions
    """
    if not stats:
        return None
    return float(np.median([stat.mean_salary for stat in stats]))


def skill_frequency(records: Iterable[JobRecord]) -> Dict[Skill, float]:
    """Fraction of records carrying each skill flag.

    An empty subset yields 0.0 for every skill; callers must render that as
    "no data" rather than as 0% demand.
    """
    subset = valid_records(records)
    if not subset:
        return {skill: 0.0 for skill in SKILLS}
    total = len(subset)
    return {
        skill: sum(1 for record in subset if record.has_skill(skill)) / total
        for skill in SKILLS
    }


def salary_quartiles(records: Iterable[JobRecord]) -> Optional[QuartileBoundaries]:
    """25th/50th/75th percentiles of the subset's average salaries.

    Uses linear interpolation between order statistics. Returns None for an
    empty subset.
    """
    salaries = sorted(record.salary_avg for record in valid_records(records))
    if not salaries:
        return None
    q1, q2, q3 = np.quantile(salaries, [0.25, 0.5, 0.75])
    return QuartileBoundaries(q1=float(q1), q2=float(q2), q3=float(q3))


def size_bucket_stats(records: Iterable[JobRecord]) -> List[SizeBucketStat]:
    """Count and salary range per company-size bucket.

    Buckets are emitted in SizeBucket order and only when they hold records.
    """
    by_bucket: Dict[SizeBucket, List[JobRecord]] = defaultdict(list)
    for record in valid_records(records):
        by_bucket[classify_size(record.size_text)].append(record)

    stats = []
    for bucket in SIZE_BUCKETS:
        members = by_bucket.get(bucket)
        if not members:
            continue
        stats.append(
            SizeBucketStat(
                bucket=bucket,
                count=len(members),
                mean_salary=float(np.mean([record.salary_avg for record in members])),
                min_salary=min(record.salary_min for record in members),
                max_salary=max(record.salary_max for record in members),
            )
        )
    return stats


def relative_to_median(
    stats: Sequence[RegionStatistic], median: Optional[float]
) -> List[RegionComparison]:
    """Each region's mean salary as a relative difference from ``median``."""
    if not median:
        return []
    return [
        RegionComparison(
            region=stat.region,
            mean_salary=stat.mean_salary,
            relative_difference=(stat.mean_salary - median) / median,
        )
        for stat in stats
    ]


def track_skill_breakdown(
    records: Iterable[JobRecord], extended: bool = True
) -> List[TrackBreakdown]:
    """Per-track record counts with per-skill counts underneath.

    Args:
        records: Subset to summarise
        extended: Classify with the SoftwareEngineer rule included

    Returns:
        One entry per track present, in Track enumeration order
    """
    counts: Dict[Track, int] = defaultdict(int)
    skill_counts: Dict[Track, Dict[Skill, int]] = defaultdict(
        lambda: {skill: 0 for skill in SKILLS}
    )
    for record in valid_records(records):
        track = classify_track(record.title, extended=extended)
        counts[track] += 1
        for skill in SKILLS:
            if record.has_skill(skill):
                skill_counts[track][skill] += 1

    return [
        TrackBreakdown(track=track, count=counts[track], skill_counts=dict(skill_counts[track]))
        for track in Track
        if counts.get(track)
    ]
