"""Events and published view bundles for the filter coordinator."""

from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple, Union

from salary_explorer.aggregation.models import SizeBucketStat, TrackBreakdown
from salary_explorer.domain.models import (
    FilterState,
    JobRecord,
    RegionStatistic,
    SizeBucket,
    Skill,
    Track,
)
from salary_explorer.flow.models import FlowGraph


@dataclass(frozen=True)
class RegionSelected:
    region: str


@dataclass(frozen=True)
class TrackSelected:
    track: Track


@dataclass(frozen=True)
class SizeSelected:
    size: SizeBucket


@dataclass(frozen=True)
class SelectionCleared:
    pass


SelectionEvent = Union[RegionSelected, TrackSelected, SizeSelected, SelectionCleared]


@dataclass(frozen=True)
class TransitionOutcome:
    """New state after an event, and whether derived views must be rebuilt."""

    state: FilterState
    recompute: bool = True


@dataclass(frozen=True)
class DerivedViews:
    """Every view derived from one selection, published as a single unit.

    Attributes:
        filtered_records: Records matching the region and track selection
        skill_frequency: Skill fractions over filtered_records (radar)
        size_stats: Company-size buckets over filtered_records (treemap)
        flow_graph: Built from the region-only set, never narrowed by track
        track_breakdown: Track/skill counts over the region-only set (sunburst)
        region_statistic: Statistic of the selected region, if any
    """

    filtered_records: Tuple[JobRecord, ...]
    skill_frequency: Dict[Skill, float]
    size_stats: Tuple[SizeBucketStat, ...]
    flow_graph: FlowGraph
    track_breakdown: Tuple[TrackBreakdown, ...]
    region_statistic: Optional[RegionStatistic] = None

    @property
    def is_empty(self) -> bool:
        """True when the selection matched no records; render a "no data" state."""
        return not self.filtered_records


@dataclass(frozen=True)
class SelectionSnapshot:
    """A committed (state, views) pair. ``generation`` increases with each event."""

    state: FilterState
    views: DerivedViews
    generation: int


@dataclass(frozen=True)
class SelectionChange:
    """Delivered to subscribers after every committed transition."""

    previous: FilterState
    current: FilterState
    event: SelectionEvent
    views: DerivedViews
    generation: int


SelectionHandler = Callable[[SelectionChange], None]
