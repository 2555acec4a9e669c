"""Pure selection transitions and view construction.

``transition`` decides the next FilterState for an event; ``build_views``
derives the complete view bundle for a state. Neither touches coordinator
state, so both can be exercised directly in tests.
"""

from typing import Optional, Tuple

from salary_explorer.aggregation import size_bucket_stats, skill_frequency, track_skill_breakdown
from salary_explorer.categorization import classify_track
from salary_explorer.domain.models import FilterState, JobRecord, Track
from salary_explorer.domain.regions import is_known_region
from salary_explorer.flow import FlowGraphBuilder
from salary_explorer.repository import DatasetRepository

from .models import (
    DerivedViews,
    RegionSelected,
    SelectionCleared,
    SelectionEvent,
    SizeSelected,
    TrackSelected,
    TransitionOutcome,
)


def transition(state: FilterState, event: SelectionEvent) -> Optional[TransitionOutcome]:
    """Apply ``event`` to ``state``.

    - RegionSelected: set the region, clear track and size
    - TrackSelected: set the track; requires a selected region
    - SizeSelected: record the size only, views are left as they are;
      requires a selected region
    - SelectionCleared: back to the unselected state

    Returns:
        The outcome, or None when the event does not apply (unknown region
        code, or a track/size event with no region selected)
    """
    if isinstance(event, RegionSelected):
        region = (event.region or "").strip().upper()
        if not is_known_region(region):
            return None
        return TransitionOutcome(FilterState(selected_region=region))

    if isinstance(event, TrackSelected):
        if state.selected_region is None:
            return None
        return TransitionOutcome(
            state.model_copy(update={"selected_track": event.track})
        )

    if isinstance(event, SizeSelected):
        if state.selected_region is None:
            return None
        return TransitionOutcome(
            state.model_copy(update={"selected_size": event.size}), recompute=False
        )

    if isinstance(event, SelectionCleared):
        return TransitionOutcome(FilterState())

    raise TypeError(f"Unsupported selection event: {event!r}")


def matches_track(record: JobRecord, track: Track) -> bool:
    # SoftwareEngineer only exists in the extended rule set
    return classify_track(record.title, extended=track == Track.SOFTWARE_ENGINEER) == track


def region_records(repository: DatasetRepository, state: FilterState) -> Tuple[JobRecord, ...]:
    """Records of the selected region, or all valid records when none is selected."""
    return repository.records_for_region(state.selected_region)


def filtered_records(repository: DatasetRepository, state: FilterState) -> Tuple[JobRecord, ...]:
    """Records matching region and track. The size selection never filters."""
    records = region_records(repository, state)
    if state.selected_track is None:
        return records
    return tuple(record for record in records if matches_track(record, state.selected_track))


def build_views(
    repository: DatasetRepository,
    state: FilterState,
    flow_builder: Optional[FlowGraphBuilder] = None,
    extended_tracks: bool = True,
) -> DerivedViews:
    """Derive the full view bundle for ``state``.

    Skill frequency and size statistics follow the region and track
    selection. The flow graph and track breakdown stay scoped to the region
    alone, so selecting a track does not narrow them.
    """
    builder = flow_builder or FlowGraphBuilder()
    scope = region_records(repository, state)
    selected = filtered_records(repository, state)

    return DerivedViews(
        filtered_records=selected,
        skill_frequency=skill_frequency(selected),
        size_stats=tuple(size_bucket_stats(selected)),
        flow_graph=builder.build(scope),
        track_breakdown=tuple(track_skill_breakdown(scope, extended=extended_tracks)),
        region_statistic=(
            repository.region_statistic(state.selected_region)
            if state.selected_region is not None
            else None
        ),
    )
