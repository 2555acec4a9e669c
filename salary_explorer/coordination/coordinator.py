"""Filter coordinator: sole owner of the selection state.

The coordinator turns selection events into committed snapshots. Each
dispatch:
1. Applies the pure transition to the latest state (under the lock, so events
   chain in arrival order)
2. Builds the complete view bundle for the new state outside the lock
3. Commits the (state, views) snapshot only if no newer event arrived
   meanwhile; a superseded result is discarded, never published
4. Delivers a SelectionChange to every subscriber

Subscribers therefore only ever observe whole, current bundles.
"""

import logging
import threading
from typing import Callable, List, Optional, Union

from salary_explorer.domain.models import FilterState, SizeBucket, Track
from salary_explorer.flow import FLOW_NODES, FlowGraphBuilder, NodeKind
from salary_explorer.logging import get_logger
from salary_explorer.logging.context import log_context
from salary_explorer.repository import (
    BoundaryLookup,
    DatasetNotLoadedError,
    DatasetRepository,
    FipsBoundaryLookup,
)
from salary_explorer.repository.dataset import DEFAULT_POLL_INTERVAL, DEFAULT_READY_TIMEOUT

from .models import (
    RegionSelected,
    SelectionChange,
    SelectionCleared,
    SelectionEvent,
    SelectionHandler,
    SelectionSnapshot,
    SizeSelected,
    TrackSelected,
)
from .transitions import build_views, transition

logger = get_logger(__name__, component="coordinator")


class FilterCoordinator:
    """Holds the single FilterState and publishes derived views on every change.

    States form a strict hierarchy: Unselected → RegionSelected →
    RegionAndTrackSelected. Selecting a region always clears the track and
    size. The size selection is recorded but filters nothing.
    """

    def __init__(
        self,
        repository: DatasetRepository,
        flow_builder: Optional[FlowGraphBuilder] = None,
        boundary_lookup: Optional[BoundaryLookup] = None,
        extended_tracks: bool = True,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize FilterCoordinator.

        Args:
            repository: Loaded (or loading) dataset repository
            flow_builder: Flow graph builder (defaults to FlowGraphBuilder())
            boundary_lookup: Feature id → region lookup (defaults to FIPS codes)
            extended_tracks: Use the SoftwareEngineer rule in the track breakdown
            logger_instance: Logger instance (defaults to module logger)
        """
        self.repository = repository
        self.flow_builder = flow_builder or FlowGraphBuilder()
        self.boundary_lookup = boundary_lookup or FipsBoundaryLookup()
        self.extended_tracks = extended_tracks
        self.logger = logger_instance or logger

        self._lock = threading.Lock()
        self._state = FilterState()
        self._snapshot: Optional[SelectionSnapshot] = None
        self._generation = 0
        self._handlers: List[SelectionHandler] = []

    def start(
        self,
        timeout: float = DEFAULT_READY_TIMEOUT,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ) -> SelectionSnapshot:
        """Wait for the dataset, then publish the unselected snapshot.

        Raises:
            IngestionError: If the dataset is not ready within ``timeout``
        """
        self.repository.wait_until_ready(timeout=timeout, poll_interval=poll_interval)
        snapshot = self.dispatch(SelectionCleared())
        self.logger.info(
            "Coordinator started",
            extra={
                "event": "coordinator.started",
                "record_count": len(snapshot.views.filtered_records),
            },
        )
        return snapshot

    # State access

    @property
    def state(self) -> FilterState:
        """Latest accepted selection (its views may still be in flight)."""
        return self._state

    @property
    def snapshot(self) -> SelectionSnapshot:
        """Latest committed snapshot.

        Raises:
            DatasetNotLoadedError: If the coordinator has not been started
        """
        snapshot = self._snapshot
        if snapshot is None:
            raise DatasetNotLoadedError("Coordinator has not been started")
        return snapshot

    # Subscriptions

    def subscribe(self, handler: SelectionHandler) -> Callable[[], None]:
        """Register ``handler`` for every committed transition.

        Returns:
            A callable that removes the handler again
        """
        with self._lock:
            self._handlers.append(handler)

        def unsubscribe() -> None:
            with self._lock:
                if handler in self._handlers:
                    self._handlers.remove(handler)

        return unsubscribe

    # Events

    def dispatch(self, event: SelectionEvent) -> Optional[SelectionSnapshot]:
        """Apply a selection event.

        Returns:
            The committed snapshot after the event. When the event does not
            apply, or a newer event superseded it, the current snapshot is
            returned unchanged.
        """
        with self._lock:
            previous_state = self._state
            outcome = transition(previous_state, event)
            if outcome is None:
                self.logger.info(
                    f"Ignored {type(event).__name__} in state {previous_state.stage.value}",
                    extra={"event": "coordinator.event.ignored"},
                )
                return self._snapshot
            self._generation += 1
            generation = self._generation
            self._state = outcome.state
            committed = self._snapshot

        state = outcome.state
        with log_context(
            generation=generation,
            region=state.selected_region,
            track=state.selected_track,
            size=state.selected_size,
        ):
            if (
                not outcome.recompute
                and committed is not None
                and committed.state.selected_region == state.selected_region
                and committed.state.selected_track == state.selected_track
            ):
                views = committed.views
            else:
                views = build_views(
                    self.repository,
                    state,
                    flow_builder=self.flow_builder,
                    extended_tracks=self.extended_tracks,
                )

            with self._lock:
                if generation != self._generation:
                    self.logger.debug(
                        "Discarding views superseded by a newer selection",
                        extra={"event": "coordinator.views.superseded"},
                    )
                    return self._snapshot
                previous_snapshot = self._snapshot
                snapshot = SelectionSnapshot(state=state, views=views, generation=generation)
                self._snapshot = snapshot
                handlers = list(self._handlers)

            change = SelectionChange(
                previous=previous_snapshot.state if previous_snapshot else FilterState(),
                current=state,
                event=event,
                views=views,
                generation=generation,
            )
            self.logger.info(
                f"Selection changed: {state.describe()}",
                extra={
                    "event": "coordinator.selection.changed",
                    "stage": state.stage,
                    "filtered_count": len(views.filtered_records),
                    "recomputed": views is not (committed.views if committed else None),
                },
            )
            self._publish(handlers, change)
        return snapshot

    def select_region(self, region: str) -> Optional[SelectionSnapshot]:
        return self.dispatch(RegionSelected(region))

    def select_track(self, track: Union[Track, str]) -> Optional[SelectionSnapshot]:
        """Select a track by enum, value (``"DataScientist"``) or label (``"Data Scientist"``).

        Unrecognised names are ignored.
        """
        parsed = _parse_track(track)
        if parsed is None:
            self.logger.info(
                f"Ignored unknown track {track!r}",
                extra={"event": "coordinator.track.unknown"},
            )
            return self._snapshot
        return self.dispatch(TrackSelected(parsed))

    def select_size(self, size: Union[SizeBucket, str]) -> Optional[SelectionSnapshot]:
        try:
            bucket = SizeBucket(size)
        except ValueError:
            self.logger.info(
                f"Ignored unknown size bucket {size!r}",
                extra={"event": "coordinator.size.unknown"},
            )
            return self._snapshot
        return self.dispatch(SizeSelected(bucket))

    def clear_selection(self) -> Optional[SelectionSnapshot]:
        return self.dispatch(SelectionCleared())

    def select_feature(self, feature_id) -> Optional[SelectionSnapshot]:
        """Select the region behind a map boundary feature."""
        region = self.boundary_lookup.lookup(feature_id)
        if region is None:
            self.logger.debug(
                f"No region for boundary feature {feature_id!r}",
                extra={"event": "coordinator.feature.unmatched"},
            )
            return self._snapshot
        return self.select_region(region)

    def select_flow_node(self, index: int) -> Optional[SelectionSnapshot]:
        """Select the track behind a flow-graph node; other nodes are ignored."""
        if 0 <= index < len(FLOW_NODES) and FLOW_NODES[index].kind == NodeKind.TRACK:
            return self.select_track(FLOW_NODES[index].name)
        return self._snapshot

    def _publish(self, handlers: List[SelectionHandler], change: SelectionChange) -> None:
        for handler in handlers:
            # A handler may dispatch a newer selection; the rest only see that one.
            with self._lock:
                stale = change.generation != self._generation
            if stale:
                self.logger.debug(
                    "Stopped publishing a superseded selection",
                    extra={"event": "coordinator.publish.superseded"},
                )
                return
            try:
                handler(change)
            except Exception as e:
                self.logger.error(
                    f"Selection handler {getattr(handler, '__name__', handler)!r} failed: {e}",
                    extra={"event": "coordinator.handler.failed"},
                    exc_info=True,
                )


def _parse_track(track: Union[Track, str]) -> Optional[Track]:
    if isinstance(track, Track):
        return track
    try:
        return Track(track)
    except ValueError:
        pass
    for candidate in Track:
        if candidate.label.lower() == str(track).strip().lower():
            return candidate
    return None
