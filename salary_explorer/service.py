"""Data-access surface consumed by the dashboard renderers.

DashboardService wires one repository, normalizer and coordinator together
and exposes plain query functions. Every query taking a ``context`` accepts a
FilterState; without one it answers for the coordinator's current selection.
"""

import logging
from typing import Callable, Dict, List, Mapping, Optional

from salary_explorer.aggregation import (
    RegionComparison,
    SizeBucketStat,
    SkillGapReport,
    TrackBreakdown,
    relative_to_median,
    skill_gaps,
)
from salary_explorer.config.models import AppConfig
from salary_explorer.coordination import (
    DerivedViews,
    FilterCoordinator,
    SelectionHandler,
    SelectionSnapshot,
    build_views,
)
from salary_explorer.domain.models import FilterState, JobRecord, RegionStatistic, Skill
from salary_explorer.flow import FlowGraph
from salary_explorer.logging import get_logger
from salary_explorer.normalization import RecordNormalizer
from salary_explorer.repository import BoundaryLookup, DatasetRepository

logger = get_logger(__name__, component="service")


class DashboardService:
    """Query interface over the loaded dataset and the active selection."""

    def __init__(
        self,
        repository: DatasetRepository,
        coordinator: FilterCoordinator,
        config: Optional[AppConfig] = None,
        logger_instance: Optional[logging.Logger] = None,
    ):
        self.repository = repository
        self.coordinator = coordinator
        self.config = config
        self.logger = logger_instance or logger

    @classmethod
    def from_config(
        cls, config: AppConfig, boundary_lookup: Optional[BoundaryLookup] = None
    ) -> "DashboardService":
        """Build the repository, normalizer and coordinator described by ``config``."""
        repository = DatasetRepository(normalizer=RecordNormalizer(config.normalization))
        coordinator = FilterCoordinator(
            repository,
            boundary_lookup=boundary_lookup,
            extended_tracks=config.categorization.extended_tracks,
        )
        return cls(repository, coordinator, config=config)

    def start(self) -> SelectionSnapshot:
        """Load the configured dataset in the background and wait for it.

        Raises:
            IngestionError: If the dataset fails to load or is not ready in time
            ValueError: If the service was built without a config
        """
        if self.config is None:
            raise ValueError("DashboardService.start() requires a config")
        self.repository.load_in_background(
            self.config.dataset.path, encoding=self.config.dataset.encoding
        )
        return self.coordinator.start(
            timeout=self.config.ingestion.timeout_seconds,
            poll_interval=self.config.ingestion.poll_interval_seconds,
        )

    # National view

    def get_region_statistics(self) -> List[RegionStatistic]:
        return list(self.repository.region_statistics)

    def get_national_median(self) -> Optional[float]:
        """Median of the per-region mean salaries (None without data)."""
        return self.repository.national_median

    def get_region_comparison(self) -> List[RegionComparison]:
        return relative_to_median(self.repository.region_statistics, self.repository.national_median)

    def lookup_region(self, feature_id) -> Optional[str]:
        return self.coordinator.boundary_lookup.lookup(feature_id)

    # Selection-dependent views

    def get_filtered_records(self, context: Optional[FilterState] = None) -> List[JobRecord]:
        return list(self._views(context).filtered_records)

    def get_skill_frequency(self, context: Optional[FilterState] = None) -> Dict[Skill, float]:
        return dict(self._views(context).skill_frequency)

    def get_size_bucket_stats(self, context: Optional[FilterState] = None) -> List[SizeBucketStat]:
        return list(self._views(context).size_stats)

    def get_flow_graph(self, context: Optional[FilterState] = None) -> FlowGraph:
        """Flow graph for the context's region (the track selection does not narrow it)."""
        return self._views(context).flow_graph

    def get_track_breakdown(self, context: Optional[FilterState] = None) -> List[TrackBreakdown]:
        return list(self._views(context).track_breakdown)

    def get_skill_gaps(
        self, user_levels: Mapping[Skill, float], context: Optional[FilterState] = None
    ) -> SkillGapReport:
        """Learning recommendations comparing ``user_levels`` with the context's skill demand."""
        threshold, limit = 0.05, 3
        if self.config is not None:
            threshold = self.config.insights.gap_threshold
            limit = self.config.insights.max_recommendations
        return skill_gaps(
            user_levels, self._views(context).skill_frequency, threshold=threshold, limit=limit
        )

    def on_selection_changed(self, handler: SelectionHandler) -> Callable[[], None]:
        """Subscribe to every coordinator transition; returns an unsubscribe callable."""
        return self.coordinator.subscribe(handler)

    def _views(self, context: Optional[FilterState]) -> DerivedViews:
        if context is None:
            return self.coordinator.snapshot.views
        return build_views(
            self.repository,
            context,
            flow_builder=self.coordinator.flow_builder,
            extended_tracks=self.coordinator.extended_tracks,
        )
