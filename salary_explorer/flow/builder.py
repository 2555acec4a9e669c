"""Builds the skill → track → salary-quartile flow graph for a record subset.

The topology is fixed: five skill nodes, four track nodes and four quartile
nodes, always in taxonomy order, so renderers can address nodes by position.
Only the link weights depend on the data.
"""

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Tuple

import numpy as np

from salary_explorer.aggregation import salary_quartiles, valid_records
from salary_explorer.categorization import classify_track
from salary_explorer.domain.models import (
    FLOW_TRACKS,
    QUARTILES,
    SKILLS,
    JobRecord,
    SalaryQuartile,
    Track,
)
from salary_explorer.logging import get_logger

from .models import FlowGraph, FlowLink, FlowNode, NodeKind

logger = get_logger(__name__, component="flow")


def _build_nodes() -> Tuple[FlowNode, ...]:
    nodes: List[FlowNode] = []
    for skill in SKILLS:
        nodes.append(FlowNode(len(nodes), skill.value, skill.value, NodeKind.SKILL, 0))
    for track in FLOW_TRACKS:
        nodes.append(FlowNode(len(nodes), track.value, track.label, NodeKind.TRACK, 1))
    for quartile in QUARTILES:
        nodes.append(FlowNode(len(nodes), quartile.value, quartile.label, NodeKind.QUARTILE, 2))
    return tuple(nodes)


FLOW_NODES = _build_nodes()
SKILL_OFFSET = 0
TRACK_OFFSET = len(SKILLS)
QUARTILE_OFFSET = len(SKILLS) + len(FLOW_TRACKS)


class FlowGraphBuilder:
    """Builds FlowGraph instances from record subsets.

    Quartile boundaries are recomputed inside each subset, so the quartile
    layer always describes the subset's own salary distribution.
    """

    def __init__(self, logger_instance: Optional[logging.Logger] = None):
        self.logger = logger_instance or logger

    def build(self, records: Iterable[JobRecord]) -> FlowGraph:
        """Build the flow graph for ``records``.

        Args:
            records: The subset to summarise (invalid records are ignored)

        Returns:
            New FlowGraph; links with zero weight are omitted
        """
        subset = valid_records(records)
        # Records classified as Other have no node in the track layer
        tracked: List[Tuple[JobRecord, Track]] = []
        for record in subset:
            track = classify_track(record.title)
            if track in FLOW_TRACKS:
                tracked.append((record, track))

        links = self._skill_track_links(tracked)
        quartiles = salary_quartiles(subset)
        if quartiles is not None:
            links.extend(self._track_quartile_links(tracked, quartiles))

        graph = FlowGraph(
            nodes=FLOW_NODES,
            links=tuple(links),
            quartiles=quartiles,
            record_count=len(subset),
        )

        self.logger.debug(
            "Flow graph built",
            extra={
                "event": "flow.graph.built",
                "record_count": len(subset),
                "link_count": len(graph.links),
            },
        )
        return graph

    @staticmethod
    def _skill_track_links(tracked: List[Tuple[JobRecord, Track]]) -> List[FlowLink]:
        links = []
        for skill_position, skill in enumerate(SKILLS):
            for track_position, track in enumerate(FLOW_TRACKS):
                weight = sum(
                    1 for record, record_track in tracked
                    if record_track == track and record.has_skill(skill)
                )
                if weight:
                    links.append(
                        FlowLink(
                            source=SKILL_OFFSET + skill_position,
                            target=TRACK_OFFSET + track_position,
                            weight=weight,
                        )
                    )
        return links

    @staticmethod
    def _track_quartile_links(tracked, quartiles) -> List[FlowLink]:
        cells: Dict[Tuple[Track, SalaryQuartile], List[float]] = defaultdict(list)
        for record, track in tracked:
            cells[(track, quartiles.bucket(record.salary_avg))].append(record.salary_avg)

        links = []
        for track_position, track in enumerate(FLOW_TRACKS):
            for quartile_position, quartile in enumerate(QUARTILES):
                salaries = cells.get((track, quartile))
                if not salaries:
                    continue
                links.append(
                    FlowLink(
                        source=TRACK_OFFSET + track_position,
                        target=QUARTILE_OFFSET + quartile_position,
                        weight=len(salaries),
                        mean_salary=float(np.mean(salaries)),
                    )
                )
        return links
