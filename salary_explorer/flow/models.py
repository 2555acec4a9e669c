"""Data models for the skill → track → salary-quartile flow graph."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from salary_explorer.aggregation.models import QuartileBoundaries


class NodeKind(str, Enum):
    SKILL = "skill"
    TRACK = "track"
    QUARTILE = "quartile"


@dataclass(frozen=True)
class FlowNode:
    """One node of the flow graph.

    Attributes:
        index: Position in FlowGraph.nodes; links refer to nodes by this index
        name: Taxonomy value (``"Python"``, ``"DataScientist"``, ``"Q1"``)
        label: Display label (``"Data Scientist"``, ``"Q1 (Low)"``)
        kind: Which layer family the node belongs to
        layer: 0 for skills, 1 for tracks, 2 for quartiles
    """

    index: int
    name: str
    label: str
    kind: NodeKind
    layer: int


@dataclass(frozen=True)
class FlowLink:
    """Weighted edge between two nodes.

    ``mean_salary`` is only set on track → quartile links, where it holds the
    mean average salary of the records in that cell.
    """

    source: int
    target: int
    weight: int
    mean_salary: Optional[float] = None


@dataclass(frozen=True)
class FlowGraph:
    """Immutable three-layer flow graph.

    The graph is never edited after construction; a selection change builds a
    new one and replaces the old one wholesale.
    """

    nodes: Tuple[FlowNode, ...]
    links: Tuple[FlowLink, ...]
    quartiles: Optional[QuartileBoundaries] = None
    record_count: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.links

    def node_index(self, kind: NodeKind, name: str) -> int:
        """Position of the node with the given kind and name.

        Raises:
            KeyError: If no such node exists
        """
        for node in self.nodes:
            if node.kind == kind and node.name == name:
                return node.index
        raise KeyError(f"No {kind.value} node named {name!r}")

    def links_from(self, index: int) -> Tuple[FlowLink, ...]:
        return tuple(link for link in self.links if link.source == index)

    def links_into(self, index: int) -> Tuple[FlowLink, ...]:
        return tuple(link for link in self.links if link.target == index)
