"""Flow graph (Sankey) construction."""

from .builder import FLOW_NODES, FlowGraphBuilder
from .models import FlowGraph, FlowLink, FlowNode, NodeKind

__all__ = [
    "FlowGraphBuilder",
    "FlowGraph",
    "FlowLink",
    "FlowNode",
    "NodeKind",
    "FLOW_NODES",
]
