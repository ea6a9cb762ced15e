"""
topolens - Service Topology Explorer.

Loads a service call topology (services as nodes, calls as links) from JSON
and lets a user search, filter and incrementally reshape the visible
subgraph.

Key Components:
- core: Data types, adjacency construction and the GraphStore
- analysis: Keyword matching, bounded path search and reachability
- view: Reconciliation of the visible subgraph and the session controller
- graph: Renderer boundary and HTML export

Usage:
    from topolens import TopologySession

    session = TopologySession()
    session.load_file(Path("topology.json"))
    session.search_nodes("order service")
"""

__version__ = "0.1.0"

from .core.types import (
    DisplayEdge, DisplayMode, DisplayNode, Highlight, Link, MergePolicy,
    PathDirection, ReachDirection, ServiceNode, VisibleSubgraph,
)
from .view.session import TopologySession

__all__ = [
    "__version__",
    "DisplayEdge",
    "DisplayMode",
    "DisplayNode",
    "Highlight",
    "Link",
    "MergePolicy",
    "PathDirection",
    "ReachDirection",
    "ServiceNode",
    "TopologySession",
    "VisibleSubgraph",
]
