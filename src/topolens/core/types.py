"""
Core type definitions for topolens.

Covers both the immutable dataset read from a topology file (services and
the calls between them) and the display-side view of it that gets handed to
a renderer.
"""

from enum import IntEnum, StrEnum
from typing import Dict, List, Optional, Set, Tuple

from pydantic import BaseModel, ConfigDict, Field

EdgeKey = Tuple[int, int]


class ServiceCategory(IntEnum):
    """Role of a service in the call topology."""
    CONSUMER = 0
    PROVIDER = 1
    BOTH = 2


DEFAULT_CATEGORY_NAMES: Dict[int, str] = {
    ServiceCategory.CONSUMER: "consumer",
    ServiceCategory.PROVIDER: "provider",
    ServiceCategory.BOTH: "consumer and provider",
}


class Highlight(StrEnum):
    """
    Tri-state display emphasis for nodes and edges.

    NEUTRAL is the unset state; the other two are only ever assigned by a
    reconciliation that explicitly recomputes every element.
    """
    EMPHASIZED = "emphasized"
    DEEMPHASIZED = "deemphasized"
    NEUTRAL = "neutral"

    @classmethod
    def from_match(cls, matched: bool) -> "Highlight":
        return cls.EMPHASIZED if matched else cls.DEEMPHASIZED


class PathDirection(StrEnum):
    """Walk direction for path search."""
    FORWARD = "forward"
    REVERSE = "reverse"
    BOTH = "both"


class ReachDirection(StrEnum):
    """Walk direction for reachability search."""
    OUTGOING = "outgoing"
    INCOMING = "incoming"
    BOTH = "both"

    def as_path_direction(self) -> PathDirection:
        return {
            ReachDirection.OUTGOING: PathDirection.FORWARD,
            ReachDirection.INCOMING: PathDirection.REVERSE,
            ReachDirection.BOTH: PathDirection.BOTH,
        }[self]


class DisplayMode(StrEnum):
    """How a reachability filter is applied to the current view."""
    HIGHLIGHT = "highlight"
    RESTRICT = "restrict"


class MergePolicy(StrEnum):
    """Reconciliation policy for a new selection."""
    REPLACE = "replace"
    MERGE = "merge"


class EdgeInclusion(StrEnum):
    """
    Rule deciding whether an edge survives a node filter.

    BOTH_ENDPOINTS is used by every operation except category hiding, which
    keeps an edge as long as ANY_ENDPOINT is still visible.
    """
    BOTH_ENDPOINTS = "both_endpoints"
    ANY_ENDPOINT = "any_endpoint"


# =============================================================================
# Dataset
# =============================================================================


class ServiceNode(BaseModel):
    """A service in the loaded dataset. Identity is `index`."""
    index: int
    name: str = ""
    category: int = ServiceCategory.CONSUMER

    model_config = ConfigDict(frozen=True, extra="ignore")

    @property
    def label(self) -> str:
        return self.name or f"Node {self.index}"


class Link(BaseModel):
    """A directed call from `source` to `target`, by node index."""
    source: int
    target: int

    model_config = ConfigDict(frozen=True, extra="ignore")

    @property
    def key(self) -> EdgeKey:
        return (self.source, self.target)


class Category(BaseModel):
    name: str

    model_config = ConfigDict(frozen=True, extra="ignore")


class TopologyData(BaseModel):
    """
    The cleaned, immutable dataset of one file load.

    Every link references existing node indices; links that did not were
    removed by the loader and counted in `LoadReport.dropped_links`.
    """
    nodes: Tuple[ServiceNode, ...]
    links: Tuple[Link, ...]
    categories: Tuple[Category, ...] = ()

    model_config = ConfigDict(frozen=True)

    def node_indices(self) -> Set[int]:
        return {node.index for node in self.nodes}


class LoadReport(BaseModel):
    """Summary of a successful load."""
    source: str = ""
    node_count: int
    link_count: int
    dropped_links: int = 0

    @property
    def message(self) -> str:
        base = f"Loaded {self.node_count} nodes and {self.link_count} links"
        if self.dropped_links:
            return f"{base} ({self.dropped_links} invalid links dropped)"
        return base


# =============================================================================
# Display view
# =============================================================================


def node_display_id(index: int) -> str:
    return f"node-{index}"


def edge_display_id(source: int, target: int) -> str:
    return f"edge-{source}-{target}"


class DisplayNode(BaseModel):
    """A node as shown by the renderer, with a back-reference to the dataset."""
    index: int
    label: str
    category: int
    highlight: Highlight = Highlight.NEUTRAL

    model_config = ConfigDict(frozen=True)

    @property
    def id(self) -> str:
        return node_display_id(self.index)

    @classmethod
    def from_service(cls, node: ServiceNode,
                     highlight: Highlight = Highlight.NEUTRAL) -> "DisplayNode":
        return cls(index=node.index, label=node.label,
                   category=node.category, highlight=highlight)

    def with_highlight(self, highlight: Highlight) -> "DisplayNode":
        if highlight == self.highlight:
            return self
        return self.model_copy(update={"highlight": highlight})


class DisplayEdge(BaseModel):
    """An edge as shown by the renderer. Identity is the ordered `(source, target)` pair."""
    source: int
    target: int
    highlight: Highlight = Highlight.NEUTRAL

    model_config = ConfigDict(frozen=True)

    @property
    def key(self) -> EdgeKey:
        return (self.source, self.target)

    @property
    def id(self) -> str:
        return edge_display_id(self.source, self.target)

    @property
    def source_id(self) -> str:
        return node_display_id(self.source)

    @property
    def target_id(self) -> str:
        return node_display_id(self.target)

    @classmethod
    def from_link(cls, link: Link,
                  highlight: Highlight = Highlight.NEUTRAL) -> "DisplayEdge":
        return cls(source=link.source, target=link.target, highlight=highlight)

    def with_highlight(self, highlight: Highlight) -> "DisplayEdge":
        if highlight == self.highlight:
            return self
        return self.model_copy(update={"highlight": highlight})


class VisibleSubgraph(BaseModel):
    """
    Ordered nodes and edges currently shown.

    Instances are never patched in place; every operation builds a new one
    and swaps it in.
    """
    nodes: Tuple[DisplayNode, ...] = ()
    edges: Tuple[DisplayEdge, ...] = ()

    model_config = ConfigDict(frozen=True)

    @classmethod
    def empty(cls) -> "VisibleSubgraph":
        return cls()

    def node_indices(self) -> Set[int]:
        return {node.index for node in self.nodes}

    def edge_keys(self) -> Set[EdgeKey]:
        return {edge.key for edge in self.edges}

    def links(self) -> List[Link]:
        return [Link(source=e.source, target=e.target) for e in self.edges]

    def get_node(self, node_id: str) -> Optional[DisplayNode]:
        return next((n for n in self.nodes if n.id == node_id), None)

    def get_edge(self, edge_id: str) -> Optional[DisplayEdge]:
        return next((e for e in self.edges if e.id == edge_id), None)

    def has_dangling_edges(self) -> bool:
        indices = self.node_indices()
        return any(e.source not in indices or e.target not in indices for e in self.edges)

    def to_dict(self) -> Dict[str, list]:
        return {
            "nodes": [
                {**node.model_dump(mode="json"), "id": node.id}
                for node in self.nodes
            ],
            "edges": [
                {
                    **edge.model_dump(mode="json"),
                    "id": edge.id,
                    "source_id": edge.source_id,
                    "target_id": edge.target_id,
                }
                for edge in self.edges
            ],
        }


class Selection(BaseModel):
    """A freshly matched set of nodes and edges waiting to be reconciled."""
    nodes: Tuple[ServiceNode, ...] = ()
    links: Tuple[Link, ...] = ()

    model_config = ConfigDict(frozen=True)

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    def node_indices(self) -> Set[int]:
        return {node.index for node in self.nodes}

    def link_keys(self) -> Set[EdgeKey]:
        return {link.key for link in self.links}


class ViewStats(BaseModel):
    total_nodes: int = 0
    total_links: int = 0
    visible_nodes: int = 0
    visible_edges: int = 0
    dropped_links: int = 0


class QueryOutcome(BaseModel):
    """
    Result of one session operation.

    `empty` outcomes (nothing matched) leave the view untouched; they are an
    informational result, not an error.
    """
    operation: str
    matched_nodes: int = 0
    matched_edges: int = 0
    empty: bool = False
    truncated: bool = False
    truncation_reasons: List[str] = Field(default_factory=list)
    visible_nodes: int = 0
    visible_edges: int = 0
