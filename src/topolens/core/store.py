"""
Graph Store.

Single source of truth for what exists (the dataset of the last successful
load) and what is shown (the current VisibleSubgraph).

Loading validates the raw JSON structure, drops links whose endpoints do not
exist and reports how many were dropped. A failed load leaves the previous
dataset and view active.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError

from .exceptions import DataFormatError, NoDataLoadedError
from .types import (
    DEFAULT_CATEGORY_NAMES,
    Category,
    DisplayEdge,
    DisplayNode,
    Link,
    LoadReport,
    ServiceNode,
    TopologyData,
    ViewStats,
    VisibleSubgraph,
)

logger = logging.getLogger(__name__)


def validate_and_clean(data: Any, source: str = "") -> Tuple[TopologyData, int]:
    """
    Validate raw topology data and drop dangling links.

    Returns:
        The cleaned dataset and the number of links that were dropped.

    Raises:
        DataFormatError: If `nodes` or `links` is missing, an entry has the
            wrong shape, or two nodes share an index.
    """
    if not isinstance(data, dict):
        raise DataFormatError("top-level value must be an object", source)
    if "nodes" not in data or "links" not in data:
        raise DataFormatError("missing 'nodes' or 'links' field", source)
    if not isinstance(data["nodes"], list) or not isinstance(data["links"], list):
        raise DataFormatError("'nodes' and 'links' must be arrays", source)

    try:
        nodes = [ServiceNode.model_validate(n) for n in data["nodes"]]
        raw_links = [Link.model_validate(l) for l in data["links"]]
        categories = [Category.model_validate(c) for c in data.get("categories") or []]
    except ValidationError as e:
        raise DataFormatError(_describe_validation_error(e), source) from e

    seen: set = set()
    for node in nodes:
        if node.index in seen:
            raise DataFormatError(f"duplicate node index {node.index}", source)
        seen.add(node.index)

    valid_links: List[Link] = []
    for link in raw_links:
        if link.source in seen and link.target in seen:
            valid_links.append(link)
        else:
            logger.warning(f"Ignoring invalid link: source={link.source}, target={link.target}")

    dropped = len(raw_links) - len(valid_links)
    if dropped:
        logger.warning(f"Dropped {dropped} invalid links")

    cleaned = TopologyData(
        nodes=tuple(nodes),
        links=tuple(valid_links),
        categories=tuple(categories),
    )
    return cleaned, dropped


def _describe_validation_error(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ())) or "value"
    return f"{location}: {first.get('msg', 'invalid value')}"


def read_topology_file(path: Path) -> Dict[str, Any]:
    """Read and decode a topology JSON file."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise DataFormatError(f"cannot read file: {e}", str(path)) from e
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise DataFormatError(f"invalid JSON: {e}", str(path)) from e


def full_view(data: TopologyData) -> VisibleSubgraph:
    """A view showing the whole dataset with every element neutral."""
    edges: Dict[Tuple[int, int], DisplayEdge] = {}
    for link in data.links:
        edges.setdefault(link.key, DisplayEdge.from_link(link))
    return VisibleSubgraph(
        nodes=tuple(DisplayNode.from_service(n) for n in data.nodes),
        edges=tuple(edges.values()),
    )


class GraphStore:
    """
    Holds the loaded dataset and the current visible subgraph.

    The view is only ever changed through `replace_view`, which swaps the
    whole object; readers never observe a half-built view.
    """

    def __init__(self):
        self._data: Optional[TopologyData] = None
        self._view: VisibleSubgraph = VisibleSubgraph.empty()
        self._last_report: Optional[LoadReport] = None
        self._by_index: Dict[int, ServiceNode] = {}

    # =========================================================================
    # Loading
    # =========================================================================

    def load(self, raw: Any, source: str = "") -> LoadReport:
        """
        Validate `raw` and make it the active dataset.

        The visible view is reset to the whole dataset.
        """
        data, dropped = validate_and_clean(raw, source)

        self._data = data
        self._by_index = {node.index: node for node in data.nodes}
        self._view = full_view(data)
        self._last_report = LoadReport(
            source=source,
            node_count=len(data.nodes),
            link_count=len(data.links),
            dropped_links=dropped,
        )
        logger.info(self._last_report.message)
        return self._last_report

    def load_file(self, path: Path) -> LoadReport:
        raw = read_topology_file(path)
        return self.load(raw, source=str(path))

    # =========================================================================
    # Access
    # =========================================================================

    @property
    def is_loaded(self) -> bool:
        return self._data is not None

    @property
    def data(self) -> TopologyData:
        if self._data is None:
            raise NoDataLoadedError()
        return self._data

    @property
    def view(self) -> VisibleSubgraph:
        return self._view

    @property
    def last_report(self) -> Optional[LoadReport]:
        return self._last_report

    def get_node(self, index: int) -> Optional[ServiceNode]:
        return self._by_index.get(index)

    def nodes_for(self, indices) -> List[ServiceNode]:
        """Dataset nodes for `indices`, in dataset order."""
        wanted = set(indices)
        return [node for node in self.data.nodes if node.index in wanted]

    def category_name(self, category: int) -> str:
        categories = self._data.categories if self._data else ()
        if 0 <= category < len(categories):
            return categories[category].name
        return DEFAULT_CATEGORY_NAMES.get(category, "Unknown")

    def replace_view(self, view: VisibleSubgraph) -> VisibleSubgraph:
        """Swap in `view` and return the one it replaced."""
        previous = self._view
        self._view = view
        return previous

    def stats(self) -> ViewStats:
        if self._data is None:
            return ViewStats()
        return ViewStats(
            total_nodes=len(self._data.nodes),
            total_links=len(self._data.links),
            visible_nodes=len(self._view.nodes),
            visible_edges=len(self._view.edges),
            dropped_links=self._last_report.dropped_links if self._last_report else 0,
        )
