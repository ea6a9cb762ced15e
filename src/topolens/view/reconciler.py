"""
View Reconciliation.

Computes the next VisibleSubgraph from the current one and a newly matched
Selection. Every function here is pure: it reads the current view and
returns a new one, never patching the input.

Two policies apply a selection:
- REPLACE: the next view is exactly the selection.
- MERGE: the current view is kept, every existing element is re-tagged as
  emphasized (matched) or de-emphasized (not matched), and matched elements
  not yet shown are appended as emphasized.

Nodes are identified by display id (derived from the dataset index) and
edges by their ordered (source, target) key, so repeated merges never
duplicate an element.
"""

import logging
from typing import Dict, Iterable, List, Set

from ..core.types import (
    DisplayEdge,
    DisplayNode,
    EdgeInclusion,
    EdgeKey,
    Highlight,
    Link,
    MergePolicy,
    Selection,
    VisibleSubgraph,
)

logger = logging.getLogger(__name__)


def filter_edges(
    edges: Iterable[DisplayEdge],
    node_indices: Set[int],
    inclusion: EdgeInclusion = EdgeInclusion.BOTH_ENDPOINTS,
) -> List[DisplayEdge]:
    """Keep the edges allowed by `inclusion` given the surviving node set."""
    if inclusion == EdgeInclusion.ANY_ENDPOINT:
        return [e for e in edges if e.source in node_indices or e.target in node_indices]
    return [e for e in edges if e.source in node_indices and e.target in node_indices]


def _unique_edges(edges: Iterable[DisplayEdge]) -> List[DisplayEdge]:
    by_key: Dict[EdgeKey, DisplayEdge] = {}
    for edge in edges:
        by_key.setdefault(edge.key, edge)
    return list(by_key.values())


class ViewReconciler:
    """
    Applies selections and filters to a VisibleSubgraph.

    Example:
        ```python
        reconciler = ViewReconciler()
        next_view = reconciler.reconcile(store.view, selection, MergePolicy.MERGE)
        store.replace_view(next_view)
        ```
    """

    def reconcile(
        self,
        current: VisibleSubgraph,
        selection: Selection,
        policy: MergePolicy,
        connecting: Iterable[Link] = (),
    ) -> VisibleSubgraph:
        if MergePolicy(policy) == MergePolicy.REPLACE:
            return self.replace(selection)
        return self.merge(current, selection, connecting)

    def replace(self, selection: Selection) -> VisibleSubgraph:
        """The selection alone, with neutral highlights."""
        nodes: Dict[int, DisplayNode] = {}
        for node in selection.nodes:
            nodes.setdefault(node.index, DisplayNode.from_service(node))

        edges = filter_edges(
            (DisplayEdge.from_link(link) for link in selection.links),
            set(nodes),
        )
        view = VisibleSubgraph(nodes=tuple(nodes.values()), edges=tuple(_unique_edges(edges)))
        logger.debug(f"Replaced view: {len(view.nodes)} nodes, {len(view.edges)} edges")
        return view

    def merge(
        self,
        current: VisibleSubgraph,
        selection: Selection,
        connecting: Iterable[Link] = (),
    ) -> VisibleSubgraph:
        """
        Keep the current view, re-tag every element and append new matches.

        No element keeps its previous highlight: each one is recomputed
        against the selection. `connecting` links that are not shown yet are
        appended as neutral, so new nodes join up with the ones already on
        the canvas without counting as matched.
        """
        matched_nodes = selection.node_indices()
        matched_edges = selection.link_keys()

        nodes: List[DisplayNode] = [
            node.with_highlight(Highlight.from_match(node.index in matched_nodes))
            for node in current.nodes
        ]
        present_nodes = {node.index for node in nodes}
        added_nodes = 0
        for node in selection.nodes:
            if node.index not in present_nodes:
                nodes.append(DisplayNode.from_service(node, Highlight.EMPHASIZED))
                present_nodes.add(node.index)
                added_nodes += 1

        edges: List[DisplayEdge] = [
            edge.with_highlight(Highlight.from_match(edge.key in matched_edges))
            for edge in _unique_edges(current.edges)
        ]
        present_edges = {edge.key for edge in edges}
        for link in selection.links:
            if link.key not in present_edges:
                edges.append(DisplayEdge.from_link(link, Highlight.EMPHASIZED))
                present_edges.add(link.key)
        for link in connecting:
            if link.key not in present_edges:
                edges.append(DisplayEdge.from_link(link))
                present_edges.add(link.key)

        edges = filter_edges(edges, present_nodes)
        logger.debug(
            f"Merged selection: {added_nodes} new nodes, "
            f"{len(nodes)} nodes / {len(edges)} edges in view"
        )
        return VisibleSubgraph(nodes=tuple(nodes), edges=tuple(edges))

    # =========================================================================
    # Reachability display modes
    # =========================================================================

    def highlight_reachable(self, current: VisibleSubgraph, reachable: Set[int]) -> VisibleSubgraph:
        """
        Keep every current element; tag reachable nodes, and edges whose
        endpoints are both reachable, as emphasized and the rest as
        de-emphasized.
        """
        nodes = tuple(
            node.with_highlight(Highlight.from_match(node.index in reachable))
            for node in current.nodes
        )
        edges = tuple(
            edge.with_highlight(
                Highlight.from_match(edge.source in reachable and edge.target in reachable)
            )
            for edge in current.edges
        )
        return VisibleSubgraph(nodes=nodes, edges=edges)

    def restrict(self, selection: Selection) -> VisibleSubgraph:
        """Show only the reachable selection; same as REPLACE."""
        return self.replace(selection)

    # =========================================================================
    # Filters
    # =========================================================================

    def hide_categories(
        self,
        base: VisibleSubgraph,
        hidden: Set[int],
        inclusion: EdgeInclusion = EdgeInclusion.ANY_ENDPOINT,
    ) -> VisibleSubgraph:
        """
        Drop nodes of the `hidden` categories from `base`.

        Edges survive under `inclusion`, which for category hiding keeps an
        edge while at least one endpoint is visible. Highlights reset.
        """
        nodes = tuple(
            node.with_highlight(Highlight.NEUTRAL)
            for node in base.nodes
            if node.category not in hidden
        )
        edges = filter_edges(base.edges, {n.index for n in nodes}, inclusion)
        return VisibleSubgraph(
            nodes=nodes,
            edges=tuple(e.with_highlight(Highlight.NEUTRAL) for e in edges),
        )

    def without_node(self, current: VisibleSubgraph, node_id: str) -> VisibleSubgraph:
        """Remove one node and every edge touching it."""
        nodes = tuple(n for n in current.nodes if n.id != node_id)
        edges = tuple(
            e for e in current.edges
            if e.source_id != node_id and e.target_id != node_id
        )
        return VisibleSubgraph(nodes=nodes, edges=edges)

    def without_edge(self, current: VisibleSubgraph, edge_id: str) -> VisibleSubgraph:
        return VisibleSubgraph(
            nodes=current.nodes,
            edges=tuple(e for e in current.edges if e.id != edge_id),
        )

    def without_edges(self, current: VisibleSubgraph) -> VisibleSubgraph:
        return VisibleSubgraph(nodes=current.nodes, edges=())
