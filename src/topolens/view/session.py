"""
Topology Session.

The controller behind every user-facing operation. Each operation follows
the same shape:

1. Read the current view back from the renderer (it may have changed
   through direct manipulation).
2. Compute the next view from the dataset, the query and that view.
3. Swap it into the GraphStore and submit it to the renderer.

Nothing is written until step 3, so a failing operation leaves both the
store and the renderer on their last good state.

Path search is the only coroutine: it suspends once before the heavy search
so a host UI can show a "searching" indicator. Any other operation started
while a search is suspended is rejected.
"""

import asyncio
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Set, Tuple

from ..analysis.matching import match_nodes, parse_keywords
from ..analysis.paths import (
    PathFinder,
    PathSearchResult,
    coerce_direction,
    path_links,
    validate_max_hops,
)
from ..analysis.reachability import coerce_reach_direction, reachable
from ..config import TopolensConfig
from ..core.adjacency import build_adjacency
from ..core.exceptions import InvalidQueryError, SearchInProgressError
from ..core.store import GraphStore, full_view
from ..core.types import (
    DisplayMode,
    Link,
    LoadReport,
    MergePolicy,
    PathDirection,
    QueryOutcome,
    ReachDirection,
    Selection,
    ServiceNode,
    ViewStats,
    VisibleSubgraph,
)
from ..graph.renderer import InMemoryRenderer, Renderer
from .reconciler import ViewReconciler

logger = logging.getLogger(__name__)


class TopologySession:
    """
    One user's interactive session over a loaded topology.

    Attributes:
        clear_before_applying: Apply new selections with the REPLACE policy
            instead of MERGE.
        scope_to_current_view: Run matching and searches over the visible
            subgraph instead of the whole dataset.
    """

    def __init__(
        self,
        store: Optional[GraphStore] = None,
        renderer: Optional[Renderer] = None,
        config: Optional[TopolensConfig] = None,
        reconciler: Optional[ViewReconciler] = None,
    ):
        self.store = store or GraphStore()
        self.renderer = renderer or InMemoryRenderer()
        self.config = config or TopolensConfig()
        self.reconciler = reconciler or ViewReconciler()
        self.finder = PathFinder(
            max_paths_per_pair=self.config.search.max_paths_per_pair,
            max_total_paths=self.config.search.max_total_paths,
            max_frontier=self.config.search.max_frontier,
        )

        self.clear_before_applying = False
        self.scope_to_current_view = False
        self.last_path_result: Optional[PathSearchResult] = None

        self._searching = False
        self._category_base: Optional[VisibleSubgraph] = None

    # =========================================================================
    # Loading
    # =========================================================================

    def load(self, raw, source: str = "") -> LoadReport:
        self._ensure_idle()
        report = self.store.load(raw, source)
        self._commit(self.store.view)
        return report

    def load_file(self, path: Path) -> LoadReport:
        self._ensure_idle()
        report = self.store.load_file(path)
        self._commit(self.store.view)
        return report

    # =========================================================================
    # Queries
    # =========================================================================

    def search_nodes(
        self,
        keywords: str,
        clear_before: Optional[bool] = None,
        scope_to_current_view: Optional[bool] = None,
    ) -> QueryOutcome:
        """Show services whose names contain every keyword."""
        self._ensure_idle()
        parse_keywords(keywords)
        current = self._current_view()
        nodes, links = self._scope(current, scope_to_current_view)

        matched = match_nodes(nodes, keywords)
        if not matched:
            logger.info(f"No nodes match '{keywords}'")
            return self._empty("search")

        indices = {node.index for node in matched}
        selection = Selection(
            nodes=tuple(matched),
            links=tuple(l for l in links if l.source in indices and l.target in indices),
        )
        policy = self._policy(clear_before)
        connecting: List[Link] = []
        if policy == MergePolicy.MERGE:
            shown = current.node_indices() | indices
            connecting = [l for l in links if l.source in shown and l.target in shown]

        next_view = self.reconciler.reconcile(current, selection, policy, connecting)
        self._commit(next_view)
        return self._outcome("search", len(selection.nodes), len(selection.links))

    async def search_paths(
        self,
        start_keyword: str,
        end_keyword: str,
        direction: PathDirection = PathDirection.FORWARD,
        max_hops: Optional[int] = None,
        clear_before: Optional[bool] = None,
        scope_to_current_view: Optional[bool] = None,
    ) -> QueryOutcome:
        """
        Show paths between services matching `start_keyword` and `end_keyword`.

        Every (start match, end match) pair is searched; the result is
        truncated at the configured global path cap.
        """
        self._ensure_idle()

        direction = coerce_direction(direction)
        hops = validate_max_hops(
            self.config.search.default_max_hops if max_hops is None else max_hops
        )
        parse_keywords(start_keyword)
        parse_keywords(end_keyword)

        current = self._current_view()
        nodes, links = self._scope(current, scope_to_current_view)
        starts = match_nodes(nodes, start_keyword)
        ends = match_nodes(nodes, end_keyword)
        if not starts or not ends:
            logger.info("No nodes match the start or end keyword")
            return self._empty("paths")

        self._searching = True
        try:
            await asyncio.sleep(0)
            adjacency = build_adjacency((n.index for n in nodes), links)
            result = self.finder.search(
                [n.index for n in starts],
                [n.index for n in ends],
                adjacency,
                direction,
                hops,
            )
        finally:
            self._searching = False

        self.last_path_result = result
        if result.is_empty:
            logger.info("No path satisfies the query")
            return self._empty("paths")

        if result.truncated:
            logger.warning(
                f"Path search truncated ({', '.join(result.truncation_reasons)}), "
                f"showing {len(result.paths)} paths"
            )

        selection = Selection(
            nodes=tuple(self.store.nodes_for(result.node_indices())),
            links=tuple(path_links(result.paths, adjacency)),
        )
        next_view = self.reconciler.reconcile(
            self._current_view(), selection, self._policy(clear_before)
        )
        self._commit(next_view)
        return self._outcome(
            "paths",
            len(selection.nodes),
            len(selection.links),
            truncated=result.truncated,
            reasons=result.truncation_reasons,
        )

    def filter_from_node(
        self,
        node_index: int,
        direction: ReachDirection = ReachDirection.OUTGOING,
        max_hops: Optional[int] = None,
        display_mode: DisplayMode = DisplayMode.HIGHLIGHT,
        scope_to_current_view: Optional[bool] = None,
    ) -> QueryOutcome:
        """
        Show what is reachable from `node_index` within `max_hops`.

        HIGHLIGHT keeps the current view and tags reachability; RESTRICT
        replaces the view with the reachable set.
        """
        self._ensure_idle()
        direction = coerce_reach_direction(direction)
        hops = validate_max_hops(
            self.config.search.default_max_hops if max_hops is None else max_hops
        )
        try:
            mode = DisplayMode(display_mode)
        except ValueError:
            raise InvalidQueryError(f"Unknown display mode '{display_mode}'")

        current = self._current_view()
        nodes, links = self._scope(current, scope_to_current_view)
        scope_indices = {n.index for n in nodes}
        if node_index not in scope_indices:
            raise InvalidQueryError(f"Node {node_index} is not in the search scope")

        adjacency = build_adjacency(scope_indices, links)
        found = reachable(node_index, adjacency, direction, hops)
        reached_links = list({
            l.key: l for l in links if l.source in found and l.target in found
        }.values())

        if mode == DisplayMode.HIGHLIGHT:
            next_view = self.reconciler.highlight_reachable(current, found)
        else:
            selection = Selection(
                nodes=tuple(self.store.nodes_for(found)),
                links=tuple(reached_links),
            )
            next_view = self.reconciler.restrict(selection)

        self._commit(next_view)
        logger.info(f"{len(found)} nodes reachable from {node_index} ({mode})")
        return self._outcome("reach", len(found), len(reached_links))

    # =========================================================================
    # View manipulation
    # =========================================================================

    def show_all(self) -> QueryOutcome:
        """Show the whole dataset with neutral highlights."""
        self._ensure_idle()
        self._commit(full_view(self.store.data))
        return self._outcome("show_all", 0, 0)

    def clear_canvas(self) -> QueryOutcome:
        self._ensure_idle()
        self._commit(VisibleSubgraph.empty())
        return self._outcome("clear_canvas", 0, 0)

    def clear_edges(self, scope_to_current_view: Optional[bool] = None) -> QueryOutcome:
        """Drop every edge; scoped keeps the current nodes, global shows all nodes."""
        self._ensure_idle()
        if self._scoped(scope_to_current_view):
            next_view = self.reconciler.without_edges(self._current_view())
        else:
            next_view = self.reconciler.without_edges(full_view(self.store.data))
        self._commit(next_view)
        return self._outcome("clear_edges", 0, 0)

    def hide_categories(
        self,
        categories: Iterable[int],
        scope_to_current_view: Optional[bool] = None,
    ) -> QueryOutcome:
        """
        Hide every node whose category is in `categories`.

        Scoped hiding works from a snapshot of the view taken on the first
        scoped hide, so hiding fewer categories later brings nodes back.
        """
        self._ensure_idle()
        hidden: Set[int] = set(categories)

        if self._scoped(scope_to_current_view):
            base = self._category_base or self._current_view()
        else:
            base = full_view(self.store.data)

        next_view = self.reconciler.hide_categories(base, hidden)
        self._commit(next_view)
        if self._scoped(scope_to_current_view):
            self._category_base = base
        return self._outcome("hide_categories", 0, 0)

    def hide_node(self, node_id: str) -> QueryOutcome:
        self._ensure_idle()
        current = self._current_view()
        if current.get_node(node_id) is None:
            raise InvalidQueryError(f"Node '{node_id}' is not in the current view")
        self._commit(self.reconciler.without_node(current, node_id))
        return self._outcome("hide_node", 0, 0)

    def hide_edge(self, edge_id: str) -> QueryOutcome:
        self._ensure_idle()
        current = self._current_view()
        if current.get_edge(edge_id) is None:
            raise InvalidQueryError(f"Edge '{edge_id}' is not in the current view")
        self._commit(self.reconciler.without_edge(current, edge_id))
        return self._outcome("hide_edge", 0, 0)

    def stats(self) -> ViewStats:
        return self.store.stats()

    @property
    def view(self) -> VisibleSubgraph:
        return self.store.view

    @property
    def is_searching(self) -> bool:
        return self._searching

    # =========================================================================
    # Internals
    # =========================================================================

    def _ensure_idle(self) -> None:
        if self._searching:
            raise SearchInProgressError()

    def _scoped(self, override: Optional[bool]) -> bool:
        return self.scope_to_current_view if override is None else override

    def _policy(self, clear_before: Optional[bool]) -> MergePolicy:
        clear = self.clear_before_applying if clear_before is None else clear_before
        return MergePolicy.REPLACE if clear else MergePolicy.MERGE

    def _current_view(self) -> VisibleSubgraph:
        """The renderer's view, adopted into the store if it diverged."""
        view = self.renderer.get_current_view()
        if view != self.store.view:
            logger.debug("Renderer view diverged from store, adopting renderer state")
            self.store.replace_view(view)
        return view

    def _scope(
        self,
        current: VisibleSubgraph,
        override: Optional[bool],
    ) -> Tuple[List[ServiceNode], List[Link]]:
        """Nodes and links a query runs over."""
        data = self.store.data
        if not self._scoped(override):
            return list(data.nodes), list(data.links)
        return self.store.nodes_for(current.node_indices()), current.links()

    def _commit(self, view: VisibleSubgraph) -> None:
        self._category_base = None
        self.store.replace_view(view)
        self.renderer.submit(view.nodes, view.edges)

    def _outcome(
        self,
        operation: str,
        matched_nodes: int,
        matched_edges: int,
        truncated: bool = False,
        reasons: Optional[List[str]] = None,
    ) -> QueryOutcome:
        view = self.store.view
        return QueryOutcome(
            operation=operation,
            matched_nodes=matched_nodes,
            matched_edges=matched_edges,
            truncated=truncated,
            truncation_reasons=reasons or [],
            visible_nodes=len(view.nodes),
            visible_edges=len(view.edges),
        )

    def _empty(self, operation: str) -> QueryOutcome:
        outcome = self._outcome(operation, 0, 0)
        return outcome.model_copy(update={"empty": True})
