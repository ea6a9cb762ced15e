"""
Renderer boundary.

The engine hands finished (nodes, edges) sets to a renderer and asks it for
the current view before each operation, since a renderer may let the user
delete elements directly.
"""

from typing import Protocol, Sequence, runtime_checkable

from ..core.types import DisplayEdge, DisplayNode, VisibleSubgraph


@runtime_checkable
class Renderer(Protocol):
    def submit(self, nodes: Sequence[DisplayNode], edges: Sequence[DisplayEdge]) -> None:
        ...

    def get_current_view(self) -> VisibleSubgraph:
        ...


class InMemoryRenderer:
    """
    Renderer that only keeps the last submitted view.

    Used headless (CLI, tests). `remove_node`/`remove_edge` stand in for
    direct manipulation on a real canvas.
    """

    def __init__(self):
        self._view = VisibleSubgraph.empty()
        self.submissions = 0

    def submit(self, nodes: Sequence[DisplayNode], edges: Sequence[DisplayEdge]) -> None:
        self._view = VisibleSubgraph(nodes=tuple(nodes), edges=tuple(edges))
        self.submissions += 1

    def get_current_view(self) -> VisibleSubgraph:
        return self._view

    def remove_node(self, node_id: str) -> None:
        self._view = VisibleSubgraph(
            nodes=tuple(n for n in self._view.nodes if n.id != node_id),
            edges=tuple(
                e for e in self._view.edges
                if e.source_id != node_id and e.target_id != node_id
            ),
        )

    def remove_edge(self, edge_id: str) -> None:
        self._view = VisibleSubgraph(
            nodes=self._view.nodes,
            edges=tuple(e for e in self._view.edges if e.id != edge_id),
        )
