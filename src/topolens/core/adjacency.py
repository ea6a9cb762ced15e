"""
Per-query adjacency construction.

An AdjacencyView is rebuilt from whichever link set a query is scoped to
(the full dataset or the currently visible edges) and thrown away after the
query. It is never cached: scope can change between two calls.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from .types import Link, PathDirection


@dataclass(frozen=True)
class AdjacencyView:
    """
    Forward and reverse neighbor lists keyed by node index.

    Neighbor order follows link order, so traversals are deterministic for a
    given input.
    """
    forward: Dict[int, List[int]] = field(default_factory=dict)
    reverse: Dict[int, List[int]] = field(default_factory=dict)

    def neighbors(self, node: int, direction: PathDirection) -> List[int]:
        if direction == PathDirection.FORWARD:
            return self.forward.get(node, [])
        if direction == PathDirection.REVERSE:
            return self.reverse.get(node, [])
        # Undirected: forward neighbors first, then reverse, no repeats
        merged = dict.fromkeys(self.forward.get(node, []))
        merged.update(dict.fromkeys(self.reverse.get(node, [])))
        return list(merged)

    def oriented(self, direction: PathDirection) -> Dict[int, List[int]]:
        """Materialize the neighbor map a walk in `direction` will use."""
        if direction == PathDirection.FORWARD:
            return self.forward
        if direction == PathDirection.REVERSE:
            return self.reverse
        return {node: self.neighbors(node, direction) for node in self.forward}

    def has_link(self, source: int, target: int) -> bool:
        return target in self.forward.get(source, [])

    def __contains__(self, node: int) -> bool:
        return node in self.forward


def build_adjacency(node_indices: Iterable[int], links: Iterable[Link]) -> AdjacencyView:
    """
    Build forward/reverse maps for `node_indices` from `links`.

    Links with an endpoint outside `node_indices` are skipped, which is how
    view-scoped queries stay inside the view. Repeated links between the same
    ordered pair contribute a single neighbor entry.
    """
    forward: Dict[int, List[int]] = {index: [] for index in node_indices}
    reverse: Dict[int, List[int]] = {index: [] for index in forward}

    for link in links:
        if link.source not in forward or link.target not in forward:
            continue
        if link.target not in forward[link.source]:
            forward[link.source].append(link.target)
            reverse[link.target].append(link.source)

    return AdjacencyView(forward=forward, reverse=reverse)
