"""
Bounded Path Search.

Enumerates simple paths between services breadth-first over path prefixes,
so shorter paths are always found before longer ones. The state space is
exponential in the worst case, so three independent caps bound the work:

- Hop cap: prefixes longer than `max_hops` edges are never extended.
- Per-pair cap: at most `max_paths_per_pair` completed paths per (start, end).
- Frontier cap: a pair's search stops once more than `max_frontier` prefixes
  are pending.

A multi-pair search adds a global cap across all pairs. Hitting any cap is
reported through truncation flags and never raises.

Prefixes are deduplicated on (current node, prefix length), so two prefixes
reaching the same node at the same depth are only expanded once. This prunes
some valid simple paths in exchange for bounded work. A reverse search runs
forward from the far end and reads the result backwards, so the pruning is the
same in both directions.
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Iterable, List, Set, Tuple

from ..config import MAX_FRONTIER_SIZE, MAX_PATHS_PER_PAIR, MAX_TOTAL_PATHS
from ..core.adjacency import AdjacencyView
from ..core.exceptions import InvalidQueryError
from ..core.types import EdgeKey, Link, PathDirection

logger = logging.getLogger(__name__)

Path = List[int]


@dataclass
class PairSearch:
    """Paths found for a single (start, end) pair."""
    start: int
    end: int
    paths: List[Path] = field(default_factory=list)
    pair_capped: bool = False
    frontier_capped: bool = False


@dataclass
class PathSearchResult:
    """
    Paths found across every (start, end) pair of a query.

    Attributes:
        paths: Paths in discovery order, at most the global cap.
        truncated: True if any cap stopped the search early.
        global_capped: The global path cap was reached.
        pair_capped: At least one pair hit its per-pair cap.
        frontier_capped: At least one pair aborted on frontier size.
        pairs_searched: Number of (start, end) pairs actually explored.
    """
    paths: List[Path] = field(default_factory=list)
    global_capped: bool = False
    pair_capped: bool = False
    frontier_capped: bool = False
    pairs_searched: int = 0

    @property
    def truncated(self) -> bool:
        return self.global_capped or self.pair_capped or self.frontier_capped

    @property
    def truncation_reasons(self) -> List[str]:
        reasons = []
        if self.global_capped:
            reasons.append("global_cap")
        if self.pair_capped:
            reasons.append("pair_cap")
        if self.frontier_capped:
            reasons.append("frontier_cap")
        return reasons

    @property
    def is_empty(self) -> bool:
        return not self.paths

    def node_indices(self) -> List[int]:
        """Every node on any path, first-seen order."""
        seen = dict.fromkeys(index for path in self.paths for index in path)
        return list(seen)


def validate_max_hops(max_hops: int) -> int:
    if isinstance(max_hops, bool) or not isinstance(max_hops, int) or max_hops < 0:
        raise InvalidQueryError(f"max_hops must be an integer >= 0, got {max_hops!r}")
    return max_hops


def coerce_direction(direction) -> PathDirection:
    try:
        return PathDirection(direction)
    except ValueError:
        choices = ", ".join(d.value for d in PathDirection)
        raise InvalidQueryError(f"Unknown direction '{direction}' (expected one of: {choices})")


def path_links(paths: Iterable[Path], adjacency: AdjacencyView) -> List[Link]:
    """
    Links traversed by `paths`, deduplicated, in the dataset's orientation.

    A step walked against a link (reverse or undirected search) maps back to
    the link as it exists, so edge identities match the dataset.
    """
    keys: dict = {}
    for path in paths:
        for a, b in zip(path, path[1:]):
            key: EdgeKey = (a, b)
            if not adjacency.has_link(a, b) and adjacency.has_link(b, a):
                key = (b, a)
            keys.setdefault(key, None)
    return [Link(source=s, target=t) for s, t in keys]


class PathFinder:
    """
    Finds bounded sets of simple paths over an AdjacencyView.

    Example:
        ```python
        finder = PathFinder()
        adjacency = build_adjacency(data.node_indices(), data.links)
        finder.find_paths(0, 2, adjacency, PathDirection.FORWARD, max_hops=2)
        # [[0, 1, 2]]
        ```
    """

    def __init__(
        self,
        max_paths_per_pair: int = MAX_PATHS_PER_PAIR,
        max_total_paths: int = MAX_TOTAL_PATHS,
        max_frontier: int = MAX_FRONTIER_SIZE,
    ):
        self.max_paths_per_pair = max_paths_per_pair
        self.max_total_paths = max_total_paths
        self.max_frontier = max_frontier

    def find_paths(
        self,
        start: int,
        end: int,
        adjacency: AdjacencyView,
        direction: PathDirection,
        max_hops: int,
    ) -> List[Path]:
        """Simple paths from `start` to `end`, shortest first."""
        return self.search_pair(start, end, adjacency, direction, max_hops).paths

    def search_pair(
        self,
        start: int,
        end: int,
        adjacency: AdjacencyView,
        direction: PathDirection,
        max_hops: int,
    ) -> PairSearch:
        """
        Breadth-first search over path prefixes for one pair.

        `start == end` yields no paths: a zero-length path is not a match.

        A REVERSE search is the FORWARD search from `end` to `start` read
        backwards, so both directions prune the same prefixes.
        """
        direction = coerce_direction(direction)
        max_hops = validate_max_hops(max_hops)
        result = PairSearch(start=start, end=end)

        if start == end:
            return result

        if direction == PathDirection.REVERSE:
            mirrored = self.search_pair(end, start, adjacency, PathDirection.FORWARD, max_hops)
            result.paths = [path[::-1] for path in mirrored.paths]
            result.pair_capped = mirrored.pair_capped
            result.frontier_capped = mirrored.frontier_capped
            return result

        neighbors = adjacency.oriented(direction)
        max_nodes = max_hops + 1
        queue: Deque[Tuple[int, ...]] = deque([(start,)])
        visited: Set[Tuple[int, int]] = set()

        while queue and len(result.paths) < self.max_paths_per_pair:
            path = queue.popleft()
            current = path[-1]

            if current == end:
                result.paths.append(list(path))
                continue

            state = (current, len(path))
            if state in visited:
                continue
            visited.add(state)

            if len(path) >= max_nodes:
                continue

            for neighbor in neighbors.get(current, []):
                if neighbor not in path:
                    queue.append(path + (neighbor,))

            if len(queue) > self.max_frontier:
                logger.warning(
                    f"Path search queue exceeded {self.max_frontier} entries "
                    f"({start} -> {end}), stopping early"
                )
                result.frontier_capped = True
                break

        if len(result.paths) >= self.max_paths_per_pair:
            result.pair_capped = True

        return result

    def search(
        self,
        starts: Iterable[int],
        ends: Iterable[int],
        adjacency: AdjacencyView,
        direction: PathDirection,
        max_hops: int,
    ) -> PathSearchResult:
        """
        Run `search_pair` for every (start, end) combination.

        Stops as soon as `max_total_paths` paths have been collected.
        """
        direction = coerce_direction(direction)
        max_hops = validate_max_hops(max_hops)
        ends = list(ends)
        result = PathSearchResult()

        for start in starts:
            for end in ends:
                if len(result.paths) >= self.max_total_paths:
                    break
                pair = self.search_pair(start, end, adjacency, direction, max_hops)
                result.pairs_searched += 1
                result.pair_capped |= pair.pair_capped
                result.frontier_capped |= pair.frontier_capped

                remaining = self.max_total_paths - len(result.paths)
                result.paths.extend(pair.paths[:remaining])

            if len(result.paths) >= self.max_total_paths:
                result.global_capped = True
                break

        logger.debug(
            f"Path search over {result.pairs_searched} pairs found "
            f"{len(result.paths)} paths (truncated={result.truncated})"
        )
        return result
