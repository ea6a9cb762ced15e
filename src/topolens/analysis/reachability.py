"""
Reachability Search.

Single-frontier BFS that answers "which services are within N calls of this
one". Unlike path search it visits each node once, so its cost is bounded by
the graph size and needs no caps.
"""

import logging
from collections import deque
from typing import Deque, Dict, Set, Tuple

from ..core.adjacency import AdjacencyView
from ..core.exceptions import InvalidQueryError
from ..core.types import ReachDirection
from .paths import validate_max_hops

logger = logging.getLogger(__name__)


def coerce_reach_direction(direction) -> ReachDirection:
    try:
        return ReachDirection(direction)
    except ValueError:
        choices = ", ".join(d.value for d in ReachDirection)
        raise InvalidQueryError(f"Unknown direction '{direction}' (expected one of: {choices})")


def reachable_levels(
    start: int,
    adjacency: AdjacencyView,
    direction: ReachDirection,
    max_hops: int,
) -> Dict[int, int]:
    """
    Map every node reachable from `start` within `max_hops` to the hop count
    at which it was first reached. `start` maps to 0.
    """
    walk = coerce_reach_direction(direction).as_path_direction()
    max_hops = validate_max_hops(max_hops)

    levels: Dict[int, int] = {start: 0}
    queue: Deque[Tuple[int, int]] = deque([(start, 0)])

    while queue:
        current, hops = queue.popleft()
        if hops >= max_hops:
            continue
        for neighbor in adjacency.neighbors(current, walk):
            if neighbor not in levels:
                levels[neighbor] = hops + 1
                queue.append((neighbor, hops + 1))

    logger.debug(f"{len(levels)} nodes reachable from {start} within {max_hops} hops ({direction})")
    return levels


def reachable(
    start: int,
    adjacency: AdjacencyView,
    direction: ReachDirection,
    max_hops: int,
) -> Set[int]:
    """Nodes reachable from `start` within `max_hops`, including `start`."""
    return set(reachable_levels(start, adjacency, direction, max_hops))
