"""
Unit tests for reachability search.
"""

import pytest

from topolens.analysis.reachability import reachable, reachable_levels
from topolens.core.adjacency import build_adjacency
from topolens.core.exceptions import InvalidQueryError
from topolens.core.types import Link, ReachDirection


@pytest.fixture
def chain():
    """0 -> 1 -> 2 -> 3"""
    return build_adjacency(range(4), [Link(source=i, target=i + 1) for i in range(3)])


class TestReachable:
    def test_outgoing_within_hops(self, chain):
        assert reachable(0, chain, ReachDirection.OUTGOING, 2) == {0, 1, 2}

    def test_zero_hops_is_start_only(self, chain):
        assert reachable(1, chain, ReachDirection.BOTH, 0) == {1}

    def test_incoming(self, chain):
        assert reachable(3, chain, ReachDirection.INCOMING, 5) == {0, 1, 2, 3}
        assert reachable(0, chain, ReachDirection.INCOMING, 5) == {0}

    def test_both(self, chain):
        assert reachable(1, chain, ReachDirection.BOTH, 1) == {0, 1, 2}

    def test_levels_are_shortest_hop_counts(self):
        # 0 -> 1 -> 2 and a shortcut 0 -> 2
        adj = build_adjacency(range(3), [
            Link(source=0, target=1),
            Link(source=1, target=2),
            Link(source=0, target=2),
        ])
        assert reachable_levels(0, adj, ReachDirection.OUTGOING, 3) == {0: 0, 1: 1, 2: 1}

    def test_cycles_terminate(self):
        adj = build_adjacency(range(2), [Link(source=0, target=1), Link(source=1, target=0)])
        assert reachable(0, adj, ReachDirection.OUTGOING, 100) == {0, 1}

    def test_accepts_plain_string_direction(self, chain):
        assert reachable(0, chain, "outgoing", 1) == {0, 1}

    def test_invalid_direction(self, chain):
        with pytest.raises(InvalidQueryError):
            reachable(0, chain, "forward", 1)

    def test_invalid_hops(self, chain):
        with pytest.raises(InvalidQueryError):
            reachable(0, chain, ReachDirection.OUTGOING, -1)
