"""
Unit tests for view reconciliation.
"""

import pytest

from topolens.core.types import (
    DisplayEdge,
    DisplayNode,
    EdgeInclusion,
    Highlight,
    Link,
    MergePolicy,
    Selection,
    ServiceNode,
    VisibleSubgraph,
)
from topolens.view.reconciler import ViewReconciler, filter_edges

E, D, N = Highlight.EMPHASIZED, Highlight.DEEMPHASIZED, Highlight.NEUTRAL


def service(index, category=0):
    return ServiceNode(index=index, name=f"svc-{index}", category=category)


def view(nodes, edges, categories=None):
    categories = categories or {}
    return VisibleSubgraph(
        nodes=tuple(DisplayNode.from_service(service(i, categories.get(i, 0))) for i in nodes),
        edges=tuple(DisplayEdge(source=s, target=t) for s, t in edges),
    )


def selection(nodes, links=()):
    return Selection(
        nodes=tuple(service(i) for i in nodes),
        links=tuple(Link(source=s, target=t) for s, t in links),
    )


def highlights(v):
    return (
        {n.index: n.highlight for n in v.nodes},
        {e.key: e.highlight for e in v.edges},
    )


@pytest.fixture
def reconciler():
    return ViewReconciler()


class TestMerge:
    def test_merge_retags_and_appends(self, reconciler):
        current = view([0, 1], [(0, 1)])
        result = reconciler.merge(current, selection([1, 2]))

        nodes, edges = highlights(result)
        assert nodes == {0: D, 1: E, 2: E}
        assert edges == {(0, 1): D}
        assert [n.index for n in result.nodes] == [0, 1, 2]

    def test_merge_adds_selected_links(self, reconciler):
        current = view([0, 1], [(0, 1)])
        result = reconciler.merge(current, selection([1, 2], [(1, 2)]))

        _, edges = highlights(result)
        assert edges == {(0, 1): D, (1, 2): E}

    def test_merge_is_idempotent(self, reconciler):
        current = view([0, 1, 2], [(0, 1), (1, 2)])
        sel = selection([1, 2], [(1, 2)])

        once = reconciler.merge(current, sel)
        twice = reconciler.merge(once, sel)
        assert once == twice

    def test_merge_of_whole_view_emphasizes_everything(self, reconciler):
        current = view([0, 1, 2], [(0, 1), (1, 2)])
        result = reconciler.merge(current, selection([0, 1, 2], [(0, 1), (1, 2)]))

        nodes, edges = highlights(result)
        assert len(result.nodes) == len(current.nodes)
        assert len(result.edges) == len(current.edges)
        assert set(nodes.values()) == {E}
        assert set(edges.values()) == {E}

    def test_connecting_links_are_added_neutral(self, reconciler):
        current = view([0], [])
        connecting = [Link(source=0, target=1), Link(source=1, target=5)]
        result = reconciler.merge(current, selection([1]), connecting)

        nodes, edges = highlights(result)
        assert nodes == {0: D, 1: E}
        # 5 is not on the canvas
        assert edges == {(0, 1): N}

    def test_connecting_links_already_shown_are_not_duplicated(self, reconciler):
        current = view([0, 1], [(0, 1)])
        result = reconciler.merge(current, selection([2]), [Link(source=0, target=1)])

        assert [e.id for e in result.edges] == ["edge-0-1"]
        assert highlights(result)[1] == {(0, 1): D}

    def test_reconcile_passes_connecting_links_to_merge(self, reconciler):
        result = reconciler.reconcile(
            view([0], []), selection([1]), MergePolicy.MERGE, [Link(source=0, target=1)],
        )
        assert result.edge_keys() == {(0, 1)}

    def test_merge_never_duplicates(self, reconciler):
        current = view([0], [])
        result = reconciler.merge(current, selection([0, 0, 1], [(0, 1), (0, 1)]))

        assert [n.id for n in result.nodes] == ["node-0", "node-1"]
        assert [e.id for e in result.edges] == ["edge-0-1"]

    def test_merge_drops_dangling_edges(self, reconciler):
        # Edge (1, 2) lost its endpoint 2 on the canvas
        current = view([0, 1], [(0, 1), (1, 2)])
        result = reconciler.merge(current, selection([0]))

        assert not result.has_dangling_edges()
        assert result.edge_keys() == {(0, 1)}

    def test_empty_selection_deemphasizes_everything(self, reconciler):
        current = view([0, 1], [(0, 1)])
        nodes, edges = highlights(reconciler.merge(current, selection([])))

        assert set(nodes.values()) == {D}
        assert set(edges.values()) == {D}


class TestReplace:
    def test_replace_is_the_selection(self, reconciler):
        current = view([0, 1, 2], [(0, 1)])
        result = reconciler.reconcile(current, selection([2, 3], [(2, 3)]), MergePolicy.REPLACE)

        nodes, edges = highlights(result)
        assert nodes == {2: N, 3: N}
        assert edges == {(2, 3): N}

    def test_replace_drops_links_without_both_endpoints(self, reconciler):
        result = reconciler.replace(selection([0, 1], [(0, 1), (1, 5)]))
        assert result.edge_keys() == {(0, 1)}
        assert not result.has_dangling_edges()

    def test_reconcile_accepts_policy_string(self, reconciler):
        result = reconciler.reconcile(view([0], []), selection([1]), "merge")
        assert result.node_indices() == {0, 1}


class TestHideCategories:
    def test_edge_survives_with_one_visible_endpoint(self, reconciler):
        base = view([0, 1], [(0, 1)], categories={1: 1})
        result = reconciler.hide_categories(base, {1})

        assert result.node_indices() == {0}
        assert result.edge_keys() == {(0, 1)}

    def test_edge_dropped_when_both_endpoints_hidden(self, reconciler):
        base = view([0, 1, 2], [(1, 2)], categories={1: 1, 2: 1})
        result = reconciler.hide_categories(base, {1})
        assert result.edges == ()

    def test_both_endpoints_rule(self, reconciler):
        base = view([0, 1], [(0, 1)], categories={1: 1})
        result = reconciler.hide_categories(base, {1}, EdgeInclusion.BOTH_ENDPOINTS)
        assert result.edges == ()

    def test_highlights_reset(self, reconciler):
        base = reconciler.merge(view([0, 1], [(0, 1)]), selection([0]))
        nodes, edges = highlights(reconciler.hide_categories(base, set()))

        assert set(nodes.values()) == {N}
        assert set(edges.values()) == {N}


class TestReachableDisplay:
    def test_highlight_reachable_keeps_view(self, reconciler):
        current = view([0, 1, 2], [(0, 1), (1, 2)])
        nodes, edges = highlights(reconciler.highlight_reachable(current, {0, 1}))

        assert nodes == {0: E, 1: E, 2: D}
        assert edges == {(0, 1): E, (1, 2): D}

    def test_restrict(self, reconciler):
        result = reconciler.restrict(selection([1, 2], [(1, 2)]))
        assert result.node_indices() == {1, 2}
        assert result.edge_keys() == {(1, 2)}


class TestRemovals:
    def test_without_node_removes_incident_edges(self, reconciler):
        current = view([0, 1, 2], [(0, 1), (1, 2), (0, 2)])
        result = reconciler.without_node(current, "node-1")

        assert result.node_indices() == {0, 2}
        assert result.edge_keys() == {(0, 2)}

    def test_without_edge(self, reconciler):
        current = view([0, 1], [(0, 1), (1, 0)])
        result = reconciler.without_edge(current, "edge-1-0")
        assert result.edge_keys() == {(0, 1)}

    def test_without_edges(self, reconciler):
        result = reconciler.without_edges(view([0, 1], [(0, 1)]))
        assert result.node_indices() == {0, 1}
        assert result.edges == ()


class TestFilterEdges:
    def test_rules(self):
        edges = [DisplayEdge(source=0, target=1), DisplayEdge(source=1, target=2)]

        assert [e.key for e in filter_edges(edges, {0, 1})] == [(0, 1)]
        assert [e.key for e in filter_edges(edges, {1}, EdgeInclusion.ANY_ENDPOINT)] == [(0, 1), (1, 2)]
