"""
Unit tests for the HTML export and the renderer implementations.

Ensures that:
1. Every highlight state maps to its own styling.
2. The view is embedded safely in the page.
3. Renderers hand back exactly what was submitted.
"""

import json
from unittest.mock import patch

import pytest

from topolens.core.types import DisplayEdge, DisplayNode, Highlight, VisibleSubgraph
from topolens.graph.renderer import InMemoryRenderer, Renderer
from topolens.graph.visualize import (
    EDGE_COLOR,
    FADE_SUFFIX,
    HIGHLIGHT_COLOR,
    HtmlRenderer,
    edge_style,
    generate_html,
    node_style,
    open_visualization,
)


def extract_graph_data(html):
    line = next(l for l in html.splitlines() if "const graphData =" in l)
    return json.loads(line.split("=", 1)[1].strip().rstrip(";"))


@pytest.fixture
def view():
    return VisibleSubgraph(
        nodes=(
            DisplayNode(index=0, label="api-gateway", category=0, highlight=Highlight.EMPHASIZED),
            DisplayNode(index=1, label="order-service", category=2, highlight=Highlight.DEEMPHASIZED),
            DisplayNode(index=2, label="billing", category=1),
        ),
        edges=(
            DisplayEdge(source=0, target=1, highlight=Highlight.EMPHASIZED),
            DisplayEdge(source=1, target=2),
        ),
    )


class TestStyles:
    def test_node_styles_per_highlight(self, view):
        emphasized, faded, neutral = (node_style(n) for n in view.nodes)

        assert emphasized["color"]["background"] == HIGHLIGHT_COLOR
        assert faded["color"]["background"].endswith(FADE_SUFFIX)
        assert neutral["color"]["background"] == "#5AD8A6"
        assert neutral["id"] == "node-2"

    def test_node_title_uses_category_name(self, view):
        style = node_style(view.nodes[2], category_name=lambda c: "provider")
        assert style["title"] == "billing\nType: provider"

    def test_edge_styles(self, view):
        emphasized, neutral = (edge_style(e) for e in view.edges)

        assert emphasized["color"]["color"] == HIGHLIGHT_COLOR
        assert emphasized["width"] > neutral["width"]
        assert neutral["color"]["color"] == EDGE_COLOR
        assert neutral["from"] == "node-1"
        assert neutral["to"] == "node-2"


class TestGenerateHtml:
    def test_structure(self, view):
        html = generate_html(view, title="Orders")

        assert "<!DOCTYPE html>" in html
        assert "<title>Orders</title>" in html
        assert "vis.DataSet" in html

        data = extract_graph_data(html)
        assert [n["id"] for n in data["nodes"]] == ["node-0", "node-1", "node-2"]
        assert [e["id"] for e in data["edges"]] == ["edge-0-1", "edge-1-2"]

    def test_labels_cannot_close_script(self):
        hostile = VisibleSubgraph(nodes=(DisplayNode(index=0, label="</script>x", category=0),))
        html = generate_html(hostile)

        assert "</script>x" not in html
        assert extract_graph_data(html)["nodes"][0]["label"] == "</script>x"

    def test_empty_view(self):
        data = extract_graph_data(generate_html(VisibleSubgraph.empty()))
        assert data == {"nodes": [], "edges": []}

    @patch("topolens.graph.visualize.webbrowser.open")
    def test_open_visualization(self, mock_open, view, tmp_path):
        out = open_visualization(view, str(tmp_path / "view.html"))

        assert (tmp_path / "view.html").exists()
        assert out.endswith("view.html")
        mock_open.assert_called_once()


class TestRenderers:
    def test_in_memory_round_trip(self, view):
        renderer = InMemoryRenderer()
        renderer.submit(view.nodes, view.edges)

        assert renderer.get_current_view() == view
        assert renderer.submissions == 1
        assert isinstance(renderer, Renderer)

    def test_remove_node_drops_incident_edges(self, view):
        renderer = InMemoryRenderer()
        renderer.submit(view.nodes, view.edges)
        renderer.remove_node("node-1")

        current = renderer.get_current_view()
        assert current.node_indices() == {0, 2}
        assert current.edges == ()

    def test_html_renderer_writes_on_submit(self, view, tmp_path):
        out = tmp_path / "live.html"
        renderer = HtmlRenderer(out)

        renderer.submit(view.nodes, view.edges)
        assert len(extract_graph_data(out.read_text())["nodes"]) == 3

        renderer.submit(view.nodes[:1], ())
        assert len(extract_graph_data(out.read_text())["nodes"]) == 1
        assert renderer.get_current_view().node_indices() == {0}
