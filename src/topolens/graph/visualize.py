"""
Static HTML export of a visible topology.

Writes a self-contained vis-network page for the current view. Styling is
resolved here, per highlight state, so the page itself carries no logic
beyond drawing what it is given.
"""

import json
import webbrowser
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Sequence

from ..core.types import DisplayEdge, DisplayNode, Highlight, VisibleSubgraph
from .renderer import InMemoryRenderer

CATEGORY_COLORS: Dict[int, str] = {
    0: "#5B8FF9",  # consumer
    1: "#5AD8A6",  # provider
    2: "#F6BD16",  # consumer and provider
}
DEFAULT_NODE_COLOR = "#5B8FF9"
HIGHLIGHT_COLOR = "#FF6B6B"
HIGHLIGHT_BORDER = "#FF0000"
EDGE_COLOR = "#99ADD1"
FADE_SUFFIX = "66"  # ~40% alpha

HTML_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>__TITLE__</title>
    <script src="https://unpkg.com/vis-network/standalone/umd/vis-network.min.js"></script>
    <style>
        body { margin: 0; font-family: -apple-system, "Segoe UI", Roboto, sans-serif; }
        #stats { padding: 8px 16px; font-size: 13px; color: #555; border-bottom: 1px solid #eee; }
        #container { width: 100vw; height: calc(100vh - 36px); }
    </style>
</head>
<body>
    <div id="stats"></div>
    <div id="container"></div>
    <script>
        const graphData = __GRAPH_DATA__;
        document.getElementById('stats').textContent =
            `Visible nodes: ${graphData.nodes.length} | Visible edges: ${graphData.edges.length}`;
        const nodes = new vis.DataSet(graphData.nodes);
        const edges = new vis.DataSet(graphData.edges);
        new vis.Network(document.getElementById('container'), { nodes, edges }, {
            layout: { improvedLayout: graphData.nodes.length < 150 },
            physics: { solver: 'forceAtlas2Based', stabilization: { iterations: 200 } },
            nodes: { shape: 'dot', size: 16, font: { size: 12 } },
            edges: { arrows: 'to', smooth: { type: 'dynamic' } },
        });
    </script>
</body>
</html>
"""


def node_style(node: DisplayNode, category_name: Callable[[int], str] = str) -> Dict[str, Any]:
    base = CATEGORY_COLORS.get(node.category, DEFAULT_NODE_COLOR)
    if node.highlight == Highlight.EMPHASIZED:
        color, border, width, font = HIGHLIGHT_COLOR, HIGHLIGHT_BORDER, 3, "#333"
    elif node.highlight == Highlight.DEEMPHASIZED:
        color, border, width, font = base + FADE_SUFFIX, "#fff", 2, "#999"
    else:
        color, border, width, font = base, "#fff", 2, "#333"

    return {
        "id": node.id,
        "label": node.label,
        "title": f"{node.label}\nType: {category_name(node.category)}",
        "color": {"background": color, "border": border},
        "borderWidth": width,
        "font": {"color": font},
    }


def edge_style(edge: DisplayEdge) -> Dict[str, Any]:
    if edge.highlight == Highlight.EMPHASIZED:
        color, width = HIGHLIGHT_COLOR, 3
    elif edge.highlight == Highlight.DEEMPHASIZED:
        color, width = EDGE_COLOR + FADE_SUFFIX, 1
    else:
        color, width = EDGE_COLOR, 2

    return {
        "id": edge.id,
        "from": edge.source_id,
        "to": edge.target_id,
        "color": {"color": color},
        "width": width,
    }


def generate_html(
    view: VisibleSubgraph,
    title: str = "Service Topology",
    category_name: Callable[[int], str] = str,
) -> str:
    """Generate the HTML page for `view`."""
    graph_data = {
        "nodes": [node_style(n, category_name) for n in view.nodes],
        "edges": [edge_style(e) for e in view.edges],
    }
    json_data = json.dumps(graph_data).replace("</", "<\\/")
    return HTML_TEMPLATE.replace("__TITLE__", title).replace("__GRAPH_DATA__", json_data)


def write_html(view: VisibleSubgraph, output_path: Path, **kwargs: Any) -> Path:
    out_file = Path(output_path)
    out_file.write_text(generate_html(view, **kwargs), encoding="utf-8")
    return out_file


def open_visualization(view: VisibleSubgraph, output_path: str = "topology.html", **kwargs: Any) -> str:
    """Write the page and open it in the browser."""
    out_file = write_html(view, Path(output_path), **kwargs)
    webbrowser.open(out_file.resolve().as_uri())
    return str(out_file)


class HtmlRenderer(InMemoryRenderer):
    """Renderer that rewrites an HTML file on every submit."""

    def __init__(self, output_path: Path, category_name: Optional[Callable[[int], str]] = None):
        super().__init__()
        self.output_path = Path(output_path)
        self.category_name = category_name or str

    def submit(self, nodes: Sequence[DisplayNode], edges: Sequence[DisplayEdge]) -> None:
        super().submit(nodes, edges)
        write_html(self.get_current_view(), self.output_path, category_name=self.category_name)
