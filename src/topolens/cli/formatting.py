"""
Human-readable output for query results.
"""

import json
from pathlib import Path
from typing import List, Optional

import click
from rich.console import Console
from rich.table import Table
from rich.tree import Tree

from ..analysis.paths import PathSearchResult
from ..core.types import Highlight, QueryOutcome
from ..graph.visualize import write_html
from ..view.session import TopologySession

console = Console()

HIGHLIGHT_MARKERS = {
    Highlight.EMPHASIZED: "[bold red]●[/bold red]",
    Highlight.DEEMPHASIZED: "[dim]○[/dim]",
    Highlight.NEUTRAL: "",
}


def print_outcome(outcome: QueryOutcome) -> None:
    if outcome.empty:
        console.print("[yellow]No matching nodes or paths found.[/yellow]")
        return
    console.print(
        f"Matched [cyan]{outcome.matched_nodes}[/cyan] nodes, "
        f"[cyan]{outcome.matched_edges}[/cyan] edges. "
        f"Visible: {outcome.visible_nodes} nodes / {outcome.visible_edges} edges"
    )
    if outcome.truncated:
        console.print(
            f"[yellow]⚠ Results truncated ({', '.join(outcome.truncation_reasons)}). "
            f"Narrow the keywords or lower --max-hops.[/yellow]"
        )


def print_view(session: TopologySession, limit: Optional[int] = 50) -> None:
    """Table of the visible nodes with category and highlight state."""
    view = session.view
    table = Table(title=f"Visible: {len(view.nodes)} nodes, {len(view.edges)} edges")
    table.add_column("", width=2)
    table.add_column("Index", justify="right", style="cyan")
    table.add_column("Service")
    table.add_column("Type", style="dim")

    shown = view.nodes if limit is None else view.nodes[:limit]
    for node in shown:
        table.add_row(
            HIGHLIGHT_MARKERS[node.highlight],
            str(node.index),
            node.label,
            session.store.category_name(node.category),
        )
    console.print(table)
    if limit is not None and len(view.nodes) > limit:
        console.print(f"[dim]... and {len(view.nodes) - limit} more nodes[/dim]")


def print_paths(session: TopologySession, result: PathSearchResult, max_paths: int) -> None:
    """Each path as a tree branch, shortest first."""
    ordered: List[List[int]] = sorted(result.paths, key=len)[:max_paths]
    tree = Tree(f"🔗 [bold]{len(result.paths)} path(s) found[/bold]")
    for i, path in enumerate(ordered, 1):
        branch = tree.add(f"Path {i} ({len(path) - 1} hops)")
        for index in path:
            node = session.store.get_node(index)
            branch.add(f"[green]{node.label if node else index}[/green] [dim]#{index}[/dim]")
    console.print(tree)
    if len(result.paths) > max_paths:
        console.print(f"  ... and {len(result.paths) - max_paths} more paths")


def echo_json(session: TopologySession, outcome: QueryOutcome) -> None:
    payload = {
        "outcome": outcome.model_dump(mode="json"),
        "stats": session.stats().model_dump(mode="json"),
        "view": session.view.to_dict(),
    }
    click.echo(json.dumps(payload, indent=2))


def emit_result(
    session: TopologySession,
    outcome: QueryOutcome,
    as_json: bool,
    output: Optional[str],
) -> None:
    """Print an operation's result and optionally export the view as HTML."""
    if as_json:
        echo_json(session, outcome)
    else:
        print_outcome(outcome)
        if not outcome.empty:
            print_view(session)

    if output and not outcome.empty:
        out_file = write_html(session.view, Path(output), category_name=session.store.category_name)
        if not as_json:
            console.print(f"[green]✅ Generated: {out_file}[/green]")
