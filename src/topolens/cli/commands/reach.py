"""
Reach Command - Show what a service can reach within N calls.
"""

import sys
from typing import Optional

import click

from ...analysis.matching import match_nodes
from ...core.types import DisplayMode, ReachDirection
from ..formatting import emit_result
from ..utils import echo_error, reporting_errors, require_session


@click.command()
@click.argument("data_file", type=click.Path())
@click.argument("node")
@click.option("-d", "--direction", type=click.Choice([d.value for d in ReachDirection]),
              default=ReachDirection.OUTGOING.value, help="Follow outgoing, incoming or all calls")
@click.option("--max-hops", type=click.IntRange(min=0), default=None,
              help="Maximum distance in calls (default from config)")
@click.option("--mode", type=click.Choice([m.value for m in DisplayMode]),
              default=DisplayMode.HIGHLIGHT.value,
              help="Highlight reachable services or show only them")
@click.option("-o", "--output", default=None, help="Write the resulting view to an HTML file")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def reach(data_file: str, node: str, direction: str, max_hops: Optional[int],
          mode: str, output: Optional[str], as_json: bool) -> None:
    """
    Show services reachable from NODE (an index or a name keyword).
    """
    session = require_session(data_file)

    with reporting_errors():
        node_index = _resolve_node(session, node)
        if node_index is None:
            sys.exit(1)
        outcome = session.filter_from_node(
            node_index,
            direction=ReachDirection(direction),
            max_hops=max_hops,
            display_mode=DisplayMode(mode),
        )
    emit_result(session, outcome, as_json, output)


def _resolve_node(session, name: str) -> Optional[int]:
    """Resolve an index or a keyword to a node index."""
    if name.isdigit() and session.store.get_node(int(name)) is not None:
        return int(name)

    matches = match_nodes(session.store.data.nodes, name)
    if not matches:
        echo_error(f"No node found matching: {name}")
        return None

    if len(matches) > 1:
        click.echo(f"Ambiguous node '{name}'. Using first match: {matches[0].label}")
    return matches[0].index
