"""
Paths Command - Find call paths between two services.
"""

import asyncio
from typing import Optional

import click

from ...core.types import PathDirection
from ..formatting import emit_result, print_paths
from ..utils import reporting_errors, require_session


@click.command()
@click.argument("data_file", type=click.Path())
@click.argument("start")
@click.argument("end")
@click.option("-d", "--direction", type=click.Choice([d.value for d in PathDirection]),
              default=PathDirection.FORWARD.value, help="Walk call edges forward, backward or both")
@click.option("--max-hops", type=click.IntRange(min=0), default=None,
              help="Maximum path length in calls (default from config)")
@click.option("--max-paths", default=5, help="Maximum paths to print")
@click.option("--clear", "clear_before", is_flag=True,
              help="Show only the paths instead of highlighting them in the full view")
@click.option("-o", "--output", default=None, help="Write the resulting view to an HTML file")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def paths(data_file: str, start: str, end: str, direction: str, max_hops: Optional[int],
          max_paths: int, clear_before: bool, output: Optional[str], as_json: bool) -> None:
    """
    Find call paths from services matching START to services matching END.

    \b
    Examples:
        topolens paths topology.json gateway billing
        topolens paths topology.json billing gateway -d reverse --max-hops 3
    """
    session = require_session(data_file)
    with reporting_errors():
        outcome = asyncio.run(session.search_paths(
            start, end,
            direction=PathDirection(direction),
            max_hops=max_hops,
            clear_before=clear_before,
        ))

    if not as_json and session.last_path_result and not outcome.empty:
        print_paths(session, session.last_path_result, max_paths)
    emit_result(session, outcome, as_json, output)
