"""
Load Command - Validate a topology file and summarize it.
"""

import json
from collections import Counter

import click
from rich.console import Console
from rich.table import Table

from ..utils import echo_success, require_session

console = Console()


@click.command()
@click.argument("data_file", type=click.Path())
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def load(data_file: str, as_json: bool) -> None:
    """
    Validate a topology file and print its size.

    Links that reference unknown node indices are dropped and counted.
    """
    session = require_session(data_file)
    stats = session.stats()

    if as_json:
        click.echo(json.dumps(stats.model_dump(mode="json"), indent=2))
        return

    echo_success(session.store.last_report.message)

    by_category = Counter(node.category for node in session.store.data.nodes)
    table = Table(title="Services by type")
    table.add_column("Type")
    table.add_column("Count", justify="right", style="cyan")
    for category, count in sorted(by_category.items()):
        table.add_row(session.store.category_name(category), str(count))
    console.print(table)
