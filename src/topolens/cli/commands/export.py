"""
Export Command - Generate an interactive visualization.

Writes the whole topology as a vis-network HTML page.
"""

import click

from ..utils import echo_success, require_session
from ...graph.visualize import open_visualization, write_html


@click.command()
@click.argument("data_file", type=click.Path())
@click.option("-o", "--output", default="topology.html", help="Output HTML file")
@click.option("--open", "open_browser", is_flag=True, help="Open the page in a browser")
def export(data_file: str, output: str, open_browser: bool) -> None:
    """
    Write the full topology as an HTML page.

    \b
    Examples:
        topolens export topology.json -o topology.html --open
    """
    session = require_session(data_file)
    if open_browser:
        out_file = open_visualization(session.view, output, category_name=session.store.category_name)
    else:
        out_file = str(write_html(session.view, output, category_name=session.store.category_name))
    echo_success(f"Generated: {out_file}")
