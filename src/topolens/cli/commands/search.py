"""
Search Command - Find services by keyword.
"""

from typing import Optional

import click

from ..formatting import emit_result
from ..utils import reporting_errors, require_session


@click.command()
@click.argument("data_file", type=click.Path())
@click.argument("keywords", nargs=-1, required=True)
@click.option("--clear", "clear_before", is_flag=True,
              help="Show only the matches instead of highlighting them in the full view")
@click.option("-o", "--output", default=None, help="Write the resulting view to an HTML file")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def search(data_file: str, keywords: tuple, clear_before: bool,
           output: Optional[str], as_json: bool) -> None:
    """
    Find services whose names contain every keyword.

    \b
    Examples:
        topolens search topology.json order
        topolens search topology.json user api --clear -o users.html
    """
    session = require_session(data_file)
    with reporting_errors():
        outcome = session.search_nodes(" ".join(keywords), clear_before=clear_before)
    emit_result(session, outcome, as_json, output)
