"""
topolens CLI - Main entry point.

This module registers all CLI commands. Each command is implemented
in its own module under cli/commands/.
"""

from typing import Optional

import click

from ..config import TopolensConfig
from .commands import export, load, paths, reach, search, shell
from .utils import configure_logging


@click.group()
@click.version_option(package_name="topolens")
@click.option("-v", "--verbose", count=True, help="Log progress (-v) or debug details (-vv)")
@click.option("--config", "config_path", type=click.Path(), default=None,
              help="Config file (default: .topolens/config.yaml)")
@click.pass_context
def main(ctx: click.Context, verbose: int, config_path: Optional[str]):
    """topolens: Service Dependency Topology Explorer.

    Finds services, call paths and reachable sets in a service call graph.

    \b
    Quick Start:
      topolens load topology.json
      topolens search topology.json order
      topolens paths topology.json gateway billing --max-hops 4
      topolens shell topology.json
    """
    configure_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["config"] = TopolensConfig.load(config_path)


# Register commands
main.add_command(load.load)
main.add_command(search.search)
main.add_command(paths.paths)
main.add_command(reach.reach)
main.add_command(shell.shell)
main.add_command(export.export)

if __name__ == "__main__":
    main()
