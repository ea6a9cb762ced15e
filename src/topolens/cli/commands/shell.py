"""
Shell Command - Reshape a topology view step by step.

Keeps one session alive so searches, filters and hides build on each other
the way they do on an interactive canvas.
"""

import asyncio
import shlex
from pathlib import Path
from typing import Callable, Dict, List, Optional

import click

from ...core.exceptions import InvalidQueryError, TopologyError
from ...core.types import (
    DisplayMode,
    PathDirection,
    ReachDirection,
    edge_display_id,
    node_display_id,
)
from ...graph.visualize import HtmlRenderer
from ...view.session import TopologySession
from ..formatting import console, print_outcome, print_paths, print_view
from ..utils import echo_error, echo_success, require_session

HELP_TEXT = """\
Commands:
  search KEYWORD...                   find services by name
  paths START END [DIR] [HOPS]        find call paths (DIR: forward|reverse|both)
  reach INDEX [DIR] [HOPS] [MODE]     reachable services (DIR: outgoing|incoming|both,
                                      MODE: highlight|restrict)
  hide-category [CATEGORY...]         hide node types (no args shows all types again)
  hide-node INDEX                     hide a node and its calls
  hide-edge SOURCE TARGET             hide one call
  clear-edges                         remove all calls
  clear                               empty the canvas
  reset                               show the whole dataset
  set clear on|off                    replace instead of merge new results
  set scope on|off                    search inside the current view only
  show [all]                          list visible services
  stats                               dataset and view sizes
  export FILE.html                    write the view as HTML
  help | quit"""


class ShellDispatcher:
    """Parses one shell line and applies it to a session."""

    def __init__(self, session: TopologySession):
        self.session = session
        self.handlers: Dict[str, Callable[[List[str]], None]] = {
            "search": self.do_search,
            "paths": self.do_paths,
            "reach": self.do_reach,
            "hide-category": self.do_hide_category,
            "hide-node": self.do_hide_node,
            "hide-edge": self.do_hide_edge,
            "clear-edges": lambda args: print_outcome(self.session.clear_edges()),
            "clear": lambda args: print_outcome(self.session.clear_canvas()),
            "reset": lambda args: print_outcome(self.session.show_all()),
            "set": self.do_set,
            "show": lambda args: print_view(self.session, None if args == ["all"] else 50),
            "stats": self.do_stats,
            "export": self.do_export,
            "help": lambda args: click.echo(HELP_TEXT),
        }

    def dispatch(self, line: str) -> bool:
        """Run one line. Returns False when the shell should exit."""
        try:
            parts = shlex.split(line)
        except ValueError as e:
            echo_error(f"Cannot parse command: {e}")
            return True
        if not parts:
            return True

        command, args = parts[0].lower(), parts[1:]
        if command in ("quit", "exit"):
            return False

        handler = self.handlers.get(command)
        if handler is None:
            echo_error(f"Unknown command '{command}'. Type 'help' for a list.")
            return True

        try:
            handler(args)
        except TopologyError as e:
            echo_error(str(e))
        return True

    def do_search(self, args: List[str]) -> None:
        print_outcome(self.session.search_nodes(" ".join(args)))

    def do_paths(self, args: List[str]) -> None:
        if len(args) < 2:
            raise InvalidQueryError("Usage: paths START END [DIR] [HOPS]")
        direction = args[2] if len(args) > 2 else PathDirection.FORWARD
        hops = _int_arg(args[3], "HOPS") if len(args) > 3 else None
        outcome = asyncio.run(self.session.search_paths(
            args[0], args[1], direction=direction, max_hops=hops,
        ))
        if not outcome.empty and self.session.last_path_result:
            print_paths(self.session, self.session.last_path_result, max_paths=5)
        print_outcome(outcome)

    def do_reach(self, args: List[str]) -> None:
        if not args:
            raise InvalidQueryError("Usage: reach INDEX [DIR] [HOPS] [MODE]")
        outcome = self.session.filter_from_node(
            _int_arg(args[0], "INDEX"),
            direction=args[1] if len(args) > 1 else ReachDirection.OUTGOING,
            max_hops=_int_arg(args[2], "HOPS") if len(args) > 2 else None,
            display_mode=args[3] if len(args) > 3 else DisplayMode.HIGHLIGHT,
        )
        print_outcome(outcome)

    def do_hide_category(self, args: List[str]) -> None:
        categories = [_int_arg(a, "CATEGORY") for a in args]
        print_outcome(self.session.hide_categories(categories))

    def do_hide_node(self, args: List[str]) -> None:
        if len(args) != 1:
            raise InvalidQueryError("Usage: hide-node INDEX")
        node_id = node_display_id(_int_arg(args[0], "INDEX"))
        print_outcome(self.session.hide_node(node_id))

    def do_hide_edge(self, args: List[str]) -> None:
        if len(args) != 2:
            raise InvalidQueryError("Usage: hide-edge SOURCE TARGET")
        source, target = (_int_arg(a, "INDEX") for a in args)
        print_outcome(self.session.hide_edge(edge_display_id(source, target)))

    def do_set(self, args: List[str]) -> None:
        if len(args) != 2 or args[0] not in ("clear", "scope") or args[1] not in ("on", "off"):
            raise InvalidQueryError("Usage: set clear|scope on|off")
        value = args[1] == "on"
        if args[0] == "clear":
            self.session.clear_before_applying = value
        else:
            self.session.scope_to_current_view = value
        click.echo(f"{args[0]} = {args[1]}")

    def do_stats(self, args: List[str]) -> None:
        stats = self.session.stats()
        console.print(
            f"Total: {stats.total_nodes} nodes / {stats.total_links} links | "
            f"Visible: {stats.visible_nodes} nodes / {stats.visible_edges} edges"
        )

    def do_export(self, args: List[str]) -> None:
        if len(args) != 1:
            raise InvalidQueryError("Usage: export FILE.html")
        renderer = HtmlRenderer(Path(args[0]), category_name=self.session.store.category_name)
        view = self.session.view
        renderer.submit(view.nodes, view.edges)
        echo_success(f"Generated: {renderer.output_path}")


def _int_arg(value: str, name: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise InvalidQueryError(f"{name} must be an integer, got '{value}'")


@click.command()
@click.argument("data_file", type=click.Path())
@click.option("-o", "--output", default=None,
              help="Keep this HTML file in sync with the view after every command")
def shell(data_file: str, output: Optional[str]) -> None:
    """
    Explore a topology interactively.

    Each command reshapes the current view; results merge into it unless
    'set clear on' is used.
    """
    session = require_session(data_file)
    if output:
        session.renderer = HtmlRenderer(Path(output), category_name=session.store.category_name)
        view = session.view
        session.renderer.submit(view.nodes, view.edges)

    stats = session.stats()
    console.print(
        f"[bold green]topolens shell[/bold green] - {stats.total_nodes} services, "
        f"{stats.total_links} calls. Type 'help' for commands."
    )

    dispatcher = ShellDispatcher(session)
    while True:
        try:
            line = click.prompt("topolens", prompt_suffix="> ", default="", show_default=False)
        except (EOFError, click.Abort):
            break
        if not dispatcher.dispatch(line):
            break
