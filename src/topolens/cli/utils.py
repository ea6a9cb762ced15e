"""
CLI Utilities - Shared helper functions for command line operations.

Formatted status messages, logging setup and session bootstrapping used by
every command.
"""

import logging
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

import click

from ..config import TopolensConfig
from ..core.exceptions import TopologyError
from ..view.session import TopologySession


def echo_success(message: str) -> None:
    """
    Print a success message with a green checkmark.

    Args:
        message (str): The message to display.
    """
    click.echo(click.style(f"✅ {message}", fg="green"))


def echo_error(message: str) -> None:
    """
    Print an error message with a red cross.

    Args:
        message (str): The error message to display.
    """
    click.echo(click.style(f"❌ {message}", fg="red"), err=True)


def echo_warning(message: str) -> None:
    """
    Print a warning message with a yellow alert symbol.

    Args:
        message (str): The warning message to display.
    """
    click.echo(click.style(f"⚠️  {message}", fg="yellow"))


def configure_logging(verbose: int) -> None:
    """Route library logging to stderr; -v for INFO, -vv for DEBUG."""
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="[%X]",
    )


def get_config(ctx: Optional[click.Context]) -> TopolensConfig:
    if ctx is not None and isinstance(ctx.obj, dict) and "config" in ctx.obj:
        return ctx.obj["config"]
    return TopolensConfig.load()


def open_session(data_file: str, config: Optional[TopolensConfig] = None) -> Optional[TopologySession]:
    """
    Create a session and load `data_file` into it.

    Returns:
        The session, or None if the file could not be loaded. The reason is
        printed to stderr.
    """
    path = Path(data_file)
    if not path.exists():
        echo_error(f"Data file not found: {data_file}")
        return None

    session = TopologySession(config=config)
    try:
        report = session.load_file(path)
    except TopologyError as e:
        echo_error(f"Failed to load topology: {e}")
        return None

    if report.dropped_links:
        echo_warning(f"Dropped {report.dropped_links} links referencing unknown nodes")
    return session


def require_session(data_file: str) -> TopologySession:
    """`open_session` that exits with status 1 on failure."""
    session = open_session(data_file, get_config(click.get_current_context(silent=True)))
    if session is None:
        sys.exit(1)
    return session


@contextmanager
def reporting_errors():
    """Print topology errors as a red message and exit with status 1."""
    try:
        yield
    except TopologyError as e:
        echo_error(str(e))
        sys.exit(1)
