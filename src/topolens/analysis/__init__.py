"""Queries over a loaded topology: keyword matching, path search, reachability."""

from .matching import match_nodes
from .paths import PathFinder, PathSearchResult
from .reachability import reachable, reachable_levels

__all__ = ["match_nodes", "PathFinder", "PathSearchResult", "reachable", "reachable_levels"]
