"""
Keyword matching over service names.
"""

from typing import Iterable, List

from ..core.exceptions import InvalidQueryError
from ..core.types import ServiceNode


def parse_keywords(keywords: str) -> List[str]:
    """Split a query into lowercase terms. Empty queries are rejected."""
    terms = keywords.lower().split()
    if not terms:
        raise InvalidQueryError("Enter at least one search keyword")
    return terms


def match_nodes(nodes: Iterable[ServiceNode], keywords: str) -> List[ServiceNode]:
    """
    Nodes whose name contains every term of `keywords`.

    Matching is a case-insensitive substring test; input order is kept.
    """
    terms = parse_keywords(keywords)
    return [
        node for node in nodes
        if all(term in node.name.lower() for term in terms)
    ]
