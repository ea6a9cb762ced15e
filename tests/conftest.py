"""Shared fixtures: a small service topology used across test modules."""

import json

import pytest

from topolens.core.store import GraphStore
from topolens.graph.renderer import InMemoryRenderer
from topolens.view.session import TopologySession


@pytest.fixture
def sample_topology():
    """
    gateway -> order-service -> billing-service
    gateway -> user-service  -> billing-service
    order-service -> order-db
    """
    return {
        "nodes": [
            {"index": 0, "name": "api-gateway", "category": 0},
            {"index": 1, "name": "order-service", "category": 2},
            {"index": 2, "name": "billing-service", "category": 1},
            {"index": 3, "name": "user-service", "category": 1},
            {"index": 4, "name": "order-db", "category": 1},
        ],
        "links": [
            {"source": 0, "target": 1},
            {"source": 1, "target": 2},
            {"source": 0, "target": 3},
            {"source": 1, "target": 4},
            {"source": 3, "target": 2},
        ],
    }


@pytest.fixture
def topology_file(tmp_path, sample_topology):
    path = tmp_path / "topology.json"
    path.write_text(json.dumps(sample_topology))
    return path


@pytest.fixture
def renderer():
    return InMemoryRenderer()


@pytest.fixture
def session(sample_topology, renderer):
    s = TopologySession(store=GraphStore(), renderer=renderer)
    s.load(sample_topology, source="sample")
    return s
