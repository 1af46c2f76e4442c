"""Pytest fixtures for lanemerge tests."""
import pytest


def _node(node_id, lat, lon):
    return {"type": "node", "id": node_id, "lat": lat, "lon": lon}


@pytest.fixture
def overpass_response():
    """Minimal Overpass response: one relation, three member ways."""
    return {
        "version": 0.6,
        "elements": [
            _node(1, 51.50, -0.10),
            _node(2, 51.51, -0.11),
            _node(3, 51.52, -0.12),
            _node(4, 51.53, -0.13),
            {
                "type": "way",
                "id": 100,
                "nodes": [1, 2],
                "tags": {"highway": "primary", "name": "Main Street", "lanes": "3"},
            },
            {
                "type": "way",
                "id": 101,
                "nodes": [2, 3, 4],
                "tags": {
                    "highway": "primary",
                    "oneway": "yes",
                    "turn:lanes": "left|through;right",
                },
            },
            {
                # member without a highway tag
                "type": "way",
                "id": 102,
                "nodes": [3, 4],
                "tags": {"building": "yes"},
            },
            {
                # highway, but not a member
                "type": "way",
                "id": 103,
                "nodes": [1, 4],
                "tags": {"highway": "service"},
            },
            {
                "type": "relation",
                "id": 9000,
                "members": [
                    {"type": "way", "ref": 100, "role": ""},
                    {"type": "way", "ref": 101, "role": "forward"},
                    {"type": "way", "ref": 102, "role": ""},
                ],
                "tags": {"type": "route", "route": "road", "name": "A1"},
            },
        ],
    }


@pytest.fixture
def graph():
    """Isolated dependency graph."""
    from lanemerge.state.graph import DependencyGraph
    return DependencyGraph("test")


@pytest.fixture
def engine():
    """Inference engine with the built-in rules."""
    from lanemerge.inference.engine import InferenceEngine
    return InferenceEngine()


@pytest.fixture
def config(tmp_path):
    """Configuration with an isolated cache directory and no request delays."""
    from lanemerge.config import LaneMergeConfig
    config = LaneMergeConfig()
    config.cache.cache_dir = str(tmp_path / "cache")
    config.api.retry_delay = 0.0
    config.api.min_request_interval = 0.0
    return config
