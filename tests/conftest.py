"""
flowgraph Test Configuration and Fixtures.

Provides shared fixtures for unit and integration tests.
"""

import tempfile
from pathlib import Path

import pytest

from flowgraph.core.config import FlowGraphConfig, set_config
from flowgraph.core.flow_interface import FlowInterface
from flowgraph.core.graph import FlowGraph
from flowgraph.core.interaction import InteractionController
from flowgraph.core.selection import Selection
from flowgraph.core.viewport import Viewport
from helpers import RecordingSurface, SampleNode


# =============================================================================
# Configuration Fixtures
# =============================================================================

@pytest.fixture
def temp_dir():
    """Provide a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def config():
    """Default configuration that never touches the user's home directory."""
    return FlowGraphConfig()


@pytest.fixture(autouse=True)
def reset_global_config():
    """Make sure tests never share the lazily loaded global config."""
    set_config(None)
    yield
    set_config(None)


# =============================================================================
# Core Fixtures
# =============================================================================

@pytest.fixture
def surface():
    return RecordingSurface()


@pytest.fixture
def graph():
    return FlowGraph()


@pytest.fixture
def selection():
    return Selection()


@pytest.fixture
def viewport():
    return Viewport()


@pytest.fixture
def controller(graph, selection, viewport, surface, config):
    return InteractionController(graph, selection, viewport, surface, config.interaction)


@pytest.fixture
def interface(surface, config):
    """FlowInterface with a recording surface; the worker is not started."""
    editor = FlowInterface(surface, config)
    yield editor
    editor.shutdown()


@pytest.fixture
def make_node():
    """Factory for SampleNode instances at a model position."""

    def _make(x: int = 0, y: int = 0, title: str = "node") -> SampleNode:
        return SampleNode(title=title, x=x, y=y)

    return _make
