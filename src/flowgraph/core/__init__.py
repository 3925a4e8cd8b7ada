"""
flowgraph Core - the headless editor engine.

The core turns pointer and keyboard input into graph mutations and redraw
regions, and runs background reprocessing. It has no GUI dependencies and
can be driven directly from tests or another toolkit.
"""

from flowgraph.core.flow_interface import FlowInterface
from flowgraph.core.graph import DuplicateNodeError, FlowGraph, GraphError, NodeNotFoundError
from flowgraph.core.interaction import InteractionController
from flowgraph.core.render import RenderSurface
from flowgraph.core.reprocessing import ReprocessingQueue
from flowgraph.core.selection import Selection
from flowgraph.core.viewport import Viewport

__all__ = [
    "FlowInterface",
    "FlowGraph",
    "GraphError",
    "NodeNotFoundError",
    "DuplicateNodeError",
    "InteractionController",
    "RenderSurface",
    "ReprocessingQueue",
    "Selection",
    "Viewport",
]
