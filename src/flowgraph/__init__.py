"""
flowgraph - interactive node-graph editor surface

Place flow elements on a pannable, zoomable canvas, wire typed connectors
between them and reprocess changed nodes in the background.
"""

__version__ = "1.0.0"

from flowgraph.core.flow_interface import FlowInterface
from flowgraph.nodes.flow_element import FlowElement, NodeDefinition

__all__ = ["FlowInterface", "FlowElement", "NodeDefinition", "__version__"]
