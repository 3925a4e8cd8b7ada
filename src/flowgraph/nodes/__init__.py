"""
Flow elements and their connectors.

Node types subclass FlowElement and describe their connectors with a
NodeDefinition.
"""

from flowgraph.nodes.connector import ConnectorDefinition, FlowConnector
from flowgraph.nodes.flow_element import CachedImage, FlowElement, NodeDefinition

__all__ = [
    "ConnectorDefinition",
    "FlowConnector",
    "CachedImage",
    "FlowElement",
    "NodeDefinition",
]
