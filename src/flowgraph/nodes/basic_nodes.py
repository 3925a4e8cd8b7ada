"""
Basic node types used by the demo launcher.

They carry a single numeric value each so the editor has something to
inspect and reprocess; real applications supply their own FlowElement
subclasses.
"""

import logging
from typing import TYPE_CHECKING, Any, Optional

from flowgraph.nodes.connector import ConnectorDefinition
from flowgraph.nodes.flow_element import FlowElement, NodeDefinition

if TYPE_CHECKING:
    from flowgraph.core.flow_interface import FlowInterface
    from flowgraph.core.graph import FlowGraph

logger = logging.getLogger(__name__)


class ConstantNode(FlowElement):
    """Emits a fixed value."""

    definition = NodeDefinition(
        name="Constant",
        description="Emits a fixed number",
        outputs=[ConnectorDefinition(name="value", type_tag="number")],
        width=100,
        height=60,
    )

    def __init__(self, value: float = 0.0, title: Optional[str] = None, x: int = 0, y: int = 0):
        super().__init__(title, x, y)
        self.value = value
        self.revision = 0

    def get_inspectable_object(self) -> Any:
        return self

    def on_property_updated(self) -> None:
        self.title = f"{self.definition.name} ({self.value:g})"

    def on_reprocess_requested(self) -> None:
        self.revision += 1


class SumNode(FlowElement):
    """Adds the values of whatever feeds its two inputs."""

    definition = NodeDefinition(
        name="Sum",
        description="Adds its two inputs",
        inputs=[
            ConnectorDefinition(name="a", type_tag="number"),
            ConnectorDefinition(name="b", type_tag="number"),
        ],
        outputs=[ConnectorDefinition(name="sum", type_tag="number")],
    )

    def __init__(self, title: Optional[str] = None, x: int = 0, y: int = 0):
        super().__init__(title, x, y)
        self.value = 0.0
        self.revision = 0
        self._graph: Optional["FlowGraph"] = None

    def on_deserialized(self, host: "FlowInterface") -> None:
        self._graph = host.graph

    def on_reprocess_requested(self) -> None:
        if self._graph is None:
            return

        total = 0.0
        for connector in self.input_connectors:
            for upstream in self._graph.peers_of(connector):
                node = self._graph.find_node(upstream.node_id)
                total += getattr(node, "value", 0.0)
        self.value = total
        self.revision += 1
        logger.debug(f"Sum {self.id} recomputed: {total}")


class PreviewNode(FlowElement):
    """Sink that counts how often it was refreshed."""

    definition = NodeDefinition(
        name="Preview",
        description="Shows an upstream value",
        inputs=[ConnectorDefinition(name="value", type_tag="number")],
        width=100,
        height=60,
    )

    def __init__(self, title: Optional[str] = None, x: int = 0, y: int = 0):
        super().__init__(title, x, y)
        self.revision = 0

    def on_reprocess_requested(self) -> None:
        self.revision += 1
