"""
Flow Graph - ordered node collection and connector topology.

Node order is z-order: later nodes paint over earlier ones and win
hit-tests. Links live on the connectors themselves; the graph enforces the
connection protocol:
- an output may feed any number of inputs (links append)
- an input has at most one upstream output (a new link replaces the old)
"""

import logging
from typing import Dict, Iterator, List, Optional, Tuple

from flowgraph.core.geometry import Point, Rect
from flowgraph.nodes.connector import FlowConnector
from flowgraph.nodes.flow_element import FlowElement

logger = logging.getLogger(__name__)


class GraphError(Exception):
    """Base exception for graph errors."""
    pass


class NodeNotFoundError(GraphError, KeyError):
    """Raised when a referenced node is not in the graph."""
    pass


class DuplicateNodeError(GraphError, ValueError):
    """Raised when a node is added to the graph twice."""
    pass


class FlowGraph:
    """
    Owns the flow elements placed on a canvas.

    Connectors refer to their node by id; owner_of() resolves the id in
    constant time.
    """

    def __init__(self):
        self._nodes: Dict[str, FlowElement] = {}

    @property
    def nodes(self) -> List[FlowElement]:
        """All nodes in z-order (bottom first)."""
        return list(self._nodes.values())

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[FlowElement]:
        return iter(list(self._nodes.values()))

    def __contains__(self, node: object) -> bool:
        return isinstance(node, FlowElement) and self._nodes.get(node.id) is node

    def add_node(self, node: FlowElement) -> FlowElement:
        """
        Add a node on top of the z-order.

        Raises:
            DuplicateNodeError: If the node is already in the graph
        """
        if node.id in self._nodes:
            raise DuplicateNodeError(f"Node already in graph: {node.id}")
        self._nodes[node.id] = node
        logger.debug(f"Added node: {node.title} ({node.id}) at ({node.x}, {node.y})")
        return node

    def remove_node(self, node: FlowElement) -> None:
        """
        Remove a node and sever every link touching its connectors.

        Raises:
            NodeNotFoundError: If the node is not in the graph
        """
        if node not in self:
            raise NodeNotFoundError(node.id)
        for connector in node.connectors():
            self.disconnect(connector)
        del self._nodes[node.id]
        logger.debug(f"Removed node: {node.title} ({node.id})")

    def get_node(self, node_id: str) -> FlowElement:
        """
        Look up a node by id.

        Raises:
            NodeNotFoundError: If no node has that id
        """
        try:
            return self._nodes[node_id]
        except KeyError:
            raise NodeNotFoundError(node_id) from None

    def find_node(self, node_id: str) -> Optional[FlowElement]:
        return self._nodes.get(node_id)

    def owner_of(self, connector: FlowConnector) -> FlowElement:
        """Node that owns a connector."""
        return self.get_node(connector.node_id)

    @staticmethod
    def get_connector_index(node: FlowElement, connector: FlowConnector) -> int:
        """Ordinal of connector within node's input or output list."""
        return node.get_connector_index(connector)

    def translate_all(self, dx: int, dy: int) -> None:
        """Move every node by (dx, dy) model pixels."""
        for node in self._nodes.values():
            node.translate(dx, dy)

    # Hit-testing

    def node_at(self, point: Point) -> Optional[FlowElement]:
        """Topmost node whose region contains a model-space point."""
        for node in reversed(self._nodes.values()):
            if node.region_bounds().contains_point(point):
                return node
        return None

    def nodes_intersecting(self, rect: Rect) -> List[FlowElement]:
        """Nodes whose region intersects a model rectangle, topmost first."""
        return [
            node for node in reversed(self._nodes.values())
            if rect.intersects(node.region_bounds())
        ]

    def connectors_topmost_first(self) -> Iterator[FlowConnector]:
        """Every connector in pick order: topmost node first, inputs before outputs."""
        for node in reversed(list(self._nodes.values())):
            yield from node.connectors()

    def links(self) -> List[Tuple[FlowConnector, FlowConnector]]:
        """Stored links as (holder, linked) pairs in z-order."""
        return [
            (connector, other)
            for node in self._nodes.values()
            for connector in node.connectors()
            for other in connector.linked_to
        ]

    def peers_of(self, connector: FlowConnector) -> List[FlowConnector]:
        """Connectors linked with connector, whichever side stored the link."""
        peers = list(connector.linked_to)
        for other in self._all_connectors():
            if connector in other.linked_to and other not in peers:
                peers.append(other)
        return peers

    # Connection protocol

    def connect(self, pending: FlowConnector, target: FlowConnector) -> bool:
        """
        Link an armed connector to a second one.

        Returns:
            True if the graph changed, False if the pairing was rejected
        """
        if target.direction is not pending.direction.opposite:
            logger.debug(f"Rejected connection between two {pending.direction.value} connectors")
            return False
        if not pending.can_connect_to(target) or not target.can_connect_to(pending):
            logger.debug(f"Rejected incompatible connection {pending!r} -> {target!r}")
            return False

        if pending.is_output:
            pending._append_link(target)
        else:
            self._sever_upstream(pending)
            pending._replace_links([target])

        logger.debug(f"Connected {pending!r} -> {target!r}")
        return True

    def _sever_upstream(self, connector: FlowConnector) -> None:
        """Drop every edge into an input, whichever side stored it."""
        for other in connector.linked_to:
            other._remove_link(connector)
        for other in self._all_connectors():
            if connector in other.linked_to:
                other._remove_link(connector)

    def disconnect(self, connector: FlowConnector) -> None:
        """Sever every link stored on or pointing at a connector."""
        for other in connector.linked_to:
            other._remove_link(connector)
        connector._replace_links([])
        for other in self._all_connectors():
            other._remove_link(connector)

    def _all_connectors(self) -> Iterator[FlowConnector]:
        for node in self._nodes.values():
            yield from node.connectors()
