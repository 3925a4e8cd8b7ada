"""
Flow Interface - the host-facing editor object.

Wires the graph, selection, viewport, interaction controller and
reprocessing queue together and exposes the operations a host window needs.
It has no GUI dependency; FlowCanvas supplies Qt input and painting.
"""

import logging
from typing import Any, Callable, Iterable, Optional

from flowgraph.core.config import FlowGraphConfig, get_config
from flowgraph.core.graph import FlowGraph, NodeNotFoundError
from flowgraph.core.interaction import InteractionController
from flowgraph.core.render import RenderSurface
from flowgraph.core.reprocessing import ReprocessingQueue
from flowgraph.core.selection import Selection
from flowgraph.core.viewport import Viewport
from flowgraph.nodes.connector import FlowConnector
from flowgraph.nodes.flow_element import FlowElement

logger = logging.getLogger(__name__)


class FlowInterface:
    """
    A flow graph editor, independent of any toolkit.

    Typical use:
        interface = FlowInterface(surface)
        interface.start()
        interface.add_node(MyNode(), 40, 40)
        interface.controller.pointer_down(50, 50)
        ...
        interface.shutdown()
    """

    def __init__(
        self,
        surface: Optional[RenderSurface] = None,
        config: Optional[FlowGraphConfig] = None,
    ):
        self._config = config or get_config()

        self._graph = FlowGraph()
        self._selection = Selection()
        self._viewport = Viewport(
            min_zoom=self._config.viewport.min_zoom,
            max_zoom=self._config.viewport.max_zoom,
            zoom=self._config.viewport.initial_zoom,
        )
        self._controller = InteractionController(
            self._graph,
            self._selection,
            self._viewport,
            surface,
            self._config.interaction,
        )
        self._queue = ReprocessingQueue(
            idle_interval=self._config.queue.idle_interval,
            join_timeout=self._config.queue.thread_join_timeout,
        )

        self._controller.on_connection_made(self._on_connection_made)

    @property
    def config(self) -> FlowGraphConfig:
        return self._config

    @property
    def graph(self) -> FlowGraph:
        return self._graph

    @property
    def selection(self) -> Selection:
        return self._selection

    @property
    def viewport(self) -> Viewport:
        return self._viewport

    @property
    def controller(self) -> InteractionController:
        return self._controller

    @property
    def queue(self) -> ReprocessingQueue:
        return self._queue

    @property
    def zoom(self) -> float:
        return self._viewport.zoom

    @property
    def selected_element(self) -> Optional[FlowElement]:
        """Primary selected node, if exactly one is selected."""
        return self._selection.primary

    @property
    def inspected_object(self) -> Any:
        """What the host's property inspector should show."""
        node = self._selection.primary
        if node is None:
            return None
        return node.get_inspectable_object()

    def set_surface(self, surface: Optional[RenderSurface]) -> None:
        self._controller.set_surface(surface)

    # Lifecycle

    def start(self) -> None:
        """Start background reprocessing."""
        self._queue.start()

    def shutdown(self) -> None:
        """Stop background reprocessing; pending nodes are dropped."""
        self._queue.stop()

    # Observers

    def on_selection_changed(self, callback: Callable[[Selection], None]) -> None:
        self._selection.on_changed(callback)

    def on_queue_depth_changed(self, callback: Callable[[int], None]) -> None:
        """Called on the worker thread after every push and pop."""
        self._queue.on_depth_changed(callback)

    def on_node_reprocessed(self, callback: Callable[[FlowElement], None]) -> None:
        """Called on the worker thread after a node's hook returned."""
        self._queue.on_processed(callback)

    # Graph editing

    def add_node(self, node: FlowElement, x: Optional[int] = None, y: Optional[int] = None) -> FlowElement:
        """Add a node, optionally moving it to model position (x, y) first."""
        if x is not None or y is not None:
            node.move_to(node.x if x is None else x, node.y if y is None else y)
        self._graph.add_node(node)
        self._controller.invalidate_node(node)
        return node

    def add_node_at_last_context_location(self, node: FlowElement) -> FlowElement:
        """Add a node where the context menu was last opened."""
        return self._controller.add_node_at_last_context_location(node)

    def remove_node(self, node: FlowElement) -> None:
        """
        Remove a node, its links and its selection state.

        Raises:
            NodeNotFoundError: If the node is not in the graph
        """
        if node not in self._graph:
            raise NodeNotFoundError(node.id)
        self._controller.forget_node(node)
        self._controller.invalidate_node(node)
        self._graph.remove_node(node)
        self._selection.discard(node)
        self._controller.invalidate_all()

    def restore_nodes(self, nodes: Iterable[FlowElement]) -> None:
        """Attach nodes produced by a loader and let each finish setup."""
        for node in nodes:
            self._graph.add_node(node)
            node.on_deserialized(self)
        self._controller.invalidate_all()

    def get_connector_index(self, node: FlowElement, connector: FlowConnector) -> int:
        return self._graph.get_connector_index(node, connector)

    # View

    def pan(self, dx: int, dy: int) -> None:
        """Pan by a screen-space amount."""
        self._controller.pan(dx, dy)

    def set_zoom(self, value: float) -> bool:
        """Set the zoom; values outside the configured range are ignored."""
        return self._controller.set_zoom(value)

    def invalidate_node(self, node: FlowElement) -> None:
        self._controller.invalidate_node(node)

    def paint(self, surface: Optional[RenderSurface] = None) -> None:
        self._controller.paint(surface)

    # Reprocessing

    def push_for_reprocessing(self, node: FlowElement) -> bool:
        """
        Queue a node for background reprocessing.

        Returns:
            True if queued, False if it was already pending

        Raises:
            ValueError: If node is None
            NodeNotFoundError: If the node is not in the graph
        """
        if node is None:
            raise ValueError("node must not be None")
        if node not in self._graph:
            raise NodeNotFoundError(node.id)
        return self._queue.push(node)

    def notify_property_updated(self, node: FlowElement) -> None:
        """Tell a node its inspected properties changed, then reprocess it."""
        node.on_property_updated()
        self._controller.invalidate_node(node)
        self.push_for_reprocessing(node)

    def _on_connection_made(self, pending: FlowConnector, target: FlowConnector) -> None:
        consumer = pending if pending.is_input else target
        node = self._graph.find_node(consumer.node_id)
        if node is not None:
            self.push_for_reprocessing(node)
