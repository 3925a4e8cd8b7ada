"""
Interaction Controller - pointer and keyboard state machine.

Turns raw input into graph, selection and viewport mutations and reports
the minimal screen regions that need repainting. Supports:
- Single and group node drag
- Marquee selection (Shift + drag)
- Click-to-arm, click-to-connect connector linking
- Pan by dragging empty canvas (left or middle button)
- Zoom with silent range clamping
- Context-click placement of new nodes

All entry points run on the interaction thread; the session value is the
only record of which gesture is in progress.
"""

import logging
from typing import Callable, Iterable, List, Optional

from flowgraph.core.config import InteractionConfig
from flowgraph.core.geometry import Point, Rect
from flowgraph.core.graph import FlowGraph
from flowgraph.core.render import RenderSurface
from flowgraph.core.selection import Selection
from flowgraph.core.session import (
    ConnectingArmed,
    Dragging,
    Idle,
    Marqueeing,
    Panning,
    Session,
)
from flowgraph.core.types import InteractionMode, Key, MouseButton
from flowgraph.core.viewport import Viewport
from flowgraph.nodes.connector import FlowConnector
from flowgraph.nodes.flow_element import FlowElement

logger = logging.getLogger(__name__)


class InteractionController:
    """
    Drives one canvas.

    The controller does not own the graph, selection or viewport; the
    host (normally FlowInterface) shares them with it.
    """

    MULTISELECT_KEY = Key.SHIFT

    def __init__(
        self,
        graph: FlowGraph,
        selection: Selection,
        viewport: Viewport,
        surface: Optional[RenderSurface] = None,
        config: Optional[InteractionConfig] = None,
    ):
        self._graph = graph
        self._selection = selection
        self._viewport = viewport
        self._surface = surface
        self._config = config or InteractionConfig()

        self._session: Session = Idle()
        self._multiselect_latched = False
        self._last_pointer = Point(0, 0)
        self._last_context_location = Point(0, 0)

        self._connection_callbacks: List[Callable[[FlowConnector, FlowConnector], None]] = []

    @property
    def session(self) -> Session:
        return self._session

    @property
    def mode(self) -> InteractionMode:
        return self._session.mode

    @property
    def armed_connector(self) -> Optional[FlowConnector]:
        if isinstance(self._session, ConnectingArmed):
            return self._session.connector
        return None

    @property
    def marquee_rect(self) -> Optional[Rect]:
        """Marquee in screen space while one is being drawn."""
        if isinstance(self._session, Marqueeing):
            return self._session.rect
        return None

    @property
    def multiselect_latched(self) -> bool:
        return self._multiselect_latched

    @property
    def last_pointer(self) -> Point:
        return self._last_pointer

    @property
    def last_context_location(self) -> Point:
        return self._last_context_location

    def set_surface(self, surface: Optional[RenderSurface]) -> None:
        self._surface = surface

    def on_connection_made(self, callback: Callable[[FlowConnector, FlowConnector], None]) -> None:
        """Register callback(pending, target) for every accepted link."""
        self._connection_callbacks.append(callback)

    # Pointer events

    def pointer_down(self, x: int, y: int, button: MouseButton = MouseButton.LEFT) -> None:
        """Handle a pointer press at screen position (x, y)."""
        screen = Point(x, y)
        self._last_pointer = screen

        if button is MouseButton.RIGHT:
            self._secondary_down(screen)
            return

        # A held gesture owns the pointer until release
        if self._session.mode.holds_pointer:
            return

        if button is MouseButton.MIDDLE:
            self._begin_panning(screen)
        elif button is MouseButton.LEFT:
            self._primary_down(screen)

    def pointer_move(self, x: int, y: int) -> None:
        """Handle pointer movement to screen position (x, y)."""
        screen = Point(x, y)
        session = self._session

        if isinstance(session, Marqueeing):
            padding = self._config.marquee_padding
            self._invalidate_screen(Rect.from_points(session.start, session.end).padded(padding))
            self._invalidate_screen(Rect.from_points(session.start, screen).padded(padding))
            self._session = Marqueeing(start=session.start, end=screen)
        elif isinstance(session, Dragging):
            self._drag_to(session, screen)
        elif isinstance(session, Panning):
            delta = self._viewport.to_model_delta(
                screen.x - session.anchor.x, screen.y - session.anchor.y
            )
            self._graph.translate_all(delta.x, delta.y)
            self._session = Panning(anchor=screen)
            self._invalidate_all()
        elif isinstance(session, ConnectingArmed):
            self._invalidate_preview(session.connector, self._last_pointer)
            self._invalidate_preview(session.connector, screen)

        self._last_pointer = screen

    def pointer_up(self, x: int, y: int, button: MouseButton = MouseButton.LEFT) -> None:
        """Handle a pointer release; connections complete on press, not here."""
        self._last_pointer = Point(x, y)
        session = self._session

        if isinstance(session, Marqueeing):
            self._finish_marquee(session)
        elif session.mode.is_dragging or isinstance(session, Panning):
            logger.debug(f"{session.mode.name} finished")
            self._session = Idle()

    # Keyboard events

    def key_down(self, key: Key) -> None:
        if key is self.MULTISELECT_KEY:
            self._multiselect_latched = True
        elif key is Key.ESCAPE:
            self.cancel()
        elif key is Key.DELETE:
            self.delete_selection()

    def key_up(self, key: Key) -> None:
        if key is self.MULTISELECT_KEY:
            self._multiselect_latched = False
            if isinstance(self._session, Marqueeing):
                self._finish_marquee(self._session)

    # Host operations

    def cancel(self) -> None:
        """Abort the current gesture without changing the graph."""
        session = self._session
        if isinstance(session, ConnectingArmed):
            self._disarm()
        elif isinstance(session, Marqueeing):
            self._session = Idle()
            self._multiselect_latched = False
            self._invalidate_screen(session.rect.padded(self._config.marquee_padding))
        elif not isinstance(session, Idle):
            self._session = Idle()

    def pan(self, dx: int, dy: int) -> None:
        """Pan the canvas by a screen-space amount."""
        delta = self._viewport.to_model_delta(dx, dy)
        self._graph.translate_all(delta.x, delta.y)
        self._invalidate_all()

    def set_zoom(self, value: float) -> bool:
        """Change the zoom; out-of-range values are ignored silently."""
        if not self._viewport.set_zoom(value):
            return False
        self._invalidate_all()
        return True

    def add_node_at_last_context_location(self, node: FlowElement) -> FlowElement:
        """Place a node where the last secondary click happened."""
        model = self._viewport.to_model_point(self._last_context_location)
        node.move_to(model.x, model.y)
        self._graph.add_node(node)
        self.invalidate_node(node)
        return node

    def delete_selection(self) -> None:
        """Remove every selected node from the graph."""
        doomed = [node for node in self._selection if node in self._graph]
        if not doomed:
            return
        for node in doomed:
            self.forget_node(node)
            self.invalidate_node(node)
            self._graph.remove_node(node)
        self._selection.clear()
        # Link lines into the removed nodes may cross the whole canvas
        self._invalidate_all()

    def forget_node(self, node: FlowElement) -> None:
        """
        End any gesture that refers to a node about to leave the graph.

        Call before removing the node: an armed connector owned by it is
        disarmed and a drag that includes it is stopped.
        """
        session = self._session
        if isinstance(session, ConnectingArmed) and session.connector.node_id == node.id:
            self._disarm()
        elif isinstance(session, Dragging) and node.id in session.offsets:
            logger.debug(f"{session.mode.name} stopped, node {node.id} removed")
            self._session = Idle()

    def invalidate_node(self, node: FlowElement) -> None:
        """Invalidate a node's footprint and its connector regions."""
        self._invalidate_model(node.invalidation_bounds())
        for rect in node.connector_regions_to_invalidate():
            self._invalidate_model(rect)

    def invalidate_all(self) -> None:
        self._invalidate_all()

    def paint(self, surface: Optional[RenderSurface] = None) -> None:
        """Draw the whole canvas in z-order onto surface (default: own surface)."""
        surface = surface or self._surface
        if surface is None:
            return

        for node in self._graph.nodes:
            surface.draw_node(node, self._viewport, node in self._selection)

        session = self._session
        if isinstance(session, ConnectingArmed):
            surface.draw_preview_line(self._anchor_on_screen(session.connector), self._last_pointer)
        elif isinstance(session, Marqueeing):
            surface.draw_marquee(session.rect)

    # Press handling

    def _primary_down(self, screen: Point) -> None:
        if self._multiselect_latched:
            self._leave_session()
            self._session = Marqueeing(start=screen, end=screen)
            logger.debug(f"Marquee started at {screen}")
            return

        model = self._viewport.to_model_point(screen)
        hit = self._graph.node_at(model)
        if hit is not None:
            self._begin_drag(hit, model)
            return

        # A multi-selection survives presses on empty canvas
        if len(self._selection) <= 1:
            self._change_selection([])

        connector = self._pick_connector(screen)
        armed = self.armed_connector
        if connector is not None:
            if armed is None:
                self._session = ConnectingArmed(connector=connector)
                self._invalidate_model(connector.region())
                logger.debug(f"Armed connector {connector!r}")
            else:
                self._complete_connection(armed, connector)
            return

        self._begin_panning(screen)

    def _secondary_down(self, screen: Point) -> None:
        if isinstance(self._session, ConnectingArmed):
            self._session = Idle()
            self._invalidate_all()
            logger.debug("Pending connection cleared")
            return

        hit = self._graph.node_at(self._viewport.to_model_point(screen))
        self._change_selection([] if hit is None else [hit])
        self._last_context_location = screen

    def _begin_drag(self, hit: FlowElement, model: Point) -> None:
        if len(self._selection) > 1:
            # Keep the group so it can be dragged together
            dragged = [node for node in self._graph.nodes if node in self._selection]
        else:
            self._change_selection([hit])
            dragged = [hit]

        self._leave_session()
        self._session = Dragging(offsets={node.id: model - node.position for node in dragged})
        logger.debug(f"{self._session.mode.name} started with {len(dragged)} node(s)")

    def _begin_panning(self, screen: Point) -> None:
        self._leave_session()
        self._session = Panning(anchor=screen)

    def _complete_connection(self, pending: FlowConnector, target: FlowConnector) -> None:
        connected = self._graph.connect(pending, target)
        self._session = Idle()
        self._invalidate_all()

        if not connected:
            return
        for callback in self._connection_callbacks:
            try:
                callback(pending, target)
            except Exception as e:
                logger.error(f"Connection callback error: {e}")

    def _pick_connector(self, screen: Point) -> Optional[FlowConnector]:
        size = self._config.connector_pick_size
        half = size // 2
        box = Rect(screen.x - half, screen.y - half, size, size)
        for connector in self._graph.connectors_topmost_first():
            if box.contains_point(self._anchor_on_screen(connector)):
                return connector
        return None

    # Move / release handling

    def _drag_to(self, session: Dragging, screen: Point) -> None:
        model = self._viewport.to_model_point(screen)
        for node_id, offset in session.offsets.items():
            node = self._graph.find_node(node_id)
            if node is None:
                continue
            self.invalidate_node(node)
            node.move_to(model.x - offset.x, model.y - offset.y)
            self.invalidate_node(node)

    def _finish_marquee(self, session: Marqueeing) -> None:
        model_rect = self._viewport.to_model_rect(Rect.from_points(session.start, session.end))
        hits = self._graph.nodes_intersecting(model_rect)
        self._session = Idle()
        self._multiselect_latched = False
        self._change_selection(hits)
        self._invalidate_all()
        logger.debug(f"Marquee {model_rect} selected {len(hits)} node(s)")

    # Helpers

    def _leave_session(self) -> None:
        """Clean up visuals of the current session before replacing it."""
        if isinstance(self._session, ConnectingArmed):
            self._disarm()

    def _disarm(self) -> None:
        session = self._session
        if not isinstance(session, ConnectingArmed):
            return
        self._session = Idle()
        self._invalidate_preview(session.connector, self._last_pointer)
        self._invalidate_model(session.connector.region())
        logger.debug(f"Disarmed connector {session.connector!r}")

    def _change_selection(self, nodes: Iterable[FlowElement]) -> None:
        """Replace the selection, repainting old and new highlights."""
        nodes = list(nodes)
        for node in self._selection:
            self.invalidate_node(node)
        self._selection.replace(nodes)
        for node in nodes:
            self.invalidate_node(node)

    def _anchor_on_screen(self, connector: FlowConnector) -> Point:
        return self._viewport.to_screen_point(connector.center)

    def _invalidate_preview(self, connector: FlowConnector, end: Point) -> None:
        start = self._anchor_on_screen(connector)
        self._invalidate_screen(
            Rect.from_points(start, end).padded(self._config.preview_line_padding)
        )

    def _invalidate_model(self, rect: Rect) -> None:
        if self._surface is not None:
            self._surface.invalidate(self._viewport.to_screen_rect(rect))

    def _invalidate_screen(self, rect: Rect) -> None:
        if self._surface is not None:
            self._surface.invalidate(rect.normalized())

    def _invalidate_all(self) -> None:
        if self._surface is not None:
            self._surface.invalidate_all()
