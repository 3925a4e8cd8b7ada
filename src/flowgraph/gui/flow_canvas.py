"""
Flow Canvas - Qt widget hosting a FlowInterface.

Forwards mouse, keyboard and wheel events to the interaction controller and
paints the graph through a QPainter-backed render surface. Only the
rectangles the controller invalidates are repainted.
"""

import logging
from typing import Optional

from PyQt6.QtCore import QPoint, QRect, Qt, pyqtSignal, pyqtSlot
from PyQt6.QtGui import (
    QColor,
    QFont,
    QImage,
    QKeyEvent,
    QMouseEvent,
    QPainter,
    QPaintEvent,
    QPen,
    QWheelEvent,
)
from PyQt6.QtWidgets import QWidget

from flowgraph.core.flow_interface import FlowInterface
from flowgraph.core.geometry import Point, Rect
from flowgraph.core.render import RenderSurface
from flowgraph.core.selection import Selection
from flowgraph.core.types import Key, MouseButton
from flowgraph.core.viewport import Viewport
from flowgraph.nodes.flow_element import FlowElement

logger = logging.getLogger(__name__)


def _qrect(rect: Rect) -> QRect:
    return QRect(rect.x, rect.y, rect.width, rect.height)


def _qpoint(point: Point) -> QPoint:
    return QPoint(point.x, point.y)


class QPainterSurface(RenderSurface):
    """
    RenderSurface drawing with the QPainter of the current paint event.

    Invalidation is forwarded to QWidget.update() so Qt merges the dirty
    rectangles into the next paint event.
    """

    # Colors
    BODY_COLOR = QColor(240, 240, 240)
    HIGHLIGHT_COLOR = QColor(255, 255, 192)
    BORDER_COLOR = QColor(0, 0, 0)
    TEXT_COLOR = QColor(20, 20, 20)
    INPUT_COLOR = QColor(100, 180, 255)
    OUTPUT_COLOR = QColor(255, 180, 0)
    LINK_COLOR = QColor(30, 30, 30)
    ACTIVE_COLOR = QColor(255, 0, 0)

    BASE_FONT_SIZE = 9.0

    def __init__(self, widget: QWidget):
        self._widget = widget
        self._painter: Optional[QPainter] = None

    def begin(self, painter: QPainter) -> None:
        self._painter = painter

    def end(self) -> None:
        self._painter = None

    def invalidate(self, rect: Rect) -> None:
        self._widget.update(_qrect(rect))

    def invalidate_all(self) -> None:
        self._widget.update()

    def draw_node(self, node: FlowElement, viewport: Viewport, highlighted: bool) -> None:
        painter = self._painter
        if painter is None:
            return

        zoom = viewport.zoom
        body = viewport.to_screen_rect(node.region_bounds())
        painter.fillRect(_qrect(body), self.HIGHLIGHT_COLOR if highlighted else self.BODY_COLOR)
        painter.setPen(QPen(self.BORDER_COLOR, 1))
        painter.setBrush(Qt.BrushStyle.NoBrush)
        painter.drawRect(QRect(body.x, body.y, max(body.width - 1, 0), max(body.height - 1, 0)))

        font = QFont()
        font.setPointSizeF(max(1.0, self.BASE_FONT_SIZE * zoom))
        painter.setFont(font)
        painter.setPen(QPen(self.TEXT_COLOR))
        title = viewport.to_screen_rect(node.title_bar_bounds().translated(4, 0))
        painter.drawText(
            _qrect(title),
            Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignVCenter,
            node.title,
        )

        image_rect = Rect(
            node.x + node.IMAGE_BORDER,
            node.y + node.TITLE_HEIGHT + node.IMAGE_BORDER,
            node.image_width,
            node.image_height,
        )
        if isinstance(node.image, QImage):
            painter.drawImage(_qrect(viewport.to_screen_rect(image_rect)), node.image)

        additional = node.additional_information
        if additional is not None and isinstance(additional.data, QImage):
            below = Rect(image_rect.x, image_rect.bottom, additional.width, additional.height)
            painter.drawImage(_qrect(viewport.to_screen_rect(below)), additional.data)

        self._draw_connectors(node, viewport)

    def _draw_connectors(self, node: FlowElement, viewport: Viewport) -> None:
        painter = self._painter
        for connector in node.connectors():
            center = viewport.to_screen_point(connector.center)

            painter.setPen(QPen(self.LINK_COLOR, 2))
            for other in connector.linked_to:
                painter.drawLine(_qpoint(center), _qpoint(viewport.to_screen_point(other.center)))

            glyph = viewport.to_screen_rect(connector.glyph_region())
            color = self.INPUT_COLOR if connector.is_input else self.OUTPUT_COLOR
            painter.fillRect(_qrect(glyph), color)
            painter.setPen(QPen(self.BORDER_COLOR, 1))
            painter.drawRect(_qrect(glyph))

            label = viewport.to_screen_rect(connector.region())
            alignment = Qt.AlignmentFlag.AlignLeft if connector.is_input else Qt.AlignmentFlag.AlignRight
            painter.setPen(QPen(self.TEXT_COLOR))
            painter.drawText(_qrect(label), alignment | Qt.AlignmentFlag.AlignVCenter, connector.name)

    def draw_preview_line(self, start: Point, end: Point) -> None:
        if self._painter is None:
            return
        self._painter.setPen(QPen(self.ACTIVE_COLOR, 3))
        self._painter.drawLine(_qpoint(start), _qpoint(end))

    def draw_marquee(self, rect: Rect) -> None:
        if self._painter is None:
            return
        self._painter.setPen(QPen(self.ACTIVE_COLOR, 3))
        self._painter.setBrush(Qt.BrushStyle.NoBrush)
        self._painter.drawRect(_qrect(rect))


class FlowCanvas(QWidget):
    """
    Widget displaying and editing a flow graph.

    Queue notifications arrive on the reprocessing worker thread and are
    re-emitted as signals, which Qt delivers on the GUI thread.
    """

    # Signals
    selection_changed = pyqtSignal(object)  # Selection
    queue_depth_changed = pyqtSignal(int)  # pending node count
    node_reprocessed = pyqtSignal(object)  # FlowElement
    context_menu_requested = pyqtSignal(QPoint)  # global position

    _BUTTONS = {
        Qt.MouseButton.LeftButton: MouseButton.LEFT,
        Qt.MouseButton.RightButton: MouseButton.RIGHT,
        Qt.MouseButton.MiddleButton: MouseButton.MIDDLE,
    }

    _KEYS = {
        Qt.Key.Key_Shift: Key.SHIFT,
        Qt.Key.Key_Escape: Key.ESCAPE,
        Qt.Key.Key_Delete: Key.DELETE,
    }

    def __init__(self, interface: Optional[FlowInterface] = None, parent: Optional[QWidget] = None):
        super().__init__(parent)

        self._interface = interface or FlowInterface()
        self._surface = QPainterSurface(self)
        self._interface.set_surface(self._surface)
        self._background_color = QColor(128, 128, 128)

        self._setup_widget()
        self._connect_signals()

    def _setup_widget(self) -> None:
        """Configure the widget."""
        ui = self._interface.config.ui
        self.setMinimumSize(ui.canvas_min_width, ui.canvas_min_height)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        # Needed so the preview line follows the pointer with no button held
        self.setMouseTracking(True)

    def _connect_signals(self) -> None:
        self._interface.on_selection_changed(self._emit_selection_changed)
        self._interface.on_queue_depth_changed(self.queue_depth_changed.emit)
        self._interface.on_node_reprocessed(self.node_reprocessed.emit)
        self.node_reprocessed.connect(self._on_node_reprocessed)

    @property
    def interface(self) -> FlowInterface:
        return self._interface

    def _emit_selection_changed(self, selection: Selection) -> None:
        self.selection_changed.emit(selection)

    @pyqtSlot(object)
    def _on_node_reprocessed(self, node: FlowElement) -> None:
        if node in self._interface.graph:
            self._interface.invalidate_node(node)

    # Event handlers
    def paintEvent(self, event: QPaintEvent) -> None:
        """Paint the dirty region."""
        painter = QPainter(self)
        try:
            painter.fillRect(event.rect(), self._background_color)
            self._surface.begin(painter)
            self._interface.paint(self._surface)
        finally:
            self._surface.end()
            painter.end()

    def mousePressEvent(self, event: QMouseEvent) -> None:
        button = self._BUTTONS.get(event.button())
        if button is None:
            super().mousePressEvent(event)
            return

        # A right press while a connector is armed only cancels the link
        was_armed = self._interface.controller.armed_connector is not None
        pos = event.position()
        self._interface.controller.pointer_down(int(pos.x()), int(pos.y()), button)
        if button is MouseButton.RIGHT and not was_armed:
            self.context_menu_requested.emit(event.globalPosition().toPoint())
        event.accept()

    def mouseMoveEvent(self, event: QMouseEvent) -> None:
        pos = event.position()
        self._interface.controller.pointer_move(int(pos.x()), int(pos.y()))
        event.accept()

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:
        button = self._BUTTONS.get(event.button())
        if button is None:
            super().mouseReleaseEvent(event)
            return

        pos = event.position()
        self._interface.controller.pointer_up(int(pos.x()), int(pos.y()), button)
        event.accept()

    def keyPressEvent(self, event: QKeyEvent) -> None:
        key = self._KEYS.get(event.key())
        if key is None or event.isAutoRepeat():
            super().keyPressEvent(event)
            return
        self._interface.controller.key_down(key)

    def keyReleaseEvent(self, event: QKeyEvent) -> None:
        key = self._KEYS.get(event.key())
        if key is None or event.isAutoRepeat():
            super().keyReleaseEvent(event)
            return
        self._interface.controller.key_up(key)

    def wheelEvent(self, event: QWheelEvent) -> None:
        """Zoom with the mouse wheel."""
        factor = self._interface.config.viewport.wheel_zoom_factor
        if event.angleDelta().y() < 0:
            factor = 1 / factor
        self._interface.set_zoom(self._interface.zoom * factor)
        event.accept()
