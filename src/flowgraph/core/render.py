"""
Render surface interface.

The controller never paints directly. It asks a surface to mark screen
rectangles dirty and, when the host repaints, to draw each node, the
pending-connection preview line and the marquee.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from flowgraph.core.geometry import Point, Rect

if TYPE_CHECKING:
    from flowgraph.core.viewport import Viewport
    from flowgraph.nodes.flow_element import FlowElement


class RenderSurface(ABC):
    """Abstract paint and invalidation backend."""

    @abstractmethod
    def draw_node(self, node: "FlowElement", viewport: "Viewport", highlighted: bool) -> None:
        """Draw a node, its connectors and the links they store."""
        pass

    @abstractmethod
    def draw_preview_line(self, start: Point, end: Point) -> None:
        """Draw the pending-connection line (screen space)."""
        pass

    @abstractmethod
    def draw_marquee(self, rect: Rect) -> None:
        """Draw the selection marquee (screen space, normalized)."""
        pass

    @abstractmethod
    def invalidate(self, rect: Rect) -> None:
        """Mark a normalized screen rectangle for repaint."""
        pass

    @abstractmethod
    def invalidate_all(self) -> None:
        """Mark the whole surface for repaint."""
        pass
