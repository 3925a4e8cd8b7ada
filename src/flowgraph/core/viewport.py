"""
Viewport - zoom factor and screen/model coordinate conversion.

Pointer events arrive in screen space and are divided by the zoom to reach
model space. Model rectangles are multiplied by the zoom and normalized
before being invalidated, since the paint backend does not accept negative
extents.
"""

import logging

from flowgraph.core.geometry import Point, Rect

logger = logging.getLogger(__name__)


class Viewport:
    """Zoom state for one canvas."""

    def __init__(self, min_zoom: float = 0.1, max_zoom: float = 10.0, zoom: float = 1.0):
        self._min_zoom = min_zoom
        self._max_zoom = max_zoom
        self._zoom = zoom if min_zoom <= zoom <= max_zoom else 1.0

    @property
    def min_zoom(self) -> float:
        return self._min_zoom

    @property
    def max_zoom(self) -> float:
        return self._max_zoom

    @property
    def zoom(self) -> float:
        return self._zoom

    @zoom.setter
    def zoom(self, value: float) -> None:
        self.set_zoom(value)

    def set_zoom(self, value: float) -> bool:
        """
        Change the zoom factor.

        Out-of-range values are ignored without error.

        Returns:
            True if the zoom changed
        """
        if not self._min_zoom <= value <= self._max_zoom:
            logger.debug(f"Ignoring zoom {value} outside [{self._min_zoom}, {self._max_zoom}]")
            return False
        self._zoom = value
        return True

    def to_model_point(self, point: Point) -> Point:
        return Point(int(point.x / self._zoom), int(point.y / self._zoom))

    def to_screen_point(self, point: Point) -> Point:
        return point.scaled(self._zoom)

    def to_model_rect(self, rect: Rect) -> Rect:
        return rect.normalized().scaled(1 / self._zoom)

    def to_screen_rect(self, rect: Rect) -> Rect:
        return rect.scaled(self._zoom).normalized()

    def to_model_delta(self, dx: int, dy: int) -> Point:
        """Convert a screen-space movement into model pixels."""
        return Point(int(dx / self._zoom), int(dy / self._zoom))
