"""
Integer geometry used for hit-testing and invalidation.

Model and screen coordinates are both whole pixels. Converting between them
multiplies by the zoom factor and truncates toward zero, the same way every
caller in the editor rounds.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Point:
    """A point in model or screen space."""
    x: int
    y: int

    def __add__(self, other: "Point") -> "Point":
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Point") -> "Point":
        return Point(self.x - other.x, self.y - other.y)

    def scaled(self, factor: float) -> "Point":
        """Multiply both coordinates by factor, truncating."""
        return Point(int(self.x * factor), int(self.y * factor))


@dataclass(frozen=True)
class Rect:
    """
    Axis-aligned rectangle.

    Width and height may be negative while a rectangle is being built from
    two arbitrary corners; call normalized() before handing it to anything
    that paints or invalidates.
    """
    x: int
    y: int
    width: int
    height: int

    @classmethod
    def from_points(cls, start: Point, end: Point) -> "Rect":
        """Rectangle spanning start to end, not normalized."""
        return cls(start.x, start.y, end.x - start.x, end.y - start.y)

    @property
    def left(self) -> int:
        return self.x

    @property
    def top(self) -> int:
        return self.y

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    def normalized(self) -> "Rect":
        """Flip negative extents in place, keeping the covered area."""
        x, y, width, height = self.x, self.y, self.width, self.height
        if width < 0:
            x += width
            width = -width
        if height < 0:
            y += height
            height = -height
        return Rect(x, y, width, height)

    def scaled(self, factor: float) -> "Rect":
        """Multiply every component by factor, truncating."""
        return Rect(
            int(self.x * factor),
            int(self.y * factor),
            int(self.width * factor),
            int(self.height * factor),
        )

    def padded(self, margin: int) -> "Rect":
        """Normalize, then grow outward by margin on every side."""
        r = self.normalized()
        return Rect(r.x - margin, r.y - margin, r.width + margin * 2, r.height + margin * 2)

    def translated(self, dx: int, dy: int) -> "Rect":
        return Rect(self.x + dx, self.y + dy, self.width, self.height)

    def contains_point(self, point: Point) -> bool:
        """Half-open containment: the right and bottom edges are outside."""
        return self.x <= point.x < self.right and self.y <= point.y < self.bottom

    def contains_rect(self, other: "Rect") -> bool:
        """Whether other lies entirely inside this rectangle."""
        a = self.normalized()
        b = other.normalized()
        return a.x <= b.x and a.y <= b.y and b.right <= a.right and b.bottom <= a.bottom

    def intersects(self, other: "Rect") -> bool:
        """Strict overlap; rectangles that only touch do not intersect."""
        return (
            other.x < self.right
            and self.x < other.right
            and other.y < self.bottom
            and self.y < other.bottom
        )

    def united(self, other: "Rect") -> "Rect":
        """Smallest rectangle covering both (normalized)."""
        a = self.normalized()
        b = other.normalized()
        left = min(a.x, b.x)
        top = min(a.y, b.y)
        right = max(a.right, b.right)
        bottom = max(a.bottom, b.bottom)
        return Rect(left, top, right - left, bottom - top)
