"""
Flow Connector - typed, directional attachment point on a node.

Links are stored on the connector that initiated them: an output keeps the
inputs it feeds, an input keeps the single output feeding it. The graph
module owns the rules that keep both sides consistent; this module only
holds the bookkeeping and geometry.
"""

import uuid
from dataclasses import dataclass
from typing import Iterator, List, Tuple

from flowgraph.core.geometry import Point, Rect
from flowgraph.core.types import Direction


@dataclass
class ConnectorDefinition:
    """Definition of a connector on a node type."""
    name: str
    type_tag: str = "value"
    description: str = ""


class FlowConnector:
    """
    A connector owned by a flow element.

    The owning node is referenced by id only; resolve it through
    FlowGraph.owner_of().
    """

    # Socket glyph dimensions (model pixels)
    SIZE = 8
    PADDING = 2

    # Approximate label advance per character, for invalidation only
    LABEL_CHAR_WIDTH = 6

    def __init__(
        self,
        name: str,
        direction: Direction,
        type_tag: str = "value",
        node_id: str = "",
    ):
        self._id = str(uuid.uuid4())
        self._name = name
        self._direction = direction
        self._type_tag = type_tag
        self._node_id = node_id
        self._center = Point(0, 0)
        self._linked_to: List["FlowConnector"] = []

    @classmethod
    def from_definition(
        cls, definition: ConnectorDefinition, direction: Direction, node_id: str
    ) -> "FlowConnector":
        return cls(definition.name, direction, definition.type_tag, node_id)

    @property
    def id(self) -> str:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    def direction(self) -> Direction:
        return self._direction

    @property
    def is_input(self) -> bool:
        return self._direction is Direction.INPUT

    @property
    def is_output(self) -> bool:
        return self._direction is Direction.OUTPUT

    @property
    def type_tag(self) -> str:
        return self._type_tag

    @property
    def node_id(self) -> str:
        """Id of the owning node."""
        return self._node_id

    @property
    def center(self) -> Point:
        """Anchor point in model space."""
        return self._center

    @property
    def linked_to(self) -> Tuple["FlowConnector", ...]:
        """Connectors this one stores a link to, in link order."""
        return tuple(self._linked_to)

    @property
    def invalidation_width(self) -> int:
        """How far the label extends beyond the socket glyph."""
        return len(self._name) * self.LABEL_CHAR_WIDTH

    def can_connect_to(self, other: "FlowConnector") -> bool:
        """
        Whether this connector accepts a link with other.

        Both sides must approve a link independently; subclasses may narrow
        the rule further (e.g. to accept a family of type tags).
        """
        if other is self:
            return False
        if other.direction is self._direction:
            return False
        if self._node_id and other.node_id == self._node_id:
            return False
        return other.type_tag == self._type_tag

    def glyph_region(self) -> Rect:
        """The socket itself, centred on the anchor."""
        half = self.SIZE // 2
        return Rect(self._center.x - half, self._center.y - half, self.SIZE, self.SIZE)

    def region(self) -> Rect:
        """Socket glyph plus its label, drawn away from the node body."""
        glyph = self.glyph_region()
        label_width = self.invalidation_width
        if self.is_input:
            return Rect(
                glyph.x - self.PADDING - label_width,
                glyph.y,
                glyph.width + self.PADDING + label_width,
                glyph.height,
            )
        return Rect(glyph.x, glyph.y, glyph.width + self.PADDING + label_width, glyph.height)

    def connector_regions_to_invalidate(self) -> Iterator[Rect]:
        """Socket region, then one padded box per stored link line."""
        yield self.region()
        for other in self._linked_to:
            yield Rect.from_points(self._center, other.center).padded(self.SIZE + self.PADDING)

    # Bookkeeping used by the owning node and FlowGraph

    def _set_center(self, center: Point) -> None:
        self._center = center

    def _append_link(self, other: "FlowConnector") -> None:
        if other not in self._linked_to:
            self._linked_to.append(other)

    def _remove_link(self, other: "FlowConnector") -> None:
        self._linked_to = [c for c in self._linked_to if c is not other]

    def _replace_links(self, others: List["FlowConnector"]) -> None:
        self._linked_to = []
        for other in others:
            self._append_link(other)

    def __repr__(self) -> str:
        return f"FlowConnector({self._name!r}, {self._direction.value}, node={self._node_id[:8]})"
