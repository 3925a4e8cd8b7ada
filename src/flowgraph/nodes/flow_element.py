"""
Base Flow Element Class for flowgraph

A flow element is a positioned rectangle on the canvas that owns its input
and output connectors. Node types subclass FlowElement, declare their
connectors in a NodeDefinition and override the collaborator hooks:
- get_inspectable_object() for property inspection
- on_property_updated() after an inspected property changed
- on_reprocess_requested() when the reprocessing worker reaches the node
- on_deserialized() once the node is attached to a host after loading
"""

import logging
import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterator, List, Optional

from flowgraph.core.geometry import Point, Rect
from flowgraph.core.types import Direction
from flowgraph.nodes.connector import ConnectorDefinition, FlowConnector

if TYPE_CHECKING:
    from flowgraph.core.flow_interface import FlowInterface

logger = logging.getLogger(__name__)


@dataclass
class NodeDefinition:
    """Definition of a node type."""
    name: str
    description: str = ""
    inputs: List[ConnectorDefinition] = field(default_factory=list)
    outputs: List[ConnectorDefinition] = field(default_factory=list)
    width: int = 120
    height: int = 80


@dataclass
class CachedImage:
    """
    A rendered image cached by a node type.

    data is whatever the render backend draws (a QImage for the Qt canvas);
    the core only reads the dimensions.
    """
    data: Any
    width: int
    height: int


class FlowElement:
    """
    Base class for all nodes placed on the canvas.

    Provides:
    - Position, size and title
    - Connector construction and layout
    - Paint, title and invalidation regions
    - No-op collaborator hooks for node types to override
    """

    # Class-level definition (override in subclasses)
    definition: NodeDefinition = NodeDefinition(name="FlowElement")

    TITLE_HEIGHT = 20

    # Border around the node image; the title bar sits above it
    IMAGE_BORDER = 1

    def __init__(self, title: Optional[str] = None, x: int = 0, y: int = 0):
        """Initialize the element at (x, y) in model space."""
        self._id: str = str(uuid.uuid4())
        self._title = title if title is not None else self.definition.name
        self._x = x
        self._y = y
        self._width = self.definition.width
        self._height = self.definition.height
        self.processing_disabled = False

        self._image: Any = None
        self._additional_information: Optional[CachedImage] = None

        self._inputs: List[FlowConnector] = [
            FlowConnector.from_definition(d, Direction.INPUT, self._id)
            for d in self.definition.inputs
        ]
        self._outputs: List[FlowConnector] = [
            FlowConnector.from_definition(d, Direction.OUTPUT, self._id)
            for d in self.definition.outputs
        ]
        self._layout_connectors()

    @property
    def id(self) -> str:
        """Element ID."""
        return self._id

    @property
    def name(self) -> str:
        """Node type name."""
        return self.definition.name

    @property
    def title(self) -> str:
        return self._title

    @title.setter
    def title(self, value: str) -> None:
        self._title = value

    @property
    def x(self) -> int:
        return self._x

    @x.setter
    def x(self, value: int) -> None:
        self.move_to(value, self._y)

    @property
    def y(self) -> int:
        return self._y

    @y.setter
    def y(self, value: int) -> None:
        self.move_to(self._x, value)

    @property
    def position(self) -> Point:
        return Point(self._x, self._y)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def resize(self, width: int, height: int) -> None:
        """Change the node size; outputs follow the right edge."""
        self._width = width
        self._height = height
        self._layout_connectors()

    @property
    def image_width(self) -> int:
        """Width available to the node image inside the border."""
        return self._width - self.IMAGE_BORDER * 2

    @image_width.setter
    def image_width(self, value: int) -> None:
        self.resize(value + self.IMAGE_BORDER * 2, self._height)

    @property
    def image_height(self) -> int:
        """Height available to the node image below the title bar."""
        return self._height - self.TITLE_HEIGHT - self.IMAGE_BORDER * 2

    @image_height.setter
    def image_height(self, value: int) -> None:
        self.resize(self._width, value + self.TITLE_HEIGHT + self.IMAGE_BORDER * 2)

    @property
    def image(self) -> Any:
        """Backend image drawn inside the node body, or None."""
        return self._image

    @image.setter
    def image(self, value: Any) -> None:
        self._image = value

    @property
    def additional_information(self) -> Optional[CachedImage]:
        """Cached auxiliary image drawn below the node body."""
        return self._additional_information

    def set_additional_information(self, image: Optional[CachedImage]) -> None:
        """
        Replace the cached auxiliary image.

        Node types refresh it from on_reprocess_requested(); it is assumed
        unchanged between reprocessing passes.
        """
        self._additional_information = image

    @property
    def input_connectors(self) -> List[FlowConnector]:
        return list(self._inputs)

    @property
    def output_connectors(self) -> List[FlowConnector]:
        return list(self._outputs)

    def connectors(self) -> Iterator[FlowConnector]:
        """All connectors, inputs first."""
        yield from self._inputs
        yield from self._outputs

    def get_connector_index(self, connector: FlowConnector) -> int:
        """
        Ordinal of a connector within its own input or output list.

        Raises:
            ValueError: If the connector does not belong to this element
        """
        connectors = self._inputs if connector.is_input else self._outputs
        for index, candidate in enumerate(connectors):
            if candidate is connector:
                return index
        raise ValueError(f"Connector {connector.name!r} does not belong to node {self._id}")

    # Geometry

    def move_to(self, x: int, y: int) -> None:
        """Place the element's origin at (x, y) in model space."""
        self._x = x
        self._y = y
        self._layout_connectors()

    def translate(self, dx: int, dy: int) -> None:
        self.move_to(self._x + dx, self._y + dy)

    def _row_pitch(self) -> int:
        return FlowConnector.SIZE + FlowConnector.PADDING * 2

    def _connector_stack_height(self) -> int:
        rows = max(len(self._inputs), len(self._outputs))
        if rows == 0:
            return 0
        return self.TITLE_HEIGHT + FlowConnector.PADDING + rows * self._row_pitch()

    def _layout_connectors(self) -> None:
        """Anchor inputs left of the body and outputs right of it."""
        size = FlowConnector.SIZE
        pad = FlowConnector.PADDING
        first_row = self._y + self.TITLE_HEIGHT + pad + size // 2
        input_x = self._x - pad - size // 2
        output_x = self._x + self._width + pad + size // 2

        for index, connector in enumerate(self._inputs):
            connector._set_center(Point(input_x, first_row + index * self._row_pitch()))
        for index, connector in enumerate(self._outputs):
            connector._set_center(Point(output_x, first_row + index * self._row_pitch()))

    def region_bounds(self) -> Rect:
        """Paint and hit-test box."""
        return Rect(self._x, self._y, self._width, self._height)

    def title_bar_bounds(self) -> Rect:
        """Top strip of the node."""
        return Rect(self._x, self._y, self._width, self.TITLE_HEIGHT)

    def invalidation_bounds(self) -> Rect:
        """
        Everything that must be repainted when this element changes.

        Expands the region outward by the widest input and output labels
        and downward by the connector stack and the auxiliary image.
        """
        size = FlowConnector.SIZE
        pad = FlowConnector.PADDING
        widest_input = max((c.invalidation_width for c in self._inputs), default=0)
        widest_output = max((c.invalidation_width for c in self._outputs), default=0)

        height = max(self._height, self._connector_stack_height())
        if self._additional_information is not None:
            height += self._additional_information.height

        return Rect(
            self._x - pad * 2 - size - widest_input,
            self._y,
            self._width + (pad * 3 + size) * 2 + widest_input + widest_output,
            height,
        )

    def connector_regions_to_invalidate(self) -> Iterator[Rect]:
        """Small per-connector regions, inputs first."""
        for connector in self._inputs:
            yield from connector.connector_regions_to_invalidate()
        for connector in self._outputs:
            yield from connector.connector_regions_to_invalidate()

    # Collaborator hooks

    def get_inspectable_object(self) -> Any:
        """Object shown in the host's property inspector, or None."""
        return None

    def on_property_updated(self) -> None:
        """Called after the host changed a property of the inspected object."""
        pass

    def on_reprocess_requested(self) -> None:
        """
        Recompute the node's content.

        Runs on the reprocessing worker thread; must not touch UI state.
        """
        pass

    def on_deserialized(self, host: "FlowInterface") -> None:
        """Called when a loaded node is attached to a host interface."""
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._title!r}, x={self._x}, y={self._y})"
