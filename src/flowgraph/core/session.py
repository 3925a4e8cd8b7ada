"""
Interaction session values.

The controller holds exactly one of these at a time and replaces it whole on
every transition, so two gestures can never be active together.
"""

from dataclasses import dataclass, field
from typing import Dict, Union

from flowgraph.core.geometry import Point, Rect
from flowgraph.core.types import InteractionMode
from flowgraph.nodes.connector import FlowConnector


@dataclass(frozen=True)
class Idle:
    mode = InteractionMode.IDLE


@dataclass(frozen=True)
class Dragging:
    """Nodes follow the pointer, each keeping its press offset."""

    # node id -> pointer position minus node origin, in model space
    offsets: Dict[str, Point] = field(default_factory=dict)

    @property
    def mode(self) -> InteractionMode:
        if len(self.offsets) > 1:
            return InteractionMode.DRAGGING_MANY
        return InteractionMode.DRAGGING_ONE


@dataclass(frozen=True)
class Panning:
    # Screen position the last pan step was measured from
    anchor: Point
    mode = InteractionMode.PANNING


@dataclass(frozen=True)
class ConnectingArmed:
    connector: FlowConnector
    mode = InteractionMode.CONNECTING_ARMED


@dataclass(frozen=True)
class Marqueeing:
    start: Point
    end: Point
    mode = InteractionMode.MARQUEEING

    @property
    def rect(self) -> Rect:
        """Screen-space marquee, normalized."""
        return Rect.from_points(self.start, self.end).normalized()


Session = Union[Idle, Dragging, Panning, ConnectingArmed, Marqueeing]
