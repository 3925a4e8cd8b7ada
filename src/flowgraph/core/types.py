"""
Centralized Type Definitions for flowgraph.

Enums shared by the graph model, the interaction controller and the Qt
adapter, so that none of them compare strings or raw toolkit constants.
"""

from enum import Enum, auto


class Direction(Enum):
    """Direction of a connector relative to its node."""
    INPUT = "input"
    OUTPUT = "output"

    @property
    def opposite(self) -> "Direction":
        """The direction a compatible peer must have."""
        return Direction.OUTPUT if self is Direction.INPUT else Direction.INPUT


class InteractionMode(Enum):
    """
    Mode of the interaction controller.

    Exactly one mode is active at a time; it is derived from the current
    session value rather than stored separately.
    """
    IDLE = auto()
    DRAGGING_ONE = auto()
    DRAGGING_MANY = auto()
    PANNING = auto()
    CONNECTING_ARMED = auto()
    MARQUEEING = auto()

    @property
    def is_dragging(self) -> bool:
        """Whether nodes are being dragged."""
        return self in (InteractionMode.DRAGGING_ONE, InteractionMode.DRAGGING_MANY)

    @property
    def holds_pointer(self) -> bool:
        """Whether a pointer button is held for the current gesture."""
        return self in (
            InteractionMode.DRAGGING_ONE,
            InteractionMode.DRAGGING_MANY,
            InteractionMode.PANNING,
            InteractionMode.MARQUEEING,
        )


class MouseButton(Enum):
    """Pointer buttons understood by the controller."""
    LEFT = auto()
    RIGHT = auto()
    MIDDLE = auto()


class Key(Enum):
    """Keys the controller reacts to."""
    SHIFT = auto()
    ESCAPE = auto()
    DELETE = auto()
