"""
Test doubles shared by the unit and integration tests.
"""

from typing import List, Tuple

from flowgraph.core.geometry import Point, Rect
from flowgraph.core.render import RenderSurface
from flowgraph.nodes.connector import ConnectorDefinition
from flowgraph.nodes.flow_element import FlowElement, NodeDefinition


class RecordingSurface(RenderSurface):
    """RenderSurface that records every call instead of painting."""

    def __init__(self):
        self.invalidated: List[Rect] = []
        self.full_invalidations = 0
        self.drawn_nodes: List[Tuple[FlowElement, bool]] = []
        self.preview_lines: List[Tuple[Point, Point]] = []
        self.marquees: List[Rect] = []

    def draw_node(self, node, viewport, highlighted):
        self.drawn_nodes.append((node, highlighted))

    def draw_preview_line(self, start, end):
        self.preview_lines.append((start, end))

    def draw_marquee(self, rect):
        self.marquees.append(rect)

    def invalidate(self, rect):
        self.invalidated.append(rect)

    def invalidate_all(self):
        self.full_invalidations += 1

    def reset(self):
        self.invalidated.clear()
        self.full_invalidations = 0


class SampleNode(FlowElement):
    """Concrete node with one input and one output for testing."""

    definition = NodeDefinition(
        name="Sample",
        inputs=[ConnectorDefinition(name="in", type_tag="number")],
        outputs=[ConnectorDefinition(name="out", type_tag="number")],
        width=100,
        height=50,
    )

    def __init__(self, title=None, x=0, y=0):
        super().__init__(title, x, y)
        self.reprocess_calls = 0
        self.property_updates = 0

    def on_reprocess_requested(self):
        self.reprocess_calls += 1

    def on_property_updated(self):
        self.property_updates += 1

    def get_inspectable_object(self):
        return {"title": self.title}


class TextNode(FlowElement):
    """Node whose connectors use an incompatible type tag."""

    definition = NodeDefinition(
        name="Text",
        inputs=[ConnectorDefinition(name="text", type_tag="string")],
        outputs=[ConnectorDefinition(name="text", type_tag="string")],
    )


class BareNode(FlowElement):
    """Node without any connectors."""

    definition = NodeDefinition(name="Bare", width=60, height=40)
