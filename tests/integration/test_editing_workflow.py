"""
Integration tests for editing workflows.

Tests complete user workflows from placing nodes through linking them and
background reprocessing with a running worker.
"""

import time

from flowgraph.core.config import FlowGraphConfig
from flowgraph.core.flow_interface import FlowInterface
from flowgraph.core.geometry import Point
from flowgraph.core.types import InteractionMode, Key, MouseButton
from flowgraph.nodes.basic_nodes import ConstantNode, PreviewNode, SumNode
from helpers import RecordingSurface, SampleNode

WAIT_TIMEOUT = 5.0


def _click(interface, point, button=MouseButton.LEFT):
    interface.controller.pointer_down(point.x, point.y, button)
    interface.controller.pointer_up(point.x, point.y, button)


def _wait_for(predicate, timeout=WAIT_TIMEOUT):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return predicate()


class TestEditingWorkflow:
    """Integration tests driving the editor like a user would."""

    def test_place_link_and_reprocess(self):
        """Test complete workflow: place, link, reprocess, rearrange."""
        config = FlowGraphConfig()
        config.queue.idle_interval = 0.001
        surface = RecordingSurface()
        interface = FlowInterface(surface, config)
        interface.start()
        try:
            # 1. Place nodes through the context menu location
            placed = []
            for location, node in [
                (Point(20, 20), ConstantNode(4.0)),
                (Point(20, 150), ConstantNode(6.0)),
                (Point(250, 60), SumNode()),
            ]:
                _click(interface, location, MouseButton.RIGHT)
                placed.append(interface.add_node_at_last_context_location(node))
                node.on_deserialized(interface)
            first, second, total = placed

            assert first.position == Point(20, 20)
            assert len(interface.graph) == 3

            # 2. Link both constants into the sum by clicking connectors
            _click(interface, first.output_connectors[0].center)
            _click(interface, total.input_connectors[0].center)
            _click(interface, total.input_connectors[1].center)
            _click(interface, second.output_connectors[0].center)

            assert first.output_connectors[0].linked_to == (total.input_connectors[0],)
            assert total.input_connectors[1].linked_to == (second.output_connectors[0],)

            # 3. The worker recomputes the sum after the links were made
            assert _wait_for(lambda: total.value == 10.0)

            # 4. Drag the sum node somewhere else
            interface.controller.pointer_down(total.x + 5, total.y + 5)
            interface.controller.pointer_move(total.x + 55, total.y + 25)
            interface.controller.pointer_up(total.x + 5, total.y + 5)

            assert total.position == Point(300, 80)
            assert interface.controller.mode is InteractionMode.IDLE
        finally:
            interface.shutdown()

        assert not interface.queue.is_running

    def test_marquee_then_group_drag_then_delete(self, interface):
        """Test selecting a group, moving it, and deleting it."""
        a = interface.add_node(SampleNode(), 0, 0)
        b = interface.add_node(SampleNode(), 150, 30)
        far = interface.add_node(SampleNode(), 600, 600)
        controller = interface.controller

        controller.key_down(Key.SHIFT)
        controller.pointer_down(5, 5)
        controller.pointer_move(200, 60)
        controller.key_up(Key.SHIFT)

        assert set(interface.selection.nodes) == {a, b}
        assert interface.selected_element is None

        controller.pointer_down(10, 10)
        controller.pointer_move(30, 40)
        controller.pointer_up(30, 40)

        assert a.position == Point(20, 30)
        assert b.position == Point(170, 60)
        assert far.position == Point(600, 600)

        controller.key_down(Key.DELETE)

        assert interface.graph.nodes == [far]

    def test_rewiring_an_input(self, interface):
        """An input follows whichever output it was linked to last."""
        left = interface.add_node(ConstantNode(1.0), 0, 0)
        right = interface.add_node(ConstantNode(2.0), 0, 200)
        sink = interface.add_node(PreviewNode(), 300, 100)
        target = sink.input_connectors[0]

        _click(interface, left.output_connectors[0].center)
        _click(interface, target.center)
        _click(interface, target.center)
        _click(interface, right.output_connectors[0].center)

        assert target.linked_to == (right.output_connectors[0],)
        assert left.output_connectors[0].linked_to == ()
        assert interface.graph.peers_of(target) == [right.output_connectors[0]]

    def test_zoomed_editing(self, interface):
        """Hit-testing and placement follow the zoom factor."""
        node = interface.add_node(SampleNode(), 100, 100)
        assert interface.set_zoom(0.5)

        interface.controller.pointer_down(55, 55)
        interface.controller.pointer_move(65, 60)
        interface.controller.pointer_up(65, 60)

        assert node.position == Point(120, 110)

        _click(interface, Point(10, 10), MouseButton.RIGHT)
        placed = interface.add_node_at_last_context_location(SampleNode())

        assert placed.position == Point(20, 20)
