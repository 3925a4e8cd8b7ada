"""
Tests for flowgraph.core.graph module.

Tests node ownership, hit-testing and the connection protocol.
"""

import pytest

from flowgraph.core.geometry import Point, Rect
from flowgraph.core.graph import (
    DuplicateNodeError,
    FlowGraph,
    GraphError,
    NodeNotFoundError,
)
from helpers import BareNode, SampleNode, TextNode


def _add(graph, x=0, y=0, cls=SampleNode):
    return graph.add_node(cls(x=x, y=y))


class TestNodeManagement:
    """Tests for adding, removing and looking up nodes."""

    def test_add_node(self, graph):
        node = _add(graph)

        assert node in graph
        assert len(graph) == 1
        assert graph.get_node(node.id) is node

    def test_add_duplicate_raises(self, graph):
        node = _add(graph)

        with pytest.raises(DuplicateNodeError):
            graph.add_node(node)

    def test_nodes_keep_insertion_order(self, graph):
        a, b, c = _add(graph), _add(graph), _add(graph)

        assert graph.nodes == [a, b, c]
        assert list(graph) == [a, b, c]

    def test_get_missing_node_raises(self, graph):
        with pytest.raises(NodeNotFoundError):
            graph.get_node("missing")

    def test_node_not_found_is_key_error(self):
        """Test the error hierarchy used by callers."""
        assert issubclass(NodeNotFoundError, GraphError)
        assert issubclass(NodeNotFoundError, KeyError)
        assert issubclass(DuplicateNodeError, ValueError)

    def test_find_node_returns_none(self, graph):
        assert graph.find_node("missing") is None

    def test_remove_node(self, graph):
        node = _add(graph)

        graph.remove_node(node)

        assert node not in graph
        assert len(graph) == 0

    def test_remove_missing_node_raises(self, graph):
        with pytest.raises(NodeNotFoundError):
            graph.remove_node(SampleNode())

    def test_remove_node_severs_links(self, graph):
        upstream, downstream = _add(graph), _add(graph, 200)
        out, inp = upstream.output_connectors[0], downstream.input_connectors[0]
        graph.connect(out, inp)

        graph.remove_node(downstream)

        assert out.linked_to == ()
        assert graph.links() == []

    def test_owner_of(self, graph):
        node = _add(graph)

        assert graph.owner_of(node.input_connectors[0]) is node

    def test_get_connector_index(self, graph):
        node = graph.add_node(TextNode())

        assert FlowGraph.get_connector_index(node, node.output_connectors[0]) == 0

    def test_translate_all(self, graph):
        a, b = _add(graph, 0, 0), _add(graph, 100, 50)

        graph.translate_all(5, -5)

        assert a.position == Point(5, -5)
        assert b.position == Point(105, 45)


class TestHitTesting:
    """Tests for z-ordered hit-testing."""

    def test_node_at_returns_topmost(self, graph):
        bottom = _add(graph, 0, 0)
        top = _add(graph, 20, 20)

        assert graph.node_at(Point(30, 30)) is top
        assert graph.node_at(Point(5, 5)) is bottom

    def test_node_at_misses(self, graph):
        _add(graph, 0, 0)

        assert graph.node_at(Point(500, 500)) is None

    def test_nodes_intersecting(self, graph):
        a = _add(graph, 0, 0)
        b = _add(graph, 60, 20)
        _add(graph, 400, 400)

        hits = graph.nodes_intersecting(Rect(10, 10, 100, 100))

        assert hits == [b, a]

    def test_connectors_topmost_first(self, graph):
        bottom = _add(graph)
        top = _add(graph, 200)

        order = list(graph.connectors_topmost_first())

        assert order == [
            top.input_connectors[0],
            top.output_connectors[0],
            bottom.input_connectors[0],
            bottom.output_connectors[0],
        ]


class TestConnect:
    """Tests for the asymmetric connection protocol."""

    def test_output_fans_out(self, graph):
        """Connecting O to A then B keeps both links."""
        source = _add(graph)
        a_node, b_node = _add(graph, 200), _add(graph, 200, 200)
        o = source.output_connectors[0]
        a, b = a_node.input_connectors[0], b_node.input_connectors[0]

        assert graph.connect(o, a)
        assert graph.connect(o, b)

        assert set(o.linked_to) == {a, b}

    def test_output_links_are_deduplicated(self, graph):
        source, sink = _add(graph), _add(graph, 200)
        o, a = source.output_connectors[0], sink.input_connectors[0]

        graph.connect(o, a)
        graph.connect(o, a)

        assert o.linked_to == (a,)

    def test_input_replaces_upstream(self, graph):
        """Connecting input A to C afterwards drops A from O's links."""
        source, other_source = _add(graph), _add(graph, 0, 200)
        a_node, b_node = _add(graph, 200), _add(graph, 200, 200)
        o, c = source.output_connectors[0], other_source.output_connectors[0]
        a, b = a_node.input_connectors[0], b_node.input_connectors[0]
        graph.connect(o, a)
        graph.connect(o, b)

        assert graph.connect(a, c)

        assert a.linked_to == (c,)
        assert a not in o.linked_to
        assert o.linked_to == (b,)

    def test_input_replaces_its_own_stored_link(self, graph):
        first, second, sink = _add(graph), _add(graph, 0, 200), _add(graph, 200)
        a = sink.input_connectors[0]
        graph.connect(a, first.output_connectors[0])

        graph.connect(a, second.output_connectors[0])

        assert a.linked_to == (second.output_connectors[0],)
        assert graph.peers_of(first.output_connectors[0]) == []

    def test_same_direction_rejected(self, graph):
        """Two outputs or two inputs never link."""
        left, right = _add(graph), _add(graph, 200)
        sink = _add(graph, 400)
        graph.connect(left.output_connectors[0], sink.input_connectors[0])
        before_left = left.output_connectors[0].linked_to
        before_right = right.output_connectors[0].linked_to

        assert not graph.connect(left.output_connectors[0], right.output_connectors[0])
        assert not graph.connect(left.input_connectors[0], right.input_connectors[0])

        assert left.output_connectors[0].linked_to == before_left
        assert right.output_connectors[0].linked_to == before_right
        assert left.input_connectors[0].linked_to == ()
        assert right.input_connectors[0].linked_to == ()

    def test_type_mismatch_rejected(self, graph):
        number, text = _add(graph), _add(graph, 200, cls=TextNode)

        assert not graph.connect(number.output_connectors[0], text.input_connectors[0])
        assert number.output_connectors[0].linked_to == ()

    def test_same_node_rejected(self, graph):
        node = _add(graph)

        assert not graph.connect(node.output_connectors[0], node.input_connectors[0])

    def test_peers_of_sees_both_storage_sides(self, graph):
        source, sink = _add(graph), _add(graph, 200)
        o, a = source.output_connectors[0], sink.input_connectors[0]
        graph.connect(o, a)

        assert graph.peers_of(a) == [o]
        assert graph.peers_of(o) == [a]

    def test_links(self, graph):
        source, sink = _add(graph), _add(graph, 200)
        o, a = source.output_connectors[0], sink.input_connectors[0]
        graph.connect(o, a)

        assert graph.links() == [(o, a)]

    def test_disconnect(self, graph):
        source, sink = _add(graph), _add(graph, 200)
        o, a = source.output_connectors[0], sink.input_connectors[0]
        graph.connect(o, a)

        graph.disconnect(a)

        assert o.linked_to == ()
        assert a.linked_to == ()

    def test_bare_node_has_no_connectors(self, graph):
        node = _add(graph, cls=BareNode)

        assert list(node.connectors()) == []
        assert list(graph.connectors_topmost_first()) == []
