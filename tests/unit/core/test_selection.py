"""
Tests for flowgraph.core.selection module.
"""

from unittest.mock import MagicMock

from flowgraph.core.selection import Selection


class TestSelection:
    """Tests for Selection."""

    def test_starts_empty(self, selection):
        assert selection.is_empty
        assert selection.primary is None
        assert len(selection) == 0

    def test_set_single_sets_primary(self, selection, make_node):
        node = make_node()

        selection.set_single(node)

        assert selection.nodes == (node,)
        assert selection.primary is node

    def test_set_single_none_clears(self, selection, make_node):
        selection.set_single(make_node())

        selection.set_single(None)

        assert selection.is_empty
        assert selection.primary is None

    def test_replace_with_many_has_no_primary(self, selection, make_node):
        a, b = make_node(), make_node()

        selection.replace([a, b])

        assert selection.nodes == (a, b)
        assert selection.primary is None

    def test_replace_removes_duplicates(self, selection, make_node):
        """Test that a node appears at most once."""
        node = make_node()

        selection.replace([node, node, node])

        assert len(selection) == 1
        assert selection.primary is node

    def test_contains_uses_identity(self, selection, make_node):
        a, b = make_node(), make_node()
        selection.set_single(a)

        assert a in selection
        assert b not in selection

    def test_discard(self, selection, make_node):
        a, b = make_node(), make_node()
        selection.replace([a, b])

        selection.discard(a)

        assert selection.nodes == (b,)

    def test_discard_down_to_one_sets_primary(self, selection, make_node):
        """Test that the last remaining node becomes the primary selection."""
        a, b = make_node(), make_node()
        selection.replace([a, b])
        callback = MagicMock()
        selection.on_changed(callback)

        selection.discard(a)

        assert selection.primary is b
        callback.assert_called_once_with(selection)

    def test_discard_primary_clears_primary(self, selection, make_node):
        node = make_node()
        selection.set_single(node)

        selection.discard(node)

        assert selection.primary is None
        assert selection.is_empty


class TestSelectionNotifications:
    """Tests for selection-changed callbacks."""

    def test_callback_on_change(self, selection, make_node):
        callback = MagicMock()
        selection.on_changed(callback)

        selection.set_single(make_node())

        callback.assert_called_once_with(selection)

    def test_no_callback_when_unchanged(self, selection, make_node):
        """Test that replacing with the same content is silent."""
        a, b = make_node(), make_node()
        selection.replace([a, b])
        callback = MagicMock()
        selection.on_changed(callback)

        selection.replace([b, a])
        selection.discard(make_node())

        callback.assert_not_called()

    def test_clear_empty_selection_is_silent(self, selection):
        callback = MagicMock()
        selection.on_changed(callback)

        selection.clear()

        callback.assert_not_called()

    def test_failing_callback_does_not_block_others(self, selection, make_node):
        failing = MagicMock(side_effect=RuntimeError("boom"))
        healthy = MagicMock()
        selection.on_changed(failing)
        selection.on_changed(healthy)

        selection.set_single(make_node())

        healthy.assert_called_once()

    def test_new_instance_has_no_callbacks(self):
        """Test that callbacks are per instance."""
        first = Selection()
        first.on_changed(MagicMock())

        assert Selection()._changed_callbacks == []
