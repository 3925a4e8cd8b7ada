"""
Selection - the set of currently selected flow elements.
"""

import logging
from typing import Callable, Iterable, Iterator, List, Optional, Tuple

from flowgraph.nodes.flow_element import FlowElement

logger = logging.getLogger(__name__)


class Selection:
    """
    Duplicate-free set of selected nodes with an optional primary element.

    The primary element is the one offered for property inspection; it is
    set when exactly one node is selected.
    """

    def __init__(self):
        self._nodes: List[FlowElement] = []
        self._primary: Optional[FlowElement] = None
        self._changed_callbacks: List[Callable[["Selection"], None]] = []

    @property
    def primary(self) -> Optional[FlowElement]:
        return self._primary

    @property
    def nodes(self) -> Tuple[FlowElement, ...]:
        return tuple(self._nodes)

    @property
    def is_empty(self) -> bool:
        return not self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[FlowElement]:
        return iter(tuple(self._nodes))

    def __contains__(self, node: object) -> bool:
        return any(n is node for n in self._nodes)

    def on_changed(self, callback: Callable[["Selection"], None]) -> None:
        """Register callback for selection changes."""
        self._changed_callbacks.append(callback)

    def set_single(self, node: Optional[FlowElement]) -> None:
        """Select exactly one node, or clear the selection with None."""
        self.replace([] if node is None else [node])

    def replace(self, nodes: Iterable[FlowElement]) -> None:
        """Replace the selection; the primary is set only for a single node."""
        unique: List[FlowElement] = []
        for node in nodes:
            if not any(n is node for n in unique):
                unique.append(node)

        primary = unique[0] if len(unique) == 1 else None
        if self._same_as(unique) and primary is self._primary:
            return

        self._nodes = unique
        self._primary = primary
        self._notify()

    def discard(self, node: FlowElement) -> None:
        """Drop a node if selected (e.g. when it leaves the graph)."""
        if node in self:
            self.replace([n for n in self._nodes if n is not node])

    def clear(self) -> None:
        self.replace([])

    def _same_as(self, nodes: List[FlowElement]) -> bool:
        if len(nodes) != len(self._nodes):
            return False
        return all(node in self for node in nodes)

    def _notify(self) -> None:
        logger.debug(f"Selection changed: {len(self._nodes)} node(s)")
        for callback in self._changed_callbacks:
            try:
                callback(self)
            except Exception as e:
                logger.error(f"Selection callback error: {e}")
