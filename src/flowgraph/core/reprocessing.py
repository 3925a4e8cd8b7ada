"""
Reprocessing Queue - background recomputation of dirty nodes.

Nodes whose inputs or properties changed are pushed from the interaction
thread. A single daemon worker pops them most-recent-first and calls each
node's on_reprocess_requested() hook. A node already waiting is not queued
again, so bursts of edits collapse into one pass.

Observers are called on the worker thread. GUI code must marshal them back
to its own thread (FlowCanvas does so with Qt signals).
"""

import logging
import threading
import time
from typing import Callable, List, Optional, Tuple

from flowgraph.nodes.flow_element import FlowElement

logger = logging.getLogger(__name__)


class PendingStack:
    """Thread-safe LIFO of distinct nodes."""

    def __init__(self):
        self._items: List[FlowElement] = []
        self._lock = threading.Lock()

    def push(self, node: FlowElement) -> Optional[int]:
        """
        Push a node unless it is already pending.

        Returns:
            The new depth, or None if the node was already present
        """
        with self._lock:
            if any(item is node for item in self._items):
                return None
            self._items.append(node)
            return len(self._items)

    def pop(self) -> Optional[Tuple[FlowElement, int]]:
        """Pop the most recent node together with the remaining depth."""
        with self._lock:
            if not self._items:
                return None
            node = self._items.pop()
            return node, len(self._items)

    def __contains__(self, node: object) -> bool:
        with self._lock:
            return any(item is node for item in self._items)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


class ReprocessingQueue:
    """
    Deduplicating work queue with one daemon consumer.

    Stopping does not drain pending work; whatever is left is dropped with
    the process.
    """

    def __init__(self, idle_interval: float = 0.01, join_timeout: float = 2.0):
        self._pending = PendingStack()
        self._idle_interval = idle_interval
        self._join_timeout = join_timeout

        self._worker: Optional[threading.Thread] = None
        self._stop_event: Optional[threading.Event] = None

        # Workers that outlived their join timeout; a new worker waits for them
        self._lingering: List[threading.Thread] = []

        # Callbacks
        self._depth_callbacks: List[Callable[[int], None]] = []
        self._processed_callbacks: List[Callable[[FlowElement], None]] = []

    @property
    def depth(self) -> int:
        """Number of nodes waiting."""
        return len(self._pending)

    @property
    def is_running(self) -> bool:
        return self._stop_event is not None and not self._stop_event.is_set()

    def __contains__(self, node: object) -> bool:
        return node in self._pending

    def on_depth_changed(self, callback: Callable[[int], None]) -> None:
        """Register callback for queue depth changes."""
        self._depth_callbacks.append(callback)

    def on_processed(self, callback: Callable[[FlowElement], None]) -> None:
        """Register callback invoked after a node was reprocessed."""
        self._processed_callbacks.append(callback)

    def push(self, node: FlowElement) -> bool:
        """
        Queue a node for reprocessing.

        Args:
            node: Node to reprocess

        Returns:
            True if queued, False if it was already pending

        Raises:
            ValueError: If node is None
        """
        if node is None:
            raise ValueError("node must not be None")

        depth = self._pending.push(node)
        if depth is None:
            logger.debug(f"Node {node.id} already pending reprocessing")
            return False

        self._notify_depth(depth)
        return True

    def process_next(self) -> bool:
        """
        Reprocess the most recently pushed node.

        Returns:
            True if a node was popped, False if nothing was pending
        """
        popped = self._pending.pop()
        if popped is None:
            return False

        node, depth = popped
        self._notify_depth(depth)

        if node.processing_disabled:
            logger.debug(f"Skipping reprocessing of disabled node {node.id}")
            return True

        try:
            node.on_reprocess_requested()
        except Exception as e:
            logger.exception(f"Reprocessing failed for node {node.title} ({node.id}): {e}")
            return True

        for callback in self._processed_callbacks:
            try:
                callback(node)
            except Exception as e:
                logger.error(f"Processed callback error: {e}")
        return True

    def start(self) -> None:
        """Start the worker thread."""
        if self.is_running:
            return

        stop_event = threading.Event()
        self._lingering = [t for t in self._lingering if t.is_alive()]

        self._stop_event = stop_event
        self._worker = threading.Thread(
            target=self._worker_loop,
            args=(stop_event, list(self._lingering)),
            daemon=True,
            name="FlowReprocessing",
        )
        self._worker.start()
        logger.info("Reprocessing worker started")

    def stop(self) -> None:
        """Stop the worker without draining pending nodes."""
        if not self.is_running:
            return

        self._stop_event.set()
        worker = self._worker
        self._worker = None

        if worker is not None and worker is not threading.current_thread():
            worker.join(timeout=self._join_timeout)
            if worker.is_alive():
                logger.warning(
                    f"Reprocessing worker still busy after {self._join_timeout}s; "
                    f"it exits once the current node returns"
                )
                self._lingering.append(worker)
        logger.info("Reprocessing worker stopped")

    def _worker_loop(self, stop_event: threading.Event, previous: List[threading.Thread]) -> None:
        """Background thread draining the pending stack."""
        # Only one consumer at a time: wait out workers that missed their join
        for thread in previous:
            while thread.is_alive() and not stop_event.is_set():
                thread.join(self._idle_interval)

        logger.debug("Reprocessing loop started")
        while not stop_event.is_set():
            if self.process_next():
                # Let producers and observers interleave between items
                time.sleep(0)
            else:
                stop_event.wait(self._idle_interval)
        logger.debug("Reprocessing loop exited")

    def _notify_depth(self, depth: int) -> None:
        for callback in self._depth_callbacks:
            try:
                callback(depth)
            except Exception as e:
                logger.error(f"Depth callback error: {e}")
