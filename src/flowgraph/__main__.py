"""
flowgraph Demo Entry Point

Opens a canvas with a few sample nodes.

Usage:
    python -m flowgraph                 # Demo graph with default settings
    python -m flowgraph --debug         # Verbose interaction logging
    python -m flowgraph --config path   # Load settings from a JSON file
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable

from PyQt6.QtCore import QPoint
from PyQt6.QtWidgets import QApplication, QMenu

from flowgraph.core.config import FlowGraphConfig, set_config
from flowgraph.core.flow_interface import FlowInterface
from flowgraph.gui.flow_canvas import FlowCanvas
from flowgraph.nodes.basic_nodes import ConstantNode, PreviewNode, SumNode
from flowgraph.nodes.flow_element import FlowElement

# Configure logging before the editor starts
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[
        logging.StreamHandler(sys.stdout),
    ],
)

logger = logging.getLogger("flowgraph")


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="flowgraph",
        description="flowgraph - interactive node-graph editor demo",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        help="Load configuration from a JSON file",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args()


def setup_logging(debug: bool = False) -> None:
    """Configure logging level."""
    level = logging.DEBUG if debug else logging.INFO
    logging.getLogger("flowgraph").setLevel(level)

    if debug:
        for name in ["flowgraph.core", "flowgraph.nodes", "flowgraph.gui"]:
            logging.getLogger(name).setLevel(logging.DEBUG)


def build_demo_graph(interface: FlowInterface) -> None:
    """Populate the editor with two constants feeding a sum."""
    first = ConstantNode(2.0, x=60, y=60)
    second = ConstantNode(3.0, x=60, y=180)
    total = SumNode(x=280, y=100)
    preview = PreviewNode(x=480, y=110)
    interface.restore_nodes([first, second, total, preview])

    for node in (first, second):
        node.on_property_updated()

    graph = interface.graph
    graph.connect(first.output_connectors[0], total.input_connectors[0])
    graph.connect(second.output_connectors[0], total.input_connectors[1])
    graph.connect(total.output_connectors[0], preview.input_connectors[0])
    interface.push_for_reprocessing(total)


def show_add_menu(canvas: FlowCanvas, global_pos: QPoint) -> None:
    """Offer the sample node types at the context-click location."""
    interface = canvas.interface

    def add(factory: Callable[[], FlowElement]) -> Callable[[], None]:
        def _add() -> None:
            node = interface.add_node_at_last_context_location(factory())
            node.on_deserialized(interface)
        return _add

    menu = QMenu(canvas)
    add_menu = menu.addMenu("Add Node")
    add_menu.addAction("Constant", add(ConstantNode))
    add_menu.addAction("Sum", add(SumNode))
    add_menu.addAction("Preview", add(PreviewNode))
    menu.exec(global_pos)


def main() -> int:
    """Main entry point."""
    args = parse_args()
    setup_logging(args.debug)

    config = FlowGraphConfig.load(args.config) if args.config else FlowGraphConfig.load()
    set_config(config)

    logger.info("Starting flowgraph demo...")

    app = QApplication(sys.argv)
    app.setApplicationName("flowgraph")

    interface = FlowInterface(config=config)
    canvas = FlowCanvas(interface)
    canvas.setWindowTitle("flowgraph")
    canvas.resize(config.ui.default_window_width, config.ui.default_window_height)
    canvas.context_menu_requested.connect(lambda pos: show_add_menu(canvas, pos))
    canvas.queue_depth_changed.connect(
        lambda depth: canvas.setWindowTitle(f"flowgraph ({depth} pending)" if depth else "flowgraph")
    )

    build_demo_graph(interface)
    interface.start()
    canvas.show()

    try:
        return app.exec()
    finally:
        interface.shutdown()


if __name__ == "__main__":
    sys.exit(main())
