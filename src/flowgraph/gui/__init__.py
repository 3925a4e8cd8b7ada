"""
Qt front end for the flow graph editor.
"""

from flowgraph.gui.flow_canvas import FlowCanvas, QPainterSurface

__all__ = ["FlowCanvas", "QPainterSurface"]
