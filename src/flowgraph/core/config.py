"""
Centralized Configuration for flowgraph.

This module provides a single source of truth for the tolerances, margins
and timings used by the editor core and the Qt canvas.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)


@dataclass
class InteractionConfig:
    """Pointer interaction tolerances (screen pixels)."""

    # Side of the square pick box centred on the pointer for connector hits
    connector_pick_size: int = 16

    # Padding added around swept regions so stroke width is repainted
    marquee_padding: int = 10
    preview_line_padding: int = 10


@dataclass
class ViewportConfig:
    """Zoom limits and defaults."""

    min_zoom: float = 0.1
    max_zoom: float = 10.0
    initial_zoom: float = 1.0

    # Multiplier applied per mouse wheel notch
    wheel_zoom_factor: float = 1.15


@dataclass
class QueueConfig:
    """Reprocessing worker timings (seconds)."""

    # Sleep while the pending stack is empty
    idle_interval: float = 0.01

    thread_join_timeout: float = 2.0


@dataclass
class UIConfig:
    """Demo window settings."""

    default_window_width: int = 1024
    default_window_height: int = 768
    canvas_min_width: int = 400
    canvas_min_height: int = 300


@dataclass
class PathConfig:
    """Path-related configuration values."""

    user_config_dir: Path = field(default_factory=lambda: Path.home() / ".flowgraph")
    config_filename: str = "config.json"


@dataclass
class FlowGraphConfig:
    """Main configuration container for flowgraph."""

    interaction: InteractionConfig = field(default_factory=InteractionConfig)
    viewport: ViewportConfig = field(default_factory=ViewportConfig)
    queue: QueueConfig = field(default_factory=QueueConfig)
    ui: UIConfig = field(default_factory=UIConfig)
    paths: PathConfig = field(default_factory=PathConfig)

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "interaction": {
                "connector_pick_size": self.interaction.connector_pick_size,
                "marquee_padding": self.interaction.marquee_padding,
                "preview_line_padding": self.interaction.preview_line_padding,
            },
            "viewport": {
                "min_zoom": self.viewport.min_zoom,
                "max_zoom": self.viewport.max_zoom,
                "initial_zoom": self.viewport.initial_zoom,
                "wheel_zoom_factor": self.viewport.wheel_zoom_factor,
            },
            "queue": {
                "idle_interval": self.queue.idle_interval,
                "thread_join_timeout": self.queue.thread_join_timeout,
            },
            "ui": {
                "default_window_width": self.ui.default_window_width,
                "default_window_height": self.ui.default_window_height,
            },
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FlowGraphConfig":
        """Create configuration from dictionary, ignoring unknown keys."""
        config = cls()

        for section in ("interaction", "viewport", "queue", "ui"):
            if section not in data:
                continue
            target = getattr(config, section)
            for key, value in data[section].items():
                if hasattr(target, key):
                    setattr(target, key, value)

        return config

    def save(self, path: Optional[Path] = None) -> None:
        """Save configuration to file."""
        if path is None:
            path = self.paths.user_config_dir / self.paths.config_filename

        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

        logger.info(f"Configuration saved to {path}")

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "FlowGraphConfig":
        """Load configuration from file, using defaults if not found."""
        config = cls()

        if path is None:
            path = config.paths.user_config_dir / config.paths.config_filename

        if path.exists():
            try:
                with open(path) as f:
                    data = json.load(f)
                config = cls.from_dict(data)
                logger.info(f"Configuration loaded from {path}")
            except (OSError, ValueError, AttributeError) as e:
                logger.warning(f"Failed to load configuration from {path}: {e}")
                logger.info("Using default configuration")

        return config


# Global configuration instance - lazy loaded
_config: Optional[FlowGraphConfig] = None


def get_config() -> FlowGraphConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = FlowGraphConfig.load()
    return _config


def set_config(config: Optional[FlowGraphConfig]) -> None:
    """Set (or with None, reset) the global configuration instance."""
    global _config
    _config = config
