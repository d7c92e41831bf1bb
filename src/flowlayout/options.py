"""
Layout configuration.

This module holds the tunable layout options and the fixed geometry constants
that mirror how a flowchart front-end draws its nodes and ports. Options are
plain keyword arguments on LayoutOptions; the constants describe rendered
sizes that the layout has to agree with and are not meant to be tuned per
call.

Classes:
    RootPolicy: How to choose between several root candidates.
    LayoutOptions: Spacing and anchor options for one layout pass.
"""

import math
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Dict, Mapping

# Node sizing
DEFAULT_NODE_WIDTH = 200
PORT_SLOT_WIDTH = 120  # Width budget per output port when sizing a node
NODE_WIDTH_PADDING = 40

# Port strip, matching the rendered port blocks under a node
PORT_BLOCK_WIDTH = 60
PORT_BLOCK_GAP = 12
PORT_BLOCK_HEIGHT = 32
INPUT_PORT_INSET = 10

# Node-level fallback anchors for edges
EDGE_ANCHOR_OFFSET = 60

# Canvas measurement
CANVAS_BOTTOM_MARGIN = 80
MIN_CANVAS_WIDTH = 800

TRIGGER_TYPE = "trigger"


class RootPolicy(str, Enum):
    """Resolution policy when more than one node qualifies as root."""

    FIRST = "first"  # First candidate in input order, with a diagnostic
    STRICT = "strict"  # Refuse to pick; the layout comes back empty


# camelCase spellings used by chart data coming from front-end code
_OPTION_ALIASES = {
    "nodeHeight": "node_height",
    "nodeSpacing": "node_spacing",
    "startY": "start_y",
    "centerX": "center_x",
    "horizontalSpacing": "horizontal_spacing",
    "rootPolicy": "root_policy",
}


@dataclass(frozen=True)
class LayoutOptions:
    """
    Options for a layout pass.

    Attributes:
        node_height: Rendered node height, used for level spacing and port anchors.
        node_spacing: Vertical gap between levels.
        start_y: Y coordinate of level 0.
        center_x: Horizontal anchor for the root and for disconnected nodes.
        horizontal_spacing: Gap between siblings on the same level.
        root_policy: What to do when several nodes qualify as root.
    """

    node_height: float = 120
    node_spacing: float = 100
    start_y: float = 80
    center_x: float = 400
    horizontal_spacing: float = 280
    root_policy: RootPolicy = RootPolicy.FIRST

    def __post_init__(self):
        for name in ("node_height", "node_spacing", "horizontal_spacing"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"{name} must be a number, got {value!r}")
            if not math.isfinite(value):
                raise ValueError(f"{name} must be finite, got {value!r}")
            if value < 0:
                raise ValueError(f"{name} must not be negative, got {value!r}")
        for name in ("start_y", "center_x"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"{name} must be a number, got {value!r}")
            if not math.isfinite(value):
                raise ValueError(f"{name} must be finite, got {value!r}")

        try:
            policy = RootPolicy(self.root_policy)
        except ValueError:
            raise ValueError(
                "root_policy must be 'first' or 'strict', "
                f"got {self.root_policy!r}"
            ) from None
        # Frozen dataclass: normalise plain strings to the enum
        object.__setattr__(self, "root_policy", policy)

    @property
    def level_height(self) -> float:
        """Distance between the tops of two consecutive levels."""
        return self.node_height + self.node_spacing

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> "LayoutOptions":
        """
        Build options from a mapping with snake_case or camelCase keys.

        Raises:
            ValueError: If a key is not a known option.
        """
        known = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, value in options.items():
            name = _OPTION_ALIASES.get(key, key)
            if name not in known:
                raise ValueError(f"Unknown layout option: {key!r}")
            kwargs[name] = value
        return cls(**kwargs)
