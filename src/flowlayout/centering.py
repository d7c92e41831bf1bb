"""
Horizontal centering of sibling groups.

A sibling group is the set of children one parent discovered on a level.
The group is laid out left to right in discovery order and shifted so that
the midpoint of its bounding box sits exactly under the parent's midpoint.
Children that already carry a caller position keep it and take no part in
the span calculation.
"""

from typing import List, Sequence

from .models import Node, Point
from .options import LayoutOptions
from .sizing import node_width


def level_y(level: int, options: LayoutOptions) -> float:
    """Y coordinate shared by every computed node on ``level``."""
    return options.start_y + level * options.level_height


def center_children(
    parent_center_x: float,
    children: Sequence[Node],
    y: float,
    level: int,
    horizontal_spacing: float = 280,
) -> List[Node]:
    """
    Position a sibling group under its parent.

    Args:
        parent_center_x: Horizontal center of the (positioned) parent.
        children: Children in discovery order.
        y: Y coordinate for the level.
        level: Level number recorded on every child.
        horizontal_spacing: Gap between neighbouring children.

    Returns:
        New Node objects, one per child, in the same order as ``children``.
    """
    widths = [node_width(child) for child in children]
    free = [i for i, child in enumerate(children) if not child.has_position]

    positions = {}
    if len(free) == 1:
        i = free[0]
        positions[i] = Point(parent_center_x - widths[i] / 2, y)
    elif free:
        group_width = sum(widths[i] for i in free)
        group_width += (len(free) - 1) * horizontal_spacing

        # Group center aligns with parent center
        current_x = parent_center_x - group_width / 2
        for i in free:
            positions[i] = Point(current_x, y)
            current_x += widths[i] + horizontal_spacing

    placed = []
    for i, child in enumerate(children):
        placed.append(
            child.copy_with(
                position=positions.get(i, child.position),
                level=level,
                width=widths[i],
            )
        )
    return placed
