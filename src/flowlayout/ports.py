"""
Port anchor placement.

Anchors follow how a node is drawn: a single input port sits at the top
center, output ports hang below the node in a centered strip of fixed-width
port blocks. All coordinates are absolute.
"""

from typing import List, Optional, Sequence

from .models import Node, Point, Port
from .options import (
    DEFAULT_NODE_WIDTH,
    INPUT_PORT_INSET,
    PORT_BLOCK_GAP,
    PORT_BLOCK_HEIGHT,
    PORT_BLOCK_WIDTH,
)
from .tracer import DiagnosticCode, LayoutTrace


def output_strip_centers(center_x: float, count: int) -> List[float]:
    """
    Horizontal centers of ``count`` output port blocks centered on ``center_x``.

    Same centering rule as sibling groups, but every block has the fixed
    PORT_BLOCK_WIDTH and the gap is PORT_BLOCK_GAP.
    """
    if count <= 0:
        return []
    strip_width = count * PORT_BLOCK_WIDTH + (count - 1) * PORT_BLOCK_GAP
    start_x = center_x - strip_width / 2
    return [
        start_x + i * (PORT_BLOCK_WIDTH + PORT_BLOCK_GAP) + PORT_BLOCK_WIDTH / 2
        for i in range(count)
    ]


def resolve_ports(
    node: Node,
    ports: Optional[Sequence[Port]] = None,
    node_height: float = 120,
    trace: Optional[LayoutTrace] = None,
) -> List[Port]:
    """
    Compute the absolute anchor of every port on a node.

    Args:
        node: A positioned node.
        ports: Ports to place; defaults to ``node.ports``.
        node_height: Rendered node height.
        trace: Where to record diagnostics.

    Returns:
        New Port objects with ``position`` set, in input order. Trigger nodes
        have no ports, so they always get an empty list. A node without a
        position also gets an empty list and a diagnostic.
    """
    trace = trace if trace is not None else LayoutTrace()
    if ports is None:
        ports = node.ports

    if node.is_trigger:
        return []

    if node.position is None:
        trace.warn(
            DiagnosticCode.NODE_UNPOSITIONED,
            f"Node {node.id} has no valid position",
            node_id=node.id,
        )
        return []

    center_x = node.position.x + (node.width or DEFAULT_NODE_WIDTH) / 2
    input_y = node.position.y - node_height / 2 + INPUT_PORT_INSET
    output_y = node.position.y + node_height / 2 + PORT_BLOCK_HEIGHT

    outputs = [p for p in ports if not p.is_input]
    if len(outputs) == 1:
        output_xs = [center_x]
    else:
        output_xs = output_strip_centers(center_x, len(outputs))

    placed: List[Port] = []
    output_index = 0
    for port in ports:
        if port.is_input:
            point = Point(center_x, input_y)
        else:
            point = Point(output_xs[output_index], output_y)
            output_index += 1
        placed.append(port.copy_with(position=point))
    return placed
