"""Node width estimation."""

from .models import Node
from .options import DEFAULT_NODE_WIDTH, NODE_WIDTH_PADDING, PORT_SLOT_WIDTH


def node_width(node: Node) -> float:
    """
    Rendered width of a node, derived from its output port count.

    Nodes with zero or one output port use the default width. Wider nodes
    reserve a fixed slot per output port plus padding, never narrower than
    the default.
    """
    output_count = len(node.output_ports) if node.ports else 0
    if output_count <= 1:
        return DEFAULT_NODE_WIDTH
    return max(DEFAULT_NODE_WIDTH, output_count * PORT_SLOT_WIDTH + NODE_WIDTH_PADDING)
