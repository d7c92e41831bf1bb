"""
Edge endpoint resolution.

Each end of an edge is resolved through an ordered fallback chain:

1. The named port on a non-trigger node, if it has a position (RESOLVED).
2. The node-center anchor: 60px below the node's y for the source end,
   60px above it for the target end (FALLBACK).

Edges from a trigger node always use the node-center anchor on both ends,
since triggers have no ports. An edge whose nodes are missing or not
positioned keeps no geometry and produces a diagnostic; other edges are not
affected.
"""

from typing import Dict, List, Optional, Sequence

from .models import Anchor, Edge, Endpoint, Node, Point
from .options import DEFAULT_NODE_WIDTH, EDGE_ANCHOR_OFFSET
from .tracer import DiagnosticCode, LayoutTrace


def _node_center_x(node: Node) -> float:
    return node.position.x + (node.width or DEFAULT_NODE_WIDTH) / 2


def source_fallback_point(node: Node) -> Point:
    """Node-level anchor for an edge leaving ``node``."""
    return Point(_node_center_x(node), node.position.y + EDGE_ANCHOR_OFFSET)


def target_fallback_point(node: Node) -> Point:
    """Node-level anchor for an edge entering ``node``."""
    return Point(_node_center_x(node), node.position.y - EDGE_ANCHOR_OFFSET)


def _port_point(node: Node, endpoint: Endpoint) -> Optional[Point]:
    if not node.ports or endpoint.port_id is None:
        return None
    port = node.get_port(endpoint.port_id)
    if port is None:
        return None
    return port.position


def resolve_source_anchor(node: Optional[Node], endpoint: Endpoint) -> Anchor:
    """Anchor for the start of an edge leaving ``node`` through ``endpoint``."""
    if node is None or node.position is None:
        return Anchor.unresolved()
    if not node.is_trigger:
        point = _port_point(node, endpoint)
        if point is not None:
            return Anchor.resolved(point)
    return Anchor.fallback(source_fallback_point(node))


def resolve_target_anchor(
    node: Optional[Node], endpoint: Endpoint, from_trigger: bool = False
) -> Anchor:
    """
    Anchor for the end of an edge entering ``node`` through ``endpoint``.

    ``from_trigger`` skips port lookup: edges out of a trigger node are drawn
    center to center.
    """
    if node is None or node.position is None:
        return Anchor.unresolved()
    if not from_trigger:
        point = _port_point(node, endpoint)
        if point is not None:
            return Anchor.resolved(point)
    return Anchor.fallback(target_fallback_point(node))


def resolve_edges(
    edges: Sequence[Edge],
    positioned_nodes: Sequence[Node],
    trace: Optional[LayoutTrace] = None,
) -> List[Edge]:
    """
    Compute start and end anchors for every edge.

    Args:
        edges: Edges in input order.
        positioned_nodes: Nodes with positions and resolved port anchors.
        trace: Where to record diagnostics.

    Returns:
        One edge per input edge, in order. Resolvable edges are copies with
        ``from_anchor``/``to_anchor`` set; unresolvable ones are copies
        with both anchors cleared.
    """
    trace = trace if trace is not None else LayoutTrace()

    by_id: Dict[str, Node] = {}
    for node in positioned_nodes:
        by_id.setdefault(node.id, node)

    resolved: List[Edge] = []
    for index, edge in enumerate(edges):
        from_node = by_id.get(edge.source.node_id)
        to_node = by_id.get(edge.target.node_id)

        if from_node is None or to_node is None:
            trace.warn(
                DiagnosticCode.MISSING_NODE,
                "Edge references non-existent node: "
                f"{edge.source.node_id} -> {edge.target.node_id}",
                edge_index=index,
            )
            resolved.append(edge.copy_with(from_anchor=None, to_anchor=None))
            continue

        if from_node.position is None or to_node.position is None:
            missing = from_node if from_node.position is None else to_node
            trace.warn(
                DiagnosticCode.NODE_UNPOSITIONED,
                f"Node missing position: {missing.id}",
                node_id=missing.id,
                edge_index=index,
            )
            resolved.append(edge.copy_with(from_anchor=None, to_anchor=None))
            continue

        from_anchor = resolve_source_anchor(from_node, edge.source)
        to_anchor = resolve_target_anchor(
            to_node, edge.target, from_trigger=from_node.is_trigger
        )

        for endpoint, anchor, node in (
            (edge.source, from_anchor, from_node),
            (edge.target, to_anchor, to_node),
        ):
            # Only report ports that were named but could not be used
            if (
                endpoint.port_id is not None
                and not anchor.is_exact
                and not node.is_trigger
                and not from_node.is_trigger
            ):
                trace.warn(
                    DiagnosticCode.UNKNOWN_PORT,
                    f"Port {endpoint.port_id} on node {node.id} has no anchor; "
                    "using node center",
                    node_id=node.id,
                    edge_index=index,
                )

        resolved.append(edge.copy_with(from_anchor=from_anchor, to_anchor=to_anchor))

    return resolved
