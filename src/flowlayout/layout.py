"""
Layout orchestration.

Runs the full pipeline over a flowchart graph:

1. levels - pick the root and sweep breadth-first (levels.py)
2. positions - size each node and center sibling groups (sizing.py, centering.py)
3. ports - place port anchors on every node (ports.py)
4. edges - resolve edge endpoints from the anchors (edges.py)

Also provides two measurement helpers for sizing a containing canvas.
Nothing here mutates its inputs; every returned node and edge is a new object.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from .centering import center_children, level_y
from .edges import resolve_edges
from .export import layout_to_dict
from .levels import LevelAssignment, assign_levels
from .models import Edge, Graph, Node, Point
from .options import (
    CANVAS_BOTTOM_MARGIN,
    DEFAULT_NODE_WIDTH,
    MIN_CANVAS_WIDTH,
    LayoutOptions,
)
from .parser import parse_graph
from .ports import resolve_ports
from .sizing import node_width
from .tracer import Diagnostic, DiagnosticCode, LayoutTrace

OptionsLike = Union[LayoutOptions, Mapping[str, Any], None]
GraphLike = Union[Graph, Mapping[str, Any], str, bytes]


@dataclass
class LayoutResult:
    """
    Result of a full layout pass.

    Attributes:
        nodes: Positioned nodes with resolved ports, root first.
        edges: Edges with resolved anchors, in input order.
        root_id: Id of the chosen root, None if the layout is empty.
        diagnostics: Advisory messages raised during the pass.
    """

    nodes: List[Node] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)
    root_id: Optional[str] = None
    diagnostics: List[Diagnostic] = field(default_factory=list)

    def get_node(self, node_id: str) -> Optional[Node]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Chart data dict: ``{"nodes": [...], "edges": [...]}``."""
        return layout_to_dict(self)


def _coerce_options(options: OptionsLike) -> LayoutOptions:
    if options is None:
        return LayoutOptions()
    if isinstance(options, LayoutOptions):
        return options
    return LayoutOptions.from_mapping(options)


def _unique_nodes(nodes: Sequence[Node], trace: LayoutTrace) -> List[Node]:
    """Drop repeated ids, keeping the first occurrence."""
    seen = set()
    unique = []
    for node in nodes:
        if node.id in seen:
            trace.warn(
                DiagnosticCode.DUPLICATE_NODE,
                f"Duplicate node id {node.id}; keeping the first occurrence",
                node_id=node.id,
            )
            continue
        seen.add(node.id)
        unique.append(node)
    return unique


def _place_free_node(node: Node, level: int, options: LayoutOptions) -> Node:
    """Place a node on ``level`` at the default center column."""
    width = node_width(node)
    position = node.position
    if position is None:
        position = Point(options.center_x - width / 2, level_y(level, options))
    return node.copy_with(position=position, level=level, width=width)


def place_nodes(
    nodes: Sequence[Node],
    assignment: LevelAssignment,
    options: LayoutOptions,
    trace: Optional[LayoutTrace] = None,
) -> List[Node]:
    """
    Turn a level assignment into positioned nodes.

    The root goes to the default center column on level 0. Each sibling
    group is centered under its parent, level by level. A group whose parent
    has no position is skipped; those children, along with the orphans of
    the assignment, are placed at the fallback level in the center column.

    Returns:
        Positioned nodes: root, then level by level in discovery order, then
        fallback nodes in input order.
    """
    trace = trace if trace is not None else LayoutTrace()
    if assignment.is_empty:
        return []

    by_id: Dict[str, Node] = {}
    for node in nodes:
        by_id.setdefault(node.id, node)

    positioned: Dict[str, Node] = {}
    root = by_id[assignment.root_id]
    positioned[root.id] = _place_free_node(root, 0, options)

    for level in range(1, len(assignment.groups)):
        y = level_y(level, options)
        for parent_id, child_ids in assignment.groups[level].items():
            parent = positioned.get(parent_id)
            if parent is None or parent.position is None:
                trace.warn(
                    DiagnosticCode.PARENT_UNPOSITIONED,
                    f"Parent node {parent_id} not found or has no position",
                    node_id=parent_id,
                )
                continue

            children = [by_id[c] for c in child_ids if c not in positioned]
            for child in center_children(
                parent.center_x, children, y, level, options.horizontal_spacing
            ):
                positioned[child.id] = child

    for node in nodes:
        if node.id not in positioned:
            positioned[node.id] = _place_free_node(
                node, assignment.fallback_level, options
            )

    return list(positioned.values())


def _levels_and_positions(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    options: LayoutOptions,
    trace: LayoutTrace,
) -> Tuple[LevelAssignment, List[Node]]:
    unique = _unique_nodes(nodes, trace)
    assignment = assign_levels(unique, edges, options.root_policy, trace)
    trace.add_stage(
        "levels",
        {
            "root": assignment.root_id,
            "levels": dict(assignment.levels),
            "orphans": list(assignment.orphans),
        },
    )

    positioned = place_nodes(unique, assignment, options, trace)
    trace.add_stage(
        "positions",
        {n.id: (n.position.x, n.position.y, n.width) for n in positioned},
    )
    return assignment, positioned


def assign_levels_and_positions(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    options: OptionsLike = None,
    trace: Optional[LayoutTrace] = None,
) -> List[Node]:
    """
    Position nodes without resolving ports or edges.

    Args:
        nodes: Nodes in input order.
        edges: Edges in input order.
        options: LayoutOptions, a mapping of option values, or None.
        trace: Where to record diagnostics.

    Returns:
        Positioned nodes with level and width set, or an empty list when no
        root can be chosen.
    """
    trace = trace if trace is not None else LayoutTrace()
    _, positioned = _levels_and_positions(
        nodes, edges, _coerce_options(options), trace
    )
    return positioned


def layout(
    graph: GraphLike,
    options: OptionsLike = None,
    trace: Optional[LayoutTrace] = None,
) -> LayoutResult:
    """
    Lay out a whole flowchart.

    Args:
        graph: A Graph, or chart data (a mapping or JSON text with "nodes"
            and "edges") which is parsed first.
        options: LayoutOptions, a mapping of option values, or None.
        trace: Where to record diagnostics and stage snapshots.

    Returns:
        LayoutResult with positioned nodes, resolved ports and edges.

    Raises:
        ParseError: If chart data cannot be turned into a Graph.
        ValueError: If the options are invalid.
    """
    if not isinstance(graph, Graph):
        graph = parse_graph(graph)
    options = _coerce_options(options)
    trace = trace if trace is not None else LayoutTrace()

    assignment, positioned = _levels_and_positions(
        graph.nodes, graph.edges, options, trace
    )
    if assignment.is_empty:
        return LayoutResult(diagnostics=list(trace.diagnostics))

    nodes_with_ports = [
        node.copy_with(
            ports=resolve_ports(node, node.ports, options.node_height, trace)
        )
        for node in positioned
    ]
    trace.add_stage(
        "ports",
        {
            n.id: [(p.id, p.position.x, p.position.y) for p in n.ports]
            for n in nodes_with_ports
        },
    )

    edges = resolve_edges(graph.edges, nodes_with_ports, trace)
    trace.add_stage(
        "edges",
        {
            "resolved": sum(1 for e in edges if e.is_resolved),
            "total": len(edges),
        },
    )

    return LayoutResult(
        nodes=nodes_with_ports,
        edges=edges,
        root_id=assignment.root_id,
        diagnostics=list(trace.diagnostics),
    )


def measure_height(nodes: Sequence[Node], options: OptionsLike = None) -> float:
    """Canvas height needed for already-positioned ``nodes``."""
    options = _coerce_options(options)
    max_level = max([node.level or 0 for node in nodes] + [0])
    return (
        options.start_y
        + (max_level + 1) * options.level_height
        + CANVAS_BOTTOM_MARGIN
    )


def measure_width(nodes: Sequence[Node], options: OptionsLike = None) -> float:
    """
    Canvas width needed for already-positioned ``nodes``.

    Based on the most crowded level, never below MIN_CANVAS_WIDTH.
    """
    options = _coerce_options(options)
    level_counts = Counter(node.level or 0 for node in nodes)
    max_nodes_at_level = max(list(level_counts.values()) + [1])
    total_width = (
        max_nodes_at_level - 1
    ) * options.horizontal_spacing + DEFAULT_NODE_WIDTH
    return max(total_width, MIN_CANVAS_WIDTH)


class FlowchartLayout:
    """
    Lay out flowcharts with a fixed set of options.

    Example:
        >>> engine = FlowchartLayout(horizontal_spacing=200)
        >>> result = engine.layout({
        ...     "nodes": [{"id": "start", "type": "trigger"}, {"id": "a"}],
        ...     "edges": [{"from": {"nodeId": "start"}, "to": {"nodeId": "a"}}],
        ... })
        >>> result.get_node("a").level
        1
    """

    def __init__(
        self,
        node_height: float = 120,
        node_spacing: float = 100,
        start_y: float = 80,
        center_x: float = 400,
        horizontal_spacing: float = 280,
        root_policy: str = "first",
        debug: bool = False,
    ):
        """
        Initialize the layout engine.

        Args:
            node_height: Rendered node height.
            node_spacing: Vertical gap between levels.
            start_y: Y coordinate of level 0.
            center_x: Horizontal anchor for the root and disconnected nodes.
            horizontal_spacing: Gap between siblings on the same level.
            root_policy: "first" or "strict", see RootPolicy.
            debug: Keep stage snapshots of the last run (see get_trace()).

        Raises:
            ValueError: If any option is invalid.
        """
        self.options = LayoutOptions(
            node_height=node_height,
            node_spacing=node_spacing,
            start_y=start_y,
            center_x=center_x,
            horizontal_spacing=horizontal_spacing,
            root_policy=root_policy,
        )
        self.debug = debug
        self._trace: Optional[LayoutTrace] = None

    def layout(self, graph: GraphLike) -> LayoutResult:
        """Lay out ``graph`` with this engine's options."""
        trace = LayoutTrace(record_stages=self.debug)
        result = layout(graph, self.options, trace)
        self._trace = trace if self.debug else None
        return result

    def get_trace(self) -> Optional[LayoutTrace]:
        """Trace of the last layout() call, or None when debug is off."""
        return self._trace

    def measure_height(self, nodes: Sequence[Node]) -> float:
        return measure_height(nodes, self.options)

    def measure_width(self, nodes: Sequence[Node]) -> float:
        return measure_width(nodes, self.options)
