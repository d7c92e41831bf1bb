"""
flowlayout - top-down flowchart layout

Computes screen coordinates for a flowchart of nodes, ports and edges: a
breadth-first level per node, sibling groups centered under their parent,
port anchors on node boundaries, and edge endpoints derived from them.

Example:
    >>> from flowlayout import layout
    >>> result = layout({
    ...     "nodes": [
    ...         {"id": "start", "type": "trigger"},
    ...         {"id": "step", "ports": [{"id": "in", "direction": "in"}]},
    ...     ],
    ...     "edges": [
    ...         {"from": {"nodeId": "start"}, "to": {"nodeId": "step", "portId": "in"}},
    ...     ],
    ... })
    >>> result.get_node("step").position
    Point(x=300.0, y=300)

Debug Mode Example:
    >>> engine = FlowchartLayout(debug=True)
    >>> result = engine.layout({"nodes": [{"id": "a"}], "edges": []})
    >>> print(engine.get_trace().summary())
"""

from loguru import logger

from .centering import center_children, level_y
from .edges import resolve_edges, resolve_source_anchor, resolve_target_anchor
from .export import LayoutExporter, layout_to_dict
from .layout import (
    FlowchartLayout,
    LayoutResult,
    assign_levels_and_positions,
    layout,
    measure_height,
    measure_width,
    place_nodes,
)
from .levels import LevelAssignment, assign_levels, select_root
from .models import (
    Anchor,
    AnchorKind,
    Edge,
    Endpoint,
    Graph,
    Node,
    Point,
    Port,
    PortDirection,
)
from .options import LayoutOptions, RootPolicy
from .parser import ParseError, Parser, parse_graph
from .ports import resolve_ports
from .sizing import node_width
from .tracer import Diagnostic, DiagnosticCode, LayoutTrace, PipelineStage

# Library code stays quiet unless the application opts in
logger.disable("flowlayout")

__version__ = "0.3.0"

__all__ = [
    # Main API
    "layout",
    "FlowchartLayout",
    "LayoutResult",
    "assign_levels_and_positions",
    "measure_height",
    "measure_width",
    "place_nodes",
    # Options
    "LayoutOptions",
    "RootPolicy",
    # Models
    "Point",
    "Port",
    "PortDirection",
    "Node",
    "Endpoint",
    "Edge",
    "Graph",
    "Anchor",
    "AnchorKind",
    # Stages
    "node_width",
    "assign_levels",
    "select_root",
    "LevelAssignment",
    "center_children",
    "level_y",
    "resolve_ports",
    "resolve_edges",
    "resolve_source_anchor",
    "resolve_target_anchor",
    # Chart data
    "Parser",
    "ParseError",
    "parse_graph",
    "layout_to_dict",
    "LayoutExporter",
    # Diagnostics
    "Diagnostic",
    "DiagnosticCode",
    "LayoutTrace",
    "PipelineStage",
]
