"""
Level assignment using networkx.

Uses networkx for:
- Graph representation (a MultiDiGraph keyed by edge index)
- In-degree lookups for root selection
- Ordered successor iteration for the breadth-first sweep

The flow is treated as a tree rooted at one entry node. A node reachable
through several edges belongs to whichever parent discovers it first during
the breadth-first sweep (first writer wins); later edges into it are still
drawn but do not re-parent it. Nodes the sweep never reaches are placed one
level below the deepest reached level.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import networkx as nx

from .models import Edge, Node
from .options import RootPolicy
from .tracer import DiagnosticCode, LayoutTrace


@dataclass
class LevelAssignment:
    """
    Result of level assignment.

    Attributes:
        root_id: Id of the chosen root, or None if no root could be chosen.
        levels: Maps node id to its level.
        parents: Maps node id to the id of the node that discovered it
            (None for the root and for disconnected nodes).
        groups: ``groups[level]`` maps each parent id to the children it
            discovered on that level, in discovery order. ``groups[0]`` is empty.
        orphans: Ids of nodes never reached from the root, in input order.
        max_level: Deepest level reached by the sweep (orphans excluded).
    """

    root_id: Optional[str] = None
    levels: Dict[str, int] = field(default_factory=dict)
    parents: Dict[str, Optional[str]] = field(default_factory=dict)
    groups: List[Dict[str, List[str]]] = field(default_factory=list)
    orphans: List[str] = field(default_factory=list)
    max_level: int = 0

    @property
    def fallback_level(self) -> int:
        """Level used for nodes the sweep did not reach."""
        return self.max_level + 1

    @property
    def is_empty(self) -> bool:
        return self.root_id is None


def build_graph(nodes: Sequence[Node], edges: Sequence[Edge]) -> nx.MultiDiGraph:
    """
    Build a networkx graph of the flowchart.

    Nodes are added in input order, edges keyed by their index in the input
    list. Edges pointing at ids that are not in ``nodes`` are kept (networkx
    adds a bare node for them) so they still count as incoming edges.
    """
    graph = nx.MultiDiGraph()
    for node in nodes:
        if node.id not in graph:
            graph.add_node(node.id, known=True)
    for index, edge in enumerate(edges):
        graph.add_edge(edge.source.node_id, edge.target.node_id, key=index)
    return graph


def select_root(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    policy: RootPolicy = RootPolicy.FIRST,
    trace: Optional[LayoutTrace] = None,
    graph: Optional[nx.MultiDiGraph] = None,
) -> Optional[Node]:
    """
    Choose the entry node of the flow.

    Trigger-typed nodes win; otherwise any node without incoming edges
    qualifies. With several candidates the FIRST policy takes the first in
    input order, the STRICT policy takes none.
    """
    trace = trace if trace is not None else LayoutTrace()
    if graph is None:
        graph = build_graph(nodes, edges)

    candidates = [n for n in nodes if n.is_trigger]
    if not candidates:
        candidates = [n for n in nodes if graph.in_degree(n.id) == 0]

    if not candidates:
        trace.warn(DiagnosticCode.NO_ROOT, "No root node found")
        return None

    if len(candidates) > 1:
        ids = ", ".join(n.id for n in candidates)
        if policy == RootPolicy.STRICT:
            trace.warn(
                DiagnosticCode.AMBIGUOUS_ROOT,
                f"Several root candidates ({ids}); strict policy picks none",
            )
            return None
        trace.warn(
            DiagnosticCode.AMBIGUOUS_ROOT,
            f"Several root candidates ({ids}); using {candidates[0].id}",
            node_id=candidates[0].id,
        )

    return candidates[0]


def assign_levels(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    policy: RootPolicy = RootPolicy.FIRST,
    trace: Optional[LayoutTrace] = None,
) -> LevelAssignment:
    """
    Assign every node to a level by breadth-first sweep from the root.

    Args:
        nodes: Nodes in input order. Ids are expected to be unique.
        edges: Edges in input order; their order decides sibling order.
        policy: Root selection policy.
        trace: Where to record diagnostics.

    Returns:
        LevelAssignment. Empty (no root) when there are no nodes or no root
        can be chosen.
    """
    trace = trace if trace is not None else LayoutTrace()
    result = LevelAssignment()

    if not nodes:
        trace.warn(DiagnosticCode.EMPTY_GRAPH, "Graph has no nodes")
        return result

    graph = build_graph(nodes, edges)
    root = select_root(nodes, edges, policy, trace, graph)
    if root is None:
        return result

    result.root_id = root.id
    result.levels[root.id] = 0
    result.parents[root.id] = None
    result.groups.append({})

    frontier = [root.id]
    level = 0
    while frontier:
        level_groups: Dict[str, List[str]] = {}
        next_frontier: List[str] = []

        for parent_id in frontier:
            children: List[str] = []
            for _, target_id in graph.out_edges(parent_id):
                if not graph.nodes[target_id].get("known"):
                    continue
                if target_id in result.levels:
                    continue
                result.levels[target_id] = level + 1
                result.parents[target_id] = parent_id
                children.append(target_id)
            if children:
                level_groups[parent_id] = children
                next_frontier.extend(children)

        if not next_frontier:
            break

        level += 1
        result.groups.append(level_groups)
        frontier = next_frontier

    result.max_level = level

    seen = set()
    for node in nodes:
        if node.id in result.levels or node.id in seen:
            continue
        seen.add(node.id)
        result.orphans.append(node.id)
        result.levels[node.id] = result.fallback_level
        result.parents[node.id] = None
        trace.warn(
            DiagnosticCode.DISCONNECTED_NODE,
            f"Node {node.id} is not reachable from root {root.id}",
            node_id=node.id,
        )

    return result
