"""
Data models for flowchart layout.

This module contains the dataclasses that describe a flowchart graph before
and after layout. The same classes are used for input and output: layout
never mutates the objects it is given, it returns copies (via
dataclasses.replace) with the computed geometry filled in.

Classes:
    Point: An absolute {x, y} coordinate.
    PortDirection: Direction of a port (in/out).
    Port: A named connection point on a node boundary.
    Node: A flowchart node with optional caller position and computed geometry.
    Endpoint: One end of an edge, a node id plus optional port id.
    AnchorKind: Tag saying how exact a resolved anchor is.
    Anchor: Tagged anchor point used as an edge start or end.
    Edge: A directed connection between two endpoints.
    Graph: Ordered collection of nodes and edges.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional

from .options import DEFAULT_NODE_WIDTH, TRIGGER_TYPE


@dataclass(frozen=True)
class Point:
    """An absolute canvas coordinate."""

    x: float
    y: float

    def as_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y}


class PortDirection(str, Enum):
    """Direction of a port relative to its node."""

    IN = "in"
    OUT = "out"


@dataclass
class Port:
    """
    A connection point on a node.

    Attributes:
        id: Identifier, unique within the owning node.
        direction: Whether edges enter (in) or leave (out) through this port.
        position: Absolute anchor, filled in by the port resolver.
        extra: Any other caller fields (label, style, ...), carried through.
    """

    id: str
    direction: PortDirection
    position: Optional[Point] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        self.direction = PortDirection(self.direction)

    def copy_with(self, **changes: Any) -> "Port":
        """Copy of this port with ``changes`` applied; containers are not shared."""
        changes.setdefault("extra", dict(self.extra))
        return replace(self, **changes)

    @property
    def is_input(self) -> bool:
        return self.direction == PortDirection.IN

    @property
    def is_output(self) -> bool:
        return self.direction == PortDirection.OUT


@dataclass
class Node:
    """
    A flowchart node.

    A caller may supply ``position``; layout keeps it as-is and only adds
    ``level`` and ``width``. Nodes without a position get one computed.

    Attributes:
        id: Unique node identifier.
        type: Type tag. The "trigger" tag marks a synthetic entry node.
        position: Top-left anchor (caller supplied or computed).
        ports: Ports in declaration order.
        level: Breadth-first depth from the root, filled in by layout.
        width: Rendered width in pixels, filled in by layout.
        extra: Any other caller fields, carried through untouched.
    """

    id: str
    type: str = ""
    position: Optional[Point] = None
    ports: List[Port] = field(default_factory=list)
    level: Optional[int] = None
    width: Optional[float] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.ports is None:
            self.ports = []

    def copy_with(self, **changes: Any) -> "Node":
        """Copy of this node with ``changes`` applied; containers are not shared."""
        changes.setdefault("ports", [p.copy_with() for p in self.ports])
        changes.setdefault("extra", dict(self.extra))
        return replace(self, **changes)

    @property
    def is_trigger(self) -> bool:
        return self.type == TRIGGER_TYPE

    @property
    def has_position(self) -> bool:
        return self.position is not None

    @property
    def output_ports(self) -> List[Port]:
        return [p for p in self.ports if p.is_output]

    @property
    def center_x(self) -> Optional[float]:
        """Horizontal center, or None when the node is not positioned."""
        if self.position is None:
            return None
        return self.position.x + (self.width or DEFAULT_NODE_WIDTH) / 2

    def get_port(self, port_id: Optional[str]) -> Optional[Port]:
        """Return the first port with the given id, if any."""
        if port_id is None:
            return None
        for port in self.ports:
            if port.id == port_id:
                return port
        return None


@dataclass(frozen=True)
class Endpoint:
    """One end of an edge."""

    node_id: str
    port_id: Optional[str] = None


class AnchorKind(str, Enum):
    """How an anchor was obtained."""

    RESOLVED = "resolved"  # Taken from a positioned port
    FALLBACK = "fallback"  # Node-center approximation
    UNRESOLVED = "unresolved"  # No geometry available


@dataclass(frozen=True)
class Anchor:
    """
    Tagged result of resolving one end of an edge.

    Callers can tell exact port geometry (RESOLVED) from the node-center
    approximation (FALLBACK); UNRESOLVED anchors carry no point.
    """

    kind: AnchorKind
    point: Optional[Point] = None

    @classmethod
    def resolved(cls, point: Point) -> "Anchor":
        return cls(AnchorKind.RESOLVED, point)

    @classmethod
    def fallback(cls, point: Point) -> "Anchor":
        return cls(AnchorKind.FALLBACK, point)

    @classmethod
    def unresolved(cls) -> "Anchor":
        return cls(AnchorKind.UNRESOLVED)

    @property
    def is_exact(self) -> bool:
        return self.kind == AnchorKind.RESOLVED


@dataclass
class Edge:
    """
    A directed edge between two endpoints.

    Attributes:
        source: Where the edge starts (node id, optional port id).
        target: Where the edge ends.
        from_anchor: Resolved start anchor, filled in by the edge resolver.
        to_anchor: Resolved end anchor.
        extra: Any other caller fields, carried through untouched.
    """

    source: Endpoint
    target: Endpoint
    from_anchor: Optional[Anchor] = None
    to_anchor: Optional[Anchor] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def copy_with(self, **changes: Any) -> "Edge":
        """Copy of this edge with ``changes`` applied; containers are not shared."""
        changes.setdefault("extra", dict(self.extra))
        return replace(self, **changes)

    @property
    def from_position(self) -> Optional[Point]:
        return self.from_anchor.point if self.from_anchor else None

    @property
    def to_position(self) -> Optional[Point]:
        return self.to_anchor.point if self.to_anchor else None

    @property
    def is_resolved(self) -> bool:
        """True when both ends carry a point."""
        return self.from_position is not None and self.to_position is not None


@dataclass
class Graph:
    """A flowchart graph: nodes and edges, both in input order."""

    nodes: List[Node] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)

    def get_node(self, node_id: str) -> Optional[Node]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None
