"""
Parser module for flowchart chart data.

Turns chart data, as a mapping or JSON text, into a Graph. The expected
shape is the one flowchart front-ends pass around::

    {
        "nodes": [
            {"id": "start", "type": "trigger"},
            {"id": "check", "ports": [{"id": "in", "direction": "in"},
                                      {"id": "yes", "direction": "out"}]}
        ],
        "edges": [
            {"from": {"nodeId": "start"}, "to": {"nodeId": "check", "portId": "in"}}
        ]
    }

Fields computed by layout (node ``level``/``width``, port ``position``, edge
``fromPosition``/``toPosition``) are dropped on input. Everything else that
is not part of the model is kept in the ``extra`` dict of the object.
"""

from typing import Any, Dict, List, Mapping, Optional, Union

import orjson

from .models import Edge, Endpoint, Graph, Node, Point, Port, PortDirection


class ParseError(Exception):
    """Raised when chart data cannot be turned into a graph."""

    pass


_NODE_FIELDS = {"id", "type", "position", "ports", "level", "width"}
_PORT_FIELDS = {"id", "direction", "position"}
_EDGE_FIELDS = {"from", "to", "fromPosition", "toPosition"}


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _parse_id(value: Any, what: str) -> str:
    if isinstance(value, str) and value:
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    raise ParseError(f"{what}: id must be a non-empty string, got {value!r}")


class Parser:
    """Parses chart data into a Graph."""

    def parse(self, data: Union[Mapping[str, Any], str, bytes]) -> Graph:
        """
        Parse chart data and return a Graph.

        Args:
            data: A mapping with "nodes" and "edges", or JSON text of one.

        Returns:
            Graph with nodes and edges in input order.

        Raises:
            ParseError: If the data is not valid chart data.
        """
        if isinstance(data, (str, bytes)):
            try:
                data = orjson.loads(data)
            except orjson.JSONDecodeError as e:
                raise ParseError(f"Invalid JSON: {e}") from e

        if not isinstance(data, Mapping):
            raise ParseError("Chart data must be an object with nodes and edges")

        raw_nodes = data.get("nodes") or []
        raw_edges = data.get("edges") or []
        if not isinstance(raw_nodes, list):
            raise ParseError("'nodes' must be a list")
        if not isinstance(raw_edges, list):
            raise ParseError("'edges' must be a list")

        nodes: List[Node] = []
        seen_ids = set()
        for index, raw in enumerate(raw_nodes):
            node = self.parse_node(raw, index)
            if node.id in seen_ids:
                raise ParseError(f"Node {index}: duplicate id {node.id!r}")
            seen_ids.add(node.id)
            nodes.append(node)

        edges = [self.parse_edge(raw, index) for index, raw in enumerate(raw_edges)]
        return Graph(nodes=nodes, edges=edges)

    def parse_node(self, raw: Any, index: int) -> Node:
        """Parse one node mapping."""
        if not isinstance(raw, Mapping):
            raise ParseError(f"Node {index}: expected an object")

        node_id = _parse_id(raw.get("id"), f"Node {index}")
        node_type = raw.get("type") or ""
        if not isinstance(node_type, str):
            raise ParseError(f"Node {node_id}: type must be a string")

        raw_ports = raw.get("ports") or []
        if not isinstance(raw_ports, list):
            raise ParseError(f"Node {node_id}: 'ports' must be a list")

        return Node(
            id=node_id,
            type=node_type,
            position=self.parse_position(raw.get("position")),
            ports=[self.parse_port(p, node_id) for p in raw_ports],
            extra={k: v for k, v in raw.items() if k not in _NODE_FIELDS},
        )

    def parse_port(self, raw: Any, node_id: str) -> Port:
        """Parse one port mapping of node ``node_id``."""
        if not isinstance(raw, Mapping):
            raise ParseError(f"Node {node_id}: port must be an object")

        port_id = _parse_id(raw.get("id"), f"Node {node_id} port")
        if "direction" not in raw:
            raise ParseError(f"Node {node_id}: port {port_id} is missing a direction")
        try:
            direction = PortDirection(raw.get("direction"))
        except ValueError:
            raise ParseError(
                f"Node {node_id}: port {port_id} direction must be 'in' or 'out', "
                f"got {raw.get('direction')!r}"
            ) from None

        return Port(
            id=port_id,
            direction=direction,
            extra={k: v for k, v in raw.items() if k not in _PORT_FIELDS},
        )

    def parse_edge(self, raw: Any, index: int) -> Edge:
        """Parse one edge mapping."""
        if not isinstance(raw, Mapping):
            raise ParseError(f"Edge {index}: expected an object")

        return Edge(
            source=self.parse_endpoint(raw.get("from"), f"Edge {index} 'from'"),
            target=self.parse_endpoint(raw.get("to"), f"Edge {index} 'to'"),
            extra={k: v for k, v in raw.items() if k not in _EDGE_FIELDS},
        )

    def parse_endpoint(self, raw: Any, what: str) -> Endpoint:
        if not isinstance(raw, Mapping):
            raise ParseError(f"{what}: expected an object with nodeId")

        node_id = _parse_id(raw.get("nodeId", raw.get("node_id")), what)
        port_id = raw.get("portId", raw.get("port_id"))
        if port_id is not None:
            port_id = _parse_id(port_id, f"{what} port")
        return Endpoint(node_id=node_id, port_id=port_id)

    @staticmethod
    def parse_position(raw: Any) -> Optional[Point]:
        """
        Caller position, or None when absent or not numeric.

        A partial position such as ``{"x": 10}`` counts as no position, so
        layout computes one.
        """
        if not isinstance(raw, Mapping):
            return None
        x, y = raw.get("x"), raw.get("y")
        if not (_is_number(x) and _is_number(y)):
            return None
        return Point(x, y)


def parse_graph(data: Union[Mapping[str, Any], str, bytes]) -> Graph:
    """
    Convenience function to parse chart data.

    Args:
        data: A mapping with "nodes" and "edges", or JSON text of one.

    Returns:
        Graph
    """
    parser = Parser()
    return parser.parse(data)


def graph_from_lists(
    nodes: List[Dict[str, Any]], edges: List[Dict[str, Any]]
) -> Graph:
    """Parse separate node and edge lists."""
    return parse_graph({"nodes": nodes, "edges": edges})
