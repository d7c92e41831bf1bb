"""
Export of laid-out flowcharts.

This module turns layout results back into chart data, the same shape the
parser reads, with the computed geometry added:

- nodes gain ``level``, ``width`` and ``position``
- ports gain ``position``
- edges gain ``fromPosition`` and ``toPosition`` when both ends resolved

The LayoutExporter class writes that data as JSON using orjson.
"""

from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Optional

import orjson

from .models import Edge, Endpoint, Node, Point, Port

if TYPE_CHECKING:
    from .layout import LayoutResult


def _point(point: Optional[Point]) -> Optional[Dict[str, float]]:
    return point.as_dict() if point is not None else None


def port_to_dict(port: Port) -> Dict[str, Any]:
    data = dict(port.extra)
    data.update({"id": port.id, "direction": port.direction.value})
    if port.position is not None:
        data["position"] = _point(port.position)
    return data


def node_to_dict(node: Node) -> Dict[str, Any]:
    data = dict(node.extra)
    data["id"] = node.id
    if node.type:
        data["type"] = node.type
    data["position"] = _point(node.position)
    data["ports"] = [port_to_dict(p) for p in node.ports]
    data["level"] = node.level
    data["width"] = node.width
    return data


def _endpoint(endpoint: Endpoint) -> Dict[str, str]:
    data = {"nodeId": endpoint.node_id}
    if endpoint.port_id is not None:
        data["portId"] = endpoint.port_id
    return data


def edge_to_dict(edge: Edge) -> Dict[str, Any]:
    data = dict(edge.extra)
    data["from"] = _endpoint(edge.source)
    data["to"] = _endpoint(edge.target)
    if edge.is_resolved:
        data["fromPosition"] = _point(edge.from_position)
        data["toPosition"] = _point(edge.to_position)
    return data


def layout_to_dict(result: "LayoutResult") -> Dict[str, List[Dict[str, Any]]]:
    """Chart data for a layout result."""
    return {
        "nodes": [node_to_dict(n) for n in result.nodes],
        "edges": [edge_to_dict(e) for e in result.edges],
    }


class LayoutExporter:
    """
    Writes layout results to JSON.

    Attributes:
        indent: Pretty-print with two-space indentation.
    """

    def __init__(self, indent: bool = True):
        self.indent = indent

    def dumps(self, result: "LayoutResult") -> bytes:
        """Serialize a layout result to JSON bytes."""
        option = orjson.OPT_INDENT_2 if self.indent else None
        return orjson.dumps(layout_to_dict(result), option=option)

    def save_json(self, result: "LayoutResult", filename: str) -> None:
        """
        Save a layout result to a JSON file.

        Args:
            result: The layout result to save.
            filename: Output filename (should end in .json).
        """
        output_path = Path(filename)
        output_path.write_bytes(self.dumps(result))
