"""Pytest configuration and shared fixtures for flowlayout tests."""

import pytest

from flowlayout import Edge, Endpoint, LayoutOptions, Node, Port, PortDirection


def make_node(node_id, node_type="", outputs=0, inputs=0, position=None):
    """Build a Node with ``inputs`` input ports and ``outputs`` output ports."""
    ports = [Port(id=f"in{i}", direction=PortDirection.IN) for i in range(inputs)]
    ports += [Port(id=f"out{i}", direction=PortDirection.OUT) for i in range(outputs)]
    return Node(id=node_id, type=node_type, ports=ports, position=position)


def make_edge(source, target, source_port=None, target_port=None):
    """Build an Edge between two node ids."""
    return Edge(
        source=Endpoint(source, source_port), target=Endpoint(target, target_port)
    )


@pytest.fixture
def options():
    """Default LayoutOptions instance."""
    return LayoutOptions()


@pytest.fixture
def linear_chart():
    """Trigger followed by two single-port steps."""
    return {
        "nodes": [
            {"id": "start", "type": "trigger", "label": "Start"},
            {
                "id": "fetch",
                "ports": [
                    {"id": "in", "direction": "in"},
                    {"id": "out", "direction": "out"},
                ],
            },
            {"id": "save", "ports": [{"id": "in", "direction": "in"}]},
        ],
        "edges": [
            {"from": {"nodeId": "start"}, "to": {"nodeId": "fetch", "portId": "in"}},
            {
                "from": {"nodeId": "fetch", "portId": "out"},
                "to": {"nodeId": "save", "portId": "in"},
            },
        ],
    }


@pytest.fixture
def branching_chart():
    """Trigger feeding a three-way switch."""
    return {
        "nodes": [
            {"id": "start", "type": "trigger"},
            {
                "id": "switch",
                "ports": [
                    {"id": "in", "direction": "in"},
                    {"id": "a", "direction": "out"},
                    {"id": "b", "direction": "out"},
                    {"id": "c", "direction": "out"},
                ],
            },
            {"id": "left", "ports": [{"id": "in", "direction": "in"}]},
            {"id": "middle", "ports": [{"id": "in", "direction": "in"}]},
            {"id": "right", "ports": [{"id": "in", "direction": "in"}]},
        ],
        "edges": [
            {"from": {"nodeId": "start"}, "to": {"nodeId": "switch", "portId": "in"}},
            {
                "from": {"nodeId": "switch", "portId": "a"},
                "to": {"nodeId": "left", "portId": "in"},
            },
            {
                "from": {"nodeId": "switch", "portId": "b"},
                "to": {"nodeId": "middle", "portId": "in"},
            },
            {
                "from": {"nodeId": "switch", "portId": "c"},
                "to": {"nodeId": "right", "portId": "in"},
            },
        ],
    }
