"""Unit tests for edge endpoint resolution."""

import pytest
from conftest import make_edge

from flowlayout import (
    Anchor,
    AnchorKind,
    DiagnosticCode,
    Endpoint,
    LayoutTrace,
    Node,
    Point,
    Port,
    PortDirection,
    resolve_edges,
    resolve_source_anchor,
    resolve_target_anchor,
)


@pytest.fixture
def trigger():
    return Node(id="t", type="trigger", position=Point(300, 80), width=200)


@pytest.fixture
def step():
    return Node(
        id="s",
        position=Point(300, 300),
        width=200,
        ports=[
            Port("in", PortDirection.IN, position=Point(400, 250)),
            Port("out", PortDirection.OUT, position=Point(400, 392)),
        ],
    )


@pytest.fixture
def sink():
    return Node(
        id="k",
        position=Point(100, 520),
        width=200,
        ports=[Port("in", PortDirection.IN, position=Point(200, 470))],
    )


class TestAnchor:
    """Tests for the tagged Anchor result."""

    def test_resolved_is_exact(self):
        """A port anchor is exact."""
        assert Anchor.resolved(Point(1, 2)).is_exact

    def test_fallback_is_not_exact(self):
        """A node-center anchor is not exact."""
        anchor = Anchor.fallback(Point(1, 2))
        assert anchor.kind == AnchorKind.FALLBACK
        assert not anchor.is_exact

    def test_unresolved_has_no_point(self):
        """An unresolved anchor has no point."""
        assert Anchor.unresolved().point is None


class TestResolveSourceAnchor:
    """Tests for resolve_source_anchor."""

    def test_port_anchor(self, step):
        """Test source anchor taken from the named port."""
        anchor = resolve_source_anchor(step, Endpoint("s", "out"))
        assert anchor == Anchor.resolved(Point(400, 392))

    def test_missing_port_id_falls_back(self, step):
        """No port id falls back to the node center."""
        anchor = resolve_source_anchor(step, Endpoint("s"))
        assert anchor == Anchor.fallback(Point(400, 360))

    def test_trigger_ignores_ports(self, trigger):
        """Trigger nodes always use the node center."""
        anchor = resolve_source_anchor(trigger, Endpoint("t", "out"))
        assert anchor == Anchor.fallback(Point(400, 140))

    def test_missing_node(self):
        """Test source anchor for a missing node."""
        assert resolve_source_anchor(None, Endpoint("x")).kind == AnchorKind.UNRESOLVED


class TestResolveTargetAnchor:
    """Tests for resolve_target_anchor."""

    def test_port_anchor(self, sink):
        """Test target anchor taken from the named port."""
        anchor = resolve_target_anchor(sink, Endpoint("k", "in"))
        assert anchor == Anchor.resolved(Point(200, 470))

    def test_unknown_port_falls_back(self, sink):
        """An unknown port id falls back to the node center."""
        anchor = resolve_target_anchor(sink, Endpoint("k", "nope"))
        assert anchor == Anchor.fallback(Point(200, 460))

    def test_from_trigger_skips_ports(self, sink):
        """Edges out of a trigger ignore target ports."""
        anchor = resolve_target_anchor(sink, Endpoint("k", "in"), from_trigger=True)
        assert anchor == Anchor.fallback(Point(200, 460))

    def test_unpositioned_node(self):
        """Test target anchor for a node without a position."""
        anchor = resolve_target_anchor(Node(id="x"), Endpoint("x"))
        assert anchor.kind == AnchorKind.UNRESOLVED


class TestResolveEdges:
    """Tests for resolve_edges."""

    def test_trigger_edge_uses_node_centers(self, trigger, step):
        """Test trigger edge drawn center to center."""
        edges = resolve_edges([make_edge("t", "s", target_port="in")], [trigger, step])
        assert edges[0].from_position == Point(400, 140)
        assert edges[0].to_position == Point(400, 240)
        assert edges[0].from_anchor.kind == AnchorKind.FALLBACK
        assert edges[0].to_anchor.kind == AnchorKind.FALLBACK

    def test_port_to_port_edge(self, step, sink):
        """Test edge between two positioned ports."""
        edges = resolve_edges([make_edge("s", "k", "out", "in")], [step, sink])
        assert edges[0].from_position == Point(400, 392)
        assert edges[0].to_position == Point(200, 470)
        assert edges[0].from_anchor.is_exact and edges[0].to_anchor.is_exact

    def test_unknown_target_port_gets_fallback(self, step, sink):
        """An unknown target port is reported and falls back."""
        trace = LayoutTrace()
        edges = resolve_edges([make_edge("s", "k", "out", "nope")], [step, sink], trace)

        assert edges[0].to_position == Point(200, 460)
        assert edges[0].from_anchor.is_exact
        assert trace.has(DiagnosticCode.UNKNOWN_PORT)

    def test_edge_without_port_ids_is_silent(self, step, sink):
        """Edges that name no ports produce no diagnostics."""
        trace = LayoutTrace()
        edges = resolve_edges([make_edge("s", "k")], [step, sink], trace)
        assert edges[0].is_resolved
        assert trace.diagnostics == []

    def test_missing_node_returns_edge_without_geometry(self, step):
        """An edge to a missing node comes back as a copy with no anchors."""
        trace = LayoutTrace()
        edge = make_edge("s", "ghost")
        edges = resolve_edges([edge], [step], trace)

        assert edges[0] is not edge
        assert edges[0].source == edge.source
        assert edges[0].from_anchor is None
        assert not edges[0].is_resolved
        missing = trace.get_diagnostics(DiagnosticCode.MISSING_NODE)
        assert missing[0].edge_index == 0

    def test_unpositioned_node_returns_edge_without_geometry(self, step):
        """An edge to an unpositioned node comes back as a copy with no anchors."""
        trace = LayoutTrace()
        edge = make_edge("s", "x")
        edges = resolve_edges([edge], [step, Node(id="x")], trace)

        assert edges[0] is not edge
        assert edges[0].from_anchor is None
        assert edges[0].to_anchor is None
        assert trace.get_diagnostics(DiagnosticCode.NODE_UNPOSITIONED)[0].node_id == "x"

    def test_bad_edge_does_not_affect_others(self, step, sink):
        """One bad edge leaves the other edges resolved."""
        edges = resolve_edges(
            [make_edge("ghost", "k"), make_edge("s", "k", "out", "in")],
            [step, sink],
        )
        assert not edges[0].is_resolved
        assert edges[1].is_resolved

    def test_input_edges_not_mutated(self, step, sink):
        """Test that the given edges are left untouched."""
        edge = make_edge("s", "k", "out", "in")
        resolve_edges([edge], [step, sink])
        assert edge.from_anchor is None
        assert edge.to_anchor is None

    def test_stale_anchors_cleared_when_node_missing(self, step, sink):
        """Anchors from an earlier layout are dropped once a node disappears."""
        edge = make_edge("s", "k", "out", "in")
        edge.from_anchor = Anchor.resolved(Point(400, 392))
        edge.to_anchor = Anchor.resolved(Point(200, 470))

        edges = resolve_edges([edge], [step])

        assert edges[0].from_anchor is None
        assert edges[0].to_position is None
        assert edge.to_position == Point(200, 470)

    def test_stale_anchors_cleared_when_node_unpositioned(self, step):
        """Anchors from an earlier layout are dropped for an unpositioned node."""
        edge = make_edge("s", "x")
        edge.from_anchor = Anchor.fallback(Point(400, 360))
        edge.to_anchor = Anchor.fallback(Point(0, 0))

        edges = resolve_edges([edge], [step, Node(id="x")])

        assert not edges[0].is_resolved
        assert edges[0].to_anchor is None
