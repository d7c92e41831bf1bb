"""Unit tests for sibling group centering."""

import pytest
from conftest import make_node

from flowlayout import LayoutOptions, Point, center_children, level_y


def center_of(node):
    return node.position.x + node.width / 2


class TestLevelY:
    """Tests for level_y."""

    def test_level_zero_is_start_y(self, options):
        """The root level sits at start_y."""
        assert level_y(0, options) == 80

    def test_default_spacing(self, options):
        """80 + 2 * (120 + 100) = 520."""
        assert level_y(2, options) == 520

    def test_custom_options(self):
        """Test level y with custom height and spacing."""
        options = LayoutOptions(node_height=50, node_spacing=50, start_y=0)
        assert level_y(3, options) == 300


class TestCenterChildren:
    """Tests for center_children."""

    def test_single_child_centered_under_parent(self):
        """A lone child is centered under its parent."""
        # Parent at x=100, width=200 -> center 200
        placed = center_children(200, [make_node("c")], y=300, level=1)
        assert placed[0].position == Point(100, 300)
        assert center_of(placed[0]) == 200

    def test_two_children_group_centered(self):
        """Two siblings are centered as a group."""
        placed = center_children(
            400, [make_node("a"), make_node("b")], y=300, level=1,
            horizontal_spacing=280,
        )
        assert placed[0].position.x == 60
        assert placed[1].position.x == 540
        group_left = placed[0].position.x
        group_right = placed[1].position.x + placed[1].width
        assert (group_left + group_right) / 2 == 400

    def test_mixed_widths_group_centered(self):
        """Siblings of different widths are centered as a group."""
        wide = make_node("wide", outputs=2)  # width 280
        narrow = make_node("narrow")  # width 200
        placed = center_children(400, [wide, narrow], y=0, level=1)

        assert placed[0].width == 280
        assert placed[0].position.x == 20
        assert placed[1].position.x == 580
        assert (20 + 580 + 200) / 2 == 400

    def test_children_never_overlap(self):
        """Adjacent siblings keep the horizontal gap."""
        children = [make_node(f"c{i}", outputs=i) for i in range(5)]
        placed = center_children(0, children, y=0, level=1, horizontal_spacing=10)
        for left, right in zip(placed, placed[1:]):
            assert left.position.x + left.width + 10 == pytest.approx(right.position.x)

    def test_all_children_share_level_and_y(self):
        """Every sibling gets the same level and y."""
        placed = center_children(
            400, [make_node("a"), make_node("b"), make_node("c")], y=520, level=2
        )
        assert {n.level for n in placed} == {2}
        assert {n.position.y for n in placed} == {520}

    def test_custom_position_passes_through(self):
        """A caller position is kept as-is."""
        custom = make_node("custom", position=Point(999, 999))
        placed = center_children(400, [custom, make_node("free")], y=300, level=1)

        assert placed[0].position == Point(999, 999)
        assert placed[0].level == 1
        assert placed[0].width == 200
        # The one remaining child is centered on its own
        assert placed[1].position == Point(300, 300)

    def test_input_children_not_mutated(self):
        """Test that the given children are left untouched."""
        child = make_node("c")
        placed = center_children(400, [child], y=300, level=1)
        assert child.position is None
        assert child.level is None
        assert placed[0] is not child
        assert placed[0].ports is not child.ports

    def test_empty_group(self):
        """Test centering an empty group."""
        assert center_children(400, [], y=0, level=1) == []
