import pytest

from soapfilm.errors import ConfigurationError
from soapfilm.grid import (
    EAST,
    GridCoord,
    NORTH,
    SOUTH,
    Side,
    UV,
    WEST,
    along_from_corner,
    corner,
    side_frame,
)


def test_gridcoord_arithmetic():
    a = GridCoord(2, 3)
    assert a + GridCoord(1, -1) == GridCoord(3, 2)
    assert a - GridCoord(1, 1) == GridCoord(1, 2)
    assert a * 2 == GridCoord(4, 6)
    assert 3 * SOUTH == GridCoord(3, 0)
    assert -EAST == WEST
    assert UV(1, 1) == GridCoord(1, 1)
    row, col = a
    assert (row, col) == (2, 3)


class TestSideFrames:

    size = 4

    def test_top(self):
        f = side_frame(self.size, Side.TOP)
        assert (f.start, f.direction, f.inward) == (GridCoord(0, 0), EAST, SOUTH)

    def test_bottom(self):
        f = side_frame(self.size, Side.BOTTOM)
        assert (f.start, f.direction, f.inward) == (GridCoord(4, 0), EAST, NORTH)

    def test_left(self):
        f = side_frame(self.size, Side.LEFT)
        assert (f.start, f.direction, f.inward) == (GridCoord(0, 0), SOUTH, EAST)

    def test_right(self):
        f = side_frame(self.size, Side.RIGHT)
        assert (f.start, f.direction, f.inward) == (GridCoord(0, 4), SOUTH, WEST)
        assert list(f.cells()) == [GridCoord(r, 4) for r in range(5)]
        assert list(f.inner_cells()) == [GridCoord(r, 4) for r in range(1, 4)]


def test_corners():
    assert corner(4, Side.TOP, Side.LEFT) == GridCoord(0, 0)
    assert corner(4, Side.RIGHT, Side.TOP) == GridCoord(0, 4)
    assert corner(4, Side.BOTTOM, Side.RIGHT) == GridCoord(4, 4)
    assert corner(4, Side.LEFT, Side.BOTTOM) == GridCoord(4, 0)
    with pytest.raises(ConfigurationError):
        corner(4, Side.TOP, Side.BOTTOM)


def test_along_from_corner():
    at = GridCoord(4, 4)
    assert along_from_corner(4, Side.BOTTOM, at) == WEST
    assert along_from_corner(4, Side.RIGHT, at) == NORTH
    assert along_from_corner(4, Side.TOP, GridCoord(0, 0)) == EAST
