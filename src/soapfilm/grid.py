"""Grid addressing for soapfilm patches.

A patch of size ``n`` has ``(n+1) x (n+1)`` cells addressed by
``GridCoord(row, col)`` with ``0 <= row, col <= n``.  The four sides of a
patch are named with ``Side``; ``side_frame()`` turns a side into the
coordinate of its first cell, the step along the side, and the step
toward the patch interior.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator

from soapfilm.errors import ConfigurationError


@dataclass(frozen=True)
class GridCoord:
    """Integer (row, column) address or offset on a patch grid."""

    row: int
    col: int

    def __add__(self, other: "GridCoord") -> "GridCoord":
        return GridCoord(self.row + other.row, self.col + other.col)

    def __sub__(self, other: "GridCoord") -> "GridCoord":
        return GridCoord(self.row - other.row, self.col - other.col)

    def __neg__(self) -> "GridCoord":
        return GridCoord(-self.row, -self.col)

    def __mul__(self, k: int) -> "GridCoord":
        return GridCoord(self.row * k, self.col * k)

    __rmul__ = __mul__

    def __iter__(self) -> Iterator[int]:
        yield self.row
        yield self.col


UV = GridCoord

NORTH = GridCoord(-1, 0)
SOUTH = GridCoord(1, 0)
EAST = GridCoord(0, 1)
WEST = GridCoord(0, -1)

AXIS_OFFSETS = (NORTH, SOUTH, EAST, WEST)


class Side(Enum):
    """Logical side of a patch."""
    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"

    @property
    def is_row(self) -> bool:
        return self in (Side.TOP, Side.BOTTOM)


@dataclass(frozen=True)
class SideFrame:
    """Canonical walk along one side of a patch."""

    start: GridCoord
    direction: GridCoord
    inward: GridCoord
    size: int

    def cell(self, i: int) -> GridCoord:
        return self.start + self.direction * i

    def cells(self) -> Iterator[GridCoord]:
        for i in range(self.size + 1):
            yield self.cell(i)

    def inner_cells(self) -> Iterator[GridCoord]:
        """cells of the side, corners excluded"""
        for i in range(1, self.size):
            yield self.cell(i)


def side_frame(size: int, side: Side) -> SideFrame:
    if side is Side.TOP:
        return SideFrame(GridCoord(0, 0), EAST, SOUTH, size)
    if side is Side.BOTTOM:
        return SideFrame(GridCoord(size, 0), EAST, NORTH, size)
    if side is Side.LEFT:
        return SideFrame(GridCoord(0, 0), SOUTH, EAST, size)
    if side is Side.RIGHT:
        return SideFrame(GridCoord(0, size), SOUTH, WEST, size)
    raise ConfigurationError(f"unknown side {side!r}")


def corner(size: int, side_a: Side, side_b: Side) -> GridCoord:
    """Return the corner cell where two perpendicular sides meet."""

    if side_a.is_row == side_b.is_row:
        raise ConfigurationError(f"sides {side_a.name} and {side_b.name} do not meet at a corner")
    row_side, col_side = (side_a, side_b) if side_a.is_row else (side_b, side_a)
    row = 0 if row_side is Side.TOP else size
    col = 0 if col_side is Side.LEFT else size
    return GridCoord(row, col)


def along_from_corner(size: int, side: Side, at: GridCoord) -> GridCoord:
    """Step along ``side`` that leads away from corner ``at``."""

    frame = side_frame(size, side)
    if at == frame.start:
        return frame.direction
    return -frame.direction


__all__ = [
    "AXIS_OFFSETS",
    "EAST",
    "GridCoord",
    "NORTH",
    "SOUTH",
    "Side",
    "SideFrame",
    "UV",
    "WEST",
    "along_from_corner",
    "corner",
    "side_frame",
]
