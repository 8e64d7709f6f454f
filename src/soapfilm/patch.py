## relaxation grids for soapfilm
## Copyright (c) 2026 the soapfilm authors

# Permission is hereby granted, free of charge, to any person
# obtaining a copy of this software and associated documentation files
# (the "Software"), to deal in the Software without restriction,
# including without limitation the rights to use, copy, modify, merge,
# publish, distribute, sublicense, and/or sell copies of the Software,
# and to permit persons to whom the Software is furnished to do so,
# subject to the following conditions:
#
# The above copyright notice and this permission notice shall be
# included in all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
# EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
# MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND
# NONINFRINGEMENT. IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS
# BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN
# ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN
# CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

"""relaxation grids for **soapfilm**

A ``Patch`` is a square grid of ``(size+1) x (size+1)`` points held in two
row-major buffers.  ``current`` is what readers (conditions, renderers,
exporters) see; ``next`` is scratch space filled by ``apply()`` and copied
into ``current`` by ``commit()``.  Running ``apply()`` on every patch of a
topology before committing any of them means no patch ever observes
another patch's half-finished iteration.

A ``PatchPoint`` addresses one cell of a patch.  Boundary conditions hold
PatchPoints, possibly into other patches, to read the values they need.

"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Tuple, Union

import numpy as np

from soapfilm.errors import ConfigurationError
from soapfilm.estimators import Estimator, resolve_estimator
from soapfilm.geom import ORIGIN, Vector3
from soapfilm.grid import AXIS_OFFSETS, GridCoord

Seed = Union[Vector3, Callable[[GridCoord], Vector3]]


@dataclass(frozen=True)
class PatchPoint:
    """Address of one cell of a patch."""

    patch: "Patch"
    coord: GridCoord

    def __post_init__(self):
        if not self.patch.in_range(self.coord):
            raise ConfigurationError(
                f"cell ({self.coord.row}, {self.coord.col}) is outside patch "
                f"{self.patch.label} of size {self.patch.size}")

    def read(self) -> Vector3:
        return self.patch.get(self.coord.row, self.coord.col)

    def write(self, value: Vector3) -> None:
        self.patch.stage(self.coord, value)

    def offset(self, delta: GridCoord) -> "PatchPoint":
        return PatchPoint(self.patch, self.coord + delta)

    def neighbors(self) -> List["PatchPoint"]:
        """in-range axis neighbors, in north, south, east, west order"""
        return [PatchPoint(self.patch, self.coord + d)
                for d in AXIS_OFFSETS if self.patch.in_range(self.coord + d)]


class Patch:
    """A single quadrilateral relaxation grid."""

    def __init__(self, size: int, seed: Seed = ORIGIN, *, name: Optional[str] = None,
                 estimator=None):
        if isinstance(size, bool) or not isinstance(size, int) or size < 1:
            raise ConfigurationError(f"patch size must be a positive integer, got {size!r}")
        self.size = size
        self.name = name
        self.estimator: Optional[Estimator] = (
            None if estimator is None else resolve_estimator(estimator))
        self._width = size + 1
        self._current: List[Vector3] = [self._seed_value(seed, coord) for coord in self.cells()]
        self._next: List[Vector3] = list(self._current)
        self._conditions: List[Tuple[GridCoord, object]] = []
        self._conditioned = set()

    @staticmethod
    def _seed_value(seed: Seed, coord: GridCoord) -> Vector3:
        if isinstance(seed, Vector3):
            return seed
        if callable(seed):
            value = seed(coord)
            if not isinstance(value, Vector3):
                raise ConfigurationError(f"seed returned {type(value)!r}, expected Vector3")
            return value
        raise ConfigurationError(f"seed must be a Vector3 or callable, got {type(seed)!r}")

    def __repr__(self) -> str:
        return f"Patch(size={self.size}, name={self.name!r}, conditions={len(self._conditions)})"

    @property
    def label(self) -> str:
        return self.name if self.name is not None else f"<unnamed {id(self):#x}>"

    ## addressing
    ## ----------

    def in_range(self, coord: GridCoord) -> bool:
        return 0 <= coord.row <= self.size and 0 <= coord.col <= self.size

    def is_interior(self, coord: GridCoord) -> bool:
        return 1 <= coord.row <= self.size - 1 and 1 <= coord.col <= self.size - 1

    def _index(self, coord: GridCoord) -> int:
        if not self.in_range(coord):
            raise ConfigurationError(
                f"cell ({coord.row}, {coord.col}) is outside patch {self.label} of size {self.size}")
        return coord.row * self._width + coord.col

    def cells(self) -> Iterator[GridCoord]:
        """all coordinates in row-major order"""
        for r in range(self.size + 1):
            for c in range(self.size + 1):
                yield GridCoord(r, c)

    def point(self, row: int, col: int) -> PatchPoint:
        return PatchPoint(self, GridCoord(row, col))

    def get(self, row: int, col: int) -> Vector3:
        return self._current[self._index(GridCoord(row, col))]

    def __getitem__(self, coord: GridCoord) -> Vector3:
        return self._current[self._index(coord)]

    def __len__(self) -> int:
        return len(self._current)

    def values(self) -> List[Vector3]:
        """copy of the current buffer, row-major"""
        return list(self._current)

    def as_array(self) -> np.ndarray:
        """current buffer as a ``((size+1)**2, 3)`` float array"""
        return np.asarray([v.astuple() for v in self._current], dtype=float)

    def stage(self, coord: GridCoord, value: Vector3) -> None:
        self._next[self._index(coord)] = value

    ## conditions
    ## ----------

    def set_condition(self, coord: GridCoord, condition) -> None:
        """Register ``condition`` for the cell at ``coord``.

        Conditions are evaluated in registration order, so a later
        registration for the same cell overrides an earlier one.
        """
        from soapfilm.conditions import is_condition  # conditions imports this module

        self._index(coord)
        if not is_condition(condition):
            raise ConfigurationError(f"{condition!r} is not a boundary condition")
        self._conditions.append((coord, condition))
        self._conditioned.add(coord)

    @property
    def conditions(self) -> Tuple[Tuple[GridCoord, object], ...]:
        return tuple(self._conditions)

    def condition_at(self, coord: GridCoord):
        """the condition that wins at ``coord``, or None"""
        found = None
        for c, cond in self._conditions:
            if c == coord:
                found = cond
        return found

    ## relaxation
    ## ----------

    def apply(self, estimator=None) -> None:
        """Compute the next state from the current one.

        Unconditioned interior cells take the estimator's value; every
        registered condition then writes its cell.  Only ``current`` is
        read.
        """
        est = resolve_estimator(estimator if estimator is not None else self.estimator)
        cur = self._current
        nxt = self._next
        nxt[:] = cur
        w = self._width
        conditioned = self._conditioned
        for r in range(1, self.size):
            base = r * w
            for c in range(1, self.size):
                if GridCoord(r, c) in conditioned:
                    continue
                i = base + c
                nxt[i] = est(cur[i - w], cur[i + w], cur[i + 1], cur[i - 1])

        for coord, condition in self._conditions:
            nxt[coord.row * w + coord.col] = condition.apply(PatchPoint(self, coord))

    def commit(self) -> float:
        """Copy ``next`` into ``current``; return the largest displacement."""
        residual = 0.0
        for old, new in zip(self._current, self._next):
            d = (new - old).mag()
            if d > residual:
                residual = d
        self._current[:] = self._next
        return residual


__all__ = ["Patch", "PatchPoint", "Seed"]
