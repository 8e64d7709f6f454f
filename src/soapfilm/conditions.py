"""Boundary conditions.

A boundary condition replaces the relaxed value of one grid cell every
iteration.  The set of variants is closed:

- FixedPoint: a constant position.
- ParametricPoint: a zero-argument function, evaluated on every apply.
- SegmentRail: the neighbor average, clamped onto a line segment.
- MirrorSymmetry: a free edge held on a symmetry plane.
- CrossPatchAverage: the mean of cells that may live on other patches.

Each variant is a frozen dataclass with ``apply(target) -> Vector3``,
where ``target`` is the PatchPoint being written, and ``references()``
listing the PatchPoints it reads.  Variants read only current values.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Tuple, Union

from soapfilm.errors import ConfigurationError, DegenerateGeometryError
from soapfilm.estimators import four_point
from soapfilm.geom import Vector3, centroid, epsilon
from soapfilm.patch import PatchPoint


@dataclass(frozen=True)
class Plane:
    """Plane through ``point`` with unit ``normal``."""

    point: Vector3
    normal: Vector3

    def __post_init__(self):
        if self.normal.mag() < epsilon:
            raise DegenerateGeometryError("plane normal has zero length")
        object.__setattr__(self, "normal", self.normal.unit())

    def distance(self, p: Vector3) -> float:
        """signed distance from the plane"""
        return (p - self.point).dot(self.normal)

    def reflect(self, p: Vector3) -> Vector3:
        return p - self.normal * (2.0 * self.distance(p))


@dataclass(frozen=True)
class FixedPoint:
    value: Vector3

    def apply(self, target: PatchPoint) -> Vector3:
        return self.value

    def references(self) -> Tuple[PatchPoint, ...]:
        return ()


@dataclass(frozen=True)
class ParametricPoint:
    fn: Callable[[], Vector3]

    def __post_init__(self):
        if not callable(self.fn):
            raise ConfigurationError("ParametricPoint needs a zero-argument callable")

    def apply(self, target: PatchPoint) -> Vector3:
        return self.fn()

    def references(self) -> Tuple[PatchPoint, ...]:
        return ()


@dataclass(frozen=True)
class SegmentRail:
    """Keep a cell on the segment from ``start`` to ``end``."""

    start: Vector3
    end: Vector3

    def __post_init__(self):
        if (self.end - self.start).mag() < epsilon:
            raise DegenerateGeometryError(f"rail from {self.start} to {self.end} has zero length")

    def project(self, p: Vector3) -> Vector3:
        d = self.end - self.start
        length = d.mag()
        u = d / length
        t = (p - self.start).dot(u)
        if t <= 0.0:
            return self.start
        if t >= length:
            return self.end
        return self.start + u * t

    def apply(self, target: PatchPoint) -> Vector3:
        neighbors = target.neighbors()
        if not neighbors:
            raise ConfigurationError(f"rail cell {target.coord} has no neighbors")
        return self.project(centroid(p.read() for p in neighbors))

    def references(self) -> Tuple[PatchPoint, ...]:
        return ()


@dataclass(frozen=True)
class MirrorSymmetry:
    """Free edge cell constrained to a symmetry plane.

    The ``inside`` cell is reflected across ``plane``.  With two
    ``laterals`` (the neighbors along the edge) the lateral pair and the
    inside/mirror pair are blended with ``four_point``; otherwise every
    supplied point and the mirror image are averaged.
    """

    plane: Plane
    inside: PatchPoint
    laterals: Tuple[PatchPoint, ...] = field(default=())

    def __post_init__(self):
        if self.inside is None:
            raise ConfigurationError("MirrorSymmetry needs an inside point")
        object.__setattr__(self, "laterals", tuple(self.laterals))
        if len(self.laterals) > 2:
            raise ConfigurationError(
                f"MirrorSymmetry takes at most 2 lateral points, got {len(self.laterals)}")

    def apply(self, target: PatchPoint) -> Vector3:
        inside = self.inside.read()
        mirror = self.plane.reflect(inside)
        if len(self.laterals) == 2:
            return four_point(self.laterals[0].read(), self.laterals[1].read(), inside, mirror)
        points = [p.read() for p in self.laterals]
        points.append(inside)
        points.append(mirror)
        return centroid(points)

    def references(self) -> Tuple[PatchPoint, ...]:
        return self.laterals + (self.inside,)


@dataclass(frozen=True)
class CrossPatchAverage:
    """Mean of ``points``, which may belong to several patches."""

    points: Tuple[PatchPoint, ...]

    def __post_init__(self):
        object.__setattr__(self, "points", tuple(self.points))
        if not self.points:
            raise ConfigurationError("CrossPatchAverage needs at least one point")

    def apply(self, target: PatchPoint) -> Vector3:
        origin = target.read()
        return origin + centroid(p.read() - origin for p in self.points)

    def references(self) -> Tuple[PatchPoint, ...]:
        return self.points


BoundaryCondition = Union[FixedPoint, ParametricPoint, SegmentRail, MirrorSymmetry, CrossPatchAverage]

CONDITION_TYPES = (FixedPoint, ParametricPoint, SegmentRail, MirrorSymmetry, CrossPatchAverage)


def is_condition(obj) -> bool:
    return isinstance(obj, CONDITION_TYPES)


__all__ = [
    "BoundaryCondition",
    "CONDITION_TYPES",
    "CrossPatchAverage",
    "FixedPoint",
    "MirrorSymmetry",
    "ParametricPoint",
    "Plane",
    "SegmentRail",
    "is_condition",
]
