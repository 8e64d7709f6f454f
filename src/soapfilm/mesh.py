"""Triangulated views of relaxed patches."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Tuple, Union

from soapfilm.geom import Vector3, epsilon
from soapfilm.patch import Patch
from soapfilm.topology import Topology

Vec3 = Tuple[float, float, float]
TriTuple = Tuple[Vec3, Vec3, Vec3, Vec3]


@dataclass(frozen=True)
class Triangle:
    """Immutable triangle representation in XYZ space."""

    normal: Vec3
    v0: Vec3
    v1: Vec3
    v2: Vec3


def triangle_normal(v0: Vector3, v1: Vector3, v2: Vector3) -> Vector3 | None:
    """Return the unit normal of a triangle or ``None`` if degenerate."""

    n = (v1 - v0).cross(v2 - v0)
    length = n.mag()
    if length <= epsilon * epsilon:
        return None
    return n / length


def triangle_area(v0: Vector3, v1: Vector3, v2: Vector3) -> float:
    return 0.5 * (v1 - v0).cross(v2 - v0).mag()


def _patches(obj) -> Iterable[Patch]:
    if isinstance(obj, Patch):
        return [obj]
    if isinstance(obj, Topology):
        return obj.patches
    patches = list(obj)
    if not all(isinstance(p, Patch) for p in patches):
        raise ValueError("mesh_view expects a Patch, a Topology or an iterable of patches")
    return patches


def grid_triangles(patch: Patch) -> Iterator[Tuple[Vector3, Vector3, Vector3]]:
    """Split every grid quad into two triangles, row-major."""
    n = patch.size
    for r in range(n):
        for c in range(n):
            v00 = patch.get(r, c)
            v01 = patch.get(r, c + 1)
            v10 = patch.get(r + 1, c)
            v11 = patch.get(r + 1, c + 1)
            yield v00, v10, v11
            yield v00, v11, v01


def mesh_view(obj: Union[Patch, Topology, Iterable[Patch]]) -> Iterator[TriTuple]:
    """Yield triangles as ``(normal, v0, v1, v2)`` tuples.

    Normals are unit vectors.  Degenerate triangles are skipped, which
    happens where a patch is pinned to a single point or not yet relaxed.
    """
    for patch in _patches(obj):
        for v0, v1, v2 in grid_triangles(patch):
            normal = triangle_normal(v0, v1, v2)
            if normal is None:
                continue
            yield normal.astuple(), v0.astuple(), v1.astuple(), v2.astuple()


def triangles_from_mesh(mesh: Iterable[TriTuple]) -> Iterator[Triangle]:
    """Convert ``mesh_view`` output into ``Triangle`` instances."""

    for normal, v0, v1, v2 in mesh:
        yield Triangle(normal=normal, v0=v0, v1=v1, v2=v2)


def surface_area(obj: Union[Patch, Topology, Iterable[Patch]]) -> float:
    """Total area of the triangulated grid(s)."""
    return sum(triangle_area(v0, v1, v2)
               for patch in _patches(obj)
               for v0, v1, v2 in grid_triangles(patch))


__all__ = [
    "Triangle",
    "grid_triangles",
    "mesh_view",
    "surface_area",
    "triangle_area",
    "triangle_normal",
    "triangles_from_mesh",
]
