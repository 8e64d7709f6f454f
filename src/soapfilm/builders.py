"""Topology builders.

Each builder creates the patches of a named surface inside a
``Topology``, seeds them near their final shape, wires every boundary
condition, and returns the topology.  Pass ``topology=`` to build into an
existing arena; a fresh one is created otherwise.

============== =========================================================
builder        surface
============== =========================================================
saddle         one patch on a skew quadrilateral of four rails
cylinder       a catenoid-like tube between two circular rims
quad_cylinder  the same tube from four patches
half_cylinder  half the tube, free edges held on the y=0 plane
quad_junction  a saddle from 2x2 patches sharing one center corner
scherk_tower   twisted wings around a vertical triple-junction axis
============== =========================================================
"""

from __future__ import annotations

import inspect
import logging
from math import cos, pi, sin
from typing import Callable, Dict, Optional

from soapfilm.conditions import Plane
from soapfilm.errors import ConfigurationError
from soapfilm.geom import ORIGIN, Vector3, lerp
from soapfilm.glue import (
    fix_edge,
    fix_edge_path,
    glue_patch_corners,
    glue_patch_edges,
    glue_patch_seam,
    mirror_edge,
    pin_corners,
    rail_edge,
)
from soapfilm.grid import GridCoord, Side
from soapfilm.topology import Topology

logger = logging.getLogger(__name__)

Clock = Callable[[], float]

SADDLE_CORNERS = {
    (Side.TOP, Side.LEFT): Vector3(-1.0, -1.0, 1.0),
    (Side.TOP, Side.RIGHT): Vector3(-1.0, 1.0, -1.0),
    (Side.BOTTOM, Side.RIGHT): Vector3(1.0, 1.0, 1.0),
    (Side.BOTTOM, Side.LEFT): Vector3(1.0, -1.0, -1.0),
}


def _ring(radius: float, angle: float, z: float) -> Vector3:
    return Vector3(radius * cos(angle), radius * sin(angle), z)


def saddle(size: int = 4, *, topology: Optional[Topology] = None) -> Topology:
    """Single patch spanning the skew quadrilateral of ``SADDLE_CORNERS``.

    Corners are pinned, each side slides on the rail between its two
    corners, and every cell starts at the origin.
    """
    topo = topology if topology is not None else Topology("saddle")
    patch = topo.add_patch(size, ORIGIN, name="saddle")
    c = SADDLE_CORNERS
    pin_corners(patch, c)
    rail_edge(patch, Side.TOP, c[(Side.TOP, Side.LEFT)], c[(Side.TOP, Side.RIGHT)])
    rail_edge(patch, Side.BOTTOM, c[(Side.BOTTOM, Side.LEFT)], c[(Side.BOTTOM, Side.RIGHT)])
    rail_edge(patch, Side.LEFT, c[(Side.TOP, Side.LEFT)], c[(Side.BOTTOM, Side.LEFT)])
    rail_edge(patch, Side.RIGHT, c[(Side.TOP, Side.RIGHT)], c[(Side.BOTTOM, Side.RIGHT)])
    logger.debug("built saddle, size %d", size)
    return topo


def cylinder(size: int = 8, radius: float = 1.0, height: float = 1.0, patches: int = 2, *,
             twist_rate: float = 0.0, clock: Optional[Clock] = None,
             topology: Optional[Topology] = None) -> Topology:
    """Tube between two circular rims, made of ``patches`` patches.

    Row 0 of every patch lies on the top rim (z = height/2), row ``size``
    on the bottom rim.  Columns run counterclockwise around the axis.
    Adjacent patches are glued along their vertical sides; a single patch
    is glued to itself.  With a ``clock``, the top rim turns at
    ``twist_rate`` radians per unit of clock time.
    """
    radius, height, twist_rate = float(radius), float(height), float(twist_rate)
    if patches < 1:
        raise ConfigurationError(f"cylinder needs at least one patch, got {patches}")
    if radius <= 0 or height <= 0:
        raise ConfigurationError("cylinder radius and height must be positive")
    topo = topology if topology is not None else Topology("cylinder")
    top_z = height / 2.0
    span = 2.0 * pi / patches

    def twist() -> float:
        return twist_rate * clock() if clock is not None else 0.0

    grid = []
    for j in range(patches):
        a0 = j * span

        def seed(coord: GridCoord, a0=a0) -> Vector3:
            return _ring(radius, a0 + span * coord.col / size,
                         top_z - height * coord.row / size)

        patch = topo.add_patch(size, seed, name=f"cylinder-{j}")
        fix_edge_path(patch, Side.TOP,
                      lambda t, a0=a0: _ring(radius, a0 + span * t + twist(), top_z))
        fix_edge_path(patch, Side.BOTTOM,
                      lambda t, a0=a0: _ring(radius, a0 + span * t, -top_z))
        grid.append(patch)

    for j, patch in enumerate(grid):
        glue_patch_edges(patch, Side.RIGHT, grid[(j + 1) % patches], Side.LEFT)
    logger.debug("built cylinder from %d patches, size %d", patches, size)
    return topo


def quad_cylinder(size: int = 8, radius: float = 1.0, height: float = 1.0, *,
                  twist_rate: float = 0.0, clock: Optional[Clock] = None,
                  topology: Optional[Topology] = None) -> Topology:
    """The cylinder built from four quarter patches."""
    return cylinder(size, radius, height, 4, twist_rate=twist_rate, clock=clock,
                    topology=topology if topology is not None else Topology("quad_cylinder"))


def half_cylinder(size: int = 8, radius: float = 1.0, height: float = 1.0, *,
                  topology: Optional[Topology] = None) -> Topology:
    """Half of the cylinder, from angle 0 to pi.

    The two vertical sides are free but held on the y=0 plane by mirror
    symmetry, so the patch relaxes like one half of the full tube.
    """
    radius, height = float(radius), float(height)
    if radius <= 0 or height <= 0:
        raise ConfigurationError("cylinder radius and height must be positive")
    topo = topology if topology is not None else Topology("half_cylinder")
    top_z = height / 2.0

    def seed(coord: GridCoord) -> Vector3:
        return _ring(radius, pi * coord.col / size, top_z - height * coord.row / size)

    patch = topo.add_patch(size, seed, name="half-cylinder")
    fix_edge_path(patch, Side.TOP, lambda t: _ring(radius, pi * t, top_z))
    fix_edge_path(patch, Side.BOTTOM, lambda t: _ring(radius, pi * t, -top_z))
    plane = Plane(ORIGIN, Vector3(0.0, 1.0, 0.0))
    mirror_edge(patch, Side.LEFT, plane)
    mirror_edge(patch, Side.RIGHT, plane)
    logger.debug("built half cylinder, size %d", size)
    return topo


def quad_junction(size: int = 4, extent: float = 1.0, *,
                  topology: Optional[Topology] = None) -> Topology:
    """Saddle over the square ``[-extent, extent]^2`` split into 2x2 patches.

    The outer frame is the skew quadrilateral ``z = x*y/extent`` restricted
    to the square's border.  Internal seams are glued pairwise and the four
    patches share the center corner.
    """
    extent = float(extent)
    if extent <= 0:
        raise ConfigurationError("quad junction extent must be positive")
    topo = topology if topology is not None else Topology("quad_junction")
    full = 2 * size

    def frame(row: int, col: int) -> Vector3:
        x = -extent + 2.0 * extent * row / full
        y = -extent + 2.0 * extent * col / full
        return Vector3(x, y, x * y / extent)

    quads = {}
    for i in (0, 1):
        for j in (0, 1):
            r0, c0 = i * size, j * size

            def seed(coord: GridCoord, r0=r0, c0=c0) -> Vector3:
                return frame(r0 + coord.row, c0 + coord.col)

            patch = topo.add_patch(size, seed, name=f"quad-{i}{j}")
            # outer sides only; the frame is straight along each of them
            if i == 0:
                fix_edge(patch, Side.TOP, frame(r0, c0), frame(r0, c0 + size))
            else:
                fix_edge(patch, Side.BOTTOM, frame(r0 + size, c0), frame(r0 + size, c0 + size))
            if j == 0:
                fix_edge(patch, Side.LEFT, frame(r0, c0), frame(r0 + size, c0))
            else:
                fix_edge(patch, Side.RIGHT, frame(r0, c0 + size), frame(r0 + size, c0 + size))
            quads[i, j] = patch

    glue_patch_edges(quads[0, 0], Side.RIGHT, quads[0, 1], Side.LEFT)
    glue_patch_edges(quads[1, 0], Side.RIGHT, quads[1, 1], Side.LEFT)
    glue_patch_edges(quads[0, 0], Side.BOTTOM, quads[1, 0], Side.TOP)
    glue_patch_edges(quads[0, 1], Side.BOTTOM, quads[1, 1], Side.TOP)
    glue_patch_corners([
        (quads[0, 0], Side.BOTTOM, Side.RIGHT),
        (quads[0, 1], Side.BOTTOM, Side.LEFT),
        (quads[1, 0], Side.TOP, Side.RIGHT),
        (quads[1, 1], Side.TOP, Side.LEFT),
    ])
    logger.debug("built quad junction, size %d", size)
    return topo


def scherk_tower(size: int = 6, floors: int = 2, wings: int = 3, radius: float = 1.0,
                 floor_height: float = 1.0, twist: float = pi / 3, *,
                 topology: Optional[Topology] = None) -> Topology:
    """Stacked floors of ``wings`` films meeting on a vertical axis.

    Every wing spans from the axis (column 0) to a straight rim segment
    (column ``size``); rims turn by ``twist`` from one floor level to the
    next.  The top and bottom of the tower are closed by radial segments.
    On each floor the wings share their axis seam; consecutive floors are
    glued wing to wing, and the axis point between two floors joins all
    ``2 * wings`` patches that touch it.
    """
    radius, floor_height, twist = float(radius), float(floor_height), float(twist)
    if floors < 1 or wings < 2:
        raise ConfigurationError("scherk tower needs at least one floor and two wings")
    if radius <= 0 or floor_height <= 0:
        raise ConfigurationError("scherk tower radius and floor height must be positive")
    topo = topology if topology is not None else Topology("scherk_tower")

    def level_z(level: int) -> float:
        return (floors / 2.0 - level) * floor_height

    def rim(wing: int, level: int) -> Vector3:
        return _ring(radius, 2.0 * pi * wing / wings + level * twist, level_z(level))

    tower = []
    for f in range(floors):
        floor = []
        for i in range(wings):

            def seed(coord: GridCoord, f=f, i=i) -> Vector3:
                s = coord.row / size
                edge = lerp(rim(i, f), rim(i, f + 1), s)
                axis = Vector3(0.0, 0.0, edge.z)
                return lerp(axis, edge, coord.col / size)

            patch = topo.add_patch(size, seed, name=f"scherk-{f}-{i}")
            fix_edge(patch, Side.RIGHT, rim(i, f), rim(i, f + 1))
            if f == 0:
                fix_edge(patch, Side.TOP, Vector3(0.0, 0.0, level_z(0)), rim(i, 0))
            if f == floors - 1:
                fix_edge(patch, Side.BOTTOM, Vector3(0.0, 0.0, level_z(floors)), rim(i, floors))
            floor.append(patch)
        glue_patch_seam([(patch, Side.LEFT) for patch in floor])
        tower.append(floor)

    for f in range(floors - 1):
        upper, lower = tower[f], tower[f + 1]
        for i in range(wings):
            glue_patch_edges(upper[i], Side.BOTTOM, lower[i], Side.TOP)
        glue_patch_corners([(p, Side.BOTTOM, Side.LEFT) for p in upper]
                           + [(p, Side.TOP, Side.LEFT) for p in lower])
    logger.debug("built scherk tower, %d floors of %d wings, size %d", floors, wings, size)
    return topo


# supplied by the caller of build, never as builder params
RESERVED_PARAMS = frozenset({"clock", "topology", "name"})

BUILDERS: Dict[str, Callable[..., Topology]] = {
    "saddle": saddle,
    "cylinder": cylinder,
    "quad_cylinder": quad_cylinder,
    "half_cylinder": half_cylinder,
    "quad_junction": quad_junction,
    "scherk_tower": scherk_tower,
}


def available_builders():
    return tuple(sorted(BUILDERS.keys()))


def build(name: str, /, *, topology: Optional[Topology] = None, clock: Optional[Clock] = None,
          **params) -> Topology:
    """Run the builder registered as ``name``.

    ``clock`` is forwarded only to builders that accept one.
    """
    try:
        builder = BUILDERS[name.lower()]
    except KeyError:
        known = ", ".join(available_builders())
        raise ConfigurationError(f"unknown builder {name!r} (known: {known})") from None
    accepted = inspect.signature(builder).parameters
    unknown = [key for key in params if key not in accepted]
    if unknown:
        raise ConfigurationError(f"builder {name!r} does not take {', '.join(sorted(unknown))}")
    if clock is not None and "clock" in accepted:
        params["clock"] = clock
    try:
        topo = builder(topology=topology, **params)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"bad parameters for builder {name!r}: {exc}") from exc
    topo.validate()
    return topo


__all__ = [
    "BUILDERS",
    "RESERVED_PARAMS",
    "SADDLE_CORNERS",
    "available_builders",
    "build",
    "cylinder",
    "half_cylinder",
    "quad_cylinder",
    "quad_junction",
    "saddle",
    "scherk_tower",
]
