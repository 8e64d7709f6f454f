"""Gluing and edge-fixing helpers.

These functions install boundary conditions along whole sides of a patch.
Gluing makes two or more patches agree on a shared seam or corner: every
participating cell gets the *same* ``CrossPatchAverage``, so the cells
agree on every iteration up to rounding (the mean is taken relative to
each target cell).  Fixing pins a side to a
straight segment or a curve.

All helpers must run before the first ``apply()``.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Optional, Sequence, Tuple, Union

from soapfilm.conditions import (
    CrossPatchAverage,
    FixedPoint,
    MirrorSymmetry,
    ParametricPoint,
    Plane,
    SegmentRail,
)
from soapfilm.errors import ConfigurationError
from soapfilm.geom import Vector3, lerp
from soapfilm.grid import GridCoord, Side, along_from_corner, corner, side_frame
from soapfilm.patch import Patch, PatchPoint

logger = logging.getLogger(__name__)

Endpoint = Union[Vector3, Callable[[], Vector3]]


def _check_sizes(patches: Sequence[Patch]) -> int:
    sizes = {p.size for p in patches}
    if len(sizes) != 1:
        raise ConfigurationError(f"glued patches must share a size, got {sorted(sizes)}")
    return sizes.pop()


def glue_patch_seam(entries: Sequence[Tuple[Patch, Side]],
                    reverse: Optional[Sequence[bool]] = None) -> None:
    """Glue the non-corner cells of several patch sides into one seam.

    ``entries`` lists ``(patch, side)`` pairs; ``reverse[k]`` walks the
    k-th side from its far end.  Each seam cell takes the mean of the
    first participant's two along-seam neighbors and every participant's
    one-inward neighbor.
    """

    if len(entries) < 2:
        raise ConfigurationError("a seam needs at least two participants")
    if reverse is None:
        reverse = [False] * len(entries)
    if len(reverse) != len(entries):
        raise ConfigurationError("reverse flags must match seam participants")
    size = _check_sizes([patch for patch, _ in entries])
    frames = [side_frame(size, side) for _, side in entries]

    first_patch = entries[0][0]
    first_frame = frames[0]
    for i in range(1, size):
        cells = [frame.cell(size - i if rev else i) for frame, rev in zip(frames, reverse)]
        a = cells[0]
        points = [
            PatchPoint(first_patch, a - first_frame.direction),
            PatchPoint(first_patch, a + first_frame.direction),
        ]
        for (patch, _), frame, cell in zip(entries, frames, cells):
            points.append(PatchPoint(patch, cell + frame.inward))
        condition = CrossPatchAverage(tuple(points))
        for (patch, _), cell in zip(entries, cells):
            patch.set_condition(cell, condition)
    logger.debug("glued seam of %d sides (%s)", len(entries),
                 ", ".join(f"{p.label}:{s.name}" for p, s in entries))


def glue_patch_edges(patch_a: Patch, side_a: Side, patch_b: Patch, side_b: Side,
                     reverse: bool = False) -> None:
    """Glue side ``side_a`` of ``patch_a`` to ``side_b`` of ``patch_b``.

    With ``reverse`` the second side is walked from its far end.  The two
    sides may belong to the same patch.
    """
    glue_patch_seam([(patch_a, side_a), (patch_b, side_b)], reverse=[False, reverse])


def glue_patch_corners(entries: Sequence[Tuple[Patch, Side, Side]]) -> None:
    """Make the named corners of several patches coincide.

    Each entry is ``(patch, side_a, side_b)``; the corner is where the two
    sides meet.  Every corner cell takes the mean of all participants'
    near-corner cells, one step along each of the two sides.
    """

    if len(entries) < 2:
        raise ConfigurationError("a corner junction needs at least two participants")
    corners = []
    points = []
    for patch, side_a, side_b in entries:
        at = corner(patch.size, side_a, side_b)
        corners.append((patch, at))
        for side in (side_a, side_b):
            points.append(PatchPoint(patch, at + along_from_corner(patch.size, side, at)))
    condition = CrossPatchAverage(tuple(points))
    for patch, at in corners:
        patch.set_condition(at, condition)
    logger.debug("glued %d-way corner", len(entries))


def _evaluator(endpoint: Endpoint) -> Callable[[], Vector3]:
    if isinstance(endpoint, Vector3):
        return lambda: endpoint
    if callable(endpoint):
        return endpoint
    raise ConfigurationError(f"edge endpoint must be a Vector3 or callable, got {type(endpoint)!r}")


def fix_edge(patch: Patch, side: Side, start: Endpoint, end: Endpoint) -> None:
    """Pin a whole side, corners included, to the segment ``start``-``end``.

    Either endpoint may be a zero-argument callable, which is re-evaluated
    on every iteration.
    """
    start_fn = _evaluator(start)
    end_fn = _evaluator(end)
    frame = side_frame(patch.size, side)
    for i, cell in enumerate(frame.cells()):
        t = i / patch.size
        patch.set_condition(cell, ParametricPoint(
            lambda t=t: lerp(start_fn(), end_fn(), t)))


def fix_edge_path(patch: Patch, side: Side, path: Callable[[float], Vector3]) -> None:
    """Pin a whole side to ``path(t)``, ``t`` running from 0 to 1 along it."""
    if not callable(path):
        raise ConfigurationError("fix_edge_path needs a callable path")
    frame = side_frame(patch.size, side)
    for i, cell in enumerate(frame.cells()):
        t = i / patch.size
        patch.set_condition(cell, ParametricPoint(lambda t=t: path(t)))


def rail_edge(patch: Patch, side: Side, start: Vector3, end: Vector3) -> None:
    """Let the non-corner cells of a side slide on a segment."""
    rail = SegmentRail(start, end)
    for cell in side_frame(patch.size, side).inner_cells():
        patch.set_condition(cell, rail)


def mirror_edge(patch: Patch, side: Side, plane: Plane) -> None:
    """Hold the non-corner cells of a side on a symmetry plane."""
    frame = side_frame(patch.size, side)
    for cell in frame.inner_cells():
        patch.set_condition(cell, MirrorSymmetry(
            plane=plane,
            inside=PatchPoint(patch, cell + frame.inward),
            laterals=(PatchPoint(patch, cell - frame.direction),
                      PatchPoint(patch, cell + frame.direction)),
        ))


def pin_corners(patch: Patch, corners: Dict[Tuple[Side, Side], Vector3]) -> None:
    """Fix corner cells, keyed by the pair of sides meeting there."""
    for (side_a, side_b), value in corners.items():
        patch.set_condition(corner(patch.size, side_a, side_b), FixedPoint(value))


def pin(patch: Patch, coord: GridCoord, value: Vector3) -> None:
    patch.set_condition(coord, FixedPoint(value))


__all__ = [
    "fix_edge",
    "fix_edge_path",
    "glue_patch_corners",
    "glue_patch_edges",
    "glue_patch_seam",
    "mirror_edge",
    "pin",
    "pin_corners",
    "rail_edge",
]
