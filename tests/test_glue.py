import pytest

from soapfilm.conditions import CrossPatchAverage, MirrorSymmetry, Plane
from soapfilm.errors import ConfigurationError
from soapfilm.geom import ORIGIN, Vector3, centroid, vclose
from soapfilm.glue import (
    fix_edge,
    fix_edge_path,
    glue_patch_corners,
    glue_patch_edges,
    glue_patch_seam,
    mirror_edge,
    pin,
    pin_corners,
    rail_edge,
)
from soapfilm.grid import GridCoord, Side
from soapfilm.patch import Patch


def seeded(offset):
    return lambda c: Vector3(c.col + offset.x, c.row + offset.y, (c.row * c.col) % 3 + offset.z)


def step(*patches):
    for p in patches:
        p.apply()
    for p in patches:
        p.commit()


class TestEdgeGluing:

    def test_seam_cells_agree(self):
        a = Patch(4, seeded(Vector3(0, 0, 0)))
        b = Patch(4, seeded(Vector3(10, 0, 1)))
        glue_patch_edges(a, Side.RIGHT, b, Side.LEFT)
        step(a, b)
        for r in range(1, 4):
            assert vclose(a.get(r, 4), b.get(r, 0))

    def test_seam_value_is_mean_of_neighbors(self):
        a = Patch(4, seeded(Vector3(0, 0, 0)))
        b = Patch(4, seeded(Vector3(10, 0, 1)))
        expected = centroid([a.get(1, 4), a.get(3, 4), a.get(2, 3), b.get(2, 1)])
        glue_patch_edges(a, Side.RIGHT, b, Side.LEFT)
        step(a, b)
        assert vclose(a.get(2, 4), expected)

    def test_same_condition_on_both_sides(self):
        a = Patch(3)
        b = Patch(3)
        glue_patch_edges(a, Side.BOTTOM, b, Side.TOP)
        cond = a.condition_at(GridCoord(3, 1))
        assert isinstance(cond, CrossPatchAverage)
        assert b.condition_at(GridCoord(0, 1)) is cond
        # corners are left alone
        assert a.condition_at(GridCoord(3, 0)) is None

    def test_reverse(self):
        a = Patch(4, seeded(Vector3(0, 0, 0)))
        b = Patch(4, seeded(Vector3(0, 5, 2)))
        glue_patch_edges(a, Side.RIGHT, b, Side.LEFT, reverse=True)
        step(a, b)
        for r in range(1, 4):
            assert vclose(a.get(r, 4), b.get(4 - r, 0))

    def test_self_seam(self):
        p = Patch(4, seeded(Vector3(1, 2, 3)))
        glue_patch_edges(p, Side.RIGHT, p, Side.LEFT)
        step(p)
        for r in range(1, 4):
            assert vclose(p.get(r, 4), p.get(r, 0))

    def test_size_mismatch(self):
        with pytest.raises(ConfigurationError):
            glue_patch_edges(Patch(3), Side.RIGHT, Patch(4), Side.LEFT)

    def test_seam_needs_two(self):
        with pytest.raises(ConfigurationError):
            glue_patch_seam([(Patch(3), Side.LEFT)])
        with pytest.raises(ConfigurationError):
            glue_patch_seam([(Patch(3), Side.LEFT), (Patch(3), Side.LEFT)], reverse=[True])

    def test_three_way_seam(self):
        wings = [Patch(4, seeded(Vector3(i, -i, 2 * i))) for i in range(3)]
        glue_patch_seam([(w, Side.LEFT) for w in wings])
        step(*wings)
        for r in range(1, 4):
            assert vclose(wings[0].get(r, 0), wings[1].get(r, 0))
            assert vclose(wings[0].get(r, 0), wings[2].get(r, 0))


class TestCornerGluing:

    def test_three_way_corner(self):
        ps = [Patch(3, seeded(Vector3(i, 2 * i, -i))) for i in range(3)]
        entries = [(ps[0], Side.BOTTOM, Side.RIGHT),
                   (ps[1], Side.TOP, Side.LEFT),
                   (ps[2], Side.LEFT, Side.BOTTOM)]
        expected = centroid([ps[0].get(3, 2), ps[0].get(2, 3),
                             ps[1].get(0, 1), ps[1].get(1, 0),
                             ps[2].get(2, 0), ps[2].get(3, 1)])
        glue_patch_corners(entries)
        step(*ps)
        assert vclose(ps[0].get(3, 3), ps[1].get(0, 0))
        assert vclose(ps[0].get(3, 3), ps[2].get(3, 0))
        assert vclose(ps[0].get(3, 3), expected)

    def test_needs_two(self):
        with pytest.raises(ConfigurationError):
            glue_patch_corners([(Patch(3), Side.TOP, Side.LEFT)])

    def test_parallel_sides(self):
        with pytest.raises(ConfigurationError):
            glue_patch_corners([(Patch(3), Side.TOP, Side.BOTTOM), (Patch(3), Side.TOP, Side.LEFT)])


class TestFixing:

    def test_fix_edge_linear(self):
        p = Patch(4)
        fix_edge(p, Side.LEFT, Vector3(0, 0, 0), Vector3(4, 0, 8))
        step(p)
        for r in range(5):
            assert vclose(p.get(r, 0), Vector3(r, 0, 2 * r))

    def test_fix_edge_time_varying(self):
        p = Patch(2)
        state = {"z": 0.0}
        fix_edge(p, Side.TOP, lambda: Vector3(0, 0, state["z"]), Vector3(2, 0, 0))
        step(p)
        assert p.get(0, 0) == ORIGIN
        state["z"] = 1.0
        step(p)
        assert p.get(0, 0) == Vector3(0, 0, 1)
        assert vclose(p.get(0, 1), Vector3(1, 0, 0.5))

    def test_fix_edge_bad_endpoint(self):
        with pytest.raises(ConfigurationError):
            fix_edge(Patch(2), Side.TOP, (0, 0, 0), ORIGIN)

    def test_fix_edge_path(self):
        p = Patch(4)
        fix_edge_path(p, Side.BOTTOM, lambda t: Vector3(t, t * t, 0))
        step(p)
        assert vclose(p.get(4, 2), Vector3(0.5, 0.25, 0))
        assert vclose(p.get(4, 4), Vector3(1, 1, 0))

    def test_rail_edge_skips_corners(self):
        p = Patch(3)
        rail_edge(p, Side.TOP, Vector3(0, 0, 0), Vector3(3, 0, 0))
        assert p.condition_at(GridCoord(0, 0)) is None
        assert p.condition_at(GridCoord(0, 1)) is not None

    def test_pin(self):
        p = Patch(3)
        pin_corners(p, {(Side.TOP, Side.LEFT): Vector3(1, 1, 1),
                        (Side.BOTTOM, Side.RIGHT): Vector3(2, 2, 2)})
        pin(p, GridCoord(1, 1), Vector3(5, 5, 5))
        step(p)
        assert p.get(0, 0) == Vector3(1, 1, 1)
        assert p.get(3, 3) == Vector3(2, 2, 2)
        assert p.get(1, 1) == Vector3(5, 5, 5)


def test_mirror_edge_holds_plane():
    p = Patch(4, seeded(Vector3(0, 0, 0)))
    plane = Plane(Vector3(0, 0, 0), Vector3(1, 0, 0))
    mirror_edge(p, Side.LEFT, plane)
    assert isinstance(p.condition_at(GridCoord(2, 0)), MirrorSymmetry)
    step(p)
    for r in range(1, 4):
        assert abs(p.get(r, 0).x) < 1e-12
