import pytest

from soapfilm.conditions import (
    CrossPatchAverage,
    FixedPoint,
    MirrorSymmetry,
    ParametricPoint,
    Plane,
    SegmentRail,
    is_condition,
)
from soapfilm.errors import ConfigurationError, DegenerateGeometryError
from soapfilm.geom import ORIGIN, Vector3, vclose
from soapfilm.grid import GridCoord
from soapfilm.patch import Patch, PatchPoint


def _grid_seed(coord):
    return Vector3(float(coord.col), 0.0, float(coord.row))


def _valued_patch(size, values):
    return Patch(size, lambda coord: values.get((coord.row, coord.col), ORIGIN))


def test_fixed_point():
    patch = Patch(2)
    cond = FixedPoint(Vector3(1, 2, 3))
    assert cond.apply(patch.point(0, 0)) == Vector3(1, 2, 3)
    assert cond.references() == ()
    assert is_condition(cond)


def test_parametric_point_is_reevaluated():
    patch = Patch(2)
    calls = []

    def fn():
        calls.append(1)
        return Vector3(len(calls), 0, 0)

    cond = ParametricPoint(fn)
    assert cond.apply(patch.point(0, 0)) == Vector3(1, 0, 0)
    assert cond.apply(patch.point(0, 0)) == Vector3(2, 0, 0)
    with pytest.raises(ConfigurationError):
        ParametricPoint(None)


class TestSegmentRail:

    patch = Patch(2, _grid_seed)

    def test_projects_neighbor_average(self):
        # neighbors of (0, 1): (1, 1), (0, 2), (0, 0)
        rail = SegmentRail(Vector3(0, 0, 0), Vector3(2, 0, 0))
        assert vclose(rail.apply(self.patch.point(0, 1)), Vector3(1, 0, 0))

    def test_clamps_to_start(self):
        rail = SegmentRail(Vector3(5, 0, 0), Vector3(6, 0, 0))
        assert rail.apply(self.patch.point(0, 1)) == Vector3(5, 0, 0)

    def test_clamps_to_end(self):
        rail = SegmentRail(Vector3(-3, 0, 0), Vector3(-2, 0, 0))
        assert rail.apply(self.patch.point(0, 1)) == Vector3(-2, 0, 0)

    def test_interior_cell_uses_four_neighbors(self):
        rail = SegmentRail(Vector3(0, 0, -5), Vector3(0, 0, 5))
        assert vclose(rail.apply(self.patch.point(1, 1)), Vector3(0, 0, 1))

    def test_zero_length(self):
        with pytest.raises(DegenerateGeometryError):
            SegmentRail(Vector3(1, 1, 1), Vector3(1, 1, 1))


def test_plane():
    plane = Plane(ORIGIN, Vector3(0, 5, 0))
    assert plane.normal == Vector3(0, 1, 0)
    assert plane.distance(Vector3(1, 2, 3)) == 2
    assert plane.reflect(Vector3(1, 2, 3)) == Vector3(1, -2, 3)
    with pytest.raises(DegenerateGeometryError):
        Plane(ORIGIN, ORIGIN)


class TestMirrorSymmetry:

    plane = Plane(ORIGIN, Vector3(0, 1, 0))

    def test_two_laterals_blend(self):
        patch = _valued_patch(2, {
            (0, 0): Vector3(0, 0, 1),
            (2, 0): Vector3(0, 0, -1),
            (1, 1): Vector3(0, 1, 0),
        })
        cond = MirrorSymmetry(self.plane, inside=patch.point(1, 1),
                              laterals=(patch.point(0, 0), patch.point(2, 0)))
        result = cond.apply(patch.point(1, 0))
        assert vclose(result, ORIGIN)
        assert len(cond.references()) == 3

    def test_result_stays_on_plane(self):
        patch = _valued_patch(2, {
            (0, 0): Vector3(1, 0, 1),
            (2, 0): Vector3(1, 0, -2),
            (1, 1): Vector3(2, 0.7, 0.3),
        })
        cond = MirrorSymmetry(self.plane, inside=patch.point(1, 1),
                              laterals=[patch.point(0, 0), patch.point(2, 0)])
        assert abs(cond.apply(patch.point(1, 0)).y) < 1e-12

    def test_without_laterals_averages(self):
        patch = _valued_patch(2, {(1, 1): Vector3(1, 1, 0)})
        cond = MirrorSymmetry(self.plane, inside=patch.point(1, 1))
        assert cond.apply(patch.point(1, 0)) == Vector3(1, 0, 0)

    def test_one_lateral_averages(self):
        patch = _valued_patch(2, {(1, 1): Vector3(1, 1, 0), (0, 0): Vector3(4, 0, 3)})
        cond = MirrorSymmetry(self.plane, inside=patch.point(1, 1), laterals=(patch.point(0, 0),))
        assert vclose(cond.apply(patch.point(1, 0)), Vector3(2, 0, 1))

    def test_configuration_errors(self):
        patch = Patch(2)
        with pytest.raises(ConfigurationError):
            MirrorSymmetry(self.plane, inside=None)
        with pytest.raises(ConfigurationError):
            MirrorSymmetry(self.plane, inside=patch.point(1, 1),
                           laterals=(patch.point(0, 0), patch.point(0, 1), patch.point(0, 2)))


class TestCrossPatchAverage:

    def test_mean_across_patches(self):
        a = _valued_patch(2, {(0, 1): Vector3(1, 0, 0), (1, 1): Vector3(3, 0, 0)})
        b = _valued_patch(2, {(1, 1): Vector3(2, 6, 0)})
        cond = CrossPatchAverage([a.point(0, 1), a.point(1, 1), b.point(1, 1)])
        target = a.point(0, 2)
        assert vclose(cond.apply(target), Vector3(2, 2, 0))
        assert len(cond.references()) == 3

    def test_result_independent_of_target_value(self):
        a = _valued_patch(2, {(0, 0): Vector3(100, -50, 7), (1, 1): Vector3(1, 1, 1)})
        cond = CrossPatchAverage((a.point(1, 1), a.point(1, 2)))
        assert vclose(cond.apply(a.point(0, 0)), Vector3(0.5, 0.5, 0.5))

    def test_empty(self):
        with pytest.raises(ConfigurationError):
            CrossPatchAverage([])


def test_patch_point_bounds():
    patch = Patch(2)
    with pytest.raises(ConfigurationError):
        PatchPoint(patch, GridCoord(3, 0))
    with pytest.raises(ConfigurationError):
        patch.point(-1, 0)
