import math
import random

import pytest

from geofence3d.errors import DegenerateGeometryError
from geofence3d.coords import geo_axis_scale
from geofence3d.geometry_utils import dot, mag, triangle_cross
from geofence3d.triangulator import plane_basis, project_ring, ring_normal, triangulate_ring

SQUARE = [(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (1.0, 1.0, 0.0), (0.0, 1.0, 0.0)]


def _total_area(triangles):
    return sum(0.5 * mag(triangle_cross(*tri)) for tri in triangles)


def _input_vertices(triangles):
    return {v for tri in triangles for v in tri}


def test_triangle_passes_through_unchanged():
    tri = [(0, 0, 0), (1, 0, 0), (0, 1, 0)]
    assert triangulate_ring(tri) == [((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0))]


def test_too_few_vertices():
    with pytest.raises(DegenerateGeometryError, match="at least 3"):
        triangulate_ring([(0, 0, 0), (1, 0, 0)])


def test_degenerate_triangle():
    with pytest.raises(DegenerateGeometryError, match="zero area"):
        triangulate_ring([(0, 0, 0), (1, 1, 1), (2, 2, 2)])


def test_collinear_ring():
    with pytest.raises(DegenerateGeometryError, match="collinear"):
        triangulate_ring([(0, 0, 0), (1, 0, 0), (2, 0, 0), (3, 0, 0)])


def test_square_splits_into_two_triangles():
    triangles = triangulate_ring(SQUARE)
    assert len(triangles) == 2
    assert math.isclose(_total_area(triangles), 1.0)
    assert _input_vertices(triangles) <= set(SQUARE)


def test_winding_follows_ring():
    for a, b, c in triangulate_ring(SQUARE):
        assert triangle_cross(a, b, c)[2] > 0
    for a, b, c in triangulate_ring(list(reversed(SQUARE))):
        assert triangle_cross(a, b, c)[2] < 0


def test_concave_l_shape():
    ring = [(0, 0, 5), (2, 0, 5), (2, 1, 5), (1, 1, 5), (1, 2, 5), (0, 2, 5)]
    triangles = triangulate_ring(ring)
    assert len(triangles) == 4
    assert math.isclose(_total_area(triangles), 3.0)
    for a, b, c in triangles:
        assert triangle_cross(a, b, c)[2] > 0


def test_collinear_leading_vertices_are_skipped_for_the_normal():
    ring = [(0, 0, 0), (1, 0, 0), (2, 0, 0), (2, 1, 0), (0, 1, 0)]
    n = ring_normal(ring)
    assert n == pytest.approx((0.0, 0.0, 1.0))
    assert math.isclose(_total_area(triangulate_ring(ring)), 2.0)


def test_vertical_wall():
    wall = [(0, 0, 0), (0, 1, 0), (0, 1, 1), (0, 0, 1)]
    triangles = triangulate_ring(wall)
    assert len(triangles) == 2
    assert math.isclose(_total_area(triangles), 1.0)
    normal = ring_normal(wall)
    for a, b, c in triangles:
        assert dot(triangle_cross(a, b, c), normal) > 0


def test_plane_basis_is_orthonormal():
    for normal in [(0.0, 0.0, 1.0), (1.0, 0.0, 0.0), (0.0, -1.0, 0.0)]:
        u, v = plane_basis(normal)
        assert dot(u, normal) == pytest.approx(0.0)
        assert dot(v, normal) == pytest.approx(0.0)
        assert dot(u, v) == pytest.approx(0.0)
        assert dot(u, u) == pytest.approx(1.0)


def test_project_ring_shape():
    projected, normal = project_ring(SQUARE)
    assert projected.shape == (4, 2)
    assert projected.flags["C_CONTIGUOUS"]
    assert normal == pytest.approx((0.0, 0.0, 1.0))


def test_nearly_planar_ring():
    rng = random.Random(7)
    ring = [(x, y, 10.0 + rng.uniform(-1e-9, 1e-9)) for x, y, _ in SQUARE]
    triangles = triangulate_ring(ring)
    assert len(triangles) == 2
    assert math.isclose(_total_area(triangles), 1.0, rel_tol=1e-6)


def test_geographic_scale_quad():
    # a 10 m face in raw lon/lat/alt space
    ring = [
        (-0.1278, 51.5074, 0.0),
        (-0.12766, 51.5074, 0.0),
        (-0.12766, 51.5074, 10.0),
        (-0.1278, 51.5074, 10.0),
    ]
    assert len(triangulate_ring(ring)) == 2


def test_small_geographic_triangle_is_measured_in_meters():
    # a few centimeters on a side near London
    tri = [(-0.1278, 51.5074, 0.0), (-0.1277996, 51.5074, 0.0), (-0.1278, 51.5074003, 0.0)]
    with pytest.raises(DegenerateGeometryError, match="zero area"):
        triangulate_ring(tri)
    assert triangulate_ring(tri, axis_scale=geo_axis_scale(51.5074)) == [tuple(tri)]


def test_axis_scale_keeps_input_vertices_and_winding():
    ring = [(-0.1278, 51.5074, 0.0), (-0.1277996, 51.5074, 0.0),
            (-0.1277996, 51.5074003, 0.0), (-0.1278, 51.5074003, 0.0)]
    with pytest.raises(DegenerateGeometryError, match="collinear"):
        triangulate_ring(ring)
    triangles = triangulate_ring(ring, axis_scale=geo_axis_scale(51.5074))
    assert len(triangles) == 2
    assert _input_vertices(triangles) <= set(ring)
    for a, b, c in triangles:
        assert triangle_cross(a, b, c)[2] > 0
