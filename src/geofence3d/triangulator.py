"""Triangulation of planar (or nearly planar) 3D polygon rings.

We delegate to ``mapbox-earcut`` (the fast ear clipping implementation
used by Mapbox GL) to keep the logic compact and reliable.  The helpers in
this file pick a plane for the ring, project it to 2D in the format
expected by earcut and lift the resulting indices back onto the original
3D vertices.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

import numpy as np

try:
    import mapbox_earcut as _earcut
except ImportError as exc:  # pragma: no cover - import guard
    raise ImportError(
        "mapbox-earcut must be installed to triangulate polygon rings"
    ) from exc

from geofence3d.errors import (
    error_collinear_ring,
    error_degenerate_triangle,
    error_too_few_vertices,
    error_triangulation_failed,
)
from geofence3d.geometry_utils import Vec3, cross, mag, normalize, sub, to_vec3, triangle_cross

logger = logging.getLogger(__name__)

MIN_AREA = 1e-12

Triangle3D = Tuple[Vec3, Vec3, Vec3]


def ring_normal(vertices: Sequence[Vec3], min_area: float = MIN_AREA) -> Vec3:
    """Return a unit normal spanned by the ring, searching past collinear leads.

    Consecutive pairs ``(v[i] - v[0]) x (v[i+1] - v[0])`` are tried in order
    until one exceeds ``min_area``.
    """

    origin = vertices[0]
    for i in range(1, len(vertices) - 1):
        n = cross(sub(vertices[i], origin), sub(vertices[i + 1], origin))
        if mag(n) > min_area:
            return normalize(n)
    raise error_collinear_ring(len(vertices))


def plane_basis(normal: Vec3) -> Tuple[Vec3, Vec3]:
    """Return in-plane axes ``(u, v)`` orthogonal to ``normal``."""

    helper = (0.0, 1.0, 0.0) if abs(normal[0]) > 0.9 else (1.0, 0.0, 0.0)
    u = normalize(cross(helper, normal))
    v = cross(normal, u)
    return u, v


def project_ring(vertices: Sequence[Sequence[float]],
                 min_area: float = MIN_AREA) -> Tuple[np.ndarray, Vec3]:
    """Project a 3D ring onto its own plane.

    Returns an ``(n, 2)`` float64 array and the plane normal used.
    """

    verts = [to_vec3(v) for v in vertices]
    normal = ring_normal(verts, min_area)
    u, v = plane_basis(normal)

    pts = np.asarray(verts, dtype=np.float64)
    rel = pts - pts[0]
    basis = np.asarray([u, v], dtype=np.float64)
    return np.ascontiguousarray(rel @ basis.T), normal


def triangulate_ring(vertices: Sequence[Sequence[float]],
                     min_area: float = MIN_AREA,
                     axis_scale: Optional[Sequence[float]] = None) -> List[Triangle3D]:
    """Return triangles covering the simple polygon ``vertices``.

    ``vertices`` is an open ring (no repeated closing point).  Output
    triangles reference the input vertices and share the ring's winding.
    Raises ``DegenerateGeometryError`` when the ring has fewer than three
    vertices, is collinear, or earcut cannot triangulate it.

    ``axis_scale`` multiplies each axis before the area and plane tests, so
    rings in angular units can be judged in meters.  The factors must be
    positive; output vertices are never scaled.
    """

    count = len(vertices)
    if count < 3:
        raise error_too_few_vertices(count)

    verts = [to_vec3(v) for v in vertices]
    scaled = verts
    if axis_scale is not None:
        sx, sy, sz = axis_scale
        scaled = [(v[0] * sx, v[1] * sy, v[2] * sz) for v in verts]
    if count == 3:
        if mag(triangle_cross(*scaled)) <= min_area:
            raise error_degenerate_triangle()
        return [(verts[0], verts[1], verts[2])]

    projected, _ = project_ring(scaled, min_area)
    ring_ends = np.asarray([count], dtype=np.uint32)
    indices = np.asarray(_earcut.triangulate_float64(projected, ring_ends)).reshape(-1)

    if len(indices) == 0 or len(indices) % 3 != 0:
        raise error_triangulation_failed(count, len(indices))

    ccw = _signed_area(projected) >= 0.0
    triangles: List[Triangle3D] = []
    for i in range(0, len(indices), 3):
        a, b, c = int(indices[i]), int(indices[i + 1]), int(indices[i + 2])
        if (_signed_area(projected[[a, b, c]]) >= 0.0) != ccw:
            b, c = c, b
        triangles.append((verts[a], verts[b], verts[c]))

    logger.debug("triangulated %d-vertex ring into %d triangles", count, len(triangles))
    return triangles


def _signed_area(loop: np.ndarray) -> float:
    x = loop[:, 0]
    y = loop[:, 1]
    return float(np.dot(x, np.roll(y, -1)) - np.dot(np.roll(x, -1), y)) / 2.0


__all__ = [
    "MIN_AREA",
    "plane_basis",
    "project_ring",
    "ring_normal",
    "triangulate_ring",
]
