"""Validation helpers for geofence meshes."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

import numpy as np

from geofence3d.config import DEFAULT_CONFIG, GeofenceConfig
from geofence3d.coords import CoordsLike
from geofence3d.errors import EmptyInputError
from geofence3d.geometry_utils import dot, triangle_cross
from geofence3d.mesh import structural_errors, triangle_array
from geofence3d.polyhedral_surface import geo_triangles_to_mesh

logger = logging.getLogger(__name__)

DEGENERATE_AREA_SQ = 1e-12

VertexKey = Tuple[int, int, int]


@dataclass
class ValidationResult:
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    triangle_count: int = 0
    non_manifold_edge_count: int = 0

    def __bool__(self) -> bool:
        return self.is_valid

    def to_dict(self) -> Dict[str, Any]:
        return {
            "isValid": self.is_valid,
            "errors": list(self.errors),
            "triangleCount": self.triangle_count,
            "nonManifoldEdgeCount": self.non_manifold_edge_count,
        }


def validate_polyhedron(mesh: Any, tolerance: Optional[float] = None,
                        config: Optional[GeofenceConfig] = None) -> ValidationResult:
    """Check that ``mesh`` is a sound, watertight triangle surface.

    Structural problems (missing or malformed buffers) and non-finite
    coordinates are reported alone, since there is no usable triangle data
    to inspect.  Otherwise every degenerate triangle is reported, followed
    by one aggregate error when any edge is not shared by exactly two
    triangles.  Vertices closer than
    ``tolerance`` on each axis are treated as the same vertex.  The mesh
    is never modified.
    """

    config = config or DEFAULT_CONFIG
    if tolerance is None:
        tolerance = config.validation_tolerance

    problems = structural_errors(mesh)
    if problems:
        return ValidationResult(False, [p.message for p in problems], 0, 0)

    positions = np.asarray(mesh.position.array, dtype=np.float64).reshape(-1, 3)
    bad = np.flatnonzero(~np.isfinite(positions).all(axis=1))
    if len(bad):
        return ValidationResult(
            False, [f"Mesh contains non-finite coordinates at vertex {int(bad[0])}"], 0, 0
        )
    with np.errstate(over="ignore"):
        grid = positions / tolerance
    bad = np.flatnonzero(~np.isfinite(grid).all(axis=1))
    if len(bad):
        return ValidationResult(
            False,
            [f"Mesh coordinates at vertex {int(bad[0])} are too large for tolerance {tolerance}"],
            0, 0,
        )

    tris = triangle_array(mesh).tolist()
    errors: List[str] = []
    vertex_ids: Dict[VertexKey, int] = {}
    edges: Counter = Counter()

    def vertex_id(v) -> int:
        key = (round(v[0] / tolerance), round(v[1] / tolerance), round(v[2] / tolerance))
        return vertex_ids.setdefault(key, len(vertex_ids))

    for idx, (v0, v1, v2) in enumerate(tris):
        n = triangle_cross(v0, v1, v2)
        if dot(n, n) <= DEGENERATE_AREA_SQ:
            errors.append(f"Degenerate triangle at index {idx} (zero area)")

        a, b, c = vertex_id(v0), vertex_id(v1), vertex_id(v2)
        edges[_edge_key(a, b)] += 1
        edges[_edge_key(b, c)] += 1
        edges[_edge_key(c, a)] += 1

    non_manifold = sum(1 for count in edges.values() if count != 2)
    if non_manifold:
        errors.append(
            f"Geometry is not watertight: {non_manifold} non-manifold edges "
            "(each edge must be shared by exactly two triangles)"
        )

    logger.debug("validated %d triangles: %d vertices, %d edges, %d non-manifold",
                 len(tris), len(vertex_ids), len(edges), non_manifold)
    return ValidationResult(not errors, errors, len(tris), non_manifold)


def validate_geo_triangles(triangles: Iterable[Any], origin: CoordsLike,
                           tolerance: Optional[float] = None,
                           config: Optional[GeofenceConfig] = None) -> ValidationResult:
    """Validate a stored triangle list by rebuilding its local mesh."""

    try:
        mesh = geo_triangles_to_mesh(triangles, origin)
    except EmptyInputError as exc:
        return ValidationResult(False, [exc.message], 0, 0)
    return validate_polyhedron(mesh, tolerance, config)


def _edge_key(a: int, b: int) -> tuple[int, int]:
    return (a, b) if a < b else (b, a)


__all__ = [
    'ValidationResult',
    'validate_geo_triangles',
    'validate_polyhedron',
]
