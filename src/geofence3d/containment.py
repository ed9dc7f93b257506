"""Point-in-volume tests for closed triangle meshes.

A ray is cast from the query point along a fixed, slightly skewed
direction and surface crossings are counted: odd means inside.  Points
within the boundary tolerance of any triangle are reported as inside and
on the boundary before any ray is cast, so faces, edges and vertices
classify consistently.

The mesh must be watertight for the answer to mean anything; open meshes
give arbitrary (but non-failing) results.  Run
``geofence3d.validation.validate_polyhedron`` first when that matters.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence

from geofence3d.config import DEFAULT_CONFIG, GeofenceConfig
from geofence3d.coords import CoordsLike, MercatorScaleCache, to_local
from geofence3d.geo_triangles import as_geo_triangle
from geofence3d.geometry_utils import (
    Vec3,
    closest_point_on_triangle,
    dist,
    dot,
    normalize,
    ray_triangle_intersection,
    sub,
    to_vec3,
)
from geofence3d.mesh import TriTuple, mesh_view


@dataclass(frozen=True)
class PointInPolyhedronResult:
    """Outcome of a containment query.

    ``intersection_count`` is the raw number of ray crossings (0 when the
    point was classified by the boundary test).
    """

    inside: bool
    intersection_count: int
    on_boundary: bool = False

    def __bool__(self) -> bool:
        return self.inside

    def to_dict(self) -> Dict[str, Any]:
        return {
            "inside": self.inside,
            "onBoundary": self.on_boundary,
            "intersectionCount": self.intersection_count,
        }


def _near_surface(point: Vec3, triangles: Iterable[TriTuple], tolerance: float) -> bool:
    for a, b, c in triangles:
        if dist(point, closest_point_on_triangle(point, a, b, c)) <= tolerance:
            return True
    return False


def _classify(point: Vec3, triangles: Sequence[TriTuple], config: GeofenceConfig) -> PointInPolyhedronResult:
    if _near_surface(point, triangles, config.boundary_tolerance):
        return PointInPolyhedronResult(True, 0, True)

    direction = normalize(config.ray_direction)
    count = 0
    for a, b, c in triangles:
        hit = ray_triangle_intersection(point, direction, a, b, c)
        if hit is not None and dot(sub(hit, point), direction) > config.ray_epsilon:
            count += 1
    return PointInPolyhedronResult(count % 2 == 1, count, False)


def is_point_in_polyhedron(point: Sequence[float], mesh: Any,
                           config: Optional[GeofenceConfig] = None) -> PointInPolyhedronResult:
    """Test whether local ``point`` lies inside the closed ``mesh``.

    Raises ``StructuralError`` if the mesh has no usable position data.
    """

    config = config or DEFAULT_CONFIG
    triangles = list(mesh_view(mesh, "point-in-polyhedron testing"))
    return _classify(to_vec3(point), triangles, config)


def is_point_on_surface(point: Sequence[float], mesh: Any, tolerance: float = 1e-3) -> bool:
    """Return ``True`` if ``point`` is within ``tolerance`` of any triangle of ``mesh``."""

    return _near_surface(to_vec3(point), mesh_view(mesh, "surface testing"), tolerance)


def _local_triangles(triangles: Iterable[Any], origin: CoordsLike,
                     cache: Optional[MercatorScaleCache] = None) -> List[TriTuple]:
    local = []
    for tri in triangles:
        tri = as_geo_triangle(tri)
        local.append((
            to_local(tri.v0, origin, cache),
            to_local(tri.v1, origin, cache),
            to_local(tri.v2, origin, cache),
        ))
    return local


def is_point_in_geo_triangles(point: Sequence[float], triangles: Iterable[Any],
                              origin: CoordsLike,
                              config: Optional[GeofenceConfig] = None) -> PointInPolyhedronResult:
    """Test local ``point`` against a surface stored as geographic triangles.

    Useful for surfaces loaded from a database without building a mesh.
    """

    config = config or DEFAULT_CONFIG
    return _classify(to_vec3(point), _local_triangles(triangles, origin), config)


def is_coords_in_polyhedron(coords: CoordsLike, mesh: Any, origin: CoordsLike,
                            config: Optional[GeofenceConfig] = None) -> PointInPolyhedronResult:
    """Geographic variant of ``is_point_in_polyhedron``; ``mesh`` is in ``origin``'s frame."""

    return is_point_in_polyhedron(to_local(coords, origin), mesh, config)


def is_coords_in_geo_triangles(coords: CoordsLike, triangles: Iterable[Any], origin: CoordsLike,
                               config: Optional[GeofenceConfig] = None) -> PointInPolyhedronResult:
    """Geographic variant of ``is_point_in_geo_triangles``."""

    return is_point_in_geo_triangles(to_local(coords, origin), triangles, origin, config)


__all__ = [
    "PointInPolyhedronResult",
    "is_coords_in_geo_triangles",
    "is_coords_in_polyhedron",
    "is_point_in_geo_triangles",
    "is_point_in_polyhedron",
    "is_point_on_surface",
]
