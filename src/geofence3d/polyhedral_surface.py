"""Conversion between local triangle meshes and geographic polyhedral surfaces.

A mesh authored in the local frame of an origin becomes a list of
``GeoTriangle`` (suitable for a JSON column) or a PostGIS
``POLYHEDRALSURFACE Z`` WKT string (suitable for a
``geometry(POLYHEDRALSURFACEZ, 4326)`` column), and back.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional, Sequence

import numpy as np

from geofence3d.config import DEFAULT_CONFIG, GeofenceConfig
from geofence3d.coords import CoordsLike, MercatorScaleCache, to_geo, to_local
from geofence3d.errors import error_empty_triangles
from geofence3d.geo_triangles import GeoTriangle, GeoVertex, as_geo_triangle
from geofence3d.mesh import BufferAttribute, BufferMesh, triangle_array
from geofence3d.wkt import format_polyhedral_surface, parse_polyhedral_surface

logger = logging.getLogger(__name__)


def _geo_vertex(local: Sequence[float], origin: CoordsLike) -> GeoVertex:
    point = to_geo(local, origin)
    return GeoVertex(point.longitude, point.latitude, point.altitude)


def extract_geo_triangles(mesh: Any, origin: CoordsLike) -> List[GeoTriangle]:
    """Return the faces of ``mesh`` as geographic triangles.

    Indexed meshes are walked three indices at a time, non-indexed meshes
    nine position components at a time.  Raises ``StructuralError`` if the
    position or index buffer is missing or malformed.
    """

    triangles = []
    for v0, v1, v2 in triangle_array(mesh).tolist():
        triangles.append(GeoTriangle(
            _geo_vertex(v0, origin),
            _geo_vertex(v1, origin),
            _geo_vertex(v2, origin),
        ))
    return triangles


def mesh_to_geo_triangles(mesh: Any, origin: CoordsLike) -> List[GeoTriangle]:
    """JSON-storage entry point; identical to ``extract_geo_triangles``."""

    return extract_geo_triangles(mesh, origin)


def mesh_to_wkt(mesh: Any, origin: CoordsLike, precision: Optional[int] = None,
                srid: Optional[int] = None,
                config: Optional[GeofenceConfig] = None) -> str:
    """Convert ``mesh`` to ``POLYHEDRALSURFACE Z`` WKT.

    ``precision`` defaults to ``config.wkt_precision`` (8 decimals).
    Raises ``EmptyInputError`` if the mesh has no triangles.
    """

    config = config or DEFAULT_CONFIG
    if precision is None:
        precision = config.wkt_precision
    triangles = extract_geo_triangles(mesh, origin)
    return format_polyhedral_surface(triangles, precision, srid)


def geo_triangles_to_mesh(triangles: Iterable[Any], origin: CoordsLike,
                          cache: Optional[MercatorScaleCache] = None) -> BufferMesh:
    """Build a non-indexed local mesh (with vertex normals) from geo triangles.

    Accepts ``GeoTriangle`` instances or their plain dict form.  Raises
    ``EmptyInputError`` when there are no triangles.
    """

    positions: List[float] = []
    for tri in triangles:
        tri = as_geo_triangle(tri)
        for vertex in tri.vertices():
            positions.extend(to_local(vertex, origin, cache))

    if not positions:
        raise error_empty_triangles(
            "Cannot create mesh from empty triangles array. Provide at least one GeoTriangle."
        )

    mesh = BufferMesh(BufferAttribute(np.asarray(positions, dtype=np.float64), 3))
    return mesh.compute_vertex_normals()


def wkt_to_mesh(text: str, origin: CoordsLike,
                config: Optional[GeofenceConfig] = None) -> BufferMesh:
    """Parse ``POLYHEDRALSURFACE`` WKT into a local mesh around ``origin``.

    Raises ``GrammarError`` family errors for malformed text and
    ``EmptyInputError`` when the surface has no faces.
    """

    config = config or DEFAULT_CONFIG
    triangles = parse_polyhedral_surface(text, config.closure_tolerance, config.min_triangle_area)
    if not triangles:
        raise error_empty_triangles(
            "WKT contains no faces to convert. Each polygon must have at least "
            "4 coordinates (3 vertices + closing point)."
        )
    logger.debug("building mesh from %d parsed triangles", len(triangles))
    return geo_triangles_to_mesh(triangles, origin)


__all__ = [
    "extract_geo_triangles",
    "geo_triangles_to_mesh",
    "mesh_to_geo_triangles",
    "mesh_to_wkt",
    "wkt_to_mesh",
]
