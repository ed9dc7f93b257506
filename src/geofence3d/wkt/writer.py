"""POLYHEDRALSURFACE Z output."""

from typing import Iterable, Optional

from geofence3d.errors import error_empty_triangles
from geofence3d.geo_triangles import GeoVertex, as_geo_triangle

EMPTY_SURFACE = "POLYHEDRALSURFACE Z EMPTY"


def _srid_prefix(srid: Optional[int]) -> str:
    return "" if srid is None else f"SRID={int(srid)};"


def format_coordinate(vertex: GeoVertex, precision: int = 8) -> str:
    """Return ``"lon lat alt"`` with each component fixed to ``precision`` decimals."""
    return (f"{vertex.longitude:.{precision}f} "
            f"{vertex.latitude:.{precision}f} "
            f"{vertex.altitude:.{precision}f}")


def format_polyhedral_surface(triangles: Iterable, precision: int = 8,
                              srid: Optional[int] = None) -> str:
    """Format triangles as ``POLYHEDRALSURFACE Z (((c0, c1, c2, c0)), ...)``.

    PostGIS orders coordinates X Y Z, i.e. longitude, latitude, altitude.
    Raises ``EmptyInputError`` for zero triangles; use
    ``format_empty_surface`` to write an empty surface deliberately.
    """
    polygons = []
    for tri in triangles:
        tri = as_geo_triangle(tri)
        c0 = format_coordinate(tri.v0, precision)
        c1 = format_coordinate(tri.v1, precision)
        c2 = format_coordinate(tri.v2, precision)
        polygons.append(f"(({c0}, {c1}, {c2}, {c0}))")

    if not polygons:
        raise error_empty_triangles(
            "Mesh has no triangular faces to convert. The geometry must contain "
            "indexed triangles or non-indexed vertex triplets."
        )
    return f"{_srid_prefix(srid)}POLYHEDRALSURFACE Z ({', '.join(polygons)})"


def format_empty_surface(srid: Optional[int] = None) -> str:
    """Return the explicit EMPTY literal."""
    return _srid_prefix(srid) + EMPTY_SURFACE
