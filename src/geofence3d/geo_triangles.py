"""Geographic vertex and triangle value types."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Tuple

from geofence3d.coords import GeoPoint


@dataclass(frozen=True)
class GeoVertex:
    """A polyhedral surface vertex; altitude is always present."""

    longitude: float
    latitude: float
    altitude: float

    @classmethod
    def from_point(cls, point: Any) -> GeoVertex:
        if isinstance(point, GeoVertex):
            return point
        if isinstance(point, Mapping):
            point = GeoPoint.from_mapping(point)
        altitude = getattr(point, "altitude", None)
        return cls(float(point.longitude), float(point.latitude),
                   0.0 if altitude is None else float(altitude))

    @classmethod
    def from_dict(cls, data: Mapping) -> GeoVertex:
        return cls(float(data["longitude"]), float(data["latitude"]), float(data["altitude"]))

    def to_dict(self) -> Dict[str, float]:
        return {
            "longitude": self.longitude,
            "latitude": self.latitude,
            "altitude": self.altitude,
        }


@dataclass(frozen=True)
class GeoTriangle:
    """Triangular face of a polyhedral surface; vertex order is preserved."""

    v0: GeoVertex
    v1: GeoVertex
    v2: GeoVertex

    def vertices(self) -> Tuple[GeoVertex, GeoVertex, GeoVertex]:
        return (self.v0, self.v1, self.v2)

    @classmethod
    def from_dict(cls, data: Mapping) -> GeoTriangle:
        return cls(
            GeoVertex.from_dict(data["v0"]),
            GeoVertex.from_dict(data["v1"]),
            GeoVertex.from_dict(data["v2"]),
        )

    def to_dict(self) -> Dict[str, Dict[str, float]]:
        return {
            "v0": self.v0.to_dict(),
            "v1": self.v1.to_dict(),
            "v2": self.v2.to_dict(),
        }


def as_geo_triangle(value: Any) -> GeoTriangle:
    """Coerce a ``GeoTriangle`` or its dict form."""

    if isinstance(value, GeoTriangle):
        return value
    if isinstance(value, Mapping):
        return GeoTriangle(
            GeoVertex.from_point(value["v0"]),
            GeoVertex.from_point(value["v1"]),
            GeoVertex.from_point(value["v2"]),
        )
    return GeoTriangle(
        GeoVertex.from_point(value.v0),
        GeoVertex.from_point(value.v1),
        GeoVertex.from_point(value.v2),
    )


__all__ = ["GeoTriangle", "GeoVertex", "as_geo_triangle"]
