"""Conversion between geographic coordinates and a local metric frame.

Local positions are ``(x, y, z)`` tuples in meters relative to an explicit
origin, with +X pointing East, +Y Up (altitude) and +Z South.

``to_local`` corrects the north/south axis with the Mercator scale averaged
between the origin latitude and the point latitude.  ``to_geo`` only uses
the scale at the origin, so ``to_geo(to_local(p, o), o)`` is an
approximation whose error grows with distance from ``o``.  It is accurate
at city scale and drifts at country scale; the asymmetry is kept because
existing tolerances are calibrated against it.
"""

from __future__ import annotations

import math
import threading
from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Sequence, Tuple, Union

EARTH_RADIUS = 6371008.8
DEG2RAD = math.pi / 180.0
RAD2DEG = 180.0 / math.pi

LocalPoint = Tuple[float, float, float]


@dataclass(frozen=True)
class GeoPoint:
    """A geographic coordinate; altitude is meters above sea level."""

    longitude: float
    latitude: float
    altitude: float = 0.0

    @classmethod
    def from_mapping(cls, data: Mapping) -> GeoPoint:
        altitude = data.get("altitude")
        return cls(
            longitude=float(data["longitude"]),
            latitude=float(data["latitude"]),
            altitude=0.0 if altitude is None else float(altitude),
        )

    def to_dict(self) -> Dict[str, float]:
        return {
            "longitude": self.longitude,
            "latitude": self.latitude,
            "altitude": self.altitude,
        }


CoordsLike = Union[GeoPoint, Mapping]


def as_geo_point(value: CoordsLike) -> GeoPoint:
    """Coerce a ``GeoPoint`` or ``{"longitude", "latitude", "altitude"}`` mapping."""

    if isinstance(value, Mapping):
        return GeoPoint.from_mapping(value)
    altitude = getattr(value, "altitude", None)
    if altitude is None:
        return GeoPoint(value.longitude, value.latitude, 0.0)
    return value


class MercatorScaleCache:
    """Memo of ``1 / cos(latitude)`` keyed by latitude in thousandths of a degree.

    Entries are inserted once and only read afterwards.  Insertion happens
    under a lock so one instance can be shared between threads.
    """

    def __init__(self) -> None:
        self._values: Dict[int, float] = {}
        self._lock = threading.Lock()

    @staticmethod
    def key(latitude: float) -> int:
        return round(latitude * 1000)

    def scale(self, latitude: float) -> float:
        if not math.isfinite(latitude * 1000):
            return math.nan
        key = self.key(latitude)
        value = self._values.get(key)
        if value is None:
            value = 1.0 / math.cos(latitude * DEG2RAD)
            with self._lock:
                value = self._values.setdefault(key, value)
        return value

    def __contains__(self, latitude: float) -> bool:
        if not math.isfinite(latitude * 1000):
            return False
        return self.key(latitude) in self._values

    def __len__(self) -> int:
        return len(self._values)

    def clear(self) -> None:
        with self._lock:
            self._values.clear()


DEFAULT_SCALE_CACHE = MercatorScaleCache()


def mercator_scale(latitude: float, cache: Optional[MercatorScaleCache] = None) -> float:
    """Return the Mercator distortion factor at ``latitude`` (degrees)."""

    if cache is None:
        cache = DEFAULT_SCALE_CACHE
    return cache.scale(latitude)


def average_mercator_scale(origin_lat: float, point_lat: float, steps: int = 10,
                           cache: Optional[MercatorScaleCache] = None) -> float:
    """Average the Mercator scale over ``steps + 1`` samples between two latitudes."""

    if cache is None:
        cache = DEFAULT_SCALE_CACHE
    lat_step = (point_lat - origin_lat) / steps
    total = 0.0
    for i in range(steps + 1):
        total += cache.scale(origin_lat + lat_step * i)
    return total / (steps + 1)


def to_local(point: CoordsLike, origin: CoordsLike,
             cache: Optional[MercatorScaleCache] = None) -> LocalPoint:
    """Convert geographic ``point`` to meters relative to ``origin``.

    Non-finite inputs propagate into the result unchanged.  A latitude span
    wider than 180 degrees has no meaningful average scale and yields a
    NaN ``z``.
    """

    point = as_geo_point(point)
    origin = as_geo_point(origin)
    if cache is None:
        cache = DEFAULT_SCALE_CACHE

    lat_diff = (point.latitude - origin.latitude) * DEG2RAD
    lon_diff = (point.longitude - origin.longitude) * DEG2RAD

    x = lon_diff * EARTH_RADIUS * math.cos(origin.latitude * DEG2RAD)
    y = point.altitude - origin.altitude

    # more samples for larger latitude spans
    span = abs(point.latitude - origin.latitude)
    if span <= 180.0:
        steps = math.ceil(span) * 100 + 1
        avg_scale = average_mercator_scale(origin.latitude, point.latitude, steps, cache)
    else:
        avg_scale = math.nan
    z = (-lat_diff * EARTH_RADIUS) / cache.scale(origin.latitude) * avg_scale
    return (x, y, z)


def to_geo(local: Sequence[float], origin: CoordsLike) -> GeoPoint:
    """Convert a local ``(x, y, z)`` position back to a ``GeoPoint``.

    Uses only the Mercator scale at the origin; see the module docstring.
    """

    origin = as_geo_point(origin)
    x, y, z = float(local[0]), float(local[1]), float(local[2])
    latitude = origin.latitude + (-z / EARTH_RADIUS) * RAD2DEG
    longitude = origin.longitude + (x / EARTH_RADIUS) * RAD2DEG / math.cos(origin.latitude * DEG2RAD)
    altitude = origin.altitude + y
    return GeoPoint(longitude, latitude, altitude)


def geo_axis_scale(latitude: float) -> LocalPoint:
    """Meters per unit of ``(longitude, latitude, altitude)`` near ``latitude``.

    The longitude factor is floored at a tiny positive value so the scale
    stays orientation preserving at the poles.
    """

    meters_per_degree = EARTH_RADIUS * DEG2RAD
    return (meters_per_degree * max(abs(math.cos(latitude * DEG2RAD)), 1e-12),
            meters_per_degree, 1.0)


__all__ = [
    "DEFAULT_SCALE_CACHE",
    "EARTH_RADIUS",
    "GeoPoint",
    "LocalPoint",
    "MercatorScaleCache",
    "as_geo_point",
    "average_mercator_scale",
    "geo_axis_scale",
    "mercator_scale",
    "to_geo",
    "to_local",
]
