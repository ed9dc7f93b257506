"""Tolerance configuration for the geofence geometry core.

All values have defaults matching the behaviour the engine is calibrated
against.  ``GeofenceConfig.from_env()`` lets deployments override them
through ``GEOFENCE3D_*`` environment variables; invalid values fail fast
with ``ConfigValidationError``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from typing import Tuple

from geofence3d.errors import ConfigValidationError

ENV_PREFIX = "GEOFENCE3D_"

Vec3 = Tuple[float, float, float]


@dataclass(frozen=True, slots=True)
class GeofenceConfig:
    """Immutable tolerance set threaded through containment and parsing.

    Attributes:
        boundary_tolerance: Distance (meters) within which a query point
            counts as lying on the surface.
        ray_epsilon: Minimum forward distance along the ray for a hit to
            be counted.
        ray_direction: Ray cast direction; normalized before use.
        closure_tolerance: Per-component tolerance for WKT ring closure.
        min_triangle_area: Cross-product magnitude below which a triangle
            is degenerate.  WKT rings are measured in meters.
        validation_tolerance: Grid size used to merge vertices when
            checking watertightness.
        wkt_precision: Default number of decimals in WKT output.
    """

    boundary_tolerance: float = 1e-3
    ray_epsilon: float = 1e-12
    ray_direction: Vec3 = (1.0, 0.0001, 0.0001)
    closure_tolerance: float = 1e-9
    min_triangle_area: float = 1e-12
    validation_tolerance: float = 1e-6
    wkt_precision: int = 8

    def __post_init__(self) -> None:
        for name in ("boundary_tolerance", "ray_epsilon", "closure_tolerance",
                     "min_triangle_area", "validation_tolerance"):
            value = getattr(self, name)
            if not value > 0:
                raise ConfigValidationError(name, value, "must be > 0")
        if not 0 <= self.wkt_precision <= 20:
            raise ConfigValidationError(
                "wkt_precision", self.wkt_precision, "must be between 0 and 20"
            )
        if len(self.ray_direction) != 3 or not any(self.ray_direction):
            raise ConfigValidationError(
                "ray_direction", self.ray_direction, "must be a non-zero 3-vector"
            )

    @classmethod
    def from_env(cls) -> GeofenceConfig:
        """Load configuration from ``GEOFENCE3D_*`` environment variables.

        ``GEOFENCE3D_RAY_DIRECTION`` is three comma-separated numbers.

        Raises:
            ConfigValidationError: If a value cannot be parsed or is out
                of range.
        """
        overrides: dict[str, object] = {}
        for f in fields(cls):
            raw = os.getenv(ENV_PREFIX + f.name.upper())
            if raw is None or raw.strip() == "":
                continue
            overrides[f.name] = _parse_field(f.name, raw)
        return cls(**overrides)


def _parse_field(name: str, raw: str) -> object:
    try:
        if name == "ray_direction":
            parts = tuple(float(p) for p in raw.split(","))
            if len(parts) != 3:
                raise ValueError("expected three components")
            return parts
        if name == "wkt_precision":
            return int(raw)
        return float(raw)
    except ValueError as exc:
        raise ConfigValidationError(name, raw, str(exc)) from exc


DEFAULT_CONFIG = GeofenceConfig()


__all__ = ["DEFAULT_CONFIG", "ENV_PREFIX", "GeofenceConfig"]
