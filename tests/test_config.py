import dataclasses

import pytest

from geofence3d.config import DEFAULT_CONFIG, GeofenceConfig
from geofence3d.errors import ConfigValidationError


def test_defaults():
    config = GeofenceConfig()
    assert config == DEFAULT_CONFIG
    assert config.boundary_tolerance == 1e-3
    assert config.ray_epsilon == 1e-12
    assert config.ray_direction == (1.0, 0.0001, 0.0001)
    assert config.closure_tolerance == 1e-9
    assert config.wkt_precision == 8


def test_config_is_frozen():
    with pytest.raises(dataclasses.FrozenInstanceError):
        DEFAULT_CONFIG.boundary_tolerance = 1.0


@pytest.mark.parametrize("kwargs", [
    {"boundary_tolerance": 0},
    {"ray_epsilon": -1.0},
    {"validation_tolerance": float("nan")},
    {"wkt_precision": 21},
    {"ray_direction": (0.0, 0.0, 0.0)},
    {"ray_direction": (1.0, 0.0)},
])
def test_invalid_values(kwargs):
    with pytest.raises(ConfigValidationError) as exc_info:
        GeofenceConfig(**kwargs)
    assert exc_info.value.key == next(iter(kwargs))


def test_from_env_defaults(monkeypatch):
    for name in ("BOUNDARY_TOLERANCE", "RAY_DIRECTION", "WKT_PRECISION"):
        monkeypatch.delenv(f"GEOFENCE3D_{name}", raising=False)
    assert GeofenceConfig.from_env() == DEFAULT_CONFIG


def test_from_env_overrides(monkeypatch):
    monkeypatch.setenv("GEOFENCE3D_BOUNDARY_TOLERANCE", "0.5")
    monkeypatch.setenv("GEOFENCE3D_RAY_DIRECTION", "0, 1, 0.001")
    monkeypatch.setenv("GEOFENCE3D_WKT_PRECISION", "4")
    monkeypatch.setenv("GEOFENCE3D_CLOSURE_TOLERANCE", " ")
    config = GeofenceConfig.from_env()
    assert config.boundary_tolerance == 0.5
    assert config.ray_direction == (0.0, 1.0, 0.001)
    assert config.wkt_precision == 4
    assert config.closure_tolerance == DEFAULT_CONFIG.closure_tolerance


@pytest.mark.parametrize("name,raw", [
    ("BOUNDARY_TOLERANCE", "wide"),
    ("RAY_DIRECTION", "1,0"),
    ("WKT_PRECISION", "8.5"),
    ("RAY_EPSILON", "-1"),
])
def test_from_env_rejects_bad_values(monkeypatch, name, raw):
    monkeypatch.setenv(f"GEOFENCE3D_{name}", raw)
    with pytest.raises(ConfigValidationError, match=name.lower()):
        GeofenceConfig.from_env()
