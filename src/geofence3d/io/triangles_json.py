"""JSON serialization of geographic triangle lists.

The format is a plain array of ``{"v0": {...}, "v1": {...}, "v2": {...}}``
records whose vertices carry ``longitude``, ``latitude`` and ``altitude``.
It is meant for JSON/JSONB database columns and survives a dump/load
cycle without precision loss beyond ordinary float serialization.
"""

from __future__ import annotations

import json
import math
from typing import Any, Dict, Iterable, List, Mapping

from geofence3d.errors import error_malformed_record
from geofence3d.geo_triangles import GeoTriangle, GeoVertex, as_geo_triangle

_VERTEX_KEYS = ("v0", "v1", "v2")
_COMPONENT_KEYS = ("longitude", "latitude", "altitude")


def _vertex_from_record(record: Any, where: str) -> GeoVertex:
    if not isinstance(record, Mapping):
        raise error_malformed_record(where, f"expected an object, got {type(record).__name__}")
    values = []
    for key in _COMPONENT_KEYS:
        if key not in record:
            raise error_malformed_record(where, f"missing '{key}'")
        value = record[key]
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise error_malformed_record(where, f"'{key}' must be a number, got {value!r}")
        if not math.isfinite(value):
            raise error_malformed_record(where, f"'{key}' must be finite, got {value!r}")
        values.append(float(value))
    return GeoVertex(*values)


def triangles_to_json_data(triangles: Iterable[Any]) -> List[Dict[str, Dict[str, float]]]:
    """Return plain nested dicts for ``triangles``."""

    return [as_geo_triangle(tri).to_dict() for tri in triangles]


def triangles_from_json_data(data: Any) -> List[GeoTriangle]:
    """Rebuild ``GeoTriangle`` objects from decoded JSON.

    Raises ``StructuralError`` naming the first malformed record.
    """

    if not isinstance(data, list):
        raise error_malformed_record("top level", f"expected an array, got {type(data).__name__}")

    triangles = []
    for i, record in enumerate(data):
        if not isinstance(record, Mapping):
            raise error_malformed_record(f"[{i}]", f"expected an object, got {type(record).__name__}")
        vertices = []
        for key in _VERTEX_KEYS:
            if key not in record:
                raise error_malformed_record(f"[{i}]", f"missing '{key}'")
            vertices.append(_vertex_from_record(record[key], f"[{i}].{key}"))
        triangles.append(GeoTriangle(*vertices))
    return triangles


def dumps(triangles: Iterable[Any], **kwargs: Any) -> str:
    """Serialize triangles to a JSON string; ``kwargs`` go to ``json.dumps``."""

    return json.dumps(triangles_to_json_data(triangles), **kwargs)


def loads(text: str) -> List[GeoTriangle]:
    """Parse a JSON string produced by ``dumps``."""

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise error_malformed_record(
            "top level", f"invalid JSON: {exc.msg} at line {exc.lineno} column {exc.colno}"
        ) from exc
    except RecursionError as exc:
        raise error_malformed_record("top level", "JSON nested too deeply") from exc
    return triangles_from_json_data(data)


__all__ = [
    "dumps",
    "loads",
    "triangles_from_json_data",
    "triangles_to_json_data",
]
