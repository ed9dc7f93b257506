"""I/O utilities for geofence3d."""

from .triangles_json import dumps, loads, triangles_from_json_data, triangles_to_json_data

__all__ = ['dumps', 'loads', 'triangles_from_json_data', 'triangles_to_json_data']
