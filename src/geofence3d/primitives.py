"""Simple closed meshes for authoring geofence volumes.

The vertex layout follows the box and UV-sphere geometries found in WebGL
scene graphs: every box face owns its four corners (24 vertices, 36
indices) and the sphere carries duplicated seam and pole vertices.  Meshes
exchanged with a browser client therefore triangulate identically on both
sides.
"""

from __future__ import annotations

import math
from typing import List

from geofence3d.mesh import BufferAttribute, BufferMesh

_AXIS = {"x": 0, "y": 1, "z": 2}


def _build_plane(u: str, v: str, w: str, udir: float, vdir: float,
                 width: float, height: float, depth: float,
                 positions: List[float], normals: List[float], indices: List[int]) -> None:
    # one segment per side: four corners, two triangles
    start = len(positions) // 3
    half_w = width / 2.0
    half_h = height / 2.0
    half_d = depth / 2.0
    for iy in range(2):
        y = iy * height - half_h
        for ix in range(2):
            x = ix * width - half_w
            vec = [0.0, 0.0, 0.0]
            vec[_AXIS[u]] = x * udir
            vec[_AXIS[v]] = y * vdir
            vec[_AXIS[w]] = half_d
            positions.extend(vec)
            normal = [0.0, 0.0, 0.0]
            normal[_AXIS[w]] = 1.0 if depth > 0 else -1.0
            normals.extend(normal)

    a = start
    b = start + 2
    c = start + 3
    d = start + 1
    indices.extend([a, b, d, b, c, d])


def box_mesh(width: float = 1.0, height: float = 1.0, depth: float = 1.0) -> BufferMesh:
    """Return an indexed axis-aligned box centred on the local origin.

    ``width`` spans X (East), ``height`` spans Y (Up) and ``depth`` spans Z
    (South).
    """

    positions: List[float] = []
    normals: List[float] = []
    indices: List[int] = []

    _build_plane("z", "y", "x", -1, -1, depth, height, width, positions, normals, indices)
    _build_plane("z", "y", "x", 1, -1, depth, height, -width, positions, normals, indices)
    _build_plane("x", "z", "y", 1, 1, width, depth, height, positions, normals, indices)
    _build_plane("x", "z", "y", 1, -1, width, depth, -height, positions, normals, indices)
    _build_plane("x", "y", "z", 1, -1, width, height, depth, positions, normals, indices)
    _build_plane("x", "y", "z", -1, -1, width, height, -depth, positions, normals, indices)

    return BufferMesh(BufferAttribute(positions, 3), indices, BufferAttribute(normals, 3))


def sphere_mesh(radius: float = 1.0, width_segments: int = 32, height_segments: int = 16) -> BufferMesh:
    """Return an indexed UV sphere centred on the local origin."""

    width_segments = max(3, int(width_segments))
    height_segments = max(2, int(height_segments))

    positions: List[float] = []
    grid: List[List[int]] = []
    count = 0
    for iy in range(height_segments + 1):
        row = []
        v = iy / height_segments
        theta = v * math.pi
        for ix in range(width_segments + 1):
            u = ix / width_segments
            phi = u * 2.0 * math.pi
            positions.extend([
                -radius * math.cos(phi) * math.sin(theta),
                radius * math.cos(theta),
                radius * math.sin(phi) * math.sin(theta),
            ])
            row.append(count)
            count += 1
        grid.append(row)

    indices: List[int] = []
    for iy in range(height_segments):
        for ix in range(width_segments):
            a = grid[iy][ix + 1]
            b = grid[iy][ix]
            c = grid[iy + 1][ix]
            d = grid[iy + 1][ix + 1]
            # pole rows collapse to a single triangle
            if iy != 0:
                indices.extend([a, b, d])
            if iy != height_segments - 1:
                indices.extend([b, c, d])

    mesh = BufferMesh(BufferAttribute(positions, 3), indices)
    return mesh.compute_vertex_normals()


__all__ = ["box_mesh", "sphere_mesh"]
