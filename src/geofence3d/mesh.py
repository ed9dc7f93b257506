"""Triangle mesh boundary type and triangulated views of it.

The core never depends on a concrete rendering library.  Anything with a
``position`` attribute (flat numeric ``array`` plus ``item_size``) and an
optional ``index`` attribute satisfies ``MeshLike``; ``BufferMesh`` is the
numpy-backed implementation produced by this package.
"""

from __future__ import annotations

from typing import Any, Iterator, List, Optional, Protocol, Sequence, Tuple, runtime_checkable

import numpy as np

from geofence3d.errors import (
    StructuralError,
    error_index_length,
    error_index_range,
    error_item_size,
    error_missing_position,
    error_position_length,
)
from geofence3d.geometry_utils import Vec3

TriTuple = Tuple[Vec3, Vec3, Vec3]


class BufferAttribute:
    """Flat numeric buffer interpreted as ``item_size``-component items."""

    def __init__(self, array: Any, item_size: int, dtype: Any = np.float64):
        self.array = np.asarray(array, dtype=dtype).reshape(-1)
        self.item_size = int(item_size)

    @property
    def count(self) -> int:
        """Number of items (vertices for a position buffer)."""
        if self.item_size <= 0:
            return 0
        return len(self.array) // self.item_size

    def __len__(self) -> int:
        return len(self.array)

    def __repr__(self) -> str:
        return f"BufferAttribute(count={self.count}, item_size={self.item_size})"


@runtime_checkable
class MeshLike(Protocol):
    """Anything exposing a position buffer and an optional index buffer."""

    position: Optional[BufferAttribute]
    index: Optional[Any]


class BufferMesh:
    """Indexed or non-indexed triangle mesh with 3D positions."""

    def __init__(self, position: Optional[BufferAttribute] = None,
                 index: Optional[Any] = None,
                 normal: Optional[BufferAttribute] = None):
        self.position = position
        if index is not None and not isinstance(index, BufferAttribute):
            index = BufferAttribute(index, 1, dtype=np.int64)
        self.index = index
        self.normal = normal

    @classmethod
    def from_positions(cls, positions: Sequence[float], index: Optional[Sequence[int]] = None) -> BufferMesh:
        """Build a mesh from a flat ``[x0, y0, z0, x1, ...]`` sequence."""
        return cls(BufferAttribute(positions, 3), index)

    @classmethod
    def from_triangles(cls, triangles: Sequence[TriTuple]) -> BufferMesh:
        """Build a non-indexed mesh from ``(v0, v1, v2)`` triples."""
        flat = np.asarray(triangles, dtype=np.float64).reshape(-1)
        return cls(BufferAttribute(flat, 3))

    @property
    def triangle_count(self) -> int:
        return len(triangle_array(self))

    def compute_vertex_normals(self) -> BufferMesh:
        """Fill the ``normal`` attribute; returns ``self`` for chaining."""
        self.normal = BufferAttribute(vertex_normals(self), 3)
        return self

    def to_non_indexed(self) -> BufferMesh:
        """Return a copy with every triangle's vertices expanded in place."""
        tris = triangle_array(self)
        mesh = BufferMesh(BufferAttribute(tris.reshape(-1), 3))
        if self.normal is not None and self.index is not None:
            normals = self.normal.array.reshape(-1, 3)[_index_values(self).reshape(-1)]
            mesh.normal = BufferAttribute(normals.reshape(-1), 3)
        elif self.normal is not None:
            mesh.normal = BufferAttribute(self.normal.array.copy(), 3)
        return mesh

    def __repr__(self) -> str:
        return (f"BufferMesh(position={self.position!r}, "
                f"indexed={self.index is not None})")


def _index_values(mesh: Any) -> np.ndarray:
    index = mesh.index
    values = index.array if hasattr(index, "array") else index
    return np.asarray(values, dtype=np.int64).reshape(-1)


def structural_errors(mesh: Any) -> List[StructuralError]:
    """Return the structural problems of ``mesh`` without raising.

    An empty list means ``triangle_array`` will succeed.
    """

    position = getattr(mesh, "position", None)
    if position is None:
        return [error_missing_position()]

    errors: List[StructuralError] = []
    item_size = getattr(position, "item_size", None)
    if item_size != 3:
        return [error_item_size(item_size)]

    length = len(position.array)
    index = getattr(mesh, "index", None)
    if length % 3 != 0:
        errors.append(error_position_length(length, 3))
    if index is None:
        if length % 9 != 0 and length % 3 == 0:
            errors.append(error_position_length(length, 9))
        return errors

    indices = _index_values(mesh)
    if len(indices) % 3 != 0:
        errors.append(error_index_length(len(indices)))
    vertex_count = length // 3
    if len(indices):
        bad = indices[(indices < 0) | (indices >= vertex_count)]
        if len(bad):
            errors.append(error_index_range(int(bad[0]), vertex_count))
    return errors


def triangle_array(mesh: Any, purpose: str = "") -> np.ndarray:
    """Return the mesh triangles as a ``(n, 3, 3)`` float array.

    Raises ``StructuralError`` for a missing or malformed position/index
    buffer.  ``purpose`` is woven into the missing-position message.
    """

    problems = structural_errors(mesh)
    if problems:
        first = problems[0]
        if purpose and first.code == "G001":
            raise error_missing_position(purpose)
        raise first

    positions = np.asarray(mesh.position.array, dtype=np.float64).reshape(-1, 3)
    if getattr(mesh, "index", None) is None:
        return positions.reshape(-1, 3, 3)
    return positions[_index_values(mesh).reshape(-1, 3)]


def mesh_view(mesh: Any, purpose: str = "") -> Iterator[TriTuple]:
    """Yield triangles of ``mesh`` as ``(v0, v1, v2)`` XYZ tuples."""

    for tri in triangle_array(mesh, purpose).tolist():
        yield tuple(tri[0]), tuple(tri[1]), tuple(tri[2])


def vertex_normals(mesh: Any) -> np.ndarray:
    """Return flat per-vertex normals (area-weighted for indexed meshes)."""

    positions = np.asarray(mesh.position.array, dtype=np.float64).reshape(-1, 3)
    tris = triangle_array(mesh)
    face = np.cross(tris[:, 1] - tris[:, 0], tris[:, 2] - tris[:, 0])

    if getattr(mesh, "index", None) is None:
        normals = np.repeat(face, 3, axis=0)
    else:
        normals = np.zeros_like(positions)
        idx = _index_values(mesh).reshape(-1, 3)
        for corner in range(3):
            np.add.at(normals, idx[:, corner], face)

    lengths = np.linalg.norm(normals, axis=1, keepdims=True)
    lengths[lengths == 0.0] = 1.0
    return (normals / lengths).reshape(-1)


__all__ = [
    "BufferAttribute",
    "BufferMesh",
    "MeshLike",
    "TriTuple",
    "mesh_view",
    "structural_errors",
    "triangle_array",
    "vertex_normals",
]
