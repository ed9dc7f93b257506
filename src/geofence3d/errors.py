"""
Exceptions raised by the geofence geometry core.

Error code ranges:
- G0xx: Structural errors (mesh buffers malformed or missing)
- G1xx: Degenerate geometry (zero-area triangles, collinear rings)
- G2xx: WKT grammar errors
- G3xx: Ring closure and unsupported WKT features
- G4xx: Empty input
- G5xx: Configuration errors

Every exception derives from ``GeofenceError`` which is itself a
``ValueError``, so callers that only care about "bad input" can catch
the builtin.
"""

from typing import Optional


SNIPPET_LIMIT = 50


def snippet(text: str, limit: int = SNIPPET_LIMIT) -> str:
    """Return ``text`` truncated to ``limit`` characters for error messages."""
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


class GeofenceError(ValueError):
    """Base exception for geofence geometry errors."""

    default_code: str = ""

    def __init__(self, message: str, *, code: str = ""):
        self.message = message
        self.code = code or self.default_code
        super().__init__(message)

    def __str__(self) -> str:
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dict for tooling integration."""
        return {
            "type": type(self).__name__,
            "code": self.code,
            "message": self.message,
        }


class StructuralError(GeofenceError):
    """Mesh lacks required buffers or their sizes are inconsistent (G0xx)."""
    default_code = "G001"


class DegenerateGeometryError(GeofenceError):
    """Zero-area triangle or collinear ring (G1xx)."""
    default_code = "G101"


class GrammarError(GeofenceError):
    """Text does not match the polyhedral surface grammar (G2xx).

    ``offset`` is the 0-indexed character position of the problem when it
    is known, and ``snippet`` a bounded excerpt of the offending input.
    """
    default_code = "G201"

    def __init__(self, message: str, *, code: str = "",
                 offset: Optional[int] = None, snippet: Optional[str] = None):
        self.offset = offset
        self.snippet = snippet
        super().__init__(message, code=code)

    def to_dict(self) -> dict:
        result = super().to_dict()
        result["offset"] = self.offset
        result["snippet"] = self.snippet
        return result


class RingClosureError(GrammarError):
    """Polygon ring does not end where it starts (G301)."""
    default_code = "G301"


class UnsupportedFeatureError(GrammarError):
    """Valid WKT that uses a feature this library rejects (G302)."""
    default_code = "G302"


class EmptyInputError(GeofenceError):
    """Operation needs at least one triangle (G4xx)."""
    default_code = "G401"


class ConfigValidationError(GeofenceError):
    """A configuration value is out of its valid range (G5xx)."""
    default_code = "G501"

    def __init__(self, key: str, value: object, message: str):
        self.key = key
        self.value = value
        super().__init__(f"Invalid configuration {key}={value!r}: {message}")


# --- Structural error codes ---

def error_missing_position(purpose: str = "") -> StructuralError:
    """G001: Mesh has no position attribute."""
    suffix = f" for {purpose}" if purpose else ""
    return StructuralError(
        f"Mesh must have a 'position' attribute{suffix}. "
        "Ensure the geometry is properly initialized.",
        code="G001",
    )


def error_item_size(item_size: int) -> StructuralError:
    """G002: Position attribute is not 3-component."""
    return StructuralError(
        f"Expected position attribute item_size of 3, received {item_size}. "
        "Mesh must contain 3D positions.",
        code="G002",
    )


def error_position_length(length: int, multiple: int) -> StructuralError:
    """G003: Position array length has the wrong granularity."""
    return StructuralError(
        f"Non-indexed position array length must be a multiple of {multiple}, "
        f"received {length}.",
        code="G003",
    )


def error_index_length(length: int) -> StructuralError:
    """G004: Index array length is not a multiple of 3."""
    return StructuralError(
        f"Indexed mesh must have indices in multiples of 3, received {length}.",
        code="G004",
    )


def error_index_range(value: int, vertex_count: int) -> StructuralError:
    """G005: Index refers past the end of the position buffer."""
    return StructuralError(
        f"Index {value} is out of range for {vertex_count} vertices.",
        code="G005",
    )


def error_malformed_record(where: str, detail: str) -> StructuralError:
    """G006: A serialized triangle record is malformed."""
    return StructuralError(f"Malformed triangle record at {where}: {detail}", code="G006")


# --- Degenerate geometry codes ---

def error_too_few_vertices(count: int) -> DegenerateGeometryError:
    """G101: Ring has fewer than three vertices."""
    return DegenerateGeometryError(
        f"Cannot triangulate a ring with {count} vertices; at least 3 are required.",
        code="G101",
    )


def error_degenerate_triangle() -> DegenerateGeometryError:
    """G102: Triangle has (near) zero area."""
    return DegenerateGeometryError(
        "Cannot triangulate a degenerate triangle (zero area).",
        code="G102",
    )


def error_collinear_ring(count: int) -> DegenerateGeometryError:
    """G103: No two edges of the ring span a plane."""
    return DegenerateGeometryError(
        f"Cannot triangulate ring of {count} vertices: all vertices are collinear.",
        code="G103",
    )


def error_triangulation_failed(count: int, index_count: int) -> DegenerateGeometryError:
    """G104: Ear clipping produced no usable triangles."""
    return DegenerateGeometryError(
        f"Triangulation of ring with {count} vertices failed "
        f"(produced {index_count} indices); the ring may be self-intersecting.",
        code="G104",
    )


# --- Grammar error codes ---

def error_invalid_format(text: str) -> GrammarError:
    """G201: Outer grammar does not match POLYHEDRALSURFACE."""
    excerpt = snippet(text)
    return GrammarError(
        "Invalid WKT format: expected 'POLYHEDRALSURFACE Z (...)'. "
        f'Received: "{excerpt}"',
        code="G201",
        offset=0,
        snippet=excerpt,
    )


def error_unexpected_token(expected: str, found: str, offset: int, text: str) -> GrammarError:
    """G202: Unexpected token inside the surface body."""
    excerpt = snippet(text[offset:])
    return GrammarError(
        f"Invalid WKT: expected {expected}, found {found} at offset {offset} "
        f'near "{excerpt}"',
        code="G202",
        offset=offset,
        snippet=excerpt,
    )


def error_unexpected_character(char: str, offset: int, text: str) -> GrammarError:
    """G203: Character that cannot start any token."""
    excerpt = snippet(text[offset:])
    return GrammarError(
        f"Invalid WKT: unexpected character '{char}' at offset {offset} "
        f'near "{excerpt}"',
        code="G203",
        offset=offset,
        snippet=excerpt,
    )


def error_invalid_coordinate(coordinate: str, offset: int, reason: str) -> GrammarError:
    """G204: Coordinate tuple is not 3 or 4 finite numbers."""
    return GrammarError(
        f'Invalid coordinate in WKT: "{coordinate}" {reason}. '
        'Each coordinate must be "longitude latitude altitude" with an '
        "optional measure, all given as finite numeric values.",
        code="G204",
        offset=offset,
        snippet=snippet(coordinate),
    )


def error_too_few_coordinates(count: int, offset: int) -> GrammarError:
    """G205: Ring has fewer than 4 coordinate tuples."""
    return GrammarError(
        f"Invalid polygon ring: found {count} coordinates, at least 4 are "
        "required (3 vertices + closing point).",
        code="G205",
        offset=offset,
    )


# --- Ring closure / unsupported features ---

def error_ring_not_closed(first: str, last: str, offset: int) -> RingClosureError:
    """G301: First and last coordinates differ."""
    return RingClosureError(
        f'Invalid polygon ring: first and last coordinates must match to close the ring '
        f'(first "{first}", last "{last}").',
        code="G301",
        offset=offset,
        snippet=snippet(last),
    )


def error_interior_ring(offset: int, text: str) -> UnsupportedFeatureError:
    """G302: Polygon with holes."""
    return UnsupportedFeatureError(
        "Invalid polygon: interior rings are not supported in polyhedral surfaces.",
        code="G302",
        offset=offset,
        snippet=snippet(text[offset:]),
    )


# --- Empty input ---

def error_empty_triangles(action: str) -> EmptyInputError:
    """G401: Zero triangles where at least one is required."""
    return EmptyInputError(action, code="G401")
