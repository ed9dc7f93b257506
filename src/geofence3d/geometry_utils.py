"""Common geometric helpers shared by the triangulator, validator and containment tests."""

from __future__ import annotations

import math
from typing import Optional, Sequence, Tuple

Vec3 = Tuple[float, float, float]


def to_vec3(point_like: Sequence[float]) -> Vec3:
    """Return the XYZ components of a point-like sequence as a float tuple."""

    if len(point_like) < 3:
        raise ValueError("value must have at least three components")
    return float(point_like[0]), float(point_like[1]), float(point_like[2])


def sub(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def add(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def scale(a: Vec3, s: float) -> Vec3:
    return (a[0] * s, a[1] * s, a[2] * s)


def dot(a: Vec3, b: Vec3) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def cross(a: Vec3, b: Vec3) -> Vec3:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def mag(a: Vec3) -> float:
    return math.sqrt(dot(a, a))


def dist(a: Vec3, b: Vec3) -> float:
    return mag(sub(a, b))


def normalize(a: Vec3) -> Vec3:
    """Return ``a`` scaled to unit length; zero vectors raise ``ValueError``."""

    length = mag(a)
    if length == 0.0:
        raise ValueError("cannot normalize a zero-length vector")
    return (a[0] / length, a[1] / length, a[2] / length)


def triangle_cross(v0: Vec3, v1: Vec3, v2: Vec3) -> Vec3:
    """Return ``(v1 - v0) x (v2 - v0)``; its length is twice the area."""

    return cross(sub(v1, v0), sub(v2, v0))


def closest_point_on_triangle(p: Vec3, a: Vec3, b: Vec3, c: Vec3) -> Vec3:
    """Return the point of triangle ``abc`` (including its interior) closest to ``p``.

    Voronoi-region walk from Ericson, *Real-Time Collision Detection* 5.1.5.
    Degenerate triangles fall back to the closest point on their edges.
    """

    ab = sub(b, a)
    ac = sub(c, a)
    ap = sub(p, a)
    d1 = dot(ab, ap)
    d2 = dot(ac, ap)
    if d1 <= 0.0 and d2 <= 0.0:
        return a

    bp = sub(p, b)
    d3 = dot(ab, bp)
    d4 = dot(ac, bp)
    if d3 >= 0.0 and d4 <= d3:
        return b

    vc = d1 * d4 - d3 * d2
    if vc <= 0.0 and d1 >= 0.0 and d3 <= 0.0:
        denom = d1 - d3
        if denom == 0.0:
            return a
        return add(a, scale(ab, d1 / denom))

    cp = sub(p, c)
    d5 = dot(ab, cp)
    d6 = dot(ac, cp)
    if d6 >= 0.0 and d5 <= d6:
        return c

    vb = d5 * d2 - d1 * d6
    if vb <= 0.0 and d2 >= 0.0 and d6 <= 0.0:
        denom = d2 - d6
        if denom == 0.0:
            return a
        return add(a, scale(ac, d2 / denom))

    va = d3 * d6 - d5 * d4
    if va <= 0.0 and (d4 - d3) >= 0.0 and (d5 - d6) >= 0.0:
        denom = (d4 - d3) + (d5 - d6)
        if denom == 0.0:
            return b
        return add(b, scale(sub(c, b), (d4 - d3) / denom))

    total = va + vb + vc
    if total == 0.0:
        return _closest_point_on_edges(p, a, b, c)
    v = vb / total
    w = vc / total
    return add(a, add(scale(ab, v), scale(ac, w)))


def _closest_point_on_segment(p: Vec3, a: Vec3, b: Vec3) -> Vec3:
    ab = sub(b, a)
    denom = dot(ab, ab)
    if denom == 0.0:
        return a
    t = min(1.0, max(0.0, dot(sub(p, a), ab) / denom))
    return add(a, scale(ab, t))


def _closest_point_on_edges(p: Vec3, a: Vec3, b: Vec3, c: Vec3) -> Vec3:
    candidates = [
        _closest_point_on_segment(p, a, b),
        _closest_point_on_segment(p, b, c),
        _closest_point_on_segment(p, c, a),
    ]
    return min(candidates, key=lambda q: dist(p, q))


def ray_triangle_intersection(origin: Vec3, direction: Vec3,
                              a: Vec3, b: Vec3, c: Vec3) -> Optional[Vec3]:
    """Return where the ray hits triangle ``abc`` (either side), or ``None``.

    Moller-Trumbore, written in the same form as the ray/triangle test used
    by WebGL scene graphs: parallel rays and hits behind the origin miss.
    """

    edge1 = sub(b, a)
    edge2 = sub(c, a)
    normal = cross(edge1, edge2)

    ddn = dot(direction, normal)
    if ddn > 0:
        sign = 1.0
    elif ddn < 0:
        sign = -1.0
        ddn = -ddn
    else:
        return None

    diff = sub(origin, a)
    ddqxe2 = sign * dot(direction, cross(diff, edge2))
    if ddqxe2 < 0:
        return None
    dde1xq = sign * dot(direction, cross(edge1, diff))
    if dde1xq < 0:
        return None
    if ddqxe2 + dde1xq > ddn:
        return None

    qdn = -sign * dot(diff, normal)
    if qdn < 0:
        return None

    return add(origin, scale(direction, qdn / ddn))


__all__ = [
    "Vec3",
    "add",
    "closest_point_on_triangle",
    "cross",
    "dist",
    "dot",
    "mag",
    "normalize",
    "ray_triangle_intersection",
    "scale",
    "sub",
    "to_vec3",
    "triangle_cross",
]
