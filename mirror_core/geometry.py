"""Geometry primitives for the 2D mirror-room simulation.

Example:
    >>> import numpy as np
    >>> from mirror_core.geometry import ray_line_intersection
    >>> hit = ray_line_intersection(np.array([0.0, 0.0]), np.array([1.0, 0.0]), np.array([2.0, -1.0]), np.array([2.0, 1.0]))
    >>> np.allclose(hit.point, np.array([2.0, 0.0]))
    True
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Optional, Sequence

import numpy as np
from numpy.typing import NDArray

if TYPE_CHECKING:
    from mirror_core.scene import Mirror

Vec2 = NDArray[np.float64]
EPS = 1e-6


@dataclass(frozen=True)
class Hit:
    """Ray intersection: point, distance along the ray, unit normal and what was hit."""

    point: Vec2
    distance: float
    normal: Vec2
    mirror_id: str | None = None
    entity_id: str | None = None


def vec2(x: float, y: float) -> Vec2:
    return np.array([x, y], dtype=float)


def as_point(p: Sequence[float] | Vec2) -> Vec2:
    """Copy into a read-only float 2-vector."""

    v = np.array(p, dtype=float)
    if v.shape != (2,):
        raise ValueError(f"Expected a 2D point, got shape {v.shape}")
    v.setflags(write=False)
    return v


def cross(a: Vec2, b: Vec2) -> float:
    return float(a[0] * b[1] - a[1] * b[0])


def normalize(v: Vec2, eps: float = 1e-12) -> Vec2:
    vv = np.asarray(v, dtype=float)
    n = np.linalg.norm(vv)
    if n < eps:
        raise ValueError("Cannot normalize near-zero vector")
    return vv / n


def midpoint(a: Vec2, b: Vec2) -> Vec2:
    return 0.5 * (np.asarray(a, dtype=float) + np.asarray(b, dtype=float))


def is_point_in_bounds(bounds: Vec2, point: Vec2) -> bool:
    """True if point lies in [-w, 2w] x [-h, 2h] for half-extents (w, h)."""

    w, h = float(bounds[0]), float(bounds[1])
    return -w <= float(point[0]) <= 2.0 * w and -h <= float(point[1]) <= 2.0 * h


def reflect_point_across_mirror(point: Vec2, mirror: Mirror) -> Vec2:
    """Mirror a point across the infinite line through the mirror segment."""

    start = np.asarray(mirror.start, dtype=float)
    p = np.asarray(point, dtype=float)
    along = np.asarray(mirror.end, dtype=float) - start
    if float(np.linalg.norm(along)) < EPS:
        # A degenerate mirror has no line; the point stays where it is.
        return p.copy()
    mirror_dir = normalize(along)
    n = np.array([-mirror_dir[1], mirror_dir[0]])
    signed_dist = float(np.dot(p - start, n))
    return p - 2.0 * signed_dist * n


def reflect_segment_across_mirror(segment: Mirror, mirror: Mirror) -> Mirror:
    """Reflect both endpoints of a segment; the segment keeps its id."""

    return replace(
        segment,
        start=reflect_point_across_mirror(segment.start, mirror),
        end=reflect_point_across_mirror(segment.end, mirror),
    )


def reflect(direction: Vec2, normal: Vec2) -> Vec2:
    """Specularly reflect a direction about a unit normal."""

    d = np.asarray(direction, dtype=float)
    n = np.asarray(normal, dtype=float)
    return d - 2.0 * float(np.dot(d, n)) * n


def ray_line_intersection(origin: Vec2, direction: Vec2, seg_start: Vec2, seg_end: Vec2) -> Optional[Hit]:
    """Intersect a ray with a segment.

    Parallel rays, hits at or behind the origin (t <= EPS) and hits outside the
    segment (u not in [0, 1]) give None. The returned normal is the segment's
    left perpendicular and does not necessarily face the ray.
    """

    o = np.asarray(origin, dtype=float)
    d = np.asarray(direction, dtype=float)
    a = np.asarray(seg_start, dtype=float)
    line_dir = np.asarray(seg_end, dtype=float) - a
    to_start = a - o

    denom = cross(d, line_dir)
    if abs(denom) < EPS:
        return None
    t = cross(to_start, line_dir) / denom
    if t <= EPS:
        return None
    u = cross(to_start, d) / denom
    if u < 0.0 or u > 1.0:
        return None

    normal = normalize(np.array([-line_dir[1], line_dir[0]]))
    return Hit(point=o + t * d, distance=t, normal=normal)


def ray_circle_intersection(origin: Vec2, direction: Vec2, center: Vec2, radius: float) -> Optional[Hit]:
    """Near intersection of a ray entering a circle from outside."""

    o = np.asarray(origin, dtype=float)
    d = np.asarray(direction, dtype=float)
    c = np.asarray(center, dtype=float)

    proj = float(np.dot(c - o, d))
    if proj < 0.0:
        return None
    closest = o + proj * d
    dist = float(np.linalg.norm(closest - c))
    if dist > radius:
        return None
    t = proj - float(np.sqrt(radius * radius - dist * dist))
    if t <= EPS:
        return None
    point = o + t * d
    return Hit(point=point, distance=t, normal=normalize(point - c))


def signed_area(vertices: Sequence[Vec2]) -> float:
    v0, v1, v2 = (np.asarray(v, dtype=float) for v in vertices)
    return 0.5 * cross(v1 - v0, v2 - v0)


def ray_triangle_intersection(origin: Vec2, direction: Vec2, vertices: Sequence[Vec2]) -> Optional[Hit]:
    """First edge (in vertex order) of the triangle hit by the ray.

    No nearest-edge selection is done. The normal of the hit edge points out of
    the triangle, which side that is follows from the winding.
    """

    ccw = signed_area(vertices) > 0.0
    for i in range(3):
        a = np.asarray(vertices[i], dtype=float)
        b = np.asarray(vertices[(i + 1) % 3], dtype=float)
        hit = ray_line_intersection(origin, direction, a, b)
        if hit is None:
            continue
        e = b - a
        outward = np.array([e[1], -e[0]]) if ccw else np.array([-e[1], e[0]])
        return Hit(point=hit.point, distance=hit.distance, normal=normalize(outward))
    return None


def distance(a: Vec2, b: Vec2) -> float:
    return float(np.linalg.norm(np.asarray(a, dtype=float) - np.asarray(b, dtype=float)))
