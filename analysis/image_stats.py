"""Summaries and invariant checks over traced rays and virtual images.

The consistency check mirrors the invariants every generator run must satisfy:
- no mirror id repeats inside a chain
- chain length never exceeds the mirror count
- every emitted position lies in [-w, 2w] x [-h, 2h] (for mirror images,
  at least one of the endpoints or the midpoint)
"""

from __future__ import annotations

from collections import Counter
from typing import Any, Sequence

import numpy as np

from mirror_core.geometry import Vec2, as_point, distance, is_point_in_bounds, reflect_point_across_mirror
from mirror_core.rays import Ray
from mirror_core.scene import Scene
from mirror_core.virtual import VirtualImage


def ray_path_length(ray: Ray) -> float:
    pts = ray.history
    if len(pts) < 2:
        return 0.0
    return float(sum(distance(pts[i], pts[i + 1]) for i in range(len(pts) - 1)))


def ray_summary(rays: Sequence[Ray], scene: Scene) -> list[dict[str, Any]]:
    out = []
    for r in rays:
        entity = scene.find_object(r.entity_id) if r.entity_id is not None else None
        miss = distance(r.last_point, entity.position) if entity is not None else float("nan")
        out.append(
            {
                "entity_id": r.entity_id,
                "bounce_count": r.bounce_count,
                "mirror_ids": list(r.mirror_ids),
                "path_length": ray_path_length(r),
                "center_miss": miss,
            }
        )
    return out


def images_by_room(images: Sequence[VirtualImage]) -> dict[int, dict[str, int]]:
    """Image counts per room number, split by original type."""

    counts: dict[int, Counter] = {}
    for im in images:
        counts.setdefault(im.virtual_room, Counter())[im.original_type] += 1
    return {room: dict(c) for room, c in sorted(counts.items())}


def reflection_involution_error(scene: Scene) -> float:
    """Largest deviation after reflecting each scene point twice across each mirror."""

    points: list[Vec2] = [scene.player.position]
    points.extend(e.position for e in scene.entities)
    for m in scene.mirrors:
        points.extend([m.start, m.end])

    worst = 0.0
    for mirror in scene.mirrors:
        for p in points:
            back = reflect_point_across_mirror(reflect_point_across_mirror(p, mirror), mirror)
            worst = max(worst, float(np.linalg.norm(back - p)))
    return worst


def _image_in_bounds(bounds: Vec2, image: VirtualImage) -> bool:
    if image.segment is None:
        return is_point_in_bounds(bounds, image.position)
    # Mirror images only need one of start, end or midpoint inside.
    return any(is_point_in_bounds(bounds, p) for p in (image.segment.start, image.segment.end, image.position))


def virtual_image_consistency(scene: Scene, images: Sequence[VirtualImage], bounds: Sequence[float] | Vec2) -> dict[str, Any]:
    b = as_point(bounds)
    mirror_count = len(scene.mirrors)
    chain_unique = all(len(set(im.mirror_chain)) == len(im.mirror_chain) for im in images)
    max_chain = max((len(im.mirror_chain) for im in images), default=0)
    depth_bounded = max_chain <= mirror_count
    room_matches_chain = all(im.bounces == len(im.mirror_chain) for im in images)
    out_of_bounds = [im for im in images if not _image_in_bounds(b, im)]
    return {
        "num_images": len(images),
        "mirror_count": mirror_count,
        "chain_unique": bool(chain_unique),
        "max_chain_length": int(max_chain),
        "depth_bounded": bool(depth_bounded),
        "room_matches_chain": bool(room_matches_chain),
        "in_bounds": not out_of_bounds,
        "num_out_of_bounds": len(out_of_bounds),
        "ok": bool(chain_unique and depth_bounded and room_matches_chain and not out_of_bounds),
    }
