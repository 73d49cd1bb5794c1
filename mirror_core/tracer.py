"""Sightline tracer: which entities the viewer sees by way of the mirrors.

A fan of rays leaves the viewer, bounces off mirrors and is kept only when it
ends on an entity after at least one bounce. For each entity the single ray
landing closest to its centre is returned.

Example:
    >>> from mirror_core.scene import SceneBuilder
    >>> from mirror_core.tracer import trace
    >>> scene = SceneBuilder().add_player((400, 300)).add_entity((350, 250)).build()
    >>> trace(scene)
    ()
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

import numpy as np

from mirror_core.geometry import Hit, Vec2, distance, ray_circle_intersection, ray_line_intersection, ray_triangle_intersection, reflect
from mirror_core.rays import PathAccumulator, Ray
from mirror_core.scene import PLAYER_RADIUS, Scene

MAX_BOUNCES = 10
RAY_COUNT = 128


@dataclass(frozen=True)
class TraceConfig:
    ray_count: int = RAY_COUNT
    max_bounces: int = MAX_BOUNCES

    def __post_init__(self) -> None:
        if self.ray_count < 1:
            raise ValueError("ray_count must be >= 1")
        if self.max_bounces < 0:
            raise ValueError("max_bounces must be >= 0")


def fan_directions(ray_count: int) -> list[Vec2]:
    """Unit directions evenly spaced over a full turn, starting at angle 0."""

    angles = np.arange(ray_count, dtype=float) / float(ray_count) * 2.0 * np.pi
    return [np.array([np.cos(a), np.sin(a)]) for a in angles]


def find_nearest_intersection(origin: Vec2, direction: Vec2, scene: Scene, ignore_player: bool = False) -> Optional[Hit]:
    """Nearest hit among mirrors, the viewer circle and entities (checked in that order).

    Ties keep the first candidate found.
    """

    nearest: Hit | None = None
    min_dist = np.inf

    for mirror in scene.mirrors:
        hit = ray_line_intersection(origin, direction, mirror.start, mirror.end)
        if hit is not None and hit.distance < min_dist:
            nearest = replace(hit, mirror_id=mirror.id)
            min_dist = hit.distance

    if not ignore_player:
        hit = ray_circle_intersection(origin, direction, scene.player.position, PLAYER_RADIUS)
        if hit is not None and hit.distance < min_dist:
            nearest = hit
            min_dist = hit.distance

    for entity in scene.entities:
        hit = ray_triangle_intersection(origin, direction, entity.vertices)
        if hit is not None and hit.distance < min_dist:
            nearest = replace(hit, entity_id=entity.id)
            min_dist = hit.distance

    return nearest


def trace_ray(origin: Vec2, direction: Vec2, scene: Scene, max_bounces: int = MAX_BOUNCES) -> Optional[Ray]:
    """Follow one ray until it reaches an entity after a bounce.

    Returns None for direct sightlines, rays escaping the scene, and rays still
    bouncing once ``max_bounces`` reflections have happened.
    """

    acc = PathAccumulator.starting_at(origin, direction)
    current_origin = np.asarray(origin, dtype=float)
    current_dir = np.asarray(direction, dtype=float)

    while acc.bounce_count < max_bounces:
        hit = find_nearest_intersection(current_origin, current_dir, scene, ignore_player=True)
        if hit is None:
            return None

        if hit.mirror_id is not None:
            acc.add_reflection(hit.point, hit.mirror_id)
            current_dir = reflect(current_dir, hit.normal)
            current_origin = hit.point
            continue

        acc.add_point(hit.point)
        if hit.entity_id is not None and acc.has_bounced:
            return acc.finish(hit.entity_id)
        return None

    return None


def trace(scene: Scene, config: TraceConfig | None = None) -> tuple[Ray, ...]:
    """Trace the viewer's ray fan and keep the best ray per entity, in scene entity order."""

    cfg = config or TraceConfig()
    rays: list[Ray] = []
    for direction in fan_directions(cfg.ray_count):
        ray = trace_ray(scene.player.position, direction, scene, max_bounces=cfg.max_bounces)
        if ray is not None and ray.entity_id is not None and len(ray.history) >= 2:
            rays.append(ray)

    best: list[Ray] = []
    for entity in scene.entities:
        candidates = [r for r in rays if r.entity_id == entity.id]
        if not candidates:
            continue
        best.append(min(candidates, key=lambda r: distance(r.last_point, entity.position)))
    return tuple(best)
