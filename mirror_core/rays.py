"""Traced sightline data structures and helpers.

Example:
    >>> import numpy as np
    >>> from mirror_core.rays import PathAccumulator
    >>> acc = PathAccumulator.starting_at(np.array([0.0, 0.0]), np.array([1.0, 0.0]))
    >>> acc.add_reflection(np.array([5.0, 0.0]), "mirror_1")
    >>> acc.bounce_count
    1
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

import numpy as np

from mirror_core.geometry import Vec2, as_point


@dataclass(frozen=True)
class Ray:
    """A sightline from the viewer.

    ``history`` holds the origin followed by every hit point in traversal order.
    ``entity_id`` is set only when the ray ends on an entity after bouncing.
    """

    origin: Vec2
    direction: Vec2
    history: tuple[Vec2, ...]
    entity_id: str | None = None
    mirror_ids: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "origin", as_point(self.origin))
        object.__setattr__(self, "direction", as_point(self.direction))
        object.__setattr__(self, "history", tuple(as_point(p) for p in self.history))
        object.__setattr__(self, "mirror_ids", tuple(self.mirror_ids))

    @property
    def bounce_count(self) -> int:
        return len(self.mirror_ids)

    @property
    def last_point(self) -> Vec2:
        return self.history[-1]


@dataclass
class PathAccumulator:
    """Collects hit points and mirror bounces while a ray is traced."""

    origin: Vec2
    direction: Vec2
    points: List[Vec2] = field(default_factory=list)
    mirror_ids: List[str] = field(default_factory=list)

    @classmethod
    def starting_at(cls, origin: Vec2, direction: Vec2) -> "PathAccumulator":
        o = np.asarray(origin, dtype=float)
        return cls(origin=o.copy(), direction=np.asarray(direction, dtype=float).copy(), points=[o.copy()])

    @property
    def bounce_count(self) -> int:
        return len(self.mirror_ids)

    @property
    def has_bounced(self) -> bool:
        return bool(self.mirror_ids)

    def add_point(self, p: Vec2) -> None:
        self.points.append(np.asarray(p, dtype=float))

    def add_reflection(self, p: Vec2, mirror_id: str) -> None:
        self.add_point(p)
        self.mirror_ids.append(str(mirror_id))

    def finish(self, entity_id: str) -> Ray:
        return Ray(
            origin=self.origin,
            direction=self.direction,
            history=tuple(self.points),
            entity_id=entity_id,
            mirror_ids=tuple(self.mirror_ids),
        )
