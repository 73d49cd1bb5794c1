"""Immutable scene description: viewer, entities and line-segment mirrors.

Example:
    >>> from mirror_core.scene import SceneBuilder
    >>> scene = SceneBuilder().add_player((400, 300)).add_entity((350, 250)).add_mirror((300, 200), (300, 400)).build()
    >>> [m.id for m in scene.mirrors]
    ['mirror_1']
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Literal, Sequence

from mirror_core.geometry import Vec2, as_point, vec2

PLAYER_RADIUS = 12.0
ENTITY_SIZE = 8.0
MIRROR_SIZE = 10.0

PLAYER_ID = "player"


@dataclass(frozen=True)
class Player:
    position: Vec2
    tag: Literal["player"] = "player"

    def __post_init__(self) -> None:
        object.__setattr__(self, "position", as_point(self.position))

    @property
    def id(self) -> str:
        return PLAYER_ID


@dataclass(frozen=True)
class Entity:
    """Illuminated object drawn as a small triangle around its position."""

    id: str
    position: Vec2
    tag: Literal["entity"] = "entity"

    def __post_init__(self) -> None:
        object.__setattr__(self, "position", as_point(self.position))

    @property
    def vertices(self) -> tuple[Vec2, Vec2, Vec2]:
        # Apex above the centre, base corners below (screen y grows downwards).
        x, y = float(self.position[0]), float(self.position[1])
        return (
            vec2(x, y - ENTITY_SIZE),
            vec2(x - ENTITY_SIZE, y + ENTITY_SIZE),
            vec2(x + ENTITY_SIZE, y + ENTITY_SIZE),
        )


@dataclass(frozen=True)
class Mirror:
    id: str
    start: Vec2
    end: Vec2

    def __post_init__(self) -> None:
        object.__setattr__(self, "start", as_point(self.start))
        object.__setattr__(self, "end", as_point(self.end))


SceneObject = Player | Entity


def make_entity(position: Sequence[float] | Vec2, entity_id: str) -> Entity:
    return Entity(id=entity_id, position=position)


def make_mirror(center: Sequence[float] | Vec2, mirror_id: str) -> Mirror:
    """Horizontal mirror of half-length MIRROR_SIZE centred on a point."""

    x, y = float(center[0]), float(center[1])
    return Mirror(id=mirror_id, start=vec2(x - MIRROR_SIZE, y), end=vec2(x + MIRROR_SIZE, y))


def _check_unique(ids: Sequence[str], kind: str) -> None:
    seen: set[str] = set()
    for i in ids:
        if i in seen:
            raise ValueError(f"Duplicate {kind} id: {i}")
        seen.add(i)


@dataclass(frozen=True)
class Scene:
    """Snapshot of one lesson state. Objects are identified by id, not reference."""

    player: Player
    entities: tuple[Entity, ...] = ()
    mirrors: tuple[Mirror, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "entities", tuple(self.entities))
        object.__setattr__(self, "mirrors", tuple(self.mirrors))
        if any(e.id == PLAYER_ID for e in self.entities):
            raise ValueError(f"Entity id {PLAYER_ID!r} is reserved for the viewer")
        _check_unique([e.id for e in self.entities], "entity")
        _check_unique([m.id for m in self.mirrors], "mirror")

    def find_object(self, object_id: str) -> SceneObject | None:
        if object_id == PLAYER_ID:
            return self.player
        return next((e for e in self.entities if e.id == object_id), None)

    def find_mirror(self, mirror_id: str) -> Mirror | None:
        return next((m for m in self.mirrors if m.id == mirror_id), None)

    def with_player_at(self, position: Sequence[float] | Vec2) -> "Scene":
        return replace(self, player=replace(self.player, position=position))


@dataclass(frozen=True)
class SceneBuilder:
    """Chaining builder; every call returns a new builder.

    Entity and mirror ids are assigned in insertion order as ``entity_<n>`` and
    ``mirror_<n>``.
    """

    player: Player | None = None
    entities: tuple[Entity, ...] = ()
    mirrors: tuple[Mirror, ...] = ()

    def add_player(self, position: Sequence[float] | Vec2) -> "SceneBuilder":
        return replace(self, player=Player(position=position))

    def add_entity(self, position: Sequence[float] | Vec2) -> "SceneBuilder":
        e = make_entity(position, f"entity_{len(self.entities) + 1}")
        return replace(self, entities=self.entities + (e,))

    def add_mirror(self, start: Sequence[float] | Vec2, end: Sequence[float] | Vec2) -> "SceneBuilder":
        m = Mirror(id=f"mirror_{len(self.mirrors) + 1}", start=start, end=end)
        return replace(self, mirrors=self.mirrors + (m,))

    def build(self) -> Scene:
        if self.player is None:
            raise ValueError("Scene requires a player")
        return Scene(player=self.player, entities=self.entities, mirrors=self.mirrors)
