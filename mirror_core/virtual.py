"""Method-of-images generator for virtual copies seen through mirror chains.

Each room is the previous room reflected across one of the scene's mirrors. A
mirror id never appears twice in a chain, so with M mirrors the depth is at
most M and the number of rooms is sum_{k=1..M} M!/(M-k)!. That count grows
combinatorially; ``VirtualImageConfig.max_depth`` is the only cap and it
changes the output when set.

Example:
    >>> from mirror_core.scene import SceneBuilder
    >>> from mirror_core.virtual import calculate_virtual_images
    >>> scene = SceneBuilder().add_player((400, 300)).add_mirror((300, 200), (300, 400)).build()
    >>> [(im.original_type, im.mirror_chain) for im in calculate_virtual_images(scene, (400, 300))]
    [('player', ('mirror_1',)), ('mirror', ('mirror_1',))]
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from math import factorial
from typing import Iterator, Literal, Sequence

from mirror_core.geometry import Vec2, as_point, is_point_in_bounds, midpoint, reflect_point_across_mirror, reflect_segment_across_mirror
from mirror_core.scene import PLAYER_ID, Entity, Mirror, Player, Scene

ImageType = Literal["player", "entity", "mirror"]


@dataclass(frozen=True)
class VirtualImage:
    """A reflected copy of the viewer, an entity or a mirror.

    ``position`` is the mirror midpoint for mirror images; ``segment`` then holds
    the reflected endpoints. ``bounces`` equals ``virtual_room`` and the chain length.
    """

    original_id: str
    original_type: ImageType
    position: Vec2
    bounces: int
    mirror_chain: tuple[str, ...]
    is_visible: bool = True
    segment: Mirror | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "position", as_point(self.position))
        object.__setattr__(self, "mirror_chain", tuple(self.mirror_chain))

    @property
    def virtual_room(self) -> int:
        return self.bounces


@dataclass(frozen=True)
class VirtualImageConfig:
    max_depth: int | None = None

    def __post_init__(self) -> None:
        if self.max_depth is not None and self.max_depth < 0:
            raise ValueError("max_depth must be None or >= 0")


@dataclass(frozen=True)
class Room:
    """Contents of one (possibly virtual) room."""

    player: Player
    entities: tuple[Entity, ...]
    mirrors: tuple[Mirror, ...]

    @classmethod
    def from_scene(cls, scene: Scene) -> "Room":
        return cls(player=scene.player, entities=scene.entities, mirrors=scene.mirrors)


def reflect_scene_room(room: Room, mirror: Mirror) -> Room:
    """Reflect viewer, entities and mirrors of a room across a mirror's line."""

    return Room(
        player=replace(room.player, position=reflect_point_across_mirror(room.player.position, mirror)),
        entities=tuple(replace(e, position=reflect_point_across_mirror(e.position, mirror)) for e in room.entities),
        mirrors=tuple(reflect_segment_across_mirror(m, mirror) for m in room.mirrors),
    )


def max_room_count(mirror_count: int, max_depth: int | None = None) -> int:
    """Number of mirror chains explored for ``mirror_count`` mirrors."""

    m = int(mirror_count)
    depth = m if max_depth is None else min(m, int(max_depth))
    return sum(factorial(m) // factorial(m - k) for k in range(1, depth + 1))


def _room_images(bounds: Vec2, reflected: Room, room_number: int, chain: tuple[str, ...]) -> list[VirtualImage]:
    images: list[VirtualImage] = []

    if is_point_in_bounds(bounds, reflected.player.position):
        images.append(
            VirtualImage(
                original_id=PLAYER_ID,
                original_type="player",
                position=reflected.player.position,
                bounces=room_number,
                mirror_chain=chain,
            )
        )

    for entity in reflected.entities:
        if is_point_in_bounds(bounds, entity.position):
            images.append(
                VirtualImage(
                    original_id=entity.id,
                    original_type="entity",
                    position=entity.position,
                    bounces=room_number,
                    mirror_chain=chain,
                )
            )

    for seg in reflected.mirrors:
        center = midpoint(seg.start, seg.end)
        if any(is_point_in_bounds(bounds, p) for p in (seg.start, seg.end, center)):
            images.append(
                VirtualImage(
                    original_id=seg.id,
                    original_type="mirror",
                    position=center,
                    bounces=room_number,
                    mirror_chain=chain,
                    segment=seg,
                )
            )

    return images


def _next_mirror(pending: Iterator[Mirror], chain: tuple[str, ...]) -> Mirror | None:
    return next((m for m in pending if m.id not in chain), None)


def calculate_virtual_images(
    scene: Scene,
    bounds: Sequence[float] | Vec2,
    config: VirtualImageConfig | None = None,
) -> tuple[VirtualImage, ...]:
    """Enumerate virtual images depth first.

    Within a room the scene's mirrors are taken in order; the images of a room
    are emitted before those of the rooms behind it. Only the scene's own
    mirrors are reflected across, while the mirrors carried inside each room
    are the ones that get reflected and emitted as images.
    """

    cfg = config or VirtualImageConfig()
    b = as_point(bounds)
    originals = scene.mirrors
    images: list[VirtualImage] = []

    # Frames are (room, chain, room_number, remaining original mirrors); depth <= len(originals) + 1.
    stack: list[tuple[Room, tuple[str, ...], int, Iterator[Mirror]]] = [(Room.from_scene(scene), (), 1, iter(originals))]
    while stack:
        room, chain, room_number, pending = stack[-1]
        if cfg.max_depth is not None and room_number > cfg.max_depth:
            stack.pop()
            continue
        mirror = _next_mirror(pending, chain)
        if mirror is None:
            stack.pop()
            continue

        next_chain = chain + (mirror.id,)
        reflected = reflect_scene_room(room, mirror)
        images.extend(_room_images(b, reflected, room_number, next_chain))
        stack.append((reflected, next_chain, room_number + 1, iter(originals)))

    return tuple(images)
