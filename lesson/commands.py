"""Commands that change the lesson scene.

Every command is a small frozen value; ``Command`` is their union and
``lesson.driver.apply_command`` handles each variant.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Union

from mirror_core.geometry import Vec2, as_point

PresetName = Literal["one_mirror", "two_mirrors", "three_mirrors"]

NEW_OBJECT_POSITION = (400.0, 250.0)


@dataclass(frozen=True)
class AddObject:
    position: Vec2 = NEW_OBJECT_POSITION

    def __post_init__(self) -> None:
        object.__setattr__(self, "position", as_point(self.position))


@dataclass(frozen=True)
class MoveEntity:
    """Move the viewer (``entity_id="player"``) or an entity."""

    entity_id: str
    position: Vec2

    def __post_init__(self) -> None:
        object.__setattr__(self, "position", as_point(self.position))


@dataclass(frozen=True)
class LoadPreset:
    preset: PresetName


@dataclass(frozen=True)
class RefreshScene:
    pass


@dataclass(frozen=True)
class RunSimulation:
    pass


Command = Union[AddObject, MoveEntity, LoadPreset, RefreshScene, RunSimulation]
