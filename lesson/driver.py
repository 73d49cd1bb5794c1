"""Lesson driver: owns the scene and bounds, recomputes results, hands them to a renderer.

Scene changes are pure functions returning a new ``Scene``. The driver is the
only holder of state; the renderer is injected.

Example:
    >>> from lesson.commands import AddObject
    >>> from lesson.driver import LessonDriver
    >>> from scenarios.presets import default_scene
    >>> driver = LessonDriver(default_scene(), bounds=(800, 600))
    >>> out = driver.dispatch([AddObject()])
    >>> [e.id for e in out.scene.entities]
    ['entity_1', 'entity_2', 'entity_3']
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Iterable, Sequence

from lesson.commands import AddObject, Command, LoadPreset, MoveEntity, RefreshScene, RunSimulation
from mirror_core.geometry import Vec2, as_point
from mirror_core.rays import Ray
from mirror_core.scene import PLAYER_ID, Scene, make_entity
from mirror_core.tracer import TraceConfig, trace
from mirror_core.virtual import VirtualImage, VirtualImageConfig, calculate_virtual_images
from scenarios.presets import load_preset


@dataclass(frozen=True)
class LessonSettings:
    show_rays: bool = True
    show_virtual_images: bool = True
    trace: TraceConfig = field(default_factory=TraceConfig)
    images: VirtualImageConfig = field(default_factory=VirtualImageConfig)


@dataclass(frozen=True)
class RenderableScene:
    scene: Scene
    rays: tuple[Ray, ...] = ()
    virtual_images: tuple[VirtualImage, ...] = ()


Renderer = Callable[[RenderableScene], Any]


def move_entity(scene: Scene, entity_id: str, position: Sequence[float] | Vec2) -> Scene:
    """Move the viewer or an entity; unknown ids return ``scene`` itself."""

    if entity_id == PLAYER_ID:
        return scene.with_player_at(position)

    for i, entity in enumerate(scene.entities):
        if entity.id == entity_id:
            entities = list(scene.entities)
            entities[i] = make_entity(position, entity.id)
            return replace(scene, entities=tuple(entities))
    return scene


def add_entity(scene: Scene, position: Sequence[float] | Vec2) -> Scene:
    e = make_entity(position, f"entity_{len(scene.entities) + 1}")
    return replace(scene, entities=scene.entities + (e,))


def apply_command(scene: Scene, command: Command, initial_scene: Scene) -> Scene:
    if isinstance(command, MoveEntity):
        return move_entity(scene, command.entity_id, command.position)
    if isinstance(command, AddObject):
        return add_entity(scene, command.position)
    if isinstance(command, LoadPreset):
        preset = load_preset(command.preset)
        return scene if preset is None else preset
    if isinstance(command, RefreshScene):
        return initial_scene
    if isinstance(command, RunSimulation):
        return scene
    raise TypeError(f"Unknown lesson command: {command!r}")


def process_scene(scene: Scene, bounds: Sequence[float] | Vec2, settings: LessonSettings | None = None) -> RenderableScene:
    """Run the tracer and the virtual-image generator for one snapshot."""

    s = settings or LessonSettings()
    rays = trace(scene, s.trace) if s.show_rays else ()
    images = calculate_virtual_images(scene, bounds, s.images) if s.show_virtual_images else ()
    return RenderableScene(scene=scene, rays=rays, virtual_images=images)


class LessonDriver:
    def __init__(
        self,
        initial_scene: Scene,
        bounds: Sequence[float] | Vec2,
        renderer: Renderer | None = None,
        settings: LessonSettings | None = None,
    ) -> None:
        self.initial_scene = initial_scene
        self.bounds = as_point(bounds)
        self.renderer = renderer
        self.settings = settings or LessonSettings()
        self._scene = initial_scene

    @property
    def scene(self) -> Scene:
        return self._scene

    def render(self) -> RenderableScene:
        out = process_scene(self._scene, self.bounds, self.settings)
        if self.renderer is not None:
            self.renderer(out)
        return out

    def dispatch(self, commands: Iterable[Command]) -> RenderableScene:
        """Apply commands in order, then recompute and render once."""

        for command in commands:
            self._scene = apply_command(self._scene, command, self.initial_scene)
        return self.render()

    def update_settings(self, **changes: Any) -> RenderableScene:
        self.settings = replace(self.settings, **changes)
        return self.render()
