"""P1 single vertical mirror to the left of the viewer with one object."""

from __future__ import annotations

from mirror_core.scene import Scene, SceneBuilder


def build_scene() -> Scene:
    return (
        SceneBuilder()
        .add_player((400, 300))
        .add_entity((350, 250))
        .add_mirror((300, 200), (300, 400))
        .build()
    )
