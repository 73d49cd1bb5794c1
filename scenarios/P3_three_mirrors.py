"""P3 U-shaped box of three mirrors (left, top, right) open at the bottom."""

from __future__ import annotations

from mirror_core.scene import Scene, SceneBuilder


def build_scene() -> Scene:
    return (
        SceneBuilder()
        .add_player((400, 350))
        .add_entity((375, 264))
        .add_entity((400, 250))
        .add_mirror((300, 200), (300, 400))
        .add_mirror((300, 200), (500, 200))
        .add_mirror((500, 200), (500, 400))
        .build()
    )
