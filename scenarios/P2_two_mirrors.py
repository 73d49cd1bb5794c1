"""P2 two parallel mirrors facing each other (the default lesson scene).

Each mirror's chain only excludes itself, so reflections alternate between
the two mirrors and rooms 2 and deeper appear.
"""

from __future__ import annotations

from mirror_core.scene import Scene, SceneBuilder


def build_scene() -> Scene:
    return (
        SceneBuilder()
        .add_player((400, 300))
        .add_entity((375, 264))
        .add_entity((400, 250))
        .add_mirror((300, 200), (300, 400))
        .add_mirror((500, 200), (500, 400))
        .build()
    )
