"""Registry of preset lesson layouts."""

from __future__ import annotations

from mirror_core.scene import Scene
from scenarios import P1_single_mirror, P2_two_mirrors, P3_three_mirrors

PRESETS = {
    "one_mirror": P1_single_mirror,
    "two_mirrors": P2_two_mirrors,
    "three_mirrors": P3_three_mirrors,
}

DEFAULT_PRESET = "two_mirrors"


def load_preset(name: str) -> Scene | None:
    """Build the named preset, or None for an unknown name."""

    mod = PRESETS.get(name)
    if mod is None:
        return None
    return mod.build_scene()


def default_scene() -> Scene:
    return PRESETS[DEFAULT_PRESET].build_scene()
