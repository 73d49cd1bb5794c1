"""Shared helpers: default bounds and conversion of results to plain records."""

from __future__ import annotations

from typing import Any

import numpy as np

from mirror_core.rays import Ray
from mirror_core.scene import Scene
from mirror_core.virtual import VirtualImage

# Canvas size of the lesson view, used as the (width, height) bounds.
DEFAULT_BOUNDS = np.array([800.0, 600.0])


def scene_to_record(scene: Scene) -> dict[str, Any]:
    return {
        "player": scene.player.position.tolist(),
        "entities": [{"id": e.id, "position": e.position.tolist()} for e in scene.entities],
        "mirrors": [{"id": m.id, "start": m.start.tolist(), "end": m.end.tolist()} for m in scene.mirrors],
    }


def rays_to_records(rays: tuple[Ray, ...] | list[Ray]) -> list[dict[str, Any]]:
    rec = []
    for r in rays:
        rec.append(
            {
                "entity_id": r.entity_id,
                "origin": r.origin.tolist(),
                "direction": r.direction.tolist(),
                "history": [p.tolist() for p in r.history],
                "mirror_ids": list(r.mirror_ids),
            }
        )
    return rec


def images_to_records(images: tuple[VirtualImage, ...] | list[VirtualImage]) -> list[dict[str, Any]]:
    rec = []
    for im in images:
        item: dict[str, Any] = {
            "original_id": im.original_id,
            "original_type": im.original_type,
            "position": im.position.tolist(),
            "bounces": im.bounces,
            "virtual_room": im.virtual_room,
            "is_visible": im.is_visible,
            "mirror_chain": list(im.mirror_chain),
        }
        if im.segment is not None:
            item["segment"] = {"start": im.segment.start.tolist(), "end": im.segment.end.tolist()}
        rec.append(item)
    return rec
