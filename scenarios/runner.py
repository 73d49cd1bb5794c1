"""Preset runner: trace sightlines, enumerate virtual images, write report/plots.

Example:
    python -m scenarios.runner --preset two_mirrors --report outputs/report.md --plots-dir outputs/plots
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any, Sequence

import numpy as np

from analysis.image_stats import images_by_room, ray_summary, reflection_involution_error, virtual_image_consistency
from lesson.driver import LessonSettings, RenderableScene, process_scene
from mirror_core.tracer import MAX_BOUNCES, RAY_COUNT, TraceConfig
from mirror_core.virtual import VirtualImageConfig, max_room_count
from plots.plot_config import ScenePlotConfig
from plots.scene_plot import save_scene_plot
from scenarios.common import DEFAULT_BOUNDS, images_to_records, rays_to_records, scene_to_record
from scenarios.presets import DEFAULT_PRESET, PRESETS, load_preset

ROOM_COUNT_WARNING = 10_000


def build_settings(args: argparse.Namespace) -> LessonSettings:
    try:
        trace_cfg = TraceConfig(ray_count=int(args.ray_count), max_bounces=int(args.max_bounces))
        image_cfg = VirtualImageConfig(max_depth=args.max_depth)
    except ValueError as e:
        raise SystemExit(f"invalid configuration: {e}")
    return LessonSettings(
        show_rays=not bool(args.no_rays),
        show_virtual_images=not bool(args.no_virtual_images),
        trace=trace_cfg,
        images=image_cfg,
    )


def build_report_lines(preset: str, result: RenderableScene, bounds: np.ndarray, settings: LessonSettings) -> list[str]:
    scene = result.scene
    lines = [
        f"# Mirror lesson report: {preset}",
        "",
        f"- bounds: {bounds.tolist()}",
        f"- entities: {len(scene.entities)}, mirrors: {len(scene.mirrors)}",
        f"- rooms explored: {max_room_count(len(scene.mirrors), settings.images.max_depth)}",
        f"- reflection involution error: {reflection_involution_error(scene):.3e}",
        "",
        "## Sightlines",
        "",
    ]
    if not settings.show_rays:
        lines.append("- disabled")
    elif not result.rays:
        lines.append("- no entity is visible through a mirror")
    for rec in ray_summary(result.rays, scene):
        lines.append(
            f"- {rec['entity_id']}: bounces={rec['bounce_count']} via {rec['mirror_ids']}, "
            f"path_length={rec['path_length']:.2f}, center_miss={rec['center_miss']:.2f}"
        )

    lines.extend(["", "## Virtual images", ""])
    if not settings.show_virtual_images:
        lines.append("- disabled")
        return lines
    for room, counts in images_by_room(result.virtual_images).items():
        parts = ", ".join(f"{k}={v}" for k, v in sorted(counts.items()))
        lines.append(f"- room {room}: {parts}")
    chk = virtual_image_consistency(scene, result.virtual_images, bounds)
    lines.append(
        f"- consistency: ok={chk['ok']}, chain_unique={chk['chain_unique']}, "
        f"max_chain_length={chk['max_chain_length']}, in_bounds={chk['in_bounds']}"
    )
    return lines


def run(preset: str, bounds: Sequence[float], settings: LessonSettings) -> RenderableScene:
    scene = load_preset(preset)
    if scene is None:
        raise SystemExit(f"unknown preset: {preset}")
    rooms = max_room_count(len(scene.mirrors), settings.images.max_depth)
    if settings.show_virtual_images and settings.images.max_depth is None and rooms > ROOM_COUNT_WARNING:
        print(f"[WARNING][{preset}] {len(scene.mirrors)} mirrors explore {rooms} rooms; consider --max-depth")
    return process_scene(scene, bounds, settings)


def main(argv: Sequence[str] | None = None) -> dict[str, Any]:
    parser = argparse.ArgumentParser()
    parser.add_argument("--preset", type=str, default=DEFAULT_PRESET, choices=sorted(PRESETS))
    parser.add_argument("--bounds", type=float, nargs=2, default=DEFAULT_BOUNDS.tolist(), metavar=("WIDTH", "HEIGHT"))
    parser.add_argument("--ray-count", type=int, default=RAY_COUNT)
    parser.add_argument("--max-bounces", type=int, default=MAX_BOUNCES)
    parser.add_argument("--max-depth", type=int, default=None)
    parser.add_argument("--no-rays", action="store_true")
    parser.add_argument("--no-virtual-images", action="store_true")
    parser.add_argument("--json", type=str, default=None)
    parser.add_argument("--report", type=str, default=None)
    parser.add_argument("--plots-dir", type=str, default=None)
    args = parser.parse_args(argv)

    settings = build_settings(args)
    bounds = np.asarray(args.bounds, dtype=float)
    result = run(args.preset, bounds, settings)
    print(f"[INFO][{args.preset}] rays={len(result.rays)} virtual_images={len(result.virtual_images)}")

    data = {
        "preset": args.preset,
        "bounds": bounds.tolist(),
        "scene": scene_to_record(result.scene),
        "rays": rays_to_records(result.rays),
        "virtual_images": images_to_records(result.virtual_images),
    }
    if args.json:
        out = Path(args.json)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(json.dumps(data, indent=2), encoding="utf-8")
        print(f"[INFO] wrote {out}")
    if args.report:
        out = Path(args.report)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text("\n".join(build_report_lines(args.preset, result, bounds, settings)) + "\n", encoding="utf-8")
        print(f"[INFO] wrote {out}")
    if args.plots_dir:
        cfg = ScenePlotConfig(title=args.preset)
        for p in save_scene_plot(result, bounds, args.plots_dir, name=args.preset, config=cfg):
            print(f"[INFO] wrote {p}")
    return data


if __name__ == "__main__":
    main()
