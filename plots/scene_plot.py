"""Matplotlib rendering of a processed lesson scene in canvas coordinates (y down)."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.axes import Axes
from matplotlib.patches import Circle, Polygon

from lesson.driver import RenderableScene
from mirror_core.geometry import Vec2, as_point
from mirror_core.rays import Ray
from mirror_core.scene import ENTITY_SIZE, PLAYER_RADIUS, Entity, Mirror, Player
from mirror_core.virtual import VirtualImage
from plots.plot_config import ScenePlotConfig

PLAYER_COLOR = "#2563eb"
OBJECT_COLOR = "#dc2626"
MIRROR_COLOR = "#a5b4fc"
RAY_COLOR = "#fbbf24"
VIRTUAL_IMAGE_COLOR = "#6b7280"


def _ensure_dir(out_dir: str | Path) -> Path:
    p = Path(out_dir)
    p.mkdir(parents=True, exist_ok=True)
    return p


def _save(fig: plt.Figure, out: Path, name: str, config: ScenePlotConfig) -> list[Path]:
    fig.tight_layout()
    written = []
    for fmt in config.formats:
        path = out / f"{name}.{fmt}"
        fig.savefig(path, dpi=config.dpi)
        written.append(path)
    plt.close(fig)
    return written


def _triangle(center: Vec2) -> np.ndarray:
    x, y = float(center[0]), float(center[1])
    return np.array([[x, y - ENTITY_SIZE], [x - ENTITY_SIZE, y + ENTITY_SIZE], [x + ENTITY_SIZE, y + ENTITY_SIZE]])


def image_alpha(bounces: int) -> float:
    """Deeper rooms fade out, down to 0.3."""

    return max(0.3, 1.0 - 0.1 * bounces)


def draw_mirrors(ax: Axes, mirrors: Sequence[Mirror]) -> None:
    for m in mirrors:
        ax.plot([m.start[0], m.end[0]], [m.start[1], m.end[1]], color=MIRROR_COLOR, lw=4, solid_capstyle="round")


def draw_rays(ax: Axes, rays: Sequence[Ray]) -> None:
    for r in rays:
        if len(r.history) < 2:
            continue
        pts = np.vstack(r.history)
        ax.plot(pts[:, 0], pts[:, 1], color=RAY_COLOR, lw=2)


def draw_virtual_images(ax: Axes, images: Sequence[VirtualImage]) -> None:
    for im in images:
        if not im.is_visible:
            continue
        alpha = image_alpha(im.bounces)
        style = dict(edgecolor=VIRTUAL_IMAGE_COLOR, facecolor=VIRTUAL_IMAGE_COLOR, alpha=alpha, ls="--", lw=1.5)
        if im.original_type == "player":
            ax.add_patch(Circle(tuple(im.position), PLAYER_RADIUS, **style))
        elif im.original_type == "entity":
            ax.add_patch(Polygon(_triangle(im.position), closed=True, **style))
        elif im.segment is not None:
            seg = im.segment
            ax.plot([seg.start[0], seg.end[0]], [seg.start[1], seg.end[1]], color=VIRTUAL_IMAGE_COLOR, alpha=alpha, ls="--", lw=3)


def draw_entities(ax: Axes, entities: Sequence[Entity]) -> None:
    for e in entities:
        ax.add_patch(Polygon(np.vstack(e.vertices), closed=True, facecolor=OBJECT_COLOR, edgecolor=OBJECT_COLOR))


def draw_player(ax: Axes, player: Player) -> None:
    ax.add_patch(Circle(tuple(player.position), PLAYER_RADIUS, facecolor=PLAYER_COLOR, edgecolor=PLAYER_COLOR))


def plot_scene(renderable: RenderableScene, bounds: Sequence[float] | Vec2, config: ScenePlotConfig | None = None) -> plt.Figure:
    """Draw mirrors, rays, virtual images, entities and viewer, in that order."""

    cfg = config or ScenePlotConfig()
    b = as_point(bounds)
    fig, ax = plt.subplots(figsize=cfg.figsize)

    draw_mirrors(ax, renderable.scene.mirrors)
    if cfg.show_rays:
        draw_rays(ax, renderable.rays)
    if cfg.show_virtual_images:
        draw_virtual_images(ax, renderable.virtual_images)
    draw_entities(ax, renderable.scene.entities)
    draw_player(ax, renderable.scene.player)

    ax.set_xlim(-b[0], 2.0 * b[0])
    ax.set_ylim(2.0 * b[1], -b[1])
    ax.set_aspect("equal")
    ax.set_xlabel("x [px]")
    ax.set_ylabel("y [px]")
    if cfg.title:
        ax.set_title(cfg.title)
    return fig


def save_scene_plot(
    renderable: RenderableScene,
    bounds: Sequence[float] | Vec2,
    out_dir: str | Path,
    name: str = "scene",
    config: ScenePlotConfig | None = None,
) -> list[Path]:
    cfg = config or ScenePlotConfig()
    return _save(plot_scene(renderable, bounds, cfg), _ensure_dir(out_dir), name, cfg)


class FigureRenderer:
    """Renderer for ``LessonDriver`` that writes one numbered frame per call."""

    def __init__(self, out_dir: str | Path, bounds: Sequence[float] | Vec2, config: ScenePlotConfig | None = None) -> None:
        self.out_dir = Path(out_dir)
        self.bounds = as_point(bounds)
        self.config = config or ScenePlotConfig()
        self.frames: list[Path] = []
        self.calls = 0

    def __call__(self, renderable: RenderableScene) -> list[Path]:
        name = f"frame_{self.calls:04d}"
        self.calls += 1
        written = save_scene_plot(renderable, self.bounds, self.out_dir, name=name, config=self.config)
        self.frames.extend(written)
        return written
