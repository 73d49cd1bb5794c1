"""Plot configuration for lesson scene figures."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ScenePlotConfig:
    show_rays: bool = True
    show_virtual_images: bool = True
    figsize: tuple[float, float] = (8.0, 6.0)
    dpi: int = 150
    formats: tuple[str, ...] = ("png", "pdf")
    title: str | None = None

    def __post_init__(self) -> None:
        if self.dpi <= 0:
            raise ValueError("dpi must be positive")
        if not self.formats:
            raise ValueError("at least one output format is required")
