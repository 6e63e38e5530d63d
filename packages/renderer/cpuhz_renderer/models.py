"""Typed renderer models."""

from __future__ import annotations

from dataclasses import dataclass

from .normalize import NormalizationResult


@dataclass(frozen=True)
class SparklineStyle:
    padding: int = 0
    alpha: int = 250
    line_width: float = 1.6
    curve_tension: float = 0.45
    curve_steps: int = 6
    above_top: str = "#AF1E2D"
    above_base: str = "#FFC8C4"
    below_base: str = "#B5FFD6"
    below_bottom: str = "#03DF6D"
    line: str = "#F4F7FF"


@dataclass(frozen=True)
class IconSpec:
    ghz: float = 0.0
    over_base: bool = False
    plot: NormalizationResult | None = None
    text_normal: str = "#054643"
    text_over: str = "#901C28"
    shadow: str = "#000000"

    @property
    def text_color(self) -> str:
        return self.text_over if self.over_base else self.text_normal
