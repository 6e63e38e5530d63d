"""Baseline-centered adaptive range normalization for sparkline plots."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence


GAIN_DIVISOR_MIN = 1.0
GAIN_DIVISOR_MAX = 2.5


@dataclass(frozen=True)
class NormalizerConfig:
    fixed_floor_mhz: float = 200.0
    median_fraction: float = 0.05
    gain_divisor: float = 1.75
    percentile_low: float = 0.10
    percentile_high: float = 0.90
    epsilon: float = 1e-6

    def __post_init__(self) -> None:
        if not 0.0 <= self.percentile_low < self.percentile_high <= 1.0:
            raise ValueError(
                f"percentile bounds must satisfy 0 <= low < high <= 1, got {self.percentile_low}, {self.percentile_high}"
            )


@dataclass(frozen=True)
class NormalizationResult:
    points: tuple[tuple[int, float], ...]
    effective_base: float
    effective_half_range: float

    @property
    def values(self) -> list[float]:
        return [d for _x, d in self.points]

    def __len__(self) -> int:
        return len(self.points)


def percentile(sorted_values: Sequence[float], p: float) -> float:
    """Linear interpolation between order statistics at index (n-1)*p."""
    if not sorted_values:
        return 0.0
    if p <= 0.0:
        return float(sorted_values[0])
    if p >= 1.0:
        return float(sorted_values[-1])

    idx = (len(sorted_values) - 1) * p
    lo = math.floor(idx)
    hi = math.ceil(idx)
    if lo == hi:
        return float(sorted_values[lo])
    t = idx - lo
    return float(sorted_values[lo] + (sorted_values[hi] - sorted_values[lo]) * t)


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


class RangeNormalizer:
    """Maps raw MHz samples to [-1, 1] around a baseline.

    Percentile bounds keep a lone spike from flattening the rest of the window;
    the minimum range keeps a near-constant window from rendering as noise.
    """

    def __init__(self, config: NormalizerConfig | None = None) -> None:
        self.config = config or NormalizerConfig()

    @property
    def gain_divisor(self) -> float:
        return _clamp(float(self.config.gain_divisor), GAIN_DIVISOR_MIN, GAIN_DIVISOR_MAX)

    def normalize(self, samples: Sequence[float], baseline: float) -> NormalizationResult:
        cfg = self.config
        if len(samples) < 2:
            return NormalizationResult(points=(), effective_base=max(float(baseline), 0.0), effective_half_range=0.0)

        ordered = sorted(float(v) for v in samples)
        p_low = percentile(ordered, cfg.percentile_low)
        p_high = percentile(ordered, cfg.percentile_high)
        median = percentile(ordered, 0.5)

        base = float(baseline) if baseline > 0 else median
        min_range = max(cfg.fixed_floor_mhz, abs(median) * cfg.median_fraction)
        max_deviation = max(p_high - base, base - p_low, 0.0)

        half_range = max(max_deviation, min_range / 2.0, cfg.epsilon)
        half_range /= self.gain_divisor

        points = tuple((i, _clamp((float(v) - base) / half_range, -1.0, 1.0)) for i, v in enumerate(samples))
        return NormalizationResult(points=points, effective_base=base, effective_half_range=half_range)


def suppress_flat_runs(points: Sequence[tuple[int, float]], min_run: int = 4) -> list[tuple[int, float]]:
    """Drop the interior of long runs sitting exactly on the baseline.

    Run endpoints and x indices are kept, so a curve fit over the result still
    spans the same horizontal extent.
    """
    out: list[tuple[int, float]] = []
    run: list[tuple[int, float]] = []

    def flush() -> None:
        if len(run) > max(min_run, 2):
            out.extend((run[0], run[-1]))
        else:
            out.extend(run)
        run.clear()

    for point in points:
        if point[1] == 0.0:
            run.append(point)
            continue
        flush()
        out.append(point)
    flush()
    return out
