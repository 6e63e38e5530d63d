"""Renderer package: range normalization, sparkline and tray icon composition."""

from .models import IconSpec, SparklineStyle
from .normalize import NormalizationResult, NormalizerConfig, RangeNormalizer, percentile, suppress_flat_runs

try:  # pragma: no cover - optional at import time for test environments
    from .icon import IconRenderer, format_ghz
    from .sparkline import render_sparkline
except Exception:  # pragma: no cover
    IconRenderer = None  # type: ignore[assignment]

__all__ = [
    "IconSpec",
    "NormalizationResult",
    "NormalizerConfig",
    "RangeNormalizer",
    "SparklineStyle",
    "percentile",
    "suppress_flat_runs",
]

if IconRenderer is not None:
    __all__ += ["IconRenderer", "format_ghz", "render_sparkline"]
