"""Persistent app settings schema and load/save helpers."""

from __future__ import annotations

import json
import os
import platform
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from cpuhz_renderer.normalize import GAIN_DIVISOR_MAX, GAIN_DIVISOR_MIN, NormalizerConfig


CONFIG_VERSION = 1


@dataclass
class SamplerSettings:
    interval_ms: int = 1000
    prime_collections: int = 2
    prime_delay_ms: int = 50


@dataclass
class HistorySettings:
    capacity: int = 30


@dataclass
class NormalizerSettings:
    fixed_floor_mhz: float = 200.0
    median_fraction: float = 0.05
    gain_divisor: float = 1.75
    percentile_low: float = 0.10
    percentile_high: float = 0.90
    suppress_flat_runs: bool = False

    def to_config(self) -> NormalizerConfig:
        return NormalizerConfig(
            fixed_floor_mhz=self.fixed_floor_mhz,
            median_fraction=self.median_fraction,
            gain_divisor=self.gain_divisor,
            percentile_low=self.percentile_low,
            percentile_high=self.percentile_high,
        )


@dataclass
class IconSettings:
    size: int = 32
    font_path: str | None = None


@dataclass
class DiagnosticsSettings:
    keep_log_files: int = 7


@dataclass
class AppConfig:
    config_version: int = CONFIG_VERSION
    sampler: SamplerSettings = field(default_factory=SamplerSettings)
    history: HistorySettings = field(default_factory=HistorySettings)
    normalizer: NormalizerSettings = field(default_factory=NormalizerSettings)
    icon: IconSettings = field(default_factory=IconSettings)
    diagnostics: DiagnosticsSettings = field(default_factory=DiagnosticsSettings)


def app_dir() -> Path:
    system = platform.system()
    if system == "Windows":
        base = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
        return base / "CpuHz"
    if system == "Darwin":
        return Path.home() / "Library" / "Application Support" / "CpuHz"
    return Path.home() / ".config" / "cpuhz"


def config_path() -> Path:
    return app_dir() / "config.json"


def _merge(dataclass_type, raw: Any):
    defaults = dataclass_type()  # type: ignore[misc]
    if not isinstance(raw, dict):
        return defaults
    for k, v in raw.items():
        if hasattr(defaults, k):
            setattr(defaults, k, v)
    return defaults


def _normalize_sampler(cfg: AppConfig) -> None:
    cfg.sampler.interval_ms = max(200, min(10000, int(cfg.sampler.interval_ms)))
    cfg.sampler.prime_collections = max(2, int(cfg.sampler.prime_collections))
    cfg.sampler.prime_delay_ms = max(0, min(1000, int(cfg.sampler.prime_delay_ms)))


def _normalize_history(cfg: AppConfig) -> None:
    cfg.history.capacity = max(2, min(240, int(cfg.history.capacity)))


def _normalize_normalizer(cfg: AppConfig) -> None:
    n = cfg.normalizer
    defaults = NormalizerSettings()
    n.fixed_floor_mhz = float(max(0.0, n.fixed_floor_mhz))
    n.median_fraction = float(max(0.0, n.median_fraction))
    n.gain_divisor = float(max(GAIN_DIVISOR_MIN, min(GAIN_DIVISOR_MAX, n.gain_divisor)))
    n.percentile_low = float(n.percentile_low)
    n.percentile_high = float(n.percentile_high)
    if not 0.0 <= n.percentile_low < n.percentile_high <= 1.0:
        n.percentile_low = defaults.percentile_low
        n.percentile_high = defaults.percentile_high
    n.suppress_flat_runs = bool(n.suppress_flat_runs)


def _normalize_icon(cfg: AppConfig) -> None:
    cfg.icon.size = max(16, min(256, int(cfg.icon.size)))
    if cfg.icon.font_path is not None:
        cfg.icon.font_path = str(cfg.icon.font_path).strip() or None


def load_config(path: Path | None = None) -> AppConfig:
    path = path or config_path()
    if not path.exists():
        return AppConfig()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except Exception:
        return AppConfig()
    if not isinstance(data, dict):
        return AppConfig()

    cfg = AppConfig(
        config_version=int(data.get("config_version", CONFIG_VERSION)),
        sampler=_merge(SamplerSettings, data.get("sampler", {})),
        history=_merge(HistorySettings, data.get("history", {})),
        normalizer=_merge(NormalizerSettings, data.get("normalizer", {})),
        icon=_merge(IconSettings, data.get("icon", {})),
        diagnostics=_merge(DiagnosticsSettings, data.get("diagnostics", {})),
    )

    try:
        _normalize_sampler(cfg)
        _normalize_history(cfg)
        _normalize_normalizer(cfg)
        _normalize_icon(cfg)
        cfg.diagnostics.keep_log_files = max(2, int(cfg.diagnostics.keep_log_files))
    except (TypeError, ValueError):
        return AppConfig()
    return cfg


def save_config(cfg: AppConfig, path: Path | None = None) -> Path:
    cfg.config_version = CONFIG_VERSION
    path = path or config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(asdict(cfg), indent=2, sort_keys=True), encoding="utf-8")
    return path
