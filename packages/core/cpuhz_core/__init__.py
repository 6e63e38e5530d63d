"""Core app services: history, tick pipeline, settings, logging, and diagnostics."""

from .config import AppConfig, load_config, save_config
from .diagnostics import DiagnosticsExporter, build_doctor_payload, probe_backends
from .history import HistoryBuffer
from .monitor import FrequencyMonitor, TickResult, format_tooltip

__all__ = [
    "AppConfig",
    "DiagnosticsExporter",
    "FrequencyMonitor",
    "HistoryBuffer",
    "TickResult",
    "build_doctor_payload",
    "format_tooltip",
    "load_config",
    "probe_backends",
    "save_config",
]
