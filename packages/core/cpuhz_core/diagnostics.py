"""Diagnostics payload and export helpers for local support bundles."""

from __future__ import annotations

import json
import platform
import tempfile
import zipfile
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .config import AppConfig, config_path
from .logging_setup import log_dir


def probe_backends(sampler_factory) -> dict[str, Any]:
    """Initialize a throwaway sampler, take one reading, and report what happened."""
    sampler = sampler_factory()
    try:
        ready = sampler.initialize()
        reading = sampler.sample()
        return {
            "ready": ready,
            "base_mhz": sampler.base_mhz,
            "reading": {
                "current_mhz": reading.current_mhz,
                "base_mhz": reading.base_mhz,
                "valid": reading.valid,
                "source": reading.source.value,
                "backend_status": [reading.backend_status.primary, reading.backend_status.secondary],
            },
        }
    finally:
        sampler.close()


def build_doctor_payload(cfg: AppConfig, sampler_factory=None) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "ts_utc": datetime.now(timezone.utc).isoformat(),
        "platform": platform.platform(),
        "machine": platform.machine(),
        "processor": platform.processor(),
        "python": platform.python_version(),
        "config_path": str(config_path()),
        "config": asdict(cfg),
    }
    if sampler_factory is not None:
        payload["backends"] = probe_backends(sampler_factory)
    return payload


class DiagnosticsExporter:
    def __init__(self, app_name: str = "CpuHz") -> None:
        self.app_name = app_name

    def bundle(self, cfg: AppConfig, doctor_payload: dict[str, Any], output_dir: Path | None = None) -> Path:
        output_base = output_dir or Path(tempfile.gettempdir())
        output_base.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now().strftime("%Y%m%d-%H%M%S")
        zip_path = output_base / f"cpuhz-diagnostics-{stamp}.zip"

        logs = log_dir()
        with zipfile.ZipFile(zip_path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            manifest = {
                "app": self.app_name,
                "created_utc": datetime.now(timezone.utc).isoformat(),
                "host": platform.platform(),
                "log_dir": str(logs),
            }
            zf.writestr("manifest.json", json.dumps(manifest, indent=2, sort_keys=True))
            zf.writestr("doctor.json", json.dumps(doctor_payload, indent=2, sort_keys=True, default=str))
            zf.writestr("config.json", json.dumps(asdict(cfg), indent=2, sort_keys=True))
            for item in sorted(logs.glob("*.log*")):
                zf.write(item, arcname=f"logs/{item.name}")

        return zip_path
