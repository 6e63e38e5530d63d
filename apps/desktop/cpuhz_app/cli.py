"""CLI entrypoints for the CpuHz tray app, headless sampling, icon rendering, and diagnostics."""

from __future__ import annotations

import argparse
import json
import time
from pathlib import Path

from cpuhz_core import (
    AppConfig,
    DiagnosticsExporter,
    FrequencyMonitor,
    HistoryBuffer,
    build_doctor_payload,
    load_config,
)
from cpuhz_core.logging_setup import configure_logging
from cpuhz_renderer import RangeNormalizer


def _print_json(data: object) -> None:
    print(json.dumps(data, indent=2, sort_keys=True, default=str))


def build_sampler(cfg: AppConfig):
    from cpuhz_telemetry import FrequencySampler

    return FrequencySampler(
        prime_collections=cfg.sampler.prime_collections,
        prime_delay_s=cfg.sampler.prime_delay_ms / 1000.0,
    )


def build_monitor(cfg: AppConfig, sampler=None) -> FrequencyMonitor:
    return FrequencyMonitor(
        sampler=sampler or build_sampler(cfg),
        history=HistoryBuffer(cfg.history.capacity),
        normalizer=RangeNormalizer(cfg.normalizer.to_config()),
        flat_run_filter=cfg.normalizer.suppress_flat_runs,
    )


def cmd_run(_args: argparse.Namespace) -> int:
    from .app import run_tray

    return run_tray()


def cmd_sample(args: argparse.Namespace) -> int:
    cfg = load_config()
    monitor = build_monitor(cfg)
    monitor.start()
    interval_s = (args.interval_ms if args.interval_ms is not None else cfg.sampler.interval_ms) / 1000.0
    rows = []
    try:
        for i in range(args.count):
            if i:
                time.sleep(interval_s)
            result = monitor.tick()
            reading = result.reading
            rows.append(
                {
                    "tick": monitor.ticks,
                    "current_mhz": round(reading.current_mhz, 1),
                    "base_mhz": round(reading.base_mhz, 1),
                    "valid": reading.valid,
                    "source": reading.source.value,
                    "backend_status": [reading.backend_status.primary, reading.backend_status.secondary],
                    "plot": None if result.plot is None else [round(d, 3) for d in result.plot.values],
                }
            )
    finally:
        monitor.stop()
    _print_json(rows)
    return 0 if any(r["valid"] for r in rows) else 1


def cmd_render_icon(args: argparse.Namespace) -> int:
    from cpuhz_renderer import IconRenderer

    cfg = load_config()
    monitor = build_monitor(cfg)
    renderer = IconRenderer(size=cfg.icon.size, font_path=cfg.icon.font_path)
    monitor.start()
    try:
        result = None
        for i in range(max(1, args.ticks)):
            if i:
                time.sleep(args.interval_ms / 1000.0)
            result = monitor.tick()
    finally:
        monitor.stop()

    out = Path(args.out).expanduser().resolve()
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_bytes(renderer.render_png(result.icon_spec))
    _print_json({"icon": str(out), "tooltip": result.tooltip, "ticks": monitor.ticks})
    return 0


def cmd_doctor(args: argparse.Namespace) -> int:
    cfg = load_config()
    payload = build_doctor_payload(cfg, sampler_factory=lambda: build_sampler(cfg))

    if args.export:
        out_dir = Path(args.out_dir).expanduser().resolve() if args.out_dir else None
        bundle = DiagnosticsExporter().bundle(cfg=cfg, doctor_payload=payload, output_dir=out_dir)
        payload["diagnostics_bundle"] = str(bundle)

    _print_json(payload)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cpuhz", description="CPU clock speed tray monitor and tools")
    sub = parser.add_subparsers(dest="command", required=True)

    run_cmd = sub.add_parser("run", help="Run tray app")
    run_cmd.set_defaults(func=cmd_run)

    sample_cmd = sub.add_parser("sample", help="Print fused clock readings as JSON")
    sample_cmd.add_argument("--count", type=int, default=5)
    sample_cmd.add_argument("--interval-ms", type=int, default=None, help="Delay between ticks (default: config)")
    sample_cmd.set_defaults(func=cmd_sample)

    icon_cmd = sub.add_parser("render-icon", help="Render the tray icon to a PNG file")
    icon_cmd.add_argument("--out", default="cpuhz-icon.png")
    icon_cmd.add_argument("--ticks", type=int, default=10, help="Ticks to collect before rendering")
    icon_cmd.add_argument("--interval-ms", type=int, default=250)
    icon_cmd.set_defaults(func=cmd_render_icon)

    doctor_cmd = sub.add_parser("doctor", help="Print platform, config, and backend probe")
    doctor_cmd.add_argument("--export", action="store_true", help="Export offline diagnostics bundle")
    doctor_cmd.add_argument("--out-dir", default=None, help="Optional output directory for diagnostics bundle")
    doctor_cmd.set_defaults(func=cmd_doctor)

    return parser


def main(argv: list[str] | None = None) -> int:
    cfg = load_config()
    configure_logging(keep_files=cfg.diagnostics.keep_log_files, console=False)
    parser = build_parser()
    args = parser.parse_args(argv)
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
