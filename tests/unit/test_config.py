import json
import sys
import tempfile
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "core"))
sys.path.insert(0, str(ROOT / "packages" / "renderer"))

from cpuhz_core.config import AppConfig, load_config, save_config


class ConfigTests(unittest.TestCase):
    def test_load_default_when_missing(self):
        with tempfile.TemporaryDirectory() as tmp:
            cfg = load_config(Path(tmp) / "missing.json")
            self.assertIsInstance(cfg, AppConfig)
            self.assertEqual(cfg.sampler.interval_ms, 1000)
            self.assertEqual(cfg.history.capacity, 30)
            self.assertEqual(cfg.normalizer.fixed_floor_mhz, 200.0)
            self.assertEqual(cfg.normalizer.gain_divisor, 1.75)

    def test_save_and_reload(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            cfg = load_config(path)
            cfg.history.capacity = 60
            cfg.normalizer.fixed_floor_mhz = 300.0
            cfg.normalizer.median_fraction = 0.07
            save_config(cfg, path)
            reloaded = load_config(path)
            self.assertEqual(reloaded.history.capacity, 60)
            self.assertEqual(reloaded.normalizer.fixed_floor_mhz, 300.0)
            self.assertEqual(reloaded.normalizer.median_fraction, 0.07)

    def test_out_of_range_values_are_clamped(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            raw = {
                "sampler": {"interval_ms": 5, "prime_collections": 0},
                "history": {"capacity": 1},
                "normalizer": {"gain_divisor": 9.0, "percentile_low": 0.9, "percentile_high": 0.1},
                "icon": {"size": 4096, "font_path": "  "},
                "unknown": {"x": 1},
            }
            path.write_text(json.dumps(raw), encoding="utf-8")
            cfg = load_config(path)
            self.assertEqual(cfg.sampler.interval_ms, 200)
            self.assertEqual(cfg.sampler.prime_collections, 2)
            self.assertEqual(cfg.history.capacity, 2)
            self.assertEqual(cfg.normalizer.gain_divisor, 2.5)
            self.assertEqual((cfg.normalizer.percentile_low, cfg.normalizer.percentile_high), (0.10, 0.90))
            self.assertEqual(cfg.icon.size, 256)
            self.assertIsNone(cfg.icon.font_path)

    def test_corrupt_file_yields_defaults(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            path.write_text("{not json", encoding="utf-8")
            self.assertEqual(load_config(path), AppConfig())
            path.write_text(json.dumps({"history": {"capacity": "lots"}}), encoding="utf-8")
            self.assertEqual(load_config(path), AppConfig())

    def test_normalizer_settings_to_config(self):
        cfg = AppConfig()
        cfg.normalizer.median_fraction = 0.07
        ncfg = cfg.normalizer.to_config()
        self.assertEqual(ncfg.median_fraction, 0.07)
        self.assertEqual(ncfg.percentile_high, 0.90)


if __name__ == "__main__":
    unittest.main()
