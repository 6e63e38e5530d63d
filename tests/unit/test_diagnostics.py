import json
import logging
import sys
import tempfile
import unittest
import zipfile
from pathlib import Path
from unittest.mock import patch

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "core"))
sys.path.insert(0, str(ROOT / "packages" / "renderer"))
sys.path.insert(0, str(ROOT / "packages" / "telemetry"))

from cpuhz_core import diagnostics
from cpuhz_core.config import AppConfig
from cpuhz_core.logging_setup import JsonFormatter
from cpuhz_telemetry.models import BackendStatus, Reading, SourceTag


class ProbeSampler:
    base_mhz = 3200.0

    def __init__(self):
        self.closed = False

    def initialize(self):
        return True

    def sample(self):
        return Reading(
            current_mhz=3520.0,
            base_mhz=3200.0,
            valid=True,
            source=SourceTag.PERF_RATIO,
            backend_status=BackendStatus(0, 1),
        )

    def close(self):
        self.closed = True


class DiagnosticsTests(unittest.TestCase):
    def test_doctor_payload_probes_backends(self):
        sampler = ProbeSampler()
        payload = diagnostics.build_doctor_payload(AppConfig(), sampler_factory=lambda: sampler)
        self.assertTrue(payload["backends"]["ready"])
        self.assertEqual(payload["backends"]["reading"]["source"], "PerfRatio")
        self.assertEqual(payload["backends"]["reading"]["backend_status"], [0, 1])
        self.assertEqual(payload["config"]["history"]["capacity"], 30)
        self.assertTrue(sampler.closed)

    def test_bundle_exports_zip(self):
        payload = diagnostics.build_doctor_payload(AppConfig())
        with tempfile.TemporaryDirectory() as tmp:
            logs = Path(tmp) / "logs"
            logs.mkdir()
            (logs / "cpuhz.log").write_text("{}\n", encoding="utf-8")
            with patch.object(diagnostics, "log_dir", return_value=logs):
                bundle = diagnostics.DiagnosticsExporter().bundle(AppConfig(), payload, output_dir=Path(tmp) / "out")
            self.assertTrue(bundle.exists())
            with zipfile.ZipFile(bundle, "r") as zf:
                names = set(zf.namelist())
            self.assertIn("manifest.json", names)
            self.assertIn("doctor.json", names)
            self.assertIn("config.json", names)
            self.assertIn("logs/cpuhz.log", names)


class JsonFormatterTests(unittest.TestCase):
    def test_extra_fields_are_serialized(self):
        record = logging.LogRecord("cpuhz.telemetry", logging.INFO, __file__, 1, "source changed", None, None)
        record.event = "sampler_source"
        record.source = "BaseOnly"
        payload = json.loads(JsonFormatter().format(record))
        self.assertEqual(payload["logger"], "cpuhz.telemetry")
        self.assertEqual(payload["event"], "sampler_source")
        self.assertEqual(payload["source"], "BaseOnly")
        self.assertNotIn("backend_status", payload)

    def test_crash_id_is_serialized(self):
        record = logging.LogRecord("cpuhz", logging.CRITICAL, __file__, 1, "uncaught exception", None, None)
        record.event = "uncaught_exception"
        record.crash_id = "abc-123"
        payload = json.loads(JsonFormatter().format(record))
        self.assertEqual(payload["event"], "uncaught_exception")
        self.assertEqual(payload["crash_id"], "abc-123")


if __name__ == "__main__":
    unittest.main()
