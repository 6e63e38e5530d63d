import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "core"))
sys.path.insert(0, str(ROOT / "packages" / "renderer"))
sys.path.insert(0, str(ROOT / "packages" / "telemetry"))

from cpuhz_core.history import HistoryBuffer
from cpuhz_core.monitor import FrequencyMonitor, format_tooltip
from cpuhz_renderer.normalize import RangeNormalizer
from cpuhz_telemetry.models import Reading, SourceTag


def valid(current, base=3000.0, source=SourceTag.PERF_RATIO):
    return Reading(current_mhz=current, base_mhz=base, valid=True, source=source)


class ScriptedSampler:
    def __init__(self, readings, ready=True):
        self.readings = list(readings)
        self.ready = ready
        self.initialized = 0
        self.closed = 0

    def initialize(self):
        self.initialized += 1
        return self.ready

    def sample(self):
        return self.readings.pop(0)

    def close(self):
        self.closed += 1


class TooltipTests(unittest.TestCase):
    def test_valid_reading_with_base(self):
        text = format_tooltip(valid(3200.0))
        self.assertEqual(text, "CPU: 3.20 GHz (base 3.00 GHz) [PerfRatio]")

    def test_invalid_reading(self):
        self.assertEqual(format_tooltip(Reading(source=SourceTag.BASE_UNKNOWN)), "CPU: --")


class FrequencyMonitorTests(unittest.TestCase):
    def test_only_valid_readings_enter_history(self):
        sampler = ScriptedSampler(
            [
                Reading(source=SourceTag.NOT_READY),
                valid(3100.0),
                Reading(base_mhz=3000.0, source=SourceTag.COLLECT_FAILED),
                valid(3300.0),
            ]
        )
        monitor = FrequencyMonitor(sampler, HistoryBuffer(5), RangeNormalizer())
        self.assertTrue(monitor.start())

        first = monitor.tick()
        self.assertIsNone(first.plot)
        self.assertEqual(first.tooltip, "CPU: --")
        self.assertEqual(first.icon_spec.ghz, 0.0)

        second = monitor.tick()
        self.assertIsNone(second.plot)
        self.assertEqual(monitor.history.snapshot(), [3100.0])

        monitor.tick()
        fourth = monitor.tick()
        self.assertEqual(monitor.history.snapshot(), [3100.0, 3300.0])
        self.assertIsNotNone(fourth.plot)
        self.assertEqual(len(fourth.plot.points), 2)
        self.assertEqual(fourth.plot.effective_base, 3000.0)
        self.assertEqual(monitor.ticks, 4)

    def test_icon_spec_reflects_reading(self):
        sampler = ScriptedSampler([valid(2900.0), valid(3500.0)])
        monitor = FrequencyMonitor(sampler)
        monitor.tick()
        result = monitor.tick()
        spec = result.icon_spec
        self.assertAlmostEqual(spec.ghz, 3.5)
        self.assertTrue(spec.over_base)
        self.assertIs(spec.plot, result.plot)

    def test_flat_run_filter(self):
        sampler = ScriptedSampler([valid(3000.0) for _ in range(8)])
        monitor = FrequencyMonitor(sampler, HistoryBuffer(8), flat_run_filter=True)
        result = None
        for _ in range(8):
            result = monitor.tick()
        self.assertEqual(result.plot.points, ((0, 0.0), (7, 0.0)))

    def test_start_failure_and_stop(self):
        sampler = ScriptedSampler([], ready=False)
        monitor = FrequencyMonitor(sampler)
        self.assertFalse(monitor.start())
        monitor.stop()
        self.assertEqual(sampler.closed, 1)


class MonitorWithSamplerTests(unittest.TestCase):
    def test_end_to_end_tick_with_fake_backends(self):
        try:
            from cpuhz_telemetry.backends import CounterBackend, CounterSession, InventoryBackend
            from cpuhz_telemetry.models import Counter, CounterSample
            from cpuhz_telemetry.sampler import FrequencySampler
        except Exception:  # pragma: no cover
            self.skipTest("psutil not installed")

        class Inventory(InventoryBackend):
            def max_clock_mhz(self):
                return 3000.0

        class Session(CounterSession):
            ratios = [105.0, 110.0, 95.0]

            def register(self, counter):
                return True

            def collect(self):
                return 0

            def read(self, counter):
                if counter == Counter.FREQUENCY:
                    return CounterSample(3000.0)
                return CounterSample(self.ratios.pop(0) if self.ratios else 100.0)

            def close(self):
                pass

        class Counters(CounterBackend):
            def open(self, nominal_mhz=None):
                return Session()

        sampler = FrequencySampler(inventory=Inventory(), counters=Counters(), sleep=lambda _s: None)
        monitor = FrequencyMonitor(sampler, HistoryBuffer(10))
        self.assertTrue(monitor.start())
        results = [monitor.tick() for _ in range(3)]
        monitor.stop()

        self.assertEqual([round(v) for v in monitor.history.snapshot()], [3150, 3300, 2850])
        plot = results[-1].plot
        self.assertEqual(plot.effective_base, 3000.0)
        self.assertGreater(plot.values[1], 0.0)
        self.assertLess(plot.values[2], 0.0)
        self.assertEqual(results[-1].tooltip, "CPU: 2.85 GHz (base 3.00 GHz) [PerfRatio]")


if __name__ == "__main__":
    unittest.main()
