"""Static inventory and live counter backends for CPU clock measurement."""

from __future__ import annotations

from pathlib import Path

import psutil

from .models import Counter, CounterSample, CounterStatus


_SYSFS_BASE_FREQUENCY = Path("/sys/devices/system/cpu/cpu0/cpufreq/base_frequency")


class InventoryBackend:
    """Answers a one-time "maximum clock speed" query, or nothing."""

    def max_clock_mhz(self) -> float | None:
        return None


class SysfsInventoryBackend(InventoryBackend):
    def __init__(self, path: Path = _SYSFS_BASE_FREQUENCY) -> None:
        self.path = path

    def max_clock_mhz(self) -> float | None:
        try:
            khz = float(self.path.read_text(encoding="ascii").strip())
        except (OSError, ValueError):
            return None
        return khz / 1000.0 if khz > 0 else None


class PsutilInventoryBackend(InventoryBackend):
    def max_clock_mhz(self) -> float | None:
        try:
            freq = psutil.cpu_freq()
        except Exception:
            return None
        if not freq or not freq.max or freq.max <= 0:
            return None
        return float(freq.max)


class ChainedInventoryBackend(InventoryBackend):
    def __init__(self, *backends: InventoryBackend) -> None:
        self.backends = backends

    def max_clock_mhz(self) -> float | None:
        for backend in self.backends:
            value = backend.max_clock_mhz()
            if value is not None and value > 0:
                return value
        return None


def default_inventory_backend() -> InventoryBackend:
    return ChainedInventoryBackend(SysfsInventoryBackend(), PsutilInventoryBackend())


class CounterSession:
    """Open/collect/read session over the live counters.

    Each counter is registered once and read independently after every
    collection; one counter failing never invalidates the other.
    """

    def register(self, counter: Counter) -> bool:
        raise NotImplementedError

    def collect(self) -> int:
        raise NotImplementedError

    def read(self, counter: Counter) -> CounterSample:
        raise NotImplementedError

    def close(self) -> None:
        raise NotImplementedError


class CounterBackend:
    def open(self, nominal_mhz: float | None = None) -> CounterSession | None:
        raise NotImplementedError


class PsutilCounterSession(CounterSession):
    """Aggregate `psutil.cpu_freq()` exposed as ratio and frequency counters.

    The ratio is the collected frequency as a percentage of `nominal_mhz`, so it
    exceeds 100 under boost. Without a nominal reference the first valid
    collected frequency becomes the reference, so the ratio still tracks change.
    """

    def __init__(self, nominal_mhz: float | None) -> None:
        self.nominal_mhz = nominal_mhz
        self._registered: set[Counter] = set()
        self._current_mhz: float | None = None
        self._closed = False

    def register(self, counter: Counter) -> bool:
        if self._closed:
            return False
        try:
            available = psutil.cpu_freq() is not None
        except Exception:
            available = False
        if available:
            self._registered.add(counter)
        return available

    def collect(self) -> int:
        if self._closed:
            return CounterStatus.CLOSED
        try:
            freq = psutil.cpu_freq()
        except Exception:
            return CounterStatus.COLLECT_FAILED
        if freq is None:
            return CounterStatus.COLLECT_FAILED
        self._current_mhz = float(freq.current)
        return CounterStatus.OK

    def read(self, counter: Counter) -> CounterSample:
        if counter not in self._registered:
            return CounterSample(0.0, status=CounterStatus.NOT_REGISTERED)
        if self._current_mhz is None:
            return CounterSample(0.0, counter_status=CounterStatus.NO_DATA)
        if self._current_mhz <= 0:
            return CounterSample(0.0, counter_status=CounterStatus.INVALID_DATA)

        if counter == Counter.FREQUENCY:
            return CounterSample(self._current_mhz)
        if not self.nominal_mhz or self.nominal_mhz <= 0:
            self.nominal_mhz = self._current_mhz
        return CounterSample(self._current_mhz / self.nominal_mhz * 100.0)

    def close(self) -> None:
        self._closed = True
        self._registered.clear()
        self._current_mhz = None


class PsutilCounterBackend(CounterBackend):
    def open(self, nominal_mhz: float | None = None) -> CounterSession | None:
        if not hasattr(psutil, "cpu_freq"):
            return None
        return PsutilCounterSession(nominal_mhz)
