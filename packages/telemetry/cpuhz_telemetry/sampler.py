"""Fused CPU clock sampler: static base clock scaled by a live performance ratio."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import replace
from typing import Callable

from .backends import CounterBackend, CounterSession, InventoryBackend, PsutilCounterBackend, default_inventory_backend
from .models import BackendStatus, Counter, CounterSample, CounterStatus, Reading, SamplerState, SourceTag


logger = logging.getLogger("cpuhz.telemetry")


class FrequencySampler:
    """Produces one `Reading` per tick and never raises across its boundary.

    Degradation ladder, best first: PerfRatio, BaseOnly, BaseUnknown,
    CollectFailed, NotReady. `base_mhz` is set once and never lowered; the
    last good ratio and frequency survive failed reads.
    """

    def __init__(
        self,
        inventory: InventoryBackend | None = None,
        counters: CounterBackend | None = None,
        prime_collections: int = 2,
        prime_delay_s: float = 0.05,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._inventory = inventory or default_inventory_backend()
        self._counters = counters or PsutilCounterBackend()
        self._prime_collections = max(2, int(prime_collections))
        self._prime_delay_s = max(0.0, float(prime_delay_s))
        self._sleep = sleep

        self._state = SamplerState()
        self._session: CounterSession | None = None
        self._has_frequency = False
        self._initialized = False
        self._last_source: SourceTag | None = None
        self._lock = threading.Lock()

    @property
    def state(self) -> SamplerState:
        return replace(self._state)

    @property
    def base_mhz(self) -> float:
        return self._state.base_mhz

    @property
    def ready(self) -> bool:
        return self._session is not None

    def __enter__(self) -> "FrequencySampler":
        self.initialize()
        return self

    def __exit__(self, *_exc) -> None:
        self.close()

    def initialize(self) -> bool:
        with self._lock:
            if self._initialized:
                return self.ready
            self._initialized = True

            self._init_base()
            ok = self._init_counters()
            logger.info(
                f"sampler initialized ready={ok} base_mhz={self._state.base_mhz:.0f}",
                extra={"event": "sampler_initialized"},
            )
            return ok

    def _init_base(self) -> None:
        try:
            value = self._inventory.max_clock_mhz()
        except Exception:
            logger.debug("inventory backend failed", exc_info=True)
            return
        if value is not None and value > 0:
            self._state.base_mhz = float(value)

    def _init_counters(self) -> bool:
        try:
            session = self._counters.open(self._state.base_mhz or None)
        except Exception:
            logger.warning("counter backend failed to open", exc_info=True, extra={"event": "counters_open_failed"})
            return False
        if session is None:
            logger.warning("counter backend unavailable", extra={"event": "counters_open_failed"})
            return False

        if not self._try_register(session, Counter.PERFORMANCE_RATIO):
            logger.warning("performance ratio counter not registered", extra={"event": "counters_open_failed"})
            self._close_session(session)
            return False
        self._has_frequency = self._try_register(session, Counter.FREQUENCY)

        # First collection after opening typically yields no valid data.
        for i in range(self._prime_collections):
            if i:
                self._sleep(self._prime_delay_s)
            self._collect(session)

        self._state.last_good_ratio = 0.0
        self._state.last_good_freq_mhz = 0.0
        self._session = session
        return True

    @staticmethod
    def _try_register(session: CounterSession, counter: Counter) -> bool:
        try:
            return bool(session.register(counter))
        except Exception:
            logger.debug(f"register {counter.value} failed", exc_info=True)
            return False

    @staticmethod
    def _collect(session: CounterSession) -> int:
        try:
            return int(session.collect())
        except Exception:
            logger.debug("collect failed", exc_info=True)
            return CounterStatus.COLLECT_FAILED

    @staticmethod
    def _read(session: CounterSession, counter: Counter) -> CounterSample:
        try:
            return session.read(counter)
        except Exception:
            logger.debug(f"read {counter.value} failed", exc_info=True)
            return CounterSample(0.0, status=CounterStatus.INVALID_DATA)

    @staticmethod
    def _close_session(session: CounterSession) -> None:
        try:
            session.close()
        except Exception:
            logger.debug("counter session close failed", exc_info=True)

    def sample(self) -> Reading:
        with self._lock:
            reading = self._sample_locked()
            changed = reading.source != self._last_source
            self._last_source = reading.source
        if changed:
            logger.info(
                f"sampler source changed to {reading.source.value}",
                extra={
                    "event": "sampler_source",
                    "source": reading.source.value,
                    "backend_status": [reading.backend_status.primary, reading.backend_status.secondary],
                },
            )
        return reading

    def _sample_locked(self) -> Reading:
        state = self._state
        session = self._session
        if session is None:
            return Reading(base_mhz=state.base_mhz, source=SourceTag.NOT_READY)

        status = self._collect(session)
        state.last_status = status
        if status != CounterStatus.OK:
            return Reading(
                base_mhz=state.base_mhz,
                source=SourceTag.COLLECT_FAILED,
                backend_status=BackendStatus(status, state.last_counter_status),
            )

        if self._has_frequency:
            freq = self._read(session, Counter.FREQUENCY)
            if freq.ok and freq.value > 0:
                state.last_good_freq_mhz = float(freq.value)
        if state.base_mhz <= 0 and state.last_good_freq_mhz > 0:
            state.base_mhz = state.last_good_freq_mhz

        ratio = self._read(session, Counter.PERFORMANCE_RATIO)
        if ratio.ok:
            if ratio.value > 0:
                state.last_good_ratio = float(ratio.value)
            state.last_status = int(ratio.status)
            state.last_counter_status = int(ratio.counter_status)

        backend_status = BackendStatus(state.last_status, state.last_counter_status)
        if state.base_mhz <= 0:
            return Reading(source=SourceTag.BASE_UNKNOWN, backend_status=backend_status)

        used_ratio = state.last_good_ratio if state.last_good_ratio > 0 else 100.0
        return Reading(
            current_mhz=state.base_mhz * used_ratio / 100.0,
            base_mhz=state.base_mhz,
            valid=True,
            source=SourceTag.PERF_RATIO if state.last_good_ratio > 0 else SourceTag.BASE_ONLY,
            backend_status=backend_status,
        )

    def close(self) -> None:
        with self._lock:
            session, self._session = self._session, None
        if session is not None:
            self._close_session(session)
            logger.info("sampler closed", extra={"event": "sampler_closed"})
