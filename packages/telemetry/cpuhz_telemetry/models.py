"""Typed telemetry models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum


class SourceTag(str, Enum):
    NOT_READY = "NotReady"
    COLLECT_FAILED = "CollectFailed"
    BASE_UNKNOWN = "BaseUnknown"
    PERF_RATIO = "PerfRatio"
    BASE_ONLY = "BaseOnly"


class Counter(str, Enum):
    PERFORMANCE_RATIO = "performance_ratio"
    FREQUENCY = "frequency"


class CounterStatus(IntEnum):
    OK = 0
    NEW_DATA = 1
    NO_DATA = 2
    INVALID_DATA = 3
    COLLECT_FAILED = 4
    NOT_REGISTERED = 5
    CLOSED = 6


_VALID_COUNTER_STATUSES = (CounterStatus.OK, CounterStatus.NEW_DATA)


@dataclass(frozen=True)
class CounterSample:
    value: float
    status: int = CounterStatus.OK
    counter_status: int = CounterStatus.OK

    @property
    def ok(self) -> bool:
        return self.status == CounterStatus.OK and self.counter_status in _VALID_COUNTER_STATUSES


@dataclass(frozen=True)
class BackendStatus:
    primary: int = 0
    secondary: int = 0


@dataclass(frozen=True)
class Reading:
    current_mhz: float = 0.0
    base_mhz: float = 0.0
    valid: bool = False
    source: SourceTag = SourceTag.NOT_READY
    backend_status: BackendStatus = BackendStatus()

    @property
    def current_ghz(self) -> float:
        return self.current_mhz / 1000.0

    @property
    def base_ghz(self) -> float:
        return self.base_mhz / 1000.0

    @property
    def over_base(self) -> bool:
        return self.valid and self.base_mhz > 0 and self.current_mhz > self.base_mhz


@dataclass
class SamplerState:
    base_mhz: float = 0.0
    last_good_ratio: float = 0.0
    last_good_freq_mhz: float = 0.0
    last_status: int = 0
    last_counter_status: int = 0
