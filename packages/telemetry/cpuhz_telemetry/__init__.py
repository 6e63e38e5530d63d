"""CPU clock telemetry: measurement backends and the fused frequency sampler."""

from .models import BackendStatus, Counter, CounterSample, CounterStatus, Reading, SamplerState, SourceTag

try:  # pragma: no cover - optional at import time for minimal test environments
    from .backends import (
        ChainedInventoryBackend,
        CounterBackend,
        CounterSession,
        InventoryBackend,
        PsutilCounterBackend,
        PsutilInventoryBackend,
        SysfsInventoryBackend,
        default_inventory_backend,
    )
    from .sampler import FrequencySampler
except Exception:  # pragma: no cover
    FrequencySampler = None  # type: ignore[assignment]

__all__ = [
    "BackendStatus",
    "Counter",
    "CounterSample",
    "CounterStatus",
    "Reading",
    "SamplerState",
    "SourceTag",
]

if FrequencySampler is not None:
    __all__ += [
        "ChainedInventoryBackend",
        "CounterBackend",
        "CounterSession",
        "FrequencySampler",
        "InventoryBackend",
        "PsutilCounterBackend",
        "PsutilInventoryBackend",
        "SysfsInventoryBackend",
        "default_inventory_backend",
    ]
