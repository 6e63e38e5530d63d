"""Per-tick pipeline: sample, record history, normalize for plotting."""

from __future__ import annotations

from dataclasses import dataclass

from cpuhz_renderer.models import IconSpec
from cpuhz_renderer.normalize import NormalizationResult, RangeNormalizer, suppress_flat_runs
from cpuhz_telemetry.models import Reading

from .history import HistoryBuffer
from .logging_setup import get_logger


@dataclass(frozen=True)
class TickResult:
    reading: Reading
    plot: NormalizationResult | None
    tooltip: str

    @property
    def icon_spec(self) -> IconSpec:
        if not self.reading.valid:
            return IconSpec()
        return IconSpec(ghz=self.reading.current_ghz, over_base=self.reading.over_base, plot=self.plot)


def format_tooltip(reading: Reading) -> str:
    if not reading.valid:
        return "CPU: --"
    text = f"CPU: {reading.current_ghz:.2f} GHz"
    if reading.base_mhz > 0:
        text += f" (base {reading.base_ghz:.2f} GHz)"
    return f"{text} [{reading.source.value}]"


class FrequencyMonitor:
    """Owns the sampler, history and normalizer for one display surface."""

    def __init__(
        self,
        sampler,
        history: HistoryBuffer | None = None,
        normalizer: RangeNormalizer | None = None,
        flat_run_filter: bool = False,
    ) -> None:
        self.sampler = sampler
        self.history = history or HistoryBuffer()
        self.normalizer = normalizer or RangeNormalizer()
        self.flat_run_filter = flat_run_filter
        self._logger = get_logger()
        self._ticks = 0

    @property
    def ticks(self) -> int:
        return self._ticks

    def start(self) -> bool:
        ok = self.sampler.initialize()
        if not ok:
            self._logger.warning("sampler init failed; readings will report NotReady", extra={"event": "sampler_init_failed"})
        return ok

    def tick(self) -> TickResult:
        self._ticks += 1
        reading = self.sampler.sample()
        plot = None
        if reading.valid:
            self.history.push(reading.current_mhz)
            if self.history.count >= 2:
                plot = self.normalizer.normalize(self.history.snapshot(), reading.base_mhz)
                if self.flat_run_filter:
                    plot = NormalizationResult(
                        points=tuple(suppress_flat_runs(plot.points)),
                        effective_base=plot.effective_base,
                        effective_half_range=plot.effective_half_range,
                    )
        return TickResult(reading=reading, plot=plot, tooltip=format_tooltip(reading))

    def stop(self) -> None:
        self.sampler.close()
