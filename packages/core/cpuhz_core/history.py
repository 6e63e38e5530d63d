"""Fixed-capacity rolling history of clock samples."""

from __future__ import annotations

from typing import Iterator


class HistoryBuffer:
    """Ring buffer of floats, iterated oldest to newest.

    Once full, every push overwrites exactly the oldest sample.
    """

    def __init__(self, capacity: int = 30) -> None:
        if capacity < 2:
            raise ValueError("HistoryBuffer capacity must be greater than 1")
        self._capacity = int(capacity)
        self._data = [0.0] * self._capacity
        self._head = 0
        self._count = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def count(self) -> int:
        return self._count

    def __len__(self) -> int:
        return self._count

    def push(self, value: float) -> None:
        self._data[self._head] = float(value)
        self._head = (self._head + 1) % self._capacity
        if self._count < self._capacity:
            self._count += 1

    def clear(self) -> None:
        self._head = 0
        self._count = 0

    def at(self, i: int) -> float:
        if not 0 <= i < self._count:
            raise IndexError(f"history index {i} out of range for {self._count} samples")
        oldest = (self._head - self._count) % self._capacity
        return self._data[(oldest + i) % self._capacity]

    def __iter__(self) -> Iterator[float]:
        for i in range(self._count):
            yield self.at(i)

    def snapshot(self) -> list[float]:
        return list(self)

    def min_max(self) -> tuple[float, float]:
        if self._count == 0:
            return (0.0, 0.0)
        lo = hi = self.at(0)
        for v in self:
            lo = min(lo, v)
            hi = max(hi, v)
        return (lo, hi)
