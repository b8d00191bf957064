"""Simulated sensor and clock for dry runs without hardware.

Usage::

    source = ScriptedSource([120, 118, 0, 0, 95], samples_per_tick=5)
    clock = SimulatedClock(start_minute=58)
"""

from __future__ import annotations

import datetime
import itertools
from collections.abc import Iterable

from src.sensing.sources import Clock, MeasurementSource


class ScriptedSource(MeasurementSource):
    """Replays a fixed distance sequence, one value per tick.

    Every distance sample within a tick returns the same value, so the
    averaged distance equals the scripted one. The last value repeats once
    the script is exhausted.
    """

    def __init__(
        self,
        distances: Iterable[int],
        temperatures: Iterable[int | None] | None = None,
        samples_per_tick: int = 1,
    ) -> None:
        self._distances = list(distances)
        if not self._distances:
            raise ValueError("script must contain at least one distance")
        self._temperatures = list(temperatures) if temperatures is not None else None
        self._samples_per_tick = max(1, samples_per_tick)
        self._reads = 0
        self._tick = 0

    @property
    def tick(self) -> int:
        """Script position of the most recent distance sample."""
        return self._tick

    def sample_distance(self) -> int:
        self._tick = min(self._reads // self._samples_per_tick, len(self._distances) - 1)
        self._reads += 1
        return self._distances[self._tick]

    def sample_temperature(self) -> int | None:
        if not self._temperatures:
            return None
        return self._temperatures[min(self._tick, len(self._temperatures) - 1)]


class SimulatedClock(Clock):
    """Wall clock that either follows system time or steps one minute per read."""

    def __init__(
        self,
        start_minute: int | None = None,
        functional: bool = True,
    ) -> None:
        self._functional = functional
        self._minutes = (
            itertools.count(start_minute) if start_minute is not None else None
        )

    def is_functional(self) -> bool:
        return self._functional

    def minute_of_hour(self) -> int:
        if self._minutes is None:
            return datetime.datetime.now().minute
        return next(self._minutes) % 60
