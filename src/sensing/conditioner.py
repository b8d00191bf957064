"""Turns raw ranging samples into a validated Reading."""

from __future__ import annotations

from collections.abc import Sequence

from src.core.config import SensorConfig
from src.core.types import Reading


def _truncating_mean(samples: Sequence[int]) -> int:
    total = sum(samples)
    mean = abs(total) // len(samples)
    return mean if total >= 0 else -mean


class ReadingConditioner:
    """Averages ranging samples, derives the level, and checks validity.

    Invalid readings are returned with ``valid=False`` rather than raised so
    the fault monitor still sees them.
    """

    def __init__(self, config: SensorConfig | None = None) -> None:
        self._config = config or SensorConfig()

    @property
    def config(self) -> SensorConfig:
        return self._config

    def condition(
        self,
        raw_samples: Sequence[int],
        raw_temperature: int | None = None,
    ) -> Reading:
        if not raw_samples:
            raise ValueError("at least one distance sample is required")

        distance = _truncating_mean(raw_samples)
        cfg = self._config

        if cfg.reference_offset is not None:
            level = cfg.reference_offset - distance
        else:
            level = distance

        valid = cfg.min_dist < distance < cfg.max_dist
        temperature = raw_temperature if cfg.temperature_enabled else None
        if cfg.temperature_enabled:
            if raw_temperature is None or raw_temperature == cfg.disconnected_sentinel:
                valid = False
                temperature = None

        return Reading(
            level=level,
            raw_distance=distance,
            temperature_tenths=temperature,
            valid=valid,
        )
