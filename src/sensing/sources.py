"""Capabilities the monitor consumes from the hardware harness."""

from __future__ import annotations

import abc


class MeasurementSource(abc.ABC):
    """Raw distance and temperature readings on demand."""

    @abc.abstractmethod
    def sample_distance(self) -> int:
        """One ranging pulse in engineering units (cm). 0 means no echo."""

    def sample_temperature(self) -> int | None:
        """Temperature in tenths of a degree, or None if no sensor is fitted.

        Sensors that are fitted but unplugged return the configured
        disconnected sentinel instead of None.
        """
        return None


class Clock(abc.ABC):
    """Real-time clock module."""

    @abc.abstractmethod
    def is_functional(self) -> bool:
        """Whether the RTC answered at startup."""

    @abc.abstractmethod
    def minute_of_hour(self) -> int:
        """Current wall-clock minute, 0..59."""
