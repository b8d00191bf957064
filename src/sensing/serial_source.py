"""Measurement source and clock backed by real hardware."""

from __future__ import annotations

import datetime

import serial
import structlog

from src.core.config import SensorConfig
from src.sensing.sources import Clock, MeasurementSource

logger = structlog.get_logger(__name__)

# An RTC that lost power comes back at its epoch; anything earlier is not a set clock.
_EARLIEST_PLAUSIBLE_YEAR = 2020


class SerialLineSource(MeasurementSource):
    """Reads ``<distance>[,<temp_tenths>]`` lines from a ranging bridge.

    A timeout, a malformed line, or a closed port reads as distance 0
    (no echo), which the conditioner rejects as out of domain.
    """

    def __init__(self, config: SensorConfig | None = None) -> None:
        self._config = config or SensorConfig()
        self._port: serial.Serial | None = None
        self._last_temperature: int | None = None

    def _open(self) -> serial.Serial:
        if self._port is None or not self._port.is_open:
            self._port = serial.Serial(
                self._config.bridge_port,
                self._config.bridge_baudrate,
                timeout=self._config.bridge_timeout_secs,
            )
        return self._port

    def sample_distance(self) -> int:
        try:
            line = self._open().readline().decode("ascii", errors="ignore").strip()
        except (serial.SerialException, OSError):
            logger.warning("bridge_read_failed", port=self._config.bridge_port)
            self.close()
            self._last_temperature = None
            return 0

        # Temperature only counts for the line it arrived on.
        self._last_temperature = None
        distance, _, temperature = line.partition(",")
        try:
            value = int(float(distance))
        except ValueError:
            logger.debug("bridge_line_unparsed", line=line)
            return 0

        if temperature:
            try:
                self._last_temperature = int(temperature)
            except ValueError:
                logger.debug("bridge_temperature_unparsed", line=line)
        return value

    def sample_temperature(self) -> int | None:
        if self._last_temperature is None:
            return self._config.disconnected_sentinel
        return self._last_temperature

    def close(self) -> None:
        if self._port is not None:
            self._port.close()
            self._port = None


class SystemClock(Clock):
    """Host wall clock, kept in sync by the RTC / NTP."""

    def is_functional(self) -> bool:
        return datetime.datetime.now().year >= _EARLIEST_PLAUSIBLE_YEAR

    def minute_of_hour(self) -> int:
        return datetime.datetime.now().minute
