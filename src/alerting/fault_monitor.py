"""FaultMonitor — escalates a sensor that keeps returning invalid data."""

from __future__ import annotations

import structlog

from src.core.config import FaultConfig
from src.core.types import AlertEvent, AlertKind, FaultState, Reading

logger = structlog.get_logger(__name__)


class FaultMonitor:
    """OK → DEGRADED on the first invalid reading, back to OK on a valid one.

    Staying invalid for ``timeout_ms`` moves to HALTED and yields a single
    SENSOR_FAULT event. HALTED is terminal; only a restart leaves it.
    """

    def __init__(self, config: FaultConfig | None = None) -> None:
        self._config = config or FaultConfig()
        self._state = FaultState.OK
        self._degraded_since: int | None = None

    @property
    def state(self) -> FaultState:
        return self._state

    @property
    def halted(self) -> bool:
        return self._state == FaultState.HALTED

    @property
    def degraded_since(self) -> int | None:
        """Tick timestamp (ms) of the first invalid reading in the current run."""
        return self._degraded_since

    def observe(self, reading: Reading, now_ms: int) -> AlertEvent | None:
        """Feed one reading; returns SENSOR_FAULT on the halting tick only."""
        if self._state == FaultState.HALTED:
            return None

        if reading.valid:
            if self._state == FaultState.DEGRADED:
                logger.info(
                    "sensor_recovered",
                    invalid_for_ms=now_ms - (self._degraded_since or now_ms),
                )
            self._state = FaultState.OK
            self._degraded_since = None
            return None

        if self._state == FaultState.OK or self._degraded_since is None:
            self._state = FaultState.DEGRADED
            self._degraded_since = now_ms
            logger.warning(
                "sensor_reading_invalid",
                raw_distance=reading.raw_distance,
                temperature_tenths=reading.temperature_tenths,
            )
            return None

        if now_ms - self._degraded_since >= self._config.timeout_ms:
            self._state = FaultState.HALTED
            logger.error(
                "sensor_fault_halt",
                invalid_for_ms=now_ms - self._degraded_since,
                timeout_ms=self._config.timeout_ms,
            )
            return AlertEvent(kind=AlertKind.SENSOR_FAULT, level=reading.level)

        return None
