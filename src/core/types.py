"""Domain types shared by the sensing, alerting, and modem subsystems."""

from __future__ import annotations

import time
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class Polarity(StrEnum):
    """Which direction of level change is the dangerous one."""

    RISING = "rising"    # level >= threshold is worse
    FALLING = "falling"  # level <= threshold is worse


class Reading(BaseModel):
    """One conditioned measurement, produced once per control-loop tick."""

    model_config = ConfigDict(frozen=True)

    level: int
    raw_distance: int
    # Tenths of a degree; None when no sensor is fitted or it reports disconnected.
    temperature_tenths: int | None = None
    valid: bool = True


class Tier(BaseModel):
    """One step of the alert ladder."""

    index: int
    threshold: int
    armed: bool = False

    @property
    def stage(self) -> int:
        """1-based stage number used in messages and event codes."""
        return self.index + 1


class AlertKind(StrEnum):
    """Kind of outbound notification."""

    RAISE = "RAISE"
    CLEAR = "CLEAR"
    SENSOR_FAULT = "SENSOR_FAULT"
    CLOCK_FAULT = "CLOCK_FAULT"
    STATUS = "STATUS"


class AlertEvent(BaseModel):
    """Transient event handed from the ladder / fault monitor to the dispatcher."""

    model_config = ConfigDict(frozen=True)

    kind: AlertKind
    tier: int | None = None
    level: int | None = None
    timestamp: float = Field(default_factory=time.time)

    @property
    def code(self) -> str:
        if self.tier is not None:
            return f"{self.kind.value}_TIER_{self.tier + 1}"
        return self.kind.value


class TelemetryRecord(BaseModel):
    """Fields serialised into the telemetry URL."""

    level: int
    temperature_tenths: int | None = None


class SendResult(StrEnum):
    """Outcome of a modem operation.

    SENT only means every command was written to the channel; the modem
    never acknowledges anything we wait for.
    """

    SENT = "SENT"
    CHANNEL_UNAVAILABLE = "CHANNEL_UNAVAILABLE"


class FaultState(StrEnum):
    """Sensor fault monitor state."""

    OK = "OK"
    DEGRADED = "DEGRADED"
    HALTED = "HALTED"


class LoopState(StrEnum):
    """Control loop lifecycle."""

    RUNNING = "RUNNING"
    HALTED = "HALTED"
