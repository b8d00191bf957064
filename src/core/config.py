"""Pydantic settings loaded from YAML configuration."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, SecretStr, field_validator, model_validator

from src.core.types import Polarity

_settings: Settings | None = None

_DEFAULT_CONFIG_PATH = Path("config/settings.yaml")

# International or national number; the modem takes it verbatim inside AT+CMGS="...".
_PHONE_NUMBER = re.compile(r"\+?[0-9]{1,15}")


class SensorConfig(BaseModel):
    """Ranging + temperature sensor conditioning."""

    sample_count: int = Field(default=5, ge=1)
    sample_interval_secs: float = 0.05
    min_dist: int = 0
    max_dist: int = 400
    # When set, level = reference_offset - distance; otherwise the distance is the level.
    reference_offset: int | None = None
    temperature_enabled: bool = False
    # DS18B20 "device disconnected" value (-127 °C) in tenths of a degree.
    disconnected_sentinel: int = -1270
    # Serial bridge (microcontroller printing "<distance>[,<temp_tenths>]" lines).
    bridge_port: str = "/dev/ttyUSB0"
    bridge_baudrate: int = 9600
    bridge_timeout_secs: float = 1.0

    @model_validator(mode="after")
    def _check_domain(self) -> SensorConfig:
        if self.min_dist >= self.max_dist:
            raise ValueError("min_dist must be below max_dist")
        return self


class LadderConfig(BaseModel):
    """Alert tiers, least severe first."""

    polarity: Polarity = Polarity.FALLING
    thresholds: list[int] = [3, 2, 1]

    @model_validator(mode="after")
    def _check_order(self) -> LadderConfig:
        if not self.thresholds:
            raise ValueError("at least one threshold is required")
        pairs = zip(self.thresholds, self.thresholds[1:])
        if self.polarity == Polarity.RISING:
            ordered = all(a < b for a, b in pairs)
        else:
            ordered = all(a > b for a, b in pairs)
        if not ordered:
            raise ValueError(
                f"thresholds must be strictly monotonic in severity order "
                f"for {self.polarity.value} polarity"
            )
        return self


class ReportConfig(BaseModel):
    """Periodic telemetry push."""

    period_minutes: int = Field(default=10, ge=1, le=60)
    # Extra monotonic guard between scheduled pushes; 0 disables it.
    min_gap_secs: float = Field(default=0.0, ge=0.0)


class FaultConfig(BaseModel):
    """Persistent sensor failure escalation."""

    timeout_ms: int = Field(default=1_200_000, gt=0)


class ModemConfig(BaseModel):
    """SIM800-class modem on a serial port."""

    port: str = "/dev/ttyS0"
    baudrate: int = 9600
    apn: str = "internet.t-mobile"
    apn_user: str = "t-mobile"
    apn_password: SecretStr = SecretStr("tm")
    command_delay_secs: float = 0.5
    bearer_open_delay_secs: float = 3.0
    ip_query_delay_secs: float = 2.0
    http_action_delay_secs: float = 5.0
    warmup_secs: float = 10.0
    reset_pulse_secs: float = 0.2
    reset_line_enabled: bool = False
    reset_after_push: bool = False


class TelemetryConfig(BaseModel):
    """Remote server the level is pushed to."""

    host: str = "https://example.org"
    secret: SecretStr = SecretStr("")
    include_temperature: bool = False

    @field_validator("host")
    @classmethod
    def _strip_slash(cls, v: str) -> str:
        return v.rstrip("/")


class NotifyConfig(BaseModel):
    """SMS recipients and message locale."""

    recipients: list[str] = Field(default_factory=list)
    locale: Literal["de", "en"] = "de"
    alert_settle_secs: float = 10.0

    @field_validator("recipients")
    @classmethod
    def _check_numbers(cls, v: list[str]) -> list[str]:
        for number in v:
            if not _PHONE_NUMBER.fullmatch(number):
                raise ValueError(f"recipient {number!r} is not a phone number")
        return v


class LoopConfig(BaseModel):
    """Control loop pacing."""

    tick_interval_secs: float = 0.5


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "json"


class Settings(BaseModel):
    """Root settings container."""

    sensor: SensorConfig = SensorConfig()
    ladder: LadderConfig = LadderConfig()
    report: ReportConfig = ReportConfig()
    fault: FaultConfig = FaultConfig()
    modem: ModemConfig = ModemConfig()
    telemetry: TelemetryConfig = TelemetryConfig()
    notify: NotifyConfig = NotifyConfig()
    loop: LoopConfig = LoopConfig()
    logging: LoggingConfig = LoggingConfig()

    @model_validator(mode="after")
    def _check_temperature_slot(self) -> Settings:
        if self.telemetry.include_temperature and not self.sensor.temperature_enabled:
            raise ValueError(
                "telemetry.include_temperature requires sensor.temperature_enabled"
            )
        return self


def load_settings(path: str | Path | None = None) -> Settings:
    """Load settings from a YAML file and cache globally.

    Args:
        path: Path to YAML config. Defaults to config/settings.yaml.

    Returns:
        Parsed Settings instance.
    """
    global _settings  # noqa: PLW0603

    config_path = Path(path) if path else _DEFAULT_CONFIG_PATH

    data: dict[str, Any] = {}
    if config_path.exists():
        with open(config_path) as f:
            raw = yaml.safe_load(f)
            if isinstance(raw, dict):
                data = raw

    _settings = Settings(**data)
    return _settings


def get_settings() -> Settings:
    """Return the cached settings, loading defaults if not yet loaded."""
    global _settings  # noqa: PLW0603
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    """Reset the cached settings (useful for testing)."""
    global _settings  # noqa: PLW0603
    _settings = None
