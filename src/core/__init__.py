"""Core module — config, types, logging."""

from src.core.config import Settings, get_settings, load_settings, reset_settings
from src.core.logging import setup_logging
from src.core.types import (
    AlertEvent,
    AlertKind,
    FaultState,
    LoopState,
    Polarity,
    Reading,
    SendResult,
    TelemetryRecord,
    Tier,
)

__all__ = [
    "AlertEvent",
    "AlertKind",
    "FaultState",
    "LoopState",
    "Polarity",
    "Reading",
    "SendResult",
    "Settings",
    "TelemetryRecord",
    "Tier",
    "get_settings",
    "load_settings",
    "reset_settings",
    "setup_logging",
]
