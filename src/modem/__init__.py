"""Modem transport — serial channel, AT command sequences, and the driver."""

from src.modem.channel import (
    DtrResetLine,
    DuplexChannel,
    RecordingChannel,
    ResetLine,
    SerialChannel,
)
from src.modem.driver import ModemDriver
from src.modem.exceptions import ChannelUnavailableError, ModemError

__all__ = [
    "ChannelUnavailableError",
    "DtrResetLine",
    "DuplexChannel",
    "ModemDriver",
    "ModemError",
    "RecordingChannel",
    "ResetLine",
    "SerialChannel",
]
