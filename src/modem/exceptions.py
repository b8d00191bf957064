"""Modem transport exceptions."""

from __future__ import annotations


class ModemError(Exception):
    """Base exception for modem transport errors."""


class ChannelUnavailableError(ModemError):
    """The serial channel to the modem could not be opened or written."""
