"""Byte-oriented duplex channel to the modem, plus the hardware reset line."""

from __future__ import annotations

import abc

import serial
import structlog

from src.core.config import ModemConfig
from src.modem.exceptions import ChannelUnavailableError

logger = structlog.get_logger(__name__)


class DuplexChannel(abc.ABC):
    """Fire-and-forget byte channel.

    ``write`` returning normally only means the bytes left the host; there
    is no response guarantee. ``read_available`` exists for diagnostics and
    is never parsed.
    """

    @abc.abstractmethod
    def write(self, data: bytes) -> None:
        """Write raw bytes. Raises ChannelUnavailableError on failure."""

    def read_available(self) -> bytes:
        """Return whatever the modem has echoed back so far."""
        return b""

    def close(self) -> None:
        """Release the underlying port."""


class SerialChannel(DuplexChannel):
    """DuplexChannel over a pyserial port, opened lazily on first write."""

    def __init__(self, config: ModemConfig | None = None) -> None:
        self._config = config or ModemConfig()
        self._port: serial.Serial | None = None

    @property
    def port(self) -> serial.Serial | None:
        return self._port

    def open(self) -> serial.Serial:
        if self._port is not None and self._port.is_open:
            return self._port
        try:
            self._port = serial.Serial(
                self._config.port,
                self._config.baudrate,
                timeout=0,
                write_timeout=1.0,
            )
        except (serial.SerialException, OSError) as exc:
            self._port = None
            raise ChannelUnavailableError(
                f"cannot open {self._config.port}: {exc}"
            ) from exc
        logger.info(
            "modem_port_opened",
            port=self._config.port,
            baudrate=self._config.baudrate,
        )
        return self._port

    def write(self, data: bytes) -> None:
        port = self.open()
        try:
            port.write(data)
            port.flush()
        except (serial.SerialException, OSError) as exc:
            self.close()
            raise ChannelUnavailableError(f"write failed: {exc}") from exc

    def read_available(self) -> bytes:
        if self._port is None or not self._port.is_open:
            return b""
        try:
            waiting = self._port.in_waiting
            return self._port.read(waiting) if waiting else b""
        except (serial.SerialException, OSError):
            logger.warning("modem_read_failed", port=self._config.port)
            return b""

    def close(self) -> None:
        if self._port is not None:
            try:
                self._port.close()
            except (serial.SerialException, OSError):
                logger.warning("modem_port_close_failed", port=self._config.port)
            self._port = None


class RecordingChannel(DuplexChannel):
    """In-memory channel that keeps every write, for dry runs."""

    def __init__(self, fail: bool = False) -> None:
        self.writes: list[bytes] = []
        self.fail = fail

    def write(self, data: bytes) -> None:
        if self.fail:
            raise ChannelUnavailableError("recording channel set to fail")
        self.writes.append(data)

    @property
    def lines(self) -> list[str]:
        """Writes decoded and stripped of line endings."""
        return [w.decode("latin-1").rstrip("\r\n") for w in self.writes]


class ResetLine(abc.ABC):
    """Hardware reset input of the modem."""

    @abc.abstractmethod
    def assert_reset(self) -> None:
        """Hold the modem in reset."""

    @abc.abstractmethod
    def release(self) -> None:
        """Let the modem boot."""


class DtrResetLine(ResetLine):
    """Reset wired to the serial port's DTR output (active high on the modem side)."""

    def __init__(self, channel: SerialChannel) -> None:
        self._channel = channel

    def assert_reset(self) -> None:
        self._set_dtr(True)

    def release(self) -> None:
        self._set_dtr(False)

    def _set_dtr(self, value: bool) -> None:
        port = self._channel.open()
        try:
            port.dtr = value
        except (serial.SerialException, OSError) as exc:
            raise ChannelUnavailableError(f"cannot drive DTR: {exc}") from exc
