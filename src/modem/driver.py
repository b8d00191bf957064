"""ModemDriver — fixed, delay-gated AT command sequences.

The modem's replies are never waited for or parsed. Each command is
followed by a settling delay tuned on real hardware, and correctness rests
on those delays. Every operation reports only whether all of its commands
were written (``SendResult.SENT``) or the channel failed part way
(``SendResult.CHANNEL_UNAVAILABLE``).

Usage::

    driver = ModemDriver(SerialChannel(cfg.modem), cfg.modem, cfg.telemetry)
    await driver.warm_up()
    await driver.send_text("+4915100000000", "Meldestufe 1 erreicht!!!")
    await driver.telemetry_cycle(TelemetryRecord(level=3))
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass

import structlog

from src.core.config import ModemConfig, TelemetryConfig
from src.core.types import SendResult, TelemetryRecord
from src.modem import commands
from src.modem.channel import DuplexChannel, ResetLine
from src.modem.exceptions import ModemError

logger = structlog.get_logger(__name__)

SleepFn = Callable[[float], Awaitable[None]]

_EOL = b"\r\n"


@dataclass(frozen=True)
class _Step:
    data: bytes | str
    delay: float
    label: str

    def encode(self) -> bytes:
        if isinstance(self.data, bytes):
            return self.data
        return self.data.encode("ascii") + _EOL


class ModemDriver:
    """Sends SMS and HTTP(S) GET telemetry through a SIM800-class modem."""

    def __init__(
        self,
        channel: DuplexChannel,
        config: ModemConfig | None = None,
        telemetry: TelemetryConfig | None = None,
        reset_line: ResetLine | None = None,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        self._channel = channel
        self._config = config or ModemConfig()
        self._telemetry = telemetry or TelemetryConfig()
        self._reset_line = reset_line
        self._sleep = sleep

    @property
    def channel(self) -> DuplexChannel:
        return self._channel

    # ── Step construction ───────────────────────────────────────

    def _line(self, command: str, delay: float | None = None, label: str | None = None) -> _Step:
        return _Step(
            data=command,
            delay=self._config.command_delay_secs if delay is None else delay,
            label=label or command,
        )

    async def _run(self, operation: str, steps: Sequence[_Step]) -> SendResult:
        for step in steps:
            try:
                data = step.encode()
            except UnicodeEncodeError:
                logger.exception(
                    "modem_command_unencodable",
                    operation=operation,
                    command=step.label,
                )
                return SendResult.CHANNEL_UNAVAILABLE
            try:
                self._channel.write(data)
            except ModemError:
                logger.exception(
                    "modem_channel_unavailable",
                    operation=operation,
                    command=step.label,
                )
                return SendResult.CHANNEL_UNAVAILABLE
            logger.debug("modem_command", operation=operation, command=step.label)
            await self._sleep(step.delay)
            echoed = self._channel.read_available()
            if echoed:
                logger.debug(
                    "modem_output",
                    operation=operation,
                    text=echoed.decode("latin-1", errors="replace").strip(),
                )
        return SendResult.SENT

    # ── Operations ──────────────────────────────────────────────

    async def warm_up(self) -> None:
        """Give a freshly powered modem time to register on the network."""
        logger.info("modem_warm_up", secs=self._config.warmup_secs)
        await self._sleep(self._config.warmup_secs)

    async def send_text(self, address: str, body: str) -> SendResult:
        """Send one SMS in text mode."""
        steps = [
            self._line(commands.TEXT_MODE),
            self._line(commands.sms_recipient(address)),
            _Step(
                data=body.encode("latin-1", errors="replace"),
                delay=self._config.command_delay_secs,
                label="<sms body>",
            ),
            _Step(
                data=commands.CTRL_Z,
                delay=self._config.command_delay_secs,
                label="<ctrl-z>",
            ),
        ]
        result = await self._run("send_text", steps)
        logger.info("sms_sent", address=address, result=result.value)
        return result

    async def begin_session(self) -> SendResult:
        """Open the GPRS bearer and initialise HTTP with TLS."""
        cfg = self._config
        steps = [
            self._line(commands.BEARER_CONTYPE),
            self._line(
                commands.apn_credentials(
                    cfg.apn, cfg.apn_user, cfg.apn_password.get_secret_value(),
                ),
                label=commands.apn_credentials(cfg.apn, cfg.apn_user, "***"),
            ),
            self._line(commands.BEARER_OPEN, delay=cfg.bearer_open_delay_secs),
            self._line(commands.BEARER_QUERY, delay=cfg.ip_query_delay_secs),
            self._line(commands.HTTP_INIT),
            self._line(commands.HTTP_SSL),
            self._line(commands.HTTP_CID),
        ]
        return await self._run("begin_session", steps)

    async def push_telemetry(self, record: TelemetryRecord) -> SendResult:
        """Submit the telemetry URL and fire the GET request."""
        tele = self._telemetry
        url = commands.telemetry_url(
            tele.host,
            tele.secret.get_secret_value(),
            record,
            include_temperature=tele.include_temperature,
        )
        redacted = commands.telemetry_url(
            tele.host, "***", record, include_temperature=tele.include_temperature,
        )
        steps = [
            self._line(commands.http_url(url), label=commands.http_url(redacted)),
            self._line(commands.HTTP_GET, delay=self._config.http_action_delay_secs),
        ]
        return await self._run("push_telemetry", steps)

    async def end_session(self) -> SendResult:
        """Terminate HTTP and close the GPRS bearer."""
        steps = [
            self._line(commands.HTTP_TERM),
            self._line(commands.BEARER_CLOSE),
        ]
        return await self._run("end_session", steps)

    async def reset(self) -> SendResult:
        """Pulse the reset line (when wired) and wait for the modem to boot."""
        if self._reset_line is not None:
            try:
                self._reset_line.assert_reset()
                await self._sleep(self._config.reset_pulse_secs)
                self._reset_line.release()
            except ModemError:
                logger.exception("modem_reset_failed")
                return SendResult.CHANNEL_UNAVAILABLE
            logger.info("modem_reset_pulsed", pulse_secs=self._config.reset_pulse_secs)
        await self.warm_up()
        return SendResult.SENT

    async def telemetry_cycle(self, record: TelemetryRecord) -> SendResult:
        """One full session: open, push, close, and optionally reset."""
        logger.info(
            "telemetry_push_started",
            water_level=record.level,
            temperature_tenths=record.temperature_tenths,
        )
        result = await self.begin_session()
        if result == SendResult.SENT:
            result = await self.push_telemetry(record)
        if result == SendResult.SENT:
            result = await self.end_session()
        if result == SendResult.SENT and self._config.reset_after_push:
            result = await self.reset()
        logger.info("telemetry_push_finished", water_level=record.level, result=result.value)
        return result
