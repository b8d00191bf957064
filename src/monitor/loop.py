"""MonitorLoop — samples, evaluates, and reports once per tick until halted."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable

import structlog

from src.alerting.fault_monitor import FaultMonitor
from src.alerting.ladder import LadderState, ThresholdLadder
from src.alerting.scheduler import ReportScheduler, ReportWindowState
from src.core.config import Settings
from src.core.types import (
    AlertEvent,
    AlertKind,
    LoopState,
    Reading,
    SendResult,
    TelemetryRecord,
)
from src.modem.driver import ModemDriver
from src.monitor.dispatcher import NotificationDispatcher
from src.sensing.conditioner import ReadingConditioner
from src.sensing.sources import Clock, MeasurementSource

logger = structlog.get_logger(__name__)

SleepFn = Callable[[float], Awaitable[None]]
MonotonicMsFn = Callable[[], int]


def _monotonic_ms() -> int:
    return int(time.monotonic() * 1000)


class MonitorLoop:
    """Owns the ladder / report-window state and drives one tick at a time.

    Each tick conditions a fresh reading, then runs the threshold ladder,
    the report scheduler, and the fault monitor in that order. Ladder and
    scheduler only see valid readings. A sensor or clock fault notifies,
    then moves the loop to HALTED; a halted loop ignores further ticks.

    Usage::

        loop = MonitorLoop(settings, source, clock, driver, dispatcher)
        state = await loop.run()
        if state == LoopState.HALTED:
            sys.exit(1)  # let the watchdog restart us
    """

    def __init__(
        self,
        settings: Settings,
        source: MeasurementSource,
        clock: Clock,
        driver: ModemDriver,
        dispatcher: NotificationDispatcher,
        sleep: SleepFn = asyncio.sleep,
        monotonic_ms: MonotonicMsFn = _monotonic_ms,
    ) -> None:
        self._settings = settings
        self._source = source
        self._clock = clock
        self._driver = driver
        self._dispatcher = dispatcher
        self._sleep = sleep
        self._monotonic_ms = monotonic_ms

        self._conditioner = ReadingConditioner(settings.sensor)
        self._ladder = ThresholdLadder(settings.ladder)
        self._scheduler = ReportScheduler(settings.report)
        self._fault_monitor = FaultMonitor(settings.fault)

        self._ladder_state: LadderState = self._ladder.new_state()
        self._window_state: ReportWindowState = self._scheduler.new_state()
        self._state = LoopState.RUNNING
        self._halt_reason: AlertKind | None = None
        self._ticks = 0

    # ── Properties ──────────────────────────────────────────────

    @property
    def state(self) -> LoopState:
        return self._state

    @property
    def halted(self) -> bool:
        return self._state == LoopState.HALTED

    @property
    def halt_reason(self) -> AlertKind | None:
        return self._halt_reason

    @property
    def ticks(self) -> int:
        """Ticks actually processed (halted ticks are not counted)."""
        return self._ticks

    @property
    def driver(self) -> ModemDriver:
        return self._driver

    @property
    def ladder_state(self) -> LadderState:
        return self._ladder_state

    @property
    def window_state(self) -> ReportWindowState:
        return self._window_state

    @property
    def fault_monitor(self) -> FaultMonitor:
        return self._fault_monitor

    # ── Lifecycle ───────────────────────────────────────────────

    async def start(self) -> bool:
        """Warm up the modem and check the RTC. Returns False if halted."""
        await self._driver.warm_up()

        if not self._clock.is_functional():
            event = AlertEvent(kind=AlertKind.CLOCK_FAULT)
            logger.error("clock_fault", text=self._dispatcher.render(event))
            await self._dispatcher.notify_primary(event)
            self._halt(AlertKind.CLOCK_FAULT)
            return False

        logger.info(
            "monitor_started",
            thresholds=self._settings.ladder.thresholds,
            polarity=self._settings.ladder.polarity.value,
            recipients=len(self._dispatcher.recipients),
            report_period_minutes=self._settings.report.period_minutes,
        )
        return True

    async def run(self, max_ticks: int | None = None) -> LoopState:
        """Start, then tick every ``tick_interval_secs`` until halted."""
        if not await self.start():
            return self._state

        interval = self._settings.loop.tick_interval_secs
        count = 0
        while not self.halted:
            await self.tick()
            count += 1
            if max_ticks is not None and count >= max_ticks:
                break
            await self._sleep(interval)
        return self._state

    # ── Tick ────────────────────────────────────────────────────

    async def sample(self) -> Reading:
        """Take ``sample_count`` distance pulses and one temperature reading."""
        cfg = self._settings.sensor
        samples: list[int] = []
        for i in range(cfg.sample_count):
            if i:
                await self._sleep(cfg.sample_interval_secs)
            samples.append(self._source.sample_distance())
        temperature = self._source.sample_temperature() if cfg.temperature_enabled else None
        return self._conditioner.condition(samples, temperature)

    async def tick(self, now_ms: int | None = None) -> Reading | None:
        """Process one control-loop tick. Returns the reading, or None if halted."""
        if self.halted:
            return None

        now_ms = self._monotonic_ms() if now_ms is None else now_ms
        reading = await self.sample()
        self._ticks += 1
        logger.debug(
            "reading",
            water_level=reading.level,
            temperature_tenths=reading.temperature_tenths,
            valid=reading.valid,
        )

        if reading.valid:
            event = self._ladder.evaluate(self._ladder_state, reading.level)
            if event is not None:
                await self._handle_alert(event, reading)

            minute = self._clock.minute_of_hour()
            if self._scheduler.tick(self._window_state, minute, now_ms / 1000):
                await self._push(reading)

        fault = self._fault_monitor.observe(reading, now_ms)
        if fault is not None:
            logger.error("sensor_fault", text=self._dispatcher.render(fault))
            await self._dispatcher.notify(fault)
            self._halt(AlertKind.SENSOR_FAULT)

        return reading

    # ── Internal ────────────────────────────────────────────────

    async def _handle_alert(self, event: AlertEvent, reading: Reading) -> None:
        # Local status line, then SMS burst, then an out-of-band push.
        logger.warning(
            "level_alert",
            code=event.code,
            water_level=reading.level,
            text=self._dispatcher.render(event),
        )
        await self._dispatcher.notify(event)
        await self._sleep(self._settings.notify.alert_settle_secs)
        await self._push(reading)

    async def _push(self, reading: Reading) -> SendResult:
        result = await self._driver.telemetry_cycle(
            TelemetryRecord(
                level=reading.level,
                temperature_tenths=reading.temperature_tenths,
            ),
        )
        logger.info("measured_level", water_level=reading.level, push=result.value)
        return result

    def _halt(self, reason: AlertKind) -> None:
        self._state = LoopState.HALTED
        self._halt_reason = reason
        logger.critical("monitor_halted", reason=reason.value, ticks=self._ticks)
