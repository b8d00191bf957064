"""Convenience factory for wiring the monitoring stack."""

from __future__ import annotations

import asyncio

from src.core.config import Settings
from src.modem.channel import DtrResetLine, DuplexChannel, ResetLine, SerialChannel
from src.modem.driver import ModemDriver, SleepFn
from src.monitor.dispatcher import NotificationDispatcher
from src.monitor.loop import MonitorLoop
from src.sensing.sources import Clock, MeasurementSource


def create_driver(
    settings: Settings,
    channel: DuplexChannel | None = None,
    sleep: SleepFn = asyncio.sleep,
) -> ModemDriver:
    """Build a modem driver, on the configured serial port unless *channel* is given."""
    if channel is None:
        channel = SerialChannel(settings.modem)

    reset_line: ResetLine | None = None
    if settings.modem.reset_line_enabled and isinstance(channel, SerialChannel):
        reset_line = DtrResetLine(channel)

    return ModemDriver(
        channel,
        settings.modem,
        settings.telemetry,
        reset_line=reset_line,
        sleep=sleep,
    )


def create_dispatcher(settings: Settings, driver: ModemDriver) -> NotificationDispatcher:
    return NotificationDispatcher(
        driver,
        recipients=settings.notify.recipients,
        locale=settings.notify.locale,
        tier_count=len(settings.ladder.thresholds),
    )


def create_monitor_stack(
    settings: Settings,
    source: MeasurementSource,
    clock: Clock,
    channel: DuplexChannel | None = None,
    sleep: SleepFn = asyncio.sleep,
) -> MonitorLoop:
    """Build driver + dispatcher + loop from config.

    Returns:
        A MonitorLoop ready for ``run()``.
    """
    driver = create_driver(settings, channel=channel, sleep=sleep)
    dispatcher = create_dispatcher(settings, driver)
    return MonitorLoop(
        settings,
        source,
        clock,
        driver,
        dispatcher,
        sleep=sleep,
    )
