#!/usr/bin/env python3
"""Transmitter entrypoint — wires sensor, modem, and monitor loop and runs it.

Exits 0 on a requested shutdown and 1 once the monitor has halted on a
sensor or clock fault, so a supervisor (systemd, watchdog) can restart it.

Usage::

    # Run on hardware with default config
    python scripts/run.py

    # Custom config file
    python scripts/run.py --config config/settings.yaml

    # Dry run: scripted distances, no modem, no delays
    python scripts/run.py --simulate 120,118,2,1,1,0 --fast --log-level DEBUG
"""

from __future__ import annotations

import argparse
import asyncio
import signal
import sys

import structlog

from src.core.config import load_settings
from src.core.logging import setup_logging
from src.core.types import LoopState
from src.modem.channel import DuplexChannel, RecordingChannel
from src.monitor.factory import create_monitor_stack
from src.sensing.serial_source import SerialLineSource, SystemClock
from src.sensing.simulated import ScriptedSource, SimulatedClock
from src.sensing.sources import Clock, MeasurementSource

logger = structlog.get_logger(__name__)


async def _no_sleep(_: float) -> None:
    await asyncio.sleep(0)


def _parse_distances(text: str) -> list[int]:
    try:
        return [int(part) for part in text.split(",") if part.strip()]
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"expected comma-separated integers, got {text!r}"
        ) from None


async def run(args: argparse.Namespace) -> int:
    """Build the stack and run until halted or interrupted."""
    settings = load_settings(args.config)
    setup_logging(level=args.log_level)

    source: MeasurementSource
    clock: Clock
    channel: DuplexChannel | None = None
    if args.simulate:
        source = ScriptedSource(args.simulate, samples_per_tick=settings.sensor.sample_count)
        clock = SimulatedClock(start_minute=0)
        channel = RecordingChannel()
    else:
        source = SerialLineSource(settings.sensor)
        clock = SystemClock()

    monitor = create_monitor_stack(
        settings,
        source,
        clock,
        channel=channel,
        sleep=_no_sleep if args.fast else asyncio.sleep,
    )

    logger.info(
        "transmitter_starting",
        simulate=bool(args.simulate),
        modem_port=None if args.simulate else settings.modem.port,
    )

    task = asyncio.create_task(monitor.run(max_ticks=args.max_ticks))

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, task.cancel)
        except NotImplementedError:
            # Windows: signal handlers not supported on ProactorEventLoop
            pass

    try:
        state = await task
    except asyncio.CancelledError:
        logger.info("shutdown_signal_received", ticks=monitor.ticks)
        return 0
    finally:
        monitor.driver.channel.close()
        if isinstance(source, SerialLineSource):
            source.close()

    if isinstance(channel, RecordingChannel):
        for line in channel.lines:
            logger.debug("simulated_modem_write", line=line)

    if state == LoopState.HALTED:
        logger.error(
            "transmitter_halted",
            reason=monitor.halt_reason.value if monitor.halt_reason else None,
            ticks=monitor.ticks,
        )
        return 1

    logger.info("transmitter_stopped", ticks=monitor.ticks)
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Run the water-level transmitter station.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to settings YAML (default: config/settings.yaml)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level override: DEBUG, INFO, WARNING, ERROR",
    )
    parser.add_argument(
        "--simulate",
        type=_parse_distances,
        default=None,
        metavar="D1,D2,...",
        help="Replay these distances instead of reading the sensor bridge",
    )
    parser.add_argument(
        "--fast",
        action="store_true",
        help="Skip all settling delays (only sensible with --simulate)",
    )
    parser.add_argument(
        "--max-ticks",
        type=int,
        default=None,
        help="Stop after this many ticks",
    )
    args = parser.parse_args()

    code = asyncio.run(run(args))
    sys.exit(code)


if __name__ == "__main__":
    main()
