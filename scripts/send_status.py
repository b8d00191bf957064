#!/usr/bin/env python3
"""Send the current water level to every configured recipient, once.

Usage::

    python scripts/send_status.py
    python scripts/send_status.py --config config/settings.yaml --no-warmup
"""

from __future__ import annotations

import argparse
import asyncio
import sys

import structlog

from src.core.config import load_settings
from src.core.logging import setup_logging
from src.core.types import AlertEvent, AlertKind, SendResult
from src.monitor.factory import create_dispatcher, create_driver
from src.sensing.conditioner import ReadingConditioner
from src.sensing.serial_source import SerialLineSource

logger = structlog.get_logger(__name__)


async def run(args: argparse.Namespace) -> int:
    settings = load_settings(args.config)
    setup_logging(level=args.log_level)

    source = SerialLineSource(settings.sensor)
    try:
        samples = [source.sample_distance() for _ in range(settings.sensor.sample_count)]
        temperature = source.sample_temperature()
    finally:
        source.close()

    reading = ReadingConditioner(settings.sensor).condition(samples, temperature)
    if not reading.valid:
        logger.error("status_reading_invalid", raw_distance=reading.raw_distance)
        return 1

    driver = create_driver(settings)
    dispatcher = create_dispatcher(settings, driver)
    try:
        if not args.no_warmup:
            await driver.warm_up()
        results = await dispatcher.notify(
            AlertEvent(kind=AlertKind.STATUS, level=reading.level),
        )
    finally:
        driver.channel.close()

    sent = sum(1 for r in results if r == SendResult.SENT)
    logger.info("status_sent", water_level=reading.level, sent=sent, recipients=len(results))
    return 0 if sent == len(results) else 1


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Broadcast the current water level by SMS.",
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
        "--no-warmup",
        action="store_true",
        help="Skip the modem warm-up delay (modem already registered)",
    )
    args = parser.parse_args()

    code = asyncio.run(run(args))
    sys.exit(code)


if __name__ == "__main__":
    main()
