"""Tests for the monitoring stack factory."""

from __future__ import annotations

from src.core.config import Settings
from src.modem.channel import DtrResetLine, RecordingChannel, SerialChannel
from src.monitor.factory import create_dispatcher, create_driver, create_monitor_stack
from src.monitor.loop import MonitorLoop
from src.sensing.simulated import ScriptedSource, SimulatedClock


class TestCreateDriver:
    def test_defaults_to_serial_channel(self) -> None:
        drv = create_driver(Settings())
        assert isinstance(drv.channel, SerialChannel)
        assert drv._reset_line is None

    def test_uses_given_channel(self) -> None:
        ch = RecordingChannel()
        assert create_driver(Settings(), channel=ch).channel is ch

    def test_dtr_reset_line_when_enabled(self) -> None:
        drv = create_driver(Settings(modem={"reset_line_enabled": True}))  # type: ignore[arg-type]
        assert isinstance(drv._reset_line, DtrResetLine)

    def test_no_reset_line_on_non_serial_channel(self) -> None:
        settings = Settings(modem={"reset_line_enabled": True})  # type: ignore[arg-type]
        drv = create_driver(settings, channel=RecordingChannel())
        assert drv._reset_line is None


class TestCreateDispatcher:
    def test_recipients_and_tiers_from_config(self) -> None:
        settings = Settings(
            notify={"recipients": ["+1", "+2"], "locale": "en"},  # type: ignore[arg-type]
            ladder={"polarity": "rising", "thresholds": [10, 20]},  # type: ignore[arg-type]
        )
        disp = create_dispatcher(settings, create_driver(settings, channel=RecordingChannel()))
        assert disp.recipients == ("+1", "+2")
        assert disp._tier_count == 2
        assert disp._locale == "en"


class TestCreateMonitorStack:
    def test_builds_loop(self) -> None:
        ch = RecordingChannel()
        loop = create_monitor_stack(
            Settings(),
            ScriptedSource([100]),
            SimulatedClock(start_minute=0),
            channel=ch,
        )
        assert isinstance(loop, MonitorLoop)
        assert loop.driver.channel is ch
        assert loop.ladder_state.armed == [False, False, False]

    async def test_stack_runs(self) -> None:
        async def no_sleep(_: float) -> None:
            return None

        ch = RecordingChannel()
        settings = Settings(notify={"recipients": ["+1"]})  # type: ignore[arg-type]
        loop = create_monitor_stack(
            settings,
            ScriptedSource([100, 2], samples_per_tick=settings.sensor.sample_count),
            SimulatedClock(start_minute=1),
            channel=ch,
            sleep=no_sleep,
        )
        await loop.run(max_ticks=2)
        assert 'AT+CMGS="+1"' in ch.lines
