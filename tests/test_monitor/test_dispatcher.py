"""Tests for NotificationDispatcher — fan-out order, failures, primary-only."""

from __future__ import annotations

from src.core.config import ModemConfig
from src.core.types import AlertEvent, AlertKind, SendResult
from src.modem.channel import RecordingChannel
from src.modem.driver import ModemDriver
from src.monitor.dispatcher import NotificationDispatcher

# ── Helpers ─────────────────────────────────────────────────────


async def _no_sleep(_: float) -> None:
    return None


class FakeDriver(ModemDriver):
    """Records send_text calls; fails for addresses in *failing*."""

    def __init__(self, failing: set[str] | None = None) -> None:
        super().__init__(RecordingChannel(), ModemConfig(), sleep=_no_sleep)
        self.sent: list[tuple[str, str]] = []
        self._failing = failing or set()

    async def send_text(self, address: str, body: str) -> SendResult:
        self.sent.append((address, body))
        if address in self._failing:
            return SendResult.CHANNEL_UNAVAILABLE
        return SendResult.SENT


_RAISE = AlertEvent(kind=AlertKind.RAISE, tier=0, level=3)


# ── Fan-out ─────────────────────────────────────────────────────


class TestNotify:
    async def test_sends_to_every_recipient_in_order(self) -> None:
        drv = FakeDriver()
        disp = NotificationDispatcher(drv, recipients=["+1", "+2", "+3"])
        results = await disp.notify(_RAISE)
        assert [addr for addr, _ in drv.sent] == ["+1", "+2", "+3"]
        assert results == [SendResult.SENT] * 3

    async def test_same_text_for_all(self) -> None:
        drv = FakeDriver()
        disp = NotificationDispatcher(drv, recipients=["+1", "+2"])
        await disp.notify(_RAISE)
        bodies = {body for _, body in drv.sent}
        assert bodies == {"Meldestufe 1 erreicht!!!\nWasserstand: 3 cm"}

    async def test_continues_after_failure(self) -> None:
        drv = FakeDriver(failing={"+2"})
        disp = NotificationDispatcher(drv, recipients=["+1", "+2", "+3"])
        results = await disp.notify(_RAISE)
        assert results == [
            SendResult.SENT,
            SendResult.CHANNEL_UNAVAILABLE,
            SendResult.SENT,
        ]
        assert len(drv.sent) == 3

    async def test_no_recipients(self) -> None:
        drv = FakeDriver()
        disp = NotificationDispatcher(drv, recipients=[])
        assert await disp.notify(_RAISE) == []
        assert drv.sent == []

    async def test_locale_used(self) -> None:
        drv = FakeDriver()
        disp = NotificationDispatcher(drv, recipients=["+1"], locale="en")
        await disp.notify(_RAISE)
        assert drv.sent[0][1].startswith("Alert stage 1 reached!")


class TestNotifyPrimary:
    async def test_only_first_recipient(self) -> None:
        drv = FakeDriver()
        disp = NotificationDispatcher(drv, recipients=["+1", "+2"])
        results = await disp.notify_primary(AlertEvent(kind=AlertKind.CLOCK_FAULT))
        assert [addr for addr, _ in drv.sent] == ["+1"]
        assert results == [SendResult.SENT]

    async def test_primary_without_recipients(self) -> None:
        drv = FakeDriver()
        disp = NotificationDispatcher(drv, recipients=[])
        assert await disp.notify_primary(AlertEvent(kind=AlertKind.CLOCK_FAULT)) == []


class TestThroughRealDriver:
    async def test_writes_one_sms_per_recipient(self) -> None:
        ch = RecordingChannel()
        drv = ModemDriver(ch, ModemConfig(), sleep=_no_sleep)
        disp = NotificationDispatcher(drv, recipients=["+1", "+2"])
        await disp.notify(_RAISE)
        assert ch.writes.count(b"\x1a") == 2
        assert ch.lines.count('AT+CMGS="+1"') == 1
        assert ch.lines.count('AT+CMGS="+2"') == 1

    async def test_dead_channel_still_tries_everyone(self) -> None:
        drv = ModemDriver(RecordingChannel(fail=True), ModemConfig(), sleep=_no_sleep)
        disp = NotificationDispatcher(drv, recipients=["+1", "+2"])
        results = await disp.notify(_RAISE)
        assert results == [SendResult.CHANNEL_UNAVAILABLE] * 2

    async def test_unencodable_number_does_not_stop_fan_out(self) -> None:
        ch = RecordingChannel()
        drv = ModemDriver(ch, ModemConfig(), sleep=_no_sleep)
        disp = NotificationDispatcher(drv, recipients=["+49\xa0151", "+2"])
        results = await disp.notify(_RAISE)
        assert results == [SendResult.CHANNEL_UNAVAILABLE, SendResult.SENT]
        assert 'AT+CMGS="+2"' in ch.lines
        assert ch.writes.count(b"\x1a") == 1
