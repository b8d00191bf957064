"""Tests for FaultMonitor — degrade, recover, and terminal halt."""

from __future__ import annotations

from src.alerting.fault_monitor import FaultMonitor
from src.core.config import FaultConfig
from src.core.types import AlertKind, FaultState, Reading

_VALID = Reading(level=50, raw_distance=50, valid=True)
_INVALID = Reading(level=0, raw_distance=0, valid=False)


def _fm(timeout_ms: int = 1_200_000) -> FaultMonitor:
    return FaultMonitor(FaultConfig(timeout_ms=timeout_ms))


class TestTransitions:
    def test_starts_ok(self) -> None:
        fm = _fm()
        assert fm.state == FaultState.OK
        assert fm.halted is False
        assert fm.degraded_since is None

    def test_first_invalid_degrades(self) -> None:
        fm = _fm()
        assert fm.observe(_INVALID, 5_000) is None
        assert fm.state == FaultState.DEGRADED
        assert fm.degraded_since == 5_000

    def test_valid_recovers(self) -> None:
        fm = _fm()
        fm.observe(_INVALID, 0)
        fm.observe(_VALID, 500)
        assert fm.state == FaultState.OK
        assert fm.degraded_since is None

    def test_recovery_restarts_timer(self) -> None:
        fm = _fm(timeout_ms=1_000)
        fm.observe(_INVALID, 0)
        fm.observe(_VALID, 900)
        fm.observe(_INVALID, 1_000)
        assert fm.observe(_INVALID, 1_900) is None
        assert fm.degraded_since == 1_000
        assert fm.observe(_INVALID, 2_000) is not None


class TestHalt:
    def test_halts_at_first_tick_past_timeout(self) -> None:
        timeout = 1_200_000
        fm = _fm(timeout)
        start = 10_000
        events = []
        halted_at = None
        for now in range(start, start + timeout + 2_000, 500):
            event = fm.observe(_INVALID, now)
            if event is not None:
                events.append(event)
                halted_at = now
        assert len(events) == 1
        assert events[0].kind == AlertKind.SENSOR_FAULT
        assert halted_at == start + timeout
        assert fm.state == FaultState.HALTED

    def test_uneven_ticks_halt_at_first_tick_at_or_after_deadline(self) -> None:
        fm = _fm(timeout_ms=1_000)
        fm.observe(_INVALID, 100)
        assert fm.observe(_INVALID, 700) is None
        assert fm.observe(_INVALID, 1_099) is None
        assert fm.observe(_INVALID, 1_350) is not None

    def test_halted_is_terminal(self) -> None:
        fm = _fm(timeout_ms=10)
        fm.observe(_INVALID, 0)
        fm.observe(_INVALID, 10)
        assert fm.halted
        assert fm.observe(_VALID, 20) is None
        assert fm.observe(_INVALID, 30) is None
        assert fm.state == FaultState.HALTED

    def test_fault_event_carries_level(self) -> None:
        fm = _fm(timeout_ms=10)
        fm.observe(_INVALID, 0)
        event = fm.observe(Reading(level=999, raw_distance=999, valid=False), 10)
        assert event is not None
        assert event.level == 999
        assert event.code == "SENSOR_FAULT"
