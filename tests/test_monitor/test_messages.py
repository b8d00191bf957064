"""Tests for the SMS templates."""

from __future__ import annotations

import pytest

from src.core.types import AlertEvent, AlertKind
from src.monitor.messages import SUPPORTED_LOCALES, format_alert, template_key


class TestGerman:
    def test_raise(self) -> None:
        text = format_alert(AlertEvent(kind=AlertKind.RAISE, tier=0, level=3))
        assert text == "Meldestufe 1 erreicht!!!\nWasserstand: 3 cm"

    def test_raise_most_severe_tier(self) -> None:
        text = format_alert(AlertEvent(kind=AlertKind.RAISE, tier=2, level=1), tier_count=3)
        assert text.startswith("Wir saufen ab!!! Meldestufe 3 erreicht!!!")

    def test_clear(self) -> None:
        text = format_alert(AlertEvent(kind=AlertKind.CLEAR, tier=1, level=5))
        assert text == "Meldestufe 2 aufgehoben!!!\nWasserstand: 5 cm"

    def test_faults(self) -> None:
        sensor = format_alert(AlertEvent(kind=AlertKind.SENSOR_FAULT))
        clock = format_alert(AlertEvent(kind=AlertKind.CLOCK_FAULT))
        assert "Ultraschallsensor" in sensor
        assert "RTC-Modul" in clock

    def test_status(self) -> None:
        assert format_alert(AlertEvent(kind=AlertKind.STATUS, level=87)) == "Wasserstand: 87 cm"


class TestLocales:
    def test_english(self) -> None:
        text = format_alert(AlertEvent(kind=AlertKind.CLEAR, tier=0, level=9), locale="en")
        assert text == "Alert stage 1 lifted.\nWater level: 9 cm"

    def test_every_locale_has_every_template(self) -> None:
        for locale in SUPPORTED_LOCALES:
            for kind in AlertKind:
                event = AlertEvent(kind=kind, tier=0, level=1)
                assert format_alert(event, locale=locale, tier_count=2)

    def test_unknown_locale(self) -> None:
        with pytest.raises(ValueError):
            format_alert(AlertEvent(kind=AlertKind.STATUS, level=1), locale="fr")

    def test_template_count_bounded(self) -> None:
        # RAISE/CLEAR per tier + faults + status stay within fourteen texts.
        keys = {
            template_key(AlertEvent(kind=kind, tier=t), tier_count=3)
            for kind in AlertKind
            for t in range(3)
        }
        assert len(keys) <= 14


class TestEventCodes:
    def test_tier_codes_are_one_based(self) -> None:
        assert AlertEvent(kind=AlertKind.RAISE, tier=0).code == "RAISE_TIER_1"
        assert AlertEvent(kind=AlertKind.CLEAR, tier=2).code == "CLEAR_TIER_3"

    def test_fault_codes(self) -> None:
        assert AlertEvent(kind=AlertKind.SENSOR_FAULT).code == "SENSOR_FAULT"
        assert AlertEvent(kind=AlertKind.CLOCK_FAULT).code == "CLOCK_FAULT"
