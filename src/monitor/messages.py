"""Static SMS templates and the pure function that renders an AlertEvent."""

from __future__ import annotations

from src.core.types import AlertEvent, AlertKind

# Keys: STATUS, RAISE, RAISE_TOP (most severe tier), CLEAR, SENSOR_FAULT, CLOCK_FAULT.
_TEMPLATES: dict[str, dict[str, str]] = {
    "de": {
        "STATUS": "Wasserstand: {level} cm",
        "RAISE": "Meldestufe {stage} erreicht!!!\nWasserstand: {level} cm",
        "RAISE_TOP": (
            "Wir saufen ab!!! Meldestufe {stage} erreicht!!!\n"
            "Wasserstand: {level} cm"
        ),
        "CLEAR": "Meldestufe {stage} aufgehoben!!!\nWasserstand: {level} cm",
        "SENSOR_FAULT": "Fehler mit dem Ultraschallsensor bitte Überprüfen!",
        "CLOCK_FAULT": "Fehler mit dem RTC-Modul bitte überprüfen!",
    },
    "en": {
        "STATUS": "Water level: {level} cm",
        "RAISE": "Alert stage {stage} reached!\nWater level: {level} cm",
        "RAISE_TOP": (
            "Flooding! Alert stage {stage} reached!\n"
            "Water level: {level} cm"
        ),
        "CLEAR": "Alert stage {stage} lifted.\nWater level: {level} cm",
        "SENSOR_FAULT": "Ultrasonic sensor failure, please check!",
        "CLOCK_FAULT": "RTC module failure, please check!",
    },
}

SUPPORTED_LOCALES = tuple(_TEMPLATES)


def template_key(event: AlertEvent, tier_count: int) -> str:
    if event.kind == AlertKind.RAISE and event.tier == tier_count - 1:
        return "RAISE_TOP"
    return event.kind.value


def format_alert(event: AlertEvent, locale: str = "de", tier_count: int = 3) -> str:
    """Render *event* as SMS text in *locale*."""
    try:
        table = _TEMPLATES[locale]
    except KeyError:
        raise ValueError(f"unsupported locale {locale!r}") from None

    stage = event.tier + 1 if event.tier is not None else ""
    level = event.level if event.level is not None else "?"
    return table[template_key(event, tier_count)].format(stage=stage, level=level)
