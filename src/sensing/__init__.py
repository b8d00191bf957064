"""Sensing — measurement capabilities and reading conditioning."""

from src.sensing.conditioner import ReadingConditioner
from src.sensing.serial_source import SerialLineSource, SystemClock
from src.sensing.simulated import ScriptedSource, SimulatedClock
from src.sensing.sources import Clock, MeasurementSource

__all__ = [
    "Clock",
    "MeasurementSource",
    "ReadingConditioner",
    "ScriptedSource",
    "SerialLineSource",
    "SimulatedClock",
    "SystemClock",
]
